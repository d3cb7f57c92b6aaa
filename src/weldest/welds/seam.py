"""
Shell seam (V-groove) estimates shared by long seams and circ seams.

Seams are butt welds between shell plates, welded from both sides:

- Double vee: the bevel depth is split at ``split_ratio`` percent into an
  inside and an outside V, each with half of the root-face land.
- Single vee: one V through the whole bevel depth from the inside. The
  second side gets a back weld after back milling, of area
  0.5 * (root_gap + 6) * min(5, root_face + 2).

The second side is a sub-arc weld when the outside process is SAW, or when
the plate is at least 12 mm thick and the process is not a manual one
(GTAW/SMAW). Otherwise it is booked as a manual weld.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

from ..engine.activity_codes import ActivityCodeBreakdown, ActivityCodeMap
from ..engine.errors import InvalidConfiguration
from ..engine.geometry import (
    GrooveSection,
    JointGeometry,
    require_bevel_angle,
    require_groove_depth,
    require_non_negative,
    require_split_ratio,
)
from ..engine.item import WeldItem, coerce_record
from ..engine.processes import (
    DEFAULT_SEAM_LAYERS,
    ProcessLayer,
    WeldProcess,
    normalize_layers,
    require_welding_process,
)
from ..engine.settings import DEFAULT_SETTINGS, OperatorFactors, WeldSettings, operator_factor_band, speed_band
from ..engine.timing import ActivityTimes, RegionEstimate, estimate_region
from ..engine.zones import GrooveZone, groove_zones, zone_hours

BACK_WELD_EXTRA_WIDTH = 6.0  # mm wider than the root gap
BACK_WELD_MAX_DEPTH = 5.0  # mm
BACK_WELD_EXTRA_DEPTH = 2.0  # mm below the root face
SUB_ARC_MIN_THICKNESS = 12.0  # mm
MANUAL_PROCESSES = frozenset({WeldProcess.GTAW, WeldProcess.SMAW})

# =============================================================================
# INPUTS
# =============================================================================


class SeamJointType(str, Enum):
    DOUBLE_VEE = "doublevee"
    SINGLE_VEE = "singlevee"


@dataclass(frozen=True)
class SeamGeometry(JointGeometry, ABC):
    """
    Seam joint dimensions common to long and circ seams (mm, degrees).

    Subclasses add the field that fixes the weld length and implement
    ``resolved_length``.
    """

    shell_thickness: float = 20.0
    joint_type: SeamJointType = SeamJointType.DOUBLE_VEE
    inside_bevel_angle: float = 30.0
    outside_bevel_angle: float = 30.0
    root_gap: float = 3.0
    root_face: float = 2.0
    split_ratio: float = 60.0

    def __post_init__(self):
        if not isinstance(self.joint_type, SeamJointType):
            try:
                joint_type = SeamJointType(str(self.joint_type).strip().lower())
            except ValueError:
                raise InvalidConfiguration(
                    f"Unknown seam joint type {self.joint_type!r}", field="joint_type"
                ) from None
            object.__setattr__(self, "joint_type", joint_type)

    @abstractmethod
    def resolved_length(self) -> float:
        """Validated weld length (mm)."""


def back_weld_area(root_gap: float, root_face: float) -> float:
    """Cross-section of the single-vee back weld (roughly triangular)."""
    depth = min(BACK_WELD_MAX_DEPTH, root_face + BACK_WELD_EXTRA_DEPTH)
    return 0.5 * (root_gap + BACK_WELD_EXTRA_WIDTH) * depth


def is_sub_arc(process: WeldProcess, thickness: float) -> bool:
    """Whether the second-side weld is booked as sub-arc rather than manual."""
    if process is WeldProcess.SAW:
        return True
    return thickness >= SUB_ARC_MIN_THICKNESS and process not in MANUAL_PROCESSES


# =============================================================================
# RESOLVED GEOMETRY
# =============================================================================


@dataclass(frozen=True)
class SeamGrooves:
    """Validated seam geometry: weld length, inside V and second-side area."""

    weld_length: float
    thickness: float
    inside: GrooveSection
    outside: GrooveSection | None
    outside_area: float


def resolve_seam_geometry(geometry: SeamGeometry) -> SeamGrooves:
    """
    Validate a seam geometry and derive its grooves.

    Raises:
        InvalidGeometry: For negative dimensions, angles outside (0, 90),
            a split ratio outside [0, 100] or no room above the root face
        ArithmeticDegenerate: For a zero weld length or diameter
    """
    weld_length = geometry.resolved_length()
    root_gap = require_non_negative(geometry.root_gap, "root_gap")
    root_face = require_non_negative(geometry.root_face, "root_face")
    split = require_split_ratio(geometry.split_ratio)
    depth = require_groove_depth(geometry.shell_thickness, root_face)
    inside_angle = require_bevel_angle(geometry.inside_bevel_angle, "inside_bevel_angle")

    if geometry.joint_type is SeamJointType.DOUBLE_VEE:
        outside_angle = require_bevel_angle(geometry.outside_bevel_angle, "outside_bevel_angle")
        inside_share = split / 100
        inside = GrooveSection(depth * inside_share, inside_angle, root_gap, root_face / 2)
        outside = GrooveSection(depth * (1 - inside_share), outside_angle, root_gap, root_face / 2)
        outside_area = outside.area
    else:
        inside = GrooveSection(depth, inside_angle, root_gap, root_face)
        outside = None
        outside_area = back_weld_area(root_gap, root_face)

    return SeamGrooves(
        weld_length=weld_length,
        thickness=float(geometry.shell_thickness),
        inside=inside,
        outside=outside,
        outside_area=outside_area,
    )


# =============================================================================
# RESULTS
# =============================================================================


@dataclass(frozen=True)
class SeamVolumes:
    inside: float
    outside: float

    @property
    def total(self) -> float:
        return self.inside + self.outside


@dataclass(frozen=True)
class SeamPasses:
    zone_passes: tuple[int, ...]
    inside: int
    outside: int

    @property
    def total(self) -> int:
        return self.inside + self.outside


@dataclass(frozen=True)
class SeamTimes:
    """Labor hours for one seam. ``activities`` is the fixed allowance sum."""

    inside: float
    outside: float
    activities: float

    @property
    def weld(self) -> float:
        return self.inside + self.outside

    @property
    def total(self) -> float:
        return self.weld + self.activities


@dataclass(frozen=True)
class SeamResults:
    """Per-weld results for one long or circ seam."""

    weld_length: float
    volumes: SeamVolumes
    passes: SeamPasses
    times: SeamTimes
    zones: tuple[GrooveZone, ...]
    outside: RegionEstimate
    second_side_sub_arc: bool
    speed_band: str
    factor_band: str
    operator_factors: OperatorFactors


# =============================================================================
# CALCULATION
# =============================================================================


def calculate_seam(
    geometry: SeamGeometry,
    inside_layers: Iterable[ProcessLayer] = DEFAULT_SEAM_LAYERS,
    outside_process: WeldProcess | str = WeldProcess.SAW,
    activity_times: ActivityTimes | None = None,
    settings: WeldSettings = DEFAULT_SETTINGS,
) -> SeamResults:
    """
    Estimate volumes, passes and hours for one seam weld.

    Args:
        geometry: LongSeamGeometry or CircSeamGeometry
        inside_layers: Process layers for the first-side groove (any order)
        outside_process: Process for the second side
        activity_times: Fixed allowances, summed into ``times.activities``
        settings: Bead sizes, travel speeds and operator factors

    Returns:
        SeamResults for a single weld
    """
    grooves = resolve_seam_geometry(geometry)
    layers = normalize_layers(inside_layers)
    outside_process = require_welding_process(outside_process, "outside_process")
    activities = activity_times.total if activity_times is not None else 0.0

    length = grooves.weld_length
    thickness = grooves.thickness

    zones = groove_zones(grooves.inside, layers, length, thickness, settings, "inside")
    outside = estimate_region(grooves.outside_area * length, outside_process, length, thickness, settings, "outside")

    zone_passes = tuple(zone.passes for zone in zones)
    return SeamResults(
        weld_length=length,
        volumes=SeamVolumes(inside=grooves.inside.area * length, outside=outside.volume),
        passes=SeamPasses(zone_passes=zone_passes, inside=sum(zone_passes), outside=outside.passes),
        times=SeamTimes(inside=zone_hours(zones), outside=outside.hours, activities=activities),
        zones=zones,
        outside=outside,
        second_side_sub_arc=is_sub_arc(outside_process, thickness),
        speed_band=speed_band(thickness),
        factor_band=operator_factor_band(thickness),
        operator_factors=settings.factors_for(thickness),
    )


def seam_time_sources(activity_times: ActivityTimes, results: SeamResults) -> dict[str, float]:
    """
    Flat time sources for a seam's activity code map.

    The fixed ``weld_2nd_side`` allowance joins the computed second-side
    hours under either ``second_side_sub_arc`` or ``second_side_manual``;
    the other one is zero.
    """
    sources = activity_times.as_dict()
    second_side = math.fsum((sources.pop("weld_2nd_side"), results.times.outside))
    sources["inside_arc"] = results.times.inside
    sources["second_side_sub_arc"] = second_side if results.second_side_sub_arc else 0.0
    sources["second_side_manual"] = 0.0 if results.second_side_sub_arc else second_side
    return sources


# =============================================================================
# ITEM
# =============================================================================


@dataclass(eq=False)
class SeamItem(WeldItem):
    """
    Base for seam rows. Subclasses declare ``geometry`` and ``activity_times``
    fields and the matching record types and activity code map.
    """

    geometry_type: ClassVar[type] = SeamGeometry
    times_type: ClassVar[type] = ActivityTimes
    code_map: ClassVar[ActivityCodeMap | None] = None

    inside_layers: tuple[ProcessLayer, ...] = DEFAULT_SEAM_LAYERS
    outside_process: WeldProcess = WeldProcess.SAW

    def _normalize(self) -> None:
        super()._normalize()
        self.geometry = coerce_record(self.geometry, self.geometry_type, "geometry")
        self.inside_layers = normalize_layers(self.inside_layers)
        self.outside_process = require_welding_process(self.outside_process, "outside_process")
        self.activity_times = coerce_record(self.activity_times, self.times_type, "activity_times")

    def calculate(self) -> SeamResults:
        return calculate_seam(
            self.geometry,
            self.inside_layers,
            self.outside_process,
            self.activity_times,
            self.settings,
        )

    def calculate_activity_codes(self, results: Any) -> ActivityCodeBreakdown:
        return self.code_map.apply(seam_time_sources(self.activity_times, results))

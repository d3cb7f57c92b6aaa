"""
Nozzle-to-shell weld estimate.

A set-in nozzle is welded with a bevelled groove through the shell plus a
fillet at the nozzle/shell corner:

    Double bevel                    Single bevel

      \\  outside  /                   \\  groove  /
       \\_________/  <- split           \\        /
       /         \\                      \\______/
      /  inside   \\                     |  rf  |
     /_____ rf ____\\

The bevel depth (shell thickness - root face) is split at ``split_ratio``
percent into an inside section (inside bevel angle) and an outside section
(outside bevel angle). The root-face land is shared half and half. A single
bevel has one section at ``single_bevel_angle`` and no outside weld.

The inside groove is divided into zones, one per process layer width band;
each zone is welded with its layer's process. The outside groove and the
fillet use one process each.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from ..engine.activity_codes import ActivityCodeBreakdown, ActivityCodeMap, ActivityCodeRule
from ..engine.errors import InvalidConfiguration
from ..engine.geometry import (
    GrooveSection,
    JointGeometry,
    circumference,
    fillet_area,
    require_bevel_angle,
    require_groove_depth,
    require_length,
    require_non_negative,
    require_split_ratio,
)
from ..engine.item import WeldItem, coerce_record
from ..engine.processes import (
    DEFAULT_NOZZLE_LAYERS,
    ProcessLayer,
    WeldProcess,
    normalize_layers,
    require_welding_process,
)
from ..engine.settings import DEFAULT_SETTINGS, OperatorFactors, WeldSettings, operator_factor_band, speed_band
from ..engine.timing import ActivityTimes, RegionEstimate, estimate_region
from ..engine.zones import GrooveZone, groove_zones, zone_hours

# =============================================================================
# INPUTS
# =============================================================================


class NozzleJointType(str, Enum):
    DOUBLE_BEVEL = "doublebevel"
    SINGLE_BEVEL = "singlebevel"


@dataclass(frozen=True)
class NozzleGeometry(JointGeometry):
    """
    Nozzle weld joint dimensions (mm, degrees).

    Attributes:
        nozzle_od: Nozzle outside diameter; sets the weld length
        shell_thickness: Shell plate thickness
        joint_type: Double or single bevel
        root_gap: Gap at the root
        root_face: Root-face land height
        fillet_throat: Throat of the corner fillet
        inside_bevel_angle: Inside bevel angle (double bevel)
        outside_bevel_angle: Outside bevel angle (double bevel)
        split_ratio: Percent of the bevel depth welded from the inside
        single_bevel_angle: Bevel angle for a single-bevel joint
    """

    nozzle_od: float = 300.0
    shell_thickness: float = 25.0
    joint_type: NozzleJointType = NozzleJointType.DOUBLE_BEVEL
    root_gap: float = 3.0
    root_face: float = 2.0
    fillet_throat: float = 6.0
    inside_bevel_angle: float = 35.0
    outside_bevel_angle: float = 15.0
    split_ratio: float = 70.0
    single_bevel_angle: float = 35.0

    def __post_init__(self):
        if not isinstance(self.joint_type, NozzleJointType):
            try:
                joint_type = NozzleJointType(str(self.joint_type).strip().lower())
            except ValueError:
                raise InvalidConfiguration(
                    f"Unknown nozzle joint type {self.joint_type!r}", field="joint_type"
                ) from None
            object.__setattr__(self, "joint_type", joint_type)


@dataclass(frozen=True)
class NozzleActivityTimes(ActivityTimes):
    """Fixed manual allowances for one nozzle (hours)."""

    mark_position: float = 0.25
    cut_and_bevel: float = 1.0
    grind_bevel_clean: float = 0.5
    fit_nozzle: float = 1.0
    preheat_1: float = 0.5
    weld_1st_side: float = 0.0
    grind_1st_side: float = 0.5
    back_gouge: float = 0.5
    preheat_2: float = 0.25
    weld_2nd_side: float = 0.0
    grind_2nd_side: float = 0.5
    fillet_weld: float = 0.0
    nde: float = 1.0


# =============================================================================
# RESOLVED GEOMETRY
# =============================================================================


@dataclass(frozen=True)
class NozzleGrooves:
    """Validated nozzle geometry reduced to weld length and groove sections."""

    circumference: float
    thickness: float
    inside: GrooveSection
    outside: GrooveSection | None
    fillet_throat: float

    @property
    def fillet_area(self) -> float:
        return fillet_area(self.fillet_throat)


def resolve_nozzle_geometry(geometry: NozzleGeometry) -> NozzleGrooves:
    """
    Validate a nozzle geometry and derive its groove sections.

    Raises:
        InvalidGeometry: For negative dimensions, angles outside (0, 90),
            a split ratio outside [0, 100] or no room above the root face
        ArithmeticDegenerate: For a zero nozzle OD
    """
    od = require_length(geometry.nozzle_od, "nozzle_od")
    root_gap = require_non_negative(geometry.root_gap, "root_gap")
    root_face = require_non_negative(geometry.root_face, "root_face")
    throat = require_non_negative(geometry.fillet_throat, "fillet_throat")
    split = require_split_ratio(geometry.split_ratio)
    depth = require_groove_depth(geometry.shell_thickness, root_face)

    if geometry.joint_type is NozzleJointType.DOUBLE_BEVEL:
        inside_angle = require_bevel_angle(geometry.inside_bevel_angle, "inside_bevel_angle")
        outside_angle = require_bevel_angle(geometry.outside_bevel_angle, "outside_bevel_angle")
        inside_share = split / 100
        inside = GrooveSection(depth * inside_share, inside_angle, root_gap, root_face / 2)
        outside = GrooveSection(depth * (1 - inside_share), outside_angle, root_gap, root_face / 2)
    else:
        angle = require_bevel_angle(geometry.single_bevel_angle, "single_bevel_angle")
        inside = GrooveSection(depth, angle, root_gap, root_face)
        outside = None

    return NozzleGrooves(
        circumference=circumference(od),
        thickness=float(geometry.shell_thickness),
        inside=inside,
        outside=outside,
        fillet_throat=throat,
    )


# =============================================================================
# RESULTS
# =============================================================================


@dataclass(frozen=True)
class NozzleVolumes:
    inside: float
    outside: float
    fillet: float

    @property
    def total(self) -> float:
        return self.inside + self.outside + self.fillet


@dataclass(frozen=True)
class NozzlePasses:
    zone_passes: tuple[int, ...]
    inside: int
    outside: int
    fillet: int

    @property
    def zone1(self) -> int:
        return self._zone(0)

    @property
    def zone2(self) -> int:
        return self._zone(1)

    @property
    def zone3(self) -> int:
        return self._zone(2)

    def _zone(self, index: int) -> int:
        return self.zone_passes[index] if index < len(self.zone_passes) else 0

    @property
    def total(self) -> int:
        return self.inside + self.outside + self.fillet


@dataclass(frozen=True)
class NozzleTimes:
    """Labor hours for one nozzle. ``activities`` is the fixed allowance sum."""

    inside: float
    outside: float
    fillet: float
    activities: float

    @property
    def weld(self) -> float:
        return self.inside + self.outside + self.fillet

    @property
    def total(self) -> float:
        return self.weld + self.activities


@dataclass(frozen=True)
class NozzleCalculationResults:
    """Per-weld results for one nozzle (never scaled by quantity)."""

    circumference: float
    volumes: NozzleVolumes
    passes: NozzlePasses
    times: NozzleTimes
    zones: tuple[GrooveZone, ...]
    outside: RegionEstimate
    fillet: RegionEstimate
    speed_band: str
    factor_band: str
    operator_factors: OperatorFactors


# =============================================================================
# CALCULATION
# =============================================================================


def calculate_nozzle(
    geometry: NozzleGeometry,
    inside_layers: Iterable[ProcessLayer] = DEFAULT_NOZZLE_LAYERS,
    outside_process: WeldProcess | str = WeldProcess.FCAW,
    fillet_process: WeldProcess | str = WeldProcess.FCAW,
    activity_times: NozzleActivityTimes | None = None,
    settings: WeldSettings = DEFAULT_SETTINGS,
) -> NozzleCalculationResults:
    """
    Estimate volumes, passes and hours for one nozzle weld.

    Args:
        geometry: Joint dimensions
        inside_layers: Process layers for the inside groove (any order)
        outside_process: Process for the outside groove
        fillet_process: Process for the corner fillet
        activity_times: Fixed allowances (defaults if None)
        settings: Bead sizes, travel speeds and operator factors

    Returns:
        NozzleCalculationResults for a single weld

    Raises:
        InvalidGeometry: If the geometry is impossible
        InvalidConfiguration: If the process plan or times are malformed
        ArithmeticDegenerate: If the nozzle OD is zero
    """
    # Validate everything before computing anything
    grooves = resolve_nozzle_geometry(geometry)
    layers = normalize_layers(inside_layers)
    outside_process = require_welding_process(outside_process, "outside_process")
    fillet_process = require_welding_process(fillet_process, "fillet_process")
    if activity_times is None:
        activity_times = NozzleActivityTimes()

    circ = grooves.circumference
    thickness = grooves.thickness

    zones = groove_zones(grooves.inside, layers, circ, thickness, settings, "inside")
    inside_volume = circ * grooves.inside.area
    outside_volume = circ * grooves.outside.area if grooves.outside is not None else 0.0
    fillet_volume = circ * grooves.fillet_area

    outside = estimate_region(outside_volume, outside_process, circ, thickness, settings, "outside")
    fillet = estimate_region(fillet_volume, fillet_process, circ, thickness, settings, "inside")

    zone_passes = tuple(zone.passes for zone in zones)
    return NozzleCalculationResults(
        circumference=circ,
        volumes=NozzleVolumes(inside=inside_volume, outside=outside_volume, fillet=fillet_volume),
        passes=NozzlePasses(
            zone_passes=zone_passes,
            inside=sum(zone_passes),
            outside=outside.passes,
            fillet=fillet.passes,
        ),
        times=NozzleTimes(
            inside=zone_hours(zones),
            outside=outside.hours,
            fillet=fillet.hours,
            activities=activity_times.total,
        ),
        zones=zones,
        outside=outside,
        fillet=fillet,
        speed_band=speed_band(thickness),
        factor_band=operator_factor_band(thickness),
        operator_factors=settings.factors_for(thickness),
    )


# =============================================================================
# ACTIVITY CODES
# =============================================================================

NOZZLE_ACTIVITY_CODES = ActivityCodeMap(
    [
        ActivityCodeRule("CUTNOZZ", ("mark_position", "cut_and_bevel", "grind_bevel_clean"), "Cut / bevel nozzle"),
        ActivityCodeRule("FNOZZ", ("fit_nozzle",), "Fit nozzle"),
        ActivityCodeRule("PREHEAT", ("preheat_1", "preheat_2"), "Preheat"),
        ActivityCodeRule(
            "WNOZZ",
            ("weld_1st_side", "weld_2nd_side", "fillet_weld", "inside_arc", "outside_arc", "fillet_arc"),
            "Weld nozzle",
        ),
        ActivityCodeRule("BACGRI", ("back_gouge",), "Back-gouge / grind"),
        ActivityCodeRule("MATCUT", ("grind_1st_side", "grind_2nd_side"), "Material cut"),
        ActivityCodeRule("NDE", ("nde",), "NDE"),
    ]
)


def nozzle_activity_codes(
    activity_times: NozzleActivityTimes, results: NozzleCalculationResults
) -> ActivityCodeBreakdown:
    """Redistribute nozzle times into the seven nozzle activity codes."""
    sources = activity_times.as_dict()
    sources.update(
        inside_arc=results.times.inside,
        outside_arc=results.times.outside,
        fillet_arc=results.times.fillet,
    )
    return NOZZLE_ACTIVITY_CODES.apply(sources)


# =============================================================================
# ITEM
# =============================================================================


@dataclass(eq=False)
class NozzleItem(WeldItem):
    """
    A nozzle weld row: inputs plus cached results and activity codes.

    Attributes:
        geometry: Joint dimensions
        inside_layers: Inside groove process plan (stored sorted)
        outside_process: Outside groove process
        fillet_process: Fillet process
        activity_times: Fixed allowances
    """

    module_id = "nozzles"
    module_name = "Nozzles"

    geometry: NozzleGeometry = field(default_factory=NozzleGeometry)
    inside_layers: tuple[ProcessLayer, ...] = DEFAULT_NOZZLE_LAYERS
    outside_process: WeldProcess = WeldProcess.FCAW
    fillet_process: WeldProcess = WeldProcess.FCAW
    activity_times: NozzleActivityTimes = field(default_factory=NozzleActivityTimes)

    def _normalize(self) -> None:
        super()._normalize()
        self.geometry = coerce_record(self.geometry, NozzleGeometry, "geometry")
        self.inside_layers = normalize_layers(self.inside_layers)
        self.outside_process = require_welding_process(self.outside_process, "outside_process")
        self.fillet_process = require_welding_process(self.fillet_process, "fillet_process")
        self.activity_times = coerce_record(self.activity_times, NozzleActivityTimes, "activity_times")

    def calculate(self) -> NozzleCalculationResults:
        return calculate_nozzle(
            self.geometry,
            self.inside_layers,
            self.outside_process,
            self.fillet_process,
            self.activity_times,
            self.settings,
        )

    def calculate_activity_codes(self, results: NozzleCalculationResults) -> ActivityCodeBreakdown:
        return nozzle_activity_codes(self.activity_times, results)

"""
Pipe butt joint estimate.

Pipe joints are picked by size and schedule; the wall and OD come from the
ASME B36.10M table, and the weld preparation, processes and fixed times
come from a preset for that size/schedule (or the default preset). Any
preset value except the pipe itself can be overridden per item.

The joint is a single V through the wall:

    root  = root_gap * root_face * circumference      (root process)
    cap   = one fill-bead pass                         (cap process)
    fill  = everything else                            (fill process)

All three are welded from outside with the inside operator factor.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from ..engine.activity_codes import ActivityCodeBreakdown, ActivityCodeMap, ActivityCodeRule
from ..engine.errors import InvalidConfiguration
from ..engine.geometry import (
    GrooveSection,
    circumference,
    require_bevel_angle,
    require_groove_depth,
    require_non_negative,
)
from ..engine.item import WeldItem
from ..engine.processes import WeldProcess, require_welding_process
from ..engine.settings import DEFAULT_SETTINGS, WeldSettings
from ..engine.timing import RegionEstimate, estimate_region
from .pipe_data import PipeDimensions, get_pipe_dimensions, normalize_nps, normalize_schedule

# =============================================================================
# PRESETS
# =============================================================================

_PROCESS_FIELDS = ("root_process", "fill_process", "cap_process")
_TIME_FIELDS = ("fit_up_time", "preheat_time", "nde_time")


@dataclass(frozen=True)
class PipeJointPreset:
    """
    Weld preparation, processes and fixed times for one pipe size/schedule.

    Attributes:
        nps: Nominal pipe size
        schedule: Schedule label
        root_gap: Root gap (mm)
        root_face: Root face (mm)
        bevel_angle: Bevel angle per side (degrees; 30 = 60 included)
        root_process / fill_process / cap_process: Processes per layer
        fit_up_time: Fit and tack (hours)
        preheat_time: Preheat (hours)
        nde_time: NDE (hours)
        enabled: Whether the preset is offered for selection
    """

    nps: str
    schedule: str
    root_gap: float = 3.0
    root_face: float = 1.5
    bevel_angle: float = 30.0
    root_process: WeldProcess = WeldProcess.GTAW
    fill_process: WeldProcess = WeldProcess.SMAW
    cap_process: WeldProcess = WeldProcess.SMAW
    fit_up_time: float = 0.5
    preheat_time: float = 0.25
    nde_time: float = 0.5
    enabled: bool = True

    def __post_init__(self):
        object.__setattr__(self, "nps", normalize_nps(self.nps))
        object.__setattr__(self, "schedule", normalize_schedule(self.schedule))
        for name in _PROCESS_FIELDS:
            object.__setattr__(self, name, require_welding_process(getattr(self, name), name))
        for name in _TIME_FIELDS:
            value = getattr(self, name)
            try:
                hours = float(value)
            except (TypeError, ValueError):
                raise InvalidConfiguration(f"Expected hours, got {value!r}", field=name) from None
            if not math.isfinite(hours) or hours < 0:
                raise InvalidConfiguration(f"Must be >= 0 hours, got {value}", field=name)
            object.__setattr__(self, name, hours)

    @property
    def key(self) -> tuple[str, str]:
        return (self.nps, self.schedule)

    @property
    def activity_hours(self) -> float:
        return self.fit_up_time + self.preheat_time + self.nde_time

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        for name in _PROCESS_FIELDS:
            data[name] = data[name].value
        return data


OVERRIDABLE_FIELDS = frozenset(f.name for f in fields(PipeJointPreset)) - {"nps", "schedule", "enabled"}


@dataclass(frozen=True)
class PipeJointSettings:
    """
    Preset library keyed by (nps, schedule).

    YAML layout:

        pipe_joint_presets:
          - nps: "2"
            schedule: SCH 40
            root_gap: 2.5
            ...
    """

    presets: tuple[PipeJointPreset, ...] = ()

    def __post_init__(self):
        presets = tuple(p if isinstance(p, PipeJointPreset) else PipeJointPreset(**p) for p in self.presets)
        keys = [p.key for p in presets]
        duplicates = sorted({k for k in keys if keys.count(k) > 1})
        if duplicates:
            raise InvalidConfiguration(f"Duplicate pipe joint presets: {duplicates}", field="pipe_joint_presets")
        object.__setattr__(self, "presets", presets)

    def find(self, nps: str, schedule: str) -> PipeJointPreset | None:
        """Preset for a size/schedule, or None."""
        key = (normalize_nps(nps), normalize_schedule(schedule))
        for preset in self.presets:
            if preset.key == key:
                return preset
        return None

    def enabled(self) -> list[PipeJointPreset]:
        return [p for p in self.presets if p.enabled]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | Iterable[Mapping[str, Any]]) -> PipeJointSettings:
        if isinstance(data, Mapping):
            data = data.get("pipe_joint_presets", [])
        try:
            return cls(presets=tuple(data))
        except TypeError as exc:
            raise InvalidConfiguration(str(exc), field="pipe_joint_presets") from None

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> PipeJointSettings:
        """Load presets from a YAML file."""
        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        return {"pipe_joint_presets": [p.to_dict() for p in self.presets]}

    def to_yaml(self, yaml_path: str | Path) -> None:
        """Save presets to a YAML file."""
        with open(yaml_path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)


DEFAULT_PIPE_JOINT_SETTINGS = PipeJointSettings()


def effective_preset(
    nps: str,
    schedule: str,
    pipe_settings: PipeJointSettings = DEFAULT_PIPE_JOINT_SETTINGS,
    overrides: Mapping[str, Any] | None = None,
) -> PipeJointPreset:
    """
    Preset for a size/schedule with per-item overrides applied.

    Falls back to the default preset values when no preset exists.

    Raises:
        InvalidConfiguration: If an override names a field that cannot be overridden
    """
    preset = pipe_settings.find(nps, schedule) or PipeJointPreset(nps=nps, schedule=schedule)
    if not overrides:
        return preset
    unknown = sorted(set(overrides) - OVERRIDABLE_FIELDS)
    if unknown:
        raise InvalidConfiguration(f"Cannot override {unknown}", field="overrides")
    return replace(preset, **overrides)


# =============================================================================
# RESULTS
# =============================================================================


@dataclass(frozen=True)
class PipeJointTimes:
    root: float
    fill: float
    cap: float
    activities: float

    @property
    def weld(self) -> float:
        return self.root + self.fill + self.cap

    @property
    def total(self) -> float:
        return self.weld + self.activities


@dataclass(frozen=True)
class PipeJointResults:
    """Per-joint results for one pipe butt weld."""

    pipe: PipeDimensions
    preset: PipeJointPreset
    circumference: float
    weld_volume: float
    root: RegionEstimate
    fill: RegionEstimate
    cap: RegionEstimate
    times: PipeJointTimes

    @property
    def total_passes(self) -> int:
        return self.root.passes + self.fill.passes + self.cap.passes


# =============================================================================
# CALCULATION
# =============================================================================


def calculate_pipe_joint(
    pipe: PipeDimensions,
    preset: PipeJointPreset,
    settings: WeldSettings = DEFAULT_SETTINGS,
) -> PipeJointResults:
    """
    Estimate root, fill and cap passes and hours for one pipe joint.

    Raises:
        InvalidGeometry: If the root face leaves no bevel in the wall, or the
            gap, face or angle are out of range
    """
    wall = pipe.wall_thickness
    root_gap = require_non_negative(preset.root_gap, "root_gap")
    root_face = require_non_negative(preset.root_face, "root_face")
    depth = require_groove_depth(wall, root_face, "wall_thickness")
    angle = require_bevel_angle(preset.bevel_angle, "bevel_angle")

    circ = circumference(pipe.od)
    groove = GrooveSection(depth, angle, root_gap, root_face)
    weld_volume = groove.area * circ

    root_volume = groove.root_face_area * circ
    one_fill_pass = settings.bead_size(preset.fill_process).area * circ
    cap_volume = min(one_fill_pass, weld_volume - root_volume)
    fill_volume = max(0.0, weld_volume - root_volume - cap_volume)

    root = estimate_region(root_volume, preset.root_process, circ, wall, settings, "inside")
    fill = estimate_region(fill_volume, preset.fill_process, circ, wall, settings, "inside")
    cap = estimate_region(cap_volume, preset.cap_process, circ, wall, settings, "inside")

    return PipeJointResults(
        pipe=pipe,
        preset=preset,
        circumference=circ,
        weld_volume=weld_volume,
        root=root,
        fill=fill,
        cap=cap,
        times=PipeJointTimes(root=root.hours, fill=fill.hours, cap=cap.hours, activities=preset.activity_hours),
    )


PIPE_JOINT_ACTIVITY_CODES = ActivityCodeMap(
    [
        ActivityCodeRule("FPIPE", ("fit_up_time",), "Fit pipe joint"),
        ActivityCodeRule("PREHEAT", ("preheat_time",), "Preheat"),
        ActivityCodeRule("WPIPE", ("root_arc", "fill_arc", "cap_arc"), "Weld pipe"),
        ActivityCodeRule("NDE", ("nde_time",), "NDE"),
    ]
)


def pipe_joint_activity_codes(results: PipeJointResults) -> ActivityCodeBreakdown:
    preset = results.preset
    return PIPE_JOINT_ACTIVITY_CODES.apply(
        {
            "fit_up_time": preset.fit_up_time,
            "preheat_time": preset.preheat_time,
            "nde_time": preset.nde_time,
            "root_arc": results.times.root,
            "fill_arc": results.times.fill,
            "cap_arc": results.times.cap,
        }
    )


# =============================================================================
# ITEM
# =============================================================================


@dataclass(eq=False)
class PipeJointItem(WeldItem):
    """
    A pipe joint row.

    Attributes:
        nps: Nominal pipe size
        schedule: Pipe schedule
        overrides: Per-item preset overrides (e.g. {"root_gap": 2.5}), stored read-only
        pipe_settings: Preset library
    """

    module_id = "pipe_joints"
    module_name = "Pipe Joints"

    nps: str = "2"
    schedule: str = "SCH 40"
    overrides: Mapping[str, Any] = field(default_factory=dict)
    pipe_settings: PipeJointSettings = field(default_factory=lambda: DEFAULT_PIPE_JOINT_SETTINGS, repr=False)

    def _normalize(self) -> None:
        super()._normalize()
        pipe = get_pipe_dimensions(self.nps, self.schedule)
        self.nps = pipe.nps
        self.schedule = pipe.schedule
        if self.overrides is None:
            self.overrides = {}
        if not isinstance(self.overrides, Mapping):
            raise InvalidConfiguration("Overrides must be a mapping", field="overrides")
        # Read-only; reassign to recompute
        self.overrides = MappingProxyType(dict(self.overrides))
        if isinstance(self.pipe_settings, Mapping):
            self.pipe_settings = PipeJointSettings.from_dict(self.pipe_settings)

    @property
    def preset(self) -> PipeJointPreset:
        return effective_preset(self.nps, self.schedule, self.pipe_settings, self.overrides)

    def calculate(self) -> PipeJointResults:
        return calculate_pipe_joint(get_pipe_dimensions(self.nps, self.schedule), self.preset, self.settings)

    def calculate_activity_codes(self, results: PipeJointResults) -> ActivityCodeBreakdown:
        return pipe_joint_activity_codes(results)

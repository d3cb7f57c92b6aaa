"""
Labor time: arc time from passes, and fixed manual activity allowances.

Arc hours for a region:

    hours = passes * weld_length / travel_speed / 60 * operator_factor

where travel speed depends on the process and the thickness band, and the
operator factor depends on the thickness band and on which side of the
joint is welded.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

from .errors import InvalidConfiguration
from .passes import region_passes
from .processes import WeldProcess
from .settings import WeldSettings

SIDES = ("inside", "outside")


def arc_hours(passes: int, weld_length: float, travel_speed: float, operator_factor: float = 1.0) -> float:
    """Labor hours for ``passes`` passes over ``weld_length`` mm at ``travel_speed`` mm/min."""
    if passes == 0:
        return 0.0
    return passes * weld_length / travel_speed / 60.0 * operator_factor


# =============================================================================
# REGION ESTIMATE
# =============================================================================


@dataclass(frozen=True)
class RegionEstimate:
    """
    Passes and hours for one weld region welded with a single process.

    Attributes:
        process: Welding process
        volume: Deposited volume (mm^3)
        passes: Whole passes needed
        hours: Labor hours including the operator factor
        travel_speed: Travel speed applied (mm/min)
        operator_factor: Operator factor applied
    """

    process: WeldProcess
    volume: float
    passes: int
    hours: float
    travel_speed: float
    operator_factor: float


def estimate_region(
    volume: float,
    process: WeldProcess,
    weld_length: float,
    thickness: float,
    settings: WeldSettings,
    side: str = "inside",
) -> RegionEstimate:
    """
    Convert a region volume into passes and labor hours.

    Args:
        volume: Region volume (mm^3)
        process: Process used for the whole region
        weld_length: Length of one pass (mm)
        thickness: Plate or wall thickness selecting the speed and factor bands
        settings: Shared process settings
        side: "inside" or "outside"; picks the operator factor

    Returns:
        RegionEstimate for the region
    """
    if side not in SIDES:
        raise ValueError(f"side must be one of {SIDES}, got {side!r}")
    speed = settings.travel_speed(process, thickness)
    factor = getattr(settings.factors_for(thickness), side)
    passes = region_passes(volume, process, weld_length, settings)
    return RegionEstimate(
        process=process,
        volume=volume,
        passes=passes,
        hours=arc_hours(passes, weld_length, speed, factor),
        travel_speed=speed,
        operator_factor=factor,
    )


# =============================================================================
# FIXED ACTIVITY TIMES
# =============================================================================


@dataclass(frozen=True)
class ActivityTimes:
    """
    Base for fixed manual-hour allowances.

    Subclasses declare one float field per activity. Every value must be a
    finite number >= 0.
    """

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool):
                raise InvalidConfiguration(f"Expected hours, got {value!r}", field=f"activity_times.{f.name}")
            try:
                hours = float(value)
            except (TypeError, ValueError):
                raise InvalidConfiguration(
                    f"Expected hours, got {value!r}", field=f"activity_times.{f.name}"
                ) from None
            if not math.isfinite(hours) or hours < 0:
                raise InvalidConfiguration(f"Must be >= 0 hours, got {value}", field=f"activity_times.{f.name}")
            object.__setattr__(self, f.name, hours)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]):
        """Build from a mapping; missing activities keep their defaults."""
        names = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - names)
        if unknown:
            raise InvalidConfiguration(f"Unknown activities: {unknown}", field="activity_times")
        return cls(**data)

    def as_dict(self) -> dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @property
    def total(self) -> float:
        """Sum of all fixed allowances (hours)."""
        return math.fsum(self.as_dict().values())

"""
ASME B36.10M welded and seamless wrought steel pipe dimensions.

Outside diameter and wall thickness by schedule, all in mm. SCH 5 is left
out as it is rarely welded in vessel shops.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from ..engine.errors import InvalidConfiguration

# =============================================================================
# NPS PARSING UTILITIES
# =============================================================================


def normalize_nps(nps: str) -> str:
    """
    Canonical NPS key: whitespace and inch marks removed.

    Examples:
        >>> normalize_nps(' 2" ')
        '2'
        >>> normalize_nps("1-1/2in")
        '1-1/2'
    """
    nps = str(nps).strip().rstrip('"').strip()
    if nps.lower().endswith("in"):
        nps = nps[:-2].strip()
    return nps


def nps_to_float(nps: str) -> float:
    """
    Convert NPS string to a float value for comparison.

    Args:
        nps: Nominal pipe size string (e.g., "4", "1-1/2", "3/4")

    Returns:
        Float value of the NPS

    Examples:
        >>> nps_to_float("4")
        4.0
        >>> nps_to_float("1-1/2")
        1.5
        >>> nps_to_float('3/4"')
        0.75
    """
    nps = normalize_nps(nps)

    if re.match(r"^\d+$", nps):
        return float(nps)

    if "/" in nps and "-" not in nps:
        num, denom = nps.split("/")
        return float(num) / float(denom)

    if "-" in nps and "/" in nps:
        whole, frac = nps.split("-")
        num, denom = frac.split("/")
        return float(whole) + float(num) / float(denom)

    raise InvalidConfiguration(f"Cannot parse NPS: {nps}", field="nps")


def compare_nps(nps1: str, nps2: str) -> int:
    """
    Compare two NPS values numerically.

    Returns:
        -1 if nps1 < nps2, 0 if equal, +1 if nps1 > nps2
    """
    v1 = nps_to_float(nps1)
    v2 = nps_to_float(nps2)
    if v1 < v2:
        return -1
    elif v1 > v2:
        return 1
    return 0


def normalize_schedule(schedule: str) -> str:
    """
    Canonical schedule label: "sch40", "40" and "SCH 40" all become "SCH 40".

    STD, XS and XXS are kept as they are (upper case).
    """
    label = str(schedule).strip().upper()
    match = re.match(r"^(?:SCH\.?\s*)?(\d+)$", label)
    if match:
        return f"SCH {match.group(1)}"
    return label


# =============================================================================
# DATA STRUCTURES
# =============================================================================


@dataclass(frozen=True)
class PipeSize:
    """One nominal pipe size.

    Attributes:
        nps: Nominal pipe size (e.g. "2", "1-1/2")
        od: Outside diameter (mm)
        schedules: Wall thickness (mm) by schedule label
    """

    nps: str
    od: float
    schedules: Mapping[str, float]

    def __post_init__(self):
        object.__setattr__(self, "schedules", MappingProxyType(dict(self.schedules)))


@dataclass(frozen=True)
class PipeDimensions:
    """Resolved pipe: nps, schedule, outside diameter and wall (mm)."""

    nps: str
    schedule: str
    od: float
    wall_thickness: float


# =============================================================================
# ASME B36.10M DIMENSION TABLE
# =============================================================================

_SIZES = [
    PipeSize("1/2", 21.3, {"SCH 10": 2.11, "SCH 40": 2.77, "SCH 80": 3.73, "SCH 160": 4.78, "XXS": 7.47}),
    PipeSize("3/4", 26.7, {"SCH 10": 2.11, "SCH 40": 2.87, "SCH 80": 3.91, "SCH 160": 5.56, "XXS": 7.82}),
    PipeSize("1", 33.4, {"SCH 10": 2.77, "SCH 40": 3.38, "SCH 80": 4.55, "SCH 160": 6.35, "XXS": 9.09}),
    PipeSize("1-1/4", 42.2, {"SCH 10": 2.77, "SCH 40": 3.56, "SCH 80": 4.85, "SCH 160": 6.35, "XXS": 9.70}),
    PipeSize("1-1/2", 48.3, {"SCH 10": 2.77, "SCH 40": 3.68, "SCH 80": 5.08, "SCH 160": 7.14, "XXS": 10.15}),
    PipeSize("2", 60.3, {"SCH 10": 2.77, "SCH 40": 3.91, "SCH 80": 5.54, "SCH 160": 8.74, "XXS": 11.07}),
    PipeSize("2-1/2", 73.0, {"SCH 10": 3.05, "SCH 40": 5.16, "SCH 80": 7.01, "SCH 160": 9.53, "XXS": 14.02}),
    PipeSize("3", 88.9, {"SCH 10": 3.05, "SCH 40": 5.49, "SCH 80": 7.62, "SCH 160": 11.13, "XXS": 15.24}),
    PipeSize("3-1/2", 101.6, {"SCH 10": 3.05, "SCH 40": 5.74, "SCH 80": 8.08}),
    PipeSize(
        "4", 114.3,
        {"SCH 10": 3.05, "SCH 40": 6.02, "SCH 80": 8.56, "SCH 120": 11.13, "SCH 160": 13.49, "XXS": 17.12},
    ),
    PipeSize(
        "5", 141.3,
        {"SCH 10": 3.40, "SCH 40": 6.55, "SCH 80": 9.53, "SCH 120": 12.70, "SCH 160": 15.88, "XXS": 19.05},
    ),
    PipeSize(
        "6", 168.3,
        {"SCH 10": 3.40, "SCH 40": 7.11, "SCH 80": 10.97, "SCH 120": 14.27, "SCH 160": 18.26, "XXS": 21.95},
    ),
    PipeSize(
        "8", 219.1,
        {
            "SCH 10": 3.76, "SCH 20": 6.35, "SCH 30": 7.04, "SCH 40": 8.18, "SCH 60": 10.31, "SCH 80": 12.70,
            "SCH 100": 15.09, "SCH 120": 18.26, "SCH 140": 20.62, "SCH 160": 23.01, "XXS": 22.23,
        },
    ),
    PipeSize(
        "10", 273.1,
        {
            "SCH 10": 4.19, "SCH 20": 6.35, "SCH 30": 7.80, "SCH 40": 9.27, "SCH 60": 12.70, "SCH 80": 15.09,
            "SCH 100": 18.26, "SCH 120": 21.44, "SCH 140": 25.40, "SCH 160": 28.58,
        },
    ),
    PipeSize(
        "12", 323.9,
        {
            "SCH 10": 4.57, "SCH 20": 6.35, "SCH 30": 8.38, "SCH 40": 10.31, "SCH 60": 14.27, "SCH 80": 17.48,
            "SCH 100": 21.44, "SCH 120": 25.40, "SCH 140": 28.58, "SCH 160": 33.32,
        },
    ),
    PipeSize(
        "14", 355.6,
        {
            "SCH 10": 6.35, "SCH 20": 7.92, "SCH 30": 9.53, "SCH 40": 11.13, "SCH 60": 15.09, "SCH 80": 19.05,
            "SCH 100": 23.83, "SCH 120": 27.79, "SCH 140": 31.75, "SCH 160": 35.71,
        },
    ),
    PipeSize(
        "16", 406.4,
        {
            "SCH 10": 6.35, "SCH 20": 7.92, "SCH 30": 9.53, "SCH 40": 12.70, "SCH 60": 16.66, "SCH 80": 21.44,
            "SCH 100": 26.19, "SCH 120": 30.96, "SCH 140": 36.53, "SCH 160": 40.49,
        },
    ),
    PipeSize(
        "18", 457.2,
        {
            "SCH 10": 6.35, "SCH 20": 7.92, "SCH 30": 11.13, "SCH 40": 14.27, "SCH 60": 19.05, "SCH 80": 23.83,
            "SCH 100": 29.36, "SCH 120": 34.93, "SCH 140": 39.67, "SCH 160": 45.24,
        },
    ),
    PipeSize(
        "20", 508.0,
        {
            "SCH 10": 6.35, "SCH 20": 9.53, "SCH 30": 12.70, "SCH 40": 15.09, "SCH 60": 20.62, "SCH 80": 26.19,
            "SCH 100": 32.54, "SCH 120": 38.10, "SCH 140": 44.45, "SCH 160": 50.01,
        },
    ),
    PipeSize(
        "22", 558.8,
        {
            "SCH 10": 6.35, "SCH 20": 9.53, "SCH 30": 12.70, "SCH 60": 22.23, "SCH 80": 28.58,
            "SCH 100": 34.93, "SCH 120": 41.28, "SCH 140": 47.63, "SCH 160": 53.98,
        },
    ),
    PipeSize(
        "24", 609.6,
        {
            "SCH 10": 6.35, "SCH 20": 9.53, "SCH 30": 14.27, "SCH 40": 17.48, "SCH 60": 24.61, "SCH 80": 30.96,
            "SCH 100": 38.89, "SCH 120": 46.02, "SCH 140": 52.37, "SCH 160": 59.54,
        },
    ),
    PipeSize("26", 660.4, {"SCH 10": 7.92, "SCH 20": 12.70, "STD": 9.53, "XS": 12.70}),
    PipeSize("28", 711.2, {"SCH 10": 7.92, "SCH 20": 12.70, "SCH 30": 15.88, "STD": 9.53, "XS": 12.70}),
    PipeSize("30", 762.0, {"SCH 10": 7.92, "SCH 20": 12.70, "SCH 30": 15.88, "STD": 9.53, "XS": 12.70}),
    PipeSize(
        "32", 812.8,
        {"SCH 10": 7.92, "SCH 20": 12.70, "SCH 30": 15.88, "SCH 40": 17.48, "STD": 9.53, "XS": 12.70},
    ),
    PipeSize(
        "34", 863.6,
        {"SCH 10": 7.92, "SCH 20": 12.70, "SCH 30": 15.88, "SCH 40": 17.48, "STD": 9.53, "XS": 12.70},
    ),
    PipeSize(
        "36", 914.4,
        {"SCH 10": 7.92, "SCH 20": 12.70, "SCH 30": 15.88, "SCH 40": 19.05, "STD": 9.53, "XS": 12.70},
    ),
    PipeSize("42", 1066.8, {"SCH 20": 12.70, "SCH 30": 15.88, "SCH 40": 21.44, "STD": 9.53, "XS": 12.70}),
    PipeSize("48", 1219.2, {"SCH 20": 12.70, "SCH 30": 15.88, "SCH 40": 24.61, "STD": 9.53, "XS": 12.70}),
]

# Key is the canonical NPS string ("2", "1-1/2", ...)
ASME_B3610_PIPE: Mapping[str, PipeSize] = MappingProxyType({size.nps: size for size in _SIZES})


# =============================================================================
# LOOKUP
# =============================================================================


def available_nps() -> list[str]:
    """All tabulated NPS values, smallest first."""
    return sorted(ASME_B3610_PIPE, key=nps_to_float)


def schedules_for(nps: str) -> list[str]:
    """Schedules tabulated for a size (empty if the size is unknown)."""
    size = ASME_B3610_PIPE.get(normalize_nps(nps))
    return list(size.schedules) if size else []


def get_pipe_dimensions(nps: str, schedule: str) -> PipeDimensions:
    """
    Look up a pipe by size and schedule.

    Args:
        nps: Nominal pipe size ('2', '2"', '1-1/2', ...)
        schedule: Schedule ('SCH 40', '40', 'STD', ...)

    Returns:
        PipeDimensions with canonical nps/schedule labels

    Raises:
        InvalidConfiguration: If the size or the schedule is not tabulated
    """
    key = normalize_nps(nps)
    size = ASME_B3610_PIPE.get(key)
    if size is None:
        raise InvalidConfiguration(f"Unknown pipe size NPS {nps!r}", field="nps")
    label = normalize_schedule(schedule)
    wall = size.schedules.get(label)
    if wall is None:
        raise InvalidConfiguration(
            f"NPS {key} has no schedule {schedule!r} (available: {list(size.schedules)})",
            field="schedule",
        )
    return PipeDimensions(nps=key, schedule=label, od=size.od, wall_thickness=wall)

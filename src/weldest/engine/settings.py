"""
Shared welding settings: bead sizes, travel speeds and operator factors.

These tables are the only data shared between weld items. They are frozen
and wrapped in read-only mappings so any number of estimates can read them
at once. Settings can be written to and loaded from YAML:

    settings:
      bead_sizes:
        GTAW: {height: 2.5, width: 6}
      travel_speeds:
        thin: {GTAW: 80, SMAW: 120, ...}
      operator_factors:
        range1: {inside: 1.3, outside: 1.2}
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from .errors import InvalidConfiguration
from .processes import WELDING_PROCESSES, WeldProcess, require_welding_process

# =============================================================================
# THICKNESS BANDS
# =============================================================================

# Travel speed bands: thin < 20 mm, medium <= 40 mm, thick above
SPEED_BANDS: tuple[str, ...] = ("thin", "medium", "thick")
THIN_LIMIT = 20.0
MEDIUM_LIMIT = 40.0

# Operator factor bands: upper limits (exclusive) of range1..range5, range6 above
OPERATOR_FACTOR_LIMITS: tuple[float, ...] = (12.0, 18.0, 25.0, 35.0, 50.0)
OPERATOR_FACTOR_BANDS: tuple[str, ...] = tuple(f"range{i}" for i in range(1, len(OPERATOR_FACTOR_LIMITS) + 2))


def speed_band(thickness: float) -> str:
    """Travel speed band for a plate or wall thickness (mm)."""
    if thickness < THIN_LIMIT:
        return "thin"
    if thickness <= MEDIUM_LIMIT:
        return "medium"
    return "thick"


def operator_factor_band(thickness: float) -> str:
    """Operator factor band for a plate or wall thickness (mm)."""
    for band, limit in zip(OPERATOR_FACTOR_BANDS, OPERATOR_FACTOR_LIMITS):
        if thickness < limit:
            return band
    return OPERATOR_FACTOR_BANDS[-1]


# =============================================================================
# DATA STRUCTURES
# =============================================================================


def _positive(value: Any, field: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidConfiguration(f"Expected a number, got {value!r}", field=field) from None
    if not number > 0:
        raise InvalidConfiguration(f"Must be > 0, got {value}", field=field)
    return number


@dataclass(frozen=True)
class BeadSize:
    """Cross-section of a single weld bead (mm).

    Attributes:
        height: Bead height
        width: Bead width
    """

    height: float
    width: float

    def __post_init__(self):
        object.__setattr__(self, "height", _positive(self.height, "bead_sizes.height"))
        object.__setattr__(self, "width", _positive(self.width, "bead_sizes.width"))

    @property
    def area(self) -> float:
        return self.height * self.width


@dataclass(frozen=True)
class OperatorFactors:
    """Multipliers from arc time to labor time.

    Attributes:
        inside: Factor for welding from the inside / first side
        outside: Factor for welding from the outside / second side
    """

    inside: float
    outside: float

    def __post_init__(self):
        object.__setattr__(self, "inside", _positive(self.inside, "operator_factors.inside"))
        object.__setattr__(self, "outside", _positive(self.outside, "operator_factors.outside"))


def _process_table(raw: Mapping, field: str, convert) -> Mapping[WeldProcess, Any]:
    table = {}
    for key, value in raw.items():
        process = require_welding_process(key, field)
        table[process] = convert(value, f"{field}.{process.value}")
    missing = [p.value for p in WELDING_PROCESSES if p not in table]
    if missing:
        raise InvalidConfiguration(f"Missing entries for {missing}", field=field)
    return MappingProxyType(table)


def _bead(value: Any, field: str) -> BeadSize:
    if isinstance(value, BeadSize):
        return value
    if isinstance(value, Mapping):
        return BeadSize(height=value.get("height", value.get("h")), width=value.get("width", value.get("w")))
    raise InvalidConfiguration(f"Cannot read bead size from {value!r}", field=field)


def _factors(value: Any, field: str) -> OperatorFactors:
    if isinstance(value, OperatorFactors):
        return value
    if isinstance(value, Mapping):
        return OperatorFactors(inside=value.get("inside"), outside=value.get("outside"))
    raise InvalidConfiguration(f"Cannot read operator factors from {value!r}", field=field)


@dataclass(frozen=True)
class WeldSettings:
    """
    Process data shared by every weld estimate.

    Attributes:
        bead_sizes: Bead cross-section per process; sets the volume deposited per pass
        travel_speeds: Travel speed (mm/min) per process for each speed band
        operator_factors: Arc-to-labor multipliers for each operator factor band
    """

    bead_sizes: Mapping[WeldProcess, BeadSize]
    travel_speeds: Mapping[str, Mapping[WeldProcess, float]]
    operator_factors: Mapping[str, OperatorFactors]

    def __post_init__(self):
        # Convert plain dicts (e.g. from YAML) into validated read-only tables
        object.__setattr__(self, "bead_sizes", _process_table(self.bead_sizes, "bead_sizes", _bead))

        speeds = {}
        for band in SPEED_BANDS:
            if band not in self.travel_speeds:
                raise InvalidConfiguration(f"Missing travel speed band '{band}'", field="travel_speeds")
            speeds[band] = _process_table(self.travel_speeds[band], f"travel_speeds.{band}", _positive)
        object.__setattr__(self, "travel_speeds", MappingProxyType(speeds))

        factors = {}
        for band in OPERATOR_FACTOR_BANDS:
            if band not in self.operator_factors:
                raise InvalidConfiguration(f"Missing operator factor band '{band}'", field="operator_factors")
            factors[band] = _factors(self.operator_factors[band], f"operator_factors.{band}")
        object.__setattr__(self, "operator_factors", MappingProxyType(factors))

    def bead_size(self, process: WeldProcess) -> BeadSize:
        return self.bead_sizes[require_welding_process(process)]

    def travel_speed(self, process: WeldProcess, thickness: float) -> float:
        """Travel speed (mm/min) of a process at a thickness."""
        return self.travel_speeds[speed_band(thickness)][require_welding_process(process)]

    def speeds_for(self, thickness: float) -> Mapping[WeldProcess, float]:
        return self.travel_speeds[speed_band(thickness)]

    def factors_for(self, thickness: float) -> OperatorFactors:
        return self.operator_factors[operator_factor_band(thickness)]

    # -------------------------------------------------------------------------
    # YAML
    # -------------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> WeldSettings:
        try:
            return cls(
                bead_sizes=data["bead_sizes"],
                travel_speeds=data["travel_speeds"],
                operator_factors=data["operator_factors"],
            )
        except KeyError as exc:
            raise InvalidConfiguration(f"Missing settings section {exc.args[0]!r}", field="settings") from None

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> WeldSettings:
        """Load settings from a YAML file (optionally nested under a 'settings' key)."""
        with open(yaml_path) as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise InvalidConfiguration(f"{yaml_path}: {exc}", field="settings") from None
        if isinstance(data, Mapping):
            data = data.get("settings", data)
        if not isinstance(data, Mapping):
            raise InvalidConfiguration(f"{yaml_path}: expected a mapping of settings sections", field="settings")
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary suitable for YAML serialization."""
        return {
            "bead_sizes": {
                p.value: {"height": b.height, "width": b.width} for p, b in self.bead_sizes.items()
            },
            "travel_speeds": {
                band: {p.value: speed for p, speed in speeds.items()}
                for band, speeds in self.travel_speeds.items()
            },
            "operator_factors": {
                band: {"inside": f.inside, "outside": f.outside}
                for band, f in self.operator_factors.items()
            },
        }

    def to_yaml(self, yaml_path: str | Path) -> None:
        """Save the settings to a YAML file."""
        with open(yaml_path, "w") as f:
            yaml.dump({"settings": self.to_dict()}, f, default_flow_style=False, sort_keys=False)


# =============================================================================
# DEFAULTS
# =============================================================================

DEFAULT_SETTINGS = WeldSettings(
    bead_sizes={
        "GTAW": {"height": 2.5, "width": 6.0},
        "SMAW": {"height": 3.0, "width": 8.0},
        "FCAW": {"height": 3.5, "width": 10.0},
        "GMAW": {"height": 3.0, "width": 9.0},
        "SAW": {"height": 4.0, "width": 12.0},
    },
    travel_speeds={
        "thin": {"GTAW": 80, "SMAW": 120, "FCAW": 200, "GMAW": 250, "SAW": 400},
        "medium": {"GTAW": 70, "SMAW": 100, "FCAW": 180, "GMAW": 220, "SAW": 350},
        "thick": {"GTAW": 60, "SMAW": 90, "FCAW": 160, "GMAW": 200, "SAW": 300},
    },
    operator_factors={
        "range1": {"inside": 1.3, "outside": 1.2},  # < 12 mm
        "range2": {"inside": 1.4, "outside": 1.3},  # 12-18 mm
        "range3": {"inside": 1.5, "outside": 1.4},  # 18-25 mm
        "range4": {"inside": 1.6, "outside": 1.5},  # 25-35 mm
        "range5": {"inside": 1.7, "outside": 1.6},  # 35-50 mm
        "range6": {"inside": 1.8, "outside": 1.7},  # > 50 mm
    },
)

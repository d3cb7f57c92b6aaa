"""
Shared weld estimation engine.

Groove geometry, process layer selection, pass counting, arc time and
activity code aggregation used by every weld type in ``weldest.welds``.
"""

from .activity_codes import ActivityCodeBreakdown, ActivityCodeMap, ActivityCodeRule
from .errors import ArithmeticDegenerate, EstimationError, InvalidConfiguration, InvalidGeometry
from .geometry import (
    FILLET_AREA_FACTOR,
    MIN_GROOVE_DEPTH,
    GrooveSection,
    circumference,
    fillet_area,
    fillet_leg,
)
from .item import WeldItem
from .passes import pass_count, region_passes, volume_per_pass
from .processes import (
    DEFAULT_NOZZLE_LAYERS,
    DEFAULT_SEAM_LAYERS,
    WELDING_PROCESSES,
    ProcessLayer,
    WeldProcess,
    normalize_layers,
    parse_process,
    select_process_layer,
)
from .settings import (
    DEFAULT_SETTINGS,
    BeadSize,
    OperatorFactors,
    WeldSettings,
    operator_factor_band,
    speed_band,
)
from .timing import ActivityTimes, RegionEstimate, arc_hours, estimate_region
from .zones import GrooveZone, groove_zones

__all__ = [
    # Errors
    "EstimationError",
    "InvalidGeometry",
    "InvalidConfiguration",
    "ArithmeticDegenerate",
    # Processes
    "WeldProcess",
    "WELDING_PROCESSES",
    "ProcessLayer",
    "DEFAULT_NOZZLE_LAYERS",
    "DEFAULT_SEAM_LAYERS",
    "parse_process",
    "normalize_layers",
    "select_process_layer",
    # Geometry
    "GrooveSection",
    "MIN_GROOVE_DEPTH",
    "FILLET_AREA_FACTOR",
    "circumference",
    "fillet_area",
    "fillet_leg",
    # Settings
    "BeadSize",
    "OperatorFactors",
    "WeldSettings",
    "DEFAULT_SETTINGS",
    "speed_band",
    "operator_factor_band",
    # Passes and time
    "volume_per_pass",
    "pass_count",
    "region_passes",
    "arc_hours",
    "RegionEstimate",
    "estimate_region",
    "ActivityTimes",
    "GrooveZone",
    "groove_zones",
    # Activity codes
    "ActivityCodeRule",
    "ActivityCodeMap",
    "ActivityCodeBreakdown",
    # Items
    "WeldItem",
]

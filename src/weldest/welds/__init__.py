"""
Weld types: nozzles, long seams, circ seams and pipe joints.

Each weld type provides a geometry record, fixed activity times, a pure
``calculate_*`` function, an activity code map and a ``WeldItem``
subclass that keeps results and codes in step with its inputs.
"""

from .circ_seam import CIRC_SEAM_ACTIVITY_CODES, CircSeamActivityTimes, CircSeamGeometry, CircSeamItem
from .long_seam import LONG_SEAM_ACTIVITY_CODES, LongSeamActivityTimes, LongSeamGeometry, LongSeamItem
from .nozzle import (
    NOZZLE_ACTIVITY_CODES,
    NozzleActivityTimes,
    NozzleCalculationResults,
    NozzleGeometry,
    NozzleItem,
    NozzleJointType,
    calculate_nozzle,
    nozzle_activity_codes,
    resolve_nozzle_geometry,
)
from .pipe_data import (
    ASME_B3610_PIPE,
    PipeDimensions,
    available_nps,
    compare_nps,
    get_pipe_dimensions,
    nps_to_float,
    schedules_for,
)
from .pipe_joint import (
    DEFAULT_PIPE_JOINT_SETTINGS,
    PIPE_JOINT_ACTIVITY_CODES,
    PipeJointItem,
    PipeJointPreset,
    PipeJointResults,
    PipeJointSettings,
    calculate_pipe_joint,
    effective_preset,
)
from .seam import SeamJointType, SeamResults, calculate_seam, is_sub_arc, resolve_seam_geometry

# Item type per module id, in report order
ITEM_TYPES = {
    NozzleItem.module_id: NozzleItem,
    LongSeamItem.module_id: LongSeamItem,
    CircSeamItem.module_id: CircSeamItem,
    PipeJointItem.module_id: PipeJointItem,
}

__all__ = [
    # Nozzles
    "NozzleGeometry",
    "NozzleJointType",
    "NozzleActivityTimes",
    "NozzleCalculationResults",
    "NozzleItem",
    "NOZZLE_ACTIVITY_CODES",
    "calculate_nozzle",
    "nozzle_activity_codes",
    "resolve_nozzle_geometry",
    # Seams
    "SeamJointType",
    "SeamResults",
    "calculate_seam",
    "resolve_seam_geometry",
    "is_sub_arc",
    "LongSeamGeometry",
    "LongSeamActivityTimes",
    "LongSeamItem",
    "LONG_SEAM_ACTIVITY_CODES",
    "CircSeamGeometry",
    "CircSeamActivityTimes",
    "CircSeamItem",
    "CIRC_SEAM_ACTIVITY_CODES",
    # Pipe joints
    "ASME_B3610_PIPE",
    "PipeDimensions",
    "available_nps",
    "schedules_for",
    "get_pipe_dimensions",
    "nps_to_float",
    "compare_nps",
    "PipeJointPreset",
    "PipeJointSettings",
    "DEFAULT_PIPE_JOINT_SETTINGS",
    "PipeJointResults",
    "PipeJointItem",
    "PIPE_JOINT_ACTIVITY_CODES",
    "calculate_pipe_joint",
    "effective_preset",
    # Registry
    "ITEM_TYPES",
]

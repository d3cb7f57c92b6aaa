"""
Circumferential seam estimate.

Circ seams join shell courses (and heads) end to end. The weld runs around
the shell, so its length is pi * inside diameter. Activity sequence:

    move to assembly (CRANE) -> fit (FCIRC) -> preheat, weld 1st side
    (PREHEAT, WECIRC) -> back mill (BACMIL) -> preheat, weld 2nd side
    (PREHEAT, SUBCIRC or MANCIR) -> NDE
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..engine.activity_codes import ActivityCodeMap, ActivityCodeRule
from ..engine.geometry import circumference, require_length
from ..engine.timing import ActivityTimes
from .seam import SeamGeometry, SeamItem


@dataclass(frozen=True)
class CircSeamGeometry(SeamGeometry):
    """Seam geometry plus the shell inside diameter (mm)."""

    inside_diameter: float = 3000.0

    def resolved_length(self) -> float:
        return circumference(require_length(self.inside_diameter, "inside_diameter"))


@dataclass(frozen=True)
class CircSeamActivityTimes(ActivityTimes):
    """Fixed manual allowances for one circ seam (hours)."""

    move_to_assembly: float = 0.5
    fit_up: float = 1.0
    preheat_1st_side: float = 0.5
    weld_1st_side: float = 0.0
    back_mill: float = 0.75
    preheat_2nd_side: float = 0.25
    weld_2nd_side: float = 0.0
    nde: float = 0.5


CIRC_SEAM_ACTIVITY_CODES = ActivityCodeMap(
    [
        ActivityCodeRule("CRANE", ("move_to_assembly",), "Crane moves"),
        ActivityCodeRule("FCIRC", ("fit_up",), "Fit circ seam"),
        ActivityCodeRule("PREHEAT", ("preheat_1st_side", "preheat_2nd_side"), "Preheat"),
        ActivityCodeRule("WECIRC", ("weld_1st_side", "inside_arc"), "Weld circ seam, 1st side"),
        ActivityCodeRule("BACMIL", ("back_mill",), "Back mill"),
        ActivityCodeRule("SUBCIRC", ("second_side_sub_arc",), "Weld 2nd side, sub-arc"),
        ActivityCodeRule("MANCIR", ("second_side_manual",), "Weld 2nd side, manual"),
        ActivityCodeRule("NDE", ("nde",), "NDE"),
    ]
)


@dataclass(eq=False)
class CircSeamItem(SeamItem):
    """A circ seam row: inputs plus cached results and activity codes."""

    module_id = "circ_seams"
    module_name = "Circ Seams"
    geometry_type = CircSeamGeometry
    times_type = CircSeamActivityTimes
    code_map = CIRC_SEAM_ACTIVITY_CODES

    geometry: CircSeamGeometry = field(default_factory=CircSeamGeometry)
    activity_times: CircSeamActivityTimes = field(default_factory=CircSeamActivityTimes)

"""
Longitudinal seam estimate.

Long seams join the rolled plate edges of a shell course. The weld length
is given directly. The shop sequence behind the activity codes:

    cut plate, clean plate (MATCUT) -> move to roll (CRANE) -> roll (ROLL)
    -> fit (FLON) -> move to weld, preheat, weld 1st side (CRANE, PREHEAT,
    WELON) -> move to mill, back mill (CRANE, BACMIL) -> move to weld,
    preheat, weld 2nd side (CRANE, PREHEAT, SUBLON or MANLON)
    -> move to roll, re-roll (CRANE, ROLL) -> NDE
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..engine.activity_codes import ActivityCodeMap, ActivityCodeRule
from ..engine.geometry import require_length
from ..engine.timing import ActivityTimes
from .seam import SeamGeometry, SeamItem


@dataclass(frozen=True)
class LongSeamGeometry(SeamGeometry):
    """Seam geometry plus the seam length (mm)."""

    weld_length: float = 2000.0

    def resolved_length(self) -> float:
        return require_length(self.weld_length, "weld_length")


@dataclass(frozen=True)
class LongSeamActivityTimes(ActivityTimes):
    """Fixed manual allowances for one long seam (hours)."""

    cut_plate: float = 0.5
    clean_plate: float = 0.25
    move_to_roll: float = 0.25
    roll: float = 0.5
    fit_up: float = 0.5
    move_to_weld_1: float = 0.25
    preheat_1st_side: float = 0.5
    weld_1st_side: float = 0.0
    move_to_mill: float = 0.25
    back_mill: float = 0.5
    move_to_weld_2: float = 0.25
    preheat_2nd_side: float = 0.25
    weld_2nd_side: float = 0.0
    move_to_re_roll: float = 0.25
    re_roll: float = 0.25
    nde: float = 0.5


LONG_SEAM_ACTIVITY_CODES = ActivityCodeMap(
    [
        ActivityCodeRule("MATCUT", ("cut_plate", "clean_plate"), "Material cut"),
        ActivityCodeRule(
            "CRANE",
            ("move_to_roll", "move_to_weld_1", "move_to_mill", "move_to_weld_2", "move_to_re_roll"),
            "Crane moves",
        ),
        ActivityCodeRule("ROLL", ("roll", "re_roll"), "Roll / re-roll"),
        ActivityCodeRule("FLON", ("fit_up",), "Fit long seam"),
        ActivityCodeRule("PREHEAT", ("preheat_1st_side", "preheat_2nd_side"), "Preheat"),
        ActivityCodeRule("WELON", ("weld_1st_side", "inside_arc"), "Weld long seam, 1st side"),
        ActivityCodeRule("BACMIL", ("back_mill",), "Back mill"),
        ActivityCodeRule("SUBLON", ("second_side_sub_arc",), "Weld 2nd side, sub-arc"),
        ActivityCodeRule("MANLON", ("second_side_manual",), "Weld 2nd side, manual"),
        ActivityCodeRule("NDE", ("nde",), "NDE"),
    ]
)


@dataclass(eq=False)
class LongSeamItem(SeamItem):
    """A long seam row: inputs plus cached results and activity codes."""

    module_id = "long_seams"
    module_name = "Long Seams"
    geometry_type = LongSeamGeometry
    times_type = LongSeamActivityTimes
    code_map = LONG_SEAM_ACTIVITY_CODES

    geometry: LongSeamGeometry = field(default_factory=LongSeamGeometry)
    activity_times: LongSeamActivityTimes = field(default_factory=LongSeamActivityTimes)

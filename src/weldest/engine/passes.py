"""
Volume to pass conversion.

A pass deposits one bead (height x width) along the full weld length.
Partial passes cost a full pass of labor, so counts are rounded up, with
a small tolerance so a volume that is an exact multiple of the bead
volume does not pick up an extra pass from floating-point noise.
"""

from __future__ import annotations

import math

from .errors import InvalidConfiguration
from .processes import WeldProcess
from .settings import BeadSize, WeldSettings

PASS_TOLERANCE = 1e-9


def volume_per_pass(bead: BeadSize, weld_length: float) -> float:
    """Volume (mm^3) deposited by one pass of ``bead`` over ``weld_length``."""
    return bead.area * weld_length


def pass_count(volume: float, per_pass: float) -> int:
    """
    Number of passes needed to fill ``volume``.

    Args:
        volume: Region volume (mm^3), >= 0
        per_pass: Volume deposited per pass (mm^3), > 0

    Returns:
        ceil(volume / per_pass), at least 1 for any positive volume; 0 when
        the volume is 0

    Raises:
        InvalidConfiguration: If per_pass is not positive or volume is negative
    """
    if per_pass <= 0:
        raise InvalidConfiguration(f"Volume per pass must be > 0, got {per_pass}", field="bead_sizes")
    if volume < 0:
        raise InvalidConfiguration(f"Volume must be >= 0, got {volume}", field="volume")
    if volume == 0:
        return 0
    # A positive volume always needs at least one pass
    return max(1, math.ceil(volume / per_pass - PASS_TOLERANCE))


def region_passes(volume: float, process: WeldProcess, weld_length: float, settings: WeldSettings) -> int:
    """Passes for a region welded entirely with one process."""
    if volume == 0:
        return 0
    return pass_count(volume, volume_per_pass(settings.bead_size(process), weld_length))

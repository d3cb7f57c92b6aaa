"""
Groove geometry shared by every weld type.

A weld groove is modelled as one or two sections, each a trapezoid that
widens from the root gap with depth:

    width(d) = root_gap + bevel_faces * d * tan(angle)

plus a rectangular land (root face) of width root_gap. Deposited volume is
the cross-sectional area times the weld length (a thin prism; curvature is
not modelled).

All dimensions are in mm, angles in degrees.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any

import numpy as np

from .errors import ArithmeticDegenerate, InvalidConfiguration, InvalidGeometry
from .processes import ProcessLayer, layer_width_bands

# =============================================================================
# CONSTANTS
# =============================================================================

MIN_GROOVE_DEPTH = 0.1  # mm - thickness must exceed the root face by more than this
FILLET_AREA_FACTOR = 2.0  # equal-leg fillet: leg = throat * sqrt(2), area = leg^2 / 2
DEPTH_TOLERANCE = 1e-9

# =============================================================================
# INPUT VALIDATION
# =============================================================================


def _require_number(value: float, field: str) -> float:
    if isinstance(value, bool):
        raise InvalidGeometry(f"Expected a number, got {value!r}", field=field)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidGeometry(f"Expected a number, got {value!r}", field=field) from None
    if not math.isfinite(number):
        raise InvalidGeometry(f"Expected a finite number, got {value!r}", field=field)
    return number


def require_non_negative(value: float, field: str) -> float:
    """Reject negative (or non-numeric) linear dimensions."""
    number = _require_number(value, field)
    if number < 0:
        raise InvalidGeometry(f"Must be >= 0, got {value}", field=field)
    return number


def require_length(value: float, field: str) -> float:
    """
    Validate a diameter or weld length.

    Raises:
        InvalidGeometry: If negative
        ArithmeticDegenerate: If zero (the weld would have no length)
    """
    number = require_non_negative(value, field)
    if number == 0:
        raise ArithmeticDegenerate("Weld length is zero", field=field)
    return number


def require_bevel_angle(value: float, field: str) -> float:
    """Bevel angles must lie strictly between 0 and 90 degrees."""
    number = _require_number(value, field)
    if not 0 < number < 90:
        raise InvalidGeometry(f"Bevel angle must be in (0, 90) degrees, got {value}", field=field)
    return number


def require_split_ratio(value: float, field: str = "split_ratio") -> float:
    """Split ratios are percentages in [0, 100]."""
    number = _require_number(value, field)
    if not 0 <= number <= 100:
        raise InvalidGeometry(f"Split ratio must be in [0, 100] %, got {value}", field=field)
    return number


def require_groove_depth(thickness: float, root_face: float, field: str = "shell_thickness") -> float:
    """
    Check that there is room for a groove above the root face.

    Returns:
        Bevel depth (thickness - root_face)

    Raises:
        InvalidGeometry: If thickness <= root_face + MIN_GROOVE_DEPTH
    """
    thickness = _require_number(thickness, field)
    if thickness <= 0:
        raise InvalidGeometry(f"Thickness must be > 0, got {thickness}", field=field)
    if thickness <= root_face + MIN_GROOVE_DEPTH:
        raise InvalidGeometry(
            f"Thickness {thickness} mm leaves no groove above a {root_face} mm root face",
            field=field,
        )
    return thickness - root_face


# =============================================================================
# CLOSED-FORM HELPERS
# =============================================================================


def circumference(diameter: float) -> float:
    """Weld length around a diameter (mm)."""
    return math.pi * diameter


def bevel_width(depth: float, angle_deg: float) -> float:
    """Horizontal run of one bevel face over ``depth``."""
    return depth * math.tan(math.radians(angle_deg))


def trapezoid_area(top_width: float, bottom_width: float, height: float) -> float:
    return (top_width + bottom_width) / 2 * height


def fillet_leg(throat: float) -> float:
    """Equal-leg fillet leg size from its throat."""
    return throat * math.sqrt(2)


def fillet_area(throat: float) -> float:
    """Cross-sectional area of an equal-leg fillet weld."""
    return 0.5 * throat * throat * FILLET_AREA_FACTOR


# =============================================================================
# JOINT GEOMETRY RECORDS
# =============================================================================


@dataclass(frozen=True)
class JointGeometry:
    """Base for frozen joint geometry records (nozzle, seam, ...)."""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]):
        """Build from a mapping; missing fields keep their defaults."""
        names = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - names)
        if unknown:
            raise InvalidConfiguration(f"Unknown {cls.__name__} fields: {unknown}", field="geometry")
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            data[f.name] = value.value if isinstance(value, Enum) else value
        return data

    def replace(self, **changes: Any):
        """Copy with some fields changed."""
        return replace(self, **changes)


# =============================================================================
# GROOVE SECTION
# =============================================================================


@dataclass(frozen=True)
class GrooveSection:
    """
    One side of a weld groove.

    Attributes:
        depth: Bevel depth measured from the root (mm)
        angle: Bevel angle (degrees)
        root_gap: Gap at the root (mm)
        root_face: Height of the root-face land assigned to this side (mm)
        bevel_faces: Number of bevelled faces widening the groove (2 for a
            symmetric V, 1 for a bevel against a square face)
    """

    depth: float
    angle: float
    root_gap: float
    root_face: float = 0.0
    bevel_faces: int = 2

    @property
    def widening(self) -> float:
        """Width gained per mm of depth."""
        return self.bevel_faces * math.tan(math.radians(self.angle))

    @property
    def top_width(self) -> float:
        return self.width_at(self.depth)

    @property
    def bevel_area(self) -> float:
        return self.band_area(0.0, self.depth)

    @property
    def root_face_area(self) -> float:
        return self.root_gap * self.root_face

    @property
    def area(self) -> float:
        """Bevel trapezoid plus root-face land."""
        return self.bevel_area + self.root_face_area

    def width_at(self, depth: float) -> float:
        """
        Groove width at ``depth`` above the root.

        Raises:
            InvalidGeometry: If depth lies outside [0, self.depth]
        """
        if depth < -DEPTH_TOLERANCE or depth > self.depth + DEPTH_TOLERANCE:
            raise InvalidGeometry(f"Depth {depth} mm is outside the groove (0 to {self.depth:.3f} mm)", field="depth")
        return self.root_gap + depth * self.widening

    def depth_at_width(self, width: float) -> float:
        """Depth at which the groove reaches ``width``, clamped to the section."""
        if width <= self.root_gap:
            return 0.0
        if self.widening <= 0:
            return self.depth
        return min(self.depth, (width - self.root_gap) / self.widening)

    def band_area(self, start_depth: float, end_depth: float) -> float:
        """Bevel area between two depths (excludes the root-face land)."""
        half_widening = self.widening / 2
        return self.root_gap * (end_depth - start_depth) + half_widening * (end_depth**2 - start_depth**2)

    def layer_bands(self, layers: Sequence[ProcessLayer]) -> list[tuple[ProcessLayer, float, float]]:
        """
        Split the bevel depth into the bands owned by each process layer.

        Layer i owns the depths where the groove width falls in
        [min_width_i, min_width_i+1). Bands that the groove never reaches have
        zero thickness.

        Returns:
            List of (layer, start_depth, end_depth), one per layer, root first
        """
        bounds = np.array(layer_width_bands(layers), dtype=float)
        if self.widening > 0:
            depths = np.clip((bounds - self.root_gap) / self.widening, 0.0, self.depth)
        else:
            # Parallel-sided groove: the layer owning the root gap takes the whole depth
            depths = np.where(bounds <= self.root_gap, 0.0, self.depth)
        return [
            (layer, float(start), float(end))
            for layer, (start, end) in zip(layers, depths, strict=True)
        ]

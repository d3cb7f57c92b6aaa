"""
Process zones of a multi-process groove.

The groove is cut into one zone per process layer: zone i covers the
depths where the groove width lies in [min_width_i, min_width_i+1). Zones
the groove never reaches are dropped. Since zone limits depend only on
width, a thicker plate can only grow each zone, never shrink it.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from .geometry import GrooveSection
from .processes import ProcessLayer, WeldProcess, select_process_layer
from .settings import WeldSettings
from .timing import estimate_region


@dataclass(frozen=True)
class GrooveZone:
    """
    One width band of a groove.

    Attributes:
        process: Process of the layer owning the band
        start_depth / end_depth: Band limits above the root (mm)
        start_width / end_width: Groove width at the band limits (mm)
        volume: Deposited volume, including the root-face land for the root zone
        passes: Whole passes
        hours: Labor hours with the operator factor
    """

    process: WeldProcess
    start_depth: float
    end_depth: float
    start_width: float
    end_width: float
    volume: float
    passes: int
    hours: float


def groove_zones(
    section: GrooveSection,
    layers: Sequence[ProcessLayer],
    weld_length: float,
    thickness: float,
    settings: WeldSettings,
    side: str = "inside",
) -> tuple[GrooveZone, ...]:
    """
    Split a groove section into process zones and estimate each one.

    The root-face land is added to the zone of the layer selected at the
    root gap width.

    Args:
        section: Groove section to fill
        layers: Process layers sorted by min_width
        weld_length: Weld length (mm)
        thickness: Plate thickness selecting speed and factor bands
        settings: Shared process settings
        side: Operator factor side ("inside" or "outside")

    Returns:
        Non-empty zones, root first
    """
    root_layer = select_process_layer(layers, section.root_gap)
    zones = []
    for layer, start, end in section.layer_bands(layers):
        area = section.band_area(start, end) if end > start else 0.0
        if layer is root_layer:
            area += section.root_face_area
        if area == 0:
            continue
        region = estimate_region(area * weld_length, layer.process, weld_length, thickness, settings, side)
        zones.append(
            GrooveZone(
                process=layer.process,
                start_depth=start,
                end_depth=end,
                start_width=section.width_at(start),
                end_width=section.width_at(end),
                volume=region.volume,
                passes=region.passes,
                hours=region.hours,
            )
        )
    return tuple(zones)


def zone_hours(zones: Sequence[GrooveZone]) -> float:
    return math.fsum(zone.hours for zone in zones)


def zone_volume(zones: Sequence[GrooveZone]) -> float:
    return math.fsum(zone.volume for zone in zones)

"""
Welding processes and width-based process layers.

A process layer assigns a welding process to every part of a groove that
is at least ``min_width`` wide. The layers of a groove are validated and
sorted here, and the selector picks the layer that applies at a given
groove width.

Example:
    >>> layers = normalize_layers([("GTAW", 0), ("SMAW", 6), ("FCAW", 20)])
    >>> select_process_layer(layers, 10.0).process
    <WeldProcess.SMAW: 'SMAW'>
"""

from __future__ import annotations

import math
import warnings
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum

from .errors import InvalidConfiguration

# =============================================================================
# PROCESS ENUMERATION
# =============================================================================


class WeldProcess(str, Enum):
    """Arc welding processes known to the estimator.

    SKIP is a placeholder a process plan may carry for an unused zone. It
    never deposits metal and is rejected anywhere a real process is needed.
    """

    GTAW = "GTAW"
    SMAW = "SMAW"
    FCAW = "FCAW"
    GMAW = "GMAW"
    SAW = "SAW"
    SKIP = "Skip"


WELDING_PROCESSES: tuple[WeldProcess, ...] = tuple(p for p in WeldProcess if p is not WeldProcess.SKIP)


def parse_process(value: WeldProcess | str, field: str = "process") -> WeldProcess:
    """
    Coerce a process label into a WeldProcess.

    Args:
        value: WeldProcess member or its label (case-insensitive, e.g. "fcaw")
        field: Input field name reported on failure

    Returns:
        The matching WeldProcess

    Raises:
        InvalidConfiguration: If the label is not a known process
    """
    if isinstance(value, WeldProcess):
        return value
    if isinstance(value, str):
        label = value.strip().upper()
        for process in WeldProcess:
            if process.value.upper() == label:
                return process
    raise InvalidConfiguration(f"Unknown welding process {value!r}", field=field)


def require_welding_process(value: WeldProcess | str, field: str = "process") -> WeldProcess:
    """Parse a process label and reject the SKIP placeholder."""
    process = parse_process(value, field)
    if process is WeldProcess.SKIP:
        raise InvalidConfiguration("'Skip' is not a welding process", field=field)
    return process


# =============================================================================
# PROCESS LAYERS
# =============================================================================


@dataclass(frozen=True)
class ProcessLayer:
    """
    Width rule for a welding process.

    Attributes:
        process: Process used once the groove is at least min_width wide
        min_width: Groove width (mm) at which this process takes over
    """

    process: WeldProcess
    min_width: float

    def __post_init__(self):
        # Accept labels from YAML / form input
        if not isinstance(self.process, WeldProcess):
            object.__setattr__(self, "process", parse_process(self.process, "process"))


def _to_layer(value: ProcessLayer | Mapping | Sequence) -> ProcessLayer:
    if isinstance(value, ProcessLayer):
        return value
    if isinstance(value, Mapping):
        if "process" not in value or "min_width" not in value:
            raise InvalidConfiguration(
                f"Process layer needs 'process' and 'min_width', got {dict(value)}",
                field="inside_layers",
            )
        return ProcessLayer(process=value["process"], min_width=value["min_width"])
    if isinstance(value, Sequence) and not isinstance(value, str) and len(value) == 2:
        return ProcessLayer(process=value[0], min_width=value[1])
    raise InvalidConfiguration(f"Cannot read process layer from {value!r}", field="inside_layers")


def normalize_layers(
    layers: Iterable[ProcessLayer | Mapping | Sequence],
    field: str = "inside_layers",
) -> tuple[ProcessLayer, ...]:
    """
    Validate a process plan and sort it by ascending minimum width.

    Args:
        layers: Layers in any order; dicts and (process, min_width) pairs are accepted
        field: Input field name reported on failure

    Returns:
        Tuple of layers sorted by min_width

    Raises:
        InvalidConfiguration: If the plan is empty, contains SKIP or an unknown
            process, or has negative, non-finite or duplicate minimum widths
    """
    parsed = [_to_layer(layer) for layer in layers]
    if not parsed:
        raise InvalidConfiguration("At least one process layer is required", field=field)

    checked: list[ProcessLayer] = []
    for layer in parsed:
        process = require_welding_process(layer.process, field)
        try:
            min_width = float(layer.min_width)
        except (TypeError, ValueError):
            raise InvalidConfiguration(
                f"Minimum width must be a number, got {layer.min_width!r}", field=field
            ) from None
        if not math.isfinite(min_width) or min_width < 0:
            raise InvalidConfiguration(f"Minimum width must be >= 0, got {layer.min_width}", field=field)
        checked.append(ProcessLayer(process=process, min_width=min_width))

    widths = [layer.min_width for layer in checked]
    if len(set(widths)) != len(widths):
        raise InvalidConfiguration(f"Duplicate minimum widths in process layers: {sorted(widths)}", field=field)

    return tuple(sorted(checked, key=lambda layer: layer.min_width))


def select_process_layer(layers: Sequence[ProcessLayer], width: float) -> ProcessLayer:
    """
    Select the layer that applies at a groove width.

    The layer with the largest min_width that does not exceed ``width`` wins.
    When the groove is narrower than every layer the narrowest layer is used
    and a warning is emitted.

    Args:
        layers: Layers sorted by ascending min_width (see normalize_layers)
        width: Groove width in mm

    Returns:
        The applicable ProcessLayer

    Raises:
        InvalidConfiguration: If ``layers`` is empty
    """
    if not layers:
        raise InvalidConfiguration("At least one process layer is required", field="inside_layers")

    selected: ProcessLayer | None = None
    for layer in layers:
        if layer.min_width <= width:
            selected = layer
        else:
            break

    if selected is None:
        warnings.warn(
            f"Groove width {width:.2f} mm is narrower than every process layer; "
            f"using {layers[0].process.value} (min width {layers[0].min_width} mm).",
            stacklevel=2,
        )
        return layers[0]
    return selected


def layer_width_bands(layers: Sequence[ProcessLayer]) -> list[tuple[float, float]]:
    """
    Width interval owned by each layer: [min_width_i, min_width_i+1).

    The narrowest layer also owns everything below its min_width (the
    selector's fallback) and the widest layer is unbounded above.
    """
    bands: list[tuple[float, float]] = []
    for i in range(len(layers)):
        lower = -math.inf if i == 0 else layers[i].min_width
        upper = layers[i + 1].min_width if i + 1 < len(layers) else math.inf
        bands.append((lower, upper))
    return bands


# =============================================================================
# DEFAULT PROCESS PLANS
# =============================================================================

DEFAULT_NOZZLE_LAYERS: tuple[ProcessLayer, ...] = (
    ProcessLayer(WeldProcess.GTAW, 0.0),   # root
    ProcessLayer(WeldProcess.SMAW, 6.0),
    ProcessLayer(WeldProcess.FCAW, 20.0),
)

DEFAULT_SEAM_LAYERS: tuple[ProcessLayer, ...] = (
    ProcessLayer(WeldProcess.GTAW, 0.0),
    ProcessLayer(WeldProcess.SMAW, 8.0),
    ProcessLayer(WeldProcess.SAW, 15.0),
)

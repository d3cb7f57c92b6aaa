"""
Base class for estimated weld items.

A weld item owns its inputs and two derived caches: the calculation
results and the activity code breakdown. The caches are recomputed
together whenever a public input is reassigned, and a rejected input
leaves the item exactly as it was.

Example:
    item = NozzleItem(tag="N1", quantity=2)
    item.results.times.total
    item.geometry = item.geometry.replace(shell_thickness=40)  # recomputes
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar

from .activity_codes import ActivityCodeBreakdown
from .errors import InvalidConfiguration
from .settings import DEFAULT_SETTINGS, WeldSettings


def _new_id() -> str:
    return uuid.uuid4().hex[:9]


def coerce_settings(value: WeldSettings | Mapping | None) -> WeldSettings:
    """Accept WeldSettings, a settings mapping, or None for the defaults."""
    if value is None:
        return DEFAULT_SETTINGS
    if isinstance(value, WeldSettings):
        return value
    if isinstance(value, Mapping):
        return WeldSettings.from_dict(value)
    raise InvalidConfiguration(f"Cannot read settings from {type(value).__name__}", field="settings")


def coerce_record(value: Any, cls: type, field_name: str):
    """Accept an instance of ``cls`` or a mapping passed to ``cls.from_dict``."""
    if isinstance(value, cls):
        return value
    if isinstance(value, Mapping):
        return cls.from_dict(value)
    raise InvalidConfiguration(
        f"Expected {cls.__name__} or a mapping, got {type(value).__name__}", field=field_name
    )


@dataclass(eq=False)
class WeldItem(ABC):
    """
    Common identity, quantity and cache handling for weld items.

    Subclasses declare their inputs as dataclass fields, coerce them in
    ``_normalize`` and implement ``calculate`` and ``calculate_activity_codes``.

    Attributes:
        tag: Display tag (e.g. "N1", "S1-LS")
        quantity: Number of identical welds (positive integer). Results are
            always per single weld.
        settings: Shared process settings
        id: Generated identifier
    """

    module_id: ClassVar[str] = ""
    module_name: ClassVar[str] = ""

    tag: str = ""
    quantity: int = 1
    settings: WeldSettings = field(default_factory=lambda: DEFAULT_SETTINGS, repr=False)
    id: str = field(default_factory=_new_id)

    _results: Any = field(default=None, init=False, repr=False)
    _activity_codes: ActivityCodeBreakdown | None = field(default=None, init=False, repr=False)
    _ready: bool = field(default=False, init=False, repr=False)

    def __post_init__(self):
        self._normalize()
        self.recompute()
        self._ready = True

    # -------------------------------------------------------------------------
    # Input handling
    # -------------------------------------------------------------------------

    def _normalize(self) -> None:
        """Coerce and validate inputs. Subclasses extend this and call super()."""
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity < 1:
            raise InvalidConfiguration(f"Quantity must be a positive integer, got {self.quantity!r}", field="quantity")
        self.tag = "" if self.tag is None else str(self.tag)
        self.settings = coerce_settings(self.settings)

    def _input_names(self) -> list[str]:
        return [f.name for f in fields(self) if not f.name.startswith("_")]

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_") or not getattr(self, "_ready", False):
            object.__setattr__(self, name, value)
            return

        previous = {key: getattr(self, key) for key in self._input_names()}
        object.__setattr__(self, "_ready", False)
        try:
            object.__setattr__(self, name, value)
            self._normalize()
            self.recompute()
        except Exception:
            for key, old in previous.items():
                object.__setattr__(self, key, old)
            raise
        finally:
            object.__setattr__(self, "_ready", True)

    # -------------------------------------------------------------------------
    # Derived caches
    # -------------------------------------------------------------------------

    @abstractmethod
    def calculate(self) -> Any:
        """Compute per-weld results from the current inputs."""

    @abstractmethod
    def calculate_activity_codes(self, results: Any) -> ActivityCodeBreakdown:
        """Redistribute fixed and computed times into activity codes."""

    def recompute(self) -> None:
        """Replace both derived caches from the current inputs."""
        results = self.calculate()
        codes = self.calculate_activity_codes(results)
        object.__setattr__(self, "_results", results)
        object.__setattr__(self, "_activity_codes", codes)

    @property
    def results(self) -> Any:
        return self._results

    @property
    def activity_codes(self) -> ActivityCodeBreakdown:
        return self._activity_codes

    @property
    def total_hours(self) -> float:
        """Per-weld labor hours (sum of activity codes)."""
        return self._activity_codes.total

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], settings: WeldSettings | None = None):
        """
        Build an item from YAML/JSON shaped data.

        Args:
            data: Field values; nested geometry, layers and times may be plain dicts
            settings: Shared settings used when ``data`` has none

        Raises:
            InvalidConfiguration: If ``data`` names an unknown field
        """
        names = {f.name for f in fields(cls) if f.init}
        unknown = sorted(set(data) - names)
        if unknown:
            raise InvalidConfiguration(f"Unknown {cls.__name__} fields: {unknown}", field="item")
        kwargs = dict(data)
        if settings is not None:
            kwargs.setdefault("settings", settings)
        return cls(**kwargs)

"""
Activity code aggregation.

Every weld type redistributes its time breakdown (fixed allowances plus
computed arc hours) into a small set of cost-accounting codes. The
redistribution is a table of rules, code -> source names, applied to a flat
mapping of sources. Each source is consumed by exactly one code, so the
codes always add up to the total time.

Example:
    >>> codes = ActivityCodeMap([
    ...     ActivityCodeRule("FIT", ("fit_up",)),
    ...     ActivityCodeRule("WELD", ("inside_weld", "outside_weld")),
    ... ])
    >>> breakdown = codes.apply({"fit_up": 1.0, "inside_weld": 2.0, "outside_weld": 0.5})
    >>> breakdown["WELD"], breakdown.total
    (2.5, 3.5)
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .errors import InvalidConfiguration


@dataclass(frozen=True)
class ActivityCodeRule:
    """
    One activity code and the time sources it collects.

    Attributes:
        code: Accounting code (e.g. "WNOZZ")
        sources: Names of the time sources summed into this code
        description: Human-readable label
    """

    code: str
    sources: tuple[str, ...]
    description: str = ""

    def __post_init__(self):
        object.__setattr__(self, "sources", tuple(self.sources))


class ActivityCodeBreakdown(Mapping[str, float]):
    """Immutable code -> hours mapping in rule order."""

    __slots__ = ("_hours",)

    def __init__(self, hours: Mapping[str, float]):
        self._hours = MappingProxyType(dict(hours))

    def __getitem__(self, code: str) -> float:
        return self._hours[code]

    def __iter__(self) -> Iterator[str]:
        return iter(self._hours)

    def __len__(self) -> int:
        return len(self._hours)

    def __repr__(self) -> str:
        return f"ActivityCodeBreakdown({dict(self._hours)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Mapping):
            return dict(self._hours) == dict(other)
        return NotImplemented

    __hash__ = None

    @property
    def total(self) -> float:
        """Sum of all codes (hours)."""
        return math.fsum(self._hours.values())

    def scaled(self, factor: float) -> ActivityCodeBreakdown:
        """Every code multiplied by ``factor`` (e.g. an item quantity)."""
        return ActivityCodeBreakdown({code: hours * factor for code, hours in self._hours.items()})

    def to_dict(self) -> dict[str, float]:
        return dict(self._hours)


class ActivityCodeMap:
    """
    Ordered set of activity code rules.

    Raises:
        InvalidConfiguration: If a code is repeated or a source is assigned
            to more than one code
    """

    def __init__(self, rules: Iterable[ActivityCodeRule]):
        self.rules: tuple[ActivityCodeRule, ...] = tuple(rules)
        if not self.rules:
            raise InvalidConfiguration("An activity code map needs at least one rule", field="activity_codes")

        codes = [rule.code for rule in self.rules]
        if len(set(codes)) != len(codes):
            raise InvalidConfiguration(f"Duplicate activity codes: {codes}", field="activity_codes")

        owner: dict[str, str] = {}
        for rule in self.rules:
            for source in rule.sources:
                if source in owner:
                    raise InvalidConfiguration(
                        f"Source '{source}' is assigned to both {owner[source]} and {rule.code}",
                        field="activity_codes",
                    )
                owner[source] = rule.code
        self._owner = owner

    @property
    def codes(self) -> tuple[str, ...]:
        return tuple(rule.code for rule in self.rules)

    @property
    def sources(self) -> frozenset[str]:
        return frozenset(self._owner)

    def code_for(self, source: str) -> str:
        return self._owner[source]

    def apply(self, sources: Mapping[str, float]) -> ActivityCodeBreakdown:
        """
        Sum time sources into activity codes.

        Args:
            sources: Hours for every source named by the rules

        Returns:
            ActivityCodeBreakdown with one entry per rule

        Raises:
            InvalidConfiguration: If a source is missing or not mapped to any code
        """
        missing = sorted(self.sources - set(sources))
        if missing:
            raise InvalidConfiguration(f"Missing time sources: {missing}", field="activity_codes")
        unmapped = sorted(set(sources) - self.sources)
        if unmapped:
            raise InvalidConfiguration(f"Time sources without an activity code: {unmapped}", field="activity_codes")

        return ActivityCodeBreakdown(
            {rule.code: math.fsum(sources[name] for name in rule.sources) for rule in self.rules}
        )

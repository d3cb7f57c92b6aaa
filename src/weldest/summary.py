"""
Project rollups of weld item activity codes.

Item results are always per single weld. The rollup multiplies each
item's activity codes by its quantity, sums them per module (nozzles,
long seams, ...) and across modules, and reports each code's share of the
grand total.

This module provides:
- ItemLine: One weld row with per-unit and extended hours
- ModuleSummary: Totals for the items of one module
- ProjectSummary: Totals across modules with a percentage breakdown
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from .engine.item import WeldItem

# =============================================================================
# DATA STRUCTURES
# =============================================================================


@dataclass(frozen=True)
class ItemLine:
    """One weld row of a module summary."""

    item_id: str
    tag: str
    quantity: int
    hours_per_unit: float
    total_hours: float


@dataclass(frozen=True)
class ModuleSummary:
    """
    Totals for one weld-type module.

    Attributes:
        module_id: Module key (e.g. "nozzles")
        module_name: Display name
        item_count: Number of welds (sum of quantities)
        total_hours: Hours for all welds
        activity_breakdown: Hours per activity code for all welds
        lines: Per-item lines in input order
    """

    module_id: str
    module_name: str
    item_count: int
    total_hours: float
    activity_breakdown: dict[str, float] = field(default_factory=dict)
    lines: tuple[ItemLine, ...] = ()


@dataclass(frozen=True)
class CodeShare:
    code: str
    hours: float
    percentage: float


@dataclass(frozen=True)
class ProjectSummary:
    """Totals across modules; ``breakdown`` is sorted by hours, largest first."""

    modules: tuple[ModuleSummary, ...]
    item_count: int
    total_hours: float
    breakdown: tuple[CodeShare, ...]

    def module(self, module_id: str) -> ModuleSummary:
        for summary in self.modules:
            if summary.module_id == module_id:
                return summary
        raise KeyError(module_id)

    @property
    def activity_breakdown(self) -> dict[str, float]:
        return {share.code: share.hours for share in self.breakdown}


# =============================================================================
# AGGREGATION
# =============================================================================


def _add_codes(totals: dict[str, float], codes: Mapping[str, float]) -> None:
    for code, hours in codes.items():
        totals[code] = totals.get(code, 0.0) + hours


def summarize_module(
    items: Iterable[WeldItem],
    module_id: str | None = None,
    module_name: str | None = None,
) -> ModuleSummary:
    """
    Sum the activity codes of one module's items, scaled by quantity.

    Args:
        items: Weld items of one module
        module_id: Module key; defaults to the items' ``module_id``
        module_name: Display name; defaults to the items' ``module_name``

    Returns:
        ModuleSummary (empty totals when there are no items)
    """
    items = list(items)
    if items:
        module_id = module_id or items[0].module_id
        module_name = module_name or items[0].module_name

    breakdown: dict[str, float] = {}
    lines = []
    for item in items:
        scaled = item.activity_codes.scaled(item.quantity)
        _add_codes(breakdown, scaled)
        lines.append(
            ItemLine(
                item_id=item.id,
                tag=item.tag,
                quantity=item.quantity,
                hours_per_unit=item.total_hours,
                total_hours=scaled.total,
            )
        )

    return ModuleSummary(
        module_id=module_id or "",
        module_name=module_name or module_id or "",
        item_count=sum(item.quantity for item in items),
        total_hours=math.fsum(line.total_hours for line in lines),
        activity_breakdown=breakdown,
        lines=tuple(lines),
    )


def summarize_project(modules: Iterable[ModuleSummary]) -> ProjectSummary:
    """
    Combine module summaries into project totals.

    Percentages are hours per code / grand total hours * 100 (0 when the
    project has no hours).
    """
    modules = tuple(modules)
    totals: dict[str, float] = {}
    for summary in modules:
        _add_codes(totals, summary.activity_breakdown)

    grand_total = math.fsum(summary.total_hours for summary in modules)
    shares = [
        CodeShare(code=code, hours=hours, percentage=hours / grand_total * 100 if grand_total > 0 else 0.0)
        for code, hours in totals.items()
    ]
    shares.sort(key=lambda share: share.hours, reverse=True)

    return ProjectSummary(
        modules=modules,
        item_count=sum(summary.item_count for summary in modules),
        total_hours=grand_total,
        breakdown=tuple(shares),
    )

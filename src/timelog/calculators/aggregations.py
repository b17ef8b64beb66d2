"""Per-project, per-developer and per-day rollups of entries and costs."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Union

from timelog.calculators.durations import entry_date_key
from timelog.calculators.types import (
    DailySummary,
    DeveloperSummary,
    EntryCost,
    ProjectSummary,
)
from timelog.config import get_settings

if TYPE_CHECKING:
    from timelog.models import TimeEntry

Summary = Union[ProjectSummary, DeveloperSummary, DailySummary]


def aggregate_by_project(
    entries: Iterable[TimeEntry],
    costs: Iterable[EntryCost],
) -> list[ProjectSummary]:
    """Aggregate entries by project, in first-seen order."""
    cost_map = _cost_lookup(costs)
    projects: dict[str, ProjectSummary] = {}

    for entry in entries:
        cost = cost_map.get(entry.id)
        summary = projects.get(entry.project_id)
        if summary is None:
            summary = ProjectSummary(
                project_id=entry.project_id,
                currency=_currency_for(cost),
            )
            projects[entry.project_id] = summary
        _accumulate(summary, entry, cost)

    return list(projects.values())


def aggregate_by_developer(
    entries: Iterable[TimeEntry],
    costs: Iterable[EntryCost],
) -> list[DeveloperSummary]:
    """Aggregate entries by developer, with a per-project minutes breakdown."""
    cost_map = _cost_lookup(costs)
    developers: dict[str, DeveloperSummary] = {}

    for entry in entries:
        cost = cost_map.get(entry.id)
        summary = developers.get(entry.developer_id)
        if summary is None:
            summary = DeveloperSummary(
                developer_id=entry.developer_id,
                currency=_currency_for(cost),
            )
            developers[entry.developer_id] = summary
        _accumulate(summary, entry, cost)
        summary.project_breakdown[entry.project_id] = (
            summary.project_breakdown.get(entry.project_id, 0) + entry.duration_minutes
        )

    return list(developers.values())


def aggregate_by_day(
    entries: Iterable[TimeEntry],
    costs: Iterable[EntryCost],
) -> list[DailySummary]:
    """Aggregate entries by the UTC date they start on, sorted by date."""
    cost_map = _cost_lookup(costs)
    days: dict[str, DailySummary] = {}

    for entry in entries:
        cost = cost_map.get(entry.id)
        date_key = entry_date_key(entry)
        summary = days.get(date_key)
        if summary is None:
            summary = DailySummary(date=date_key, currency=_currency_for(cost))
            days[date_key] = summary
        _accumulate(summary, entry, cost)

    return sorted(days.values(), key=lambda day: day.date)


def _cost_lookup(costs: Iterable[EntryCost]) -> dict[str, EntryCost]:
    return {cost.entry_id: cost for cost in costs}


def _currency_for(cost: EntryCost | None) -> str:
    if cost is not None:
        return cost.currency
    return get_settings().default_currency


def _accumulate(summary: Summary, entry: TimeEntry, cost: EntryCost | None) -> None:
    summary.total_minutes += entry.duration_minutes
    if entry.billable:
        summary.billable_minutes += entry.duration_minutes
    else:
        summary.non_billable_minutes += entry.duration_minutes

    if cost is not None and entry.billable:
        summary.total_cost += cost.cost

    summary.entry_count += 1

"""Timesheets and time categories."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from timelog.models.time_entry import TimeCategoryType, TimeEntry, TimeEntryStatus


@dataclass(frozen=True)
class Timesheet:
    """A developer's entries for one period.

    The minute totals are denormalized; callers recompute them with
    ``recalculate_timesheet_totals`` after changing ``entries``.
    """

    id: str
    developer_id: str
    period_start: datetime
    period_end: datetime
    status: TimeEntryStatus = TimeEntryStatus.DRAFT
    entries: tuple[TimeEntry, ...] = ()
    client_id: str | None = None
    total_minutes: int = 0
    billable_minutes: int = 0
    non_billable_minutes: int = 0
    submitted_at: datetime | None = None
    approved_at: datetime | None = None
    approved_by: str | None = None


@dataclass(frozen=True)
class TimeCategory:
    """A named category entries can be filed under."""

    id: str
    name: str
    type: TimeCategoryType
    billable: bool
    color: str
    description: str | None = None
    is_active: bool = True

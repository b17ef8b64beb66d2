"""Duration rounding, bounds validation and overlap detection."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import replace
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from enum import IntEnum
from typing import TYPE_CHECKING

from timelog.calculators.types import ValidationResult
from timelog.errors import InvalidDurationError, OverlapError

if TYPE_CHECKING:
    from timelog.models import TimeEntry, TimeLock, Timesheet

MAX_ENTRY_MINUTES = 1440  # 24 hours


class RoundingInterval(IntEnum):
    """Granularities (in minutes) that durations can be rounded to."""

    NONE = 0
    ONE_MINUTE = 1
    FIVE_MINUTES = 5
    SIX_MINUTES = 6  # 1/10th of an hour
    FIFTEEN_MINUTES = 15  # Quarter hour


def to_utc(value: datetime) -> datetime:
    """Convert an aware datetime to UTC; naive datetimes are returned as is.

    Instants passed to the core must be all aware or all naive. Aware
    instants are compared and subtracted in UTC, so two local times that
    share a tzinfo compare by the instant they name, not by wall clock.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc)


def round_duration(minutes: int, interval: int) -> int:
    """Round minutes to the nearest multiple of interval, halves rounding up.

    An interval of 0 leaves the duration untouched.
    """
    if interval == RoundingInterval.NONE:
        return minutes
    steps = (Decimal(minutes) / Decimal(int(interval))).quantize(
        Decimal("1"), rounding=ROUND_HALF_UP
    )
    return int(steps) * int(interval)


def calculate_duration(start_at: datetime, end_at: datetime) -> int:
    """Whole minutes elapsed between two instants, regardless of order.

    Aware datetimes are normalized to UTC first, so a DST change between
    the two does not add or remove an hour.
    """
    elapsed = abs(to_utc(end_at) - to_utc(start_at))
    return int(elapsed.total_seconds() // 60)


def validate_duration(start_at: datetime, end_at: datetime) -> ValidationResult:
    """Check the duration bounds of an entry interval."""
    if (start_at.tzinfo is None) != (end_at.tzinfo is None):
        return ValidationResult(
            valid=False, error="Start and end times must both include a time zone"
        )

    if to_utc(end_at) <= to_utc(start_at):
        return ValidationResult(valid=False, error="End time must be after start time")

    duration = calculate_duration(start_at, end_at)

    if duration > MAX_ENTRY_MINUTES:
        return ValidationResult(valid=False, error="Time entry cannot exceed 24 hours")

    if duration < 1:
        return ValidationResult(valid=False, error="Time entry must be at least 1 minute")

    return ValidationResult(valid=True)


def require_valid_duration(start_at: datetime, end_at: datetime) -> None:
    """Validate duration bounds, raising InvalidDurationError if violated."""
    result = validate_duration(start_at, end_at)
    if not result.valid:
        raise InvalidDurationError(result.error or "Invalid duration", start_at, end_at)


def intervals_overlap(
    start_a: datetime,
    end_a: datetime,
    start_b: datetime,
    end_b: datetime,
    inclusive: bool = False,
) -> bool:
    """Check whether two intervals share an instant.

    With ``inclusive=False`` intervals that only touch at a boundary do not
    overlap; with ``inclusive=True`` they do.
    """
    start_a, end_a = to_utc(start_a), to_utc(end_a)
    start_b, end_b = to_utc(start_b), to_utc(end_b)
    if inclusive:
        return start_a <= end_b and start_b <= end_a
    return start_a < end_b and start_b < end_a


def detect_overlap(first: TimeEntry, second: TimeEntry) -> bool:
    """Check if two entries overlap. Adjacent entries do not."""
    return intervals_overlap(
        first.start_at, first.end_at, second.start_at, second.end_at, inclusive=False
    )


def find_overlaps(entries: Sequence[TimeEntry]) -> list[tuple[str, str]]:
    """Return the id pairs of every overlapping pair of entries, in input order."""
    overlaps: list[tuple[str, str]] = []

    for i in range(len(entries)):
        for j in range(i + 1, len(entries)):
            if detect_overlap(entries[i], entries[j]):
                overlaps.append((entries[i].id, entries[j].id))

    return overlaps


def assert_no_overlaps(entries: Sequence[TimeEntry]) -> None:
    """Raise OverlapError listing every overlapping pair, if any."""
    overlaps = find_overlaps(entries)
    if overlaps:
        raise OverlapError(overlaps)


def is_period_locked(
    start_at: datetime,
    end_at: datetime,
    locks: Iterable[TimeLock],
) -> bool:
    """Check if any active lock's period touches [start_at, end_at].

    Boundaries count as locked. Lock scope is not considered.
    """
    return any(
        lock.is_active
        and intervals_overlap(
            start_at, end_at, lock.period_start, lock.period_end, inclusive=True
        )
        for lock in locks
    )


def calculate_total_minutes(entries: Iterable[TimeEntry]) -> int:
    """Sum of durations."""
    return sum(entry.duration_minutes for entry in entries)


def calculate_billable_minutes(entries: Iterable[TimeEntry]) -> int:
    """Sum of durations of billable entries."""
    return sum(entry.duration_minutes for entry in entries if entry.billable)


def entry_date_key(entry: TimeEntry) -> str:
    """UTC calendar date (YYYY-MM-DD) of an entry's start."""
    return to_utc(entry.start_at).date().isoformat()


def group_entries_by_date(entries: Iterable[TimeEntry]) -> dict[str, list[TimeEntry]]:
    """Group entries by the UTC date they start on."""
    grouped: dict[str, list[TimeEntry]] = {}
    for entry in entries:
        grouped.setdefault(entry_date_key(entry), []).append(entry)
    return grouped


def recalculate_timesheet_totals(timesheet: Timesheet) -> Timesheet:
    """Return a copy of the timesheet with its minute totals recomputed."""
    total = calculate_total_minutes(timesheet.entries)
    billable = calculate_billable_minutes(timesheet.entries)
    return replace(
        timesheet,
        total_minutes=total,
        billable_minutes=billable,
        non_billable_minutes=total - billable,
    )

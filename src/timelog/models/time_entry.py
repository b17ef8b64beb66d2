"""Time entry records and their lifecycle status."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class TimeEntryStatus(str, Enum):
    """Time entry status values."""

    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    LOCKED = "LOCKED"
    BILLED = "BILLED"


class TimeCategoryType(str, Enum):
    """Kinds of work an entry can be logged against."""

    BILLABLE = "BILLABLE"
    NON_BILLABLE = "NON_BILLABLE"
    INTERNAL = "INTERNAL"
    TRAINING = "TRAINING"
    MEETING = "MEETING"


@dataclass(frozen=True)
class TimeEntry:
    """A single block of logged time.

    The interval is [start_at, end_at). Approval, rejection, lock and billing
    metadata stay ``None`` until the workflow reaches the matching stage.
    """

    id: str
    project_id: str
    developer_id: str
    client_id: str
    start_at: datetime
    end_at: datetime
    duration_minutes: int
    billable: bool = True
    category: TimeCategoryType = TimeCategoryType.BILLABLE
    tags: tuple[str, ...] = ()
    status: TimeEntryStatus = TimeEntryStatus.DRAFT
    task_id: str | None = None
    notes: str | None = None

    approved_by: str | None = None
    approved_at: datetime | None = None
    rejected_by: str | None = None
    rejected_at: datetime | None = None
    rejection_reason: str | None = None
    locked_at: datetime | None = None
    billed_at: datetime | None = None
    invoice_id: str | None = None

    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def create(
        cls,
        id: str,
        project_id: str,
        developer_id: str,
        client_id: str,
        start_at: datetime,
        end_at: datetime,
        billable: bool = True,
        category: TimeCategoryType = TimeCategoryType.BILLABLE,
        tags: tuple[str, ...] | list[str] = (),
        task_id: str | None = None,
        notes: str | None = None,
        created_at: datetime | None = None,
    ) -> TimeEntry:
        """Create a DRAFT entry with a validated, derived duration.

        Raises:
            InvalidDurationError: If the interval is empty, negative,
                shorter than a minute or longer than 24 hours.
        """
        # Import here to avoid circular imports
        from timelog.calculators.durations import (
            calculate_duration,
            require_valid_duration,
        )

        require_valid_duration(start_at, end_at)

        return cls(
            id=id,
            project_id=project_id,
            developer_id=developer_id,
            client_id=client_id,
            start_at=start_at,
            end_at=end_at,
            duration_minutes=calculate_duration(start_at, end_at),
            billable=billable,
            category=category,
            tags=tuple(tags),
            status=TimeEntryStatus.DRAFT,
            task_id=task_id,
            notes=notes,
            created_at=created_at,
            updated_at=created_at,
        )

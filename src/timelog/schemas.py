"""Pydantic schemas for validating raw request payloads.

These run before the core is called; they check shape only. Business rules
(duration bounds, transitions, locks) are enforced again by the core.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from timelog.models import RateCard, TimeCategoryType, TimeEntry, TimeEntryStatus
from timelog.services.locking_service import LockRequest


# ============================================================================
# Time entry schemas
# ============================================================================


class CreateTimeEntryInput(BaseModel):
    """Schema for logging a new time entry."""

    project_id: str = Field(min_length=1)
    task_id: str | None = None
    developer_id: str = Field(min_length=1)
    client_id: str = Field(min_length=1)
    start_at: datetime
    end_at: datetime
    billable: bool = True
    category: TimeCategoryType = TimeCategoryType.BILLABLE
    tags: list[str] = Field(default_factory=list)
    notes: str | None = None

    def to_time_entry(self, entry_id: str, created_at: datetime | None = None) -> TimeEntry:
        """Build a DRAFT entry; duration bounds are validated by the core."""
        return TimeEntry.create(
            id=entry_id,
            project_id=self.project_id,
            developer_id=self.developer_id,
            client_id=self.client_id,
            start_at=self.start_at,
            end_at=self.end_at,
            billable=self.billable,
            category=self.category,
            tags=self.tags,
            task_id=self.task_id,
            notes=self.notes,
            created_at=created_at,
        )


class UpdateTimeEntryInput(BaseModel):
    """Schema for a partial update of an entry."""

    id: str = Field(min_length=1)
    project_id: str | None = Field(default=None, min_length=1)
    task_id: str | None = None
    developer_id: str | None = Field(default=None, min_length=1)
    client_id: str | None = Field(default=None, min_length=1)
    start_at: datetime | None = None
    end_at: datetime | None = None
    billable: bool | None = None
    category: TimeCategoryType | None = None
    tags: list[str] | None = None
    notes: str | None = None


class SubmitTimeEntryInput(BaseModel):
    """Schema for submitting an entry."""

    id: str = Field(min_length=1)


class ApproveTimeEntryInput(BaseModel):
    """Schema for approving an entry."""

    id: str = Field(min_length=1)
    approved_by: str = Field(min_length=1)


class RejectTimeEntryInput(BaseModel):
    """Schema for rejecting an entry."""

    id: str = Field(min_length=1)
    rejected_by: str = Field(min_length=1)
    reason: str = Field(min_length=1)


# ============================================================================
# Timesheet schemas
# ============================================================================


class TimesheetQuery(BaseModel):
    """Schema for selecting a timesheet period."""

    developer_id: str | None = None
    client_id: str | None = None
    project_id: str | None = None
    period_start: datetime
    period_end: datetime
    status: TimeEntryStatus | None = None


# ============================================================================
# Rate card schemas
# ============================================================================


class CreateRateCardInput(BaseModel):
    """Schema for creating a rate card."""

    developer_id: str | None = None
    project_id: str | None = None
    client_id: str | None = None
    hourly_rate: Decimal = Field(gt=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    effective_from: datetime
    effective_to: datetime | None = None

    @model_validator(mode="after")
    def require_scope(self) -> CreateRateCardInput:
        if not (self.developer_id or self.project_id or self.client_id):
            raise ValueError(
                "At least one of developerId, projectId, or clientId must be provided"
            )
        return self

    def to_rate_card(self, card_id: str) -> RateCard:
        """Build an active rate card from the payload."""
        return RateCard(
            id=card_id,
            hourly_rate=self.hourly_rate,
            currency=self.currency.upper(),
            effective_from=self.effective_from,
            effective_to=self.effective_to,
            developer_id=self.developer_id,
            project_id=self.project_id,
            client_id=self.client_id,
        )


# ============================================================================
# Category schemas
# ============================================================================


class CreateTimeCategoryInput(BaseModel):
    """Schema for creating a time category."""

    name: str = Field(min_length=1, max_length=50)
    type: TimeCategoryType
    billable: bool
    color: str = Field(pattern=r"^#[0-9A-Fa-f]{6}$")
    description: str | None = None


# ============================================================================
# Lock schemas
# ============================================================================


class CreateTimeLockInput(BaseModel):
    """Schema for creating a period lock."""

    project_id: str | None = None
    client_id: str | None = None
    period_start: datetime
    period_end: datetime
    reason: str = Field(min_length=1)
    locked_by: str = Field(min_length=1)

    @model_validator(mode="after")
    def require_scope(self) -> CreateTimeLockInput:
        if not (self.project_id or self.client_id):
            raise ValueError("Either projectId or clientId must be provided")
        return self

    def to_lock_request(self) -> LockRequest:
        """Convert to the core lock request."""
        return LockRequest(
            period_start=self.period_start,
            period_end=self.period_end,
            reason=self.reason,
            locked_by=self.locked_by,
            project_id=self.project_id,
            client_id=self.client_id,
        )


# ============================================================================
# Query and filter schemas
# ============================================================================


class PaginationParams(BaseModel):
    """Schema for paging through list results."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)
    sort_by: str | None = None
    sort_order: Literal["asc", "desc"] = "desc"


class TimeEntryFilter(PaginationParams):
    """Schema for filtering time entry listings."""

    developer_id: str | None = None
    client_id: str | None = None
    project_id: str | None = None
    task_id: str | None = None
    status: TimeEntryStatus | None = None
    billable: bool | None = None
    category: TimeCategoryType | None = None
    tags: list[str] | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None

"""Type definitions for validation results and the finance pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from timelog.models import TimeEntry


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a non-raising business rule check."""

    valid: bool
    error: str | None = None


@dataclass(frozen=True)
class EntryCost:
    """Cost of one billable entry at its resolved rate."""

    entry_id: str
    project_id: str
    developer_id: str
    original_minutes: int
    rounded_minutes: int
    hourly_rate: Decimal
    currency: str
    cost: Decimal  # Rounded to cents


@dataclass
class ProjectSummary:
    """Minutes and cost totals for one project."""

    project_id: str
    currency: str
    total_minutes: int = 0
    billable_minutes: int = 0
    non_billable_minutes: int = 0
    total_cost: Decimal = Decimal("0")
    entry_count: int = 0


@dataclass
class DeveloperSummary:
    """Minutes and cost totals for one developer."""

    developer_id: str
    currency: str
    total_minutes: int = 0
    billable_minutes: int = 0
    non_billable_minutes: int = 0
    total_cost: Decimal = Decimal("0")
    entry_count: int = 0
    project_breakdown: dict[str, int] = field(default_factory=dict)  # project_id -> minutes


@dataclass
class DailySummary:
    """Minutes and cost totals for one UTC calendar date."""

    date: str  # YYYY-MM-DD
    currency: str
    total_minutes: int = 0
    billable_minutes: int = 0
    non_billable_minutes: int = 0
    total_cost: Decimal = Decimal("0")
    entry_count: int = 0


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of instants."""

    start: datetime
    end: datetime


@dataclass(frozen=True)
class ExportSummary:
    """Headline totals of a finance export."""

    total_entries: int
    total_minutes: int
    billable_minutes: int
    non_billable_minutes: int
    total_cost: Decimal
    currency: str
    date_range: DateRange | None  # None when nothing was exported


@dataclass(frozen=True)
class FinanceExport:
    """Costs plus project, developer and daily aggregations."""

    summary: ExportSummary
    costs: list[EntryCost]
    by_project: list[ProjectSummary]
    by_developer: list[DeveloperSummary]
    by_day: list[DailySummary]


@dataclass(frozen=True)
class InvoiceMapping:
    """Entries bundled for an invoice."""

    invoice_id: str
    client_id: str
    project_ids: list[str]
    date_range: DateRange
    entries: list[TimeEntry]
    total_amount: Decimal
    currency: str

"""Finance export and invoice mapping."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from timelog.calculators.aggregations import (
    aggregate_by_day,
    aggregate_by_developer,
    aggregate_by_project,
)
from timelog.calculators.cost_engine import calculate_entry_costs, round_to_cents
from timelog.calculators.durations import (
    calculate_billable_minutes,
    calculate_total_minutes,
    to_utc,
)
from timelog.calculators.types import (
    DateRange,
    EntryCost,
    ExportSummary,
    FinanceExport,
    InvoiceMapping,
)
from timelog.config import get_settings
from timelog.errors import ValidationError
from timelog.models import TimeEntryStatus

if TYPE_CHECKING:
    from timelog.models import RateCard, TimeEntry

# Only entries past approval are reported to finance
EXPORTABLE_STATUSES = frozenset(
    {
        TimeEntryStatus.APPROVED,
        TimeEntryStatus.LOCKED,
        TimeEntryStatus.BILLED,
    }
)


def generate_finance_export(
    entries: Iterable[TimeEntry],
    rate_cards: Sequence[RateCard],
    rounding_interval: int | None = None,
    include_non_billable: bool = False,
    at_date: datetime | None = None,
) -> FinanceExport:
    """Build the finance export for approved, locked and billed entries.

    Non-billable entries are dropped unless ``include_non_billable`` is set;
    when included they count towards minutes but never towards cost.
    """
    exported = [entry for entry in entries if entry.status in EXPORTABLE_STATUSES]
    if not include_non_billable:
        exported = [entry for entry in exported if entry.billable]

    costs = calculate_entry_costs(
        exported,
        rate_cards,
        rounding_interval=rounding_interval,
        at_date=at_date,
    )

    total_minutes = calculate_total_minutes(exported)
    billable_minutes = calculate_billable_minutes(exported)

    summary = ExportSummary(
        total_entries=len(exported),
        total_minutes=total_minutes,
        billable_minutes=billable_minutes,
        non_billable_minutes=total_minutes - billable_minutes,
        total_cost=round_to_cents(sum((c.cost for c in costs), Decimal("0"))),
        currency=_export_currency(costs),
        date_range=_start_range(exported) if exported else None,
    )

    return FinanceExport(
        summary=summary,
        costs=costs,
        by_project=aggregate_by_project(exported, costs),
        by_developer=aggregate_by_developer(exported, costs),
        by_day=aggregate_by_day(exported, costs),
    )


def map_to_invoice(
    entries: Sequence[TimeEntry],
    costs: Iterable[EntryCost],
    invoice_id: str,
    client_id: str,
) -> InvoiceMapping:
    """Bundle entries and their costs for an invoice.

    The date range spans the entries' ``start_at`` values at both ends; an
    entry's ``end_at`` never extends it.

    Raises:
        ValidationError: If there are no entries to invoice.
    """
    if not entries:
        raise ValidationError("Cannot map an empty set of entries to an invoice")

    costs = list(costs)
    cost_map = {cost.entry_id: cost for cost in costs}

    total = Decimal("0")
    for entry in entries:
        if not entry.billable:
            continue
        cost = cost_map.get(entry.id)
        if cost is not None:
            total += cost.cost

    return InvoiceMapping(
        invoice_id=invoice_id,
        client_id=client_id,
        project_ids=list(dict.fromkeys(entry.project_id for entry in entries)),
        date_range=_start_range(entries),
        entries=list(entries),
        total_amount=round_to_cents(total),
        currency=_export_currency(costs),
    )


def _start_range(entries: Sequence[TimeEntry]) -> DateRange:
    starts = [entry.start_at for entry in entries]
    return DateRange(start=min(starts, key=to_utc), end=max(starts, key=to_utc))


def _export_currency(costs: Sequence[EntryCost]) -> str:
    if costs:
        return costs[0].currency
    return get_settings().default_currency

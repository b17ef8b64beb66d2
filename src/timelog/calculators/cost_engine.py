"""Cost calculation for billable time entries."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from timelog.calculators.durations import round_duration
from timelog.calculators.rate_resolver import resolve_effective_rate
from timelog.calculators.types import EntryCost
from timelog.config import get_settings

if TYPE_CHECKING:
    from timelog.models import RateCard, TimeEntry

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
MINUTES_PER_HOUR = Decimal("60")


def round_to_cents(amount: Decimal) -> Decimal:
    """Round amount to 2 decimal places, halves rounding up."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def cost_for_minutes(minutes: int, hourly_rate: Decimal) -> Decimal:
    """Price a number of minutes at an hourly rate, rounded to cents."""
    return round_to_cents(Decimal(minutes) * Decimal(hourly_rate) / MINUTES_PER_HOUR)


def calculate_entry_costs(
    entries: Iterable[TimeEntry],
    rate_cards: Sequence[RateCard],
    rounding_interval: int | None = None,
    at_date: datetime | None = None,
) -> list[EntryCost]:
    """Cost every billable entry that has a resolvable rate.

    Non-billable entries are ignored. Billable entries with no matching
    rate card are skipped rather than treated as errors.

    Args:
        entries: Entries to cost
        rate_cards: Candidate rate cards
        rounding_interval: Minutes to round each duration to before pricing,
            defaults to the configured interval (quarter hour)
        at_date: Date the rates must be effective at, defaults to now (UTC)
    """
    if rounding_interval is None:
        rounding_interval = get_settings().rounding_interval
    if at_date is None:
        at_date = datetime.now(timezone.utc)

    costs: list[EntryCost] = []

    for entry in entries:
        if not entry.billable:
            continue

        rate = resolve_effective_rate(entry, rate_cards, at_date)
        if rate is None:
            logger.debug("No rate card resolved for entry %s, skipping", entry.id)
            continue

        rounded_minutes = round_duration(entry.duration_minutes, rounding_interval)

        costs.append(
            EntryCost(
                entry_id=entry.id,
                project_id=entry.project_id,
                developer_id=entry.developer_id,
                original_minutes=entry.duration_minutes,
                rounded_minutes=rounded_minutes,
                hourly_rate=rate.hourly_rate,
                currency=rate.currency,
                cost=cost_for_minutes(rounded_minutes, rate.hourly_rate),
            )
        )

    return costs

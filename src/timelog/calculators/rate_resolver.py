"""Rate card resolution with scope precedence."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from timelog.models import RateCard, TimeEntry


def resolve_effective_rate(
    entry: TimeEntry,
    rate_cards: Sequence[RateCard],
    at_date: datetime | None = None,
) -> RateCard | None:
    """Resolve the rate card that applies to a time entry.

    Rate selection priority:
    1. Only active cards effective at ``at_date`` are candidates
    2. A project match always wins
    3. Otherwise a client match
    4. Otherwise the developer's default card (no project/client set)

    Within a tier the card with the latest ``effective_from`` wins; ties go
    to the first card in input order.

    Args:
        entry: The time entry to resolve a rate for
        rate_cards: All candidate rate cards
        at_date: The effective date for rate lookup, defaults to now (UTC)

    Returns:
        The applicable rate card, or None if no card matches
    """
    if at_date is None:
        at_date = datetime.now(timezone.utc)

    effective = [card for card in rate_cards if card.is_effective_at(at_date)]

    tiers: list[Callable[[RateCard], bool]] = [
        lambda card: card.project_id == entry.project_id,
        lambda card: card.client_id == entry.client_id,
        lambda card: card.is_developer_default and card.developer_id == entry.developer_id,
    ]

    for matches in tiers:
        best = _latest_effective([card for card in effective if matches(card)])
        if best is not None:
            return best

    return None


def _latest_effective(cards: list[RateCard]) -> RateCard | None:
    if not cards:
        return None
    return max(cards, key=lambda card: card.effective_from)

"""Rate cards used to cost billable time."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class RateCard:
    """An hourly rate for a developer, project or client scope.

    A card with only ``developer_id`` set is that developer's default rate.
    The effective range is inclusive at both ends; ``effective_to=None``
    means open-ended.
    """

    id: str
    hourly_rate: Decimal
    effective_from: datetime
    currency: str = "USD"
    effective_to: datetime | None = None
    is_active: bool = True
    developer_id: str | None = None
    project_id: str | None = None
    client_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_developer_default(self) -> bool:
        """True if this card applies to a developer regardless of project/client."""
        return bool(self.developer_id) and not self.project_id and not self.client_id

    def is_effective_at(self, at: datetime) -> bool:
        """Check if the card is active and in its effective range at ``at``."""
        if not self.is_active:
            return False
        if self.effective_from > at:
            return False
        if self.effective_to is not None and self.effective_to < at:
            return False
        return True

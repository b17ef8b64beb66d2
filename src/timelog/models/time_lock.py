"""Administrative locks over a project's or client's time period."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TimeLock:
    """A hold over [period_start, period_end] for one project or one client.

    Locks are deactivated on unlock, never deleted.
    """

    id: str
    period_start: datetime
    period_end: datetime
    reason: str
    locked_by: str
    locked_at: datetime
    project_id: str | None = None
    client_id: str | None = None
    unlocked_by: str | None = None
    unlocked_at: datetime | None = None
    is_active: bool = True

    def matches_scope(
        self,
        project_id: str | None = None,
        client_id: str | None = None,
    ) -> bool:
        """Check if the lock covers the given project or client.

        Either match is sufficient.
        """
        if self.project_id and self.project_id == project_id:
            return True
        if self.client_id and self.client_id == client_id:
            return True
        return False

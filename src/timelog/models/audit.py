"""Audit log records emitted by state-changing operations.

The core never persists these; callers store them alongside the updated
entities they were returned with.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class AuditAction(str, Enum):
    """Actions recorded in the audit trail."""

    CREATE = "CREATE"
    UNLOCK = "UNLOCK"
    SUBMIT = "SUBMIT"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    LOCK = "LOCK"
    BILL = "BILL"


class AuditEntityType(str, Enum):
    """Entity types that appear in the audit trail."""

    TIME_ENTRY = "TimeEntry"
    TIMESHEET = "Timesheet"
    TIME_LOCK = "TimeLock"


@dataclass(frozen=True)
class AuditLog:
    """One audit record."""

    entity_type: AuditEntityType
    entity_id: str
    action: AuditAction
    user_id: str
    created_at: datetime
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly representation for persistence."""
        return {
            "entityType": self.entity_type.value,
            "entityId": self.entity_id,
            "action": self.action.value,
            "userId": self.user_id,
            "metadata": {k: _json_value(v) for k, v in self.metadata.items()},
            "createdAt": self.created_at.isoformat(),
        }


def _json_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return value

"""Error taxonomy for the time log domain.

Every error carries a machine-readable ``code``, the HTTP status the route
layer should map it to, and an optional ``details`` payload.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any


class TimeLogError(Exception):
    """Base class for all time log domain errors."""

    def __init__(
        self,
        message: str,
        code: str,
        http_status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.code = code
        self.http_status_code = http_status_code
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Return a serializable error body."""
        body: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(TimeLogError):
    """Raised when business input is malformed."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        code: str = "VALIDATION_ERROR",
    ):
        super().__init__(message, code, 400, details)


class InvalidDurationError(ValidationError):
    """Raised when a time entry interval violates the duration bounds."""

    def __init__(self, message: str, start_at: datetime, end_at: datetime):
        self.start_at = start_at
        self.end_at = end_at
        super().__init__(
            message,
            {"startAt": start_at.isoformat(), "endAt": end_at.isoformat()},
            code="INVALID_DURATION",
        )


class InvalidStatusTransitionError(ValidationError):
    """Raised when an entry cannot move from its status to the target status."""

    def __init__(self, current_status: str, target_status: str):
        self.current_status = _status_value(current_status)
        self.target_status = _status_value(target_status)
        super().__init__(
            f"Cannot transition from {self.current_status} to {self.target_status}",
            {
                "currentStatus": self.current_status,
                "targetStatus": self.target_status,
            },
        )


class AuthorizationError(TimeLogError):
    """Raised by the route layer when a user may not perform an action."""

    def __init__(
        self,
        message: str = "Unauthorized access",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, "AUTHORIZATION_ERROR", 403, details)


class NotFoundError(TimeLogError):
    """Raised by the route layer when a resource does not exist."""

    def __init__(self, resource: str, resource_id: str | None = None):
        self.resource = resource
        self.resource_id = resource_id
        if resource_id:
            message = f"{resource} with id {resource_id} not found"
        else:
            message = f"{resource} not found"
        super().__init__(message, "NOT_FOUND", 404)


class ConflictError(TimeLogError):
    """Raised when a request conflicts with existing state."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, "CONFLICT", 409, details)


class OverlapError(ConflictError):
    """Raised when time entries overlap each other."""

    def __init__(self, overlapping_entries: list[tuple[str, str]]):
        self.overlapping_entries = list(overlapping_entries)
        super().__init__(
            "Time entries overlap",
            {"overlappingEntries": [list(pair) for pair in self.overlapping_entries]},
        )


class PeriodLockedError(ConflictError):
    """Raised when a transition touches an interval covered by an active lock."""

    def __init__(self, period_start: datetime, period_end: datetime):
        self.period_start = period_start
        self.period_end = period_end
        super().__init__(
            "Cannot modify entries in locked period",
            {
                "periodStart": period_start.isoformat(),
                "periodEnd": period_end.isoformat(),
            },
        )


class RateLimitError(TimeLogError):
    """Raised by the route layer when a caller exceeds its request budget."""

    def __init__(self, limit: int, window: str):
        self.limit = limit
        self.window = window
        super().__init__(
            f"Rate limit exceeded: {limit} requests per {window}",
            "RATE_LIMIT",
            429,
            {"limit": limit, "window": window},
        )


def _status_value(status: Any) -> str:
    return getattr(status, "value", status)

"""Time log core.

Pure domain logic for a timesheet and billing product:
- Duration rounding, bounds and overlap policy
- Time entry status state machine
- Period locks and lock conflict detection
- Submit/approve/reject/lock/bill workflow with audit records
- Rate card resolution, costing and finance exports

Nothing here performs I/O; callers fetch records, pass them in, and
persist the returned entities and audit logs.
"""

from timelog.calculators import (
    RoundingInterval,
    calculate_entry_costs,
    generate_finance_export,
    map_to_invoice,
    resolve_effective_rate,
)
from timelog.errors import (
    AuthorizationError,
    ConflictError,
    InvalidDurationError,
    InvalidStatusTransitionError,
    NotFoundError,
    OverlapError,
    PeriodLockedError,
    RateLimitError,
    TimeLogError,
    ValidationError,
)
from timelog.models import (
    AuditLog,
    RateCard,
    TimeEntry,
    TimeEntryStatus,
    TimeLock,
    Timesheet,
)
from timelog.services import (
    LockManager,
    TimeEntryStateMachine,
    WorkflowContext,
    approve_time_entries,
    bill_time_entries,
    lock_time_entries,
    reject_time_entries,
    submit_time_entries,
    submit_timesheet,
)

__version__ = "0.1.0"

__all__ = [
    "AuditLog",
    "RateCard",
    "TimeEntry",
    "TimeEntryStatus",
    "TimeLock",
    "Timesheet",
    "RoundingInterval",
    "resolve_effective_rate",
    "calculate_entry_costs",
    "generate_finance_export",
    "map_to_invoice",
    "TimeEntryStateMachine",
    "LockManager",
    "WorkflowContext",
    "submit_time_entries",
    "approve_time_entries",
    "reject_time_entries",
    "lock_time_entries",
    "bill_time_entries",
    "submit_timesheet",
    "TimeLogError",
    "ValidationError",
    "InvalidDurationError",
    "InvalidStatusTransitionError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "OverlapError",
    "PeriodLockedError",
    "RateLimitError",
]

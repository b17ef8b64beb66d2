"""Time entry workflow services."""

from timelog.services.locking_service import (
    LockChange,
    LockManager,
    LockRequest,
    check_entry_lock_conflict,
    check_period_lock_conflict,
    create_time_lock,
    get_affected_entries,
    unlock_time_lock,
    validate_lock_overlap,
)
from timelog.services.state_machine import (
    TimeEntryStateMachine,
    can_approve_time_entry,
    can_bill_time_entry,
    can_edit_time_entry,
    can_lock_time_entry,
    can_reject_time_entry,
    can_submit_time_entry,
    validate_status_transition,
)
from timelog.services.workflow_service import (
    TimesheetSubmission,
    WorkflowContext,
    WorkflowResult,
    approve_time_entries,
    bill_time_entries,
    lock_time_entries,
    reject_time_entries,
    submit_time_entries,
    submit_timesheet,
)

__all__ = [
    "TimeEntryStateMachine",
    "validate_status_transition",
    "can_edit_time_entry",
    "can_submit_time_entry",
    "can_approve_time_entry",
    "can_reject_time_entry",
    "can_lock_time_entry",
    "can_bill_time_entry",
    "LockRequest",
    "LockChange",
    "LockManager",
    "create_time_lock",
    "unlock_time_lock",
    "check_entry_lock_conflict",
    "check_period_lock_conflict",
    "validate_lock_overlap",
    "get_affected_entries",
    "WorkflowContext",
    "WorkflowResult",
    "TimesheetSubmission",
    "submit_time_entries",
    "approve_time_entries",
    "reject_time_entries",
    "lock_time_entries",
    "bill_time_entries",
    "submit_timesheet",
]

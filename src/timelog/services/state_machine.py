"""Time entry state machine with transition validation."""

from __future__ import annotations

from timelog.calculators.types import ValidationResult
from timelog.errors import InvalidStatusTransitionError
from timelog.models import TimeEntryStatus


class TimeEntryStateMachine:
    """State machine for time entry status transitions.

    Allowed transitions:
    - DRAFT → SUBMITTED
    - SUBMITTED → APPROVED
    - SUBMITTED → REJECTED
    - APPROVED → LOCKED
    - APPROVED → REJECTED
    - REJECTED → DRAFT
    - REJECTED → SUBMITTED
    - LOCKED → BILLED
    """

    VALID_TRANSITIONS: dict[TimeEntryStatus, frozenset[TimeEntryStatus]] = {
        TimeEntryStatus.DRAFT: frozenset({TimeEntryStatus.SUBMITTED}),
        TimeEntryStatus.SUBMITTED: frozenset(
            {TimeEntryStatus.APPROVED, TimeEntryStatus.REJECTED}
        ),
        TimeEntryStatus.APPROVED: frozenset(
            {TimeEntryStatus.LOCKED, TimeEntryStatus.REJECTED}
        ),
        TimeEntryStatus.REJECTED: frozenset(
            {TimeEntryStatus.DRAFT, TimeEntryStatus.SUBMITTED}
        ),
        TimeEntryStatus.LOCKED: frozenset({TimeEntryStatus.BILLED}),
        TimeEntryStatus.BILLED: frozenset(),  # Terminal state
    }

    # Statuses whose entries may still be edited by their developer
    EDITABLE = frozenset({TimeEntryStatus.DRAFT, TimeEntryStatus.REJECTED})

    @classmethod
    def can_transition(cls, from_status: TimeEntryStatus, to_status: TimeEntryStatus) -> bool:
        """Check if a transition is valid."""
        return to_status in cls.VALID_TRANSITIONS.get(from_status, frozenset())

    @classmethod
    def validate_transition(
        cls, from_status: TimeEntryStatus, to_status: TimeEntryStatus
    ) -> None:
        """Validate a transition, raising InvalidStatusTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidStatusTransitionError(from_status, to_status)

    @classmethod
    def get_next_statuses(cls, current_status: TimeEntryStatus) -> frozenset[TimeEntryStatus]:
        """Get the set of valid next statuses from current status."""
        return cls.VALID_TRANSITIONS.get(current_status, frozenset())

    @classmethod
    def is_terminal(cls, status: TimeEntryStatus) -> bool:
        """Check if no transition leaves this status."""
        return not cls.get_next_statuses(status)


_unmapped = set(TimeEntryStatus) - set(TimeEntryStateMachine.VALID_TRANSITIONS)
if _unmapped:
    raise RuntimeError(
        f"Transition table is missing statuses: {sorted(s.value for s in _unmapped)}"
    )


def validate_status_transition(
    current_status: TimeEntryStatus, new_status: TimeEntryStatus
) -> ValidationResult:
    """Check a transition against the table without raising."""
    if not TimeEntryStateMachine.can_transition(current_status, new_status):
        return ValidationResult(
            valid=False,
            error=(
                f"Cannot transition from {TimeEntryStatus(current_status).value} "
                f"to {TimeEntryStatus(new_status).value}"
            ),
        )
    return ValidationResult(valid=True)


def can_edit_time_entry(status: TimeEntryStatus) -> bool:
    """Check if an entry's fields can still be edited."""
    return status in TimeEntryStateMachine.EDITABLE


def can_submit_time_entry(status: TimeEntryStatus) -> bool:
    """Check if an entry can be submitted for approval."""
    return status in (TimeEntryStatus.DRAFT, TimeEntryStatus.REJECTED)


def can_approve_time_entry(status: TimeEntryStatus) -> bool:
    """Check if an entry can be approved."""
    return status == TimeEntryStatus.SUBMITTED


def can_reject_time_entry(status: TimeEntryStatus) -> bool:
    """Check if an entry can be rejected."""
    return status in (TimeEntryStatus.SUBMITTED, TimeEntryStatus.APPROVED)


def can_lock_time_entry(status: TimeEntryStatus) -> bool:
    """Check if an entry can be locked."""
    return status == TimeEntryStatus.APPROVED


def can_bill_time_entry(status: TimeEntryStatus) -> bool:
    """Check if an entry can be billed."""
    return status == TimeEntryStatus.LOCKED

"""Approval workflow for time entries and timesheets.

Operations:
- submit_time_entries: DRAFT/REJECTED → SUBMITTED, blocked by locked periods
- approve_time_entries: SUBMITTED → APPROVED, blocked by locked periods
- reject_time_entries: SUBMITTED/APPROVED → REJECTED, requires a reason
- lock_time_entries: APPROVED → LOCKED
- bill_time_entries: LOCKED → BILLED, stamps the invoice id
- submit_timesheet: submits the DRAFT entries of a timesheet

Every operation works on a batch and is fail-fast: the first entry that
fails a check raises and nothing from the batch is returned. Inputs are
never mutated; updated copies and audit logs are returned for the caller
to persist.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any

from timelog.calculators.durations import is_period_locked
from timelog.errors import (
    InvalidStatusTransitionError,
    PeriodLockedError,
    ValidationError,
)
from timelog.models import (
    AuditAction,
    AuditEntityType,
    AuditLog,
    TimeEntry,
    TimeEntryStatus,
    TimeLock,
    Timesheet,
)
from timelog.services.state_machine import (
    TimeEntryStateMachine,
    can_approve_time_entry,
    can_lock_time_entry,
    can_reject_time_entry,
    can_submit_time_entry,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkflowContext:
    """Who is acting, in what role, and when."""

    user_id: str
    user_role: str
    timestamp: datetime


@dataclass(frozen=True)
class WorkflowResult:
    """Updated entries and the audit logs describing the change."""

    entries: list[TimeEntry]
    audit_logs: list[AuditLog]


@dataclass(frozen=True)
class TimesheetSubmission:
    """Submitted timesheet, its merged entries and all audit logs."""

    timesheet: Timesheet
    entries: list[TimeEntry]
    audit_logs: list[AuditLog]


def submit_time_entries(
    entries: Iterable[TimeEntry],
    context: WorkflowContext,
    locks: Iterable[TimeLock] = (),
) -> WorkflowResult:
    """Submit entries for approval.

    Raises:
        InvalidStatusTransitionError: If an entry is not DRAFT or REJECTED.
        PeriodLockedError: If an entry's interval touches an active lock.
    """
    return _apply_transition(
        entries,
        context,
        target=TimeEntryStatus.SUBMITTED,
        action=AuditAction.SUBMIT,
        guard=can_submit_time_entry,
        locks=list(locks),
    )


def approve_time_entries(
    entries: Iterable[TimeEntry],
    context: WorkflowContext,
    locks: Iterable[TimeLock] = (),
) -> WorkflowResult:
    """Approve submitted entries.

    Raises:
        InvalidStatusTransitionError: If an entry is not SUBMITTED.
        PeriodLockedError: If an entry's interval touches an active lock.
    """
    return _apply_transition(
        entries,
        context,
        target=TimeEntryStatus.APPROVED,
        action=AuditAction.APPROVE,
        guard=can_approve_time_entry,
        locks=list(locks),
        changes={"approved_by": context.user_id, "approved_at": context.timestamp},
    )


def reject_time_entries(
    entries: Iterable[TimeEntry],
    reason: str,
    context: WorkflowContext,
) -> WorkflowResult:
    """Reject submitted or approved entries. Locks are not consulted.

    Raises:
        ValidationError: If the reason is empty.
        InvalidStatusTransitionError: If an entry is not SUBMITTED or APPROVED.
    """
    if not reason or not reason.strip():
        raise ValidationError("A rejection reason is required")

    return _apply_transition(
        entries,
        context,
        target=TimeEntryStatus.REJECTED,
        action=AuditAction.REJECT,
        guard=can_reject_time_entry,
        changes={
            "rejected_by": context.user_id,
            "rejected_at": context.timestamp,
            "rejection_reason": reason,
        },
        metadata={"reason": reason},
    )


def lock_time_entries(
    entries: Iterable[TimeEntry],
    context: WorkflowContext,
    reason: str | None = None,
) -> WorkflowResult:
    """Lock approved entries ahead of billing.

    Raises:
        InvalidStatusTransitionError: If an entry is not APPROVED.
    """
    return _apply_transition(
        entries,
        context,
        target=TimeEntryStatus.LOCKED,
        action=AuditAction.LOCK,
        guard=can_lock_time_entry,
        changes={"locked_at": context.timestamp},
        metadata={"reason": reason},
    )


def bill_time_entries(
    entries: Iterable[TimeEntry],
    invoice_id: str,
    context: WorkflowContext,
) -> WorkflowResult:
    """Mark locked entries as billed on an invoice.

    Raises:
        ValidationError: If the invoice id is empty.
        InvalidStatusTransitionError: If an entry is not LOCKED.
    """
    if not invoice_id:
        raise ValidationError("An invoice id is required to bill entries")

    return _apply_transition(
        entries,
        context,
        target=TimeEntryStatus.BILLED,
        action=AuditAction.BILL,
        # Only locked entries can be billed
        guard=lambda status: status == TimeEntryStatus.LOCKED,
        changes={"billed_at": context.timestamp, "invoice_id": invoice_id},
        metadata={"invoiceId": invoice_id},
    )


def submit_timesheet(
    timesheet: Timesheet,
    context: WorkflowContext,
    entries: Sequence[TimeEntry] | None = None,
    locks: Iterable[TimeLock] = (),
) -> TimesheetSubmission:
    """Submit a timesheet and every DRAFT entry on it.

    Entries in any other status are kept as they are. The merged entry list
    holds the untouched entries first, then the submitted ones.

    Raises:
        PeriodLockedError: If the timesheet period touches an active lock.
        InvalidStatusTransitionError: Propagated from entry submission.
    """
    locks = list(locks)
    if entries is None:
        entries = timesheet.entries

    if is_period_locked(timesheet.period_start, timesheet.period_end, locks):
        logger.warning(
            "Timesheet %s submission blocked by a locked period", timesheet.id
        )
        raise PeriodLockedError(timesheet.period_start, timesheet.period_end)

    drafts = [entry for entry in entries if entry.status == TimeEntryStatus.DRAFT]
    submitted = submit_time_entries(drafts, context, locks)
    untouched = [entry for entry in entries if entry.status != TimeEntryStatus.DRAFT]
    merged = [*untouched, *submitted.entries]

    updated_timesheet = replace(
        timesheet,
        status=TimeEntryStatus.SUBMITTED,
        submitted_at=context.timestamp,
        entries=tuple(merged),
    )

    timesheet_log = AuditLog(
        entity_type=AuditEntityType.TIMESHEET,
        entity_id=timesheet.id,
        action=AuditAction.SUBMIT,
        user_id=context.user_id,
        created_at=context.timestamp,
        metadata={
            "userRole": context.user_role,
            "entriesSubmitted": len(submitted.entries),
            "weekStart": timesheet.period_start.isoformat(),
            "weekEnd": timesheet.period_end.isoformat(),
        },
    )

    return TimesheetSubmission(
        timesheet=updated_timesheet,
        entries=merged,
        audit_logs=[*submitted.audit_logs, timesheet_log],
    )


def _apply_transition(
    entries: Iterable[TimeEntry],
    context: WorkflowContext,
    target: TimeEntryStatus,
    action: AuditAction,
    guard: Callable[[TimeEntryStatus], bool],
    locks: list[TimeLock] | None = None,
    changes: dict[str, Any] | None = None,
    metadata: dict[str, Any] | None = None,
) -> WorkflowResult:
    """Move every entry to ``target``, aborting on the first failure."""
    updated_entries: list[TimeEntry] = []
    audit_logs: list[AuditLog] = []

    for entry in entries:
        if not guard(entry.status):
            raise InvalidStatusTransitionError(entry.status, target)
        TimeEntryStateMachine.validate_transition(entry.status, target)

        if locks and is_period_locked(entry.start_at, entry.end_at, locks):
            logger.warning(
                "%s of entry %s blocked by a locked period", action.value, entry.id
            )
            raise PeriodLockedError(entry.start_at, entry.end_at)

        updated_entries.append(
            replace(
                entry,
                status=target,
                updated_at=context.timestamp,
                **(changes or {}),
            )
        )

        audit_logs.append(
            AuditLog(
                entity_type=AuditEntityType.TIME_ENTRY,
                entity_id=entry.id,
                action=action,
                user_id=context.user_id,
                created_at=context.timestamp,
                metadata={
                    "userRole": context.user_role,
                    "previousStatus": TimeEntryStatus(entry.status).value,
                    "newStatus": target.value,
                    **(metadata or {}),
                },
            )
        )

    logger.debug(
        "%s applied to %d entries by %s", action.value, len(updated_entries), context.user_id
    )
    return WorkflowResult(entries=updated_entries, audit_logs=audit_logs)

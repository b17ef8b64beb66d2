"""Period locks: creation, release and conflict detection.

A lock matches an entry or period when its project id equals the entry's
project id or its client id equals the entry's client id. Conflict checks
against entries and periods treat the lock boundaries as locked; overlap
checks between locks of the same scope let touching locks coexist.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from uuid import uuid4

from timelog.calculators.durations import intervals_overlap
from timelog.errors import ConflictError, ValidationError
from timelog.models import (
    AuditAction,
    AuditEntityType,
    AuditLog,
    TimeEntry,
    TimeLock,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LockRequest:
    """Parameters for a new lock. Exactly one of project_id/client_id is set."""

    period_start: datetime
    period_end: datetime
    reason: str
    locked_by: str
    project_id: str | None = None
    client_id: str | None = None


@dataclass(frozen=True)
class LockChange:
    """A created or released lock with its audit record."""

    lock: TimeLock
    audit_log: AuditLog


def create_time_lock(
    request: LockRequest,
    existing_locks: Iterable[TimeLock] | None = None,
    locked_at: datetime | None = None,
) -> LockChange:
    """Create an active lock.

    When ``existing_locks`` is given the new period is also checked against
    active locks of the same scope.

    Raises:
        ValidationError: If the scope or the period is invalid.
        ConflictError: If the period overlaps an existing lock of the same scope.
    """
    if not request.project_id and not request.client_id:
        raise ValidationError("Either projectId or clientId must be provided")
    if request.project_id and request.client_id:
        raise ValidationError("A lock applies to either a project or a client, not both")
    if request.period_end <= request.period_start:
        raise ValidationError("Period end must be after period start")

    if existing_locks is not None:
        validate_lock_overlap(request, existing_locks)

    locked_at = locked_at or datetime.now(timezone.utc)
    lock = TimeLock(
        id=str(uuid4()),
        period_start=request.period_start,
        period_end=request.period_end,
        reason=request.reason,
        locked_by=request.locked_by,
        locked_at=locked_at,
        project_id=request.project_id,
        client_id=request.client_id,
        is_active=True,
    )

    audit_log = AuditLog(
        entity_type=AuditEntityType.TIME_LOCK,
        entity_id=lock.id,
        action=AuditAction.CREATE,
        user_id=request.locked_by,
        created_at=locked_at,
        metadata={
            "projectId": request.project_id,
            "clientId": request.client_id,
            "periodStart": request.period_start.isoformat(),
            "periodEnd": request.period_end.isoformat(),
            "reason": request.reason,
        },
    )

    logger.info(
        "Created lock %s for %s %s",
        lock.id,
        "project" if lock.project_id else "client",
        lock.project_id or lock.client_id,
    )
    return LockChange(lock=lock, audit_log=audit_log)


def unlock_time_lock(
    lock: TimeLock,
    unlocked_by: str,
    reason: str | None = None,
    unlocked_at: datetime | None = None,
) -> LockChange:
    """Deactivate a lock.

    Raises:
        ValidationError: If the lock is already inactive.
    """
    if not lock.is_active:
        raise ValidationError("Lock is already inactive", {"lockId": lock.id})

    unlocked_at = unlocked_at or datetime.now(timezone.utc)
    unlocked = replace(
        lock,
        is_active=False,
        unlocked_by=unlocked_by,
        unlocked_at=unlocked_at,
    )

    audit_log = AuditLog(
        entity_type=AuditEntityType.TIME_LOCK,
        entity_id=lock.id,
        action=AuditAction.UNLOCK,
        user_id=unlocked_by,
        created_at=unlocked_at,
        metadata={
            "reason": reason,
            "projectId": lock.project_id,
            "clientId": lock.client_id,
        },
    )

    logger.info("Unlocked lock %s", lock.id)
    return LockChange(lock=unlocked, audit_log=audit_log)


def check_entry_lock_conflict(
    entry: TimeEntry,
    locks: Iterable[TimeLock],
) -> TimeLock | None:
    """Return the first active lock covering the entry, or None."""
    for lock in locks:
        if not lock.is_active:
            continue
        if not lock.matches_scope(entry.project_id, entry.client_id):
            continue
        if intervals_overlap(
            entry.start_at, entry.end_at, lock.period_start, lock.period_end, inclusive=True
        ):
            return lock

    return None


def check_period_lock_conflict(
    period_start: datetime,
    period_end: datetime,
    project_id: str | None = None,
    client_id: str | None = None,
    locks: Iterable[TimeLock] = (),
) -> TimeLock | None:
    """Return the first active lock covering the period for the scope, or None."""
    for lock in locks:
        if not lock.is_active:
            continue
        scope_match = (project_id and lock.project_id == project_id) or (
            client_id and lock.client_id == client_id
        )
        if not scope_match:
            continue
        if intervals_overlap(
            period_start, period_end, lock.period_start, lock.period_end, inclusive=True
        ):
            return lock

    return None


def validate_lock_overlap(
    new_lock: LockRequest | TimeLock,
    existing_locks: Iterable[TimeLock],
) -> None:
    """Reject a lock whose period overlaps an active lock of the same scope.

    Locks that only touch at a boundary are allowed.

    Raises:
        ConflictError: On the first overlapping lock found.
    """
    for lock in existing_locks:
        if not lock.is_active:
            continue
        same_scope = (new_lock.project_id and lock.project_id == new_lock.project_id) or (
            new_lock.client_id and lock.client_id == new_lock.client_id
        )
        if not same_scope:
            continue
        if intervals_overlap(
            new_lock.period_start,
            new_lock.period_end,
            lock.period_start,
            lock.period_end,
            inclusive=False,
        ):
            raise ConflictError(
                "Lock period overlaps with existing lock from "
                f"{lock.period_start.isoformat()} to {lock.period_end.isoformat()}",
                {"lockId": lock.id},
            )


def get_affected_entries(lock: TimeLock, entries: Iterable[TimeEntry]) -> list[TimeEntry]:
    """Entries in the lock's scope whose interval touches the lock period."""
    return [
        entry
        for entry in entries
        if lock.matches_scope(entry.project_id, entry.client_id)
        and intervals_overlap(
            entry.start_at, entry.end_at, lock.period_start, lock.period_end, inclusive=True
        )
    ]


class LockManager:
    """In-memory collection of locks keyed by id.

    Instances are owned by the caller and are not thread-safe; share one
    across concurrent callers only with external synchronization.
    """

    def __init__(self, locks: Iterable[TimeLock] = ()):
        self._locks: dict[str, TimeLock] = {lock.id: lock for lock in locks}

    def __len__(self) -> int:
        return len(self._locks)

    def add_lock(self, lock: TimeLock) -> None:
        """Add or replace a lock."""
        self._locks[lock.id] = lock
        logger.debug("Lock manager tracking lock %s", lock.id)

    def remove_lock(self, lock_id: str) -> None:
        """Stop tracking a lock. Unknown ids are ignored."""
        if self._locks.pop(lock_id, None) is not None:
            logger.debug("Lock manager dropped lock %s", lock_id)

    def get_active_locks(self) -> list[TimeLock]:
        """All active locks, in insertion order."""
        return [lock for lock in self._locks.values() if lock.is_active]

    def is_entry_locked(self, entry: TimeEntry) -> bool:
        """Check if any active lock covers the entry."""
        return check_entry_lock_conflict(entry, self.get_active_locks()) is not None

    def is_period_locked(
        self,
        period_start: datetime,
        period_end: datetime,
        project_id: str | None = None,
        client_id: str | None = None,
    ) -> bool:
        """Check if any active lock covers the period for the scope."""
        conflict = check_period_lock_conflict(
            period_start,
            period_end,
            project_id,
            client_id,
            self.get_active_locks(),
        )
        return conflict is not None

    def get_project_locks(self, project_id: str) -> list[TimeLock]:
        """Active locks on a project."""
        return [lock for lock in self.get_active_locks() if lock.project_id == project_id]

    def get_client_locks(self, client_id: str) -> list[TimeLock]:
        """Active locks on a client."""
        return [lock for lock in self.get_active_locks() if lock.client_id == client_id]

    def get_locks_in_range(self, start: datetime, end: datetime) -> list[TimeLock]:
        """Active locks whose period touches [start, end]."""
        return [
            lock
            for lock in self.get_active_locks()
            if intervals_overlap(start, end, lock.period_start, lock.period_end, inclusive=True)
        ]

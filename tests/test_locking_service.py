"""Tests for period locks."""

import pytest

from timelog.errors import ConflictError, ValidationError
from timelog.models import AuditAction, AuditEntityType
from timelog.services.locking_service import (
    LockManager,
    LockRequest,
    check_entry_lock_conflict,
    check_period_lock_conflict,
    create_time_lock,
    get_affected_entries,
    unlock_time_lock,
    validate_lock_overlap,
)
from tests.conftest import utc


@pytest.fixture
def lock_request():
    return LockRequest(
        period_start=utc(2024, 3, 1),
        period_end=utc(2024, 3, 31, 23, 59, 59),
        reason="Month end close",
        locked_by="admin-1",
        project_id="project-1",
    )


class TestCreateTimeLock:
    """Test lock creation."""

    def test_create_lock(self, lock_request):
        """Test a valid request yields an active lock and CREATE log."""
        change = create_time_lock(lock_request, locked_at=utc(2024, 4, 1))

        lock = change.lock
        assert lock.is_active is True
        assert lock.project_id == "project-1"
        assert lock.client_id is None
        assert lock.locked_at == utc(2024, 4, 1)
        assert lock.id

        log = change.audit_log
        assert log.entity_type == AuditEntityType.TIME_LOCK
        assert log.entity_id == lock.id
        assert log.action == AuditAction.CREATE
        assert log.user_id == "admin-1"
        assert log.metadata["reason"] == "Month end close"

    def test_unique_ids(self, lock_request):
        """Test each lock gets its own id."""
        first = create_time_lock(lock_request).lock
        second = create_time_lock(lock_request).lock
        assert first.id != second.id

    def test_requires_scope(self):
        """Test a lock without project or client is refused."""
        request = LockRequest(
            period_start=utc(2024, 3, 1),
            period_end=utc(2024, 3, 31),
            reason="Close",
            locked_by="admin-1",
        )
        with pytest.raises(ValidationError) as exc_info:
            create_time_lock(request)

        assert str(exc_info.value) == "Either projectId or clientId must be provided"

    def test_rejects_both_scopes(self):
        """Test a lock on both project and client is refused."""
        request = LockRequest(
            period_start=utc(2024, 3, 1),
            period_end=utc(2024, 3, 31),
            reason="Close",
            locked_by="admin-1",
            project_id="project-1",
            client_id="client-1",
        )
        with pytest.raises(ValidationError):
            create_time_lock(request)

    def test_rejects_inverted_period(self):
        """Test the period must move forward."""
        request = LockRequest(
            period_start=utc(2024, 3, 31),
            period_end=utc(2024, 3, 1),
            reason="Close",
            locked_by="admin-1",
            client_id="client-1",
        )
        with pytest.raises(ValidationError) as exc_info:
            create_time_lock(request)

        assert str(exc_info.value) == "Period end must be after period start"

    def test_overlap_with_existing(self, lock_request, make_lock):
        """Test overlap against existing locks is checked when given."""
        existing = make_lock(period_start=utc(2024, 3, 15), period_end=utc(2024, 4, 15))
        with pytest.raises(ConflictError):
            create_time_lock(lock_request, existing_locks=[existing])

    def test_touching_existing_allowed(self, lock_request, make_lock):
        """Test a lock starting where another ends is allowed."""
        existing = make_lock(period_start=utc(2024, 2, 1), period_end=utc(2024, 3, 1))
        change = create_time_lock(lock_request, existing_locks=[existing])
        assert change.lock.is_active


class TestUnlockTimeLock:
    """Test lock release."""

    def test_unlock(self, sample_lock):
        """Test unlocking deactivates and records who released it."""
        change = unlock_time_lock(
            sample_lock, "admin-2", reason="Correction", unlocked_at=utc(2024, 4, 2)
        )

        assert change.lock.is_active is False
        assert change.lock.unlocked_by == "admin-2"
        assert change.lock.unlocked_at == utc(2024, 4, 2)
        assert sample_lock.is_active is True

        assert change.audit_log.action == AuditAction.UNLOCK
        assert change.audit_log.metadata["reason"] == "Correction"

    def test_unlock_inactive_fails(self, make_lock):
        """Test an inactive lock cannot be released again."""
        with pytest.raises(ValidationError):
            unlock_time_lock(make_lock(is_active=False), "admin-2")


class TestConflicts:
    """Test lock conflict checks against entries and periods."""

    def test_entry_inside_lock(self, sample_entry, sample_lock):
        """Test an entry in a locked project period conflicts."""
        assert check_entry_lock_conflict(sample_entry, [sample_lock]) == sample_lock

    def test_entry_touching_lock_boundary(self, make_entry, sample_lock):
        """Test touching the lock end counts as a conflict."""
        entry = make_entry(start_at=sample_lock.period_end, end_at=utc(2024, 4, 1, 2))
        assert check_entry_lock_conflict(entry, [sample_lock]) == sample_lock

    def test_entry_other_project(self, make_entry, sample_lock):
        """Test locks on other projects and clients do not conflict."""
        entry = make_entry(project_id="project-2", client_id="client-2")
        assert check_entry_lock_conflict(entry, [sample_lock]) is None

    def test_entry_client_scope(self, make_entry, make_lock):
        """Test a client lock covers every project of that client."""
        lock = make_lock(project_id=None, client_id="client-1")
        entry = make_entry(project_id="project-7")
        assert check_entry_lock_conflict(entry, [lock]) == lock

    def test_inactive_lock_no_conflict(self, sample_entry, make_lock):
        """Test inactive locks are ignored."""
        assert check_entry_lock_conflict(sample_entry, [make_lock(is_active=False)]) is None

    def test_period_conflict(self, sample_lock):
        """Test period checks honour scope and inclusive bounds."""
        assert (
            check_period_lock_conflict(
                utc(2024, 3, 31, 23, 59, 59),
                utc(2024, 4, 5),
                project_id="project-1",
                locks=[sample_lock],
            )
            == sample_lock
        )
        assert (
            check_period_lock_conflict(
                utc(2024, 3, 10), utc(2024, 3, 11), project_id="project-2", locks=[sample_lock]
            )
            is None
        )

    def test_period_without_scope(self, sample_lock):
        """Test a period with no scope matches nothing."""
        assert check_period_lock_conflict(utc(2024, 3, 10), utc(2024, 3, 11), locks=[sample_lock]) is None


class TestValidateLockOverlap:
    """Test overlap between locks of the same scope."""

    def test_overlapping_lock(self, make_lock):
        """Test an overlapping lock of the same project conflicts."""
        existing = make_lock()
        new = make_lock(id="lock-2", period_start=utc(2024, 3, 20), period_end=utc(2024, 4, 10))
        with pytest.raises(ConflictError) as exc_info:
            validate_lock_overlap(new, [existing])

        assert str(exc_info.value).startswith("Lock period overlaps with existing lock from ")
        assert exc_info.value.details == {"lockId": "lock-1"}

    def test_touching_locks_allowed(self, make_lock):
        """Test locks sharing only a boundary instant coexist."""
        existing = make_lock(period_start=utc(2024, 3, 1), period_end=utc(2024, 4, 1))
        new = make_lock(id="lock-2", period_start=utc(2024, 4, 1), period_end=utc(2024, 5, 1))
        validate_lock_overlap(new, [existing])

    def test_other_scope_allowed(self, make_lock):
        """Test overlapping locks on different projects coexist."""
        existing = make_lock()
        new = make_lock(id="lock-2", project_id="project-2")
        validate_lock_overlap(new, [existing])

    def test_inactive_existing_allowed(self, make_lock):
        """Test inactive locks never conflict."""
        validate_lock_overlap(make_lock(id="lock-2"), [make_lock(is_active=False)])


class TestAffectedEntries:
    """Test entries caught by a lock."""

    def test_affected_entries(self, make_entry, sample_lock):
        """Test only in-scope entries within the period are returned."""
        entries = [
            make_entry(id="in"),
            make_entry(id="other-project", project_id="project-2", client_id="client-2"),
            make_entry(id="after", start_at=utc(2024, 4, 2, 9), end_at=utc(2024, 4, 2, 10)),
        ]
        assert [e.id for e in get_affected_entries(sample_lock, entries)] == ["in"]


class TestLockManager:
    """Test the in-memory lock collection."""

    @pytest.fixture
    def manager(self, make_lock):
        return LockManager(
            [
                make_lock(id="p1"),
                make_lock(id="c1", project_id=None, client_id="client-1",
                          period_start=utc(2024, 5, 1), period_end=utc(2024, 5, 31)),
                make_lock(id="old", is_active=False, period_start=utc(2024, 1, 1),
                          period_end=utc(2024, 1, 31)),
            ]
        )

    def test_active_locks(self, manager):
        """Test inactive locks are excluded."""
        assert len(manager) == 3
        assert [lock.id for lock in manager.get_active_locks()] == ["p1", "c1"]

    def test_add_and_remove(self, manager, make_lock):
        """Test adding, replacing and removing locks."""
        manager.add_lock(make_lock(id="p2", project_id="project-2"))
        assert len(manager) == 4

        manager.add_lock(make_lock(id="p2", project_id="project-3"))
        assert len(manager) == 4
        assert [lock.id for lock in manager.get_project_locks("project-3")] == ["p2"]

        manager.remove_lock("p2")
        manager.remove_lock("missing")
        assert len(manager) == 3

    def test_is_entry_locked(self, manager, make_entry):
        """Test entry checks by project and by client."""
        assert manager.is_entry_locked(make_entry()) is True
        may_entry = make_entry(
            project_id="project-5", start_at=utc(2024, 5, 2, 9), end_at=utc(2024, 5, 2, 10)
        )
        assert manager.is_entry_locked(may_entry) is True
        january = make_entry(start_at=utc(2024, 1, 10, 9), end_at=utc(2024, 1, 10, 10))
        assert manager.is_entry_locked(january) is False

    def test_is_period_locked(self, manager):
        """Test period checks by scope."""
        assert manager.is_period_locked(utc(2024, 3, 5), utc(2024, 3, 6), project_id="project-1")
        assert manager.is_period_locked(utc(2024, 5, 5), utc(2024, 5, 6), client_id="client-1")
        assert not manager.is_period_locked(utc(2024, 5, 5), utc(2024, 5, 6), client_id="client-2")

    def test_scope_lookups(self, manager):
        """Test project and client lock lookups."""
        assert [lock.id for lock in manager.get_project_locks("project-1")] == ["p1"]
        assert [lock.id for lock in manager.get_client_locks("client-1")] == ["c1"]

    def test_locks_in_range(self, manager):
        """Test range lookups use inclusive bounds."""
        assert [lock.id for lock in manager.get_locks_in_range(utc(2024, 4, 1), utc(2024, 5, 1))] == [
            "c1"
        ]
        assert manager.get_locks_in_range(utc(2024, 4, 2), utc(2024, 4, 3)) == []

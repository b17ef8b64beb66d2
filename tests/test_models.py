"""Tests for domain records."""

from dataclasses import FrozenInstanceError

import pytest

from timelog.errors import InvalidDurationError
from timelog.models import (
    AuditAction,
    AuditEntityType,
    AuditLog,
    TimeEntry,
    TimeEntryStatus,
)
from tests.conftest import utc


class TestTimeEntry:
    """Test time entry construction."""

    def test_create_derives_duration(self):
        """Test create computes minutes and starts in DRAFT."""
        entry = TimeEntry.create(
            id="entry-1",
            project_id="project-1",
            developer_id="dev-1",
            client_id="client-1",
            start_at=utc(2024, 3, 10, 9),
            end_at=utc(2024, 3, 10, 17),
            tags=["a", "b"],
            created_at=utc(2024, 3, 10, 17),
        )

        assert entry.duration_minutes == 480
        assert entry.status == TimeEntryStatus.DRAFT
        assert entry.tags == ("a", "b")
        assert entry.updated_at == entry.created_at
        assert entry.approved_by is None

    def test_create_rejects_long_entry(self):
        """Test create enforces duration bounds."""
        with pytest.raises(InvalidDurationError) as exc_info:
            TimeEntry.create(
                id="entry-1",
                project_id="project-1",
                developer_id="dev-1",
                client_id="client-1",
                start_at=utc(2024, 3, 10, 0),
                end_at=utc(2024, 3, 11, 1),
            )

        assert str(exc_info.value) == "Time entry cannot exceed 24 hours"

    def test_entries_are_frozen(self, sample_entry):
        """Test entries cannot be mutated in place."""
        with pytest.raises(FrozenInstanceError):
            sample_entry.status = TimeEntryStatus.BILLED  # type: ignore[misc]


class TestTimeLock:
    """Test lock scope matching."""

    def test_matches_scope(self, make_lock):
        """Test project and client locks match their own scope only."""
        project_lock = make_lock()
        client_lock = make_lock(project_id=None, client_id="client-1")

        assert project_lock.matches_scope("project-1", "client-9") is True
        assert project_lock.matches_scope("project-2", "client-1") is False
        assert client_lock.matches_scope("project-2", "client-1") is True
        assert client_lock.matches_scope(None, None) is False


class TestAuditLog:
    """Test audit record serialization."""

    def test_to_dict(self):
        """Test camelCase keys and JSON-safe values."""
        log = AuditLog(
            entity_type=AuditEntityType.TIME_ENTRY,
            entity_id="entry-1",
            action=AuditAction.APPROVE,
            user_id="user-1",
            created_at=utc(2024, 3, 15, 10),
            metadata={"newStatus": TimeEntryStatus.APPROVED, "at": utc(2024, 3, 15)},
        )

        assert log.to_dict() == {
            "entityType": "TimeEntry",
            "entityId": "entry-1",
            "action": "APPROVE",
            "userId": "user-1",
            "metadata": {"newStatus": "APPROVED", "at": "2024-03-15T00:00:00+00:00"},
            "createdAt": "2024-03-15T10:00:00+00:00",
        }

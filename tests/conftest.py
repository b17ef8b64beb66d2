"""Pytest fixtures for time log core tests."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

import pytest

from timelog.config import get_settings
from timelog.models import RateCard, TimeEntry, TimeEntryStatus, TimeLock
from timelog.services.workflow_service import WorkflowContext


def utc(*args: int) -> datetime:
    """Build an aware UTC datetime."""
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate tests from TIMELOG_* environment and cached settings."""
    monkeypatch.delenv("TIMELOG_ROUNDING_INTERVAL", raising=False)
    monkeypatch.delenv("TIMELOG_DEFAULT_CURRENCY", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def context() -> WorkflowContext:
    """Manager acting at a fixed instant."""
    return WorkflowContext(
        user_id="user-123",
        user_role="manager",
        timestamp=utc(2024, 3, 15, 10, 0),
    )


@pytest.fixture
def make_entry() -> Callable[..., TimeEntry]:
    """Factory for time entries with sensible defaults."""

    def _make(**overrides: Any) -> TimeEntry:
        values: dict[str, Any] = {
            "id": "entry-1",
            "project_id": "project-1",
            "developer_id": "dev-1",
            "client_id": "client-1",
            "task_id": "task-1",
            "start_at": utc(2024, 3, 10, 9, 0),
            "end_at": utc(2024, 3, 10, 17, 0),
            "duration_minutes": 480,
            "billable": True,
            "status": TimeEntryStatus.DRAFT,
            "tags": ("frontend",),
            "notes": "Working on feature",
            "created_at": utc(2024, 3, 10, 17, 0),
            "updated_at": utc(2024, 3, 10, 17, 0),
        }
        values.update(overrides)
        return TimeEntry(**values)

    return _make


@pytest.fixture
def sample_entry(make_entry) -> TimeEntry:
    """A DRAFT entry on 2024-03-10, 09:00–17:00 UTC."""
    return make_entry()


@pytest.fixture
def make_lock() -> Callable[..., TimeLock]:
    """Factory for locks with sensible defaults."""

    def _make(**overrides: Any) -> TimeLock:
        values: dict[str, Any] = {
            "id": "lock-1",
            "project_id": "project-1",
            "period_start": utc(2024, 3, 1),
            "period_end": utc(2024, 3, 31, 23, 59, 59),
            "reason": "Month end close",
            "locked_by": "admin-1",
            "locked_at": utc(2024, 4, 1),
            "is_active": True,
        }
        values.update(overrides)
        return TimeLock(**values)

    return _make


@pytest.fixture
def sample_lock(make_lock) -> TimeLock:
    """Active March 2024 lock on project-1."""
    return make_lock()


@pytest.fixture
def rate_cards() -> list[RateCard]:
    """Project, client and developer-default cards for dev-1 / project-1 / client-1."""
    return [
        RateCard(
            id="rate-dev",
            developer_id="dev-1",
            hourly_rate=Decimal("100"),
            currency="USD",
            effective_from=utc(2024, 1, 1),
        ),
        RateCard(
            id="rate-client",
            client_id="client-1",
            hourly_rate=Decimal("130"),
            currency="USD",
            effective_from=utc(2024, 2, 1),
        ),
        RateCard(
            id="rate-project",
            project_id="project-1",
            hourly_rate=Decimal("150"),
            currency="USD",
            effective_from=utc(2024, 2, 1),
        ),
    ]

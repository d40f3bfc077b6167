"""Pytest fixtures and configuration for suivisync tests."""

import asyncio
from datetime import date, datetime, timezone

import pytest
from fastapi.testclient import TestClient

from suivisync.integrations.in_memory import InMemoryTaskService
from suivisync.models.quick_action import make_quick_action
from suivisync.models.task import Task, TaskStatus
from suivisync.store.task_store import TaskStore

from .fakes import FakeRemoteTaskService

# Fixed "today" for overdue checks
TODAY = date(2024, 11, 20)
NOW = datetime(2024, 11, 20, 9, 0, tzinfo=timezone.utc)
CREATED = datetime(2024, 11, 10, 8, 0, tzinfo=timezone.utc)


async def settle(rounds: int = 5) -> None:
    """Let scheduled tasks run up to their next real suspension point."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def sample_task_base():
    """Base task data for creating test tasks.

    Returns a dict with default task attributes that can be overridden.
    """
    return {
        "id": "task-1",
        "title": "Old",
        "description": "Test description",
        "status": TaskStatus.TODO,
        "due_date": date(2024, 11, 25),
        "priority": "normal",
        "created_at": CREATED,
        "updated_at": CREATED,
    }


@pytest.fixture
def sample_task(sample_task_base):
    return Task(**sample_task_base)


@pytest.fixture
def sample_tasks(sample_task_base):
    """A small collection covering every status."""
    return [
        Task(**{**sample_task_base, "id": "task-1", "title": "Write brief", "status": TaskStatus.TODO}),
        Task(**{
            **sample_task_base,
            "id": "task-2",
            "title": "Review mockups",
            "status": TaskStatus.IN_PROGRESS,
            "progress": 20,
            "quick_actions": [make_quick_action("PROGRESS", value=20)],
        }),
        Task(**{**sample_task_base, "id": "task-3", "title": "Fix CI", "status": TaskStatus.BLOCKED, "priority": "high"}),
        Task(**{**sample_task_base, "id": "task-4", "title": "Ship v1", "status": TaskStatus.DONE}),
    ]


@pytest.fixture
def fake_remote(sample_tasks):
    return FakeRemoteTaskService(sample_tasks)


@pytest.fixture
def store(fake_remote):
    """Store over the fake remote with a fixed clock and calendar day."""
    return TaskStore(fake_remote, clock=lambda: NOW, today=lambda: TODAY)


@pytest.fixture
def in_memory_service(sample_tasks):
    """In-memory service without simulated latency."""
    return InMemoryTaskService(sample_tasks, min_delay_ms=0, max_delay_ms=0, clock=lambda: NOW)


@pytest.fixture
def test_client(in_memory_service):
    """FastAPI test client backed by the zero-latency in-memory service."""
    from suivisync.api.app import app, get_service

    app.dependency_overrides[get_service] = lambda: in_memory_service

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()

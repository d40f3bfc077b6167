"""In-memory task service (mock backend).

Implements the RemoteTaskService contract over a dict of tasks, with
simulated network latency and one-shot failure injection. Used by the
local dev API and by tests that need a realistic remote.
"""

import asyncio
import logging
import random
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from suivisync.config import SUIVI_MOCK_MAX_DELAY_MS, SUIVI_MOCK_MIN_DELAY_MS
from suivisync.engine.merge import apply_update, merge_activities
from suivisync.mocks.data import load_seed_tasks
from suivisync.models.task import Activity, Task, TaskStatus, TaskUpdate
from suivisync.models.task_factory import create_task

logger = logging.getLogger(__name__)

QUICK_CAPTURE_PROJECT = "Inbox"


class ApiError(Exception):
    """Error returned by the mock backend, carrying an HTTP status."""

    def __init__(self, status: int, message: str):
        super().__init__(message)
        self.status = int(status)
        self.message = message


class InMemoryTaskService:
    """Mock backend holding tasks in memory."""

    def __init__(
        self,
        tasks: Optional[Iterable[Task]] = None,
        min_delay_ms: Optional[int] = None,
        max_delay_ms: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize the service.

        Args:
            tasks: Initial tasks. If None, uses the bundled seed data.
            min_delay_ms: Lower bound of simulated latency
                (default SUIVI_MOCK_MIN_DELAY_MS)
            max_delay_ms: Upper bound of simulated latency
                (default SUIVI_MOCK_MAX_DELAY_MS)
            clock: Returns the current time as an aware datetime
        """
        seed = load_seed_tasks() if tasks is None else list(tasks)
        self._tasks: Dict[str, Task] = {task.id: task for task in seed}
        self.min_delay_ms = SUIVI_MOCK_MIN_DELAY_MS if min_delay_ms is None else min_delay_ms
        self.max_delay_ms = SUIVI_MOCK_MAX_DELAY_MS if max_delay_ms is None else max_delay_ms
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._failures: Dict[str, Exception] = {}
        self.calls: List[Tuple] = []

    def fail_next(self, operation: str, error: Optional[Exception] = None) -> None:
        """Make the next call to `operation` raise.

        Args:
            operation: Method name (e.g. 'update_task')
            error: Exception to raise (default: ApiError 503)
        """
        self._failures[operation] = error or ApiError(HTTPStatus.SERVICE_UNAVAILABLE, f"{operation} unavailable")

    async def _simulate(self, operation: str, *args) -> None:
        self.calls.append((operation, *args))
        if self.max_delay_ms > 0:
            delay_ms = random.uniform(self.min_delay_ms, max(self.min_delay_ms, self.max_delay_ms))
            await asyncio.sleep(delay_ms / 1000)
        error = self._failures.pop(operation, None)
        if error is not None:
            logger.debug(f"Injected failure for {operation}: {error}")
            raise error

    def _get(self, task_id: str) -> Task:
        task = self._tasks.get(task_id)
        if task is None:
            raise ApiError(HTTPStatus.NOT_FOUND, f"Task with id {task_id} not found")
        return task

    def _touch(self, task: Task) -> datetime:
        return max(self._clock(), task.updated_at)

    # RemoteTaskService

    async def get_tasks(self) -> List[Task]:
        await self._simulate("get_tasks")
        return [task.model_copy(deep=True) for task in self._tasks.values()]

    async def update_task_status(self, task_id: str, status: str) -> None:
        await self._simulate("update_task_status", task_id, status)
        task = self._get(task_id)
        try:
            status_value = TaskStatus(status).value
        except ValueError as e:
            raise ApiError(HTTPStatus.BAD_REQUEST, f"Invalid status: {status}") from e
        self._tasks[task_id] = task.model_copy(update={"status": status_value, "updated_at": self._touch(task)})

    async def update_task(self, task_id: str, update: TaskUpdate) -> Task:
        await self._simulate("update_task", task_id, update)
        task = self._get(task_id)
        if "title" in update.changed_fields() and not (update.title or "").strip():
            raise ApiError(HTTPStatus.BAD_REQUEST, "Task title is required")
        updated = apply_update(task, update)
        updated = updated.model_copy(update={"updated_at": self._touch(task)})
        self._tasks[task_id] = updated
        return updated.model_copy(deep=True)

    async def delete_task(self, task_id: str) -> None:
        await self._simulate("delete_task", task_id)
        self._get(task_id)
        del self._tasks[task_id]

    # Extra endpoints

    async def get_task(self, task_id: str) -> Task:
        await self._simulate("get_task", task_id)
        return self._get(task_id).model_copy(deep=True)

    async def create_task(self, data: dict) -> Task:
        """Create a task from client data.

        Raises:
            ApiError: 400 if the title is missing
        """
        await self._simulate("create_task", data)
        try:
            task = create_task(data, now=self._clock())
        except ValueError as e:
            raise ApiError(HTTPStatus.BAD_REQUEST, str(e)) from e
        self._tasks[task.id] = task
        logger.debug(f"Created task {task.id}: {task.title[:50]}")
        return task.model_copy(deep=True)

    async def quick_capture(self, text: str) -> Task:
        """Create a minimal todo task in the Inbox project."""
        return await self.create_task({"title": text, "status": TaskStatus.TODO.value, "projectName": QUICK_CAPTURE_PROJECT})

    async def get_task_activities(self, task_id: str) -> List[Activity]:
        await self._simulate("get_task_activities", task_id)
        return list(self._get(task_id).activities)

    async def add_task_activity(self, task_id: str, activity: Activity) -> Activity:
        """Append an activity to a task's history.

        Raises:
            ApiError: 404 for unknown tasks, 409 if the activity id exists
        """
        await self._simulate("add_task_activity", task_id, activity)
        task = self._get(task_id)
        if any(existing.id == activity.id for existing in task.activities):
            raise ApiError(HTTPStatus.CONFLICT, f"Activity {activity.id} already exists on task {task_id}")
        self._tasks[task_id] = task.model_copy(update={
            "activities": merge_activities(task.activities, [activity]),
            "updated_at": self._touch(task),
        })
        return activity

"""Test doubles for the remote task service."""

import asyncio
from collections import defaultdict, deque
from typing import Callable, Deque, Dict, Iterable, List, Optional, Tuple

from suivisync.engine.merge import apply_update
from suivisync.integrations.remote import RemoteServiceError
from suivisync.models.task import Task, TaskUpdate


class FakeRemoteTaskService:
    """Deterministic RemoteTaskService for store tests.

    - Records every call for assertions
    - `fail_next(op)` makes the next call to `op` raise
    - `hold(op)` returns an Event the next call to `op` waits on, so tests
      can observe optimistic state while the call is in flight
    - `on_update` lets a test rewrite the server's returned task
    """

    def __init__(self, tasks: Optional[Iterable[Task]] = None):
        self.tasks: Dict[str, Task] = {task.id: task for task in tasks or []}
        self.calls: List[Tuple] = []
        self.on_update: Optional[Callable[[Task], Task]] = None
        self._failures: Dict[str, Deque[Exception]] = defaultdict(deque)
        self._gates: Dict[str, Deque[asyncio.Event]] = defaultdict(deque)

    def fail_next(self, operation: str, error: Optional[Exception] = None) -> None:
        self._failures[operation].append(error or RemoteServiceError(f"{operation} failed", status_code=500))

    def hold(self, operation: str) -> asyncio.Event:
        gate = asyncio.Event()
        self._gates[operation].append(gate)
        return gate

    async def _enter(self, operation: str, *args) -> None:
        self.calls.append((operation, *args))
        if self._gates[operation]:
            gate = self._gates[operation].popleft()
            await gate.wait()
        if self._failures[operation]:
            raise self._failures[operation].popleft()

    async def get_tasks(self) -> List[Task]:
        await self._enter("get_tasks")
        return list(self.tasks.values())

    async def update_task_status(self, task_id: str, status: str) -> None:
        await self._enter("update_task_status", task_id, status)
        task = self.tasks[task_id]
        self.tasks[task_id] = task.model_copy(update={"status": status})

    async def update_task(self, task_id: str, update: TaskUpdate) -> Task:
        await self._enter("update_task", task_id, update)
        task = apply_update(self.tasks[task_id], update)
        if self.on_update is not None:
            task = self.on_update(task)
        self.tasks[task_id] = task
        return task

    async def delete_task(self, task_id: str) -> None:
        await self._enter("delete_task", task_id)
        self.tasks.pop(task_id, None)

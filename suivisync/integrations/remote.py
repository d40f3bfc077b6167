"""Remote task service contract.

The store depends on this Protocol rather than on a concrete client, so the
HTTP client, the in-memory mock backend and test fakes are interchangeable.
Every failure is surfaced as an exception; the store does not distinguish
validation, not-found and transport errors.
"""

from typing import List, Optional, Protocol

from suivisync.models.task import Task, TaskUpdate


class RemoteServiceError(Exception):
    """Failure reported by (or while reaching) the remote task service."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RemoteTaskService(Protocol):
    """Authoritative task collection and mutation endpoints."""

    async def get_tasks(self) -> List[Task]: ...

    async def update_task_status(self, task_id: str, status: str) -> None: ...

    async def update_task(self, task_id: str, update: TaskUpdate) -> Task: ...

    async def delete_task(self, task_id: str) -> None: ...

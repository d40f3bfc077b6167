"""Task store with optimistic updates.

The store owns the in-memory task cache. Every mutation is applied locally
first, then sent to the remote service:

- `update_task` restores the single affected task on failure.
- `update_status` and `delete_task_in_context` reload the whole collection
  on failure.

All three re-raise the remote error after recovering. `load_all` never
raises; it records the error and empties the cache instead.

Each optimistic write is tracked as a PendingMutation until its remote call
settles. Writes to different tasks never affect each other's rollback.
Overlapping writes to the same task are not serialized: the later write's
snapshot contains the earlier write's unconfirmed state.
"""

import itertools
import logging
from datetime import date, datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from suivisync.engine.merge import apply_update, diff_fields, project_quick_action_values
from suivisync.engine.rules import apply_rules
from suivisync.engine.selectors import StatusFilter, get_by_id, get_by_status_filter
from suivisync.integrations.remote import RemoteTaskService
from suivisync.models.task import Task, TaskStatus, TaskUpdate
from suivisync.store.errors import TaskNotFoundError
from suivisync.store.pending import MutationKind, PendingMutation, StoreSnapshot

logger = logging.getLogger(__name__)

Listener = Callable[[StoreSnapshot], None]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TaskStore:
    """Cache of tasks mirrored from a RemoteTaskService."""

    def __init__(
        self,
        remote: RemoteTaskService,
        *,
        clock: Optional[Callable[[], datetime]] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        """Initialize the store.

        Args:
            remote: Service providing the authoritative task collection
            clock: Returns the current time as an aware datetime (default UTC now)
            today: Returns the local calendar day used by the overdue rule
        """
        self._remote = remote
        self._clock = clock or _utc_now
        self._today = today or date.today

        self._tasks: List[Task] = []
        self._is_loading = False
        self._error: Optional[Exception] = None
        self._has_loaded = False

        self._listeners: List[Listener] = []
        self._pending: Dict[int, PendingMutation] = {}
        self._mutation_ids = itertools.count(1)

    # State

    @property
    def tasks(self) -> Tuple[Task, ...]:
        return tuple(self._tasks)

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def error(self) -> Optional[Exception]:
        """Error from the last failed load, cleared by a successful one."""
        return self._error

    @property
    def has_loaded(self) -> bool:
        return self._has_loaded

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            tasks=tuple(self._tasks),
            is_loading=self._is_loading,
            error=self._error,
            has_loaded=self._has_loaded,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called with a StoreSnapshot after each change.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def pending_mutations(self, entity_id: Optional[str] = None) -> List[PendingMutation]:
        """Optimistic writes still awaiting the remote service, oldest first."""
        mutations = sorted(self._pending.values(), key=lambda m: m.mutation_id)
        if entity_id is None:
            return mutations
        return [m for m in mutations if m.entity_id == entity_id]

    # Reads

    def get_by_id(self, task_id: str) -> Optional[Task]:
        return get_by_id(self._tasks, task_id)

    def get_by_status_filter(self, status_filter: StatusFilter) -> List[Task]:
        return get_by_status_filter(self._tasks, status_filter)

    # Loading

    async def load_all(self) -> None:
        """Replace the cache with the remote collection.

        A call made while another load is running returns immediately. On
        failure the cache is emptied and the error is kept in `error`.
        """
        if self._is_loading:
            logger.debug("Task load already in progress, skipping")
            return

        self._is_loading = True
        self._notify()
        try:
            tasks = await self._remote.get_tasks()
        except Exception as e:
            logger.error(f"Failed to load tasks: {type(e).__name__}: {str(e)}")
            self._tasks = []
            self._error = e
        else:
            self._tasks = _unique_by_id(tasks)
            self._error = None
            self._has_loaded = True
            logger.debug(f"Loaded {len(self._tasks)} tasks")
        finally:
            self._is_loading = False
            self._notify()

    # Mutations

    async def update_status(self, task_id: str, status: Union[TaskStatus, str]) -> None:
        """Set a task's status optimistically.

        Raises:
            ValueError: If `status` is not a valid TaskStatus
            TaskNotFoundError: If the task is not cached
            Exception: Whatever the remote service raised, after a full reload
        """
        status_value = TaskStatus(status).value
        current = self._require(task_id)

        optimistic = current.model_copy(update={
            "status": status_value,
            "updated_at": self._touch(current),
        })
        mutation = self._begin(task_id, MutationKind.UPDATE_STATUS, current)
        self._put(task_id, optimistic)
        self._notify()

        try:
            await self._remote.update_task_status(task_id, status_value)
        except Exception as e:
            logger.error(f"Failed to update status of task {task_id}: {type(e).__name__}: {str(e)}")
            self._settle(mutation)
            await self.load_all()
            raise
        finally:
            self._settle(mutation)
        logger.debug(f"Updated status of task {task_id} to {status_value}")

    async def update_task(self, task_id: str, update: Union[TaskUpdate, dict]) -> Task:
        """Apply a partial update optimistically.

        The update is merged into the cached task, scalar inputs are
        projected onto their quick actions, and the rules run with the set
        of fields present in the update. The result is cached before the
        remote call. On success the server's task replaces it; on failure
        the task is restored to its state before this call.

        Args:
            task_id: Task to update
            update: Partial update (TaskUpdate or a dict of fields/aliases)

        Returns:
            Task returned by the remote service

        Raises:
            pydantic.ValidationError: If `update` is invalid (e.g. a null title)
            TaskNotFoundError: If the task is not cached
            Exception: Whatever the remote service raised, after rollback
        """
        if not isinstance(update, TaskUpdate):
            update = TaskUpdate.model_validate(update)
        current = self._require(task_id)

        changed = update.changed_fields()
        merged = apply_update(current, update)
        merged = project_quick_action_values(merged, changed)
        final = apply_rules(merged, changed, today=self._today())
        merged_fields = changed | diff_fields(current, final)
        final = final.model_copy(update={"updated_at": self._touch(current)})

        mutation = self._begin(task_id, MutationKind.UPDATE_TASK, current)
        self._put(task_id, final)
        self._notify()

        try:
            server_task = await self._remote.update_task(task_id, TaskUpdate.from_task(final, merged_fields))
        except Exception as e:
            logger.error(f"Failed to update task {task_id}: {type(e).__name__}: {str(e)}")
            self._rollback(mutation)
            raise
        finally:
            self._settle(mutation)

        if self._put(task_id, server_task):
            self._notify()
            logger.debug(f"Updated task {task_id}")
        else:
            logger.warning(f"Task {task_id} left the cache before its update resolved; dropping server copy")
        return server_task

    async def delete_task_in_context(self, task_id: str) -> None:
        """Remove a task optimistically.

        Raises:
            TaskNotFoundError: If the task is not cached
            Exception: Whatever the remote service raised, after a full reload
        """
        current = self._require(task_id)

        mutation = self._begin(task_id, MutationKind.DELETE_TASK, current)
        self._tasks = [task for task in self._tasks if task.id != task_id]
        self._notify()

        try:
            await self._remote.delete_task(task_id)
        except Exception as e:
            logger.error(f"Failed to delete task {task_id}: {type(e).__name__}: {str(e)}")
            self._settle(mutation)
            await self.load_all()
            raise
        finally:
            self._settle(mutation)
        logger.debug(f"Deleted task {task_id}")

    # Internals

    def _require(self, task_id: str) -> Task:
        task = get_by_id(self._tasks, task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    def _touch(self, previous: Task) -> datetime:
        # updated_at never moves backward
        return max(self._clock(), previous.updated_at)

    def _put(self, task_id: str, task: Task) -> bool:
        """Replace the cached task with this id. Returns False if it is gone."""
        for index, cached in enumerate(self._tasks):
            if cached.id == task_id:
                self._tasks[index] = task
                return True
        return False

    def _begin(self, task_id: str, kind: MutationKind, previous: Task) -> PendingMutation:
        mutation = PendingMutation(
            mutation_id=next(self._mutation_ids),
            entity_id=task_id,
            kind=kind,
            previous_snapshot=previous,
            issued_at=self._clock(),
        )
        self._pending[mutation.mutation_id] = mutation
        return mutation

    def _settle(self, mutation: PendingMutation) -> None:
        self._pending.pop(mutation.mutation_id, None)

    def _rollback(self, mutation: PendingMutation) -> None:
        if self._put(mutation.entity_id, mutation.previous_snapshot):
            self._notify()
            logger.debug(f"Rolled back task {mutation.entity_id}")
        else:
            logger.warning(f"Task {mutation.entity_id} left the cache before rollback; nothing restored")

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(f"Store listener failed: {type(e).__name__}: {str(e)}")


def _unique_by_id(tasks: Sequence[Task]) -> List[Task]:
    """Keep the first task for each id, preserving order."""
    seen = set()
    unique: List[Task] = []
    for task in tasks:
        if task.id in seen:
            logger.warning(f"Duplicate task id {task.id} in loaded collection; keeping the first")
            continue
        seen.add(task.id)
        unique.append(task)
    return unique

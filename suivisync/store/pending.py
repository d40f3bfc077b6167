"""Pending mutation records and store snapshots."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from suivisync.models.task import Task


class MutationKind(str, Enum):
    """Kind of optimistic write awaiting remote confirmation."""
    UPDATE_TASK = "update_task"
    UPDATE_STATUS = "update_status"
    DELETE_TASK = "delete_task"


@dataclass(frozen=True)
class PendingMutation:
    """An optimistic write that has not been confirmed by the remote service.

    `previous_snapshot` is the cached entity immediately before this write
    was committed. For two overlapping writes on the same task, the second
    record's snapshot is the first write's optimistic state.
    """

    mutation_id: int
    entity_id: str
    kind: MutationKind
    previous_snapshot: Task
    issued_at: datetime


@dataclass(frozen=True)
class StoreSnapshot:
    """Immutable view of the store state handed to subscribers."""

    tasks: Tuple[Task, ...]
    is_loading: bool
    error: Optional[Exception]
    has_loaded: bool

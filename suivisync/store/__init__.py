"""Task store for suivisync."""

from suivisync.store.errors import TaskNotFoundError
from suivisync.store.pending import MutationKind, PendingMutation, StoreSnapshot
from suivisync.store.task_store import TaskStore

__all__ = [
    "TaskStore",
    "TaskNotFoundError",
    "MutationKind",
    "PendingMutation",
    "StoreSnapshot",
]

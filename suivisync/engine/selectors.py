"""Read-only task selectors.

Pure functions over a sequence of tasks (usually a store snapshot).
They never raise on unexpected input and never modify the tasks.
"""

import logging
from datetime import date, timedelta
from enum import Enum
from typing import Dict, List, Optional, Sequence, Union

from suivisync.models.constants import DUE_SOON_DAYS, RECENTLY_UPDATED_LIMIT
from suivisync.models.task import Task, TaskStatus

logger = logging.getLogger(__name__)


class TaskFilter(str, Enum):
    """Aggregate status filters."""
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"


StatusFilter = Union[TaskFilter, TaskStatus, str]

_STATUS_VALUES = {status.value for status in TaskStatus}


def is_task_active(task: Task) -> bool:
    """Active means anything but done."""
    return task.status != TaskStatus.DONE


def is_task_completed(task: Task) -> bool:
    return task.status == TaskStatus.DONE


def get_by_id(tasks: Sequence[Task], task_id: str) -> Optional[Task]:
    """Find a task by id, or None."""
    for task in tasks:
        if task.id == task_id:
            return task
    return None


def get_by_status_filter(tasks: Sequence[Task], status_filter: StatusFilter) -> List[Task]:
    """Filter tasks by status.

    Args:
        tasks: Tasks to filter
        status_filter: 'all', 'active' (not done), 'completed' (done),
            or an exact TaskStatus value

    Returns:
        Matching tasks in their original order (empty for unknown filters)
    """
    value = status_filter.value if isinstance(status_filter, Enum) else status_filter

    if value == TaskFilter.ALL.value:
        return list(tasks)
    if value == TaskFilter.ACTIVE.value:
        return [task for task in tasks if is_task_active(task)]
    if value == TaskFilter.COMPLETED.value:
        return [task for task in tasks if is_task_completed(task)]
    if isinstance(value, str) and value in _STATUS_VALUES:
        return [task for task in tasks if task.status == value]

    logger.debug(f"Unknown status filter {status_filter!r}")
    return []


def is_due_today(task: Task, today: Optional[date] = None) -> bool:
    """Check whether a task is due on the given calendar day."""
    if task.due_date is None:
        return False
    return task.due_date == (today or date.today())


def is_overdue(task: Task, today: Optional[date] = None) -> bool:
    """Check whether an unfinished task is past its due date."""
    if task.due_date is None or is_task_completed(task):
        return False
    return task.due_date < (today or date.today())


def get_due_today(tasks: Sequence[Task], today: Optional[date] = None) -> List[Task]:
    today = today or date.today()
    return [task for task in tasks if is_due_today(task, today)]


def get_due_soon(tasks: Sequence[Task], today: Optional[date] = None, days: int = DUE_SOON_DAYS) -> List[Task]:
    """Tasks due between today and `days` days from now (inclusive)."""
    today = today or date.today()
    horizon = today + timedelta(days=days)
    return [task for task in tasks if task.due_date is not None and today <= task.due_date <= horizon]


def get_late(tasks: Sequence[Task], today: Optional[date] = None) -> List[Task]:
    """Unfinished tasks whose due date has passed."""
    today = today or date.today()
    return [task for task in tasks if is_overdue(task, today)]


def get_recently_updated(tasks: Sequence[Task], limit: int = RECENTLY_UPDATED_LIMIT) -> List[Task]:
    """Most recently updated tasks first."""
    return sorted(tasks, key=lambda task: task.updated_at, reverse=True)[:limit]


def count_by_filter(tasks: Sequence[Task], today: Optional[date] = None) -> Dict[str, int]:
    """Counts used by dashboard tiles.

    Uses the same predicates as the list filters so counts always match
    the lists they summarize.
    """
    today = today or date.today()
    return {
        TaskFilter.ALL.value: len(tasks),
        TaskFilter.ACTIVE.value: sum(1 for task in tasks if is_task_active(task)),
        TaskFilter.COMPLETED.value: sum(1 for task in tasks if is_task_completed(task)),
        "due_today": sum(1 for task in tasks if is_due_today(task, today)),
        "late": sum(1 for task in tasks if is_overdue(task, today)),
    }

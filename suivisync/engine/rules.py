"""Task rule engine for suivisync.

Derives dependent field changes from the set of fields a user just changed.
Rules only fire when their trigger field is part of the change set, so an
unrelated edit never re-applies an effect the user has since overridden
(e.g. moving a task from blocked back to todo does not get re-blocked by an
old due date).

Fixed evaluation order, each rule seeing the output of the previous ones:
  R1 terminal suppression  status -> done     clears quick actions
  R2 escalation            status -> blocked  priority = high
  R3 overdue cascade       due_date in past   status = blocked, priority = high
  R4 project provisioning  project_name       adds the project's quick action

The engine is pure and idempotent: applying it to its own output with the
same change set returns an equal task.
"""

from datetime import date
from typing import Iterable, Optional

from suivisync.models.constants import PROJECT_QUICK_ACTIONS
from suivisync.models.quick_action import QuickActionType, has_quick_action, make_quick_action
from suivisync.models.task import Task, TaskPriority, TaskStatus, normalize_field_names


def apply_rules(task: Task, changed_fields: Iterable[str], today: Optional[date] = None) -> Task:
    """Apply the dependency rules to a task.

    Args:
        task: Task with the update already merged in
        changed_fields: Names of the fields present in the update
            (attribute or camelCase names)
        today: Local calendar day used for overdue checks (defaults to today)

    Returns:
        Task with derived effects applied (the input is not modified)
    """
    changed = normalize_field_names(changed_fields)
    today = today or date.today()

    result = _apply_terminal_suppression(task, changed)
    result = _apply_blocked_escalation(result, changed)
    result = _apply_overdue_cascade(result, changed, today)
    result = _apply_project_provisioning(result, changed)
    return result


def _apply_terminal_suppression(task: Task, changed: set) -> Task:
    """R1: a task just moved to done loses its quick actions."""
    if "status" not in changed or task.status != TaskStatus.DONE:
        return task
    return task.model_copy(update={"quick_actions": []})


def _apply_blocked_escalation(task: Task, changed: set) -> Task:
    """R2: a task just moved to blocked becomes high priority."""
    if "status" not in changed or task.status != TaskStatus.BLOCKED:
        return task
    return task.model_copy(update={"priority": TaskPriority.HIGH.value})


def _apply_overdue_cascade(task: Task, changed: set, today: date) -> Task:
    """R3: a due date just moved into the past blocks the task.

    Does not fire when the same update sets the status explicitly, or
    when the task is done.
    """
    if "due_date" not in changed or "status" in changed:
        return task
    if task.status == TaskStatus.DONE or task.due_date is None:
        return task
    if not task.due_date < today:
        return task
    return task.model_copy(update={
        "status": TaskStatus.BLOCKED.value,
        "priority": TaskPriority.HIGH.value,
    })


def _apply_project_provisioning(task: Task, changed: set) -> Task:
    """R4: ensure the quick action tied to the task's project exists."""
    if "project_name" not in changed or task.status == TaskStatus.DONE:
        return task
    tag = PROJECT_QUICK_ACTIONS.get(task.project_name or "")
    if tag is None or has_quick_action(task.quick_actions, tag):
        return task
    return task.model_copy(update={
        "quick_actions": [*task.quick_actions, _provisioned_action(task, tag)],
    })


def _provisioned_action(task: Task, tag: str):
    if tag == QuickActionType.APPROVAL.value:
        # Derived from the task id so re-applying the rules is deterministic.
        return make_quick_action(tag, request_id=f"req_{task.id}")
    return make_quick_action(tag)

"""Merging partial updates into tasks.

Merge semantics per field:
- `custom_fields`: replaced wholesale when present in the update.
- `activities`: concatenated, deduplicated by id (the update wins), then
  sorted newest first.
- `quick_actions`: replaced, keeping one entry per tag.
- everything else: overwritten by the update's value (including None).

After the merge, scalar inputs (progress, weather, ...) are projected onto
the `value` of the matching existing quick action. Projection never creates
quick actions.
"""

from typing import Dict, Iterable, List, Set

from suivisync.models.constants import QUICK_ACTION_FIELD_TAGS
from suivisync.models.quick_action import dedupe_quick_actions, with_payload_value
from suivisync.models.task import Activity, Task, TaskUpdate, UPDATABLE_FIELDS


def merge_activities(existing: Iterable[Activity], incoming: Iterable[Activity]) -> List[Activity]:
    """Merge two activity lists.

    Args:
        existing: Activities currently on the task
        incoming: Activities from the update (win on id conflict)

    Returns:
        Deduplicated activities, newest first
    """
    by_id: Dict[str, Activity] = {}
    for activity in existing:
        by_id[activity.id] = activity
    for activity in incoming:
        by_id[activity.id] = activity
    return sorted(by_id.values(), key=lambda a: a.created_at, reverse=True)


def apply_update(task: Task, update: TaskUpdate) -> Task:
    """Merge a partial update into a task.

    Args:
        task: Current task
        update: Partial update; only explicitly set fields are applied

    Returns:
        New merged Task (the input is not modified)
    """
    changes = {}
    for name in update.changed_fields():
        value = getattr(update, name)
        if name == "activities":
            changes[name] = merge_activities(task.activities, value or [])
        elif name == "custom_fields":
            changes[name] = list(value or [])
        elif name == "quick_actions":
            changes[name] = dedupe_quick_actions(value or [])
        else:
            changes[name] = value
    if not changes:
        return task
    return task.model_copy(update=changes)


def project_quick_action_values(task: Task, changed_fields: Iterable[str]) -> Task:
    """Copy changed scalar inputs onto their quick action payloads.

    Args:
        task: Merged task
        changed_fields: Names of the fields present in the update

    Returns:
        Task whose matching quick actions carry the new values
    """
    changed = set(changed_fields)
    actions = list(task.quick_actions)
    touched = False
    for field, tag in QUICK_ACTION_FIELD_TAGS.items():
        if field not in changed:
            continue
        value = getattr(task, field)
        for index, action in enumerate(actions):
            if action.type == tag:
                actions[index] = with_payload_value(action, value)
                touched = True
    if not touched:
        return task
    return task.model_copy(update={"quick_actions": actions})


def diff_fields(before: Task, after: Task) -> Set[str]:
    """Names of updatable fields whose values differ between two tasks."""
    return {name for name in UPDATABLE_FIELDS if getattr(before, name) != getattr(after, name)}

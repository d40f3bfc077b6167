"""Task creation and normalization for suivisync.

Payloads coming from the task service (or older mock data) do not always
follow the canonical shape. This module turns them into `Task` objects and
centralizes the defaults applied along the way.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from suivisync.models.constants import DEFAULT_TASK_TITLE
from suivisync.models.quick_action import QUICK_ACTION_CLASSES, QuickAction
from suivisync.models.task import Activity, Task, TaskPriority, TaskStatus

logger = logging.getLogger(__name__)

_VALID_STATUSES = {status.value for status in TaskStatus}
_VALID_PRIORITIES = {priority.value for priority in TaskPriority}


def _first(raw: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return value
    return None


def derive_initials(name: Optional[str]) -> Optional[str]:
    """Derive up to two initials from a display name.

    Args:
        name: Display name (e.g. "Alice Martin")

    Returns:
        Uppercase initials (e.g. "AM"), or None for an empty name
    """
    if not name or not name.strip():
        return None
    parts = name.split()
    return "".join(part[0] for part in parts[:2]).upper()


def normalize_status(raw_status: Any) -> str:
    """Map any raw status to a valid TaskStatus value (fallback: todo)."""
    if isinstance(raw_status, TaskStatus):
        return raw_status.value
    if isinstance(raw_status, str) and raw_status in _VALID_STATUSES:
        return raw_status
    return TaskStatus.TODO.value


def normalize_priority(raw_priority: Any) -> Optional[str]:
    """Map a raw priority to a TaskPriority value, or None when unrecognized."""
    if isinstance(raw_priority, TaskPriority):
        return raw_priority.value
    if isinstance(raw_priority, str) and raw_priority.lower() in _VALID_PRIORITIES:
        return raw_priority.lower()
    return None


def normalize_due_date(raw_due: Any) -> Optional[str]:
    """Keep only the calendar date part of a due date string."""
    if raw_due is None:
        return None
    if not isinstance(raw_due, str):
        return raw_due
    return raw_due[:10] if raw_due else None


def normalize_quick_actions(raw: Dict[str, Any]) -> List[QuickAction]:
    """Extract quick actions from either `quickActions` or a legacy `quickAction`.

    Entries with unknown tags or malformed payloads are dropped.
    Only the first action per tag is kept.
    """
    entries = raw.get("quickActions", raw.get("quick_actions"))
    if not isinstance(entries, list):
        legacy = raw.get("quickAction")
        entries = [legacy] if isinstance(legacy, dict) else []

    actions: List[QuickAction] = []
    seen = set()
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        tag = str(entry.get("type") or entry.get("actionType") or "").upper()
        cls = QUICK_ACTION_CLASSES.get(tag)
        if cls is None:
            logger.debug(f"Dropping quick action with unsupported type {tag!r}")
            continue
        if tag in seen:
            continue
        data: Dict[str, Any] = {"type": tag, "payload": entry.get("payload") or {}}
        ui_hint = entry.get("uiHint", entry.get("ui_hint"))
        if ui_hint is not None:
            data["uiHint"] = ui_hint
        try:
            actions.append(cls.model_validate(data))
        except ValidationError as e:
            logger.debug(f"Dropping malformed {tag} quick action: {e}")
            continue
        seen.add(tag)
    return actions


def normalize_activities(raw: Dict[str, Any]) -> List[Activity]:
    """Parse activities, deduplicated by id and sorted newest first."""
    entries = raw.get("activities")
    if not isinstance(entries, list):
        return []
    by_id: Dict[str, Activity] = {}
    for entry in entries:
        if isinstance(entry, Activity):
            by_id[entry.id] = entry
        elif isinstance(entry, dict):
            activity = Activity.model_validate(entry)
            by_id[activity.id] = activity
    return sorted(by_id.values(), key=lambda a: a.created_at, reverse=True)


def normalize_task(raw: Dict[str, Any], now: Optional[datetime] = None) -> Task:
    """Normalize a raw task payload into a Task.

    Tolerates the variations seen across service versions and mock data:
    snake_case keys, nested `assignee` objects, `workspace`/`board` short
    names, a single legacy `quickAction`, unknown statuses.

    Args:
        raw: Task dictionary from the service
        now: Fallback for missing timestamps (defaults to current UTC time)

    Returns:
        Normalized Task object
    """
    now = now or datetime.now(timezone.utc)

    assignee = raw.get("assignee") if isinstance(raw.get("assignee"), dict) else {}
    assignee_name = _first(raw, "assigneeName", "assignee_name") or assignee.get("name") or None
    assignee_initials = _first(raw, "assigneeInitials", "assignee_initials") or derive_initials(assignee_name)

    location = raw.get("location") if isinstance(raw.get("location"), dict) else {}

    data = {
        "id": str(raw.get("id", "")),
        "title": str(_first(raw, "title", "name") or DEFAULT_TASK_TITLE),
        "description": _first(raw, "description"),
        "status": normalize_status(raw.get("status")),
        "due_date": normalize_due_date(_first(raw, "dueDate", "due_date")),
        "priority": normalize_priority(raw.get("priority")),
        "project_id": _first(raw, "projectId", "project_id"),
        "project_name": _first(raw, "projectName", "project_name"),
        "workspace_name": _first(raw, "workspaceName", "workspace_name", "workspace") or location.get("workspaceName"),
        "board_name": _first(raw, "boardName", "board_name", "board") or location.get("boardName"),
        "assignee_name": assignee_name,
        "assignee_initials": assignee_initials,
        "progress": raw.get("progress"),
        "weather": raw.get("weather"),
        "rating": raw.get("rating"),
        "select_value": _first(raw, "selectValue", "select_value"),
        "checkbox_value": raw.get("checkboxValue", raw.get("checkbox_value")),
        "custom_fields": raw.get("customFields", raw.get("custom_fields")) or [],
        "quick_actions": normalize_quick_actions(raw),
        "activities": normalize_activities(raw),
        "created_at": _first(raw, "createdAt", "created_at") or now,
        "updated_at": _first(raw, "updatedAt", "updated_at") or now,
    }
    return Task(**data)


def create_task(data: Dict[str, Any], now: Optional[datetime] = None) -> Task:
    """Create a brand new task from client-provided data.

    A fresh id is generated and both timestamps are set to `now`;
    any id or timestamps in `data` are ignored.

    Args:
        data: Task fields (title required)
        now: Creation time (defaults to current UTC time)

    Returns:
        New Task object

    Raises:
        ValueError: If the title is missing or blank
    """
    title = data.get("title")
    if not isinstance(title, str) or not title.strip():
        raise ValueError("Task title is required")

    now = now or datetime.now(timezone.utc)
    fields = {k: v for k, v in data.items() if k not in {"id", "createdAt", "created_at", "updatedAt", "updated_at"}}
    return normalize_task(
        {**fields, "id": f"task-{uuid.uuid4().hex[:12]}", "createdAt": now, "updatedAt": now},
        now=now,
    )

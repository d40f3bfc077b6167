"""Task data model for suivisync."""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Iterable, List, Optional, Set

from pydantic import Field, field_validator
from pydantic.alias_generators import to_camel

from suivisync.models.base import SuiviModel
from suivisync.models.quick_action import QuickAction, dedupe_quick_actions


class TaskStatus(str, Enum):
    """Task status enumeration."""
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"
    DONE = "done"


class TaskPriority(str, Enum):
    """Task priority enumeration."""
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Naive timestamps from the service are UTC.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class CustomField(SuiviModel):
    """Opaque key/value record attached to a task."""

    key: str = Field(..., description="Field key")
    value: Any = Field(None, description="Field value (opaque)")
    label: Optional[str] = Field(None, description="Display label")

    class Config:
        extra = "allow"


class Activity(SuiviModel):
    """Activity record in a task's history."""

    id: str = Field(..., description="Unique activity identifier")
    created_at: datetime = Field(..., description="Activity timestamp")
    type: Optional[str] = Field(None, description="Event type (e.g. 'TASK_COMPLETED')")
    message: Optional[str] = Field(None, description="Human-readable summary")
    actor_name: Optional[str] = Field(None, description="Who triggered the event")

    class Config:
        extra = "allow"

    @field_validator("created_at")
    @classmethod
    def _validate_created_at(cls, v):
        return _as_utc(v)


class Task(SuiviModel):
    """Canonical Task model, mirrored from the remote task service."""

    id: str = Field(..., description="Unique task identifier (immutable)")
    title: str = Field(..., description="Task title")
    description: Optional[str] = Field(None, description="Task description")
    status: TaskStatus = Field(TaskStatus.TODO, description="Task status")
    due_date: Optional[date] = Field(None, description="Due date (date-only)")
    priority: Optional[TaskPriority] = Field(None, description="Task priority")

    project_id: Optional[str] = None
    project_name: Optional[str] = None
    workspace_name: Optional[str] = None
    board_name: Optional[str] = None
    assignee_name: Optional[str] = None
    assignee_initials: Optional[str] = None

    # Scalar inputs mirrored onto quick action payloads
    progress: Optional[int] = Field(None, ge=0, le=100, description="Progress (0-100)")
    weather: Optional[str] = Field(None, description="Weather condition for field tasks")
    rating: Optional[int] = Field(None, ge=1, le=5, description="Rating (1-5)")
    select_value: Optional[str] = None
    checkbox_value: Optional[bool] = None

    custom_fields: List[CustomField] = Field(default_factory=list)
    quick_actions: List[QuickAction] = Field(default_factory=list)
    activities: List[Activity] = Field(default_factory=list)

    created_at: datetime = Field(..., description="Task creation timestamp")
    updated_at: datetime = Field(..., description="Task last update timestamp")

    @field_validator("created_at", "updated_at")
    @classmethod
    def _validate_timestamps(cls, v):
        return _as_utc(v)

    @field_validator("quick_actions")
    @classmethod
    def _validate_quick_actions(cls, v):
        return dedupe_quick_actions(v)


class TaskUpdate(SuiviModel):
    """Partial update of a task.

    Only explicitly provided keys count as changed (`model_fields_set`),
    so `TaskUpdate(description=None)` clears the description while
    `TaskUpdate()` changes nothing.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    due_date: Optional[date] = None
    priority: Optional[TaskPriority] = None

    project_id: Optional[str] = None
    project_name: Optional[str] = None
    workspace_name: Optional[str] = None
    board_name: Optional[str] = None
    assignee_name: Optional[str] = None
    assignee_initials: Optional[str] = None

    progress: Optional[int] = Field(None, ge=0, le=100)
    weather: Optional[str] = None
    rating: Optional[int] = Field(None, ge=1, le=5)
    select_value: Optional[str] = None
    checkbox_value: Optional[bool] = None

    custom_fields: Optional[List[CustomField]] = None
    quick_actions: Optional[List[QuickAction]] = None
    activities: Optional[List[Activity]] = None

    @field_validator("title", "status")
    @classmethod
    def _validate_required(cls, v, info):
        # Required on Task: may be omitted from an update, never cleared.
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    def changed_fields(self) -> Set[str]:
        """Names of the fields present in this update."""
        return set(self.model_fields_set)

    def to_wire(self) -> dict:
        """Serialize only the fields present in this update."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)

    @classmethod
    def from_task(cls, task: Task, fields: Iterable[str]) -> "TaskUpdate":
        """Build an update carrying `task`'s current values for `fields`."""
        names = [name for name in fields if name in cls.model_fields]
        return cls(**{name: getattr(task, name) for name in names})


UPDATABLE_FIELDS = tuple(TaskUpdate.model_fields)

_ALIAS_TO_FIELD = {to_camel(name): name for name in Task.model_fields}


def field_name(name: str) -> str:
    """Map a wire (camelCase) field name to its attribute name."""
    return _ALIAS_TO_FIELD.get(name, name)


def normalize_field_names(names: Iterable[str]) -> Set[str]:
    """Map a collection of field names (either spelling) to attribute names."""
    return {field_name(name) for name in names}

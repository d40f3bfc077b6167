"""Data models for suivisync."""

from suivisync.models.task import Task, TaskStatus, TaskPriority, TaskUpdate, CustomField, Activity
from suivisync.models.quick_action import QuickAction, QuickActionType, make_quick_action

__all__ = [
    "Task",
    "TaskStatus",
    "TaskPriority",
    "TaskUpdate",
    "CustomField",
    "Activity",
    "QuickAction",
    "QuickActionType",
    "make_quick_action",
]

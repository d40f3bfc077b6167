"""Sync engine for suivisync: rules, merge and selectors."""

from suivisync.engine.rules import apply_rules
from suivisync.engine.merge import apply_update, merge_activities, project_quick_action_values
from suivisync.engine.selectors import TaskFilter, get_by_id, get_by_status_filter

__all__ = [
    "apply_rules",
    "apply_update",
    "merge_activities",
    "project_quick_action_values",
    "TaskFilter",
    "get_by_id",
    "get_by_status_filter",
]

"""Constants for suivisync.

This module centralizes the fixed tables used by the merge and rule engine.
"""

from suivisync.models.quick_action import QuickActionType


# Task scalar field -> quick action whose payload `value` mirrors it
QUICK_ACTION_FIELD_TAGS = {
    "progress": QuickActionType.PROGRESS.value,
    "weather": QuickActionType.WEATHER.value,
    "rating": QuickActionType.RATING.value,
    "due_date": QuickActionType.CALENDAR.value,
    "select_value": QuickActionType.SELECT.value,
    "checkbox_value": QuickActionType.CHECKBOX.value,
}

# Project name -> quick action provisioned when a task moves into that project
PROJECT_QUICK_ACTIONS = {
    "maintenance": QuickActionType.WEATHER.value,
    "deliverable": QuickActionType.PROGRESS.value,
    "approval_flow": QuickActionType.APPROVAL.value,
}

# Selectors
DUE_SOON_DAYS = 7
RECENTLY_UPDATED_LIMIT = 10

DEFAULT_TASK_TITLE = "Untitled task"

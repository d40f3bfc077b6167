"""Seed data for the in-memory task service.

Entries intentionally mix the canonical shape with older ones (a single
`quickAction` with `actionType`, nested `assignee`) so that loading them
exercises normalization.
"""

from typing import Any, Dict, List

from suivisync.models.task import Task
from suivisync.models.task_factory import normalize_task

RAW_TASKS: List[Dict[str, Any]] = [
    {
        "id": "1",
        "title": "Reply to a comment on the design system",
        "status": "in_progress",
        "dueDate": "2024-11-20",
        "workspaceName": "Product",
        "boardName": "Design System",
        "assigneeName": "Alice Martin",
        "quickAction": {"actionType": "CHECKBOX", "uiHint": "simple_checkbox"},
        "createdAt": "2024-11-10T09:00:00Z",
        "updatedAt": "2024-11-16T11:30:00Z",
        "activities": [
            {"id": "act-1", "createdAt": "2024-11-16T11:30:00Z", "type": "TASK_REPLANNED", "message": "Due date moved"},
            {"id": "act-2", "createdAt": "2024-11-10T09:00:00Z", "type": "TASK_CREATED", "message": "Task created"},
        ],
    },
    {
        "id": "2",
        "title": "Approve or reject the UI components request",
        "status": "done",
        "dueDate": "2024-11-18",
        "projectName": "approval_flow",
        "workspace": "Product",
        "board": "Mobile",
        "assignee": {"id": "u-2", "name": "Bruno Petit"},
        "quickAction": {"actionType": "APPROVAL", "uiHint": "approval_dual_button", "payload": {"requestId": "req_1"}},
        "createdAt": "2024-11-08T10:00:00Z",
        "updatedAt": "2024-11-15T16:00:00Z",
    },
    {
        "id": "3",
        "title": "Rate the Inter and IBM Plex Mono font integration",
        "status": "todo",
        "dueDate": "2024-11-25",
        "priority": "normal",
        "workspaceName": "Product",
        "boardName": "Design System",
        "quickActions": [{"type": "RATING", "uiHint": "stars_1_to_5"}],
        "createdAt": "2024-11-12T08:30:00Z",
        "updatedAt": "2024-11-12T08:30:00Z",
    },
    {
        "id": "4",
        "title": "Mark progress on the navigation setup",
        "status": "todo",
        "dueDate": "2024-11-28",
        "projectName": "deliverable",
        "progress": 40,
        "quickActions": [{"type": "PROGRESS", "uiHint": "progress_slider", "payload": {"min": 0, "max": 100, "value": 40}}],
        "createdAt": "2024-11-11T14:00:00Z",
        "updatedAt": "2024-11-14T09:10:00Z",
    },
    {
        "id": "5",
        "title": "Report site weather for the profile page shoot",
        "status": "todo",
        "dueDate": "2024-11-22",
        "projectName": "maintenance",
        "quickAction": {"actionType": "WEATHER", "uiHint": "weather_picker", "payload": {"options": ["sunny", "cloudy", "storm"]}},
        "createdAt": "2024-11-13T07:00:00Z",
        "updatedAt": "2024-11-13T07:00:00Z",
    },
    {
        "id": "6",
        "title": "Set the deadline for the performance pass",
        "status": "blocked",
        "priority": "high",
        "quickActions": [{"type": "CALENDAR", "uiHint": "calendar_picker"}],
        "customFields": [{"key": "team", "value": "platform", "label": "Team"}],
        "createdAt": "2024-11-09T12:00:00Z",
        "updatedAt": "2024-11-15T12:00:00Z",
    },
    {
        "id": "7",
        "title": "Tick off the push notification milestones",
        "status": "todo",
        "dueDate": "2024-12-02",
        "quickActions": [{"type": "CHECKBOX", "uiHint": "simple_checkbox", "payload": {"label": "All milestones done"}}],
        "createdAt": "2024-11-14T15:45:00Z",
        "updatedAt": "2024-11-14T15:45:00Z",
    },
    {
        "id": "8",
        "title": "Choose which unit tests to write first",
        "status": "in_progress",
        "dueDate": "2024-11-21",
        "quickActions": [
            {"type": "SELECT", "uiHint": "dropdown_select", "payload": {"options": ["Option A", "Option B", "Option C"]}}
        ],
        "createdAt": "2024-11-15T10:20:00Z",
        "updatedAt": "2024-11-15T14:20:00Z",
    },
    {
        "id": "9",
        "name": "Finalize the Q1 quarterly plan",
        "status": "review",
        "due_date": "2024-11-20T00:00:00Z",
        "createdAt": "2024-11-01T09:00:00Z",
    },
]


def load_seed_tasks() -> List[Task]:
    """Normalized copies of the seed tasks."""
    return [normalize_task(raw) for raw in RAW_TASKS]

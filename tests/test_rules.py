"""Tests for the task rule engine (pure, deterministic).

Rules only fire for fields present in the change set, run in a fixed
order, and re-applying them to their own output changes nothing.
"""

import pytest
from datetime import date, timedelta

from suivisync.engine.rules import apply_rules
from suivisync.models.quick_action import QuickActionType, make_quick_action
from suivisync.models.task import Task, TaskPriority, TaskStatus

TODAY = date(2024, 11, 20)
YESTERDAY = TODAY - timedelta(days=1)


def _tags(task: Task):
    return [action.type for action in task.quick_actions]


class TestTerminalSuppression:
    """R1: status -> done clears quick actions."""

    def test_done_clears_quick_actions(self, sample_task_base):
        task = Task(**{
            **sample_task_base,
            "status": TaskStatus.DONE,
            "quick_actions": [make_quick_action("WEATHER"), make_quick_action("RATING")],
        })

        result = apply_rules(task, {"status"}, today=TODAY)
        assert result.quick_actions == []

    def test_done_without_status_change_keeps_quick_actions(self, sample_task_base):
        """A task already done keeps its actions when another field changes."""
        task = Task(**{
            **sample_task_base,
            "status": TaskStatus.DONE,
            "quick_actions": [make_quick_action("CHECKBOX")],
        })

        result = apply_rules(task, {"title"}, today=TODAY)
        assert _tags(result) == ["CHECKBOX"]

    def test_input_task_not_modified(self, sample_task_base):
        task = Task(**{**sample_task_base, "status": TaskStatus.DONE, "quick_actions": [make_quick_action("WEATHER")]})

        apply_rules(task, {"status"}, today=TODAY)
        assert _tags(task) == ["WEATHER"]


class TestBlockedEscalation:
    """R2: status -> blocked raises priority to high."""

    def test_blocked_sets_high_priority(self, sample_task_base):
        task = Task(**{**sample_task_base, "status": TaskStatus.BLOCKED, "priority": TaskPriority.LOW})

        result = apply_rules(task, {"status"}, today=TODAY)
        assert result.priority == TaskPriority.HIGH

    def test_blocked_without_status_change_keeps_priority(self, sample_task_base):
        """A user lowering the priority of a blocked task is not overridden."""
        task = Task(**{**sample_task_base, "status": TaskStatus.BLOCKED, "priority": TaskPriority.LOW})

        result = apply_rules(task, {"priority"}, today=TODAY)
        assert result.priority == TaskPriority.LOW

    def test_other_status_does_not_escalate(self, sample_task_base):
        task = Task(**{**sample_task_base, "status": TaskStatus.IN_PROGRESS})

        result = apply_rules(task, {"status"}, today=TODAY)
        assert result.priority == TaskPriority.NORMAL


class TestOverdueCascade:
    """R3: a due date moved into the past blocks the task."""

    def test_past_due_date_blocks_task(self, sample_task_base):
        task = Task(**{**sample_task_base, "status": TaskStatus.TODO, "due_date": YESTERDAY})

        result = apply_rules(task, {"due_date"}, today=TODAY)
        assert result.status == TaskStatus.BLOCKED
        assert result.priority == TaskPriority.HIGH

    def test_explicit_status_in_same_update_wins(self, sample_task_base):
        task = Task(**{**sample_task_base, "status": TaskStatus.TODO, "due_date": YESTERDAY})

        result = apply_rules(task, {"due_date", "status"}, today=TODAY)
        assert result.status == TaskStatus.TODO
        assert result.priority == TaskPriority.NORMAL

    def test_due_today_is_not_overdue(self, sample_task_base):
        task = Task(**{**sample_task_base, "due_date": TODAY})

        result = apply_rules(task, {"due_date"}, today=TODAY)
        assert result.status == TaskStatus.TODO

    def test_done_task_is_not_blocked(self, sample_task_base):
        task = Task(**{**sample_task_base, "status": TaskStatus.DONE, "due_date": YESTERDAY})

        result = apply_rules(task, {"due_date"}, today=TODAY)
        assert result.status == TaskStatus.DONE

    def test_cleared_due_date_does_nothing(self, sample_task_base):
        task = Task(**{**sample_task_base, "due_date": None})

        result = apply_rules(task, {"due_date"}, today=TODAY)
        assert result.status == TaskStatus.TODO

    def test_unrelated_change_does_not_reblock(self, sample_task_base):
        """An old past due date does not re-block a task moved back to todo."""
        task = Task(**{**sample_task_base, "status": TaskStatus.TODO, "due_date": YESTERDAY})

        result = apply_rules(task, {"title"}, today=TODAY)
        assert result.status == TaskStatus.TODO

    def test_accepts_camel_case_field_names(self, sample_task_base):
        task = Task(**{**sample_task_base, "due_date": YESTERDAY})

        result = apply_rules(task, ["dueDate"], today=TODAY)
        assert result.status == TaskStatus.BLOCKED


class TestProjectProvisioning:
    """R4: moving a task into a known project adds that project's quick action."""

    @pytest.mark.parametrize("project_name,expected_tag", [
        ("maintenance", QuickActionType.WEATHER.value),
        ("deliverable", QuickActionType.PROGRESS.value),
        ("approval_flow", QuickActionType.APPROVAL.value),
    ])
    def test_adds_project_quick_action(self, sample_task_base, project_name, expected_tag):
        task = Task(**{**sample_task_base, "project_name": project_name})

        result = apply_rules(task, {"project_name"}, today=TODAY)
        assert _tags(result) == [expected_tag]

    def test_weather_payload_defaults(self, sample_task_base):
        task = Task(**{**sample_task_base, "project_name": "maintenance"})

        result = apply_rules(task, {"project_name"}, today=TODAY)
        assert result.quick_actions[0].payload.options == ["sunny", "cloudy", "storm"]

    def test_progress_payload_range(self, sample_task_base):
        task = Task(**{**sample_task_base, "project_name": "deliverable"})

        payload = apply_rules(task, {"project_name"}, today=TODAY).quick_actions[0].payload
        assert (payload.min, payload.max) == (0, 100)

    def test_approval_request_id_is_derived_from_task(self, sample_task_base):
        task = Task(**{**sample_task_base, "project_name": "approval_flow"})

        result = apply_rules(task, {"project_name"}, today=TODAY)
        assert result.quick_actions[0].payload.request_id == "req_task-1"

    def test_never_duplicates_existing_tag(self, sample_task_base):
        task = Task(**{
            **sample_task_base,
            "project_name": "maintenance",
            "quick_actions": [make_quick_action("WEATHER", value="cloudy")],
        })

        result = apply_rules(task, {"project_name"}, today=TODAY)
        assert _tags(result) == ["WEATHER"]
        assert result.quick_actions[0].payload.value == "cloudy"

    def test_appends_after_existing_actions(self, sample_task_base):
        task = Task(**{
            **sample_task_base,
            "project_name": "deliverable",
            "quick_actions": [make_quick_action("RATING")],
        })

        result = apply_rules(task, {"project_name"}, today=TODAY)
        assert _tags(result) == ["RATING", "PROGRESS"]

    def test_unknown_project_adds_nothing(self, sample_task_base):
        task = Task(**{**sample_task_base, "project_name": "Backend API"})

        result = apply_rules(task, {"project_name"}, today=TODAY)
        assert result.quick_actions == []

    def test_done_task_is_not_provisioned(self, sample_task_base):
        task = Task(**{**sample_task_base, "status": TaskStatus.DONE, "project_name": "maintenance"})

        result = apply_rules(task, {"project_name", "status"}, today=TODAY)
        assert result.quick_actions == []


class TestRuleOrder:
    """Rules see the output of the rules before them."""

    def test_overdue_block_then_provisioning(self, sample_task_base):
        task = Task(**{**sample_task_base, "due_date": YESTERDAY, "project_name": "maintenance"})

        result = apply_rules(task, {"due_date", "project_name"}, today=TODAY)
        assert result.status == TaskStatus.BLOCKED
        assert _tags(result) == ["WEATHER"]

    def test_status_done_with_project_change_stays_empty(self, sample_task_base):
        task = Task(**{
            **sample_task_base,
            "status": TaskStatus.DONE,
            "project_name": "deliverable",
            "quick_actions": [make_quick_action("RATING")],
        })

        result = apply_rules(task, {"status", "project_name"}, today=TODAY)
        assert result.quick_actions == []


class TestIdempotence:
    """apply(apply(e, F), F) == apply(e, F)."""

    @pytest.mark.parametrize("changed", [
        set(),
        {"status"},
        {"due_date"},
        {"project_name"},
        {"status", "due_date"},
        {"due_date", "project_name"},
        {"status", "due_date", "project_name"},
    ])
    @pytest.mark.parametrize("overrides", [
        {"status": TaskStatus.DONE, "quick_actions": [make_quick_action("WEATHER")]},
        {"status": TaskStatus.BLOCKED, "priority": TaskPriority.LOW},
        {"due_date": YESTERDAY, "project_name": "approval_flow"},
        {"due_date": YESTERDAY, "status": TaskStatus.IN_PROGRESS, "project_name": "maintenance"},
        {"due_date": None, "project_name": "deliverable", "quick_actions": [make_quick_action("PROGRESS", value=10)]},
    ])
    def test_reapplying_rules_is_a_no_op(self, sample_task_base, changed, overrides):
        task = Task(**{**sample_task_base, **overrides})

        once = apply_rules(task, changed, today=TODAY)
        twice = apply_rules(once, changed, today=TODAY)
        assert twice.model_dump() == once.model_dump()

"""Quick action data model for suivisync.

A quick action is an interactive affordance attached to a task (weather
picker, progress slider, approval buttons, ...). Each variant is tagged by
`type` and carries a payload whose fields are fixed by that tag.
"""

from datetime import date
from enum import Enum
from typing import Annotated, Any, Dict, Iterable, List, Literal, Optional, Union

from pydantic import Field

from suivisync.models.base import SuiviModel


class QuickActionType(str, Enum):
    """Quick action tag enumeration."""
    WEATHER = "WEATHER"
    PROGRESS = "PROGRESS"
    APPROVAL = "APPROVAL"
    RATING = "RATING"
    CALENDAR = "CALENDAR"
    SELECT = "SELECT"
    CHECKBOX = "CHECKBOX"


DEFAULT_WEATHER_OPTIONS = ["sunny", "cloudy", "storm"]


# Payloads

class WeatherPayload(SuiviModel):
    options: List[str] = Field(default_factory=lambda: list(DEFAULT_WEATHER_OPTIONS))
    value: Optional[str] = None


class ProgressPayload(SuiviModel):
    min: int = 0
    max: int = 100
    value: Optional[int] = None


class ApprovalPayload(SuiviModel):
    request_id: Optional[str] = None
    value: Optional[str] = Field(None, description="Decision: 'approved' or 'rejected'")


class RatingPayload(SuiviModel):
    min: int = 1
    max: int = 5
    value: Optional[int] = None


class CalendarPayload(SuiviModel):
    value: Optional[date] = None


class SelectPayload(SuiviModel):
    options: List[str] = Field(default_factory=list)
    value: Optional[str] = None


class CheckboxPayload(SuiviModel):
    label: Optional[str] = None
    value: Optional[bool] = None


# Variants

class WeatherAction(SuiviModel):
    type: Literal["WEATHER"] = "WEATHER"
    ui_hint: Optional[str] = "weather_picker"
    payload: WeatherPayload = Field(default_factory=WeatherPayload)


class ProgressAction(SuiviModel):
    type: Literal["PROGRESS"] = "PROGRESS"
    ui_hint: Optional[str] = "progress_slider"
    payload: ProgressPayload = Field(default_factory=ProgressPayload)


class ApprovalAction(SuiviModel):
    type: Literal["APPROVAL"] = "APPROVAL"
    ui_hint: Optional[str] = "approval_dual_button"
    payload: ApprovalPayload = Field(default_factory=ApprovalPayload)


class RatingAction(SuiviModel):
    type: Literal["RATING"] = "RATING"
    ui_hint: Optional[str] = "stars_1_to_5"
    payload: RatingPayload = Field(default_factory=RatingPayload)


class CalendarAction(SuiviModel):
    type: Literal["CALENDAR"] = "CALENDAR"
    ui_hint: Optional[str] = "calendar_picker"
    payload: CalendarPayload = Field(default_factory=CalendarPayload)


class SelectAction(SuiviModel):
    type: Literal["SELECT"] = "SELECT"
    ui_hint: Optional[str] = "dropdown_select"
    payload: SelectPayload = Field(default_factory=SelectPayload)


class CheckboxAction(SuiviModel):
    type: Literal["CHECKBOX"] = "CHECKBOX"
    ui_hint: Optional[str] = "simple_checkbox"
    payload: CheckboxPayload = Field(default_factory=CheckboxPayload)


QuickAction = Annotated[
    Union[
        WeatherAction,
        ProgressAction,
        ApprovalAction,
        RatingAction,
        CalendarAction,
        SelectAction,
        CheckboxAction,
    ],
    Field(discriminator="type"),
]

QUICK_ACTION_CLASSES: Dict[str, type] = {
    QuickActionType.WEATHER.value: WeatherAction,
    QuickActionType.PROGRESS.value: ProgressAction,
    QuickActionType.APPROVAL.value: ApprovalAction,
    QuickActionType.RATING.value: RatingAction,
    QuickActionType.CALENDAR.value: CalendarAction,
    QuickActionType.SELECT.value: SelectAction,
    QuickActionType.CHECKBOX.value: CheckboxAction,
}


def _tag(tag: Union[QuickActionType, str]) -> str:
    return tag.value if isinstance(tag, QuickActionType) else str(tag)


def make_quick_action(tag: Union[QuickActionType, str], **payload: Any) -> QuickAction:
    """Build a quick action of the given tag with default payload values.

    Args:
        tag: Quick action tag
        **payload: Payload fields overriding the variant defaults

    Returns:
        Quick action instance

    Raises:
        ValueError: If the tag is unknown
    """
    cls = QUICK_ACTION_CLASSES.get(_tag(tag))
    if cls is None:
        raise ValueError(f"Unknown quick action type: {tag}")
    payload_cls = cls.model_fields["payload"].annotation
    return cls(payload=payload_cls(**payload))


def has_quick_action(actions: Iterable[QuickAction], tag: Union[QuickActionType, str]) -> bool:
    """Check whether a quick action with this tag is already present."""
    wanted = _tag(tag)
    return any(action.type == wanted for action in actions)


def with_payload_value(action: QuickAction, value: Any) -> QuickAction:
    """Return a copy of the action whose payload `value` is replaced."""
    payload = action.payload.model_copy(update={"value": value})
    return action.model_copy(update={"payload": payload})


def dedupe_quick_actions(actions: Iterable[QuickAction]) -> List[QuickAction]:
    """Keep the first quick action per tag, preserving order."""
    seen = set()
    unique: List[QuickAction] = []
    for action in actions:
        if action.type in seen:
            continue
        seen.add(action.type)
        unique.append(action)
    return unique

"""Headless activity picker: what the log-activity dialog collects, minus rendering."""

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, Field

from wrestlequest.kb import SKILL_ACTIVITIES
from wrestlequest.models.enums import SkillName
from wrestlequest.models.kb import ActivityDefinition
from wrestlequest.session.exceptions import SelectionError

DURATION_CHOICES = 10


class ActivitySelection(BaseModel):
    activity_name: str = Field(min_length=1)
    duration: int = Field(default=0, ge=0)
    is_custom: bool = False


def duration_options(activity: ActivityDefinition) -> list[int]:
    """Minute choices offered for an activity: one to ten units, empty for one-off and Custom."""
    if activity.unit_minutes <= 0:
        return []
    return [activity.unit_minutes * (i + 1) for i in range(DURATION_CHOICES)]


class SelectionDialog:
    """Pick an activity for one skill and emit at most one (name, duration) pair.

    on_log receives the confirmed selection; whatever it returns is handed
    back from confirm().
    """

    def __init__(self, skill_name: SkillName | str, on_log: Callable[[ActivitySelection], Any]):
        self.skill_name = SkillName(skill_name)
        self._on_log = on_log
        self.selected: ActivityDefinition | None = None
        self.is_open = True

    def activities(self) -> list[ActivityDefinition]:
        return list(SKILL_ACTIVITIES[self.skill_name])

    def select(self, activity_name: str) -> ActivityDefinition:
        self._ensure_open()
        for activity in SKILL_ACTIVITIES[self.skill_name]:
            if activity.name == activity_name:
                self.selected = activity
                return activity
        raise SelectionError(
            f"{activity_name!r} is not an activity for {self.skill_name.value}",
            skill_name=self.skill_name.value,
        )

    def confirm(self, duration: int | None = None, custom_name: str | None = None) -> Any:
        self._ensure_open()
        if self.selected is None:
            raise SelectionError("No activity selected", skill_name=self.skill_name.value)

        activity = self.selected
        if activity.is_custom:
            name = (custom_name or "").strip()
            if not name:
                raise SelectionError("Custom activity needs a name", skill_name=self.skill_name.value)
            if duration is not None and duration < 0:
                raise SelectionError(
                    f"Duration must be non-negative, got {duration}",
                    skill_name=self.skill_name.value,
                )
            selection = ActivitySelection(activity_name=name, duration=duration or 0, is_custom=True)
        elif activity.is_one_off:
            selection = ActivitySelection(activity_name=activity.name)
        else:
            if duration is None or duration < 0:
                raise SelectionError(
                    f"{activity.name} needs a duration in minutes",
                    skill_name=self.skill_name.value,
                )
            selection = ActivitySelection(activity_name=activity.name, duration=duration)

        self.is_open = False
        return self._on_log(selection)

    def cancel(self) -> None:
        self.is_open = False
        self.selected = None

    def _ensure_open(self) -> None:
        if not self.is_open:
            raise SelectionError("Dialog already closed", skill_name=self.skill_name.value)

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from wrestlequest.models.kb import ProgressionConfig


class StreakUpdate(BaseModel):
    consecutive_days: int = Field(ge=0)
    bonus_points: int = Field(default=0, ge=0)
    last_activity_date: datetime


def _utc_day(value: datetime):
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).date()


def day_difference(last: datetime, now: datetime) -> int:
    """Whole calendar days (UTC) between two instants. Naive values are taken as UTC."""
    return (_utc_day(now) - _utc_day(last)).days


def advance_streak(
    consecutive_days: int,
    last_activity_date: datetime | None,
    now: datetime,
    config: ProgressionConfig,
) -> StreakUpdate:
    """Streak step for one logged activity.

    Next day: +1, and a bonus whenever the count lands on a multiple of
    streak_bonus_every. Longer gap: reset to 0. Same day (or a clock that went
    backwards): unchanged. last_activity_date always moves to now.
    """
    days = consecutive_days
    bonus = 0

    if last_activity_date is not None:
        gap = day_difference(last_activity_date, now)
        if gap == 1:
            days += 1
            if days % config.streak_bonus_every == 0:
                bonus = config.streak_bonus_points
        elif gap > 1:
            days = 0

    return StreakUpdate(consecutive_days=days, bonus_points=bonus, last_activity_date=now)

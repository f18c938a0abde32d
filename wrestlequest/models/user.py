from datetime import datetime

from pydantic import BaseModel, Field

from wrestlequest.models.enums import SkillName


class SkillState(BaseModel):
    name: SkillName
    color: str
    xp_value: int = Field(ge=0)
    # Upper bound is points_per_rank - 1, checked against the config by the validator
    points: int = Field(default=0, ge=0)
    rank: int = Field(default=1, ge=1)
    total_points: int = Field(default=0, ge=0)
    # Animation cue only, never written to the store
    is_leveling_up: bool = Field(default=False, exclude=True)


class UserProgress(BaseModel):
    name: str = ""
    quest: str = ""
    profile_image: str = "/placeholder.svg"
    level: int = Field(default=1, ge=1)
    xp: int = Field(default=0, ge=0)
    last_activity_date: datetime | None = None
    consecutive_days: int = Field(default=0, ge=0)
    skills: list[SkillState] = Field(min_length=7, max_length=7)

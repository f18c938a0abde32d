from pydantic import BaseModel, ConfigDict, Field

from wrestlequest.models.enums import LevelPolicy, SkillName

# unit_minutes sentinel for free-form activities named by the user
CUSTOM_UNIT = -1


class ActivityDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    unit_minutes: int = Field(ge=CUSTOM_UNIT)  # 0 = one-off, -1 = Custom

    @property
    def is_custom(self) -> bool:
        return self.unit_minutes == CUSTOM_UNIT

    @property
    def is_one_off(self) -> bool:
        return self.unit_minutes == 0


class SkillDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: SkillName
    color: str
    xp_value: int = Field(default=50, ge=0)


class RankTitle(BaseModel):
    min_level: int = Field(ge=1)
    title: str


class ProgressionConfig(BaseModel):
    points_per_rank: int = Field(default=5, ge=1)
    xp_per_level: int = Field(default=500, ge=1)
    streak_bonus_every: int = Field(default=7, ge=1)
    streak_bonus_points: int = Field(default=1, ge=0)
    level_up_flash_seconds: float = Field(default=0.5, ge=0)
    level_policy: LevelPolicy = LevelPolicy.RECOMPUTE

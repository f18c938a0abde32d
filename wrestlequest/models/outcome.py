from pydantic import BaseModel, Field

from wrestlequest.models.enums import TransitionStatus, WriteStatus
from wrestlequest.models.user import UserProgress


class AppliedActivity(BaseModel):
    skill_index: int
    activity_name: str
    duration: int
    base_points: int = Field(ge=0)
    streak_bonus: int = Field(default=0, ge=0)
    rank_ups: int = Field(default=0, ge=0)

    @property
    def points_earned(self) -> int:
        return self.base_points + self.streak_bonus


class ApplyOutcome(BaseModel):
    status: TransitionStatus = TransitionStatus.APPLIED
    progress: UserProgress
    applied: AppliedActivity
    write: WriteStatus
    error: str | None = None


class UndoOutcome(BaseModel):
    status: TransitionStatus
    progress: UserProgress
    skill_index: int
    write: WriteStatus
    error: str | None = None


class ProgressSnapshot(BaseModel):
    """One delivery from the store: the raw document plus its change token.

    ``document`` is None when nothing is stored for the user yet. It stays a
    plain dict so the receiver can decide whether it is well formed.
    """

    user_id: str
    revision: int = Field(ge=0)
    document: dict | None = None

    @property
    def exists(self) -> bool:
        return self.document is not None


class ValidationViolation(BaseModel):
    rule_id: str
    message: str
    skill_index: int | None = None


class ValidationResult(BaseModel):
    valid: bool
    violations: list[ValidationViolation] = Field(default_factory=list)
    progress: UserProgress | None = None

from pydantic import ValidationError

from wrestlequest.kb import PROGRESSION_CONFIG, SKILL_ORDER
from wrestlequest.models.kb import ProgressionConfig
from wrestlequest.models.outcome import ValidationResult, ValidationViolation
from wrestlequest.models.user import UserProgress


_REQUIRED_KEYS = ("name", "quest", "level", "xp", "last_activity_date", "consecutive_days", "skills")
_REQUIRED_SKILL_KEYS = ("name", "color", "xp_value", "points", "rank", "total_points")


def _validate_required(data: dict) -> list[ValidationViolation]:
    """FIELDS: stored documents are whole; defaults never fill a gap."""
    violations = [
        ValidationViolation(rule_id="FIELDS", message=f"Missing field {key}")
        for key in _REQUIRED_KEYS
        if key not in data
    ]
    skills = data.get("skills")
    if isinstance(skills, list):
        for i, skill in enumerate(skills):
            if not isinstance(skill, dict):
                continue
            violations.extend(
                ValidationViolation(
                    rule_id="FIELDS",
                    message=f"Skill {i} missing field {key}",
                    skill_index=i,
                )
                for key in _REQUIRED_SKILL_KEYS
                if key not in skill
            )
    return violations


def _validate_shape(data: dict) -> tuple[UserProgress | None, list[ValidationViolation]]:
    """SHAPE: document parses into UserProgress with every field in range."""
    missing = _validate_required(data)
    if missing:
        return None, missing
    try:
        return UserProgress.model_validate(data), []
    except ValidationError as e:
        return None, [
            ValidationViolation(
                rule_id="SHAPE",
                message=f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}",
            )
            for err in e.errors()
        ]


def _validate_skill_roster(progress: UserProgress) -> list[ValidationViolation]:
    """ROSTER: the seven skills appear once each, in the fixed order."""
    violations: list[ValidationViolation] = []
    for i, (skill, expected) in enumerate(zip(progress.skills, SKILL_ORDER)):
        if skill.name != expected:
            violations.append(
                ValidationViolation(
                    rule_id="ROSTER",
                    message=f"Skill {i} is {skill.name.value}, expected {expected.value}",
                    skill_index=i,
                )
            )
    return violations


def _validate_points(progress: UserProgress, config: ProgressionConfig) -> list[ValidationViolation]:
    """POINTS: a skill holds fewer points than one full rank."""
    return [
        ValidationViolation(
            rule_id="POINTS",
            message=f"{skill.name.value} holds {skill.points} points, limit {config.points_per_rank - 1}",
            skill_index=i,
        )
        for i, skill in enumerate(progress.skills)
        if skill.points >= config.points_per_rank
    ]


def _validate_rank_floor(progress: UserProgress) -> list[ValidationViolation]:
    """RANK: a skill above rank 1 must have earned at least one full rank of points."""
    violations: list[ValidationViolation] = []
    for i, skill in enumerate(progress.skills):
        if skill.rank > 1 and skill.total_points == 0:
            violations.append(
                ValidationViolation(
                    rule_id="RANK",
                    message=f"{skill.name.value} at rank {skill.rank} with no points earned",
                    skill_index=i,
                )
            )
    return violations


def validate_progress(data: dict, config: ProgressionConfig = PROGRESSION_CONFIG) -> ValidationResult:
    """Check a raw stored document before it is allowed to replace local state.

    Point bounds depend on config.points_per_rank, so pass the config the
    document was written under.
    """
    progress, violations = _validate_shape(data)
    if progress is None:
        return ValidationResult(valid=False, violations=violations)

    violations.extend(_validate_skill_roster(progress))
    violations.extend(_validate_points(progress, config))
    violations.extend(_validate_rank_floor(progress))
    return ValidationResult(
        valid=len(violations) == 0,
        violations=violations,
        progress=progress if not violations else None,
    )

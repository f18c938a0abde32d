"""Progression transitions. Each takes a whole UserProgress and returns a new one.

Nothing here mutates its input; callers own persistence.
"""

from datetime import datetime

from wrestlequest.engine.exceptions import InvalidSkillError
from wrestlequest.engine.level import level_after_gain, level_for_xp
from wrestlequest.engine.points import FLAT_POINTS, check_duration, resolve_points
from wrestlequest.engine.streak import advance_streak
from wrestlequest.kb import PROGRESSION_CONFIG
from wrestlequest.models.kb import ProgressionConfig
from wrestlequest.models.outcome import AppliedActivity
from wrestlequest.models.user import SkillState, UserProgress


def check_skill_index(progress: UserProgress, skill_index: int) -> SkillState:
    # bool is an int subclass; True would silently mean skill 1
    if isinstance(skill_index, bool) or not isinstance(skill_index, int):
        raise InvalidSkillError(skill_index, len(progress.skills))
    if not 0 <= skill_index < len(progress.skills):
        raise InvalidSkillError(skill_index, len(progress.skills))
    return progress.skills[skill_index]


def _replace_skill(progress: UserProgress, skill_index: int, skill: SkillState) -> list[SkillState]:
    skills = list(progress.skills)
    skills[skill_index] = skill
    return skills


def apply_activity(
    progress: UserProgress,
    skill_index: int,
    activity_name: str,
    duration: int,
    now: datetime,
    config: ProgressionConfig = PROGRESSION_CONFIG,
    custom: bool = False,
) -> tuple[UserProgress, AppliedActivity]:
    """Log one activity against a skill: streak, points, rank-ups, xp, level.

    custom=True marks a user-named activity; it earns FLAT_POINTS even if the
    name happens to match a catalog entry.

    Raises InvalidSkillError for a bad index and ValueError for a negative or
    fractional duration, before anything is computed.
    """
    skill = check_skill_index(progress, skill_index)
    check_duration(duration)

    if custom:
        base_points = FLAT_POINTS
    else:
        base_points = resolve_points(skill.name, activity_name, duration)

    streak = advance_streak(progress.consecutive_days, progress.last_activity_date, now, config)
    earned = base_points + streak.bonus_points

    total_new = skill.points + earned
    rank_ups = total_new // config.points_per_rank
    remainder = total_new % config.points_per_rank

    skill_update: dict = {"total_points": skill.total_points + earned}
    if rank_ups > 0:
        skill_update.update(
            {
                "rank": skill.rank + rank_ups,
                "points": remainder,
                "is_leveling_up": True,
            }
        )
    else:
        skill_update["points"] = total_new

    xp = progress.xp + skill.xp_value * earned
    level = level_after_gain(progress.level, xp, config)

    updated = progress.model_copy(
        update={
            "xp": xp,
            "level": level,
            "consecutive_days": streak.consecutive_days,
            "last_activity_date": streak.last_activity_date,
            "skills": _replace_skill(progress, skill_index, skill.model_copy(update=skill_update)),
        }
    )
    applied = AppliedActivity(
        skill_index=skill_index,
        activity_name=activity_name,
        duration=duration,
        base_points=base_points,
        streak_bonus=streak.bonus_points,
        rank_ups=rank_ups,
    )
    return updated, applied


def can_undo(skill: SkillState) -> bool:
    return skill.points > 0 or (skill.points == 0 and skill.rank > 1)


def undo_point(
    progress: UserProgress,
    skill_index: int,
    config: ProgressionConfig = PROGRESSION_CONFIG,
) -> UserProgress | None:
    """Take one point back from a skill. None when there is nothing to take.

    At a rank boundary the rank drops and points wrap to the top of the
    previous rank. Level is always recomputed from xp. Streak is untouched.
    """
    skill = check_skill_index(progress, skill_index)
    if not can_undo(skill):
        return None

    if skill.points == 0:
        skill_update = {"points": config.points_per_rank - 1, "rank": skill.rank - 1}
    else:
        skill_update = {"points": skill.points - 1}
    skill_update["total_points"] = skill.total_points - 1

    xp = max(0, progress.xp - skill.xp_value)

    return progress.model_copy(
        update={
            "xp": xp,
            "level": level_for_xp(xp, config),
            "skills": _replace_skill(progress, skill_index, skill.model_copy(update=skill_update)),
        }
    )


def clear_leveling_up(progress: UserProgress, skill_index: int) -> UserProgress:
    """Drop the level-up animation flag. Returns the input itself if already clear."""
    skill = check_skill_index(progress, skill_index)
    if not skill.is_leveling_up:
        return progress
    return progress.model_copy(
        update={
            "skills": _replace_skill(
                progress, skill_index, skill.model_copy(update={"is_leveling_up": False})
            )
        }
    )

from wrestlequest.kb import PROGRESSION_CONFIG, RANK_TITLES
from wrestlequest.models.enums import LevelPolicy
from wrestlequest.models.kb import ProgressionConfig
from wrestlequest.models.user import SkillState


def xp_threshold(level: int, config: ProgressionConfig = PROGRESSION_CONFIG) -> int:
    return level * config.xp_per_level


def level_for_xp(xp: int, config: ProgressionConfig = PROGRESSION_CONFIG) -> int:
    """Canonical level: one level per xp_per_level, starting at 1."""
    return xp // config.xp_per_level + 1


def level_after_gain(level: int, xp: int, config: ProgressionConfig = PROGRESSION_CONFIG) -> int:
    """Level after an xp gain under the configured policy.

    INCREMENTAL reproduces the legacy single-shot bump: if xp reaches the
    current threshold, add xp // threshold once, with no second check against
    the new threshold.
    """
    if config.level_policy == LevelPolicy.RECOMPUTE:
        return level_for_xp(xp, config)
    threshold = xp_threshold(level, config)
    if xp >= threshold:
        return level + xp // threshold
    return level


def level_progress(xp: int, level: int, config: ProgressionConfig = PROGRESSION_CONFIG) -> float:
    """Fraction of the current level's bar that is filled."""
    return (xp - (level - 1) * config.xp_per_level) / config.xp_per_level


def level_progress_percent(xp: int, level: int, config: ProgressionConfig = PROGRESSION_CONFIG) -> float:
    return level_progress(xp, level, config) * 100


def rank_title(level: int) -> str:
    title = RANK_TITLES[0].title
    for rt in RANK_TITLES:
        if level >= rt.min_level:
            title = rt.title
    return title


def skill_max_points(total_points: int, config: ProgressionConfig = PROGRESSION_CONFIG) -> int:
    """Denominator for the "skill points: n/max" display."""
    per_rank = config.points_per_rank
    return total_points // per_rank * per_rank + per_rank


def skill_bar_percent(skill: SkillState, config: ProgressionConfig = PROGRESSION_CONFIG) -> float:
    if skill.is_leveling_up:
        return 100.0
    if skill.points == 0:
        return 5.0  # sliver so an empty bar still shows the skill color
    return skill.points * 100 / config.points_per_rank

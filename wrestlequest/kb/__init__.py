"""Static knowledge base: activity catalog, skill roster, titles, tunables.

Versioned with the code. Nothing here is user-configurable.
"""

from wrestlequest.models.enums import SkillName
from wrestlequest.models.kb import (
    CUSTOM_UNIT,
    ActivityDefinition,
    ProgressionConfig,
    RankTitle,
    SkillDefinition,
)
from wrestlequest.models.user import SkillState, UserProgress

CATALOG_VERSION = 1

CUSTOM_ACTIVITY_NAME = "Custom"


def _custom() -> ActivityDefinition:
    return ActivityDefinition(name=CUSTOM_ACTIVITY_NAME, unit_minutes=CUSTOM_UNIT)


SKILL_ACTIVITIES: dict[SkillName, tuple[ActivityDefinition, ...]] = {
    SkillName.TECHNIQUE: (
        ActivityDefinition(name="Wrestling practice", unit_minutes=60),
        ActivityDefinition(name="Specific drilling", unit_minutes=30),
        ActivityDefinition(name="Film Study", unit_minutes=20),
        _custom(),
    ),
    SkillName.STRENGTH: (
        ActivityDefinition(name="Strength training", unit_minutes=60),
        _custom(),
    ),
    SkillName.ENDURANCE: (
        ActivityDefinition(name="Run 2 miles", unit_minutes=0),
        ActivityDefinition(name="HIIT cardio session", unit_minutes=30),
        ActivityDefinition(name="Wrestling conditioning", unit_minutes=60),
        _custom(),
    ),
    SkillName.SPEED_AGILITY: (
        ActivityDefinition(name="Sprint intervals", unit_minutes=0),
        ActivityDefinition(name="Ladder/agility drills", unit_minutes=20),
        ActivityDefinition(name="Plyometric exercises", unit_minutes=30),
        _custom(),
    ),
    SkillName.MINDSET: (
        ActivityDefinition(name="Visualization", unit_minutes=10),
        ActivityDefinition(name="Mindfulness meditation", unit_minutes=10),
        ActivityDefinition(name="Gratitude journal", unit_minutes=10),
        ActivityDefinition(name="Positive self-talk", unit_minutes=10),
        _custom(),
    ),
    SkillName.RECOVERY_HEALTH: (
        ActivityDefinition(name="Ice bath/contrast shower", unit_minutes=0),
        ActivityDefinition(name="Stretch/foam roll", unit_minutes=15),
        ActivityDefinition(name="1 gallon water intake", unit_minutes=0),
        ActivityDefinition(name="Meet protein goal", unit_minutes=0),
        _custom(),
    ),
    SkillName.FLEXIBILITY: (
        ActivityDefinition(name="Yoga session", unit_minutes=30),
        ActivityDefinition(name="Static stretching", unit_minutes=15),
        _custom(),
    ),
}

# Order matters: a stored document lists its skills in exactly this order.
SKILL_DEFINITIONS: tuple[SkillDefinition, ...] = (
    SkillDefinition(name=SkillName.TECHNIQUE, color="bg-blue-400"),
    SkillDefinition(name=SkillName.STRENGTH, color="bg-yellow-400"),
    SkillDefinition(name=SkillName.ENDURANCE, color="bg-pink-400"),
    SkillDefinition(name=SkillName.SPEED_AGILITY, color="bg-purple-400"),
    SkillDefinition(name=SkillName.MINDSET, color="bg-orange-400"),
    SkillDefinition(name=SkillName.RECOVERY_HEALTH, color="bg-red-400"),
    SkillDefinition(name=SkillName.FLEXIBILITY, color="bg-green-400"),
)

SKILL_ORDER: tuple[SkillName, ...] = tuple(s.name for s in SKILL_DEFINITIONS)

RANK_TITLES: tuple[RankTitle, ...] = (
    RankTitle(min_level=1, title="NOVICE"),
    RankTitle(min_level=5, title="STRIKER"),
    RankTitle(min_level=12, title="GRAPPLER"),
    RankTitle(min_level=25, title="CHAMPION"),
    RankTitle(min_level=50, title="LEGEND"),
)

PROGRESSION_CONFIG = ProgressionConfig()


def find_activity(skill_name: SkillName | str, activity_name: str) -> ActivityDefinition | None:
    """Look up a catalog entry by skill and activity name. None if absent."""
    try:
        skill = SkillName(skill_name)
    except ValueError:
        return None
    for activity in SKILL_ACTIVITIES[skill]:
        if activity.name == activity_name:
            return activity
    return None


def default_progress() -> UserProgress:
    """All-zero starting document for a user seen for the first time."""
    return UserProgress(
        skills=[
            SkillState(name=s.name, color=s.color, xp_value=s.xp_value)
            for s in SKILL_DEFINITIONS
        ]
    )

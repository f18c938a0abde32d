from wrestlequest.kb import find_activity
from wrestlequest.models.enums import SkillName
from wrestlequest.models.kb import ActivityDefinition

# Awarded for one-off, Custom and unrecognised activities
FLAT_POINTS = 1


def check_duration(duration: int) -> int:
    """Whole, non-negative minutes. Raises ValueError otherwise."""
    # bool is an int subclass; floats would make fractional points
    if isinstance(duration, bool) or not isinstance(duration, int):
        raise ValueError(f"duration must be whole minutes, got {duration!r}")
    if duration < 0:
        raise ValueError(f"duration must be non-negative, got {duration}")
    return duration


def compute_points(activity: ActivityDefinition, duration: int) -> int:
    """Points for one logging event: duration // unit, or flat 1 for one-off/Custom.

    A duration shorter than one unit yields 0, which is a valid result.
    """
    check_duration(duration)
    if activity.is_custom or activity.is_one_off:
        return FLAT_POINTS
    return duration // activity.unit_minutes


def resolve_points(skill_name: SkillName | str, activity_name: str, duration: int) -> int:
    """Catalog-backed points. Names missing from the catalog earn FLAT_POINTS."""
    check_duration(duration)
    activity = find_activity(skill_name, activity_name)
    if activity is None:
        return FLAT_POINTS
    return compute_points(activity, duration)

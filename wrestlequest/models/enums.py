from enum import Enum


class SkillName(str, Enum):
    TECHNIQUE = "Technique"
    STRENGTH = "Strength"
    ENDURANCE = "Endurance"
    SPEED_AGILITY = "Spd/Agility"
    MINDSET = "Mindset"
    RECOVERY_HEALTH = "Rec/Health"
    FLEXIBILITY = "Flexibility"


class LevelPolicy(str, Enum):
    RECOMPUTE = "recompute"  # level = xp // xp_per_level + 1
    INCREMENTAL = "incremental"  # single-shot bump on apply


class TransitionStatus(str, Enum):
    APPLIED = "applied"
    NOT_APPLICABLE = "not_applicable"


class WriteStatus(str, Enum):
    ACKED = "acked"
    FAILED = "failed"
    SKIPPED = "skipped"


class SyncState(str, Enum):
    IDLE = "idle"
    WRITING = "writing"

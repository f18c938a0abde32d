from wrestlequest.models.enums import (
    LevelPolicy,
    SkillName,
    SyncState,
    TransitionStatus,
    WriteStatus,
)
from wrestlequest.models.kb import (
    CUSTOM_UNIT,
    ActivityDefinition,
    ProgressionConfig,
    RankTitle,
    SkillDefinition,
)
from wrestlequest.models.user import (
    SkillState,
    UserProgress,
)
from wrestlequest.models.outcome import (
    AppliedActivity,
    ApplyOutcome,
    UndoOutcome,
    ProgressSnapshot,
    ValidationViolation,
    ValidationResult,
)

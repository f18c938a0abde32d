from __future__ import annotations


class InvalidSkillError(ValueError):
    """Raised when a skill index does not point at one of the fixed skills."""

    def __init__(self, skill_index: int, skill_count: int = 7):
        super().__init__(f"skill index {skill_index} out of range 0..{skill_count - 1}")
        self.skill_index = skill_index
        self.skill_count = skill_count

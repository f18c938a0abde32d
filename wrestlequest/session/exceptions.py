from __future__ import annotations


class SelectionError(ValueError):
    """Raised when a selection dialog is confirmed without the input it needs."""

    def __init__(self, message: str, skill_name: str | None = None):
        super().__init__(message)
        self.skill_name = skill_name

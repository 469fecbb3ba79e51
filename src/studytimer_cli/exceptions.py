"""Custom exceptions for Study Timer."""


class StudyTimerError(Exception):
    """Base exception for all Study Timer errors."""


class InvalidInputError(StudyTimerError):
    """Raised when user input cannot be used (non-positive duration, bad goal)."""


class PersistenceReadError(StudyTimerError):
    """Raised when a persisted record is missing, unreadable or malformed."""


class PersistenceWriteError(StudyTimerError):
    """Raised when a persisted record cannot be written."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Failed to save '{key}': {reason}")

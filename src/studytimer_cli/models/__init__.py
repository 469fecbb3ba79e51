"""Data models for Study Timer."""

from .config_models import AppConfig, HistoryConfig, Preferences, StorageConfig, TimerConfig
from .session import KIND_LABELS, SESSION_KINDS, Session, SessionKind

__all__ = [
    "AppConfig",
    "HistoryConfig",
    "Preferences",
    "StorageConfig",
    "TimerConfig",
    "Session",
    "SessionKind",
    "SESSION_KINDS",
    "KIND_LABELS",
]

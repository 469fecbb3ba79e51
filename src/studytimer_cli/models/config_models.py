"""Configuration and preference models."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

DEFAULT_DAILY_GOAL_MINUTES = 120


class TimerConfig(BaseModel):
    """Timer durations and scheduling."""

    study_minutes: int = Field(default=25, gt=0)
    short_break_minutes: int = Field(default=5, gt=0)
    long_break_minutes: int = Field(default=15, gt=0)
    auto_advance_delay_seconds: float = Field(default=2.0, ge=0)
    tick_interval_seconds: float = Field(default=1.0, gt=0)

    def default_seconds(self, kind: str) -> int:
        """Default duration in seconds for a session kind."""
        minutes = {
            "study": self.study_minutes,
            "short-break": self.short_break_minutes,
            "long-break": self.long_break_minutes,
        }[kind]
        return minutes * 60


class HistoryConfig(BaseModel):
    """History view and export configuration."""

    page_size: int = Field(default=10, gt=0)
    export_filename: str = Field(default="study-sessions.csv")


class StorageConfig(BaseModel):
    """Where persisted records live."""

    data_dir: str | None = Field(
        default=None, description="Override for the platform data directory"
    )

    @field_validator("data_dir")
    @classmethod
    def validate_data_dir(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v


class AppConfig(BaseModel):
    """Main Study Timer configuration."""

    timer: TimerConfig = Field(default_factory=TimerConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)


class Preferences(BaseModel):
    """User preferences, persisted independently of sessions."""

    daily_goal_minutes: int = Field(default=DEFAULT_DAILY_GOAL_MINUTES, ge=0)
    dark_mode: bool = Field(default=False)

    @property
    def theme(self) -> str:
        return "dark" if self.dark_mode else "light"

"""Today's study summary."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from studytimer_cli.models.session import Session


def motivation_message(session_count: int) -> str:
    """Encouragement picked by how many sessions were completed today."""
    if session_count == 0:
        return "Ready to start your first session? 💪"
    if session_count == 1:
        return "Great start! Keep the momentum going! 🚀"
    if session_count < 5:
        return "You're building great habits! 🌟"
    return "Amazing consistency! You're on fire! 🔥"


@dataclass(frozen=True)
class DailySummary:
    total_minutes: int
    session_count: int
    last_session: Session | None
    message: str

    def to_dict(self) -> dict:
        return {
            "total_minutes": self.total_minutes,
            "session_count": self.session_count,
            "last_session": self.last_session.to_dict() if self.last_session else None,
            "message": self.message,
        }


def build_daily_summary(todays_study_sessions: Sequence[Session]) -> DailySummary:
    """Summarise today's study sessions (newest first, as stored)."""
    count = len(todays_study_sessions)
    return DailySummary(
        total_minutes=sum(session.duration for session in todays_study_sessions),
        session_count=count,
        last_session=todays_study_sessions[0] if count else None,
        message=motivation_message(count),
    )

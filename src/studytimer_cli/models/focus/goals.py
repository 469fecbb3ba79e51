"""Daily study goal and progress tracking."""

from __future__ import annotations

import math
import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from studytimer_cli.models.session import Session

from .engine import round_half_up

if TYPE_CHECKING:
    from studytimer_cli.exceptions import PersistenceWriteError
    from studytimer_cli.services.config_service import PreferencesService
    from studytimer_cli.services.session_store import SessionStore

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def leading_int(text: str) -> int | None:
    """Integer at the start of *text* (`parseInt` semantics), or None."""
    match = _LEADING_INT.match(text)
    if not match:
        return None
    return int(match.group(1))


def parse_goal_minutes(value: Any) -> int:
    """
    Coerce user input into a daily goal in minutes.

    Fallback table:
        None, empty or non-numeric text  -> 0
        bool                             -> 0
        negative numbers                 -> 0
        float / NaN / inf                -> truncated toward zero; NaN, inf -> 0
        text with a leading integer      -> that integer ("45.9" -> 45, "12abc" -> 12)
        int >= 0                         -> unchanged
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(0, value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return 0
        return max(0, int(value))
    if isinstance(value, str):
        parsed = leading_int(value)
        if parsed is None:
            return 0
        return max(0, parsed)
    return 0


@dataclass(frozen=True)
class GoalProgress:
    """Today's study time measured against the daily goal."""

    total_minutes: int
    goal_minutes: int
    progress_percent: float  # capped at 100
    met: bool
    remaining_minutes: int

    @property
    def display_percent(self) -> int:
        """Progress rounded to the nearest whole percent (62.5 -> 63)."""
        return round_half_up(self.progress_percent)

    def to_dict(self) -> dict:
        return {
            "total_minutes": self.total_minutes,
            "goal_minutes": self.goal_minutes,
            "progress_percent": self.progress_percent,
            "display_percent": self.display_percent,
            "met": self.met,
            "remaining_minutes": self.remaining_minutes,
        }


def compute_goal_progress(
    todays_study_sessions: Iterable[Session], daily_goal_minutes: int
) -> GoalProgress:
    """Aggregate today's study sessions against the goal. No side effects."""
    total = sum(session.duration for session in todays_study_sessions)
    goal = max(0, daily_goal_minutes)

    if goal > 0:
        progress = min(total / goal * 100, 100.0)
    else:
        progress = 100.0

    return GoalProgress(
        total_minutes=total,
        goal_minutes=goal,
        progress_percent=progress,
        met=total >= goal,
        remaining_minutes=max(0, goal - total),
    )


class GoalsManager:
    """Reads the daily goal from preferences and today's sessions from the store."""

    def __init__(self, store: SessionStore, preferences: PreferencesService):
        self.store = store
        self.preferences = preferences

    def get_goal(self) -> int:
        return self.preferences.preferences.daily_goal_minutes

    def set_goal(self, value: Any) -> PersistenceWriteError | None:
        """Set the daily goal, coercing invalid input to 0.

        Returns:
            The write error if the goal could not be persisted, otherwise None
        """
        return self.preferences.set_daily_goal(parse_goal_minutes(value))

    def get_daily_progress(self, now: datetime | None = None) -> GoalProgress:
        return compute_goal_progress(
            self.store.filter_today("study", now=now), self.get_goal()
        )

"""Focus mode - Pomodoro timer, goals and history for Study Timer."""

from .engine import SessionCompleted, TimerEngine, TimerSnapshot
from .goals import GoalProgress, GoalsManager, compute_goal_progress, parse_goal_minutes
from .history import SessionHistory, export_csv, parse_csv, write_csv
from .scheduler import AsyncioScheduler, Handle, ManualScheduler, Scheduler
from .summary import DailySummary, build_daily_summary
from .ui import TimerDisplay, format_duration, format_time, show_completion_message

__all__ = [
    "SessionCompleted",
    "TimerEngine",
    "TimerSnapshot",
    "GoalProgress",
    "GoalsManager",
    "compute_goal_progress",
    "parse_goal_minutes",
    "SessionHistory",
    "export_csv",
    "parse_csv",
    "write_csv",
    "AsyncioScheduler",
    "Handle",
    "ManualScheduler",
    "Scheduler",
    "DailySummary",
    "build_daily_summary",
    "TimerDisplay",
    "format_duration",
    "format_time",
    "show_completion_message",
]

"""Study Timer CLI - Pomodoro-style study sessions with daily goals."""

__version__ = "0.1.0"

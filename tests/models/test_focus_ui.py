"""Unit tests for studytimer_cli.models.focus.ui."""

from __future__ import annotations

import asyncio
from io import StringIO
from unittest.mock import MagicMock

import pytest
from rich.console import Console
from rich.layout import Layout

from studytimer_cli.models.focus.engine import SessionCompleted, TimerSnapshot
from studytimer_cli.models.focus.goals import compute_goal_progress
from studytimer_cli.models.focus.ui import (
    TimerDisplay,
    format_duration,
    format_time,
    render_progress_bar,
    show_completion_message,
)


def _snapshot(**overrides) -> TimerSnapshot:
    values = dict(
        kind="study",
        total_seconds=1500,
        remaining_seconds=1500,
        running=False,
        notes="",
        auto_advance=False,
        phase="idle",
    )
    values.update(overrides)
    return TimerSnapshot(**values)


def _console() -> Console:
    return Console(file=StringIO(), width=100, force_terminal=False)


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


class TestFormatting:
    @pytest.mark.parametrize(
        "seconds, expected",
        [(1500, "25:00"), (65, "01:05"), (0, "00:00"), (-3, "00:00"), (5999, "99:59")],
    )
    def test_format_time(self, seconds, expected):
        assert format_time(seconds) == expected

    @pytest.mark.parametrize(
        "minutes, expected",
        [(0, "0m"), (45, "45m"), (60, "1h 0m"), (75, "1h 15m"), (150, "2h 30m")],
    )
    def test_format_duration(self, minutes, expected):
        assert format_duration(minutes) == expected

    def test_progress_bar(self):
        assert render_progress_bar(0, 120) == "░" * 12
        assert render_progress_bar(60, 120) == "█" * 6 + "░" * 6
        assert render_progress_bar(500, 120) == "█" * 12
        assert render_progress_bar(5, 0) == "░" * 12


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------


class TestCreateLayout:
    def _render(self, timer, goal=None, status=None) -> str:
        console = _console()
        display = TimerDisplay(console)
        layout = display.create_layout(timer, goal or compute_goal_progress([], 120), status=status)
        assert isinstance(layout, Layout)
        console.print(layout, height=14)
        return console.file.getvalue()

    def test_shows_remaining_time_and_kind(self):
        output = self._render(_snapshot(remaining_seconds=1234, phase="paused"))
        assert "20:34" in output
        assert "Study Session" in output
        assert "PAUSED" in output

    def test_shows_status_message(self):
        output = self._render(_snapshot(), status="Completed a 25 minute study session")
        assert "Completed a 25 minute study session" in output

    def test_goal_line(self):
        output = self._render(_snapshot(), goal=compute_goal_progress([], 0))
        assert "Goal achieved" in output


# ---------------------------------------------------------------------------
# Key handling
# ---------------------------------------------------------------------------


class TestHandleKey:
    def _app(self, running=False, auto_advance=False):
        app = MagicMock()
        app.timer_snapshot.return_value = _snapshot(running=running, auto_advance=auto_advance)
        return app

    def test_space_starts_when_stopped(self):
        app = self._app(running=False)
        assert TimerDisplay.handle_key(app, " ") is True
        app.start.assert_called_once()

    def test_space_pauses_when_running(self):
        app = self._app(running=True)
        TimerDisplay.handle_key(app, " ")
        app.pause.assert_called_once()

    def test_reset(self):
        app = self._app()
        TimerDisplay.handle_key(app, "r")
        app.reset.assert_called_once()

    @pytest.mark.parametrize(
        "key, kind", [("1", "study"), ("2", "short-break"), ("3", "long-break")]
    )
    def test_kind_keys(self, key, kind):
        app = self._app()
        TimerDisplay.handle_key(app, key)
        app.select_kind.assert_called_once_with(kind)

    def test_auto_advance_toggle(self):
        app = self._app(auto_advance=True)
        TimerDisplay.handle_key(app, "a")
        app.set_auto_advance.assert_called_once_with(False)

    def test_unknown_key_ignored(self):
        app = self._app()
        assert TimerDisplay.handle_key(app, "z") is False
        app.start.assert_not_called()


# ---------------------------------------------------------------------------
# Run loop
# ---------------------------------------------------------------------------


class TestRunTimer:
    def test_quit_key_stops_loop_and_restores_keyboard(self, mocker):
        mocker.patch("studytimer_cli.models.focus.ui.Live")
        keyboard = MagicMock()
        keyboard.get_key.side_effect = [" ", None, "q"]

        app = MagicMock()
        app.timer_snapshot.return_value = _snapshot()
        app.goal_snapshot.return_value = compute_goal_progress([], 120)
        app.preferences.dark_mode = False
        app.status_message = None

        result = asyncio.run(
            TimerDisplay(_console()).run_timer(app, keyboard=keyboard, refresh_interval=0)
        )

        assert result == "quit"
        app.start.assert_called_once()
        keyboard.stop.assert_called_once()


def test_show_completion_message_escapes_notes():
    console = _console()
    show_completion_message(
        SessionCompleted(duration=25, notes="[bold]chapter 2[/bold]", kind="study"), console
    )
    output = console.file.getvalue()
    assert "Session Complete" in output
    assert "25 minute study session" in output
    assert "[bold]chapter 2[/bold]" in output

"""Full-screen timer UI and shared display formatting."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from rich.align import Align
from rich.console import Console, Group
from rich.layout import Layout
from rich.live import Live
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from studytimer_cli.models.session import KIND_LABELS

from .engine import SessionCompleted, TimerSnapshot
from .goals import GoalProgress

if TYPE_CHECKING:
    from studytimer_cli.services.app_service import StudyTimerApp

KIND_COLORS = {
    "study": "cyan",
    "short-break": "green",
    "long-break": "blue",
}

KIND_KEYS = {"1": "study", "2": "short-break", "3": "long-break"}


def format_time(seconds: int) -> str:
    """Format seconds as MM:SS."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


def format_duration(minutes: float) -> str:
    """Format minutes as hours and minutes."""
    hours = int(minutes // 60)
    mins = int(minutes % 60)
    if hours > 0:
        return f"{hours}h {mins}m"
    return f"{mins}m"


def render_progress_bar(value: float, max_value: float, width: int = 12) -> str:
    """Render a progress bar using block characters."""
    if max_value == 0:
        ratio = 0
    else:
        ratio = min(value / max_value, 1.0)
    filled = int(ratio * width)
    return "█" * filled + "░" * (width - filled)


class TimerDisplay:
    """Manages the fullscreen timer display."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def create_layout(
        self,
        timer: TimerSnapshot,
        goal: GoalProgress,
        dark_mode: bool = False,
        status: str | None = None,
    ) -> Layout:
        """Create the timer layout with all components."""
        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=4),
        )

        base = "white" if dark_mode else "black"
        color = KIND_COLORS[timer.kind]

        if timer.phase == "paused":
            title = f"⏸️  {KIND_LABELS[timer.kind]} - PAUSED"
            color = "yellow"
        elif timer.phase == "completed":
            title = f"✓ {KIND_LABELS[timer.kind]} - COMPLETE"
            color = "green"
        else:
            title = f"🍅 {KIND_LABELS[timer.kind]}"

        header_text = Text(title, style=f"bold {color}", justify="center")
        layout["header"].update(Align.center(header_text, vertical="middle"))

        layout["body"].update(
            Align.center(self._create_body_content(timer, goal, base), vertical="middle")
        )
        layout["footer"].update(
            Align.center(self._create_footer_text(timer, status), vertical="middle")
        )
        return layout

    def _create_body_content(
        self, timer: TimerSnapshot, goal: GoalProgress, base: str
    ) -> Group:
        components = []

        if timer.remaining_seconds < 60:
            timer_color = "red"
        elif timer.phase == "paused":
            timer_color = "yellow"
        else:
            timer_color = KIND_COLORS[timer.kind]

        components.append(
            Text(format_time(timer.remaining_seconds), style=f"bold {timer_color}", justify="center")
        )
        components.append(Text(""))

        pct = min(100, int(timer.progress_percent))
        bar = render_progress_bar(timer.elapsed_seconds, timer.total_seconds, width=40)
        components.append(Text(f"{bar}  {pct}%", style="dim", justify="center"))

        if timer.notes:
            components.append(Text(""))
            components.append(Text(timer.notes[:60], style=f"italic {base}", justify="center"))

        components.append(Text(""))
        goal_style = "bold green" if goal.met else base
        goal_line = (
            f"Today: {format_duration(goal.total_minutes)} of "
            f"{format_duration(goal.goal_minutes)}  "
            f"{render_progress_bar(goal.total_minutes, goal.goal_minutes)} "
            f"{goal.display_percent}%"
        )
        if goal.met:
            goal_line += "  Goal achieved! 🎉"
        components.append(Text(goal_line, style=goal_style, justify="center"))

        return Group(*components)

    def _create_footer_text(self, timer: TimerSnapshot, status: str | None) -> Text:
        action = "pause" if timer.running else "start"
        auto = "on" if timer.auto_advance else "off"
        hints = (
            f"space {action}  •  r reset  •  1/2/3 study/short/long  •  "
            f"a auto-advance ({auto})  •  q quit"
        )
        text = Text(justify="center")
        if status:
            text.append(status + "\n", style="bold green")
        elif timer.auto_start_pending:
            text.append("Next session starting...\n", style="dim")
        text.append(hints, style="dim")
        return text

    @staticmethod
    def handle_key(app: StudyTimerApp, key: str) -> bool:
        """Apply a keypress to the app. Returns True if the key was used."""
        if key == " ":
            if app.timer_snapshot().running:
                app.pause()
            else:
                app.start()
        elif key == "r":
            app.reset()
        elif key in KIND_KEYS:
            app.select_kind(KIND_KEYS[key])
        elif key == "a":
            app.set_auto_advance(not app.timer_snapshot().auto_advance)
        else:
            return False
        return True

    async def run_timer(
        self,
        app: StudyTimerApp,
        keyboard=None,
        refresh_interval: float = 0.25,
    ) -> str:
        """
        Run the fullscreen timer until the user quits.

        Returns 'quit' or 'interrupted'.
        """
        from .keyboard import KeyboardHandler

        keyboard = keyboard or KeyboardHandler()

        def render() -> Layout:
            return self.create_layout(
                app.timer_snapshot(),
                app.goal_snapshot(),
                dark_mode=app.preferences.dark_mode,
                status=app.status_message,
            )

        try:
            with Live(render(), console=self.console, refresh_per_second=4, screen=True) as live:
                while True:
                    key = keyboard.get_key()
                    if key == "q":
                        return "quit"
                    if key is not None:
                        self.handle_key(app, key)

                    live.update(render())
                    await asyncio.sleep(refresh_interval)
        except KeyboardInterrupt:
            return "interrupted"
        finally:
            keyboard.stop()


def show_completion_message(event: SessionCompleted, console: Console | None = None):
    """Show a panel for a completed session."""
    console = console or Console()

    body = f"""[bold green]🎉 Session Complete![/bold green]

Great job! You completed a {event.duration} minute {KIND_LABELS[event.kind].lower()}."""
    if event.notes:
        body += f"\nNotes: {escape(event.notes)}"

    panel = Panel(
        body,
        border_style="green",
        padding=(1, 2),
    )

    console.print(panel)

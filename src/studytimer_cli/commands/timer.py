"""Interactive countdown timer command."""

import asyncio

import typer

from studytimer_cli.models.focus.engine import SessionCompleted
from studytimer_cli.models.focus.scheduler import AsyncioScheduler
from studytimer_cli.models.focus.ui import TimerDisplay, format_duration, show_completion_message
from studytimer_cli.models.session import KIND_LABELS, SESSION_KINDS
from studytimer_cli.utils.exit_codes import ERROR_INVALID_ARGS
from studytimer_cli.utils.ui.console import get_console

from .utils import get_app, report_warnings

console = get_console()
app = typer.Typer(help="Pomodoro timer for study sessions")


@app.command("start")
def start_timer(
    kind: str = typer.Option(
        "study", "--kind", "-k", help="Session kind: study, short-break or long-break"
    ),
    minutes: int | None = typer.Option(
        None, "--minutes", "-m", help="Custom duration in minutes (overrides the default)"
    ),
    notes: str = typer.Option("", "--notes", "-n", help="Notes saved with the session"),
    auto_advance: bool = typer.Option(
        False, "--auto-advance", help="Start the next session automatically"
    ),
):
    """Open the full-screen timer and start counting down."""
    if kind not in SESSION_KINDS:
        console.print(
            f"[red]Invalid kind '{kind}'. Must be: {', '.join(SESSION_KINDS)}[/red]"
        )
        raise typer.Exit(ERROR_INVALID_ARGS)
    if minutes is not None and minutes <= 0:
        console.print("[red]Minutes must be a positive whole number[/red]")
        raise typer.Exit(ERROR_INVALID_ARGS)

    completed: list[SessionCompleted] = []

    # The scheduler binds to the running loop on first use, inside asyncio.run
    timer_app = get_app(AsyncioScheduler())
    timer_app.engine.on("session_complete", completed.append)

    async def _run() -> str:
        try:
            timer_app.select_kind(kind)
            if minutes is not None:
                timer_app.set_custom_duration(minutes)
            timer_app.set_notes(notes)
            timer_app.set_auto_advance(auto_advance)
            timer_app.start()

            return await TimerDisplay(console).run_timer(timer_app)
        finally:
            timer_app.close()

    try:
        outcome = asyncio.run(_run())
    except KeyboardInterrupt:
        # asyncio.run re-raises Ctrl-C after cancelling the main task
        outcome = "interrupted"

    for event in completed:
        show_completion_message(event, console)

    if outcome == "interrupted":
        console.print("\n[yellow]⚠️  Timer interrupted[/yellow]")
    elif not completed:
        snapshot = timer_app.timer_snapshot()
        console.print(
            f"[dim]{KIND_LABELS[snapshot.kind]} stopped with "
            f"{format_duration(snapshot.remaining_seconds / 60)} left; nothing was recorded[/dim]"
        )

    goal = timer_app.goal_snapshot()
    console.print(
        f"Today: {format_duration(goal.total_minutes)} of "
        f"{format_duration(goal.goal_minutes)} ({goal.display_percent}%)"
    )
    report_warnings(timer_app, console)

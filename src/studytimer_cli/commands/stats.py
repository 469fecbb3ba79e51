"""Today's summary command."""

import typer

from studytimer_cli.models.focus.history import format_relative_date
from studytimer_cli.models.focus.ui import format_duration
from studytimer_cli.models.session import KIND_LABELS
from studytimer_cli.utils.ui.console import get_console

from .utils import get_app

console = get_console()


def show_summary(
    output: str = typer.Option(None, "--output", "-o", help="Output format (json)"),
):
    """Show today's study time, session count and last session."""
    timer_app = get_app()
    summary = timer_app.summary_snapshot()

    if output == "json":
        console.print_json(data=summary.to_dict())
        return

    console.print("\n[bold cyan]📊 Today's Summary[/bold cyan]\n")
    console.print(f"  Study Time:     {format_duration(summary.total_minutes)}")
    console.print(f"  Sessions:       {summary.session_count}")

    last = summary.last_session
    if last is not None:
        console.print(
            f"  Last Session:   {last.duration} min {KIND_LABELS[last.kind].lower()} "
            f"({format_relative_date(last.timestamp)})"
        )

    console.print(f"\n[bold]{summary.message}[/bold]\n")

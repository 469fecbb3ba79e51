"""Session history commands."""

from pathlib import Path

import typer
from rich.markup import escape
from rich.prompt import Confirm
from rich.table import Table

from studytimer_cli.exceptions import PersistenceWriteError
from studytimer_cli.models.focus.history import format_relative_date
from studytimer_cli.models.focus.ui import KIND_COLORS
from studytimer_cli.utils.exit_codes import ERROR_STORAGE
from studytimer_cli.utils.ui.console import get_console

from .utils import get_app, report_warnings

console = get_console()
app = typer.Typer(help="Session history")


@app.command("list")
def list_history(
    show_all: bool = typer.Option(False, "--all", "-a", help="Show every session"),
    output: str = typer.Option(None, "--output", "-o", help="Output format (json)"),
):
    """List completed sessions, newest first."""
    timer_app = get_app()
    history = timer_app.history_view(show_all=show_all)

    if output == "json":
        console.print_json(data=[session.to_dict() for session in history.visible()])
        return

    if not len(history):
        console.print("[dim]No sessions yet. Start your first session![/dim]")
        return

    table = Table(title="📅 Session History", show_header=True)
    table.add_column("When", style="dim")
    table.add_column("Session")
    table.add_column("Notes")

    for session in history.visible():
        color = KIND_COLORS[session.kind]
        table.add_row(
            format_relative_date(session.timestamp),
            f"[{color}]{session.duration} min {session.kind.replace('-', ' ')}[/{color}]",
            escape(session.notes),
        )

    console.print(table)

    if history.hidden_count:
        console.print(
            f"[dim]{history.hidden_count} older sessions hidden. "
            f"Use --all to show all {len(history)}.[/dim]"
        )


@app.command("export")
def export_history(
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Destination file (defaults to study-sessions.csv)"
    ),
):
    """Export the full history as CSV."""
    timer_app = get_app()
    if not len(timer_app.store):
        console.print("[yellow]No sessions to export[/yellow]")
        return

    try:
        path = timer_app.export_csv(output)
    except PersistenceWriteError as e:
        console.print(f"[red]Export failed: {e}[/red]")
        raise typer.Exit(ERROR_STORAGE) from e

    console.print(f"[green]✓ Exported {len(timer_app.store)} sessions to {path}[/green]")


@app.command("clear")
def clear_history(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete every recorded session."""
    timer_app = get_app()
    count = len(timer_app.store)

    if not yes and not Confirm.ask(f"Delete all {count} sessions?"):
        console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(0)

    timer_app.clear_history()
    console.print(f"[green]✓ Cleared {count} sessions[/green]")
    report_warnings(timer_app, console)

"""Daily study goal commands."""

import typer
from rich.markup import escape

from studytimer_cli.models.focus.goals import parse_goal_minutes
from studytimer_cli.models.focus.ui import format_duration, render_progress_bar
from studytimer_cli.utils.ui.console import get_console

from .utils import get_app, report_warnings

console = get_console()
app = typer.Typer(help="Daily study goal")


@app.callback(invoke_without_command=True)
def goals_callback(ctx: typer.Context):
    """Show today's progress when no subcommand is given."""
    if ctx.invoked_subcommand is None:
        show_goal(output=None)


@app.command("show")
def show_goal(
    output: str = typer.Option(None, "--output", "-o", help="Output format (json)"),
):
    """Show today's study time against the daily goal."""
    timer_app = get_app()
    progress = timer_app.goal_snapshot()

    if output == "json":
        console.print_json(data=progress.to_dict())
        return

    console.print("\n[bold cyan]🎯 Daily Goal[/bold cyan]\n")
    bar = render_progress_bar(progress.total_minutes, progress.goal_minutes)
    status = "[green]✓[/green]" if progress.met else ""
    console.print(
        f"  Study Time:   {format_duration(progress.total_minutes)}/"
        f"{format_duration(progress.goal_minutes)}  {bar} {progress.display_percent}% {status}"
    )

    console.print()
    if progress.met:
        console.print("[bold green]🎉 Goal achieved! Great work today.[/bold green]")
    else:
        console.print(
            f"[dim]💡 {format_duration(progress.remaining_minutes)} more study time "
            f"to hit today's goal[/dim]"
        )
    console.print()


@app.command("set")
def set_goal(
    minutes: str = typer.Argument(..., help="Daily study goal in minutes"),
):
    """Set the daily study goal."""
    value = parse_goal_minutes(minutes)
    if not minutes.strip().isdigit():
        console.print(
            f"[yellow]'{escape(minutes)}' is not a whole number of minutes, "
            f"using {value}[/yellow]"
        )

    timer_app = get_app()
    goal = timer_app.set_goal(value)
    console.print(f"[green]✓ Daily goal set to {format_duration(goal)} ({goal} minutes)[/green]")
    report_warnings(timer_app, console)

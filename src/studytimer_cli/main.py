"""Main entry point for Study Timer CLI."""

import typer

from studytimer_cli import __version__
from studytimer_cli.commands import config, goals, history, stats, timer
from studytimer_cli.services.config_service import get_config_service
from studytimer_cli.utils.logger import get_logger
from studytimer_cli.utils.typer_helpers import SuggestingGroup
from studytimer_cli.utils.ui.console import get_console

# Create main app with custom group class
app = typer.Typer(
    name="studytimer",
    cls=SuggestingGroup,
    help="A Pomodoro-style study timer with daily goals and session history",
    no_args_is_help=True,
)

console = get_console()


@app.callback()
def main_callback() -> None:
    """Study Timer: focus sessions, breaks and daily study goals."""
    get_logger().debug("Starting studytimer %s", __version__)


# Add subcommands
app.add_typer(timer.app, name="timer", help="Pomodoro timer for study sessions")
app.add_typer(goals.app, name="goals", help="Daily study goal")
app.add_typer(history.app, name="history", help="Session history and CSV export")
app.add_typer(config.app, name="config", help="Configuration management")

# Add top-level commands
app.command("summary")(stats.show_summary)


@app.command()
def version() -> None:
    """Show version information and data location."""
    console.print(f"[bold]Study Timer CLI[/bold] version [cyan]{__version__}[/cyan]")
    console.print(f"[dim]Data directory: {get_config_service().data_dir}[/dim]")


if __name__ == "__main__":
    app()

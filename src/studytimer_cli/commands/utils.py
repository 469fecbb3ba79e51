"""Shared helpers for CLI commands."""

from rich.console import Console

from studytimer_cli.models.focus.scheduler import ManualScheduler, Scheduler
from studytimer_cli.services.app_service import StudyTimerApp
from studytimer_cli.services.config_service import get_config_service
from studytimer_cli.utils.ui.console import get_console


def get_app(scheduler: Scheduler | None = None) -> StudyTimerApp:
    """
    Build the application shell from the active configuration.

    Commands that never run the countdown get a ``ManualScheduler`` so no
    event loop is needed.
    """
    return StudyTimerApp.from_config(get_config_service(), scheduler or ManualScheduler())


def report_warnings(app: StudyTimerApp, console: Console | None = None) -> None:
    """Print persistence warnings collected while the command ran."""
    console = console or get_console()
    for warning in app.warnings:
        console.print(f"[yellow]Warning: {warning} (kept in memory only)[/yellow]")

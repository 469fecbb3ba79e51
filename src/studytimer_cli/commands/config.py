"""Configuration and preference commands."""

import typer

from studytimer_cli.exceptions import PersistenceWriteError
from studytimer_cli.services.config_service import get_config_service
from studytimer_cli.utils.exit_codes import ERROR_INVALID_ARGS, ERROR_STORAGE
from studytimer_cli.utils.ui.console import get_console

from .utils import get_app, report_warnings

console = get_console()
app = typer.Typer(help="Configuration management commands")

THEME_ACTIONS = ("toggle", "show")


@app.command("show")
def show_config():
    """Show the configuration file, data directory and preferences."""
    config_service = get_config_service()
    timer_app = get_app()

    console.print(f"[bold]Config file:[/bold] {config_service.config_path}")
    console.print(f"[bold]Data directory:[/bold] {config_service.data_dir}")
    console.print_json(
        data={
            **config_service.config.model_dump(),
            "preferences": timer_app.preferences.model_dump(),
        }
    )


@app.command("theme")
def theme(
    action: str = typer.Argument("show", help="toggle or show"),
):
    """Show or toggle the light/dark theme."""
    if action not in THEME_ACTIONS:
        console.print(f"[red]Unknown action '{action}'. Must be: toggle or show[/red]")
        raise typer.Exit(ERROR_INVALID_ARGS)

    timer_app = get_app()
    if action == "toggle":
        timer_app.toggle_theme()
        console.print(f"[green]✓ Theme set to {timer_app.preferences.theme}[/green]")
        report_warnings(timer_app, console)
    else:
        console.print(f"Theme: [bold]{timer_app.preferences.theme}[/bold]")


@app.command("reset")
def reset_config(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Reset the configuration file to defaults."""
    if not yes and not typer.confirm("Reset configuration to defaults?"):
        raise typer.Exit(0)

    try:
        get_config_service().reset_config()
    except PersistenceWriteError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(ERROR_STORAGE) from e
    console.print("[green]✓ Configuration reset to defaults[/green]")

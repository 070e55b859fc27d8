"""Configuration management commands."""

import typer
from pydantic import ValidationError

from railfocus.services.config_service import get_config_service
from railfocus.utils.exit_codes import ERROR_INVALID_ARGS, ERROR_NOT_FOUND
from railfocus.utils.ui.console import get_console, print_error

console = get_console()
app = typer.Typer(help="Configuration management commands")


def _validation_message(error: ValidationError) -> str:
    return "; ".join(err["msg"] for err in error.errors())


@app.command("view")
def view_config() -> None:
    """View current configuration."""
    config_service = get_config_service()
    console.print_json(data=config_service.config.model_dump())
    console.print(f"[dim]{config_service.config_path}[/dim]")


@app.command("get")
def get_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., timer.default_minutes)"),
) -> None:
    """Get a configuration value."""
    try:
        value = get_config_service().get_value(key)
    except KeyError:
        print_error(f"Configuration key '{key}' not found")
        raise typer.Exit(ERROR_NOT_FOUND)
    console.print(value)


@app.command("set")
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., timer.default_minutes)"),
    value: str = typer.Argument(..., help="Configuration value"),
) -> None:
    """Set a configuration value."""
    try:
        get_config_service().set_value(key, value)
    except KeyError:
        print_error(f"Configuration key '{key}' not found")
        raise typer.Exit(ERROR_NOT_FOUND)
    except ValidationError as e:
        print_error(f"Invalid value for '{key}': {_validation_message(e)}")
        raise typer.Exit(ERROR_INVALID_ARGS)

    console.print(f"[bold green]Success:[/bold green] Configuration '{key}' set to '{value}'")


@app.command("reset")
def reset_config(
    key: str | None = typer.Argument(None, help="Configuration key to reset"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset configuration to defaults."""
    if not yes:
        msg = "entire configuration" if not key else f"'{key}'"
        if not typer.confirm(f"Are you sure you want to reset {msg}?"):
            console.print("Cancelled")
            raise typer.Exit(0)

    try:
        get_config_service().reset_config(key)
    except KeyError:
        print_error(f"Configuration key '{key}' not found")
        raise typer.Exit(ERROR_NOT_FOUND)

    if key:
        console.print(f"[bold green]Success:[/bold green] Configuration '{key}' reset to default")
    else:
        console.print("[bold green]Success:[/bold green] Configuration reset to defaults")

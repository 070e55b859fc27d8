"""Main entry point for the RailFocus CLI."""

import logging

import typer

from railfocus import __version__
from railfocus.commands import config, journeys, stations
from railfocus.utils.logger import get_logger, log_path
from railfocus.utils.ui.console import get_console

app = typer.Typer(
    name="railfocus",
    help="Focus sessions themed as train journeys",
    no_args_is_help=True,
)

console = get_console()

app.add_typer(journeys.app, name="journeys", help="Ride journeys and review history")
app.add_typer(stations.app, name="stations", help="Browse the station catalog")
app.add_typer(config.app, name="config", help="View and change settings")


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug detail to the log file"),
) -> None:
    """Initialise logging before any command runs."""
    get_logger(logging.DEBUG if verbose else None)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]RailFocus[/bold] version [cyan]{__version__}[/cyan]")
    console.print(f"[dim]Log file: {log_path()}[/dim]")


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()

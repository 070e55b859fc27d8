"""Console helpers shared by the RailFocus commands."""

from functools import lru_cache

from rich.console import Console


@lru_cache(maxsize=2)
def get_console(highlight: bool = True) -> Console:
    """Get a Rich Console instance for consistent output formatting."""
    return Console(highlight=highlight)


def print_error(message: str) -> None:
    get_console().print(f"[bold red]Error:[/bold red] {message}")


def print_warning(message: str) -> None:
    get_console().print(f"[bold yellow]Warning:[/bold yellow] {message}")


def print_arrival(message: str) -> None:
    """Announce the end of a journey."""
    get_console().print(f"\n[bold green]🚉 {message}[/bold green]")

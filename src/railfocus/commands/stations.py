"""Station catalog commands."""

import typer
from rich.table import Table

from railfocus.models.station import STATIONS, rail_lines, search_stations, stations_for_line
from railfocus.utils.ui.console import get_console, print_error

console = get_console()
app = typer.Typer(help="Browse the station catalog")


@app.command("list")
def list_stations(
    line: str | None = typer.Option(None, "--line", "-l", help="Only stations on this rail line"),
    search: str | None = typer.Option(None, "--search", "-s", help="Filter by code, name or city"),
):
    """List stations you can travel between."""
    if line:
        stations = stations_for_line(line)
        if not stations:
            print_error(f"Unknown rail line '{line}'")
            console.print(f"Available lines: {', '.join(rail_lines())}")
            raise typer.Exit(2)
    else:
        stations = list(STATIONS)

    if search:
        matches = {s.code for s in search_stations(search)}
        stations = [s for s in stations if s.code in matches]

    if not stations:
        console.print("[yellow]No stations found[/yellow]")
        return

    table = Table(title=f"Stations ({len(stations)})", show_header=True)
    table.add_column("Code", style="cyan")
    table.add_column("Station")
    table.add_column("City")
    table.add_column("Country")
    table.add_column("Line", style="dim")

    for station in stations:
        table.add_row(station.code, station.name, station.city, station.country, station.rail_line)

    console.print(table)


@app.command("lines")
def list_lines():
    """List rail lines in the catalog."""
    for line in rail_lines():
        codes = ", ".join(s.code for s in stations_for_line(line))
        console.print(f"[bold]{line}[/bold]  [dim]{codes}[/dim]")

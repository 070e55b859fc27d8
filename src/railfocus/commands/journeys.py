"""Journey commands: ride a focus journey and review past trips."""

from dataclasses import asdict

import typer
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from railfocus.exceptions import RailFocusError
from railfocus.models.journey import JourneyOutcome
from railfocus.models.station import resolve_station
from railfocus.models.timer import JourneyPhase
from railfocus.services.config_service import get_config_service
from railfocus.services.coordinator import SessionSnapshot
from railfocus.services.session_service import get_session_coordinator
from railfocus.services.ticker import Ticker
from railfocus.utils.exit_codes import exit_code_for
from railfocus.utils.ui.console import get_console, print_arrival, print_error, print_warning

console = get_console()
app = typer.Typer(help="Focus journeys")


def format_duration(seconds: float) -> str:
    """Format seconds as hours and minutes."""
    hours, rem = divmod(int(seconds), 3600)
    mins = rem // 60
    if hours > 0:
        return f"{hours}h {mins}m"
    return f"{mins}m"


def _fail(error: RailFocusError) -> typer.Exit:
    print_error(str(error))
    return typer.Exit(exit_code_for(error))


@app.command("ride")
def ride(
    origin: str = typer.Argument(..., help="Origin station code or name"),
    destination: str = typer.Argument(..., help="Destination station code or name"),
    minutes: int | None = typer.Option(None, "--minutes", "-m", help="Duration in minutes"),
    tag: str | None = typer.Option(
        None, "--tag", "-t", help="work, study, coding, writing, admin or personal"
    ),
):
    """Start a focus journey and ride it to the destination. Ctrl+C ends it early."""
    config_service = get_config_service()
    config = config_service.load_config()
    minutes = minutes or config.timer.default_minutes

    coordinator = get_session_coordinator(config_service)

    try:
        journey = coordinator.start_journey(
            resolve_station(origin), resolve_station(destination), minutes * 60, tag
        )
    except RailFocusError as e:
        raise _fail(e) from e

    console.print(
        f"\n[bold cyan]🚆 {journey.origin.name} → {journey.destination.name}[/bold cyan]"
    )
    console.print(
        f"[dim]{journey.route_code} · {journey.distance_miles:.0f} mi · {minutes} min"
        + (f" · {journey.tag.value}" if journey.tag else "")
        + "[/dim]\n"
    )

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Boarding", total=journey.planned_duration)

        def render(snap: SessionSnapshot) -> None:
            phase = snap.phase.value.title() if snap.phase else ""
            progress.update(
                task,
                completed=snap.elapsed,
                description=f"{phase}  {snap.formatted_remaining} remaining",
            )

        unsubscribe = coordinator.subscribe(render)
        try:
            finished = Ticker(coordinator, interval=config.timer.tick_interval).run()
        finally:
            unsubscribe()

    warning = coordinator.snapshot().warning
    coordinator.close()

    if finished is None:
        return

    if finished.outcome is JourneyOutcome.COMPLETED:
        print_arrival(JourneyPhase.ARRIVED.announcement)
    else:
        console.print(
            f"\n[yellow]⚠️  Journey interrupted after "
            f"{format_duration(finished.elapsed_seconds)}[/yellow]"
        )

    if warning:
        print_warning(warning)

    stats = coordinator.statistics()
    console.print(
        f"Streak: [bold]{stats.current_streak}[/bold] days · "
        f"Journeys: [bold]{stats.total_journeys}[/bold] · "
        f"Focus: [bold]{stats.formatted_focus_time}[/bold]\n"
    )


@app.command("history")
def history(
    limit: int = typer.Option(20, "--limit", "-n", help="Number of journeys to show"),
):
    """Show recent journeys, newest first."""
    ledger = get_session_coordinator().ledger
    journeys = list(ledger.history(limit))

    if not journeys:
        console.print("[yellow]No journeys yet[/yellow]")
        return

    table = Table(title=f"Recent Journeys ({len(journeys)})", show_header=True)
    table.add_column("Date", style="cyan")
    table.add_column("Route")
    table.add_column("Tag")
    table.add_column("Focus", justify="right")
    table.add_column("Distance", justify="right")
    table.add_column("Status", justify="center")

    for journey in journeys:
        if journey.outcome is JourneyOutcome.COMPLETED:
            status = "[green]✓[/green]"
        else:
            status = "[yellow]✗[/yellow]"

        table.add_row(
            journey.started_at.strftime("%Y-%m-%d %H:%M"),
            journey.route_code,
            journey.tag.value if journey.tag else "-",
            format_duration(journey.elapsed_seconds),
            f"{journey.distance_miles:.0f} mi",
            status,
        )

    console.print(table)


@app.command("stats")
def stats(
    output: str = typer.Option(None, "--output", "-o", help="Output format (json)"),
):
    """Show streaks and totals."""
    coordinator = get_session_coordinator()
    statistics = coordinator.statistics()

    if output == "json":
        data = asdict(statistics)
        data["visited_stations"] = sorted(statistics.visited_stations)
        data["last_journey_at"] = (
            statistics.last_journey_at.isoformat() if statistics.last_journey_at else None
        )
        data["focus_time_today"] = coordinator.ledger.focus_time_today()
        data["focus_time_this_week"] = coordinator.ledger.focus_time_this_week()
        console.print_json(data=data)
        return

    console.print("\n[bold cyan]🚆 Journey Statistics[/bold cyan]\n")
    console.print(f"Current Streak: [bold]{statistics.current_streak}[/bold] days")
    console.print(f"Longest Streak: {statistics.longest_streak} days")
    console.print(f"Journeys Completed: [bold]{statistics.total_journeys}[/bold]")
    console.print(f"Journeys Interrupted: {statistics.interrupted_journeys}")
    console.print(f"Completion Rate: {statistics.completion_rate * 100:.0f}%")
    console.print(f"Total Focus Time: [bold]{statistics.formatted_focus_time}[/bold]")
    console.print(f"Distance Traveled: {statistics.formatted_distance}")
    console.print(f"Stations Visited: {len(statistics.visited_stations)}")
    console.print(
        f"Today: {format_duration(coordinator.ledger.focus_time_today())} · "
        f"This week: {format_duration(coordinator.ledger.focus_time_this_week())}\n"
    )


@app.command("achievements")
def achievements():
    """Show unlocked achievements."""
    unlocked = get_session_coordinator().achievements()
    if not unlocked:
        console.print("[yellow]No achievements yet. Complete a journey to earn one.[/yellow]")
        return

    for achievement in unlocked:
        console.print(
            f"{achievement.icon}  [bold]{achievement.name}[/bold] [dim]{achievement.description}[/dim]"
        )

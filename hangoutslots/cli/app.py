"""
Main CLI application using Typer.
"""

import asyncio
import json
import logging
from datetime import date
from pathlib import Path
from typing import Annotated, List, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.json_calendar_source import JsonCalendarSource
from ..config import AppConfig, load_config
from ..domain.event_index import EventOverlapIndex
from ..domain.exceptions import HangoutSlotsError
from ..domain.models import Mode, Slot
from ..services.event_loader import EventWindowLoader
from ..services.selection_session import SelectionSession

app = typer.Typer(
    name="hangoutslots",
    help="Turn selected calendar slots into hangout poll options",
    add_completion=False
)

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_config_or_exit(config_file: Optional[Path]) -> AppConfig:
    try:
        return load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


def _parse_slot(value: str, tz: str) -> Slot:
    """Parse ``YYYY-MM-DDTHH:MM`` into a grid slot."""
    try:
        parsed = pendulum.parse(value, tz=tz)
    except ValueError as e:
        raise typer.BadParameter(f"Invalid slot '{value}': {e}")

    if not isinstance(parsed, pendulum.DateTime):
        raise typer.BadParameter(f"Invalid slot '{value}': expected YYYY-MM-DDTHH:MM")

    return Slot.from_datetime(parsed)


def _parse_day(value: str) -> date:
    try:
        return pendulum.from_format(value, "YYYY-MM-DD").date()
    except ValueError as e:
        raise typer.BadParameter(f"Invalid day '{value}': {e}")


def _events_source(config: AppConfig, events_file: Optional[Path]) -> Optional[JsonCalendarSource]:
    path = events_file or config.events_file
    if path is None:
        return None
    return JsonCalendarSource(path=path, timezone=config.timezone)


@app.command()
def plan(
    slots: Annotated[List[str], typer.Argument(help="Selected slots, e.g. 2024-06-01T10:00")],
    mode: Annotated[Mode, typer.Option("--mode", "-m", help="Projection of the selection")] = Mode.AVAILABILITY,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Window length in minutes (time-slots mode)")] = None,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    events_file: Annotated[Optional[Path], typer.Option("--events", "-e", help="JSON file with calendar events")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the poll payload as JSON")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging")] = False,
):
    """
    Merge selected slots into ranges and show the poll options.

    Examples:

        hangoutslots plan 2024-06-01T10:00 2024-06-01T10:30 2024-06-01T11:00

        hangoutslots plan 2024-06-01T10:00 2024-06-01T10:30 --mode time-slots --duration 60
    """
    _configure_logging(verbose)
    config = _load_config_or_exit(config_file)
    selected = [_parse_slot(value, config.timezone) for value in slots]

    index = EventOverlapIndex(timezone=config.timezone)
    source = _events_source(config, events_file)

    try:
        if source is not None:
            loader = EventWindowLoader(source, index, visible_days=config.visible_days)
            asyncio.run(loader.load_days(sorted({slot.day for slot in selected})))

        session = SelectionSession.from_config(config, event_index=index)
        if duration is not None:
            session.set_duration(duration)
        session.set_mode(mode)

        for slot in selected:
            if slot not in session.raw_selection:
                session.toggle_slot(slot)
    except HangoutSlotsError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    ranges = session.current_ranges

    if as_json:
        typer.echo(json.dumps([r.to_payload() for r in ranges], indent=2))
        return

    for slot in sorted(session.raw_selection, key=lambda s: (s.day, s.minute_of_day)):
        titles = session.overlapping_titles(slot)
        if titles:
            console.print(f"[yellow]⚠ {slot} overlaps: {', '.join(titles)}[/yellow]")

    if not ranges:
        console.print("[yellow]No ranges to offer. Select more time or a shorter duration.[/yellow]")
        return

    title = "Availability" if session.mode == Mode.AVAILABILITY else f"{session.duration_minutes}-minute slots"
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Date", style="bold yellow")
    table.add_column("Time")
    table.add_column("Minutes", justify="right", style="dim")

    for time_range in ranges:
        table.add_row(
            time_range.format_date(),
            time_range.format_time_range(),
            str(time_range.duration_minutes())
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def busy(
    start_day: Annotated[str, typer.Argument(help="First visible day (YYYY-MM-DD)")],
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file")] = None,
    events_file: Annotated[Optional[Path], typer.Option("--events", "-e", help="JSON file with calendar events")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging")] = False,
):
    """
    Show which grid slots of the visible days are taken by calendar events.
    """
    _configure_logging(verbose)
    config = _load_config_or_exit(config_file)
    day = _parse_day(start_day)

    source = _events_source(config, events_file)
    if source is None:
        console.print("[bold red]Error:[/bold red] No events file given (use --events or set events_file).")
        raise typer.Exit(1)

    index = EventOverlapIndex(timezone=config.timezone)
    loader = EventWindowLoader(source, index, visible_days=config.visible_days)
    visible_days = asyncio.run(loader.load(day))

    table = Table(title="Busy slots", show_header=True, header_style="bold cyan")
    table.add_column("Date", style="bold yellow")
    table.add_column("Time")
    table.add_column("Events")

    slots_per_day = (24 * 60) // config.granularity_minutes
    for visible_day in visible_days:
        for position in range(slots_per_day):
            minute_of_day = position * config.granularity_minutes
            slot = Slot(day=visible_day, hour=minute_of_day // 60, minute=minute_of_day % 60)
            titles = index.overlapping_titles(slot)
            if titles:
                table.add_row(visible_day.isoformat(), slot.time_string, ", ".join(titles))

    if not table.row_count:
        console.print("[green]✓ No events in the visible days.[/green]")
        return

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]hangoutslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()

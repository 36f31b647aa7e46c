"""CLI Runner for the Crew Timeline layout engine.

Usage:
    crew-timeline lanes --start 2025-01-06 --end 2025-01-12
    crew-timeline lanes --day 2025-01-06
    crew-timeline render --start 2025-01-06 --output schedule.html
    crew-timeline check emp-1 2025-01-06 --start 10:00 --end 11:00
    crew-timeline conflicts --start 2025-01-06 --end 2025-01-12
    crew-timeline now --day 2025-01-06 --watch 5
"""

import sys
import threading
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from crew_timeline import __version__
from crew_timeline.config import Settings, get_settings
from crew_timeline.errors import TimelineError
from crew_timeline.logging_config import configure_logging
from crew_timeline.models import DayRange, ScheduleItem, TimeRange, ViewportState
from crew_timeline.utils.time_utils import format_date

console = Console()

DATE_TYPE = click.DateTime(formats=["%Y-%m-%d"])

# Failures reported to the user instead of as a traceback
CLI_ERRORS = (TimelineError, ValidationError, FileNotFoundError)


def get_store(settings: Settings):
    """Schedule store for the configured data file."""
    from crew_timeline.services.schedule_store import ScheduleStore

    return ScheduleStore(settings.data_file)


def build_session(settings: Settings, start: Optional[datetime], end: Optional[datetime],
                  day: Optional[datetime]):
    """Session for the hourly view (--day) or the multi-day view (--start/--end)."""
    from crew_timeline.services.session import TimelineSession
    from crew_timeline.services.timeline_renderer import TimelineRenderer

    if day is not None:
        return TimelineSession.for_day(day.date(), settings)

    first_day = start.date() if start else date.today()
    if end is None:
        return TimelineSession.starting_on(first_day, settings)
    return TimelineSession(ViewportState(first_day, end.date()), TimelineRenderer(settings))


def range_label(item: ScheduleItem) -> str:
    """Human-readable range of an item."""
    if isinstance(item.range, DayRange):
        return f"{format_date(item.range.start_date)} - {format_date(item.range.end_date)}"
    return item.range.label()


def fail(error: Exception) -> None:
    console.print(f"[red]Error:[/red] {escape(str(error))}")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--data-file", type=click.Path(path_type=Path), default=None,
              help="Schedule JSON document (default: CREW_TIMELINE_DATA_FILE)")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, data_file: Optional[Path]):
    """Crew Timeline layout engine.

    Lay out employee shifts and tasks on day and hour timelines.
    """
    settings = get_settings()
    if data_file is not None:
        settings = settings.model_copy(update={"data_file": data_file})
    configure_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = settings


# ============================================================================
# Layout Commands
# ============================================================================


@cli.command("lanes")
@click.option("--start", "-s", type=DATE_TYPE, default=None, help="First day (YYYY-MM-DD)")
@click.option("--end", "-e", type=DATE_TYPE, default=None, help="Last day (YYYY-MM-DD)")
@click.option("--day", "-d", type=DATE_TYPE, default=None, help="Single day, hourly view")
@click.pass_obj
def show_lanes(settings: Settings, start: Optional[datetime], end: Optional[datetime],
               day: Optional[datetime]):
    """Show the lane and pixel geometry of every visible item."""
    try:
        session = build_session(settings, start, end, day)
        session.refresh(get_store(settings).fetch)
    except CLI_ERRORS as e:
        fail(e)

    if not session.positioned:
        console.print("No items in range.")
        return

    table = Table(title=f"Lanes ({session.viewport.mode.value})")
    table.add_column("Employee", style="cyan")
    table.add_column("Item")
    table.add_column("Range")
    table.add_column("Lane", justify="right")
    table.add_column("Left", justify="right")
    table.add_column("Top", justify="right")
    table.add_column("Width", justify="right")

    for positioned in session.positioned:
        item = positioned.item
        table.add_row(
            item.owner_id,
            item.label or item.id,
            range_label(item),
            str(positioned.lane_index),
            f"{positioned.left_px:g}",
            f"{positioned.top_px:g}",
            f"{positioned.width_px:g}",
        )

    console.print(table)


@cli.command("render")
@click.option("--start", "-s", type=DATE_TYPE, default=None, help="First day (YYYY-MM-DD)")
@click.option("--end", "-e", type=DATE_TYPE, default=None, help="Last day (YYYY-MM-DD)")
@click.option("--day", "-d", type=DATE_TYPE, default=None, help="Single day, hourly view")
@click.option("--output", "-o", default="timeline.html", help="Output HTML file")
@click.pass_obj
def render_timeline(settings: Settings, start: Optional[datetime], end: Optional[datetime],
                    day: Optional[datetime], output: str):
    """Write the timeline as a standalone HTML page."""
    from crew_timeline.services.timeline_visualizer import TimelineVisualizer

    store = get_store(settings)
    try:
        session = build_session(settings, start, end, day)
        session.refresh(store.fetch)
        employees = store.employees()
    except CLI_ERRORS as e:
        fail(e)

    visualizer = TimelineVisualizer()
    path = visualizer.generate_timeline(session, employees, output, datetime.now())
    console.print(f"[green]Timeline saved to:[/green] {path}")


# ============================================================================
# Placement Commands
# ============================================================================


@cli.command("check")
@click.argument("employee_id")
@click.argument("day", type=DATE_TYPE)
@click.option("--start", "start_time", required=True, help="Task start (HH:MM or HHMM)")
@click.option("--end", "end_time", required=True, help="Task end (HH:MM or HHMM)")
@click.pass_obj
def check_placement(settings: Settings, employee_id: str, day: datetime,
                    start_time: str, end_time: str):
    """Check whether a task fits inside the employee's shift."""
    from crew_timeline.services.placement import validate_placement

    try:
        proposed = TimeRange.from_strings(start_time, end_time)
        window = get_store(settings).work_window_for(employee_id, day.date())
    except CLI_ERRORS as e:
        fail(e)

    result = validate_placement(proposed, window)
    if not result.ok:
        console.print(f"[red]Rejected:[/red] {result.reason}")
        sys.exit(1)

    console.print(
        f"[green]OK:[/green] {proposed.label()} fits {employee_id}'s shift "
        f"({window.range.label()})"
    )


@cli.command("conflicts")
@click.option("--start", "-s", type=DATE_TYPE, default=None, help="First day (YYYY-MM-DD)")
@click.option("--end", "-e", type=DATE_TYPE, default=None, help="Last day (YYYY-MM-DD)")
@click.pass_obj
def show_conflicts(settings: Settings, start: Optional[datetime], end: Optional[datetime]):
    """List overlapping items assigned to the same employee."""
    from crew_timeline.services.placement import detect_conflicts

    first_day = start.date() if start else date.today()
    last_day = end.date() if end else first_day
    try:
        items = get_store(settings).fetch(first_day, last_day).items
    except CLI_ERRORS as e:
        fail(e)

    conflicts = detect_conflicts(items)
    if not conflicts:
        console.print("[green]No conflicts found.[/green]")
        return

    table = Table(title="Schedule Conflicts")
    table.add_column("Employee", style="cyan")
    table.add_column("First")
    table.add_column("Second")
    for conflict in conflicts:
        table.add_row(conflict.owner_id, conflict.first_id, conflict.second_id)
    console.print(table)


# ============================================================================
# Indicator Commands
# ============================================================================


@cli.command("now")
@click.option("--day", "-d", type=DATE_TYPE, default=None, help="Viewed day (default: today)")
@click.option("--scroll", type=float, default=0.0, help="Body pane scroll offset in px")
@click.option("--watch", type=int, default=None, help="Print this many updates, one per interval")
@click.pass_obj
def show_now(settings: Settings, day: Optional[datetime], scroll: float, watch: Optional[int]):
    """Show where the current-time line sits on the hourly view."""
    from crew_timeline.services.time_indicator import LiveTimeIndicator

    viewed = day.date() if day else date.today()

    def report(offset: Optional[float]) -> None:
        if offset is None:
            console.print(f"Now line hidden: {format_date(viewed)} is not today")
        else:
            console.print(f"Now line at [bold]{offset:.1f}px[/bold]")

    indicator = LiveTimeIndicator(viewed, settings, on_update=report)
    indicator.scroll_offset_px = scroll

    if watch is None:
        indicator.refresh()
    else:
        indicator.run(threading.Event(), max_ticks=watch)


if __name__ == "__main__":
    cli()

"""Timeline Renderer - projects schedule items onto pixel geometry.

Responsible for:
- Day-granular projection for the multi-day Gantt view
- Hour-granular projection for the single-day hourly view
- Combining projections with lane indices into positioned items
- Header columns (days with weekend/today/holiday flags, 24 hour labels)
- Work-window bars, approved time-off bars and drag-and-drop day snapping

Nothing here draws; the output is plain geometry for a presentation layer.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Sequence

from crew_timeline.config import Settings
from crew_timeline.errors import InvalidRangeError
from crew_timeline.models import (
    DayRange,
    PositionedItem,
    Range,
    ScheduleItem,
    TimeOffPeriod,
    TimeRange,
    ViewportState,
    WorkWindow,
)
from crew_timeline.services.lane_allocator import assign_lanes
from crew_timeline.services.placement import find_work_window, validate_placement
from crew_timeline.utils.time_utils import (
    day_of_week_label,
    days_between,
    enumerate_days,
    format_display_date,
    format_hour_label,
    holiday_name,
    is_today,
    is_weekend,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Projection:
    """Horizontal placement of a range."""

    left_px: float
    width_px: float

    @property
    def right_px(self) -> float:
        return self.left_px + self.width_px


@dataclass(frozen=True)
class DayColumn:
    """One day of the multi-day header and grid."""

    day: date
    left_px: float
    width_px: float
    weekday: str
    display_date: str
    is_weekend: bool
    is_today: bool
    holiday: Optional[str] = None


@dataclass(frozen=True)
class HourColumn:
    """One hour of the hourly header."""

    hour: int
    left_px: float
    width_px: float
    label: str


@dataclass(frozen=True)
class WorkBar:
    """A work window drawn behind an owner's row."""

    window: WorkWindow
    left_px: float
    width_px: float
    label: str


@dataclass(frozen=True)
class TimeOffBar:
    """An approved time-off period drawn behind an owner's row."""

    period: TimeOffPeriod
    left_px: float
    width_px: float
    label: str


def project_day_range(
    day_range: DayRange,
    viewport: ViewportState,
    unit_width_px: float,
    inset_px: float = 0,
) -> Projection:
    """Project a whole-day range onto the multi-day grid.

    The item starts ``start_date - visible_start_date`` columns in and spans
    ``days_between(start_date, end_date)`` columns, shrunk by ``inset_px`` on
    each edge. Ranges starting before the viewport get a negative left.

    Raises:
        InvalidRangeError: If the inset leaves no width to draw
    """
    offset_days = (day_range.start_date - viewport.visible_start_date).days
    span_days = days_between(day_range.start_date, day_range.end_date)

    width = span_days * unit_width_px - 2 * inset_px
    if width <= 0:
        raise InvalidRangeError(
            f"Inset {inset_px}px leaves no width for a {span_days}-day range"
        )
    return Projection(left_px=offset_days * unit_width_px + inset_px, width_px=width)


def project_time_range(time_range: TimeRange, hour_width_px: float) -> Projection:
    """Project a minute range onto the 24-hour grid."""
    return Projection(
        left_px=(time_range.start_minutes / 60) * hour_width_px,
        width_px=(time_range.duration_minutes / 60) * hour_width_px,
    )


def project_to_pixels(
    item_range: Range,
    viewport: ViewportState,
    unit_width_px: float,
    inset_px: float = 0,
) -> Projection:
    """Project either kind of range; unit_width_px is per day or per hour."""
    if isinstance(item_range, DayRange):
        return project_day_range(item_range, viewport, unit_width_px, inset_px)
    if isinstance(item_range, TimeRange):
        return project_time_range(item_range, unit_width_px)
    raise TypeError(f"Unsupported range type: {type(item_range).__name__}")


class TimelineRenderer:
    """Turns schedule items and work windows into positioned geometry."""

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize the renderer.

        Args:
            settings: Geometry settings (default: Settings())
        """
        self.settings = settings or Settings()

    def render(
        self,
        viewport: ViewportState,
        items: Iterable[ScheduleItem],
        work_windows: Iterable[WorkWindow] = (),
    ) -> list[PositionedItem]:
        """Compute geometry for every item visible in the viewport.

        In the daily view, multi-day items overlapping the visible days are
        kept; in the hourly view, hourly items on the viewed day. Lanes are
        assigned over the kept items only, so the stack stays compact.

        Args:
            viewport: Current viewport
            items: Items from the latest refresh
            work_windows: Work windows used to flag hourly items

        Returns:
            Positioned items ordered by owner (first appearance), start time
            and input order
        """
        items = list(items)
        work_windows = list(work_windows)
        visible = [item for item in items if self._is_visible(item, viewport)]
        lanes = assign_lanes(visible)

        owner_order: dict[str, int] = {}
        for item in visible:
            owner_order.setdefault(item.owner_id, len(owner_order))

        ordered = sorted(
            enumerate(visible),
            key=lambda pair: (owner_order[pair[1].owner_id], pair[1].range.start, pair[0]),
        )

        positioned = []
        for _, item in ordered:
            projection = self._project_item(item, viewport)
            lane = lanes[item.id]
            in_window = None
            if item.is_hourly:
                window = find_work_window(work_windows, item.owner_id, item.day)
                in_window = validate_placement(item.range, window).ok

            positioned.append(
                PositionedItem(
                    item=item,
                    left_px=projection.left_px,
                    top_px=self.settings.lane_base_offset_px + lane * self.settings.lane_height_px,
                    width_px=projection.width_px,
                    lane_index=lane,
                    in_work_window=in_window,
                )
            )

        logger.debug(
            "Rendered %d of %d items for %s..%s",
            len(positioned),
            len(items),
            viewport.visible_start_date,
            viewport.visible_end_date,
        )
        return positioned

    def row_heights(self, positioned: Sequence[PositionedItem]) -> dict[str, int]:
        """Pixel height of each owner's row, sized to its deepest lane."""
        depth: dict[str, int] = {}
        for p in positioned:
            depth[p.item.owner_id] = max(depth.get(p.item.owner_id, 0), p.lane_index + 1)
        return {owner: self.row_height(lanes) for owner, lanes in depth.items()}

    def row_height(self, lane_count: int) -> int:
        """Height of a row holding lane_count lanes (at least one)."""
        return self.settings.lane_base_offset_px + max(lane_count, 1) * self.settings.lane_height_px

    def timeline_width(self, viewport: ViewportState) -> int:
        """Total scrollable width of the multi-day grid."""
        return viewport.day_count * self.settings.day_width_px

    def day_columns(self, viewport: ViewportState, reference_now: datetime) -> list[DayColumn]:
        """Header and grid cells for each visible day."""
        width = self.settings.day_width_px
        return [
            DayColumn(
                day=day,
                left_px=index * width,
                width_px=width,
                weekday=day_of_week_label(day),
                display_date=format_display_date(day),
                is_weekend=is_weekend(day),
                is_today=is_today(day, reference_now),
                holiday=holiday_name(day),
            )
            for index, day in enumerate(
                enumerate_days(viewport.visible_start_date, viewport.visible_end_date)
            )
        ]

    def hour_columns(self) -> list[HourColumn]:
        """The 24 hour headers of the hourly view."""
        width = self.settings.hour_width_px
        return [
            HourColumn(hour=hour, left_px=hour * width, width_px=width, label=format_hour_label(hour))
            for hour in range(24)
        ]

    def work_bars(self, work_windows: Iterable[WorkWindow], day: date) -> list[WorkBar]:
        """Work-window bars for the hourly view of one day."""
        bars = []
        for window in work_windows:
            if window.day != day:
                continue
            projection = project_time_range(window.range, self.settings.hour_width_px)
            bars.append(
                WorkBar(
                    window=window,
                    left_px=projection.left_px,
                    width_px=projection.width_px,
                    label=window.range.label(),
                )
            )
        return bars

    def shift_bars(self, work_windows: Iterable[WorkWindow], viewport: ViewportState) -> list[WorkBar]:
        """One-day shift bars for the multi-day view."""
        bars = []
        for window in work_windows:
            if not viewport.contains(window.day):
                continue
            projection = project_day_range(
                DayRange(window.day, window.day),
                viewport,
                self.settings.day_width_px,
                self.settings.shift_inset_px,
            )
            bars.append(
                WorkBar(
                    window=window,
                    left_px=projection.left_px,
                    width_px=projection.width_px,
                    label=window.range.label(),
                )
            )
        return bars

    def time_off_bars(
        self, periods: Iterable[TimeOffPeriod], viewport: ViewportState
    ) -> list[TimeOffBar]:
        """Time-off bars for the multi-day view, inset like items.

        Periods outside the viewport are skipped; periods crossing its edges
        keep their full width and are clipped by the grid.
        """
        bars = []
        for period in periods:
            if not (
                period.range.start_date <= viewport.visible_end_date
                and period.range.end_date >= viewport.visible_start_date
            ):
                continue
            projection = project_day_range(
                period.range,
                viewport,
                self.settings.day_width_px,
                self.settings.item_inset_px,
            )
            bars.append(
                TimeOffBar(
                    period=period,
                    left_px=projection.left_px,
                    width_px=projection.width_px,
                    label=period.reason or "Approved time off",
                )
            )
        return bars

    def snap_to_day(self, left_px: float) -> float:
        """Snap a dragged bar's left edge to the nearest day column."""
        width = self.settings.day_width_px
        return round(left_px / width) * width + self.settings.shift_inset_px

    def date_at_offset(self, left_px: float, viewport: ViewportState) -> date:
        """Day a snapped bar lands on."""
        index = round((left_px - self.settings.shift_inset_px) / self.settings.day_width_px)
        return viewport.visible_start_date + timedelta(days=index)

    def _is_visible(self, item: ScheduleItem, viewport: ViewportState) -> bool:
        if viewport.is_hourly:
            return item.is_hourly and item.day == viewport.visible_start_date
        if isinstance(item.range, DayRange):
            return (
                item.range.start_date <= viewport.visible_end_date
                and item.range.end_date >= viewport.visible_start_date
            )
        return False

    def _project_item(self, item: ScheduleItem, viewport: ViewportState) -> Projection:
        if isinstance(item.range, DayRange):
            return project_day_range(
                item.range, viewport, self.settings.day_width_px, self.settings.item_inset_px
            )
        return project_time_range(item.range, self.settings.hour_width_px)

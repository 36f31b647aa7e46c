"""Viewport state and positioned geometry produced by the renderer."""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Optional

from crew_timeline.errors import InvalidRangeError
from crew_timeline.models.schedule import ScheduleItem
from crew_timeline.utils.time_utils import as_date, days_between, format_date


class ViewMode(str, Enum):
    """Supported timeline granularities."""
    DAILY = "daily"
    HOURLY = "hourly"


@dataclass
class ViewportState:
    """The visible date window of a timeline view and its scroll offset.

    Mutated only by the owning TimelineSession. ``generation`` increases on
    every range change so stale refreshes can be recognised.
    """

    visible_start_date: date
    visible_end_date: date
    scroll_offset_px: float = 0.0
    generation: int = 0
    mode: ViewMode = ViewMode.DAILY

    def __post_init__(self) -> None:
        self.visible_start_date = as_date(self.visible_start_date)
        self.visible_end_date = as_date(self.visible_end_date)
        self.mode = ViewMode(self.mode)
        # Raises InvalidRangeError for a reversed window
        days_between(self.visible_start_date, self.visible_end_date)
        if self.mode == ViewMode.HOURLY and self.visible_end_date != self.visible_start_date:
            raise InvalidRangeError("The hourly view shows exactly one day")

    @property
    def is_hourly(self) -> bool:
        return self.mode == ViewMode.HOURLY

    @property
    def day_count(self) -> int:
        """Number of visible days, inclusive."""
        return days_between(self.visible_start_date, self.visible_end_date)

    def contains(self, day: date) -> bool:
        """True if day lies inside the visible window."""
        return self.visible_start_date <= as_date(day) <= self.visible_end_date


@dataclass(frozen=True)
class PositionedItem:
    """Geometry for one schedule item, ready for drawing."""

    item: ScheduleItem
    left_px: float
    top_px: float
    width_px: float
    lane_index: int
    # Hourly items only: whether the item sits inside its owner's work window
    in_work_window: Optional[bool] = None

    def to_dict(self) -> dict[str, Any]:
        """Flatten to JSON-friendly primitives for templates and the CLI."""
        item = self.item
        return {
            "id": item.id,
            "owner_id": item.owner_id,
            "label": item.label,
            "status": item.status.value,
            "day": format_date(item.day) if item.day else None,
            "work_area": item.work_area,
            "acknowledged": item.acknowledged,
            "left_px": self.left_px,
            "top_px": self.top_px,
            "width_px": self.width_px,
            "lane_index": self.lane_index,
            "in_work_window": self.in_work_window,
        }

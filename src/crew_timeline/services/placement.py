"""Placement Rules - checks a task against the owner's work window.

Validation here is advisory: callers run it before committing a write to the
schedule store and decide for themselves whether to block the write or
prompt the user.
"""

import logging
from dataclasses import dataclass
from datetime import date
from itertools import combinations
from typing import Iterable, Optional

from crew_timeline.errors import (
    NoWorkWindowError,
    OutsideWorkWindowError,
    PlacementError,
)
from crew_timeline.models import ScheduleItem, TimeRange, WorkWindow
from crew_timeline.services.lane_allocator import lane_group_key
from crew_timeline.utils.time_utils import minutes_to_time_string

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlacementResult:
    """Outcome of a placement check; error is set when rejected."""

    error: Optional[PlacementError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def reason(self) -> Optional[str]:
        return str(self.error) if self.error else None

    def raise_for_error(self) -> None:
        """Raise the rejection, if any."""
        if self.error is not None:
            raise self.error


@dataclass(frozen=True)
class Conflict:
    """Two items of the same owner whose ranges overlap."""

    owner_id: str
    first_id: str
    second_id: str


def _window_label(window: WorkWindow) -> str:
    return (
        f"{minutes_to_time_string(window.start_minutes)} - "
        f"{minutes_to_time_string(window.end_minutes)}"
    )


def validate_placement(proposed: TimeRange, window: Optional[WorkWindow]) -> PlacementResult:
    """Check that a proposed range fits inside a work window.

    Args:
        proposed: The task's time range
        window: The owner's work window for that day, or None if unscheduled

    Returns:
        PlacementResult with no error when the placement is allowed,
        NoWorkWindowError when there is no window, or
        OutsideWorkWindowError when the range leaves the window
    """
    if window is None:
        return PlacementResult(NoWorkWindowError())

    if proposed.start_minutes < window.start_minutes or proposed.end_minutes > window.end_minutes:
        return PlacementResult(
            OutsideWorkWindowError(
                f"{OutsideWorkWindowError.reason} ({_window_label(window)})"
            )
        )

    return PlacementResult()


def require_placement(proposed: TimeRange, window: Optional[WorkWindow]) -> None:
    """Like validate_placement, but raises the PlacementError on rejection."""
    validate_placement(proposed, window).raise_for_error()


def validate_hour_slot(hour: int, window: Optional[WorkWindow]) -> PlacementResult:
    """Check a clicked hour column before opening the add-task flow.

    The slot is allowed when the window's start hour <= hour < its end hour.
    """
    if window is None:
        return PlacementResult(NoWorkWindowError())

    start_hour = window.start_minutes // 60
    end_hour = window.end_minutes // 60
    if hour < start_hour or hour >= end_hour:
        return PlacementResult(
            OutsideWorkWindowError(
                f"{OutsideWorkWindowError.reason} ({_window_label(window)})"
            )
        )
    return PlacementResult()


def find_work_window(
    windows: Iterable[WorkWindow],
    owner_id: str,
    day: date,
) -> Optional[WorkWindow]:
    """The owner's window for a day, or None."""
    for window in windows:
        if window.owner_id == owner_id and window.day == day:
            return window
    return None


def detect_conflicts(items: Iterable[ScheduleItem]) -> list[Conflict]:
    """List every pair of overlapping items that share an owner row.

    Lane allocation keeps such pairs from colliding visually; this reports
    them so the schedule can be flagged for review.
    """
    rows: dict[tuple, list[ScheduleItem]] = {}
    for item in items:
        rows.setdefault(lane_group_key(item), []).append(item)

    conflicts = []
    for (owner_id, _), row in rows.items():
        for first, second in combinations(row, 2):
            if first.range.overlaps(second.range):
                conflicts.append(Conflict(owner_id, first.id, second.id))

    if conflicts:
        logger.warning("%d schedule conflict(s) detected", len(conflicts))
    return conflicts

"""Schedule entities - the time ranges and items the layout core works on.

These are immutable value objects rebuilt on every data refresh; the
external store stays the source of truth.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Union

from crew_timeline.errors import InvalidRangeError
from crew_timeline.utils.time_utils import (
    MINUTES_PER_DAY,
    as_date,
    minutes_to_time_string,
    time_string_to_minutes,
)


class TaskStatus(str, Enum):
    """Status tag of a scheduled task."""
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    OVERDUE = "overdue"
    ON_HOLD = "on-hold"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"


@dataclass(frozen=True)
class TimeRange:
    """A half-open range [start, end) of minutes within one day."""

    start_minutes: int
    end_minutes: int

    def __post_init__(self) -> None:
        for value in (self.start_minutes, self.end_minutes):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidRangeError(f"Minutes must be integers: {value!r}")
            if not 0 <= value < MINUTES_PER_DAY:
                raise InvalidRangeError(f"Minutes out of range [0, 1440): {value}")
        if self.start_minutes >= self.end_minutes:
            raise InvalidRangeError(
                f"start ({self.start_minutes}) must be before end ({self.end_minutes})"
            )

    @classmethod
    def from_strings(cls, start: str, end: str) -> "TimeRange":
        """Build a range from "HHMM" or "HH:MM" strings."""
        return cls(time_string_to_minutes(start), time_string_to_minutes(end))

    @property
    def start(self) -> int:
        return self.start_minutes

    @property
    def end(self) -> int:
        return self.end_minutes

    @property
    def duration_minutes(self) -> int:
        """Length of the range in minutes."""
        return self.end_minutes - self.start_minutes

    def overlaps(self, other: "TimeRange") -> bool:
        """True if the two half-open ranges share any minute."""
        return self.start_minutes < other.end_minutes and other.start_minutes < self.end_minutes

    def contains(self, other: "TimeRange") -> bool:
        """True if other lies entirely inside this range."""
        return self.start_minutes <= other.start_minutes and other.end_minutes <= self.end_minutes

    def label(self) -> str:
        """Display form, e.g. "09:00 - 10:30"."""
        return f"{minutes_to_time_string(self.start_minutes)} - {minutes_to_time_string(self.end_minutes)}"


@dataclass(frozen=True)
class DayRange:
    """A range of whole days, both ends inclusive.

    For overlap checks it behaves as [start_date, end_date + 1 day).
    """

    start_date: date
    end_date: date

    def __post_init__(self) -> None:
        object.__setattr__(self, "start_date", as_date(self.start_date))
        object.__setattr__(self, "end_date", as_date(self.end_date))
        if self.end_date < self.start_date:
            raise InvalidRangeError(
                f"end date {self.end_date} is before start date {self.start_date}"
            )

    @property
    def start(self) -> int:
        return self.start_date.toordinal()

    @property
    def end(self) -> int:
        return self.end_date.toordinal() + 1

    @property
    def day_count(self) -> int:
        """Number of days covered, inclusive."""
        return (self.end_date - self.start_date).days + 1

    def overlaps(self, other: "DayRange") -> bool:
        """True if the two ranges share at least one day."""
        return self.start_date <= other.end_date and other.start_date <= self.end_date


Range = Union[TimeRange, DayRange]


@dataclass(frozen=True)
class ScheduleItem:
    """A renderable task on a timeline row.

    Hour-granular items carry a TimeRange plus the calendar day it falls on;
    multi-day items carry a DayRange and leave day unset.
    """

    id: str
    owner_id: str
    range: Range
    label: str = ""
    status: TaskStatus = TaskStatus.PENDING
    day: Optional[date] = None
    work_area: Optional[str] = None
    acknowledged: bool = False

    @property
    def is_hourly(self) -> bool:
        """True for single-day items measured in minutes."""
        return isinstance(self.range, TimeRange)


@dataclass(frozen=True)
class WorkWindow:
    """An owner's scheduled working hours on one day."""

    owner_id: str
    day: date
    start_minutes: int
    end_minutes: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "day", as_date(self.day))
        # Reuses TimeRange's bounds and ordering checks
        TimeRange(self.start_minutes, self.end_minutes)

    @property
    def range(self) -> TimeRange:
        return TimeRange(self.start_minutes, self.end_minutes)


@dataclass(frozen=True)
class TimeOffPeriod:
    """Approved time off for one owner, drawn behind the row's items."""

    owner_id: str
    range: DayRange
    reason: Optional[str] = None

"""Calendar and clock arithmetic for the timeline grid.

Every function here is pure: the current time is always passed in by the
caller, never read from the system clock.
"""

from datetime import date, datetime, timedelta
from typing import Iterator

from crew_timeline.errors import InvalidRangeError, InvalidTimeFormatError

MINUTES_PER_DAY = 24 * 60

_WEEKDAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

# (month, day, name)
FIXED_HOLIDAYS = [
    (1, 1, "New Year's Day"),
    (7, 4, "Independence Day"),
    (11, 24, "Thanksgiving"),
    (12, 25, "Christmas"),
]


def as_date(value: date) -> date:
    """Drop the time component of a datetime; pass plain dates through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def days_between(start: date, end: date) -> int:
    """Count the days from start to end, both inclusive.

    Args:
        start: First day
        end: Last day

    Returns:
        Number of days, at least 1

    Raises:
        InvalidRangeError: If end is before start
    """
    start, end = as_date(start), as_date(end)
    if end < start:
        raise InvalidRangeError(f"end date {end} is before start date {start}")
    return (end - start).days + 1


def enumerate_days(start: date, end: date) -> Iterator[date]:
    """Yield each day from start to end inclusive, in ascending order.

    Raises:
        InvalidRangeError: If end is before start
    """
    count = days_between(start, end)
    first = as_date(start)
    return (first + timedelta(days=i) for i in range(count))


def is_weekend(day: date) -> bool:
    """True for Saturday and Sunday."""
    return as_date(day).weekday() >= 5


def is_today(day: date, reference_now: datetime) -> bool:
    """True when day falls on the same calendar day as reference_now."""
    return as_date(day) == as_date(reference_now)


def time_string_to_minutes(value: str) -> int:
    """Parse "HHMM" or "HH:MM" into minutes after midnight.

    Args:
        value: Time string such as "0930" or "09:30"

    Returns:
        Minutes in [0, 1440)

    Raises:
        InvalidTimeFormatError: On wrong length, non-digit characters,
            hour above 23 or minute above 59
    """
    if not isinstance(value, str):
        raise InvalidTimeFormatError(f"Invalid time: {value!r}")

    if len(value) == 5 and value[2] == ":":
        hours, minutes = value[:2], value[3:]
    elif len(value) == 4:
        hours, minutes = value[:2], value[2:]
    else:
        raise InvalidTimeFormatError(f"Invalid time format: {value!r}")

    if not (hours.isascii() and hours.isdigit() and minutes.isascii() and minutes.isdigit()):
        raise InvalidTimeFormatError(f"Invalid time format: {value!r}")

    hour, minute = int(hours), int(minutes)
    if hour > 23 or minute > 59:
        raise InvalidTimeFormatError(f"Time out of range: {value!r}")
    return hour * 60 + minute


def minutes_to_time_string(minutes: int) -> str:
    """Format minutes after midnight as "HH:MM".

    Raises:
        InvalidTimeFormatError: If minutes is outside [0, 1440)
    """
    if isinstance(minutes, bool) or not isinstance(minutes, int):
        raise InvalidTimeFormatError(f"Minutes must be an integer: {minutes!r}")
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise InvalidTimeFormatError(f"Minutes out of range: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def format_date(day: date) -> str:
    """Format as YYYY-MM-DD."""
    return as_date(day).isoformat()


def format_display_date(day: date) -> str:
    """Format as MM/DD for compact bar labels."""
    day = as_date(day)
    return f"{day.month:02d}/{day.day:02d}"


def day_of_week_label(day: date) -> str:
    """Short weekday name, e.g. "Mon"."""
    return _WEEKDAY_LABELS[as_date(day).weekday()]


def format_hour_label(hour: int) -> str:
    """Format an hour of the day as a 12-hour header label.

    Args:
        hour: Hour in [0, 24)

    Returns:
        Label like "12 AM", "9 AM", "12 PM" or "5 PM"
    """
    if not 0 <= hour < 24:
        raise InvalidTimeFormatError(f"Hour out of range: {hour}")
    if hour == 0:
        return "12 AM"
    if hour < 12:
        return f"{hour} AM"
    if hour == 12:
        return "12 PM"
    return f"{hour - 12} PM"


def holidays_for_year(year: int) -> dict[date, str]:
    """Fixed-date holidays highlighted on the day grid."""
    return {date(year, month, day): name for month, day, name in FIXED_HOLIDAYS}


def holiday_name(day: date) -> str | None:
    """Name of the holiday on this day, or None."""
    day = as_date(day)
    return holidays_for_year(day.year).get(day)

"""Exceptions raised by the timeline layout and placement core."""


class TimelineError(Exception):
    """Base class for all crew_timeline errors."""


class InvalidRangeError(TimelineError, ValueError):
    """A time or date range is empty, reversed, or out of bounds."""


class InvalidTimeFormatError(TimelineError, ValueError):
    """A time string could not be parsed as HHMM or HH:MM."""


class PlacementError(TimelineError):
    """A proposed task placement violates the work-window rules."""

    reason = "placement rejected"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.reason)


class NoWorkWindowError(PlacementError):
    """The owner has no scheduled work window on the requested day."""

    reason = "no shift scheduled for this date"


class OutsideWorkWindowError(PlacementError):
    """The proposed range falls outside the owner's work window."""

    reason = "cannot assign tasks outside work hours"


class DuplicateItemError(TimelineError, ValueError):
    """Two schedule items in one layout share an id."""

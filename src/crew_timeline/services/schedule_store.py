"""Schedule Store - read-only access to schedule data kept in a JSON file.

Stands in for the dashboard's backend: the file holds ``employees``,
``tasks``, ``shifts`` and ``time_off`` arrays in the backend's own field
spellings. Records are normalised on load and handed to the core as
ScheduleItem, WorkWindow and TimeOffPeriod values. Writes stay with the
backend.
"""

import logging
from datetime import date
from pathlib import Path
from typing import NamedTuple, Optional

from crew_timeline.models import (
    DayRange,
    EmployeeRecord,
    ScheduleDocument,
    ScheduleItem,
    TimeOffPeriod,
    WorkWindow,
)
from crew_timeline.utils.time_utils import as_date

logger = logging.getLogger(__name__)


class ScheduleSlice(NamedTuple):
    """What one fetch returns for a range of days."""

    items: list[ScheduleItem]
    work_windows: list[WorkWindow]
    time_off: list[TimeOffPeriod]


class ScheduleStore:
    """Loads schedule records from disk on every fetch."""

    def __init__(self, data_file: str | Path):
        """Initialize the store.

        Args:
            data_file: Path to the schedule JSON document
        """
        self.data_file = Path(data_file)

    def load(self) -> ScheduleDocument:
        """Read and validate the whole document.

        Raises:
            FileNotFoundError: If the data file does not exist
            pydantic.ValidationError: If a record is malformed
        """
        if not self.data_file.exists():
            raise FileNotFoundError(f"Schedule data not found: {self.data_file}")

        document = ScheduleDocument.load_from_file(self.data_file)
        logger.debug(
            "Loaded %d employees, %d tasks, %d shifts, %d time off from %s",
            len(document.employees),
            len(document.tasks),
            len(document.shifts),
            len(document.time_off),
            self.data_file,
        )
        return document

    def employees(self) -> list[EmployeeRecord]:
        """All employees, in file order."""
        return self.load().employees

    def fetch(self, start_date: date, end_date: date) -> ScheduleSlice:
        """Items, work windows and approved time off touching the given days.

        Matches the session's fetch signature.

        Raises:
            InvalidRangeError: If a stored task, shift or time-off period has a
                reversed range
        """
        start_date, end_date = as_date(start_date), as_date(end_date)
        window = DayRange(start_date, end_date)
        document = self.load()

        items = []
        for record in document.tasks:
            item = record.to_schedule_item()
            if isinstance(item.range, DayRange):
                if item.range.overlaps(window):
                    items.append(item)
            elif start_date <= item.day <= end_date:
                items.append(item)

        work_windows = [
            shift.to_work_window()
            for shift in document.shifts
            if start_date <= shift.shift_date <= end_date
        ]
        time_off = []
        for record in document.time_off:
            if not record.is_approved:
                continue
            period = record.to_time_off()
            if period.range.overlaps(window):
                time_off.append(period)

        return ScheduleSlice(items, work_windows, time_off)

    def work_window_for(self, owner_id: str, day: date) -> Optional[WorkWindow]:
        """The owner's work window on day, or None if not scheduled."""
        day = as_date(day)
        for window in self.fetch(day, day).work_windows:
            if window.owner_id == owner_id:
                return window
        return None

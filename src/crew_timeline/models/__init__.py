"""Data models for the Crew Timeline layout engine.

Two layers:
- Records (pydantic): what the external schedule store hands us, with
  alias and time-format normalisation
- Schedule values (frozen dataclasses): what the layout core computes on

ID formats are whatever the store uses; integer IDs are coerced to strings.
"""

from crew_timeline.models.base import TimelineModel
from crew_timeline.models.schedule import (
    DayRange,
    Range,
    ScheduleItem,
    TaskStatus,
    TimeOffPeriod,
    TimeRange,
    WorkWindow,
)
from crew_timeline.models.viewport import PositionedItem, ViewMode, ViewportState
from crew_timeline.models.records import (
    EmployeeRecord,
    ScheduleDocument,
    ShiftRecord,
    TaskRecord,
    TimeOffRecord,
)

__all__ = [
    # Base
    "TimelineModel",
    # Schedule values
    "DayRange",
    "Range",
    "ScheduleItem",
    "TaskStatus",
    "TimeOffPeriod",
    "TimeRange",
    "WorkWindow",
    # Viewport
    "PositionedItem",
    "ViewMode",
    "ViewportState",
    # Records
    "EmployeeRecord",
    "ScheduleDocument",
    "ShiftRecord",
    "TaskRecord",
    "TimeOffRecord",
]

"""Records as stored by the external schedule backend.

The backend has grown two spellings for most fields (``start_time`` and
``startTime``, ``employee_id`` and ``employeeId``) and stores times as
"HH:MM:SS", "HH:MM" or "HHMM". All of that is normalised here so the layout
core only ever sees ScheduleItem and WorkWindow values.
"""

from datetime import date
from typing import Any, Optional

from pydantic import AliasChoices, Field, field_validator, model_validator

from crew_timeline.models.base import TimelineModel
from crew_timeline.models.schedule import (
    DayRange,
    ScheduleItem,
    TaskStatus,
    TimeOffPeriod,
    TimeRange,
    WorkWindow,
)
from crew_timeline.utils.time_utils import time_string_to_minutes


def normalize_time_string(value: Any) -> Any:
    """Truncate "HH:MM:SS" to "HH:MM" and validate the result.

    Non-string values are passed through for pydantic to reject.
    """
    if not isinstance(value, str):
        return value
    value = value.strip()
    if len(value) == 8 and value[2] == ":" and value[5] == ":":
        value = value[:5]
    # Raises InvalidTimeFormatError, which pydantic reports as a ValidationError
    time_string_to_minutes(value)
    return value


def _coerce_id(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


class EmployeeRecord(TimelineModel):
    """An employee row shown on the timeline."""

    id: str
    name: str
    role: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        return _coerce_id(v)

    @property
    def initials(self) -> str:
        """Two-letter initials for the row avatar."""
        parts = self.name.split()
        if len(parts) >= 2:
            return (parts[0][0] + parts[-1][0]).upper()
        return self.name[:2].upper()


class TaskRecord(TimelineModel):
    """A task as stored by the backend.

    Hourly tasks carry ``date`` plus start and end times; multi-day tasks
    carry ``start_date`` and optionally ``end_date``.
    """

    id: str
    employee_id: str = Field(validation_alias=AliasChoices("employee_id", "employeeId"))
    name: str = Field(default="", validation_alias=AliasChoices("name", "title"))
    task_date: Optional[date] = Field(
        default=None, validation_alias=AliasChoices("date", "task_date", "taskDate")
    )
    start_date: Optional[date] = Field(
        default=None, validation_alias=AliasChoices("start_date", "startDate")
    )
    end_date: Optional[date] = Field(
        default=None, validation_alias=AliasChoices("end_date", "endDate")
    )
    start_time: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("start_time", "startTime")
    )
    end_time: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("end_time", "endTime")
    )
    status: TaskStatus = TaskStatus.PENDING
    work_area: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("work_area", "workArea")
    )
    acknowledged: bool = False

    @field_validator("id", "employee_id", mode="before")
    @classmethod
    def coerce_ids(cls, v: Any) -> Any:
        return _coerce_id(v)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def normalize_times(cls, v: Any) -> Any:
        return normalize_time_string(v)

    @model_validator(mode="after")
    def validate_schedule_fields(self) -> "TaskRecord":
        """Ensure the record is either an hourly or a multi-day task."""
        if self.task_date is None and self.start_date is None:
            raise ValueError("task needs either date or start_date")
        if self.task_date is not None and (self.start_time is None or self.end_time is None):
            raise ValueError("hourly task needs start_time and end_time")
        return self

    @property
    def is_hourly(self) -> bool:
        return self.task_date is not None

    def to_schedule_item(self) -> ScheduleItem:
        """Convert to the immutable item the layout core consumes.

        Raises:
            InvalidRangeError: If the stored range is empty or reversed
        """
        if self.is_hourly:
            item_range = TimeRange.from_strings(self.start_time, self.end_time)
            day = self.task_date
        else:
            item_range = DayRange(self.start_date, self.end_date or self.start_date)
            day = None

        return ScheduleItem(
            id=self.id,
            owner_id=self.employee_id,
            range=item_range,
            label=self.name,
            status=TaskStatus(self.status),
            day=day,
            work_area=self.work_area,
            acknowledged=self.acknowledged,
        )


class ShiftRecord(TimelineModel):
    """A scheduled shift; defines the owner's work window for one day."""

    id: str
    employee_id: str = Field(validation_alias=AliasChoices("employee_id", "employeeId"))
    shift_date: date = Field(validation_alias=AliasChoices("shift_date", "shiftDate", "date"))
    start_time: str = Field(validation_alias=AliasChoices("start_time", "startTime"))
    end_time: str = Field(validation_alias=AliasChoices("end_time", "endTime"))
    status: str = "scheduled"
    template_name: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("template_name", "templateName")
    )

    @field_validator("id", "employee_id", mode="before")
    @classmethod
    def coerce_ids(cls, v: Any) -> Any:
        return _coerce_id(v)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def normalize_times(cls, v: Any) -> Any:
        return normalize_time_string(v)

    def to_work_window(self) -> WorkWindow:
        """Convert to the work window used for placement checks.

        Raises:
            InvalidRangeError: If the shift ends before it starts
        """
        return WorkWindow(
            owner_id=self.employee_id,
            day=self.shift_date,
            start_minutes=time_string_to_minutes(self.start_time),
            end_minutes=time_string_to_minutes(self.end_time),
        )


class TimeOffRecord(TimelineModel):
    """A time-off request; only approved ones are drawn."""

    id: str
    employee_id: str = Field(validation_alias=AliasChoices("employee_id", "employeeId"))
    start_date: date = Field(validation_alias=AliasChoices("start_date", "startDate"))
    end_date: Optional[date] = Field(
        default=None, validation_alias=AliasChoices("end_date", "endDate")
    )
    reason: Optional[str] = None
    status: str = "approved"

    @field_validator("id", "employee_id", mode="before")
    @classmethod
    def coerce_ids(cls, v: Any) -> Any:
        return _coerce_id(v)

    @property
    def is_approved(self) -> bool:
        return self.status.lower() == "approved"

    def to_time_off(self) -> TimeOffPeriod:
        """Convert to the period the renderer draws.

        Raises:
            InvalidRangeError: If end_date is before start_date
        """
        return TimeOffPeriod(
            owner_id=self.employee_id,
            range=DayRange(self.start_date, self.end_date or self.start_date),
            reason=self.reason,
        )


class ScheduleDocument(TimelineModel):
    """Everything the timeline needs, as one JSON document."""

    employees: list[EmployeeRecord] = Field(default_factory=list)
    tasks: list[TaskRecord] = Field(default_factory=list)
    shifts: list[ShiftRecord] = Field(default_factory=list)
    time_off: list[TimeOffRecord] = Field(
        default_factory=list, validation_alias=AliasChoices("time_off", "timeOff")
    )

    @model_validator(mode="before")
    @classmethod
    def wrap_task_list(cls, data: Any) -> Any:
        """Accept a bare task array as well as the full document."""
        if isinstance(data, list):
            return {"tasks": data}
        return data

"""Tests for crew_timeline data models - validation and serialization."""

import json
from datetime import date

import pytest
from pydantic import ValidationError

from crew_timeline.errors import InvalidRangeError
from crew_timeline.models import (
    # Schedule values
    DayRange,
    ScheduleItem,
    TaskStatus,
    TimeOffPeriod,
    TimeRange,
    WorkWindow,
    # Viewport
    PositionedItem,
    ViewMode,
    ViewportState,
    # Records
    EmployeeRecord,
    ScheduleDocument,
    ShiftRecord,
    TaskRecord,
    TimeOffRecord,
)


# =============================================================================
# Schedule Value Tests
# =============================================================================


class TestTimeRange:
    """Tests for minute ranges."""

    def test_from_strings(self):
        time_range = TimeRange.from_strings("0900", "10:30")
        assert (time_range.start, time_range.end) == (540, 630)
        assert time_range.duration_minutes == 90
        assert time_range.label() == "09:00 - 10:30"

    @pytest.mark.parametrize("start,end", [
        (600, 600),
        (660, 600),
        (-1, 60),
        (0, 1440),
    ])
    def test_invalid_ranges(self, start, end):
        """Empty, reversed or out-of-day ranges are rejected."""
        with pytest.raises(InvalidRangeError):
            TimeRange(start, end)

    def test_non_integer_minutes(self):
        with pytest.raises(InvalidRangeError):
            TimeRange(60.5, 120)

    def test_overlaps_is_half_open(self):
        nine_to_ten = TimeRange(540, 600)
        assert not nine_to_ten.overlaps(TimeRange(600, 660))
        assert nine_to_ten.overlaps(TimeRange(599, 660))

    def test_contains(self):
        assert TimeRange(540, 1020).contains(TimeRange(540, 1020))
        assert not TimeRange(540, 1020).contains(TimeRange(500, 600))


class TestDayRange:
    """Tests for whole-day ranges."""

    def test_inclusive_bounds(self):
        day_range = DayRange(date(2025, 1, 6), date(2025, 1, 8))
        assert day_range.day_count == 3
        assert day_range.end - day_range.start == 3

    def test_single_day(self):
        assert DayRange(date(2025, 1, 6), date(2025, 1, 6)).day_count == 1

    def test_reversed_rejected(self):
        with pytest.raises(InvalidRangeError):
            DayRange(date(2025, 1, 8), date(2025, 1, 6))

    def test_overlaps(self):
        first = DayRange(date(2025, 1, 6), date(2025, 1, 8))
        assert first.overlaps(DayRange(date(2025, 1, 8), date(2025, 1, 9)))
        assert not first.overlaps(DayRange(date(2025, 1, 9), date(2025, 1, 9)))


class TestWorkWindow:
    """Tests for work windows."""

    def test_range(self):
        window = WorkWindow("emp-1", date(2025, 1, 6), 540, 1020)
        assert window.range == TimeRange(540, 1020)

    def test_reversed_rejected(self):
        with pytest.raises(InvalidRangeError):
            WorkWindow("emp-1", date(2025, 1, 6), 1020, 540)


class TestViewportState:
    """Tests for viewport validation."""

    def test_day_count_and_contains(self):
        viewport = ViewportState(date(2025, 1, 6), date(2025, 1, 12))
        assert viewport.day_count == 7
        assert viewport.contains(date(2025, 1, 12))
        assert not viewport.contains(date(2025, 1, 13))
        assert viewport.mode == ViewMode.DAILY

    def test_reversed_rejected(self):
        with pytest.raises(InvalidRangeError):
            ViewportState(date(2025, 1, 12), date(2025, 1, 6))

    def test_hourly_single_day(self):
        viewport = ViewportState(date(2025, 1, 6), date(2025, 1, 6), mode="hourly")
        assert viewport.is_hourly
        with pytest.raises(InvalidRangeError):
            ViewportState(date(2025, 1, 6), date(2025, 1, 7), mode=ViewMode.HOURLY)


class TestPositionedItem:
    """Tests for positioned item flattening."""

    def test_to_dict(self):
        item = ScheduleItem(
            id="t1",
            owner_id="emp-1",
            range=TimeRange(540, 600),
            label="Inventory",
            status=TaskStatus.IN_PROGRESS,
            day=date(2025, 1, 6),
        )
        data = PositionedItem(item, 720.0, 20, 80.0, 0, True).to_dict()
        assert data["id"] == "t1"
        assert data["status"] == "in-progress"
        assert data["day"] == "2025-01-06"
        assert data["left_px"] == 720.0
        assert data["in_work_window"] is True
        json.dumps(data)


# =============================================================================
# Record Tests
# =============================================================================


class TestTaskRecord:
    """Tests for the task record adapter."""

    def test_camel_case_hourly_task(self):
        """Both spellings of each field are accepted."""
        record = TaskRecord.from_dict({
            "id": 17,
            "employeeId": 3,
            "title": "Restock",
            "date": "2025-01-06",
            "startTime": "09:00:00",
            "endTime": "1030",
            "status": "in-progress",
            "workArea": "Aisle 4",
        })
        assert record.id == "17"
        assert record.employee_id == "3"
        assert record.start_time == "09:00"
        assert record.is_hourly

        item = record.to_schedule_item()
        assert item.range == TimeRange(540, 630)
        assert item.day == date(2025, 1, 6)
        assert item.owner_id == "3"
        assert item.label == "Restock"
        assert item.status == TaskStatus.IN_PROGRESS
        assert item.work_area == "Aisle 4"

    def test_snake_case_multi_day_task(self):
        record = TaskRecord.from_dict({
            "id": "t2",
            "employee_id": "emp-1",
            "name": "Audit",
            "start_date": "2025-01-06",
            "end_date": "2025-01-08",
        })
        item = record.to_schedule_item()
        assert item.range == DayRange(date(2025, 1, 6), date(2025, 1, 8))
        assert item.day is None
        assert not item.is_hourly

    def test_missing_end_date_is_single_day(self):
        record = TaskRecord.from_dict({"id": "t3", "employeeId": "e", "startDate": "2025-01-06"})
        assert record.to_schedule_item().range.day_count == 1

    def test_invalid_time_rejected(self):
        """Unparsable times never reach the layout core."""
        with pytest.raises(ValidationError):
            TaskRecord.from_dict({
                "id": "t4",
                "employeeId": "e",
                "date": "2025-01-06",
                "startTime": "9am",
                "endTime": "10:00",
            })

    def test_needs_a_date(self):
        with pytest.raises(ValidationError):
            TaskRecord.from_dict({"id": "t5", "employeeId": "e"})

    def test_hourly_needs_times(self):
        with pytest.raises(ValidationError):
            TaskRecord.from_dict({"id": "t6", "employeeId": "e", "date": "2025-01-06"})

    def test_reversed_times_fail_on_conversion(self):
        record = TaskRecord.from_dict({
            "id": "t7",
            "employeeId": "e",
            "date": "2025-01-06",
            "startTime": "11:00",
            "endTime": "10:00",
        })
        with pytest.raises(InvalidRangeError):
            record.to_schedule_item()

    def test_field_names_and_aliases_agree(self):
        """Python field names and the backend's camelCase load the same record."""
        by_alias = TaskRecord.from_dict({
            "id": "t8",
            "employeeId": "e",
            "date": "2025-01-06",
            "startTime": "09:00",
            "endTime": "10:00",
        })
        by_name = TaskRecord.from_dict({
            "id": "t8",
            "employee_id": "e",
            "task_date": "2025-01-06",
            "start_time": "09:00",
            "end_time": "10:00",
        })
        assert by_alias == by_name


class TestShiftRecord:
    """Tests for the shift record adapter."""

    def test_to_work_window(self):
        record = ShiftRecord.from_dict({
            "id": 1,
            "employeeId": "emp-1",
            "shiftDate": "2025-01-06",
            "startTime": "09:00:00",
            "endTime": "17:00:00",
        })
        window = record.to_work_window()
        assert window == WorkWindow("emp-1", date(2025, 1, 6), 540, 1020)
        assert record.status == "scheduled"


class TestTimeOffRecord:
    """Tests for the time-off record adapter."""

    def test_to_time_off(self):
        record = TimeOffRecord.from_dict({
            "id": 3,
            "employeeId": "emp-1",
            "startDate": "2025-01-07",
            "endDate": "2025-01-08",
            "reason": "Vacation",
        })
        assert record.is_approved
        assert record.to_time_off() == TimeOffPeriod(
            "emp-1", DayRange(date(2025, 1, 7), date(2025, 1, 8)), "Vacation"
        )

    def test_single_day_defaults_end(self):
        record = TimeOffRecord.from_dict({"id": "t", "employee_id": "e", "start_date": "2025-01-07"})
        period = record.to_time_off()
        assert period.range.day_count == 1
        assert period.reason is None

    @pytest.mark.parametrize("status,approved", [
        ("approved", True),
        ("Approved", True),
        ("pending", False),
        ("denied", False),
    ])
    def test_is_approved(self, status, approved):
        record = TimeOffRecord(id="t", employee_id="e", start_date=date(2025, 1, 7), status=status)
        assert record.is_approved is approved

    def test_reversed_dates(self):
        record = TimeOffRecord.from_dict({
            "id": "t", "employeeId": "e", "startDate": "2025-01-08", "endDate": "2025-01-07",
        })
        with pytest.raises(InvalidRangeError):
            record.to_time_off()


class TestEmployeeRecord:
    """Tests for employee rows."""

    @pytest.mark.parametrize("name,initials", [
        ("Ada Lovelace", "AL"),
        ("Grace Brewster Hopper", "GH"),
        ("Cher", "CH"),
    ])
    def test_initials(self, name, initials):
        assert EmployeeRecord(id="e", name=name).initials == initials


class TestScheduleDocument:
    """Tests for the whole-document model."""

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "schedule.json"
        path.write_text(json.dumps({
            "employees": [{"id": 1, "name": "Ada Lovelace", "role": "Lead"}],
            "tasks": [],
            "shifts": [],
        }))
        document = ScheduleDocument.load_from_file(path)
        assert document.employees[0].id == "1"
        assert document.tasks == []
        assert document.time_off == []

    def test_load_bare_task_list(self, tmp_path):
        """A file holding only a task array loads as a document."""
        path = tmp_path / "tasks.json"
        path.write_text(json.dumps([
            {"id": "A", "employeeId": "emp-1", "date": "2025-01-06",
             "startTime": "09:00", "endTime": "10:00"},
        ]))
        document = ScheduleDocument.load_from_file(path)
        assert [task.id for task in document.tasks] == ["A"]
        assert document.employees == []

    def test_time_off_alias(self):
        document = ScheduleDocument.from_dict({
            "timeOff": [{"id": "o1", "employeeId": "emp-1", "startDate": "2025-01-07"}],
        })
        assert document.time_off[0].employee_id == "emp-1"

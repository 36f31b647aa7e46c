"""Tests for the TimelineSession.

Tests cover:
- Viewport changes and generation counting
- Stale refresh rejection after a viewport move
- Out-of-order refresh completion
- Infinite-scroll extension
- Hourly sessions
"""

from datetime import date

import pytest

from crew_timeline.config import Settings
from crew_timeline.errors import InvalidRangeError
from crew_timeline.models import (
    DayRange,
    ScheduleItem,
    TimeOffPeriod,
    TimeRange,
    ViewMode,
    ViewportState,
    WorkWindow,
)
from crew_timeline.services.session import TimelineSession


def day_item(item_id, start, end, owner="emp-1"):
    return ScheduleItem(id=item_id, owner_id=owner, range=DayRange(start, end))


# Test fixtures

@pytest.fixture
def session():
    """Daily session over the week of 2025-01-06."""
    return TimelineSession(ViewportState(date(2025, 1, 6), date(2025, 1, 12)))


@pytest.fixture
def items():
    return [
        day_item("a", date(2025, 1, 6), date(2025, 1, 7)),
        day_item("b", date(2025, 1, 7), date(2025, 1, 8)),
        day_item("c", date(2025, 1, 20), date(2025, 1, 21)),
    ]


class TestViewportChange:
    """Tests for on_viewport_change."""

    def test_same_range_is_idempotent(self, session, items):
        """Re-applying the current range recomputes identical geometry."""
        ticket = session.begin_refresh()
        session.complete_refresh(ticket, items)

        first = session.on_viewport_change(date(2025, 1, 6), date(2025, 1, 12))
        second = session.on_viewport_change(date(2025, 1, 6), date(2025, 1, 12))

        assert first == second
        assert session.generation == 0

    def test_new_range_bumps_generation(self, session, items):
        session.complete_refresh(session.begin_refresh(), items)

        positioned = session.on_viewport_change(date(2025, 1, 19), date(2025, 1, 25))

        assert session.generation == 1
        assert [p.item.id for p in positioned] == ["c"]
        assert positioned[0].left_px == 140 + 4

    def test_reversed_range_leaves_viewport_untouched(self, session):
        with pytest.raises(InvalidRangeError):
            session.on_viewport_change(date(2025, 1, 12), date(2025, 1, 6))
        assert session.viewport.visible_start_date == date(2025, 1, 6)
        assert session.generation == 0

    def test_extend(self, session):
        session.extend(7)
        assert session.viewport.visible_end_date == date(2025, 1, 19)
        assert session.generation == 1

    def test_extend_requires_positive_days(self, session):
        with pytest.raises(ValueError):
            session.extend(0)

    def test_on_scroll_records_offset(self, session):
        session.on_scroll(420.0)
        assert session.viewport.scroll_offset_px == 420.0


class TestRefresh:
    """Tests for stale refresh protection."""

    def test_refresh_applies_fetched_data(self, session, items):
        calls = []

        def fetch(start, end):
            calls.append((start, end))
            return items, []

        assert session.refresh(fetch) is True
        assert calls == [(date(2025, 1, 6), date(2025, 1, 12))]
        assert {p.item.id for p in session.positioned} == {"a", "b"}

    def test_refresh_keeps_time_off(self, session, items):
        period = TimeOffPeriod("emp-1", DayRange(date(2025, 1, 9), date(2025, 1, 10)), "Vacation")

        def fetch(start, end):
            return items, [], [period]

        assert session.refresh(fetch) is True
        assert session.time_off == [period]

    def test_stale_refresh_keeps_old_time_off(self, session, items):
        period = TimeOffPeriod("emp-1", DayRange(date(2025, 1, 9), date(2025, 1, 9)))
        ticket = session.begin_refresh()
        session.on_viewport_change(date(2025, 2, 3), date(2025, 2, 9))

        assert session.complete_refresh(ticket, items, [], [period]) is False
        assert session.time_off == []

    def test_refresh_started_before_viewport_move_is_discarded(self, session, items):
        """Data fetched for an old range never replaces current data."""
        ticket = session.begin_refresh()
        session.on_viewport_change(date(2025, 2, 3), date(2025, 2, 9))

        assert session.complete_refresh(ticket, items) is False
        assert session.items == []
        assert session.positioned == []

    def test_viewport_moved_during_fetch(self, session, items):
        def fetch(start, end):
            # Simulates the user scrolling away while the request is out
            session.on_viewport_change(date(2025, 2, 3), date(2025, 2, 9))
            return items, []

        assert session.refresh(fetch) is False
        assert session.items == []

    def test_older_refresh_completing_last_is_discarded(self, session, items):
        """Only the newest refresh's data is kept."""
        older = session.begin_refresh()
        newer = session.begin_refresh()

        assert session.complete_refresh(newer, items[:1]) is True
        assert session.complete_refresh(older, items) is False
        assert [i.id for i in session.items] == ["a"]

    def test_same_viewport_change_keeps_ticket_valid(self, session, items):
        ticket = session.begin_refresh()
        session.on_viewport_change(date(2025, 1, 6), date(2025, 1, 12))
        assert session.complete_refresh(ticket, items) is True


class TestConstructors:
    """Tests for the session factory methods."""

    def test_starting_on_uses_default_range(self):
        session = TimelineSession.starting_on(date(2025, 1, 1), Settings())
        assert session.viewport.visible_end_date == date(2025, 3, 31)
        assert session.viewport.day_count == 90

    def test_for_day_is_hourly(self):
        session = TimelineSession.for_day(date(2025, 1, 6), Settings())
        assert session.viewport.mode == ViewMode.HOURLY
        assert session.viewport.day_count == 1

        hourly = ScheduleItem(
            id="h", owner_id="emp-1", range=TimeRange(600, 660), day=date(2025, 1, 6)
        )
        window = WorkWindow("emp-1", date(2025, 1, 6), 540, 1020)
        session.complete_refresh(session.begin_refresh(), [hourly], [window])

        [positioned] = session.positioned
        assert positioned.left_px == 10 * 80
        assert positioned.in_work_window is True

    def test_hourly_viewport_cannot_span_days(self):
        session = TimelineSession.for_day(date(2025, 1, 6), Settings())
        with pytest.raises(InvalidRangeError):
            session.on_viewport_change(date(2025, 1, 6), date(2025, 1, 7))

"""Timeline Session - owns the viewport of one rendered view.

Replaces the shared globals a browser dashboard would keep: each view gets
its own session holding the viewport, the latest data and its geometry.

Refreshes are guarded by two counters. The viewport generation increases on
every range change, and every refresh gets a sequence number. A completed
refresh is applied only if the viewport has not changed since it began and
no later refresh has already been applied.
"""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, Iterable, Optional, Union

from crew_timeline.config import Settings
from crew_timeline.models import (
    PositionedItem,
    ScheduleItem,
    TimeOffPeriod,
    ViewMode,
    ViewportState,
    WorkWindow,
)
from crew_timeline.services.timeline_renderer import TimelineRenderer
from crew_timeline.utils.time_utils import as_date

logger = logging.getLogger(__name__)

# ScheduleStore.fetch returns the three-field form
FetchResult = Union[
    tuple[list[ScheduleItem], list[WorkWindow]],
    tuple[list[ScheduleItem], list[WorkWindow], list[TimeOffPeriod]],
]
Fetch = Callable[[date, date], FetchResult]


@dataclass(frozen=True)
class RefreshTicket:
    """Handle for a refresh in progress."""

    generation: int
    sequence: int
    start_date: date
    end_date: date


class TimelineSession:
    """Viewport, data and geometry of a single timeline view."""

    def __init__(
        self,
        viewport: ViewportState,
        renderer: Optional[TimelineRenderer] = None,
    ):
        """Initialize the session.

        Args:
            viewport: Initial viewport; the session takes ownership of it
            renderer: Renderer to use (default: TimelineRenderer())
        """
        self.viewport = viewport
        self.renderer = renderer or TimelineRenderer()
        self.items: list[ScheduleItem] = []
        self.work_windows: list[WorkWindow] = []
        self.time_off: list[TimeOffPeriod] = []
        self.positioned: list[PositionedItem] = []
        self._next_sequence = 0
        self._applied_sequence = -1

    @classmethod
    def starting_on(cls, first_day: date, settings: Optional[Settings] = None) -> "TimelineSession":
        """Session showing settings.default_range_days days from first_day."""
        settings = settings or Settings()
        first_day = as_date(first_day)
        viewport = ViewportState(
            visible_start_date=first_day,
            visible_end_date=first_day + timedelta(days=settings.default_range_days - 1),
        )
        return cls(viewport, TimelineRenderer(settings))

    @classmethod
    def for_day(cls, day: date, settings: Optional[Settings] = None) -> "TimelineSession":
        """Session for the single-day hourly view."""
        day = as_date(day)
        return cls(ViewportState(day, day, mode=ViewMode.HOURLY), TimelineRenderer(settings))

    @property
    def generation(self) -> int:
        return self.viewport.generation

    def on_viewport_change(self, start_date: date, end_date: Optional[date] = None) -> list[PositionedItem]:
        """Move the viewport and recompute geometry from the current data.

        Calling it again with the same range recomputes the same geometry
        without bumping the generation.

        Args:
            start_date: First visible day
            end_date: Last visible day (default: start_date)

        Returns:
            Positioned items for the new viewport
        """
        start_date = as_date(start_date)
        end_date = as_date(end_date) if end_date is not None else start_date

        if (start_date, end_date) != (
            self.viewport.visible_start_date,
            self.viewport.visible_end_date,
        ):
            # Validates before anything is mutated
            candidate = ViewportState(start_date, end_date, mode=self.viewport.mode)
            self.viewport.visible_start_date = candidate.visible_start_date
            self.viewport.visible_end_date = candidate.visible_end_date
            self.viewport.generation += 1
            logger.debug(
                "Viewport moved to %s..%s (generation %d)",
                start_date,
                end_date,
                self.viewport.generation,
            )

        return self._rerender()

    def extend(self, days: int) -> list[PositionedItem]:
        """Grow the visible range by days at the end (infinite scroll)."""
        if days <= 0:
            raise ValueError("days must be positive")
        return self.on_viewport_change(
            self.viewport.visible_start_date,
            self.viewport.visible_end_date + timedelta(days=days),
        )

    def on_scroll(self, scroll_offset_px: float) -> None:
        """Record the body pane's scroll offset; usable as a sync listener."""
        self.viewport.scroll_offset_px = scroll_offset_px

    def begin_refresh(self) -> RefreshTicket:
        """Start a refresh of the current viewport's data."""
        ticket = RefreshTicket(
            generation=self.viewport.generation,
            sequence=self._next_sequence,
            start_date=self.viewport.visible_start_date,
            end_date=self.viewport.visible_end_date,
        )
        self._next_sequence += 1
        return ticket

    def complete_refresh(
        self,
        ticket: RefreshTicket,
        items: Iterable[ScheduleItem],
        work_windows: Iterable[WorkWindow] = (),
        time_off: Iterable[TimeOffPeriod] = (),
    ) -> bool:
        """Apply fetched data if the ticket is still current.

        Returns:
            True if the data replaced the session's data, False if the
            ticket was stale and the data was discarded
        """
        if ticket.generation != self.viewport.generation:
            logger.debug(
                "Discarding refresh %d: viewport moved (generation %d -> %d)",
                ticket.sequence,
                ticket.generation,
                self.viewport.generation,
            )
            return False
        if ticket.sequence < self._applied_sequence:
            logger.debug(
                "Discarding refresh %d: refresh %d already applied",
                ticket.sequence,
                self._applied_sequence,
            )
            return False

        self.items = list(items)
        self.work_windows = list(work_windows)
        self.time_off = list(time_off)
        self._applied_sequence = ticket.sequence
        self._rerender()
        return True

    def refresh(self, fetch: Fetch) -> bool:
        """Fetch data for the current viewport and apply it if still current."""
        ticket = self.begin_refresh()
        return self.complete_refresh(ticket, *fetch(ticket.start_date, ticket.end_date))

    def _rerender(self) -> list[PositionedItem]:
        self.positioned = self.renderer.render(self.viewport, self.items, self.work_windows)
        return self.positioned

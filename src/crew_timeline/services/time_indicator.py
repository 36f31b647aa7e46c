"""Live Time Indicator - the "now" line on the hourly timeline."""

import logging
import threading
from datetime import date, datetime
from typing import Callable, Optional

from crew_timeline.config import Settings
from crew_timeline.utils.time_utils import as_date

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
IndicatorCallback = Callable[[Optional[float]], None]


def local_now() -> datetime:
    """Wall-clock time in the local timezone; the default clock."""
    return datetime.now()


def compute_now_offset_px(
    now: datetime,
    viewed_date: date,
    hour_width_px: float,
    scroll_offset_px: float = 0.0,
    date_grid_origin_offset_px: float = 0.0,
) -> Optional[float]:
    """Pixel position of the "now" line, or None to hide it.

    Args:
        now: Current time from an injected clock
        viewed_date: Day shown by the hourly view
        hour_width_px: Width of one hour column
        scroll_offset_px: Current horizontal scroll of the body pane
        date_grid_origin_offset_px: Where hour 0 starts (the name column width)

    Returns:
        ``origin + (h + m/60 + s/3600) * hour_width - scroll``, or None when
        now is not on the viewed day
    """
    if as_date(now) != as_date(viewed_date):
        return None
    hours = now.hour + now.minute / 60 + now.second / 3600
    return date_grid_origin_offset_px + hours * hour_width_px - scroll_offset_px


class LiveTimeIndicator:
    """Keeps the "now" offset current for one hourly view.

    Recomputed on every poll tick and on every scroll-sync frame; wire
    ``on_scroll`` as a ScrollSynchronizer listener.
    """

    def __init__(
        self,
        viewed_date: date,
        settings: Optional[Settings] = None,
        clock: Clock = local_now,
        on_update: Optional[IndicatorCallback] = None,
    ):
        self.viewed_date = as_date(viewed_date)
        self.settings = settings or Settings()
        self.clock = clock
        self.on_update = on_update
        self.scroll_offset_px = 0.0
        self.offset_px: Optional[float] = None

    @property
    def visible(self) -> bool:
        return self.offset_px is not None

    def refresh(self) -> Optional[float]:
        """Recompute the offset from the clock and current scroll."""
        self.offset_px = compute_now_offset_px(
            self.clock(),
            self.viewed_date,
            self.settings.hour_width_px,
            self.scroll_offset_px,
            self.settings.name_column_px,
        )
        if self.on_update is not None:
            self.on_update(self.offset_px)
        return self.offset_px

    def on_scroll(self, scroll_offset_px: float) -> Optional[float]:
        """Track a new scroll offset and recompute."""
        self.scroll_offset_px = scroll_offset_px
        return self.refresh()

    def show_date(self, viewed_date: date) -> Optional[float]:
        """Switch the view to another day and recompute."""
        self.viewed_date = as_date(viewed_date)
        return self.refresh()

    def run(self, stop: threading.Event, max_ticks: Optional[int] = None) -> int:
        """Poll until stop is set, refreshing every indicator interval.

        Args:
            stop: Event that ends the loop
            max_ticks: Optional cap on the number of refreshes

        Returns:
            Number of refreshes performed
        """
        interval = self.settings.indicator_interval_seconds
        ticks = 0
        while not stop.is_set():
            self.refresh()
            ticks += 1
            if max_ticks is not None and ticks >= max_ticks:
                break
            stop.wait(interval)
        logger.debug("Time indicator stopped after %d ticks", ticks)
        return ticks

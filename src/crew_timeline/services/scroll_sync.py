"""Dual-Pane Scroll Synchronizer - keeps the header pane aligned with the body.

Scroll events are coalesced: however many fire between two frames, the
follower is written once per frame with the driver's latest offset. A single
in-flight flag, cleared at the end of the frame callback, swallows events
fired while a frame is pending. A pane that was just written also remembers
the offset it was given, and its own scroll event at that offset is dropped
whenever it arrives, so two wired panes cannot ping-pong.

Everything runs on one cooperative event loop; the loop is abstracted as a
FrameScheduler so the same code runs headless.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)

ScrollListener = Callable[[float], None]


class ScrollPane(Protocol):
    """Anything with a horizontal scroll offset."""

    scroll_left: float


class FrameScheduler(Protocol):
    """Runs a callback on the next frame of the event loop."""

    def request_frame(self, callback: Callable[[], None]) -> None:
        """Queue callback for the next frame."""
        ...


@dataclass
class Pane:
    """A headless scroll pane."""

    scroll_left: float = 0.0


class ManualFrameScheduler:
    """Frame scheduler driven explicitly by calling flush().

    Callbacks requested while a flush is running wait for the next flush,
    as they would for the next animation frame.
    """

    def __init__(self):
        self._queue: list[Callable[[], None]] = []

    @property
    def pending(self) -> int:
        """Number of callbacks waiting for the next frame."""
        return len(self._queue)

    def request_frame(self, callback: Callable[[], None]) -> None:
        self._queue.append(callback)

    def flush(self) -> int:
        """Run one frame. Returns the number of callbacks run."""
        queue, self._queue = self._queue, []
        for callback in queue:
            callback()
        return len(queue)


class ScrollSynchronizer:
    """Propagates the driver pane's horizontal offset to the follower pane."""

    def __init__(
        self,
        driver: ScrollPane,
        follower: Optional[ScrollPane],
        scheduler: FrameScheduler,
    ):
        """Initialize the synchronizer.

        Args:
            driver: The scrollable body pane
            follower: The fixed header pane, or None if not rendered
            scheduler: Event-loop frame scheduler
        """
        self.driver = driver
        self.follower = follower
        self.scheduler = scheduler
        self.frames_applied = 0
        self._in_flight = False
        # Offsets we last wrote, so the echo of our own write can be recognised
        self._written_to_follower: Optional[float] = None
        self._written_to_driver: Optional[float] = None
        self._listeners: list[ScrollListener] = []

    @property
    def in_flight(self) -> bool:
        """True while a frame update is scheduled or running."""
        return self._in_flight

    def add_listener(self, listener: ScrollListener) -> None:
        """Call listener with the applied offset after every frame update."""
        self._listeners.append(listener)

    def on_driver_scroll(self) -> bool:
        """Handle a scroll event from the driver pane.

        Returns:
            True if a frame update was scheduled, False if the event was
            coalesced into one already in flight or there is no follower
        """
        if self.follower is None:
            return False
        if self.driver.scroll_left == self._written_to_driver:
            return False
        return self._schedule(self._copy_driver_to_follower)

    def on_follower_scroll(self) -> bool:
        """Handle a scroll event from the follower pane.

        Events caused by our own write are ignored, including ones that
        arrive after the frame has finished; a genuine follower scroll is
        copied back to the driver on the next frame.
        """
        if self.follower is None:
            return False
        if self.follower.scroll_left == self._written_to_follower:
            return False
        return self._schedule(self._copy_follower_to_driver)

    def _schedule(self, update: Callable[[], float]) -> bool:
        if self._in_flight:
            return False
        self._in_flight = True
        self.scheduler.request_frame(lambda: self._run_frame(update))
        return True

    def _run_frame(self, update: Callable[[], float]) -> None:
        try:
            if self.follower is None:
                return
            offset = update()
            self.frames_applied += 1
            for listener in self._listeners:
                listener(offset)
        finally:
            self._in_flight = False

    def _copy_driver_to_follower(self) -> float:
        offset = self.driver.scroll_left
        self._written_to_driver = None
        self._written_to_follower = offset
        self.follower.scroll_left = offset
        logger.debug("Synced follower to %.1fpx", offset)
        return offset

    def _copy_follower_to_driver(self) -> float:
        offset = self.follower.scroll_left
        self._written_to_follower = None
        self._written_to_driver = offset
        self.driver.scroll_left = offset
        logger.debug("Synced driver to %.1fpx", offset)
        return offset

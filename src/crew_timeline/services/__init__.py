"""Services for the Crew Timeline layout engine.

Components:
- assign_lanes: Greedy lane allocation for overlapping items
- validate_placement: Work-window placement rules
- TimelineRenderer: Range-to-pixel geometry for both view modes
- ScrollSynchronizer: Frame-coalesced dual-pane scroll sync
- LiveTimeIndicator: Current-time line for the hourly view
- TimelineSession: Viewport ownership and stale-refresh protection
- ScheduleStore: JSON-backed schedule records
- TimelineVisualizer: Standalone HTML timeline pages
"""

from crew_timeline.services.lane_allocator import assign_lanes, lane_count, lanes_per_row
from crew_timeline.services.placement import (
    Conflict,
    PlacementResult,
    detect_conflicts,
    require_placement,
    validate_hour_slot,
    validate_placement,
)
from crew_timeline.services.timeline_renderer import TimelineRenderer, project_to_pixels
from crew_timeline.services.scroll_sync import ManualFrameScheduler, Pane, ScrollSynchronizer
from crew_timeline.services.time_indicator import LiveTimeIndicator, compute_now_offset_px
from crew_timeline.services.session import RefreshTicket, TimelineSession
from crew_timeline.services.schedule_store import ScheduleStore
from crew_timeline.services.timeline_visualizer import TimelineVisualizer

__all__ = [
    "assign_lanes",
    "lane_count",
    "lanes_per_row",
    "Conflict",
    "PlacementResult",
    "detect_conflicts",
    "require_placement",
    "validate_hour_slot",
    "validate_placement",
    "TimelineRenderer",
    "project_to_pixels",
    "ManualFrameScheduler",
    "Pane",
    "ScrollSynchronizer",
    "LiveTimeIndicator",
    "compute_now_offset_px",
    "RefreshTicket",
    "TimelineSession",
    "ScheduleStore",
    "TimelineVisualizer",
]

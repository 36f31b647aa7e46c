"""Lane Allocator - stacks overlapping schedule items into vertical lanes.

Items of one owner are sorted by start time (stable on input order) and each
goes into the lowest lane whose last item has already ended. This is greedy
interval partitioning: the number of lanes equals the largest number of
items active at the same instant, which is the minimum possible.

Ranges are half-open, so an item ending at 10:00 and one starting at 10:00
share a lane.
"""

import logging
from collections import defaultdict
from datetime import date
from typing import Hashable, Iterable, Optional, Sequence

from crew_timeline.errors import DuplicateItemError, InvalidRangeError
from crew_timeline.models import ScheduleItem

logger = logging.getLogger(__name__)


def lane_group_key(item: ScheduleItem) -> tuple[str, Optional[date]]:
    """Key of the row an item is stacked in.

    Hourly items are grouped per owner and calendar day, since minute ranges
    on different days never collide; multi-day items per owner.
    """
    return (item.owner_id, getattr(item, "day", None))


def _validate_items(items: Sequence[ScheduleItem]) -> None:
    """Reject malformed ranges and duplicate ids before any allocation."""
    seen: set[Hashable] = set()
    for item in items:
        start, end = item.range.start, item.range.end
        if start >= end:
            raise InvalidRangeError(
                f"Item {item.id!r} has an empty or reversed range ({start} >= {end})"
            )
        if item.id in seen:
            raise DuplicateItemError(f"Duplicate schedule item id: {item.id!r}")
        seen.add(item.id)


def assign_lanes(items: Iterable[ScheduleItem]) -> dict[str, int]:
    """Assign every item a lane index so overlapping items never share one.

    Args:
        items: Schedule items of any number of owners

    Returns:
        Mapping of item id to lane index (>= 0), one entry per input item

    Raises:
        InvalidRangeError: If any item's range is empty or reversed
        DuplicateItemError: If two items share an id
    """
    items = list(items)
    _validate_items(items)

    groups: dict[tuple, list[ScheduleItem]] = defaultdict(list)
    for item in items:
        groups[lane_group_key(item)].append(item)

    lanes: dict[str, int] = {}
    for key, group in groups.items():
        # End of the most recently placed item in each lane
        lane_ends: list[int] = []
        for item in sorted(group, key=lambda i: i.range.start):
            start = item.range.start
            lane = next(
                (index for index, lane_end in enumerate(lane_ends) if lane_end <= start),
                len(lane_ends),
            )
            if lane == len(lane_ends):
                lane_ends.append(item.range.end)
            else:
                lane_ends[lane] = item.range.end
            lanes[item.id] = lane

        logger.debug("Row %s: %d items in %d lanes", key, len(group), len(lane_ends))

    return lanes


def lane_count(
    assignment: dict[str, int],
    items: Iterable[ScheduleItem],
    owner_id: Optional[str] = None,
) -> int:
    """Number of lanes in use, optionally for a single owner.

    Returns 0 when there are no matching items.
    """
    used = {
        assignment[item.id]
        for item in items
        if owner_id is None or item.owner_id == owner_id
    }
    return max(used) + 1 if used else 0


def lanes_per_row(
    assignment: dict[str, int],
    items: Iterable[ScheduleItem],
) -> dict[tuple, int]:
    """Lane count of each row, keyed like lane_group_key."""
    counts: dict[tuple, int] = {}
    for item in items:
        key = lane_group_key(item)
        counts[key] = max(counts.get(key, 0), assignment[item.id] + 1)
    return counts

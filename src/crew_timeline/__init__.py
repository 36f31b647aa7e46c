"""Crew Timeline - scheduling layout engine for workforce dashboards.

Turns employee shifts and tasks into drawable timeline geometry with:
- Day-granular (multi-day) and hour-granular (single-day) projection
- Greedy lane allocation so overlapping items never collide
- Dual-pane scroll synchronization with frame coalescing
- A live "now" indicator for the hourly view
- Work-window placement validation
"""

__version__ = "0.1.0"

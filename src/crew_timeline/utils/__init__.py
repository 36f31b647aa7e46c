"""Utility functions for the Crew Timeline layout engine."""

from crew_timeline.utils.time_utils import (
    days_between,
    enumerate_days,
    is_today,
    is_weekend,
    minutes_to_time_string,
    time_string_to_minutes,
)

__all__ = [
    "days_between",
    "enumerate_days",
    "is_today",
    "is_weekend",
    "minutes_to_time_string",
    "time_string_to_minutes",
]

"""Wall-clock helpers shared by the resolver and variance calculator.

Times travel through the engine either as ``datetime.time`` (from MySQL TIME
columns) or as ``"HH:MM[:SS]"`` strings (from settings and JSON). Everything is
compared as integer minutes since midnight; seconds are ignored. Overnight
spans are not supported: an end at or before its start has no duration.
"""

from __future__ import annotations

from datetime import time
from typing import Optional, Union

TimeLike = Union[time, str]


def time_to_minutes(value: TimeLike) -> int:
    if isinstance(value, time):
        return value.hour * 60 + value.minute

    parts = value.strip().split(":")
    if len(parts) < 2:
        raise ValueError(f"Invalid time string: {value!r}")
    return int(parts[0]) * 60 + int(parts[1])


def parse_time(value: TimeLike) -> time:
    if isinstance(value, time):
        return value

    parts = value.strip().split(":")
    if len(parts) < 2:
        raise ValueError(f"Invalid time string: {value!r}")
    seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
    return time(hour=int(parts[0]), minute=int(parts[1]), second=seconds)


def duration_hours(start: Optional[TimeLike], end: Optional[TimeLike]) -> Optional[float]:
    if start is None or end is None:
        return None

    start_minutes = time_to_minutes(start)
    end_minutes = time_to_minutes(end)
    if end_minutes <= start_minutes:
        return None
    return round((end_minutes - start_minutes) / 60, 2)


def scheduled_hours(attendance_type) -> Optional[float]:
    """Expected working hours of a fixed-schedule attendance type (None for shift-based types)."""

    if attendance_type is None:
        return None
    return duration_hours(attendance_type.fixed_start_time, attendance_type.fixed_end_time)


def in_window(value: TimeLike, start: TimeLike, end: TimeLike) -> bool:
    """Inclusive on both ends, compared at minute resolution."""

    minutes = time_to_minutes(value)
    return time_to_minutes(start) <= minutes <= time_to_minutes(end)


def format_time(value: Optional[time]) -> Optional[str]:
    if value is None:
        return None
    return value.strftime("%H:%M:%S")


def format_short_time(value: Optional[time]) -> Optional[str]:
    if value is None:
        return None
    return value.strftime("%H:%M")

"""Clock-time arithmetic on HH:MM strings."""

import re
from typing import NamedTuple

MINUTES_PER_DAY = 24 * 60

_TIME_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")
_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class ClockTime(NamedTuple):
    """A time of day broken into hours, minutes and minutes since midnight."""
    hours: int
    minutes: int
    total_minutes: int


def is_valid_time_format(time_str: str) -> bool:
    """Check for 24-hour H:MM / HH:MM."""
    return isinstance(time_str, str) and bool(_TIME_PATTERN.match(time_str))


def is_valid_date_format(date_str: str) -> bool:
    """Check for YYYY-MM-DD (shape only, not calendar validity)."""
    return isinstance(date_str, str) and bool(_DATE_PATTERN.match(date_str))


def parse_time(time_str: str) -> ClockTime:
    """
    Parse an HH:MM string.

    Raises:
        ValueError: if the string is not a valid 24-hour time
    """
    if not is_valid_time_format(time_str):
        raise ValueError(f"Invalid time format: {time_str!r} (expected HH:MM)")
    hours, minutes = (int(part) for part in time_str.split(":"))
    return ClockTime(hours, minutes, hours * 60 + minutes)


def format_time(time: ClockTime) -> str:
    return f"{time.hours:02d}:{time.minutes:02d}"


def minutes_to_time(total_minutes: int) -> ClockTime:
    """Build a ClockTime from minutes, wrapping into a single day."""
    normalized = total_minutes % MINUTES_PER_DAY
    return ClockTime(normalized // 60, normalized % 60, normalized)


def add_minutes_to_time(time_str: str, minutes: int) -> str:
    time = parse_time(time_str)
    return format_time(minutes_to_time(time.total_minutes + minutes))


def time_difference(start: ClockTime, end: ClockTime) -> int:
    """Minutes from start to end; an earlier end is treated as the next day."""
    if end.total_minutes < start.total_minutes:
        return end.total_minutes + MINUTES_PER_DAY - start.total_minutes
    return end.total_minutes - start.total_minutes


def max_time(time1: ClockTime, time2: ClockTime) -> ClockTime:
    return time1 if time1.total_minutes >= time2.total_minutes else time2


def min_time(time1: ClockTime, time2: ClockTime) -> ClockTime:
    return time1 if time1.total_minutes <= time2.total_minutes else time2

"""
Calendar date and time-of-day utilities.

Centralizes every conversion between stored strings and date values so
that no other module splits date strings or counts days by hand.
"""

from datetime import date, time, timedelta
from typing import Iterator, Optional

EPOCH_ANCHOR = date(1970, 1, 1)


def weekday_index(day: date) -> int:
    """
    Weekday number of a calendar date.

    Args:
        day: Calendar date

    Returns:
        0 for Sunday through 6 for Saturday
    """
    return day.isoweekday() % 7


def days_between(start: date, end: date) -> int:
    """Signed number of days from start to end."""
    return (end - start).days


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every date from start (inclusive) to end (exclusive)."""
    current = start
    while current < end:
        yield current
        current += timedelta(days=1)


def parse_date(value: Optional[str]) -> Optional[date]:
    """
    Parse an ISO calendar date.

    Args:
        value: ``YYYY-MM-DD`` string, empty string or None

    Returns:
        Parsed date, or None for empty input

    Raises:
        ValueError: If the string is not an ISO date
    """
    if not value:
        return None
    return date.fromisoformat(value[:10])


def format_date(day: Optional[date]) -> Optional[str]:
    """Format a calendar date as ``YYYY-MM-DD`` (None stays None)."""
    if day is None:
        return None
    return day.isoformat()


def parse_time_of_day(value: str) -> time:
    """
    Parse a ``HH:MM`` reminder time.

    Args:
        value: Time string, hours 0-23 and minutes 0-59

    Returns:
        Time of day with seconds dropped

    Raises:
        ValueError: If the string is not a valid ``HH:MM`` time
    """
    if not isinstance(value, str):
        raise ValueError(f"Time of day must be a string, got {type(value).__name__}")

    parts = value.strip().split(":")
    if len(parts) != 2 or not all(part.isdigit() for part in parts):
        raise ValueError(f"Invalid time of day: {value!r}")

    hours, minutes = int(parts[0]), int(parts[1])
    return time(hour=hours, minute=minutes)


def format_time_of_day(value: time) -> str:
    """Format a time of day as ``HH:MM``."""
    return f"{value.hour:02d}:{value.minute:02d}"


def minutes_of_day(value: time) -> int:
    """Minutes elapsed since midnight."""
    return value.hour * 60 + value.minute


def time_from_minutes(total_minutes: int) -> time:
    """Inverse of minutes_of_day for values within a single day."""
    return time(hour=total_minutes // 60, minute=total_minutes % 60)


def time_of_day_bucket(value: time) -> str:
    """
    Classify a reminder instant into a part of the day.

    Returns:
        One of ``morning``, ``afternoon``, ``evening`` or ``night``
    """
    if value.hour < 12:
        return "morning"
    if value.hour < 17:
        return "afternoon"
    if value.hour < 21:
        return "evening"
    return "night"

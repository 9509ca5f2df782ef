"""
Frequency evaluation for routine due days.

Every function here is pure: the answer depends only on the arguments,
never on the current date or on stored state.
"""

from datetime import date, timedelta
from typing import Optional

from ..errors import InvalidFrequencyConfig
from ..models.routine import (
    DailyFrequency,
    FrequencyConfig,
    IntervalFrequency,
    MonthlyFrequency,
    Routine,
    WeeklyFrequency,
)
from ..utils.time import EPOCH_ANCHOR, days_between, weekday_index

_WEEKDAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


def validate_frequency(frequency: FrequencyConfig) -> None:
    """
    Check that a frequency configuration can produce due days.

    Raises:
        InvalidFrequencyConfig: Empty or out-of-range day sets, or an
            interval shorter than one day
    """
    if isinstance(frequency, DailyFrequency):
        return

    if isinstance(frequency, IntervalFrequency):
        if frequency.every_n_days < 1:
            raise InvalidFrequencyConfig(
                f"Interval must be at least 1 day, got {frequency.every_n_days}",
                frequency=frequency
            )
        return

    if isinstance(frequency, WeeklyFrequency):
        if not frequency.weekdays:
            raise InvalidFrequencyConfig("Weekly frequency has no weekdays", frequency=frequency)
        if not all(0 <= d <= 6 for d in frequency.weekdays):
            raise InvalidFrequencyConfig(
                f"Weekdays must be within 0-6, got {sorted(frequency.weekdays)}",
                frequency=frequency
            )
        return

    if isinstance(frequency, MonthlyFrequency):
        if not frequency.days_of_month:
            raise InvalidFrequencyConfig("Monthly frequency has no days", frequency=frequency)
        if not all(1 <= d <= 31 for d in frequency.days_of_month):
            raise InvalidFrequencyConfig(
                f"Days of month must be within 1-31, got {sorted(frequency.days_of_month)}",
                frequency=frequency
            )
        return

    raise InvalidFrequencyConfig(f"Unknown frequency type: {type(frequency).__name__}",
                                 frequency=frequency)


def is_valid_frequency(frequency: FrequencyConfig) -> bool:
    """True if the configuration can ever produce a due day."""
    try:
        validate_frequency(frequency)
    except InvalidFrequencyConfig:
        return False
    return True


def is_due(frequency: FrequencyConfig, day: date, created_on: Optional[date] = None) -> bool:
    """
    Decide whether a calendar date is a due day.

    Invalid configurations are never due; the caller decides whether to
    report them.

    Args:
        frequency: Routine frequency configuration
        day: Calendar date to evaluate
        created_on: Interval anchor (the routine's creation date)

    Returns:
        True if the routine requires action on ``day``
    """
    if not is_valid_frequency(frequency):
        return False

    if isinstance(frequency, DailyFrequency):
        return True

    if isinstance(frequency, IntervalFrequency):
        elapsed = days_between(created_on or EPOCH_ANCHOR, day)
        return elapsed >= 0 and elapsed % frequency.every_n_days == 0

    if isinstance(frequency, WeeklyFrequency):
        return weekday_index(day) in frequency.weekdays

    # A configured day missing from a short month is simply not due
    return day.day in frequency.days_of_month


def is_routine_due(routine: Routine, day: date) -> bool:
    """True if the routine is active and due on ``day``."""
    return routine.is_active and is_due(routine.frequency, day, routine.created_on)


def next_due_date(routine: Routine, from_day: date, horizon_days: int = 366) -> Optional[date]:
    """
    First due date on or after ``from_day``.

    Args:
        routine: Routine to evaluate (activity is ignored)
        from_day: First candidate date
        horizon_days: Number of days to search

    Returns:
        The next due date, or None if none falls within the horizon
    """
    for offset in range(horizon_days):
        candidate = from_day + timedelta(days=offset)
        if is_due(routine.frequency, candidate, routine.created_on):
            return candidate
    return None


def describe_frequency(frequency: FrequencyConfig) -> str:
    """Short English description of a frequency configuration."""
    if isinstance(frequency, IntervalFrequency):
        if frequency.every_n_days == 1:
            return "Daily"
        return f"Every {frequency.every_n_days} days"

    if isinstance(frequency, WeeklyFrequency):
        if not frequency.weekdays:
            return "Weekly"
        return ", ".join(_WEEKDAY_NAMES[d] for d in sorted(frequency.weekdays) if 0 <= d <= 6)

    if isinstance(frequency, MonthlyFrequency):
        if not frequency.days_of_month:
            return "Monthly"
        days = sorted(frequency.days_of_month)
        if len(days) <= 3:
            return f"Days {', '.join(str(d) for d in days)} of the month"
        return f"Monthly ({len(days)} days)"

    return "Daily"

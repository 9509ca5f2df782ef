"""Pytest configuration and shared fixtures."""

from datetime import date

import pytest

from habit_app.models.routine import (
    DailyFrequency,
    IntervalFrequency,
    MonthlyFrequency,
    Routine,
    WeeklyFrequency,
)
from habit_app.models.settings import NotificationSettings
from habit_app.utils.time import parse_time_of_day

# 2024-01-01 is a Monday
MONDAY = date(2024, 1, 1)


def make_routine(
    routine_id: str = "r1",
    frequency=None,
    created_on: date = MONDAY,
    streak: int = 0,
    last_confirmed=None,
    is_active: bool = True,
    name: str = "Routine",
) -> Routine:
    """Build a routine snapshot for tests."""
    return Routine(
        id=routine_id,
        name=name,
        frequency=frequency or DailyFrequency(),
        created_on=created_on,
        streak=streak,
        last_confirmed=last_confirmed,
        is_active=is_active,
    )


def make_settings(times=("07:00",), **kwargs) -> NotificationSettings:
    """Build notification settings from HH:MM strings."""
    return NotificationSettings(
        reminder_times=tuple(parse_time_of_day(t) for t in times),
        **kwargs
    )


@pytest.fixture
def sample_routines() -> list:
    """One routine of each frequency type."""
    return [
        make_routine("daily", DailyFrequency()),
        make_routine("interval", IntervalFrequency(every_n_days=3)),
        make_routine("weekly", WeeklyFrequency(weekdays=frozenset({1, 3, 5}))),
        make_routine("monthly", MonthlyFrequency(days_of_month=frozenset({1, 15}))),
    ]

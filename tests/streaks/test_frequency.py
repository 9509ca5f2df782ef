"""
Tests for frequency evaluation.

Covers each frequency kind, interval anchoring, invalid configurations
and the due-date helpers built on top of is_due.
"""

import pytest
from datetime import date, timedelta

from habit_app.errors import InvalidFrequencyConfig
from habit_app.models.routine import (
    DailyFrequency, IntervalFrequency, MonthlyFrequency, WeeklyFrequency
)
from habit_app.streaks.frequency import (
    describe_frequency, is_due, is_routine_due, is_valid_frequency,
    next_due_date, validate_frequency
)

from conftest import MONDAY, make_routine


class TestDaily:
    """Test daily frequency."""

    def test_due_every_day(self):
        """Daily routines should be due on every date."""
        for offset in range(14):
            assert is_due(DailyFrequency(), MONDAY + timedelta(days=offset))

    def test_due_regardless_of_creation(self):
        """Daily routines ignore the creation date."""
        assert is_due(DailyFrequency(), date(2000, 1, 1), created_on=MONDAY)


class TestInterval:
    """Test every-N-days frequency."""

    def test_every_three_days_from_creation(self):
        """Should be due on creation day and every third day after."""
        frequency = IntervalFrequency(every_n_days=3)
        due = [offset for offset in range(10)
               if is_due(frequency, MONDAY + timedelta(days=offset), created_on=MONDAY)]
        assert due == [0, 3, 6, 9]

    def test_interval_of_one_is_daily(self):
        """An interval of one day should behave like daily."""
        frequency = IntervalFrequency(every_n_days=1)
        assert all(is_due(frequency, MONDAY + timedelta(days=d), created_on=MONDAY)
                   for d in range(7))

    def test_not_due_before_creation(self):
        """Days before the anchor are never due."""
        frequency = IntervalFrequency(every_n_days=2)
        assert not is_due(frequency, MONDAY - timedelta(days=2), created_on=MONDAY)

    def test_default_anchor_is_stable(self):
        """Without a creation date the evaluation is still deterministic."""
        frequency = IntervalFrequency(every_n_days=5)
        day = date(2024, 3, 3)
        assert is_due(frequency, day) == is_due(frequency, day)

    @pytest.mark.parametrize("every_n_days", [0, -2])
    def test_invalid_interval_never_due(self, every_n_days):
        """Non-positive intervals should never be due."""
        frequency = IntervalFrequency(every_n_days=every_n_days)
        assert not is_due(frequency, MONDAY, created_on=MONDAY)


class TestWeekly:
    """Test weekday-set frequency."""

    def test_monday_wednesday_friday(self):
        """Should be due only on the selected weekdays."""
        frequency = WeeklyFrequency(weekdays=frozenset({1, 3, 5}))
        due = [(MONDAY + timedelta(days=d)).isoformat() for d in range(7)
               if is_due(frequency, MONDAY + timedelta(days=d))]
        assert due == ["2024-01-01", "2024-01-03", "2024-01-05"]

    def test_sunday_is_zero(self):
        """Weekday 0 should select Sundays."""
        frequency = WeeklyFrequency(weekdays=frozenset({0}))
        assert is_due(frequency, date(2024, 1, 7))
        assert not is_due(frequency, date(2024, 1, 6))

    def test_empty_weekdays_never_due(self):
        """An empty weekday set is invalid and never due."""
        frequency = WeeklyFrequency(weekdays=frozenset())
        assert not any(is_due(frequency, MONDAY + timedelta(days=d)) for d in range(7))

    def test_out_of_range_weekday_invalid(self):
        """Weekdays outside 0-6 make the configuration invalid."""
        frequency = WeeklyFrequency(weekdays=frozenset({1, 7}))
        assert not is_due(frequency, MONDAY)


class TestMonthly:
    """Test days-of-month frequency."""

    def test_selected_days(self):
        """Should be due on the selected days of the month."""
        frequency = MonthlyFrequency(days_of_month=frozenset({1, 15}))
        assert is_due(frequency, date(2024, 3, 1))
        assert is_due(frequency, date(2024, 3, 15))
        assert not is_due(frequency, date(2024, 3, 2))

    def test_day_31_not_clamped(self):
        """Day 31 is not due in months that lack it."""
        frequency = MonthlyFrequency(days_of_month=frozenset({31}))
        assert not any(is_due(frequency, date(2024, 4, d)) for d in range(1, 31))
        assert is_due(frequency, date(2024, 5, 31))

    def test_february_29_in_leap_year(self):
        """Day 29 is due in February of a leap year only."""
        frequency = MonthlyFrequency(days_of_month=frozenset({29}))
        assert is_due(frequency, date(2024, 2, 29))
        assert next_due_date(make_routine(frequency=frequency), date(2023, 2, 1)) == date(2023, 3, 29)

    def test_out_of_range_day_invalid(self):
        """Days outside 1-31 make the configuration invalid."""
        assert not is_valid_frequency(MonthlyFrequency(days_of_month=frozenset({0, 15})))


class TestValidateFrequency:
    """Test validate_frequency."""

    def test_valid_configurations(self):
        """Valid configurations should pass silently."""
        validate_frequency(DailyFrequency())
        validate_frequency(IntervalFrequency(every_n_days=2))
        validate_frequency(WeeklyFrequency(weekdays=frozenset({0, 6})))
        validate_frequency(MonthlyFrequency(days_of_month=frozenset({1, 31})))

    def test_invalid_configuration_raises(self):
        """Invalid configurations should raise with the frequency in context."""
        with pytest.raises(InvalidFrequencyConfig) as exc_info:
            validate_frequency(WeeklyFrequency(weekdays=frozenset()))

        assert exc_info.value.frequency == WeeklyFrequency(weekdays=frozenset())
        assert exc_info.value.recoverable is True

    def test_unknown_type_raises(self):
        """Objects that are not frequency configurations should be rejected."""
        with pytest.raises(InvalidFrequencyConfig):
            validate_frequency("daily")


class TestRoutineHelpers:
    """Test helpers that take a whole routine."""

    def test_paused_routine_not_due(self):
        """Inactive routines are never due."""
        routine = make_routine(is_active=False)
        assert not is_routine_due(routine, MONDAY)

    def test_routine_uses_creation_anchor(self):
        """Interval routines are anchored on their own creation date."""
        routine = make_routine(frequency=IntervalFrequency(every_n_days=2),
                               created_on=date(2024, 1, 2))
        assert not is_routine_due(routine, MONDAY + timedelta(days=2))
        assert is_routine_due(routine, MONDAY + timedelta(days=3))

    def test_next_due_date_same_day(self):
        """The starting day counts if it is due."""
        assert next_due_date(make_routine(), MONDAY) == MONDAY

    def test_next_due_date_weekly(self):
        """Should find the next selected weekday."""
        routine = make_routine(frequency=WeeklyFrequency(weekdays=frozenset({5})))
        assert next_due_date(routine, MONDAY) == date(2024, 1, 5)

    def test_next_due_date_invalid(self):
        """Invalid configurations have no next due date."""
        routine = make_routine(frequency=WeeklyFrequency(weekdays=frozenset()))
        assert next_due_date(routine, MONDAY) is None


class TestDescribeFrequency:
    """Test describe_frequency."""

    @pytest.mark.parametrize("frequency,expected", [
        (DailyFrequency(), "Daily"),
        (IntervalFrequency(every_n_days=1), "Daily"),
        (IntervalFrequency(every_n_days=3), "Every 3 days"),
        (WeeklyFrequency(weekdays=frozenset({5, 1, 3})), "Mon, Wed, Fri"),
        (MonthlyFrequency(days_of_month=frozenset({15, 1})), "Days 1, 15 of the month"),
        (MonthlyFrequency(days_of_month=frozenset({1, 8, 15, 22})), "Monthly (4 days)"),
    ])
    def test_descriptions(self, frequency, expected):
        """Should produce short English descriptions."""
        assert describe_frequency(frequency) == expected

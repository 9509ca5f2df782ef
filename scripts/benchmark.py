#!/usr/bin/env python3
"""Performance benchmark script for catch-up and plan building."""

import time
import sys
from datetime import date, timedelta
from pathlib import Path
from typing import Dict, List

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from habit_app.models.routine import (
    DailyFrequency, IntervalFrequency, MonthlyFrequency, Routine, WeeklyFrequency
)
from habit_app.models.settings import NotificationSettings
from habit_app.notifications.planner import NotificationPlanBuilder
from habit_app.streaks.tracker import StreakTracker, run_catch_up

START = date(2024, 1, 1)


def generate_sample_routines(count: int) -> List[Routine]:
    """Generate routines cycling through every frequency kind."""
    frequencies = [
        DailyFrequency(),
        IntervalFrequency(every_n_days=3),
        WeeklyFrequency(weekdays=frozenset({1, 3, 5})),
        MonthlyFrequency(days_of_month=frozenset({1, 15})),
    ]

    routines = []
    for i in range(count):
        routine = Routine(
            id=f"r{i}",
            name=f"Routine {i}",
            frequency=frequencies[i % len(frequencies)],
            created_on=START,
        )
        # Streaks confirmed a varying number of days ago
        routines.append(routine.with_streak(i % 10 + 1, START + timedelta(days=i % 30)))

    return routines


def benchmark_daily_planning(routine_count: int = 100, days: int = 60) -> Dict[str, float]:
    """Benchmark catch-up plus plan building for consecutive days."""
    print(f"🏃 Benchmarking {days} days of planning for {routine_count} routines...")

    routines = generate_sample_routines(routine_count)
    settings = NotificationSettings()
    tracker = StreakTracker()
    builder = NotificationPlanBuilder()

    start_time = time.time()

    for offset in range(days):
        today = START + timedelta(days=30 + offset)
        routines = run_catch_up(routines, today, tracker)
        builder.build(settings, routines, today)

    total_time = time.time() - start_time

    return {
        "total_time": total_time,
        "avg_time_per_day": total_time / days,
        "days": days,
    }


def main():
    """Main benchmark function."""
    print("⚡ Habit App Performance Benchmark")
    print("=" * 40)

    for size in [10, 100, 500, 1000]:
        results = benchmark_daily_planning(size)

        print(f"\n📊 Results for {size} routines:")
        print(f"   Total time: {results['total_time']:.3f}s")
        print(f"   Avg per day: {results['avg_time_per_day']*1000:.3f}ms")


if __name__ == "__main__":
    main()

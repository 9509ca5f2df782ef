#!/usr/bin/env python3
"""
Basic Usage Example - Habit Streak Tracker

This script walks a small set of routines through one week. It shows how to:
- Create routines with different frequencies
- Confirm and skip routines
- Run the daily cycle (catch-up, plan, delivery)
- Inspect streaks and confirmation history
- Export a JSON backup

Run: python examples/basic_usage.py
"""

import tempfile
from dataclasses import replace
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

from habit_app.config.delivery import DeliveryMethod, get_default_delivery_config
from habit_app.delivery import create_delivery
from habit_app.engine import HabitEngine
from habit_app.logging import configure_logging
from habit_app.models.routine import IntervalFrequency, Routine, WeeklyFrequency
from habit_app.persistence import SqliteHabitStore
from habit_app.persistence.backup import dumps_backup
from habit_app.streaks.frequency import describe_frequency, next_due_date


# Day-by-day actions: routine name -> completed (True) or skipped (False)
WEEK_PLAN = {
    0: {"Stretch": True, "Run": True, "Water plants": True},
    1: {"Stretch": True},
    2: {"Run": False},
    # 3 (Thursday): nothing confirmed, 5-6: weekend off
    4: {"Stretch": True, "Run": True},
}


def create_routines(engine: HabitEngine, start: date) -> list[Routine]:
    """Create sample routines."""
    return [
        engine.create_routine("Stretch", start, icon="🧘", initial_streak=3),
        engine.create_routine("Run", start, icon="🏃",
                              frequency=WeeklyFrequency(weekdays=frozenset({1, 3, 5}))),
        engine.create_routine("Water plants", start, icon="🪴",
                              description="Balcony and kitchen",
                              frequency=IntervalFrequency(every_n_days=3)),
    ]


def print_streaks(engine: HabitEngine, today: date) -> None:
    for routine in engine.store.load_routines():
        upcoming = next_due_date(routine, today + timedelta(days=1))
        print(f"   {routine.icon} {routine.name:<13} streak={routine.streak:<2} "
              f"({describe_frequency(routine.frequency)}, next due {upcoming})")


def main():
    """Run the basic usage example."""
    print("🚀 Habit Streak Tracker - Basic Usage Example")
    print("=" * 60)

    configure_logging(level="WARNING")

    start = date(2024, 1, 1)
    with tempfile.TemporaryDirectory() as temp_dir:
        store = SqliteHabitStore(str(Path(temp_dir) / "habits.db"))
        console_config = replace(get_default_delivery_config(), format="pretty")
        delivery = create_delivery(DeliveryMethod.STDOUT, console_config, name="console")
        engine = HabitEngine(store, delivery)

        routines = create_routines(engine, start)
        by_name = {r.name: r.id for r in routines}

        for offset in range(7):
            today = start + timedelta(days=offset)
            print(f"\n📅 {today.strftime('%A %Y-%m-%d')}")

            result = engine.run_daily_cycle(today)
            if result.streaks_reset:
                print(f"   ⚠️  {result.streaks_reset} streak(s) reset by catch-up")
            if not result.plan:
                print("   🔕 No reminders today")

            for name, completed in WEEK_PLAN.get(offset, {}).items():
                updated = engine.confirm_routine(by_name[name], completed, today)
                verb = "done" if completed else "skipped"
                print(f"   ✅ {name} {verb} (streak {updated.streak})")

            print_streaks(engine, today)

        history = store.load_history()
        print(f"\n📊 Recorded {len(history)} confirmations")
        print(f"📈 Delivery stats: {delivery.get_stats()}")

        backup = engine.export_data(datetime.now(timezone.utc))
        print(f"💾 Backup of {len(backup['routines'])} routines, {len(dumps_backup(backup))} bytes")

    print("\n✅ Basic usage example completed successfully!")


if __name__ == "__main__":
    main()

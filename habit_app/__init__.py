"""
Habit App - Routine Streak and Reminder Planning Engine

Tracks recurring personal routines, keeps their completion streaks
consistent across missed days, and turns notification settings plus the
current routine state into a capped, deterministic daily reminder plan.
"""

__version__ = "0.1.0"
__author__ = "Habit App Team"

from .config.validation import validate_settings
from .notifications.planner import build_notification_plan
from .streaks.frequency import is_due
from .streaks.tracker import confirm_routine, run_catch_up

__all__ = [
    "build_notification_plan",
    "confirm_routine",
    "is_due",
    "run_catch_up",
    "validate_settings",
]

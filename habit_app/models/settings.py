"""
Notification settings data model.

The settings object arrives loosely typed from storage or configuration
files; ``from_dict`` turns it into a typed snapshot and the settings
validator (``habit_app.config.validation``) reconciles its flags.
"""

from dataclasses import dataclass, field
from datetime import time
from typing import Any

import structlog

from ..utils.time import format_time_of_day, parse_time_of_day

logger = structlog.get_logger(__name__)

DEFAULT_MAX_NOTIFICATIONS_PER_DAY = 6


@dataclass(frozen=True)
class NotificationSettings:
    """Reminder configuration for a single user."""

    enabled: bool = True
    reminder_times: tuple = field(default_factory=tuple)   # tuple[time, ...]

    # Policy flags
    custom_times_set: bool = False          # User picked the reminder times
    escalating_reminders: bool = True       # Add reminders later in the day
    only_if_incomplete: bool = True         # Suppress when all due routines are handled
    streak_protection: bool = True          # Mark the last reminder when streaks are at risk

    max_notifications_per_day: int = DEFAULT_MAX_NOTIFICATIONS_PER_DAY

    def to_dict(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "reminder_times": [format_time_of_day(t) for t in self.reminder_times],
            "custom_times_set": self.custom_times_set,
            "escalating_reminders": self.escalating_reminders,
            "only_if_incomplete": self.only_if_incomplete,
            "streak_protection": self.streak_protection,
            "max_notifications_per_day": self.max_notifications_per_day,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NotificationSettings":
        """
        Parse a raw settings mapping.

        Missing keys take the dataclass defaults. Reminder times that are
        not valid ``HH:MM`` strings are dropped and logged. Flags accept
        booleans or the strings ``"true"``/``"false"``; anything else
        falls back to the default.
        """
        raw_times = data.get("reminder_times") or []
        if isinstance(raw_times, str):
            # A single "HH:MM" value written as a scalar
            raw_times = [raw_times]

        reminder_times = []
        for raw_time in raw_times:
            if isinstance(raw_time, time):
                reminder_times.append(raw_time)
                continue
            try:
                reminder_times.append(parse_time_of_day(raw_time))
            except ValueError as e:
                logger.warning(
                    "Dropping invalid reminder time",
                    value=raw_time,
                    error=str(e)
                )

        try:
            max_per_day = int(data.get("max_notifications_per_day", DEFAULT_MAX_NOTIFICATIONS_PER_DAY))
        except (TypeError, ValueError):
            logger.warning(
                "Invalid max_notifications_per_day, using default",
                value=data.get("max_notifications_per_day")
            )
            max_per_day = DEFAULT_MAX_NOTIFICATIONS_PER_DAY

        return cls(
            enabled=_parse_flag(data, "enabled", True),
            reminder_times=tuple(reminder_times),
            custom_times_set=_parse_flag(data, "custom_times_set", False),
            escalating_reminders=_parse_flag(data, "escalating_reminders", True),
            only_if_incomplete=_parse_flag(data, "only_if_incomplete", True),
            streak_protection=_parse_flag(data, "streak_protection", True),
            max_notifications_per_day=max_per_day,
        )


def _parse_flag(data: dict[str, Any], key: str, default: bool) -> bool:
    value = data.get(key, default)
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"

    logger.warning("Invalid boolean setting, using default", field=key, value=value, default=default)
    return default

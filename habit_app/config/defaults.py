"""Default configuration parameters for the habit tracking system."""

from dataclasses import dataclass


DEFAULT_REMINDER_TIMES = ("07:00", "14:00", "18:00", "20:00")


@dataclass(frozen=True)
class NotificationDefaults:
    """Notification settings used when nothing has been stored yet."""
    enabled: bool = True
    reminder_times: tuple = DEFAULT_REMINDER_TIMES
    custom_times_set: bool = False
    escalating_reminders: bool = True
    only_if_incomplete: bool = True
    streak_protection: bool = True
    max_notifications_per_day: int = 6


@dataclass(frozen=True)
class LimitParams:
    """Hard limits enforced by the settings validator."""
    min_notifications_per_day: int = 1
    max_notifications_per_day: int = 8
    max_reminder_times: int = 8


@dataclass(frozen=True)
class EscalationParams:
    """Escalation spacing parameters."""
    interval_minutes: int = 120          # Gap between synthesized reminders
    day_end: str = "22:00"               # No escalation after this time


@dataclass(frozen=True)
class StorageParams:
    """Local persistence parameters."""
    db_path: str = "habits.db"
    timeout_seconds: float = 30.0


@dataclass(frozen=True)
class HistoryParams:
    """Confirmation history parameters."""
    retention_days: int = 90


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    notifications: NotificationDefaults
    limits: LimitParams
    escalation: EscalationParams
    storage: StorageParams
    history: HistoryParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        notifications=NotificationDefaults(),
        limits=LimitParams(),
        escalation=EscalationParams(),
        storage=StorageParams(),
        history=HistoryParams(),
    )

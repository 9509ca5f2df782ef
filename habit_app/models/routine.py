"""
Routine and frequency data models.

This module defines immutable data structures for routines and their
frequency configuration. The core never mutates a routine in place: every
state change returns a new snapshot that the caller persists.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, ClassVar, Optional, Union
from uuid import uuid4

from ..utils.time import EPOCH_ANCHOR, format_date, parse_date


class FrequencyType:
    """Tags used when frequency configurations are serialized."""
    DAILY = "daily"
    INTERVAL = "interval"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


@dataclass(frozen=True)
class DailyFrequency:
    """Due every calendar day."""

    kind: ClassVar[str] = FrequencyType.DAILY

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind}


@dataclass(frozen=True)
class IntervalFrequency:
    """Due every N days counted from the routine's creation date."""

    every_n_days: int = 1

    kind: ClassVar[str] = FrequencyType.INTERVAL

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "interval_days": self.every_n_days}


@dataclass(frozen=True)
class WeeklyFrequency:
    """Due on selected weekdays (0 = Sunday ... 6 = Saturday)."""

    weekdays: frozenset = field(default_factory=frozenset)

    kind: ClassVar[str] = FrequencyType.WEEKLY

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "weekdays": sorted(self.weekdays)}


@dataclass(frozen=True)
class MonthlyFrequency:
    """Due on selected days of the month (1-31), never clamped to month end."""

    days_of_month: frozenset = field(default_factory=frozenset)

    kind: ClassVar[str] = FrequencyType.MONTHLY

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "month_days": sorted(self.days_of_month)}


FrequencyConfig = Union[DailyFrequency, IntervalFrequency, WeeklyFrequency, MonthlyFrequency]


def frequency_from_dict(data: Optional[dict[str, Any]]) -> FrequencyConfig:
    """
    Build a frequency configuration from its serialized form.

    Unknown or missing types fall back to daily. Set members are kept as
    stored; range problems are reported by the frequency evaluator rather
    than rejected here so that stored data can always be loaded.
    """
    if not data:
        return DailyFrequency()

    frequency_type = data.get("type", FrequencyType.DAILY)

    if frequency_type == FrequencyType.INTERVAL:
        return IntervalFrequency(every_n_days=int(data.get("interval_days") or 1))
    if frequency_type == FrequencyType.WEEKLY:
        return WeeklyFrequency(weekdays=frozenset(int(d) for d in data.get("weekdays") or []))
    if frequency_type == FrequencyType.MONTHLY:
        return MonthlyFrequency(days_of_month=frozenset(int(d) for d in data.get("month_days") or []))
    return DailyFrequency()


@dataclass(frozen=True)
class Routine:
    """Snapshot of a single tracked routine."""

    id: str
    name: str
    frequency: FrequencyConfig
    created_on: date

    # Opaque presentation data
    color: str = "#4ECDC4"
    icon: str = ""
    description: Optional[str] = None

    # Streak state
    streak: int = 0
    last_confirmed: Optional[date] = None

    is_active: bool = True

    @staticmethod
    def new(
        name: str,
        *,
        created_on: date,
        frequency: Optional[FrequencyConfig] = None,
        color: str = "#4ECDC4",
        icon: str = "",
        description: Optional[str] = None,
    ) -> "Routine":
        return Routine(
            id=uuid4().hex[:8],
            name=name,
            frequency=frequency or DailyFrequency(),
            created_on=created_on,
            color=color,
            icon=icon,
            description=description,
        )

    def with_streak(self, streak: int, last_confirmed: Optional[date]) -> "Routine":
        """Return a copy with updated streak state."""
        return replace(self, streak=streak, last_confirmed=last_confirmed)

    def handled_on(self, day: date) -> bool:
        """True if the routine was confirmed or skipped on this day."""
        return self.last_confirmed == day

    def completed_on(self, day: date) -> bool:
        """True if the routine was confirmed as done on this day."""
        return self.last_confirmed == day and self.streak > 0

    def skipped_on(self, day: date) -> bool:
        """True if the routine was explicitly skipped on this day."""
        return self.last_confirmed == day and self.streak == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "color": self.color,
            "icon": self.icon,
            "frequency": self.frequency.to_dict(),
            "created_on": format_date(self.created_on),
            "streak": self.streak,
            "last_confirmed": format_date(self.last_confirmed),
            "is_active": self.is_active,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Routine":
        last_confirmed = parse_date(data.get("last_confirmed"))
        streak = max(0, int(data.get("streak") or 0))

        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            description=data.get("description"),
            color=data.get("color", "#4ECDC4"),
            icon=data.get("icon", ""),
            frequency=frequency_from_dict(data.get("frequency")),
            created_on=parse_date(data.get("created_on")) or last_confirmed or EPOCH_ANCHOR,
            streak=streak,
            last_confirmed=last_confirmed,
            is_active=bool(data.get("is_active", True)),
        )

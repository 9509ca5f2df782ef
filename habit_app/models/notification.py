"""
Scheduled notification data models.

A scheduled notification has no identity of its own: identity and
cancellation belong to the delivery collaborator that receives the plan.
"""

from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum
from typing import Any

from ..utils.time import format_date, format_time_of_day


class PayloadKind(str, Enum):
    """Variant of reminder carried by a scheduled notification."""
    REMINDER = "routine_reminder"
    ESCALATION = "escalated_reminder"
    STREAK_AT_RISK = "streak_at_risk"


@dataclass(frozen=True)
class RoutineRef:
    """Minimal routine reference embedded in a notification payload."""
    id: str
    name: str
    streak: int

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "streak": self.streak}


@dataclass(frozen=True)
class NotificationPayload:
    """Structured payload identifying what a reminder is about."""

    kind: PayloadKind
    day: date
    time_of_day: str                                    # morning/afternoon/evening/night
    incomplete_routines: tuple = field(default_factory=tuple)   # tuple[RoutineRef, ...]
    at_risk_routines: tuple = field(default_factory=tuple)      # tuple[RoutineRef, ...]
    escalation_level: int = 0

    @property
    def is_escalated(self) -> bool:
        return self.escalation_level > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind.value,
            "date": format_date(self.day),
            "time_of_day": self.time_of_day,
            "routines": [r.to_dict() for r in self.incomplete_routines],
            "at_risk": [r.to_dict() for r in self.at_risk_routines],
            "is_escalated": self.is_escalated,
            "escalation_level": self.escalation_level,
        }


@dataclass(frozen=True)
class ScheduledNotification:
    """A single reminder instant with its content."""

    time_of_day: time
    title: str
    body: str
    payload: NotificationPayload

    def to_dict(self) -> dict[str, Any]:
        return {
            "time": format_time_of_day(self.time_of_day),
            "title": self.title,
            "body": self.body,
            "payload": self.payload.to_dict(),
        }

"""Confirmation history data model."""

from dataclasses import dataclass
from datetime import date
from typing import Any

from ..utils.time import format_date, parse_date


@dataclass(frozen=True)
class HistoryEntry:
    """Outcome of a single routine on a single day."""
    routine_id: str
    routine_name: str
    day: date
    completed: bool
    streak_before: int
    streak_after: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "routine_id": self.routine_id,
            "routine_name": self.routine_name,
            "date": format_date(self.day),
            "completed": self.completed,
            "streak_before": self.streak_before,
            "streak_after": self.streak_after,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HistoryEntry":
        return cls(
            routine_id=data["routine_id"],
            routine_name=data["routine_name"],
            day=parse_date(data["date"]),
            completed=bool(data["completed"]),
            streak_before=int(data["streak_before"]),
            streak_after=int(data["streak_after"]),
        )

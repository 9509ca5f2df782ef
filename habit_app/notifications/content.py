"""Notification copy selection by payload kind and time of day."""

from ..models.notification import PayloadKind
from ..streaks.tracker import CompletionStatus


def _routines(count: int) -> str:
    return "1 routine" if count == 1 else f"{count} routines"


def render_content(kind: PayloadKind, time_of_day: str, status: CompletionStatus,
                   escalation_level: int = 0) -> tuple[str, str]:
    """
    Pick a title and body for a reminder.

    Args:
        kind: Payload variant of the reminder
        time_of_day: morning, afternoon, evening or night
        status: Today's completion status
        escalation_level: 1-based position among escalated reminders

    Returns:
        (title, body) tuple
    """
    remaining = len(status.remaining)
    handled = len(status.due) - remaining

    if kind == PayloadKind.STREAK_AT_RISK:
        streak = status.max_streak_at_risk
        return (
            f"Your {streak}-day streak is at risk",
            f"Complete {_routines(len(status.at_risk))} before midnight to keep it going.",
        )

    if remaining == 0:
        return ("All done for today", "Every routine due today is handled.")

    if kind == PayloadKind.ESCALATION:
        if escalation_level > 3:
            return (f"Don't forget: {_routines(remaining)} left", "There is still time today.")
        return (f"{_routines(remaining)} still pending", "A quick check-in keeps your routines on track.")

    if time_of_day == "morning":
        if handled == 0:
            return ("Start your day right", f"{_routines(remaining)} due today.")
        return (f"{handled}/{len(status.due)} handled", "Great start, keep going.")
    if time_of_day == "afternoon":
        return (f"{handled}/{len(status.due)} handled", f"{_routines(remaining)} left for today.")
    if time_of_day == "evening":
        return (f"{_routines(remaining)} left", "The evening is a good time to finish up.")
    return ("Final call for today", f"{_routines(remaining)} still open before midnight.")

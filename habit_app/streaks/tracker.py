"""
Streak tracking state machine.

A routine's streak state is the pair ``(streak, last_confirmed)``. Two
events move it: an explicit confirmation (done or skipped) and the
catch-up pass that reconciles due days which elapsed while nobody was
looking. Both return new routine snapshots and never touch storage.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, Optional

from ..errors import AlreadyConfirmedError, InvalidFrequencyConfig, RoutineNotFoundError
from ..logging.config import get_streak_logger, log_streak_transition
from ..models.routine import Routine
from ..utils.time import format_date, iter_days
from .frequency import is_due, is_routine_due, validate_frequency

streak_logger = get_streak_logger(__name__)


def missed_due_day(routine: Routine, today: date) -> Optional[date]:
    """
    First due day that passed without being observed.

    The gap starts the day after ``last_confirmed`` (or on the creation
    date for a routine that was never confirmed) and ends the day before
    ``today``. Only the most recent confirmation is stored, so any due
    day inside the gap counts as missed.

    Returns:
        The earliest missed due day, or None
    """
    if routine.last_confirmed is not None:
        start = routine.last_confirmed + timedelta(days=1)
    else:
        start = routine.created_on

    for day in iter_days(start, today):
        if is_due(routine.frequency, day, routine.created_on):
            return day
    return None


class StreakTracker:
    """Applies confirm and catch-up events to routine snapshots."""

    def __init__(self, logger=None):
        self.logger = logger or streak_logger

    def confirm(self, routine: Routine, completed: bool, today: date) -> Routine:
        """
        Record today's outcome for a routine.

        A completion extends the streak, a skip resets it; both mark the
        day as observed so catch-up never penalizes it again.

        Args:
            routine: Current routine snapshot
            completed: True if done, False if explicitly skipped
            today: Calendar date of the confirmation

        Returns:
            Updated routine snapshot

        Raises:
            AlreadyConfirmedError: The routine was already confirmed or
                skipped today, or a later day has already been observed
        """
        if routine.last_confirmed == today:
            raise AlreadyConfirmedError(
                f"Routine {routine.id} already confirmed on {today.isoformat()}",
                routine_id=routine.id,
                day=today
            )

        if routine.last_confirmed is not None and routine.last_confirmed > today:
            raise AlreadyConfirmedError(
                f"Routine {routine.id} was already confirmed on a later day "
                f"({routine.last_confirmed.isoformat()})",
                routine_id=routine.id,
                day=today,
                context={"last_confirmed": format_date(routine.last_confirmed)}
            )

        new_streak = routine.streak + 1 if completed else 0
        updated = routine.with_streak(new_streak, today)

        log_streak_transition(
            self.logger,
            routine_id=routine.id,
            from_streak=routine.streak,
            to_streak=new_streak,
            trigger="confirm" if completed else "skip",
            context={
                "day": format_date(today),
                "previous_confirmation": format_date(routine.last_confirmed),
            }
        )

        return updated

    def catch_up(self, routine: Routine, today: date) -> Routine:
        """
        Reset the streak if a due day was missed since the last confirmation.

        Paused routines, routines already handled today and routines with
        no streak are returned unchanged, which makes the pass idempotent.
        ``last_confirmed`` is never modified.
        """
        if not routine.is_active or routine.handled_on(today) or routine.streak == 0:
            return routine

        try:
            validate_frequency(routine.frequency)
        except InvalidFrequencyConfig as e:
            self.logger.warning(
                "Invalid frequency config, treating routine as never due",
                routine_id=routine.id,
                error=str(e)
            )
            return routine

        missed = missed_due_day(routine, today)
        if missed is None:
            return routine

        log_streak_transition(
            self.logger,
            routine_id=routine.id,
            from_streak=routine.streak,
            to_streak=0,
            trigger="catch_up",
            context={
                "missed_day": format_date(missed),
                "last_confirmed": format_date(routine.last_confirmed),
                "today": format_date(today),
            }
        )

        return routine.with_streak(0, routine.last_confirmed)


@dataclass(frozen=True)
class CompletionStatus:
    """Summary of today's state across all active routines."""

    due: tuple = field(default_factory=tuple)
    completed: tuple = field(default_factory=tuple)
    skipped: tuple = field(default_factory=tuple)
    remaining: tuple = field(default_factory=tuple)
    at_risk: tuple = field(default_factory=tuple)

    @classmethod
    def from_routines(cls, routines: Iterable[Routine], today: date) -> "CompletionStatus":
        due = tuple(r for r in routines if is_routine_due(r, today))
        remaining = tuple(r for r in due if not r.handled_on(today))
        return cls(
            due=due,
            completed=tuple(r for r in due if r.completed_on(today)),
            skipped=tuple(r for r in due if r.skipped_on(today)),
            remaining=remaining,
            at_risk=tuple(r for r in remaining if r.streak > 0),
        )

    @property
    def has_due_routines(self) -> bool:
        return bool(self.due)

    @property
    def all_handled(self) -> bool:
        return not self.remaining

    @property
    def max_streak_at_risk(self) -> int:
        return max((r.streak for r in self.at_risk), default=0)


def confirm_routine(
    routines: Iterable[Routine],
    routine_id: str,
    completed: bool,
    today: date,
    tracker: Optional[StreakTracker] = None
) -> Routine:
    """
    Confirm a routine by identifier.

    Raises:
        RoutineNotFoundError: No routine has this identifier
        AlreadyConfirmedError: See ``StreakTracker.confirm``
    """
    tracker = tracker or StreakTracker()

    for routine in routines:
        if routine.id == routine_id:
            return tracker.confirm(routine, completed, today)

    raise RoutineNotFoundError(f"Routine with id {routine_id} not found", routine_id=routine_id)


def run_catch_up(
    routines: Iterable[Routine],
    today: date,
    tracker: Optional[StreakTracker] = None
) -> list[Routine]:
    """Apply catch-up to every routine, preserving order."""
    tracker = tracker or StreakTracker()
    return [tracker.catch_up(routine, today) for routine in routines]

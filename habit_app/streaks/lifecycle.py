"""
Routine lifecycle rules.

Creating, editing and resetting routines. Like the tracker, these
functions take routine snapshots and return new ones; the engine owns the
load and save around them.
"""

from dataclasses import replace
from datetime import date, timedelta
from typing import Any, Iterable, Optional

from ..errors import InvalidRoutineError
from ..logging.config import get_streak_logger, log_streak_transition
from ..models.routine import FrequencyConfig, Routine
from .frequency import validate_frequency

MAX_NAME_LENGTH = 50
MAX_DESCRIPTION_LENGTH = 200
MAX_STREAK = 9999

lifecycle_logger = get_streak_logger(__name__)


def validate_routine_name(name: Any) -> str:
    """
    Trimmed routine name.

    Raises:
        InvalidRoutineError: Blank or longer than ``MAX_NAME_LENGTH``
    """
    if not isinstance(name, str) or not name.strip():
        raise InvalidRoutineError("Routine name is required", field="name", value=name)

    name = name.strip()
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidRoutineError(
            f"Routine name must be {MAX_NAME_LENGTH} characters or less",
            field="name",
            value=name
        )
    return name


def validate_description(description: Optional[str]) -> Optional[str]:
    """Trimmed description; blank collapses to None."""
    if description is None:
        return None

    description = description.strip()
    if len(description) > MAX_DESCRIPTION_LENGTH:
        raise InvalidRoutineError(
            f"Description must be {MAX_DESCRIPTION_LENGTH} characters or less",
            field="description",
            value=description
        )
    return description or None


def validate_streak_input(value: Any) -> int:
    """
    Parse a user-entered streak count.

    Accepts integers and numeric strings such as ``"12"``.

    Raises:
        InvalidRoutineError: Empty, not a whole number, negative or above
            ``MAX_STREAK``
    """
    if isinstance(value, bool):
        raise InvalidRoutineError("Please enter a valid number", field="streak", value=value)

    if isinstance(value, str):
        if not value.strip():
            raise InvalidRoutineError("Please enter a value", field="streak", value=value)
        try:
            value = int(value.strip())
        except ValueError:
            raise InvalidRoutineError("Please enter a valid number", field="streak", value=value)

    if not isinstance(value, int):
        raise InvalidRoutineError("Please enter a valid number", field="streak", value=value)
    if value < 0:
        raise InvalidRoutineError("Streak cannot be negative", field="streak", value=value)
    if value > MAX_STREAK:
        raise InvalidRoutineError(f"Streak cannot exceed {MAX_STREAK} days", field="streak", value=value)

    return value


def new_routine(
    name: str,
    today: date,
    frequency: Optional[FrequencyConfig] = None,
    description: Optional[str] = None,
    color: Optional[str] = None,
    icon: Optional[str] = None,
    initial_streak: Any = 0,
) -> Routine:
    """
    Validated routine created today.

    A carried-over ``initial_streak`` is recorded as a completion on the
    day before creation, so a streak above zero always has a
    ``last_confirmed`` date and the routine is still open for today.

    Raises:
        InvalidRoutineError: Bad name, description or streak
        InvalidFrequencyConfig: Frequency that can never be due
    """
    routine = Routine.new(
        validate_routine_name(name),
        created_on=today,
        frequency=frequency,
        description=validate_description(description),
    )
    if frequency is not None:
        validate_frequency(frequency)
    if color is not None:
        routine = replace(routine, color=color)
    if icon is not None:
        routine = replace(routine, icon=icon)

    streak = validate_streak_input(initial_streak)
    if streak:
        routine = routine.with_streak(streak, today - timedelta(days=1))

    return routine


def update_routine_fields(
    routine: Routine,
    name: Optional[str] = None,
    description: Optional[str] = None,
    color: Optional[str] = None,
    icon: Optional[str] = None,
    is_active: Optional[bool] = None,
    frequency: Optional[FrequencyConfig] = None,
) -> Routine:
    """
    Apply a partial edit. Fields left as None keep their current value.

    Streak state is never touched here; pausing a routine only stops it
    from being due.
    """
    changes: dict[str, Any] = {}

    if name is not None:
        changes["name"] = validate_routine_name(name)
    if description is not None:
        changes["description"] = validate_description(description)
    if color is not None:
        changes["color"] = color
    if icon is not None:
        changes["icon"] = icon
    if is_active is not None:
        changes["is_active"] = bool(is_active)
    if frequency is not None:
        validate_frequency(frequency)
        changes["frequency"] = frequency

    return replace(routine, **changes)


def reset_streaks(routines: Iterable[Routine]) -> list[Routine]:
    """
    Zero every streak, preserving order.

    ``last_confirmed`` is kept, so a routine already confirmed today
    cannot be confirmed a second time after a reset.
    """
    reset = []
    for routine in routines:
        if routine.streak:
            log_streak_transition(
                lifecycle_logger,
                routine_id=routine.id,
                from_streak=routine.streak,
                to_streak=0,
                trigger="reset",
            )
            routine = routine.with_streak(0, routine.last_confirmed)
        reset.append(routine)
    return reset

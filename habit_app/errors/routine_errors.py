"""
Routine error classifications for the streak and frequency core.

These exceptions are recoverable: no state has been mutated when they are
raised and the caller can show a message and carry on.
"""

from datetime import date
from typing import Any, Dict, Optional


class RoutineError(Exception):
    """Base class for user or data errors raised by the core."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class AlreadyConfirmedError(RoutineError):
    """Routine was already confirmed or skipped on this day."""

    def __init__(self, message: str, routine_id: Optional[str] = None,
                 day: Optional[date] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.routine_id = routine_id
        self.day = day


class InvalidFrequencyConfig(RoutineError):
    """Frequency configuration that can never produce a due day."""

    def __init__(self, message: str, frequency: Optional[Any] = None,
                 routine_id: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.frequency = frequency
        self.routine_id = routine_id


class RoutineNotFoundError(RoutineError):
    """No routine with the requested identifier exists."""

    def __init__(self, message: str, routine_id: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.routine_id = routine_id


class InvalidRoutineError(RoutineError):
    """Routine fields rejected on create or update."""

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Optional[Any] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value


class ImportDataError(RoutineError):
    """Backup payload that cannot be restored."""

    def __init__(self, message: str, section: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.section = section

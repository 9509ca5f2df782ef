"""
Error classification for routine tracking and reminder planning.

This module provides the exception hierarchy separating recoverable
user/data errors raised by the core from system failures raised by the
persistence and delivery collaborators around it.
"""

from .routine_errors import (
    RoutineError,
    AlreadyConfirmedError,
    InvalidFrequencyConfig,
    RoutineNotFoundError,
    InvalidRoutineError,
    ImportDataError,
)
from .system_failures import (
    SystemFailureError,
    StorageError,
    DeliveryError,
    PermissionDeniedError,
)

__all__ = [
    # Routine Errors
    "RoutineError",
    "AlreadyConfirmedError",
    "InvalidFrequencyConfig",
    "RoutineNotFoundError",
    "InvalidRoutineError",
    "ImportDataError",
    # System Failures
    "SystemFailureError",
    "StorageError",
    "DeliveryError",
    "PermissionDeniedError",
]

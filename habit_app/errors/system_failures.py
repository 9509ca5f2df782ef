"""
System failure error classifications for external collaborators.

These exceptions come from persistence and notification delivery. They
are never raised by the pure core itself.
"""

from typing import Optional, Dict, Any


class SystemFailureError(Exception):
    """Base class for failures outside the core."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class StorageError(SystemFailureError):
    """Persistence read or write failed; prior persisted state is intact."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 target: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.target = target


class DeliveryError(SystemFailureError):
    """Notification delivery system failures."""

    def __init__(self, message: str, delivery_method: Optional[str] = None,
                 time_of_day: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.delivery_method = delivery_method
        self.time_of_day = time_of_day


class PermissionDeniedError(DeliveryError):
    """The platform refused permission to post notifications."""

    def __init__(self, message: str, delivery_method: Optional[str] = None, **kwargs):
        super().__init__(message, delivery_method=delivery_method, **kwargs)

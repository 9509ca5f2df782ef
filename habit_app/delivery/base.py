"""Base classes for notification delivery mechanisms."""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import structlog

from ..models.notification import ScheduledNotification
from ..utils.time import format_time_of_day

DeliveryHandle = str


class DeliveryStatus(Enum):
    """Notification delivery status."""
    SUCCESS = "success"
    FAILED = "failed"
    DEAD_LETTER = "dead_letter"


@dataclass
class DeliveryResult:
    """Result of scheduling one notification."""
    status: DeliveryStatus
    handle: Optional[DeliveryHandle] = None
    message: Optional[str] = None
    attempt_count: int = 1
    error: Optional[Exception] = None


class NotificationDeliveryError(Exception):
    """Base exception for notification delivery errors."""
    pass


class NotificationDeliveryRetryableError(NotificationDeliveryError):
    """Retryable notification delivery error."""
    pass


class NotificationDeliveryPermanentError(NotificationDeliveryError):
    """Permanent notification delivery error that should not be retried."""
    pass


class BaseNotificationDelivery(ABC):
    """Base class for notification delivery mechanisms."""

    def __init__(self, name: str, config: Any):
        self.name = name
        self.config = config
        self.logger = structlog.get_logger(f"notification.delivery.{name}")
        self._delivery_count = 0
        self._error_count = 0

    @abstractmethod
    def cancel_all(self) -> None:
        """Cancel every previously scheduled notification."""
        pass

    @abstractmethod
    def schedule(self, notification: ScheduledNotification) -> DeliveryHandle:
        """
        Schedule a single notification.

        Returns:
            Handle identifying the scheduled notification

        Raises:
            NotificationDeliveryRetryableError: Transient failure
            NotificationDeliveryPermanentError: Failure that will not resolve on retry
        """
        pass

    @abstractmethod
    def request_permission(self) -> bool:
        """Ask the platform for permission to post notifications."""
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """Check if delivery mechanism is healthy."""
        pass

    def deliver_plan(
        self,
        plan: list[ScheduledNotification],
        max_retries: int = 3,
        retry_delay: float = 1.0
    ) -> list[DeliveryResult]:
        """
        Schedule every notification of a plan with retry logic.

        Args:
            plan: Notifications in plan order
            max_retries: Maximum number of retry attempts per notification
            retry_delay: Delay between retries in seconds

        Returns:
            One delivery result per notification, in plan order
        """
        results = []

        for notification in plan:
            attempt = 0
            last_error: Optional[Exception] = None
            at = format_time_of_day(notification.time_of_day)

            while attempt <= max_retries:
                try:
                    handle = self.schedule(notification)
                    results.append(DeliveryResult(
                        status=DeliveryStatus.SUCCESS,
                        handle=handle,
                        attempt_count=attempt + 1
                    ))
                    self._delivery_count += 1
                    break

                except NotificationDeliveryPermanentError as e:
                    self._error_count += 1
                    results.append(DeliveryResult(
                        status=DeliveryStatus.FAILED,
                        message=f"Permanent error: {str(e)}",
                        attempt_count=attempt + 1,
                        error=e
                    ))
                    break

                except NotificationDeliveryRetryableError as e:
                    last_error = e

                except OSError as e:
                    last_error = e

                attempt += 1

                if attempt <= max_retries:
                    self.logger.warning(
                        f"Delivery attempt {attempt} failed, retrying in {retry_delay}s",
                        delivery_name=self.name,
                        time=at,
                        error=str(last_error)
                    )
                    time.sleep(retry_delay)
                else:
                    self._error_count += 1
                    results.append(DeliveryResult(
                        status=DeliveryStatus.DEAD_LETTER,
                        message=f"Max retries exceeded: {str(last_error)}",
                        attempt_count=attempt,
                        error=last_error
                    ))

        return results

    def get_stats(self) -> dict[str, Any]:
        """Get delivery statistics."""
        return {
            "name": self.name,
            "delivery_count": self._delivery_count,
            "error_count": self._error_count,
            "success_rate": (
                self._delivery_count / (self._delivery_count + self._error_count)
                if (self._delivery_count + self._error_count) > 0 else 0.0
            )
        }

    def reset_stats(self):
        """Reset delivery statistics."""
        self._delivery_count = 0
        self._error_count = 0

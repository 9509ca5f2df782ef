"""Standard output notification delivery mechanism."""

import sys
from uuid import uuid4

import orjson

from ..config.delivery import StdoutDeliveryConfig
from ..models.notification import ScheduledNotification
from ..utils.time import format_time_of_day
from .base import BaseNotificationDelivery, DeliveryHandle


class StdoutNotificationDelivery(BaseNotificationDelivery):
    """Prints scheduled notifications; useful for development and dry runs."""

    def __init__(self, name: str, config: StdoutDeliveryConfig):
        super().__init__(name, config)
        self.config: StdoutDeliveryConfig = config
        self.scheduled: dict[DeliveryHandle, ScheduledNotification] = {}

    def cancel_all(self) -> None:
        """Forget every scheduled notification."""
        cancelled = len(self.scheduled)
        self.scheduled.clear()
        self.logger.info("Cancelled scheduled notifications", delivery_name=self.name,
                         count=cancelled)

    def schedule(self, notification: ScheduledNotification) -> DeliveryHandle:
        """Print a notification and remember it under a new handle."""
        handle = uuid4().hex[:12]
        print(self._format_notification(notification), file=sys.stdout, flush=True)
        self.scheduled[handle] = notification
        return handle

    def request_permission(self) -> bool:
        """Stdout needs no permission."""
        return True

    def _format_notification(self, notification: ScheduledNotification) -> str:
        """Format notification for stdout output."""
        if self.config.format == "pretty":
            at = format_time_of_day(notification.time_of_day)
            prefix = f"[{notification.payload.day.isoformat()} {at}]" if self.config.include_date else f"[{at}]"
            return f"{prefix} {notification.title} - {notification.body}"

        data = notification.to_dict()
        if not self.config.include_date:
            data["payload"].pop("date", None)
        return orjson.dumps(data).decode()

    def health_check(self) -> bool:
        """Check if stdout is available."""
        try:
            return sys.stdout.writable()
        except (OSError, ValueError):
            return False

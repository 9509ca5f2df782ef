"""File-based notification delivery mechanism (JSONL outbox)."""

import os
from pathlib import Path
from uuid import uuid4

import orjson

from ..config.delivery import FileDeliveryConfig
from ..models.notification import ScheduledNotification
from .base import (
    BaseNotificationDelivery,
    DeliveryHandle,
    NotificationDeliveryPermanentError,
    NotificationDeliveryRetryableError,
)


class FileNotificationDelivery(BaseNotificationDelivery):
    """
    Writes scheduled notifications to a JSONL outbox.

    An external agent (or a test) reads the outbox; ``cancel_all``
    empties it.
    """

    def __init__(self, name: str, config: FileDeliveryConfig):
        super().__init__(name, config)
        self.config: FileDeliveryConfig = config
        self.output_path = Path(config.output_path)

        if config.create_dirs:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)

    def cancel_all(self) -> None:
        """Empty the outbox."""
        if self.output_path.exists():
            self.output_path.write_bytes(b"")
        self.logger.info("Outbox cleared", delivery_name=self.name,
                         output_path=str(self.output_path))

    def schedule(self, notification: ScheduledNotification) -> DeliveryHandle:
        """Append a notification record to the outbox."""
        if not self.output_path.parent.exists():
            raise NotificationDeliveryPermanentError(
                f"Outbox directory does not exist: {self.output_path.parent}"
            )

        handle = uuid4().hex[:12]
        record = {"handle": handle, **notification.to_dict()}

        try:
            with open(self.output_path, "ab") as f:
                f.write(orjson.dumps(record) + b"\n")
        except OSError as e:
            raise NotificationDeliveryRetryableError(f"File system error: {e}") from e

        return handle

    def read_outbox(self) -> list[dict]:
        """Records currently in the outbox, in write order."""
        if not self.output_path.exists():
            return []
        lines = self.output_path.read_bytes().splitlines()
        return [orjson.loads(line) for line in lines if line.strip()]

    def request_permission(self) -> bool:
        """Permission means the outbox directory is writable."""
        return self.output_path.parent.exists() and os.access(self.output_path.parent, os.W_OK)

    def health_check(self) -> bool:
        """Check if the outbox can be written."""
        return self.request_permission()

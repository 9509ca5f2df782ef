"""Tests for notification delivery mechanisms."""

import json
import os
import tempfile
from datetime import time
from pathlib import Path
from unittest.mock import patch

import pytest

from habit_app.config.delivery import (
    DeliveryMethod, FileDeliveryConfig, StdoutDeliveryConfig, get_default_delivery_config
)
from habit_app.delivery import create_delivery
from habit_app.delivery.base import (
    BaseNotificationDelivery,
    DeliveryStatus,
    NotificationDeliveryPermanentError,
    NotificationDeliveryRetryableError,
)
from habit_app.delivery.file_delivery import FileNotificationDelivery
from habit_app.delivery.stdout_delivery import StdoutNotificationDelivery
from habit_app.models.notification import NotificationPayload, PayloadKind, ScheduledNotification

from conftest import MONDAY


def make_notification(hour: int = 7, title: str = "Start your day right") -> ScheduledNotification:
    return ScheduledNotification(
        time_of_day=time(hour, 0),
        title=title,
        body="1 routine due today.",
        payload=NotificationPayload(kind=PayloadKind.REMINDER, day=MONDAY, time_of_day="morning"),
    )


class FlakyDelivery(BaseNotificationDelivery):
    """Delivery that fails a configurable number of times."""

    def __init__(self, failures, error_type=NotificationDeliveryRetryableError):
        super().__init__("flaky", None)
        self.failures = failures
        self.error_type = error_type
        self.calls = 0

    def cancel_all(self):
        pass

    def schedule(self, notification):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error_type("temporary outage")
        return f"handle-{self.calls}"

    def request_permission(self):
        return True

    def health_check(self):
        return True


class TestDeliverPlan:
    """Test retry handling in deliver_plan."""

    def test_success_first_attempt(self):
        """Every notification is scheduled once."""
        delivery = FlakyDelivery(failures=0)

        results = delivery.deliver_plan([make_notification(7), make_notification(9)])

        assert [r.status for r in results] == [DeliveryStatus.SUCCESS, DeliveryStatus.SUCCESS]
        assert [r.handle for r in results] == ["handle-1", "handle-2"]
        assert delivery.get_stats()["delivery_count"] == 2

    @patch("habit_app.delivery.base.time.sleep")
    def test_retry_then_success(self, mock_sleep):
        """Retryable errors are retried."""
        delivery = FlakyDelivery(failures=2)

        [result] = delivery.deliver_plan([make_notification()], max_retries=3, retry_delay=0.5)

        assert result.status == DeliveryStatus.SUCCESS
        assert result.attempt_count == 3
        assert mock_sleep.call_count == 2

    @patch("habit_app.delivery.base.time.sleep")
    def test_retries_exhausted(self, mock_sleep):
        """Exhausted retries produce a dead letter."""
        delivery = FlakyDelivery(failures=10)

        [result] = delivery.deliver_plan([make_notification()], max_retries=2)

        assert result.status == DeliveryStatus.DEAD_LETTER
        assert result.attempt_count == 3
        assert delivery.get_stats()["error_count"] == 1

    @patch("habit_app.delivery.base.time.sleep")
    def test_os_error_retried(self, mock_sleep):
        """OS errors are treated as transient."""
        delivery = FlakyDelivery(failures=1, error_type=OSError)

        [result] = delivery.deliver_plan([make_notification()])

        assert result.status == DeliveryStatus.SUCCESS

    def test_permanent_error_not_retried(self):
        """Permanent errors fail immediately."""
        delivery = FlakyDelivery(failures=1, error_type=NotificationDeliveryPermanentError)

        [result] = delivery.deliver_plan([make_notification()])

        assert result.status == DeliveryStatus.FAILED
        assert result.attempt_count == 1
        assert delivery.calls == 1

    def test_stats_reset(self):
        """reset_stats clears counters."""
        delivery = FlakyDelivery(failures=0)
        delivery.deliver_plan([make_notification()])

        delivery.reset_stats()

        assert delivery.get_stats() == {
            "name": "flaky", "delivery_count": 0, "error_count": 0, "success_rate": 0.0
        }


class TestStdoutDelivery:
    """Test StdoutNotificationDelivery."""

    def test_json_output(self, capsys):
        """JSON format prints one object per notification."""
        delivery = StdoutNotificationDelivery("test", get_default_delivery_config())

        handle = delivery.schedule(make_notification())

        data = json.loads(capsys.readouterr().out)
        assert data["time"] == "07:00"
        assert data["payload"]["date"] == "2024-01-01"
        assert handle in delivery.scheduled

    def test_pretty_output(self, capsys):
        """Pretty format prints a readable line."""
        delivery = StdoutNotificationDelivery("test", StdoutDeliveryConfig(format="pretty"))

        delivery.schedule(make_notification())

        assert capsys.readouterr().out.strip() == \
            "[2024-01-01 07:00] Start your day right - 1 routine due today."

    def test_without_date(self, capsys):
        """include_date=False omits the date."""
        delivery = StdoutNotificationDelivery("test", StdoutDeliveryConfig(include_date=False))

        delivery.schedule(make_notification())

        assert "date" not in json.loads(capsys.readouterr().out)["payload"]

    def test_cancel_all(self, capsys):
        """cancel_all forgets scheduled notifications."""
        delivery = StdoutNotificationDelivery("test", StdoutDeliveryConfig())
        delivery.schedule(make_notification())

        delivery.cancel_all()

        assert delivery.scheduled == {}

    def test_permission_and_health(self):
        """Stdout is always permitted."""
        delivery = StdoutNotificationDelivery("test", StdoutDeliveryConfig())

        assert delivery.request_permission() is True
        assert delivery.health_check() is True


class TestFileDelivery:
    """Test FileNotificationDelivery."""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.output_path = os.path.join(self.temp_dir, "outbox", "notifications.jsonl")

    def teardown_method(self):
        import shutil
        shutil.rmtree(self.temp_dir)

    def test_creates_directory(self):
        """The outbox directory is created on demand."""
        FileNotificationDelivery("test", FileDeliveryConfig(output_path=self.output_path))

        assert Path(self.output_path).parent.exists()

    def test_schedule_appends_records(self):
        """Each notification is one JSONL record with its handle."""
        delivery = FileNotificationDelivery("test", FileDeliveryConfig(output_path=self.output_path))

        first = delivery.schedule(make_notification(7))
        second = delivery.schedule(make_notification(9))

        records = delivery.read_outbox()
        assert [r["handle"] for r in records] == [first, second]
        assert [r["time"] for r in records] == ["07:00", "09:00"]

    def test_cancel_all_empties_outbox(self):
        """cancel_all removes scheduled records."""
        delivery = FileNotificationDelivery("test", FileDeliveryConfig(output_path=self.output_path))
        delivery.schedule(make_notification())

        delivery.cancel_all()

        assert delivery.read_outbox() == []

    def test_missing_directory_is_permanent(self):
        """Without a directory scheduling fails permanently and permission is refused."""
        delivery = FileNotificationDelivery(
            "test", FileDeliveryConfig(output_path=self.output_path, create_dirs=False)
        )

        assert delivery.request_permission() is False
        assert delivery.health_check() is False
        with pytest.raises(NotificationDeliveryPermanentError):
            delivery.schedule(make_notification())

    def test_write_failure_is_retryable(self):
        """File system errors while writing are retryable."""
        delivery = FileNotificationDelivery("test", FileDeliveryConfig(output_path=self.output_path))

        with patch("builtins.open", side_effect=OSError("disk full")):
            with pytest.raises(NotificationDeliveryRetryableError):
                delivery.schedule(make_notification())


class TestCreateDelivery:
    """Test the delivery factory."""

    def test_create_stdout(self):
        assert isinstance(create_delivery(DeliveryMethod.STDOUT, StdoutDeliveryConfig()),
                          StdoutNotificationDelivery)

    def test_create_stdout_default_config(self):
        """Stdout delivery without a config uses the default delivery config."""
        delivery = create_delivery(DeliveryMethod.STDOUT)

        assert delivery.config == get_default_delivery_config()

    def test_create_file_requires_config(self):
        with pytest.raises(ValueError):
            create_delivery(DeliveryMethod.FILE_OUTPUT)

    def test_create_file(self, tmp_path):
        delivery = create_delivery(DeliveryMethod.FILE_OUTPUT,
                                   FileDeliveryConfig(output_path=str(tmp_path / "out.jsonl")),
                                   name="outbox")

        assert isinstance(delivery, FileNotificationDelivery)
        assert delivery.name == "outbox"

    def test_unsupported_method(self):
        with pytest.raises(ValueError):
            create_delivery("carrier_pigeon", StdoutDeliveryConfig())

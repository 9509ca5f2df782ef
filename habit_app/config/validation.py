"""
Settings validation and normalization.

``ConfigValidator`` reports problems in a raw settings mapping without
changing anything. ``normalize_settings`` is the single place where
conflicting notification flags are reconciled: it repairs rather than
rejects, so it never fails.
"""

from dataclasses import dataclass, replace
from typing import Any, Optional

import structlog

from ..models.settings import NotificationSettings
from ..utils.time import parse_time_of_day
from .defaults import DEFAULT_REMINDER_TIMES, LimitParams

logger = structlog.get_logger(__name__)

_BOOLEAN_FIELDS = (
    "enabled",
    "custom_times_set",
    "escalating_reminders",
    "only_if_incomplete",
    "streak_protection",
)


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_settings(params: dict[str, Any],
                          limits: Optional[LimitParams] = None) -> list[ValidationError]:
        """Validate raw notification settings."""
        limits = limits or LimitParams()
        errors = []

        for field_name in _BOOLEAN_FIELDS:
            if field_name in params and not isinstance(params[field_name], bool):
                errors.append(ValidationError(
                    field=field_name,
                    message="Must be a boolean",
                    value=params[field_name]
                ))

        if "reminder_times" in params:
            value = params["reminder_times"]
            if isinstance(value, str):
                value = [value]
            if not isinstance(value, (list, tuple)):
                errors.append(ValidationError(
                    field="reminder_times",
                    message="Must be a list of HH:MM strings",
                    value=value
                ))
            else:
                for raw_time in value:
                    try:
                        parse_time_of_day(raw_time)
                    except ValueError:
                        errors.append(ValidationError(
                            field="reminder_times",
                            message="Must be a valid HH:MM time",
                            value=raw_time
                        ))
                if len(set(value)) > limits.max_reminder_times:
                    errors.append(ValidationError(
                        field="reminder_times",
                        message=f"At most {limits.max_reminder_times} reminder times are allowed",
                        value=value
                    ))

        if "max_notifications_per_day" in params:
            value = params["max_notifications_per_day"]
            if (not isinstance(value, int) or isinstance(value, bool)
                    or not limits.min_notifications_per_day <= value <= limits.max_notifications_per_day):
                errors.append(ValidationError(
                    field="max_notifications_per_day",
                    message=(
                        f"Must be an integer between {limits.min_notifications_per_day}"
                        f" and {limits.max_notifications_per_day}"
                    ),
                    value=value
                ))

        return errors

    @staticmethod
    def validate_escalation_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate escalation parameters."""
        errors = []

        if "interval_minutes" in params:
            value = params["interval_minutes"]
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                errors.append(ValidationError(
                    field="interval_minutes",
                    message="Must be a positive integer",
                    value=value
                ))

        if "day_end" in params:
            value = params["day_end"]
            try:
                parse_time_of_day(value)
            except ValueError:
                errors.append(ValidationError(
                    field="day_end",
                    message="Must be a valid HH:MM time",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_limit_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate hard limits on notification settings."""
        errors = []

        for field_name in ("min_notifications_per_day", "max_notifications_per_day", "max_reminder_times"):
            if field_name in params:
                value = params[field_name]
                if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                    errors.append(ValidationError(
                        field=field_name,
                        message="Must be a positive integer",
                        value=value
                    ))

        low = params.get("min_notifications_per_day")
        high = params.get("max_notifications_per_day")
        if isinstance(low, int) and isinstance(high, int) and low > high:
            errors.append(ValidationError(
                field="min_notifications_per_day",
                message="Must not exceed max_notifications_per_day",
                value=low
            ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        limits = None
        if "limits" in config:
            limit_errors = ConfigValidator.validate_limit_params(config["limits"])
            errors.extend(limit_errors)
            if not limit_errors:
                limits = LimitParams(**{
                    k: v for k, v in config["limits"].items()
                    if k in LimitParams.__dataclass_fields__
                })

        if "notifications" in config:
            errors.extend(ConfigValidator.validate_settings(config["notifications"], limits))

        if "escalation" in config:
            errors.extend(ConfigValidator.validate_escalation_params(config["escalation"]))

        return errors


def normalize_settings(raw: NotificationSettings,
                       limits: Optional[LimitParams] = None) -> NotificationSettings:
    """
    Normalize notification settings into a consistent configuration.

    Steps:
    1. Truncate reminder times to the minute, deduplicate and sort,
       keep at most the earliest ``max_reminder_times`` entries
    2. Substitute the built-in default times when none remain
    3. Clamp the per-day cap into the allowed range
    4. Custom multi-time schedules disable escalation

    Args:
        raw: Settings as loaded from storage or configuration
        limits: Hard limits, defaults to ``LimitParams()``

    Returns:
        New settings snapshot; the input is not modified
    """
    limits = limits or LimitParams()

    # Minute resolution: 07:00:30 and 07:00 are the same reminder
    minutes = {t.replace(second=0, microsecond=0) for t in raw.reminder_times}
    reminder_times = sorted(minutes)[:limits.max_reminder_times]
    if not reminder_times:
        reminder_times = [parse_time_of_day(t) for t in DEFAULT_REMINDER_TIMES]

    cap = min(max(raw.max_notifications_per_day, limits.min_notifications_per_day),
              limits.max_notifications_per_day)

    escalating = raw.escalating_reminders
    if raw.custom_times_set and len(reminder_times) > 1:
        escalating = False

    normalized = replace(
        raw,
        reminder_times=tuple(reminder_times),
        max_notifications_per_day=cap,
        escalating_reminders=escalating,
    )

    if normalized != raw:
        logger.debug(
            "Notification settings normalized",
            reminder_count=len(normalized.reminder_times),
            max_notifications_per_day=cap,
            escalation_disabled=raw.escalating_reminders and not escalating,
        )

    return normalized


# Public name used by callers of the core API
validate_settings = normalize_settings

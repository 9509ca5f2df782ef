"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from ..models.settings import NotificationSettings
from ..utils.time import parse_time_of_day
from .defaults import DefaultConfig, EscalationParams, LimitParams, get_default_config


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_file_config(self) -> dict[str, Any]:
        """Load user overrides from ``settings.yaml`` in the config directory."""
        settings_file = self.config_dir / "settings.yaml"

        if not settings_file.exists():
            return {}

        with open(settings_file) as f:
            file_config = yaml.safe_load(f)

        return file_config or {}

    def merge_config(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Explicit overrides (highest priority)
        2. settings.yaml in the config directory
        3. Global defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)

        config = self._deep_merge(config, self.load_file_config())

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def notification_mapping(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """Merged ``notifications`` section exactly as configured, before parsing."""
        return dict(self.merge_config(overrides)["notifications"])

    def notification_settings(self, overrides: Optional[dict[str, Any]] = None) -> NotificationSettings:
        """Raw (not yet normalized) notification settings from merged configuration."""
        return NotificationSettings.from_dict(self.notification_mapping(overrides))

    def limit_params(self, overrides: Optional[dict[str, Any]] = None) -> LimitParams:
        """Settings limits from merged configuration."""
        limits = self.merge_config(overrides)["limits"]
        params = LimitParams(
            min_notifications_per_day=int(limits["min_notifications_per_day"]),
            max_notifications_per_day=int(limits["max_notifications_per_day"]),
            max_reminder_times=int(limits["max_reminder_times"]),
        )
        if not 1 <= params.min_notifications_per_day <= params.max_notifications_per_day:
            raise ValueError(
                f"Invalid notification limits: min {params.min_notifications_per_day},"
                f" max {params.max_notifications_per_day}"
            )
        return params

    def escalation_params(self, overrides: Optional[dict[str, Any]] = None) -> EscalationParams:
        """Escalation parameters from merged configuration."""
        escalation = self.merge_config(overrides)["escalation"]
        params = EscalationParams(
            interval_minutes=int(escalation["interval_minutes"]),
            day_end=str(escalation["day_end"]),
        )
        # Fail early on a malformed end of day
        parse_time_of_day(params.day_end)
        return params

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name, _field in obj.__dataclass_fields__.items():
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                elif isinstance(value, tuple):
                    result[field_name] = list(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

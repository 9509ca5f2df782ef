"""Configuration for notification delivery mechanisms."""

from dataclasses import dataclass
from enum import Enum


class DeliveryMethod(Enum):
    """Supported notification delivery methods."""
    FILE_OUTPUT = "file_output"
    STDOUT = "stdout"


@dataclass(frozen=True)
class FileDeliveryConfig:
    """Configuration for the JSONL outbox delivery."""
    output_path: str
    create_dirs: bool = True


@dataclass(frozen=True)
class StdoutDeliveryConfig:
    """Configuration for stdout delivery."""
    format: str = "json"  # json, pretty
    include_date: bool = True


@dataclass(frozen=True)
class RetryConfig:
    """Retry policy applied when scheduling a plan."""
    max_retries: int = 3
    retry_delay_seconds: float = 1.0


def get_default_delivery_config() -> StdoutDeliveryConfig:
    """Get default notification delivery configuration."""
    return StdoutDeliveryConfig(format="json", include_date=True)

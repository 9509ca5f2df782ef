"""
Notification delivery module.

Reference delivery collaborators. The core never calls these directly;
the engine hands them the finished plan.
"""

from typing import Optional, Union

from ..config.delivery import (
    DeliveryMethod,
    FileDeliveryConfig,
    StdoutDeliveryConfig,
    get_default_delivery_config,
)
from .base import BaseNotificationDelivery
from .file_delivery import FileNotificationDelivery
from .stdout_delivery import StdoutNotificationDelivery


def create_delivery(method: DeliveryMethod,
                    config: Optional[Union[FileDeliveryConfig, StdoutDeliveryConfig]] = None,
                    name: str = "default") -> BaseNotificationDelivery:
    """
    Create a delivery mechanism for a configured method.

    Stdout delivery falls back to the default delivery configuration;
    file delivery needs an explicit output path.
    """
    if method == DeliveryMethod.FILE_OUTPUT:
        if config is None:
            raise ValueError("File delivery requires a FileDeliveryConfig")
        return FileNotificationDelivery(name, config)
    if method == DeliveryMethod.STDOUT:
        return StdoutNotificationDelivery(name, config or get_default_delivery_config())
    raise ValueError(f"Unsupported delivery method: {method}")

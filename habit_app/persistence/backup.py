"""
JSON backup of routines and settings.

``export_data`` snapshots any ``PersistenceStore`` into a plain mapping and
``import_data`` restores one. Everything in a payload is parsed before the
first write, so a rejected payload leaves the store untouched.
"""

from datetime import datetime
from typing import Any, Optional

import orjson
import structlog

from ..config.validation import ConfigValidator
from ..errors import ImportDataError
from ..models.routine import Routine
from ..models.settings import NotificationSettings
from .base import PersistenceStore

BACKUP_VERSION = "1.0.0"

logger = structlog.get_logger("habit.backup")


def export_data(store: PersistenceStore, exported_at: datetime) -> dict[str, Any]:
    """Snapshot routines and settings; settings is None if never saved."""
    routines = store.load_routines()
    settings = store.load_settings()

    logger.info("Data exported", routines=len(routines))
    return {
        "version": BACKUP_VERSION,
        "export_date": exported_at.isoformat(),
        "routines": [routine.to_dict() for routine in routines],
        "settings": settings.to_dict() if settings is not None else None,
    }


def import_data(store: PersistenceStore, data: Any) -> int:
    """
    Replace stored routines and settings with a backup payload.

    Missing sections are left as they are. Settings keys absent from the
    payload take their defaults; invalid values are repaired and logged.

    Returns:
        Number of routines restored

    Raises:
        ImportDataError: Payload or section has the wrong shape
        StorageError: Propagated from the store
    """
    if not isinstance(data, dict):
        raise ImportDataError("Invalid import data format", section="root")

    routines: Optional[list[Routine]] = None
    if data.get("routines") is not None:
        routines = _parse_routines(data["routines"])

    settings: Optional[NotificationSettings] = None
    if data.get("settings") is not None:
        settings = _parse_settings(data["settings"])

    if routines is not None:
        store.save_routines(routines)
    if settings is not None:
        store.save_settings(settings)

    logger.info(
        "Data imported",
        version=data.get("version"),
        routines=len(routines) if routines is not None else None,
        settings=settings is not None
    )
    return len(routines) if routines is not None else 0


def dumps_backup(payload: dict[str, Any]) -> bytes:
    return orjson.dumps(payload, option=orjson.OPT_INDENT_2)


def loads_backup(raw: bytes) -> Any:
    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise ImportDataError(f"Backup is not valid JSON: {e}", section="root") from e


def _parse_routines(raw: Any) -> list[Routine]:
    if not isinstance(raw, list):
        raise ImportDataError("Routines must be a list", section="routines")

    routines = []
    for item in raw:
        if not isinstance(item, dict):
            raise ImportDataError("Each routine must be an object", section="routines")
        try:
            routines.append(Routine.from_dict(item))
        except (KeyError, TypeError, ValueError) as e:
            raise ImportDataError(f"Invalid routine entry: {e}", section="routines") from e

    ids = [routine.id for routine in routines]
    if len(set(ids)) != len(ids):
        raise ImportDataError("Routine ids must be unique", section="routines")

    return routines


def _parse_settings(raw: Any) -> NotificationSettings:
    if not isinstance(raw, dict):
        raise ImportDataError("Settings must be an object", section="settings")

    for error in ConfigValidator.validate_settings(raw):
        logger.warning(
            "Imported setting repaired",
            field=error.field,
            message=error.message,
            value=error.value
        )
    return NotificationSettings.from_dict(raw)

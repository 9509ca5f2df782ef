"""SQLite-backed routine, settings and history persistence."""

import sqlite3
import threading
from contextlib import contextmanager
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Optional

import orjson
import structlog

from ..errors import StorageError
from ..models.history import HistoryEntry
from ..models.routine import Routine
from ..models.settings import NotificationSettings
from ..utils.time import format_date
from .base import PersistenceStore

_SETTINGS_KEY = 1


class SqliteHabitStore(PersistenceStore):
    """SQLite-based habit persistence layer."""

    def __init__(self, db_path: str = "habits.db", timeout_seconds: float = 30.0,
                 history_retention_days: int = 90):
        self.db_path = Path(db_path)
        self.timeout_seconds = timeout_seconds
        self.history_retention_days = history_retention_days
        self.logger = structlog.get_logger("habit.store")
        self._lock = threading.Lock()

        self._init_database()

    def _init_database(self) -> None:
        """Initialize database schema."""
        with self._transaction("init_schema", "database") as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS routines (
                    id TEXT PRIMARY KEY,
                    position INTEGER NOT NULL,
                    data BLOB NOT NULL
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS settings (
                    id INTEGER PRIMARY KEY,
                    data BLOB NOT NULL
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS history (
                    routine_id TEXT NOT NULL,
                    day TEXT NOT NULL,
                    data BLOB NOT NULL,
                    UNIQUE(routine_id, day)
                )
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_history_day ON history(day)
            """)

    @contextmanager
    def _transaction(self, operation: str, target: str):
        """
        Connection scoped to one atomic operation.

        Commits on success, rolls back and raises ``StorageError`` on any
        sqlite or decoding failure.
        """
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=self.timeout_seconds)
            conn.row_factory = sqlite3.Row
            yield conn
            conn.commit()
        except (sqlite3.Error, orjson.JSONDecodeError, KeyError, ValueError, TypeError) as e:
            if conn:
                conn.rollback()
            self.logger.error(
                "Storage operation failed",
                operation=operation,
                target=target,
                error=str(e)
            )
            raise StorageError(
                f"{operation} failed: {e}",
                operation=operation,
                target=target
            ) from e
        finally:
            if conn:
                conn.close()

    def load_routines(self) -> list[Routine]:
        """Load all routines in stored order."""
        with self._transaction("load_routines", "routines") as conn:
            rows = conn.execute("""
                SELECT data FROM routines ORDER BY position
            """).fetchall()
            return [Routine.from_dict(orjson.loads(row["data"])) for row in rows]

    def save_routines(self, routines: list[Routine]) -> None:
        """Replace the stored routine set in a single transaction."""
        with self._lock:
            with self._transaction("save_routines", "routines") as conn:
                conn.execute("DELETE FROM routines")
                conn.executemany("""
                    INSERT INTO routines (id, position, data) VALUES (?, ?, ?)
                """, [
                    (routine.id, position, orjson.dumps(routine.to_dict()))
                    for position, routine in enumerate(routines)
                ])

        self.logger.debug("Routines saved", count=len(routines))

    def load_settings(self) -> Optional[NotificationSettings]:
        """Load raw settings, or None if nothing was saved yet."""
        with self._transaction("load_settings", "settings") as conn:
            row = conn.execute("""
                SELECT data FROM settings WHERE id = ?
            """, (_SETTINGS_KEY,)).fetchone()

            if row is None:
                return None
            return NotificationSettings.from_dict(orjson.loads(row["data"]))

    def save_settings(self, settings: NotificationSettings) -> None:
        """Replace the stored settings record."""
        with self._lock:
            with self._transaction("save_settings", "settings") as conn:
                conn.execute("""
                    INSERT OR REPLACE INTO settings (id, data) VALUES (?, ?)
                """, (_SETTINGS_KEY, orjson.dumps(settings.to_dict())))

    def record_history(self, entry: HistoryEntry) -> None:
        """
        Store a history entry.

        One entry is kept per routine and day; entries older than the
        retention window (relative to the entry's day) are pruned.
        """
        cutoff = entry.day - timedelta(days=self.history_retention_days)

        with self._lock:
            with self._transaction("record_history", "history") as conn:
                conn.execute("""
                    INSERT OR REPLACE INTO history (routine_id, day, data) VALUES (?, ?, ?)
                """, (entry.routine_id, format_date(entry.day), orjson.dumps(entry.to_dict())))

                cursor = conn.execute("""
                    DELETE FROM history WHERE day < ?
                """, (format_date(cutoff),))

                if cursor.rowcount:
                    self.logger.info("Pruned old history entries", deleted=cursor.rowcount)

    def load_history(self, routine_id: Optional[str] = None,
                     since: Optional[date] = None) -> list[HistoryEntry]:
        """Load history entries ordered by day, optionally filtered."""
        query = "SELECT data FROM history WHERE 1 = 1"
        params: list[Any] = []

        if routine_id is not None:
            query += " AND routine_id = ?"
            params.append(routine_id)
        if since is not None:
            query += " AND day >= ?"
            params.append(format_date(since))

        query += " ORDER BY day, routine_id"

        with self._transaction("load_history", "history") as conn:
            rows = conn.execute(query, params).fetchall()
            return [HistoryEntry.from_dict(orjson.loads(row["data"])) for row in rows]

"""
Persistence module.

Reference implementation of the routine and settings store that callers
wrap around the core (load, mutate via core, save).
"""

from .backup import export_data, import_data
from .base import PersistenceStore
from .habit_store import SqliteHabitStore

__all__ = ["PersistenceStore", "SqliteHabitStore", "export_data", "import_data"]

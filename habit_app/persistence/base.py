"""Persistence store contract."""

from abc import ABC, abstractmethod
from typing import Optional

from ..models.history import HistoryEntry
from ..models.routine import Routine
from ..models.settings import NotificationSettings


class PersistenceStore(ABC):
    """
    Storage collaborator for routines and settings.

    Every call is atomic. Failures surface as ``StorageError`` and leave
    previously persisted state intact.
    """

    @abstractmethod
    def load_routines(self) -> list[Routine]:
        """Load all routines in stored order."""
        pass

    @abstractmethod
    def save_routines(self, routines: list[Routine]) -> None:
        """Replace the stored routine set."""
        pass

    @abstractmethod
    def load_settings(self) -> Optional[NotificationSettings]:
        """Load raw settings, or None if nothing was saved yet."""
        pass

    @abstractmethod
    def save_settings(self, settings: NotificationSettings) -> None:
        """Replace the stored settings record."""
        pass

    def record_history(self, entry: HistoryEntry) -> None:
        """Store a confirmation history entry. Stores without history ignore it."""
        return None

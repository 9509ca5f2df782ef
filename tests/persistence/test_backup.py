"""Tests for JSON backup export and import."""

import os
import tempfile
from datetime import datetime, time, timezone

import pytest

from habit_app.errors import ImportDataError
from habit_app.models.routine import WeeklyFrequency
from habit_app.persistence import SqliteHabitStore
from habit_app.persistence.backup import (
    BACKUP_VERSION, dumps_backup, export_data, import_data, loads_backup
)

from conftest import MONDAY, make_routine, make_settings

EXPORTED_AT = datetime(2024, 1, 2, 8, 30, tzinfo=timezone.utc)


class TestBackup:
    """Test export_data and import_data against the SQLite store."""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.store = SqliteHabitStore(os.path.join(self.temp_dir, "habits.db"))

    def teardown_method(self):
        import shutil
        shutil.rmtree(self.temp_dir)

    def make_target(self) -> SqliteHabitStore:
        return SqliteHabitStore(os.path.join(self.temp_dir, "restored.db"))

    def test_export_contents(self):
        """Exports carry version, date, routines and settings."""
        self.store.save_routines([make_routine("a", streak=2, last_confirmed=MONDAY)])
        self.store.save_settings(make_settings(("07:00", "21:00"), enabled=False))

        data = export_data(self.store, EXPORTED_AT)

        assert data["version"] == BACKUP_VERSION
        assert data["export_date"] == "2024-01-02T08:30:00+00:00"
        assert [r["id"] for r in data["routines"]] == ["a"]
        assert data["routines"][0]["streak"] == 2
        assert data["settings"]["enabled"] is False
        assert data["settings"]["reminder_times"] == ["07:00", "21:00"]

    def test_export_without_settings(self):
        assert export_data(self.store, EXPORTED_AT)["settings"] is None

    def test_restore_into_new_store(self):
        """A serialized export restores the same routines and settings."""
        routines = [
            make_routine("a", streak=2, last_confirmed=MONDAY),
            make_routine("b", WeeklyFrequency(weekdays=frozenset({1, 3})), is_active=False),
        ]
        settings = make_settings(("07:00",), streak_protection=False)
        self.store.save_routines(routines)
        self.store.save_settings(settings)

        target = self.make_target()
        restored = import_data(target, loads_backup(dumps_backup(export_data(self.store, EXPORTED_AT))))

        assert restored == 2
        assert target.load_routines() == routines
        assert target.load_settings() == settings

    def test_settings_merged_over_defaults(self):
        """Keys missing from imported settings take their defaults."""
        import_data(self.store, {"settings": {"enabled": "false", "reminder_times": "06:45"}})

        settings = self.store.load_settings()
        assert settings.enabled is False
        assert settings.reminder_times == (time(6, 45),)
        assert settings.streak_protection is True

    def test_missing_sections_left_alone(self):
        self.store.save_routines([make_routine("keep")])

        assert import_data(self.store, {"settings": {"enabled": True}}) == 0
        assert [r.id for r in self.store.load_routines()] == ["keep"]

    @pytest.mark.parametrize("payload, section", [
        ([], "root"),
        ("backup", "root"),
        ({"routines": {"id": "a"}}, "routines"),
        ({"routines": ["a"]}, "routines"),
        ({"routines": [{"name": "no id"}]}, "routines"),
        ({"routines": [{"id": "a"}, {"id": "a"}]}, "routines"),
        ({"settings": ["07:00"]}, "settings"),
    ])
    def test_invalid_payload_rejected(self, payload, section):
        """Malformed payloads raise and leave stored data untouched."""
        self.store.save_routines([make_routine("keep")])

        with pytest.raises(ImportDataError) as exc_info:
            import_data(self.store, payload)

        assert exc_info.value.section == section
        assert [r.id for r in self.store.load_routines()] == ["keep"]

    def test_bad_routine_rejects_settings_too(self):
        """Nothing is written when any section is invalid."""
        with pytest.raises(ImportDataError):
            import_data(self.store, {
                "routines": [{"id": "a", "last_confirmed": "yesterday"}],
                "settings": {"enabled": False},
            })

        assert self.store.load_settings() is None

    def test_invalid_json(self):
        with pytest.raises(ImportDataError, match="not valid JSON"):
            loads_backup(b"{not json")

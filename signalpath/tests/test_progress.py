"""
Tests for the progress ledger and save storage.
"""

import json

import pytest

from ..progress.ledger import (
    create_default_save_data,
    get_completed_count,
    get_progress,
    is_unlocked,
    migrate_save_data,
    record_completion,
    with_sound_enabled,
)
from ..progress.save_data import CURRENT_SAVE_VERSION, LevelProgress, SaveData
from ..progress.storage import SaveStore, deserialize_save_data, serialize_save_data


LEVEL_IDS = ["a", "b", "c"]


class TestUnlocking:

    def test_first_level_always_open(self):
        assert is_unlocked(create_default_save_data(), 0, LEVEL_IDS)
        assert is_unlocked(create_default_save_data(), 0, [])

    def test_completion_unlocks_next(self):
        save = create_default_save_data()
        assert not is_unlocked(save, 1, ["a", "b"])

        save = record_completion(save, "a", 10, 5)

        assert is_unlocked(save, 1, ["a", "b"])

    def test_only_previous_level_matters(self):
        save = record_completion(create_default_save_data(), "a", 10, 5)
        assert is_unlocked(save, 1, LEVEL_IDS)
        assert not is_unlocked(save, 2, LEVEL_IDS)

    @pytest.mark.parametrize("index", [-1, 3, 10])
    def test_out_of_range_is_locked(self, index):
        save = create_default_save_data()
        for level_id in LEVEL_IDS:
            save = record_completion(save, level_id, 1, 1)
        assert not is_unlocked(save, index, LEVEL_IDS)

    def test_incomplete_record_does_not_unlock(self):
        save = create_default_save_data().model_copy(update={
            "level_progress": {"a": LevelProgress(completed=False)},
        })
        assert not is_unlocked(save, 1, LEVEL_IDS)


class TestRecordCompletion:

    def test_first_completion(self):
        save = record_completion(create_default_save_data(), "a", 12, 3)
        assert get_progress(save, "a") == LevelProgress(completed=True, best_turns=12, best_energy=3)

    def test_best_scores_merge(self):
        """Fewest turns and most energy are kept independently."""
        save = create_default_save_data()
        for turns, energy in [(12, 3), (9, 1), (15, 6)]:
            save = record_completion(save, "a", turns, energy)

        progress = get_progress(save, "a")
        assert progress.best_turns == 9
        assert progress.best_energy == 6

    def test_input_not_mutated(self):
        original = create_default_save_data()
        updated = record_completion(original, "a", 12, 3)

        assert original.level_progress == {}
        assert updated is not original
        assert updated.timestamp >= original.timestamp

    def test_default_progress(self):
        progress = get_progress(create_default_save_data(), "unknown")
        assert progress == LevelProgress(completed=False, best_turns=None, best_energy=None)

    def test_completed_count(self):
        save = create_default_save_data()
        assert get_completed_count(save) == 0
        save = record_completion(save, "a", 1, 1)
        save = record_completion(save, "a", 1, 1)
        save = record_completion(save, "b", 1, 1)
        assert get_completed_count(save) == 2


class TestSaveData:

    def test_defaults(self):
        save = create_default_save_data()
        assert save.version == CURRENT_SAVE_VERSION
        assert save.settings.sound_enabled is True
        assert save.timestamp

    def test_migration_is_identity(self):
        save = create_default_save_data()
        assert migrate_save_data(save) is save

    def test_sound_setting(self):
        save = with_sound_enabled(create_default_save_data(), False)
        assert save.settings.sound_enabled is False

    def test_on_disk_format(self):
        save = record_completion(create_default_save_data(), "a", 8, 2)
        data = json.loads(serialize_save_data(save))

        assert data["version"] == 1
        assert data["levelProgress"]["a"] == {"completed": True, "bestTurns": 8, "bestEnergy": 2}
        assert data["settings"] == {"soundEnabled": True}

    def test_serialization_round_trip(self):
        save = record_completion(create_default_save_data(), "a", 8, 2)
        assert deserialize_save_data(serialize_save_data(save)) == save

    @pytest.mark.parametrize("text", [
        "",
        "{not json",
        "[]",
        '{"version": "one", "timestamp": "t", "levelProgress": {}, "settings": {"soundEnabled": true}}',
        '{"version": 1, "timestamp": "t", "levelProgress": {"a": {"completed": "yes"}}}',
    ])
    def test_corrupt_data_is_none(self, text):
        assert deserialize_save_data(text) is None


class TestSaveStore:

    def test_missing_file_gives_default(self, save_store):
        save = save_store.load()
        assert isinstance(save, SaveData)
        assert save.level_progress == {}

    def test_persist_and_load(self, save_store):
        save = record_completion(create_default_save_data(), "a", 8, 2)
        assert save_store.persist(save)
        assert save_store.load() == save

    def test_creates_parent_directory(self, tmp_path):
        store = SaveStore(tmp_path / "nested" / "dir" / "save.json")
        assert store.persist(create_default_save_data())
        assert store.path.exists()

    def test_corrupt_file_falls_back(self, save_store, caplog):
        save_store.path.write_text("garbage", encoding="utf-8")

        with caplog.at_level("WARNING"):
            save = save_store.load()

        assert save.level_progress == {}
        assert "Corrupt save data" in caplog.text

    def test_non_utf8_file_falls_back(self, save_store, caplog):
        save_store.path.write_bytes(b'{"version": 1, "timestamp": "\xff\xfe"}')

        with caplog.at_level("WARNING"):
            save = save_store.load()

        assert save.version == CURRENT_SAVE_VERSION
        assert save.level_progress == {}
        assert "not valid UTF-8" in caplog.text

    def test_failed_write_leaves_no_temp_file(self, save_store, monkeypatch):
        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("signalpath.progress.storage.os.replace", fail_replace)

        assert not save_store.persist(create_default_save_data())
        assert not save_store.path.exists()
        assert list(save_store.path.parent.iterdir()) == []

    def test_clear(self, save_store):
        save_store.persist(create_default_save_data())
        assert save_store.clear()
        assert not save_store.path.exists()
        # Clearing twice is fine
        assert save_store.clear()

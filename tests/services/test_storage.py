"""Unit tests for studytimer_cli.services.storage."""

from __future__ import annotations

import pytest

from studytimer_cli.exceptions import PersistenceReadError, PersistenceWriteError
from studytimer_cli.services.storage import FileKeyValueStorage


@pytest.fixture()
def storage(tmp_path) -> FileKeyValueStorage:
    return FileKeyValueStorage(tmp_path / "records")


class TestFileKeyValueStorage:
    def test_missing_key_returns_none(self, storage):
        assert storage.get("studySessions") is None

    def test_set_then_get(self, storage):
        storage.set("dailyGoal", "90")
        assert storage.get("dailyGoal") == "90"
        assert (storage.data_dir / "dailyGoal.json").read_text() == "90"

    def test_set_replaces_previous_value(self, storage):
        storage.set("darkMode", "false")
        storage.set("darkMode", "true")
        assert storage.get("darkMode") == "true"

    def test_no_temp_files_left_behind(self, storage):
        storage.set("dailyGoal", "90")
        assert [p.name for p in storage.data_dir.iterdir()] == ["dailyGoal.json"]

    def test_file_is_private(self, storage):
        storage.set("dailyGoal", "90")
        mode = (storage.data_dir / "dailyGoal.json").stat().st_mode & 0o777
        assert mode == 0o600

    @pytest.mark.parametrize("key", ["../escape", "a/b", "", "sp ace"])
    def test_invalid_key_rejected(self, storage, key):
        with pytest.raises(ValueError):
            storage.get(key)

    def test_unreadable_record_raises(self, storage):
        storage.data_dir.mkdir(parents=True)
        (storage.data_dir / "studySessions.json").write_bytes(b"\xff\xfe\x00bad")
        with pytest.raises(PersistenceReadError):
            storage.get("studySessions")

    def test_write_failure_raises(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("x")
        storage = FileKeyValueStorage(blocker)

        with pytest.raises(PersistenceWriteError) as exc_info:
            storage.set("dailyGoal", "90")
        assert exc_info.value.key == "dailyGoal"

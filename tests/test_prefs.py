import json

from sneke.config import BEST_KEY, SPEED_KEY
from sneke.prefs import JsonFileStore, MemoryStore, Preferences


class TestPreferences:
    """Best score and speed over a plain key/value store."""

    def test_defaults(self):
        prefs = Preferences(MemoryStore())
        assert prefs.best_score == 0
        assert prefs.speed == 5

    def test_best_score_only_goes_up(self):
        store = MemoryStore()
        prefs = Preferences(store)
        prefs.best_score = 12
        prefs.best_score = 4
        assert prefs.best_score == 12
        assert store[BEST_KEY] == "12"

    def test_garbage_best_reads_as_zero(self):
        assert Preferences(MemoryStore({BEST_KEY: "lots"})).best_score == 0

    def test_speed_is_clamped(self):
        store = MemoryStore()
        prefs = Preferences(store)
        prefs.speed = 14
        assert store[SPEED_KEY] == "10"
        store[SPEED_KEY] = "0"
        assert prefs.speed == 5


class TestJsonFileStore:
    """Preferences file on disk."""

    def test_missing_file_is_empty(self, tmp_path):
        assert len(JsonFileStore(str(tmp_path / "nope.json"))) == 0

    def test_round_trip_through_disk(self, tmp_path):
        path = str(tmp_path / "prefs.json")
        prefs = Preferences(JsonFileStore(path))
        prefs.best_score = 31
        prefs.speed = 8

        reopened = Preferences(JsonFileStore(path))
        assert reopened.best_score == 31
        assert reopened.speed == 8
        with open(path, encoding="utf-8") as f:
            assert json.load(f) == {BEST_KEY: "31", SPEED_KEY: "8"}

    def test_corrupt_file_falls_back_to_defaults(self, tmp_path, caplog):
        path = tmp_path / "prefs.json"
        path.write_text("{not json", encoding="utf-8")
        prefs = Preferences(JsonFileStore(str(path)))
        assert prefs.best_score == 0
        assert "could not read preferences" in caplog.text

    def test_non_object_is_ignored(self, tmp_path):
        path = tmp_path / "prefs.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert dict(JsonFileStore(str(path))) == {}

    def test_delete(self, tmp_path):
        path = str(tmp_path / "prefs.json")
        store = JsonFileStore(path)
        store[BEST_KEY] = "3"
        del store[BEST_KEY]
        assert BEST_KEY not in JsonFileStore(path)

"""Tests for the device-local key-value stores."""

import json
import stat

from game.client.storage import JsonFileKeyValueStore, MemoryKeyValueStore


class TestMemoryKeyValueStore:
    def test_set_get_delete(self):
        store = MemoryKeyValueStore()
        assert store.get("k") is None
        store.set("k", "v")
        assert store.get("k") == "v"
        store.delete("k")
        assert store.get("k") is None

    def test_delete_missing_key_is_a_no_op(self):
        store = MemoryKeyValueStore({"a": "1"})
        store.delete("missing")
        assert store.get("a") == "1"


class TestJsonFileKeyValueStore:
    def test_file_created_lazily_on_first_write(self, tmp_path):
        path = tmp_path / "nested" / "state.json"
        store = JsonFileKeyValueStore(path)
        assert store.get("k") is None
        assert not path.exists()

        store.set("k", "v")
        assert path.exists()
        assert json.loads(path.read_text()) == {"k": "v"}

    def test_values_survive_a_new_instance(self, tmp_path):
        path = tmp_path / "state.json"
        JsonFileKeyValueStore(path).set("game", '{"x": 1}')
        assert JsonFileKeyValueStore(path).get("game") == '{"x": 1}'

    def test_keys_are_independent(self, tmp_path):
        store = JsonFileKeyValueStore(tmp_path / "state.json")
        store.set("a", "1")
        store.set("b", "2")
        store.delete("a")
        assert store.get("a") is None
        assert store.get("b") == "2"

    def test_state_file_is_owner_only(self, tmp_path):
        path = tmp_path / "state.json"
        JsonFileKeyValueStore(path).set("k", "v")
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_no_temp_files_left_behind(self, tmp_path):
        store = JsonFileKeyValueStore(tmp_path / "state.json")
        store.set("k", "v")
        store.set("k", "w")
        assert [p.name for p in tmp_path.iterdir()] == ["state.json"]

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("{not json")
        store = JsonFileKeyValueStore(path)
        assert store.get("k") is None
        store.set("k", "v")
        assert store.get("k") == "v"

    def test_non_object_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("[1, 2]")
        assert JsonFileKeyValueStore(path).get("k") is None

    def test_non_string_values_are_dropped(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text(json.dumps({"k": 1, "s": "ok"}))
        store = JsonFileKeyValueStore(path)
        assert store.get("k") is None
        assert store.get("s") == "ok"

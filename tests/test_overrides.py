"""Tests for safety override stores."""

import json

import pytest

from aicache.models import SafetyTier
from aicache.overrides import SCHEMA_VERSION, JsonOverrideStore, MemoryOverrideStore


@pytest.fixture(params=["memory", "json"])
def store(request, tmp_path):
    if request.param == "memory":
        return MemoryOverrideStore()
    return JsonOverrideStore(tmp_path / "overrides.json")


class TestOverrideStoreContract:
    def test_get_missing(self, store):
        assert store.get("/a") is None

    def test_set_and_get(self, store):
        store.set("/a", SafetyTier.SAFE)
        assert store.get("/a") == SafetyTier.SAFE

    def test_last_writer_wins(self, store):
        store.set("/a", SafetyTier.SAFE)
        store.set("/a", SafetyTier.DANGER)
        assert store.get("/a") == SafetyTier.DANGER

    def test_remove_one(self, store):
        store.set("/a", SafetyTier.SAFE)
        store.set("/b", SafetyTier.CAUTION)
        store.remove("/a")
        assert store.get("/a") is None
        assert store.get("/b") == SafetyTier.CAUTION

    def test_remove_missing_is_noop(self, store):
        store.remove("/nothing")
        assert store.all() == {}

    def test_clear(self, store):
        store.set("/a", SafetyTier.SAFE)
        store.set("/b", SafetyTier.DANGER)
        store.clear()
        assert store.all() == {}

    def test_all_returns_copy(self, store):
        store.set("/a", SafetyTier.SAFE)
        snapshot = store.all()
        snapshot["/b"] = SafetyTier.DANGER
        assert store.get("/b") is None


class TestJsonOverrideStore:
    def test_persists_across_instances(self, tmp_path):
        file = tmp_path / "overrides.json"
        JsonOverrideStore(file).set("/a", SafetyTier.CAUTION)
        assert JsonOverrideStore(file).get("/a") == SafetyTier.CAUTION

    def test_file_is_versioned(self, tmp_path):
        file = tmp_path / "overrides.json"
        JsonOverrideStore(file).set("/a", SafetyTier.SAFE)

        data = json.loads(file.read_text())
        assert data == {"version": SCHEMA_VERSION, "overrides": {"/a": "safe"}}

    def test_creates_parent_directory(self, tmp_path):
        file = tmp_path / "nested" / "dir" / "overrides.json"
        JsonOverrideStore(file).set("/a", SafetyTier.SAFE)
        assert file.exists()

    def test_missing_file_is_empty(self, tmp_path):
        assert JsonOverrideStore(tmp_path / "none.json").all() == {}

    def test_corrupt_file_is_empty(self, tmp_path):
        file = tmp_path / "overrides.json"
        file.write_text("{not json")
        assert JsonOverrideStore(file).all() == {}

    def test_unknown_tier_dropped(self, tmp_path):
        file = tmp_path / "overrides.json"
        file.write_text(json.dumps({"version": 1, "overrides": {"/a": "safe", "/b": "yolo"}}))
        assert JsonOverrideStore(file).all() == {"/a": SafetyTier.SAFE}

    def test_unsupported_version_ignored(self, tmp_path):
        file = tmp_path / "overrides.json"
        file.write_text(json.dumps({"version": 99, "overrides": {"/a": "safe"}}))
        assert JsonOverrideStore(file).all() == {}

    def test_no_temp_files_left_behind(self, tmp_path):
        file = tmp_path / "overrides.json"
        store = JsonOverrideStore(file)
        store.set("/a", SafetyTier.SAFE)
        store.remove("/a")
        assert [p.name for p in tmp_path.iterdir()] == ["overrides.json"]

    def test_default_location_under_home(self, home):
        store = JsonOverrideStore()
        assert store.file == home / ".aicache" / "overrides.json"

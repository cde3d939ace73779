"""
Unit tests for ArtifactStore
"""

import pytest

from components.sniper_ai.core.artifact_store import ArtifactStore
from components.sniper_ai.errors import PersistenceError


class TestArtifactStore:
    """Test cases for the SQLite key/value store"""

    def test_missing_key_returns_none(self, store):
        assert store.get("sniper-ai-general-model") is None

    def test_put_and_get_bytes(self, store):
        store.put("sniper-ai-general-model", b"\x00\x01weights")

        assert bytes(store.get("sniper-ai-general-model")) == b"\x00\x01weights"

    def test_get_text_decodes(self, store):
        store.put("sniper-ai-general-training", "[]")
        store.put("sniper-ai-safety-training", "[1]".encode("utf-8"))

        assert store.get_text("sniper-ai-general-training") == "[]"
        assert store.get_text("sniper-ai-safety-training") == "[1]"

    def test_put_replaces_existing_value(self, store):
        store.put("key", "old")
        store.put("key", "new")

        assert store.get_text("key") == "new"

    def test_put_many_writes_all_items(self, store):
        store.put_many({"sniper-ai-intent-model": b"w", "sniper-ai-intent-training": "[]"})

        assert store.keys("sniper-ai-intent") == ["sniper-ai-intent-model", "sniper-ai-intent-training"]

    def test_delete_reports_removed_count(self, store):
        store.put_many({"a": "1", "b": "2"})

        assert store.delete("a", "b", "missing") == 2
        assert store.keys() == []

    def test_values_survive_reopen(self, test_config):
        first = ArtifactStore(test_config.db_path)
        first.put("sniper-ai-sentiment-model", b"persisted")
        first.close()

        second = ArtifactStore(test_config.db_path)
        try:
            assert bytes(second.get("sniper-ai-sentiment-model")) == b"persisted"
        finally:
            second.close()

    def test_in_memory_store(self):
        store = ArtifactStore(":memory:")
        store.put("key", "value")

        assert store.get_text("key") == "value"
        store.close()

    def test_closed_store_raises_persistence_error(self, test_config):
        store = ArtifactStore(test_config.db_path)
        store.close()

        with pytest.raises(PersistenceError):
            store.get("key")
        with pytest.raises(PersistenceError):
            store.put("key", "value")

    def test_unopenable_path_raises_persistence_error(self, temp_dir):
        with pytest.raises(PersistenceError):
            ArtifactStore(str(temp_dir / "missing" / "dir" / "store.db"))

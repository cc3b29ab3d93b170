"""Tests for CollectionStore: whole-file JSON collections on disk."""

from __future__ import annotations

import json
import logging
from datetime import datetime

import pytest
from cryptography.fernet import Fernet

from aria.core.storage.codecs import FernetCodec
from aria.core.storage.collection_store import (
    COLLECTION_FILES,
    CONVERSATION_CONTEXT,
    HABITS,
    INSIGHT_CURSOR,
    WELLNESS_ENTRIES,
    CollectionStore,
    CollectionStoreError,
)
from aria.domains.wellness.domain_logic.vocabulary import Mood
from aria.domains.wellness.domain_logic.wellness_models import WellnessEntry


def _entry(id: str = "e1", mood: Mood = Mood.CALM) -> WellnessEntry:
    return WellnessEntry(
        id=id,
        timestamp=datetime(2026, 3, 4, 9, 0),
        mood=mood,
        energy_level=6,
        stress_level=2,
        metadata={"source": "manual_selection"},
    )


class TestLayout:
    def test_every_collection_has_a_file(self):
        assert len(COLLECTION_FILES) == 9
        assert COLLECTION_FILES[WELLNESS_ENTRIES] == "wellness_data.json"
        assert COLLECTION_FILES[INSIGHT_CURSOR] == "insight_cursor.json"

    def test_unknown_collection_raises(self, store: CollectionStore):
        with pytest.raises(CollectionStoreError, match="Unknown collection"):
            store.path("todo_items")


class TestLoadSave:
    def test_missing_file_loads_default(self, store: CollectionStore):
        assert store.load(HABITS, default=[]) == []
        assert store.load(INSIGHT_CURSOR, default={}) == {}

    def test_save_creates_directory_and_round_trips(self, store: CollectionStore):
        assert store.save(HABITS, [{"id": "h1"}]) is True
        assert store.path(HABITS).exists()
        assert store.load(HABITS, default=[]) == [{"id": "h1"}]

    def test_plain_collections_are_json_on_disk(self, store: CollectionStore):
        store.save(HABITS, [{"id": "h1"}])
        assert json.loads(store.path(HABITS).read_text()) == [{"id": "h1"}]

    def test_private_collections_are_not_plain_json(self, store: CollectionStore):
        store.save(WELLNESS_ENTRIES, [{"mood": "anxious"}])
        raw = store.path(WELLNESS_ENTRIES).read_text()
        assert "anxious" not in raw
        with pytest.raises(json.JSONDecodeError):
            json.loads(raw)
        assert store.load(WELLNESS_ENTRIES, default=[]) == [{"mood": "anxious"}]

    def test_conversation_context_is_private(self, store: CollectionStore):
        store.save(CONVERSATION_CONTEXT, {"detected_mood": "tired"})
        assert "tired" not in store.path(CONVERSATION_CONTEXT).read_text()

    def test_fernet_codec_for_private_collections(self, tmp_path):
        store = CollectionStore(tmp_path, private_codec=FernetCodec(Fernet.generate_key().decode()))
        store.save(WELLNESS_ENTRIES, [{"mood": "happy"}])
        assert "happy" not in store.path(WELLNESS_ENTRIES).read_text()
        assert store.load(WELLNESS_ENTRIES, default=[]) == [{"mood": "happy"}]

    def test_corrupt_plain_file_loads_default(self, store: CollectionStore, caplog):
        store.data_dir.mkdir(parents=True)
        store.path(HABITS).write_text("{not json")
        with caplog.at_level(logging.WARNING):
            assert store.load(HABITS, default=[]) == []
        assert "Could not load habits" in caplog.text

    def test_corrupt_private_file_loads_default(self, store: CollectionStore):
        store.data_dir.mkdir(parents=True)
        store.path(WELLNESS_ENTRIES).write_text('[{"mood": "calm"}]')
        assert store.load(WELLNESS_ENTRIES, default=[]) == []

    def test_corrupt_file_is_overwritten_by_next_save(self, store: CollectionStore):
        store.data_dir.mkdir(parents=True)
        store.path(HABITS).write_text("garbage")
        store.save(HABITS, [{"id": "h2"}])
        assert store.load(HABITS, default=[]) == [{"id": "h2"}]

    def test_unserializable_payload_returns_false(self, store: CollectionStore, caplog):
        with caplog.at_level(logging.ERROR):
            assert store.save(HABITS, [object()]) is False
        assert "Failed to save habits" in caplog.text


class TestRecords:
    def test_records_round_trip(self, store: CollectionStore):
        entries = [_entry("e1"), _entry("e2", Mood.STRESSED)]
        store.save_records(WELLNESS_ENTRIES, entries)
        loaded = store.load_records(WELLNESS_ENTRIES, WellnessEntry.from_dict)
        assert loaded == entries

    def test_malformed_records_are_dropped(self, store: CollectionStore, caplog):
        good = _entry("good").to_dict()
        bad_enum = dict(good, id="bad", mood="ecstatic")
        missing = {"id": "missing-timestamp"}
        store.save(WELLNESS_ENTRIES, [good, bad_enum, missing])
        with caplog.at_level(logging.WARNING):
            loaded = store.load_records(WELLNESS_ENTRIES, WellnessEntry.from_dict)
        assert [e.id for e in loaded] == ["good"]
        assert "Skipping malformed" in caplog.text

    def test_non_list_collection_loads_empty(self, store: CollectionStore):
        store.save(HABITS, {"id": "h1"})
        assert store.load_records(HABITS, WellnessEntry.from_dict) == []

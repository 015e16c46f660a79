import json

import pytest

from src.studio_register.studio_register.core.exceptions import StorageError
from src.studio_register.studio_register.register.model import RegisterSession
from src.studio_register.studio_register.storage.local_store import JsonFileStore, MemoryStore
from src.studio_register.studio_register.storage.record_store import load_records, save_records


def test_unparseable_collection_falls_back_to_empty():
    store = MemoryStore({"bb_sessions": "{not json"})
    assert load_records(store, "bb_sessions", RegisterSession.from_dict) == []

    store.set("bb_sessions", json.dumps({"id": "s1"}))
    assert load_records(store, "bb_sessions", RegisterSession.from_dict) == []


def test_malformed_records_are_skipped():
    rows = [
        {"id": "s1", "classId": "c1", "startedAtISO": "2025-01-05T17:00:00.000Z", "marks": {"a": "PRESENT"}},
        {"id": "s2", "classId": "c1", "startedAtISO": "yesterday", "marks": {}},
        {"id": "s3", "startedAtISO": "2025-01-12T17:00:00.000Z"},
    ]
    store = MemoryStore({"bb_sessions": json.dumps(rows)})

    sessions = load_records(store, "bb_sessions", RegisterSession.from_dict)

    assert [s.id for s in sessions] == ["s1"]


def test_missing_key_is_empty_collection():
    assert load_records(MemoryStore(), "bb_points", RegisterSession.from_dict) == []


def test_json_file_store_round_trip(tmp_path):
    store = JsonFileStore(tmp_path / "data")
    assert store.get("bb_classes") is None

    store.set("bb_classes", "[]")
    store.set("bb_classes", '[{"id": "c1"}]')

    assert store.get("bb_classes") == '[{"id": "c1"}]'
    assert sorted(p.name for p in (tmp_path / "data").iterdir()) == ["bb_classes.json"]


def test_json_file_store_write_failure_raises_storage_error(tmp_path):
    blocker = tmp_path / "data"
    blocker.write_text("a file, not a directory")
    store = JsonFileStore(blocker)

    with pytest.raises(StorageError):
        store.set("bb_classes", "[]")


def test_save_records_writes_wire_shape():
    store = MemoryStore()
    session = RegisterSession.from_dict(
        {"id": "s1", "classId": "c1", "startedAtISO": "2025-01-05T17:00:00Z", "marks": {"a": "LATE"}}
    )

    save_records(store, "bb_sessions", [session])

    [row] = json.loads(store.get("bb_sessions"))
    assert row["marks"] == {"a": "LATE"}
    assert row["deleted"] is False
    assert row["closedAtISO"] is None

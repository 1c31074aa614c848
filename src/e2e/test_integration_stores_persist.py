import json
from pathlib import Path

import pytest

from coach.DB.api import make_local_store, make_remote_store
from coach.DB.json_store import JsonFileLocalStore
from coach.errors import RemoteStoreError, StoreConfigError


@pytest.mark.e2e
def test_sqlite_remote_store_roundtrip(tmp_path: Path):
    db = tmp_path / "remote" / "history.sqlite"
    store = make_remote_store(f"sqlite:///{db}")
    try:
        a = store.insert({"user_id": "u1", "date": "2026-10-01T00:00:00Z", "original_text": "first"})
        b = store.insert({"user_id": "u1", "date": "2026-10-02T00:00:00Z", "original_text": "second",
                          "grammar_version": "Second."})
        store.insert({"user_id": "u2", "date": "2026-10-03T00:00:00Z", "original_text": "other"})
        assert "-" in a["id"]
        rows = store.select_all("u1")
        assert [r["original_text"] for r in rows] == ["second", "first"]
        assert rows[0]["grammar_version"] == "Second."
        assert "casual_version" not in rows[0]
        store.delete(b["id"], "u1")
        store.delete(b["id"], "u1")
        store.delete(a["id"], "u2")  # not the owner
        assert [r["id"] for r in store.select_all("u1")] == [a["id"]]
    finally:
        store.close()
    assert db.exists()


@pytest.mark.e2e
def test_sqlite_insert_without_user_is_rejected(tmp_path: Path):
    store = make_remote_store(f"sqlite:///{tmp_path / 'h.sqlite'}")
    try:
        with pytest.raises(RemoteStoreError):
            store.insert({"original_text": "anon"})
    finally:
        store.close()


@pytest.mark.e2e
def test_json_local_store_writes_one_serialized_value(tmp_path: Path):
    path = tmp_path / "storage.json"
    store = make_local_store(f"json:///{path}")
    assert store.read_all() == []
    items = [{"id": "1", "originalText": "a"}, {"id": "2", "originalText": "b"}]
    store.write_all(items)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert isinstance(data["eng_improve_history"], str)
    assert json.loads(data["eng_improve_history"]) == items
    assert make_local_store(f"json:///{path}").read_all() == items


@pytest.mark.e2e
def test_json_local_store_keeps_other_keys_and_survives_corruption(tmp_path: Path):
    path = tmp_path / "storage.json"
    path.write_text(json.dumps({"theme": "dark", "eng_improve_history": "{oops"}), encoding="utf-8")
    store = JsonFileLocalStore(str(path), key="eng_improve_history")
    assert store.read_all() == []
    store.write_all([{"id": "9", "originalText": "x"}])
    assert json.loads(path.read_text(encoding="utf-8"))["theme"] == "dark"


def test_unknown_dsn_is_rejected():
    with pytest.raises(StoreConfigError):
        make_remote_store("postgres://nope")
    with pytest.raises(ValueError):
        make_local_store("redis://nope")

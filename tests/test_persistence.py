# tests/test_persistence.py

import os

import pytest

from core.persistence import InMemoryDocumentStore, JsonDirectoryStore, PersistenceError


# === in-memory store ===


def test_in_memory_store_copies_values():
    store = InMemoryDocumentStore()
    value = {"firstSequence": {"Math": 12}}

    store.put("marks/s1", value)
    value["firstSequence"]["Math"] = 0

    assert store.get("marks/s1") == {"firstSequence": {"Math": 12}}
    assert store.get("missing") is None


def test_in_memory_batch_applies_all_operations():
    store = InMemoryDocumentStore({"marks/s1": {}, "comments/s1": {}})

    batch = store.batch()
    batch.put("students", []).delete("marks/s1").delete("comments/s1")

    assert len(batch) == 3
    assert store.keys() == ["comments/s1", "marks/s1"]

    batch.commit()

    assert store.keys() == ["students"]


def test_batch_commits_only_once():
    store = InMemoryDocumentStore()
    batch = store.batch().put("students", [])
    batch.commit()

    with pytest.raises(PersistenceError):
        batch.commit()


# === json directory store ===


def test_json_store_round_trip(tmp_path):
    store = JsonDirectoryStore(str(tmp_path))

    store.put("students", [{"id": "s1", "name": "Alice Mbah"}])
    store.put("marks/s1", {"id": "s1", "firstSequence": {"Math": 18.0}})

    assert store.get("students") == [{"id": "s1", "name": "Alice Mbah"}]
    assert store.get("marks/s1")["firstSequence"] == {"Math": 18.0}
    assert os.path.exists(tmp_path / "marks" / "s1.json")
    assert store.keys() == ["marks/s1", "students"]


def test_json_store_writes_sorted_indented_json(tmp_path):
    store = JsonDirectoryStore(str(tmp_path))
    store.put("subjects", {"b": 1, "a": 2})

    text = (tmp_path / "subjects.json").read_text()

    assert text == '{\n  "a": 2,\n  "b": 1\n}'


def test_json_store_delete(tmp_path):
    store = JsonDirectoryStore(str(tmp_path))
    store.put("quickStats", {})

    store.delete("quickStats")
    store.delete("quickStats")

    assert store.get("quickStats") is None


def test_json_store_batch(tmp_path):
    store = JsonDirectoryStore(str(tmp_path))
    store.put("marks/s1", {"id": "s1"})

    batch = store.batch()
    batch.put("students", [])
    batch.delete("marks/s1")
    batch.commit()

    assert store.keys() == ["students"]


def test_json_store_failed_batch_leaves_documents_untouched(tmp_path):
    store = JsonDirectoryStore(str(tmp_path))
    store.put("students", [{"id": "s1", "name": "Alice Mbah"}])

    batch = store.batch()
    batch.put("students", [])
    batch.put("subjects", {"bad": object()})

    with pytest.raises(PersistenceError):
        batch.commit()

    assert store.get("students") == [{"id": "s1", "name": "Alice Mbah"}]
    assert not any(name.endswith(".tmp") for name in os.listdir(tmp_path))


@pytest.mark.parametrize("key", ["", "/etc/passwd", "../outside", "marks//s1"])
def test_json_store_rejects_invalid_keys(tmp_path, key):
    store = JsonDirectoryStore(str(tmp_path))

    with pytest.raises(PersistenceError):
        store.put(key, {})


def test_json_store_read_error(tmp_path):
    (tmp_path / "students.json").write_text("{not json")
    store = JsonDirectoryStore(str(tmp_path))

    with pytest.raises(PersistenceError):
        store.get("students")

from __future__ import annotations

import json
import os
import stat
from pathlib import Path

import pytest

from models import TaskStatus
from storage import PersistenceError, Storage
from store import TaskStore


def test_load_missing_file_creates_empty_snapshot(storage: Storage, tasks_path: Path) -> None:
    store = storage.load()
    assert len(store) == 0
    assert store.next_id == 1
    assert json.loads(tasks_path.read_text()) == []


def test_save_then_load_round_trips(storage: Storage) -> None:
    store = TaskStore()
    store.add("buy milk")
    store.add("write report")
    store.add("call mum")
    store.set_status(2, TaskStatus.DONE)
    store.delete(1)
    storage.save(store)

    loaded = storage.load()
    assert [t.to_dict() for t in loaded.tasks] == [t.to_dict() for t in store.tasks]
    assert [t.created_at for t in loaded.tasks] == [t.created_at for t in store.tasks]
    assert loaded.next_id == 4


def test_snapshot_layout(storage: Storage, tasks_path: Path) -> None:
    store = TaskStore()
    store.add("buy milk")
    storage.save(store)

    text = tasks_path.read_text()
    assert text.startswith('[\n  {\n    "id": 1,\n    "description": "buy milk",\n    "status": "todo",')
    entry = json.loads(text)[0]
    assert list(entry) == ["id", "description", "status", "created_at", "updated_at"]
    # no temp files left behind
    assert [p.name for p in tasks_path.parent.iterdir()] == ["tasks.json"]


def test_load_accepts_foreign_rfc3339_timestamps(storage: Storage, tasks_path: Path) -> None:
    tasks_path.write_text(json.dumps([{
        "id": 5,
        "description": "imported",
        "status": "in-progress",
        "created_at": "2024-03-01T08:00:00.123456789+01:00",
        "updated_at": "2024-03-02T08:00:00Z",
    }]))
    store = storage.load()
    assert store.get(5).status is TaskStatus.IN_PROGRESS
    assert store.next_id == 6


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        '{"id": 1}',
        "[1, 2]",
        '[{"id": 1, "description": "x"}]',
        '[{"id": 1, "description": "x", "status": "later",'
        ' "created_at": "2024-01-01T00:00:00", "updated_at": "2024-01-01T00:00:00"}]',
    ],
)
def test_load_corrupt_snapshot_raises(storage: Storage, tasks_path: Path, content: str) -> None:
    tasks_path.write_text(content)
    with pytest.raises(PersistenceError):
        storage.load()


def test_load_rejects_duplicate_ids(storage: Storage, tasks_path: Path) -> None:
    entry = {
        "id": 1,
        "description": "x",
        "status": "todo",
        "created_at": "2024-01-01T00:00:00",
        "updated_at": "2024-01-01T00:00:00",
    }
    tasks_path.write_text(json.dumps([entry, entry]))
    with pytest.raises(PersistenceError, match="duplicate"):
        storage.load()


def test_load_unreadable_path_raises(tmp_path: Path) -> None:
    # a directory exists but cannot be read as a file
    with pytest.raises(PersistenceError):
        Storage(tmp_path).load()


def test_save_failure_raises_and_cleans_up(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    storage = Storage(tmp_path / "tasks.json")
    store = TaskStore()
    store.add("x")

    def _boom(src, dst):
        raise PermissionError("read-only filesystem")

    monkeypatch.setattr("storage.os.replace", _boom)
    with pytest.raises(PersistenceError, match="read-only"):
        storage.save(store)
    assert list(tmp_path.iterdir()) == []


def test_load_null_snapshot_is_empty(storage: Storage, tasks_path: Path) -> None:
    tasks_path.write_text("null")
    store = storage.load()
    assert len(store) == 0
    assert store.next_id == 1


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_save_keeps_existing_file_mode(storage: Storage, tasks_path: Path) -> None:
    storage.load()
    tasks_path.chmod(0o644)
    store = storage.load()
    store.add("x")
    storage.save(store)
    assert stat.S_IMODE(tasks_path.stat().st_mode) == 0o644

    tasks_path.chmod(0o640)
    storage.save(store)
    assert stat.S_IMODE(tasks_path.stat().st_mode) == 0o640


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_new_snapshot_mode_follows_umask(storage: Storage, tasks_path: Path) -> None:
    old = os.umask(0o022)
    try:
        storage.load()
    finally:
        os.umask(old)
    assert stat.S_IMODE(tasks_path.stat().st_mode) == 0o644

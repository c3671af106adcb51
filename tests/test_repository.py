from __future__ import annotations

import datetime as dt
import json

import pytest

from tests.helpers.slots import FlakySlot
from todokeep.errors import ErrorKind, PersistenceError
from todokeep.models import SCHEMA_VERSION, Task
from todokeep.store import MemorySlot, TaskRepository

LEGACY_RECORDS = [
    {
        "id": 1705314600000.5,
        "text": "Buy bread",
        "completed": False,
        "createdAt": "2024-01-15T10:30:00.000Z",
    },
    {
        "id": 1705314700000.25,
        "text": "Walk the dog",
        "completed": True,
        "createdAt": "2024-01-15T10:31:40.000Z",
    },
]


def _sample_tasks() -> list[Task]:
    base = dt.datetime(2024, 3, 1, 8, 0, 0, 123456, tzinfo=dt.UTC)
    return [
        Task(id=1, text="A", created_at=base),
        Task(id=2, text="B &amp; C", completed=True, created_at=base + dt.timedelta(minutes=1)),
        Task(id=3, text="D", created_at=base + dt.timedelta(minutes=2)),
    ]


def _key_fields(tasks: list[Task]) -> list[tuple[object, str, bool, dt.datetime]]:
    return [(t.id, t.text, t.completed, t.created_at) for t in tasks]


def test_load_missing_key_is_empty(repository: TaskRepository) -> None:
    assert repository.load() == []


def test_save_then_load_roundtrip(repository: TaskRepository) -> None:
    tasks = _sample_tasks()
    repository.save(tasks)
    loaded = repository.load()
    assert _key_fields(loaded) == _key_fields(tasks)


def test_saved_payload_shape(slot: MemorySlot, repository: TaskRepository) -> None:
    repository.save(_sample_tasks())
    raw = slot.get("todoList")
    assert raw is not None
    data = json.loads(raw)
    assert data["version"] == SCHEMA_VERSION
    assert isinstance(data["timestamp"], str)
    dt.datetime.fromisoformat(data["timestamp"].replace("Z", "+00:00"))
    assert [r["id"] for r in data["tasks"]] == [1, 2, 3]
    first = data["tasks"][0]
    assert set(first) == {"id", "text", "completed", "createdAt"}
    assert isinstance(first["createdAt"], str)


def test_custom_key_and_version() -> None:
    slot = MemorySlot()
    repo = TaskRepository(slot, key="other", version="2.0.0")
    repo.save([Task(id=1, text="x")])
    assert slot.get("todoList") is None
    assert json.loads(slot.get("other") or "{}")["version"] == "2.0.0"


def test_load_legacy_bare_list(slot: MemorySlot, repository: TaskRepository) -> None:
    slot.set("todoList", json.dumps(LEGACY_RECORDS))
    loaded = repository.load()
    assert [t.text for t in loaded] == ["Buy bread", "Walk the dog"]
    assert [t.completed for t in loaded] == [False, True]
    assert loaded[0].id == 1705314600000.5
    assert loaded[0].created_at == dt.datetime(2024, 1, 15, 10, 30, tzinfo=dt.UTC)


def test_old_envelope_and_legacy_list_load_the_same(slot: MemorySlot) -> None:
    repo = TaskRepository(slot)
    slot.set("todoList", json.dumps(LEGACY_RECORDS))
    from_list = repo.load()

    envelope = {
        "version": "0.9.0",
        "timestamp": "2024-01-15T10:32:00.000Z",
        "tasks": LEGACY_RECORDS,
    }
    slot.set("todoList", json.dumps(envelope))
    from_envelope = repo.load()

    assert _key_fields(from_list) == _key_fields(from_envelope)


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        '"just a string"',
        '{"version": "1.0.0"}',
        '{"tasks": {"id": 1}}',
        '[{"id": 1}]',
        '[{"id": "abc", "text": "x", "completed": false, "createdAt": "2024-01-01T00:00:00Z"}]',
        '[{"id": 1, "text": "x", "completed": false, "createdAt": "yesterday"}]',
        "[42]",
        '[{"id": 1e999, "text": "x", "completed": false, "createdAt": "2024-01-01T00:00:00Z"}]',
    ],
)
def test_load_malformed_raises_persistence_error(
    raw: str, slot: MemorySlot, repository: TaskRepository
) -> None:
    slot.set("todoList", raw)
    with pytest.raises(PersistenceError) as ei:
        repository.load()
    assert ei.value.kind is ErrorKind.PERSISTENCE_ERROR


def test_load_rejects_records_sharing_an_id(slot: MemorySlot, repository: TaskRepository) -> None:
    record = {"text": "a", "completed": False, "createdAt": "2024-01-01T00:00:00Z"}
    slot.set("todoList", json.dumps([{"id": 3, **record}, {"id": 3.0, **record, "text": "b"}]))
    with pytest.raises(PersistenceError):
        repository.load()


def test_save_failure_raises_persistence_error() -> None:
    slot = FlakySlot()
    slot.fail_writes = True
    repo = TaskRepository(slot)
    with pytest.raises(PersistenceError) as ei:
        repo.save(_sample_tasks())
    assert ei.value.__cause__ is not None


def test_save_over_quota_raises_persistence_error() -> None:
    repo = TaskRepository(MemorySlot(max_bytes=64))
    with pytest.raises(PersistenceError):
        repo.save(_sample_tasks())


def test_unreadable_slot_raises_persistence_error() -> None:
    slot = FlakySlot()
    slot.fail_reads = True
    with pytest.raises(PersistenceError):
        TaskRepository(slot).load()


def test_clear_removes_key(slot: MemorySlot, repository: TaskRepository) -> None:
    repository.save(_sample_tasks())
    repository.clear()
    assert slot.get("todoList") is None
    assert repository.load() == []


def test_clear_failure_is_swallowed() -> None:
    slot = FlakySlot()
    slot.fail_deletes = True
    TaskRepository(slot).clear()

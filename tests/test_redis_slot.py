from __future__ import annotations

import uuid

import pytest

from todokeep.service import TodoService
from todokeep.store import SlotError, TaskRepository


@pytest.fixture()
def key_prefix() -> str:
    return f"testtodo:{uuid.uuid4()}"


def test_set_get_delete(redis_url: str, key_prefix: str) -> None:
    from todokeep.store.redis_slot import RedisSlot

    slot = RedisSlot(url=redis_url, key_prefix=key_prefix)
    assert slot.get("todoList") is None
    slot.set("todoList", '{"tasks": []}')
    assert slot.get("todoList") == '{"tasks": []}'
    assert slot.get_client().get(f"{key_prefix}:todoList") == '{"tasks": []}'
    slot.delete("todoList")
    assert slot.get("todoList") is None


def test_service_persists_across_instances(redis_url: str, key_prefix: str) -> None:
    from todokeep.store.redis_slot import RedisSlot

    first = TodoService(TaskRepository(RedisSlot(url=redis_url, key_prefix=key_prefix)))
    a = first.add("Write tests")
    first.add("Ship it")
    first.toggle(a.id)

    # Recreate slot to simulate process restart
    second = TodoService(TaskRepository(RedisSlot(url=redis_url, key_prefix=key_prefix)))
    assert [t.text for t in second.list("completed")] == ["Write tests"]
    assert second.stats() == {"total": 2, "completed": 1, "pending": 1}
    second.clear()


def test_redis_errors_become_slot_errors() -> None:
    import redis as _redis

    from todokeep.store.redis_slot import RedisSlot

    class _Boom:
        def get(self, *args: object, **kwargs: object) -> object:
            raise _redis.exceptions.ConnectionError("boom")

        def set(self, *args: object, **kwargs: object) -> object:
            raise _redis.exceptions.ConnectionError("boom")

        def delete(self, *args: object, **kwargs: object) -> object:
            raise _redis.exceptions.ConnectionError("boom")

    slot = RedisSlot(client=_Boom())
    with pytest.raises(SlotError):
        slot.get("k")
    with pytest.raises(SlotError):
        slot.set("k", "v")
    with pytest.raises(SlotError):
        slot.delete("k")


def test_bytes_values_are_decoded() -> None:
    from todokeep.store.redis_slot import RedisSlot

    class _BytesClient:
        def get(self, key: str) -> bytes:
            return b'{"ok": true}'

    assert RedisSlot(client=_BytesClient()).get("k") == '{"ok": true}'

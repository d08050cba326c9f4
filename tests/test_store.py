import asyncio

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from hero_server.database.store import Store
from hero_server.utils.leaderboard_exceptions import StoreError


class SlowClient:
    async def get(self, key):
        await asyncio.sleep(1)
        return "late"


class BrokenClient:
    async def hgetall(self, key):
        raise RedisConnectionError("connection refused")


@pytest.mark.asyncio
async def test_set_if_absent_only_sets_once(store):
    assert await store.set_if_absent("k", "first")
    assert not await store.set_if_absent("k", "second")
    assert await store.get("k") == "first"


@pytest.mark.asyncio
async def test_missing_hash_is_empty(store):
    assert await store.hgetall("missing") == {}


@pytest.mark.asyncio
async def test_hgetall_many_keeps_key_order(store):
    await store.hset("h:a", {"name": "a"})
    await store.hset("h:b", {"name": "b"})

    rows = await store.hgetall_many(["h:b", "h:missing", "h:a"])

    assert rows == [{"name": "b"}, {}, {"name": "a"}]
    assert await store.hgetall_many([]) == []


@pytest.mark.asyncio
async def test_sorted_set_operations(store):
    await store.zadd("board", "a", 10)
    await store.zadd("board", "b", 30)
    await store.zadd("board", "c", 20)

    assert await store.zcard("board") == 3
    assert await store.zrevrank("board", "b") == 0
    assert await store.zrevrank("board", "zzz") is None
    assert await store.zrevrange_with_scores("board", 0, 1) == [("b", 30.0), ("c", 20.0)]


@pytest.mark.asyncio
async def test_transaction_applies_queued_writes(store):
    async def body(pipe):
        current = await pipe.get("counter")
        pipe.multi()
        pipe.set("counter", str(int(current or 0) + 1))
        return "done"

    assert await store.transaction("increment", ["counter"], body) == "done"
    assert await store.get("counter") == "1"


@pytest.mark.asyncio
async def test_timeout_becomes_store_error():
    store = Store(client=SlowClient(), timeout=0.01)
    with pytest.raises(StoreError) as exc_info:
        await store.get("k")
    assert exc_info.value.operation == "get k"


@pytest.mark.asyncio
async def test_redis_error_becomes_store_error():
    store = Store(client=BrokenClient(), timeout=1.0)
    with pytest.raises(StoreError) as exc_info:
        await store.hgetall("player:stats:u1")
    assert "connection refused" in str(exc_info.value)
    assert exc_info.value.user_message.startswith("Storage is temporarily unavailable")

import asyncio
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

import redis.asyncio as redis
from redis.asyncio.client import Pipeline
from redis.exceptions import RedisError, WatchError

from hero_server.config import Config
from hero_server.utils.leaderboard_exceptions import StoreError
from hero_server.utils.logger import setup_logger
from hero_server.utils.redis_utils import RedisUtils


class Store:
    """Key-value store backed by Redis.

    Every call is bounded by ``timeout`` seconds. Transport errors and timeouts
    surface as ``StoreError``; ``WatchError`` from an optimistic transaction is
    passed through untouched so the caller can retry.
    """

    def __init__(self, client: Optional[redis.Redis] = None, timeout: float = None):
        self.logger = setup_logger(__name__)
        self.client = client
        self.timeout = timeout if timeout is not None else Config.REDIS_TIMEOUT_SECONDS

    async def initialize(self):
        """Open the Redis connection unless a client was injected"""
        if self.client is not None:
            return

        self.logger.info("Initializing store...")
        self.client = await RedisUtils.create_redis_client(timeout=self.timeout)
        if self.client is None:
            raise StoreError("initialize", "no reachable Redis instance configured")
        self.logger.info("Store initialized successfully")

    async def close(self):
        if self.client is not None:
            await self.client.aclose()
            self.client = None

    async def _call(self, operation: str, awaitable: Awaitable) -> Any:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except WatchError:
            raise
        except asyncio.TimeoutError:
            self.logger.warning(f"Store operation {operation} timed out after {self.timeout}s")
            raise StoreError(operation, f"timed out after {self.timeout}s")
        except (RedisError, OSError) as e:
            self.logger.error(f"Store operation {operation} failed: {e}")
            raise StoreError(operation, str(e)) from e

    async def ping(self) -> bool:
        return bool(await self._call("ping", self.client.ping()))

    # Strings

    async def get(self, key: str) -> Optional[str]:
        return await self._call(f"get {key}", self.client.get(key))

    async def set(self, key: str, value: str):
        await self._call(f"set {key}", self.client.set(key, value))

    async def set_if_absent(self, key: str, value: str) -> bool:
        """Atomically set ``key`` only if it does not exist yet (SET NX)."""
        result = await self._call(f"setnx {key}", self.client.set(key, value, nx=True))
        return bool(result)

    # Hashes

    async def hgetall(self, key: str) -> Dict[str, str]:
        return await self._call(f"hgetall {key}", self.client.hgetall(key)) or {}

    async def hset(self, key: str, mapping: Dict[str, str]):
        await self._call(f"hset {key}", self.client.hset(key, mapping=mapping))

    async def hgetall_many(self, keys: List[str]) -> List[Dict[str, str]]:
        """HGETALL for several keys in one pipelined round-trip, in key order."""
        if not keys:
            return []

        async def batch():
            async with self.client.pipeline(transaction=False) as pipe:
                for key in keys:
                    pipe.hgetall(key)
                return await pipe.execute()

        rows = await self._call(f"hgetall x{len(keys)}", batch())
        return [row or {} for row in rows]

    # Sorted sets

    async def zadd(self, key: str, member: str, score: float):
        await self._call(f"zadd {key}", self.client.zadd(key, {member: score}))

    async def zrevrank(self, key: str, member: str) -> Optional[int]:
        """Zero-based position counted from the highest score, None if absent."""
        return await self._call(f"zrevrank {key}", self.client.zrevrank(key, member))

    async def zscore(self, key: str, member: str) -> Optional[float]:
        return await self._call(f"zscore {key}", self.client.zscore(key, member))

    async def zcard(self, key: str) -> int:
        return await self._call(f"zcard {key}", self.client.zcard(key))

    async def zrevrange_with_scores(self, key: str, start: int, end: int) -> List[Tuple[str, float]]:
        rows = await self._call(
            f"zrevrange {key}",
            self.client.zrevrange(key, start, end, withscores=True)
        )
        return list(rows or [])

    # Transactions

    async def transaction(
        self,
        operation: str,
        watch_keys: List[str],
        body: Callable[[Pipeline], Awaitable[Any]],
    ) -> Any:
        """Run one optimistic transaction attempt.

        ``body`` receives a pipeline already watching ``watch_keys``. It reads
        in immediate mode, calls ``pipe.multi()``, queues its writes and
        returns its result; the queued writes are executed atomically. A
        concurrent change to a watched key raises ``WatchError``.
        """
        async def attempt():
            async with self.client.pipeline(transaction=True) as pipe:
                await pipe.watch(*watch_keys)
                result = await body(pipe)
                await pipe.execute()
                return result

        return await self._call(operation, attempt())

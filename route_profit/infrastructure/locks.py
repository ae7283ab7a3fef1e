"""
Redis-based distributed lock.

Used to serialise history writes when several API workers share one
history store: append + truncate must not interleave, otherwise two
writers could both read the same "latest id" or trim each other's rows.

Implementation uses SET NX EX for acquire and a Lua script for
atomic check-and-delete on release.  Acquisition can optionally wait,
polling until ``wait_seconds`` have elapsed.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator

import redis.asyncio as aioredis

from route_profit.config import settings
from route_profit.domain.errors import LockUnavailable

logger = logging.getLogger(__name__)

HISTORY_LOCK_KEY = "route_history"

_RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
else
    return 0
end
"""

_pool: aioredis.ConnectionPool | None = None


async def get_redis() -> aioredis.Redis:
    """Return a Redis client backed by a lazily created shared pool."""
    global _pool
    if _pool is None:
        _pool = aioredis.ConnectionPool.from_url(settings.redis_url, decode_responses=True)
    return aioredis.Redis(connection_pool=_pool)


class DistributedLock:
    def __init__(
        self,
        client: aioredis.Redis,
        key: str,
        ttl_seconds: int = 30,
        wait_seconds: float = 0.0,
        poll_interval: float = 0.05,
    ):
        self.redis = client
        self.key = f"lock:{key}"
        self.ttl = ttl_seconds
        self.wait_seconds = wait_seconds
        self.poll_interval = poll_interval
        self.token = str(uuid.uuid4())

    async def acquire(self) -> bool:
        """Try to acquire once. Returns True on success."""
        return bool(
            await self.redis.set(self.key, self.token, nx=True, ex=self.ttl)
        )

    async def acquire_waiting(self) -> bool:
        """Retry ``acquire`` until it succeeds or ``wait_seconds`` runs out."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.wait_seconds
        while True:
            if await self.acquire():
                return True
            if loop.time() >= deadline:
                return False
            await asyncio.sleep(self.poll_interval)

    async def release(self) -> None:
        """Release only if we still own the lock (atomic via Lua)."""
        await self.redis.eval(_RELEASE_SCRIPT, 1, self.key, self.token)

    # context-manager support
    async def __aenter__(self):
        acquired = await self.acquire_waiting()
        if not acquired:
            raise LockUnavailable(f"Could not acquire lock: {self.key}")
        return self

    async def __aexit__(self, *args):
        await self.release()


@asynccontextmanager
async def history_write_lock() -> AsyncIterator[None]:
    """Hold the history lock when locking is enabled; otherwise a no-op."""
    if not settings.history_lock_enabled:
        yield
        return
    client = await get_redis()
    async with DistributedLock(
        client,
        HISTORY_LOCK_KEY,
        ttl_seconds=settings.history_lock_ttl_seconds,
        wait_seconds=settings.history_lock_wait_seconds,
    ):
        logger.debug("History lock acquired")
        yield

"""Redis-backed rate-limit store shared by several worker processes."""

import logging
import uuid
from typing import AsyncContextManager, List, Optional

import redis.asyncio as redis

logger = logging.getLogger(__name__)


class RedisRateLimitStore:
    """Sorted set of timestamps per key, with a Redis lock per key.

    Scores are the request timestamps; members carry a random suffix so
    identical timestamps do not collapse. Keys expire one window after the
    last write, which evicts idle clients.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379",
        window_seconds: float = 3600.0,
        prefix: str = "fact_checker:ratelimit",
        lock_timeout: float = 5.0,
        client: Optional[redis.Redis] = None,
    ):
        self.redis_url = redis_url
        self._window = window_seconds
        self._prefix = prefix
        self._lock_timeout = lock_timeout
        self._client = client

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            self._client = redis.from_url(self.redis_url, decode_responses=True)
            logger.info(f"🔌 Rate-limit store using Redis at {self.redis_url}")
        return self._client

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}"

    def lock(self, key: str) -> AsyncContextManager:
        return self.client.lock(
            f"{self._prefix}:lock:{key}",
            timeout=self._lock_timeout,
            blocking_timeout=self._lock_timeout,
        )

    async def get(self, key: str) -> List[float]:
        entries = await self.client.zrange(self._key(key), 0, -1, withscores=True)
        return [score for _, score in entries]

    async def prune(self, key: str, cutoff: float) -> None:
        await self.client.zremrangebyscore(self._key(key), "-inf", cutoff)

    async def append(self, key: str, timestamp: float) -> None:
        member = f"{timestamp}:{uuid.uuid4().hex}"
        async with self.client.pipeline(transaction=True) as pipe:
            pipe.zadd(self._key(key), {member: timestamp})
            pipe.expire(self._key(key), int(self._window) + 1)
            await pipe.execute()

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

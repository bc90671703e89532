"""In-process rate-limit store for single-process deployments."""

import asyncio
from collections import deque
from typing import AsyncContextManager, Deque, Dict, List


class InMemoryRateLimitStore:
    """Per-key timestamp deques guarded by striped asyncio locks.

    A fixed pool of locks keeps memory bounded no matter how many client
    keys are seen; keys whose window empties are evicted on prune.
    """

    def __init__(self, lock_stripes: int = 64):
        self._records: Dict[str, Deque[float]] = {}
        self._locks = [asyncio.Lock() for _ in range(max(1, lock_stripes))]

    def lock(self, key: str) -> AsyncContextManager:
        return self._locks[hash(key) % len(self._locks)]

    async def get(self, key: str) -> List[float]:
        return list(self._records.get(key, ()))

    async def prune(self, key: str, cutoff: float) -> None:
        record = self._records.get(key)
        if record is None:
            return
        while record and record[0] <= cutoff:
            record.popleft()
        if not record:
            del self._records[key]

    async def append(self, key: str, timestamp: float) -> None:
        self._records.setdefault(key, deque()).append(timestamp)

    def __len__(self) -> int:
        return len(self._records)

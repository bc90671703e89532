"""Rolling-window admission control in front of the costly upstream."""

import logging
import time
from typing import Callable, Optional

from ..ports.rate_limit_store import RateLimitStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_REQUESTS = 15
DEFAULT_WINDOW_MS = 60 * 60 * 1000


class AdmissionGate:
    """Tracks per-key request counts in a rolling time window.

    The same gate serves both the authoritative server-side check (keyed by
    caller network identity) and the client-side advisory check (keyed by a
    single local identity); the two use independent stores.
    """

    def __init__(
        self,
        store: RateLimitStore,
        max_requests: int = DEFAULT_MAX_REQUESTS,
        window_ms: int = DEFAULT_WINDOW_MS,
        clock: Optional[Callable[[], float]] = None,
    ):
        """Initialize the gate.

        Args:
            store: Backing record store
            max_requests: Quota N per window
            window_ms: Window length W in milliseconds
            clock: Returns the current time in seconds (defaults to time.time)
        """
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_ms < 1:
            raise ValueError("window_ms must be positive")
        self._store = store
        self._max_requests = max_requests
        self._window = window_ms / 1000.0
        self._clock = clock or time.time

    @property
    def max_requests(self) -> int:
        return self._max_requests

    @property
    def window_seconds(self) -> float:
        return self._window

    async def check_limit(self, key: str) -> bool:
        """Record an attempt for ``key`` if it is within quota.

        Returns:
            True if the request is admitted, False if the quota is exhausted
        """
        async with self._store.lock(key):
            now = self._clock()
            await self._store.prune(key, now - self._window)
            timestamps = await self._store.get(key)
            if len(timestamps) >= self._max_requests:
                logger.info(f"🚦 Admission rejected for {key}: {len(timestamps)}/{self._max_requests} in window")
                return False
            await self._store.append(key, now)
            return True

    async def remaining(self, key: str) -> int:
        """Get the number of requests ``key`` may still make in the window."""
        async with self._store.lock(key):
            await self._store.prune(key, self._clock() - self._window)
            count = len(await self._store.get(key))
        return max(0, min(self._max_requests, self._max_requests - count))

    async def retry_after(self, key: str) -> float:
        """Seconds until the next slot frees up for ``key`` (0 if one is free)."""
        async with self._store.lock(key):
            now = self._clock()
            await self._store.prune(key, now - self._window)
            timestamps = await self._store.get(key)
        if len(timestamps) < self._max_requests:
            return 0.0
        oldest = timestamps[len(timestamps) - self._max_requests]
        return max(0.0, oldest + self._window - now)

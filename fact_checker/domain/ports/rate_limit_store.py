"""Port for the admission gate's per-key record store."""

from typing import AsyncContextManager, List, Protocol


class RateLimitStore(Protocol):
    """Storage for request timestamps keyed by client identity.

    Timestamps are seconds since the epoch, kept in ascending order. The
    admission gate performs its prune/read/append sequence while holding
    ``lock(key)``; backends shared between processes must make that lock
    effective across processes.
    """

    def lock(self, key: str) -> AsyncContextManager:
        """Return the critical-section guard for ``key``."""
        ...

    async def get(self, key: str) -> List[float]:
        """Return the recorded timestamps for ``key``."""
        ...

    async def prune(self, key: str, cutoff: float) -> None:
        """Drop timestamps at or before ``cutoff``."""
        ...

    async def append(self, key: str, timestamp: float) -> None:
        """Record a new timestamp for ``key``."""
        ...

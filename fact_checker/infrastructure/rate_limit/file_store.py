"""JSON-file rate-limit store backing the client-side advisory gate."""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import AsyncContextManager, Dict, List

logger = logging.getLogger(__name__)


class JsonFileRateLimitStore:
    """Keeps timestamps in a small JSON file so limits survive restarts."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    def lock(self, key: str) -> AsyncContextManager:
        return self._lock

    def _read(self) -> Dict[str, List[float]]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"⚠️ Resetting unreadable rate-limit file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"⚠️ Resetting malformed rate-limit file {self.path}")
            return {}
        try:
            return {k: sorted(float(t) for t in v) for k, v in data.items() if isinstance(v, list)}
        except (TypeError, ValueError) as e:
            logger.warning(f"⚠️ Resetting rate-limit file {self.path} with bad timestamps: {e}")
            return {}

    def _write(self, data: Dict[str, List[float]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f)
        os.replace(tmp, self.path)

    async def get(self, key: str) -> List[float]:
        return self._read().get(key, [])

    async def prune(self, key: str, cutoff: float) -> None:
        data = self._read()
        if key not in data:
            return
        kept = [t for t in data[key] if t > cutoff]
        if kept:
            data[key] = kept
        else:
            del data[key]
        self._write(data)

    async def append(self, key: str, timestamp: float) -> None:
        data = self._read()
        data.setdefault(key, []).append(timestamp)
        self._write(data)

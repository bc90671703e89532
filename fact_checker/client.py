"""HTTP client for the fact-checking service with a local advisory quota."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import httpx

from .domain.errors import AdmissionRejected, FactCheckError
from .domain.services.admission_gate import DEFAULT_MAX_REQUESTS, DEFAULT_WINDOW_MS, AdmissionGate
from .infrastructure.rate_limit.file_store import JsonFileRateLimitStore

logger = logging.getLogger(__name__)

LOCAL_CLIENT_KEY = "local"
DEFAULT_STATE_PATH = Path.home() / ".fact_checker" / "rate_limit.json"


class FactCheckClient:
    """Calls ``/api/extract-article`` and ``/api/analyze``.

    Before each analysis the client consults its own admission gate, backed
    by a JSON file under the user's home directory. The gate is advisory:
    the server enforces the authoritative limit and a 429 from the server
    is surfaced as ``AdmissionRejected`` either way.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        state_path: Optional[Path] = None,
        max_requests: int = DEFAULT_MAX_REQUESTS,
        window_ms: int = DEFAULT_WINDOW_MS,
        timeout: float = 600.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._gate = AdmissionGate(
            JsonFileRateLimitStore(state_path or DEFAULT_STATE_PATH),
            max_requests=max_requests,
            window_ms=window_ms,
        )
        self._http = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "FactCheckClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._http.aclose()

    async def remaining_checks(self) -> int:
        """Checks left in the local window."""
        return await self._gate.remaining(LOCAL_CLIENT_KEY)

    async def extract_article(self, url: str) -> Dict[str, Any]:
        """Extract an article server-side.

        Returns:
            The ``data`` object of the extraction response
        """
        payload = await self._post("/api/extract-article", {"url": url})
        return payload["data"]

    async def analyze(self, text: str) -> Dict[str, Any]:
        """Analyze article text.

        Raises:
            AdmissionRejected: If the local or the server quota is exhausted
            FactCheckError: For any other failure reported by the server
        """
        if not await self._gate.check_limit(LOCAL_CLIENT_KEY):
            retry_after = await self._gate.retry_after(LOCAL_CLIENT_KEY)
            logger.warning(f"🚦 Local limit reached, retry in {retry_after:.0f}s")
            raise AdmissionRejected(retry_after=retry_after)
        return await self._post("/api/analyze", {"input": text})

    async def _post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = await self._http.post(path, json=body)
        except httpx.TimeoutException as e:
            raise FactCheckError("The request timed out", status_code=408, detail=str(e)) from e
        except httpx.HTTPError as e:
            raise FactCheckError("Could not reach the fact-checking service", detail=str(e)) from e

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if response.status_code == 429:
            raise AdmissionRejected(retry_after=float(response.headers.get("Retry-After", 0)))
        if response.status_code >= 400:
            raise FactCheckError(
                payload.get("error") or f"Request failed with status {response.status_code}",
                status_code=response.status_code,
            )
        return payload

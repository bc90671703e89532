"""Search provider interface for evidence retrieval."""

from typing import Dict, List, Protocol

from ..models.evidence import SearchHit


class EvidenceSearchProvider(Protocol):
    """Protocol for backends answering ``web_evidence_search`` calls."""

    async def initialize(self) -> None:
        """Initialize the provider and verify connection."""
        ...

    async def search(
        self,
        query: str,
        time_window_days: int,
        max_results: int,
    ) -> List[SearchHit]:
        """Search for dated passages matching the query.

        Raises:
            UpstreamError: If the backend fails
            UpstreamTimeoutError: If the backend does not answer in time
        """
        ...

    async def shutdown(self) -> None:
        """Shutdown the provider and clean up resources."""
        ...

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        ...

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        ...

    @property
    def capabilities(self) -> Dict[str, bool]:
        """Get the provider's capabilities."""
        ...

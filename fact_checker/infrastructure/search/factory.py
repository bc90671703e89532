"""Registry of evidence search backends."""

import logging
from typing import Dict, Type

from ...domain.ports.search_provider import EvidenceSearchProvider
from .wikipedia_search_adapter import WikipediaSearchAdapter

logger = logging.getLogger(__name__)


class SearchProviderFactory:
    """Maps backend names to adapter classes and owns the live instances.

    One instance per backend name is kept; the container asks for it once
    at startup and the evidence stage holds on to it.
    """

    def __init__(self):
        self._adapters: Dict[str, Type[EvidenceSearchProvider]] = {}
        self._instances: Dict[str, EvidenceSearchProvider] = {}

        self.register_provider("wikipedia", WikipediaSearchAdapter)

    def register_provider(self, name: str, adapter_class: Type[EvidenceSearchProvider]) -> None:
        """Register a search backend under ``name``.

        Raises:
            ValueError: If the name is taken
        """
        if name in self._adapters:
            raise ValueError(f"Search backend {name} already registered")
        self._adapters[name] = adapter_class

    def create_provider(self, name: str, **config) -> EvidenceSearchProvider:
        """Return the backend instance for ``name``, building it on first use.

        Adapters open their connections lazily, on the first search.
        Keyword arguments are passed to the adapter constructor and are
        ignored once an instance exists.

        Raises:
            ValueError: If no backend is registered under ``name``
        """
        if name not in self._adapters:
            raise ValueError(f"Search backend {name} not registered")

        if name not in self._instances:
            self._instances[name] = self._adapters[name](**config)
            logger.info(f"🔨 Created search backend '{name}'")
        return self._instances[name]

    async def shutdown_all(self) -> None:
        """Close and forget every live backend."""
        while self._instances:
            _, provider = self._instances.popitem()
            await provider.shutdown()

    @property
    def available_providers(self) -> Dict[str, bool]:
        """Backend name to whether a live, connected instance exists."""
        return {
            name: bool(name in self._instances and self._instances[name].is_available)
            for name in self._adapters
        }

"""Factory for creating and managing AI providers."""

import logging
from typing import Any, Callable, Dict

from ...domain.errors import ConfigurationError
from ..config import Settings
from .openai_adapter import OpenAIAdapter, OpenAIConfig

logger = logging.getLogger(__name__)


class AIProviderFactory:
    """Factory for creating and managing AI providers.

    A provider here serves both structured completions and moderation.
    """

    def __init__(self, settings: Settings):
        """Initialize the factory."""
        self._settings = settings
        self._providers: Dict[str, Callable[[Settings], Any]] = {}
        self._instances: Dict[str, Any] = {}

        # Register default providers
        self.register_provider("openai", self._build_openai)

    def register_provider(self, name: str, builder: Callable[[Settings], Any]) -> None:
        """Register a new AI provider.

        Args:
            name: Provider name
            builder: Callable building the provider from settings
        """
        self._providers[name] = builder

    def create_provider(self, name: str) -> Any:
        """Create a provider instance, reusing an existing one.

        Args:
            name: Provider name

        Returns:
            Provider instance (initialized lazily on first call)

        Raises:
            ValueError: If provider not found
        """
        if name not in self._providers:
            raise ValueError(f"Provider '{name}' not found")

        if name not in self._instances:
            self._instances[name] = self._providers[name](self._settings)
            logger.info(f"🔨 Created AI provider '{name}'")
        return self._instances[name]

    async def initialize_all(self) -> None:
        """Initialize every created provider that has credentials."""
        for name, provider in self._instances.items():
            try:
                await provider.initialize()
            except ConfigurationError:
                logger.warning(f"⚠️ AI provider '{name}' not initialized: credentials missing")

    @property
    def available_providers(self) -> Dict[str, bool]:
        """Get dictionary of registered providers and their availability."""
        return {
            name: bool(getattr(self._instances.get(name), "is_available", False))
            for name in self._providers
        }

    async def shutdown(self) -> None:
        """Shutdown all provider instances."""
        for provider in self._instances.values():
            await provider.shutdown()
        self._instances.clear()

    @staticmethod
    def _build_openai(settings: Settings) -> OpenAIAdapter:
        return OpenAIAdapter(
            config=OpenAIConfig(
                api_key=settings.openai_api_key,
                moderation_model=settings.moderation_model,
                timeout=settings.upstream_timeout,
            )
        )

"""Dependency injection configuration for hexagonal architecture."""

import logging
from functools import lru_cache
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from ..domain.ports.rate_limit_store import RateLimitStore
from ..domain.services.admission_gate import AdmissionGate
from ..domain.services.evidence_stage import EvidenceStage
from ..domain.services.extraction_stage import ExtractionStage
from ..domain.services.fact_checking_service import FactCheckingService
from ..domain.services.moderation_gate import ModerationGate
from ..domain.services.structured_completion import StructuredCompletion
from ..domain.services.verification_stage import VerificationStage
from ..domain.models.evidence import EvidencePolicy
from .ai.factory import AIProviderFactory
from .article.trafilatura_fetcher import ArticleFetcherConfig, TrafilaturaArticleFetcher
from .config import Settings
from .rate_limit.memory_store import InMemoryRateLimitStore
from .rate_limit.redis_store import RedisRateLimitStore
from .search.factory import SearchProviderFactory
from .search.wikipedia_search_adapter import WikipediaSearchConfig

logger = logging.getLogger(__name__)


def build_rate_limit_store(settings: Settings) -> RateLimitStore:
    """Create the admission store selected by ``RATE_LIMIT_BACKEND``."""
    if settings.rate_limit_backend == "redis":
        return RedisRateLimitStore(
            redis_url=settings.redis_url,
            window_seconds=settings.rate_limit_window_ms / 1000.0,
        )
    if settings.rate_limit_backend != "memory":
        logger.warning(f"⚠️ Unknown rate-limit backend '{settings.rate_limit_backend}', using memory")
    return InMemoryRateLimitStore()


class ServiceContainer:
    """Service container for dependency injection."""

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize service container.

        Args:
            settings: Configuration; read from the environment when omitted
        """
        self.settings = settings or Settings.from_env()
        self.ai_factory = AIProviderFactory(self.settings)
        self.search_factory = SearchProviderFactory()
        self._services: Dict[str, Any] = {}
        self._setup_services()

    def _setup_services(self):
        """Setup all services and their dependencies."""
        logger.info("🔧 Setting up service container...")
        settings = self.settings

        # Infrastructure adapters
        openai_provider = self.ai_factory.create_provider("openai")
        search = self.search_factory.create_provider(
            "wikipedia",
            config=WikipediaSearchConfig(
                user_agent=settings.wikipedia_user_agent,
                language=settings.wikipedia_language,
                timeout=settings.search_timeout,
            ),
        )
        store = build_rate_limit_store(settings)
        fetcher = TrafilaturaArticleFetcher(
            ArticleFetcherConfig(timeout=settings.article_fetch_timeout)
        )

        # Domain services
        completion = StructuredCompletion(
            provider=openai_provider,
            model=settings.model,
            max_turns=settings.tool_loop_max_turns,
        )
        admission_gate = AdmissionGate(
            store,
            max_requests=settings.rate_limit_max_requests,
            window_ms=settings.rate_limit_window_ms,
        )
        fact_checking_service = FactCheckingService(
            admission_gate=admission_gate,
            moderation_gate=ModerationGate(openai_provider),
            extraction_stage=ExtractionStage(completion),
            evidence_stage=EvidenceStage(completion, search),
            verification_stage=VerificationStage(completion),
            credentials_configured=settings.credentials_configured,
            max_input_length=settings.max_input_length,
            evidence_policy=EvidencePolicy(time_window_days=settings.evidence_time_window_days),
            request_deadline=settings.request_deadline,
        )

        # Register services
        self._services = {
            'rate_limit_store': store,
            'admission_gate': admission_gate,
            'article_fetcher': fetcher,
            'fact_checking_service': fact_checking_service,
        }

        logger.info("✅ Service container setup completed")

    def get(self, service_name: str) -> Any:
        """Get a service by name.

        Args:
            service_name: Name of the service

        Returns:
            Service instance

        Raises:
            KeyError: If service not found
        """
        if service_name not in self._services:
            raise KeyError(f"Service '{service_name}' not found")
        return self._services[service_name]

    def get_fact_checking_service(self) -> FactCheckingService:
        """Get fact checking service."""
        return self.get('fact_checking_service')

    def get_article_fetcher(self) -> TrafilaturaArticleFetcher:
        """Get article fetcher."""
        return self.get('article_fetcher')

    async def startup(self) -> None:
        """Initialize providers that have credentials."""
        await self.ai_factory.initialize_all()

    async def shutdown(self) -> None:
        """Release provider, fetcher and store resources."""
        await self.ai_factory.shutdown()
        await self.search_factory.shutdown_all()
        await self.get_article_fetcher().shutdown()
        store = self.get('rate_limit_store')
        if isinstance(store, RedisRateLimitStore):
            await store.close()


# Global service container instance
@lru_cache()
def get_service_container() -> ServiceContainer:
    """Get global service container instance.

    Returns:
        Service container instance
    """
    load_dotenv()
    return ServiceContainer()


# Convenience functions for FastAPI dependency injection
def get_fact_checking_service() -> FactCheckingService:
    """FastAPI dependency for fact checking service."""
    return get_service_container().get_fact_checking_service()


def get_article_fetcher() -> TrafilaturaArticleFetcher:
    """FastAPI dependency for the article fetcher."""
    return get_service_container().get_article_fetcher()

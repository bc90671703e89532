"""Health check endpoints."""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ...infrastructure.dependencies import ServiceContainer, get_service_container

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(
    container: ServiceContainer = Depends(get_service_container),
) -> Dict[str, Any]:
    """Check the health of all service components.

    Returns:
        Overall status plus AI and search provider availability
    """
    settings = container.settings
    return {
        "status": "healthy" if settings.credentials_configured else "degraded",
        "version": "0.1.0",
        "model": settings.model,
        "rate_limit_backend": settings.rate_limit_backend,
        "ai_providers": {
            name.title(): is_active
            for name, is_active in container.ai_factory.available_providers.items()
        },
        "search_providers": {
            name.title(): is_active
            for name, is_active in container.search_factory.available_providers.items()
        },
    }

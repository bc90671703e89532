"""Article extraction endpoint."""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ...domain.errors import ArticleExtractionError, FactCheckError
from ...domain.ports.article_fetcher import ArticleFetcher
from ...infrastructure.dependencies import get_article_fetcher

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["extract-article"])


class ExtractArticleRequest(BaseModel):
    """Request model for article extraction."""

    url: Any = Field(default=None, description="Absolute http(s) URL of the article")


@router.post("/extract-article")
async def extract_article(
    request: ExtractArticleRequest,
    fetcher: ArticleFetcher = Depends(get_article_fetcher),
) -> Dict[str, Any]:
    """Fetch a URL and return its readable content and metadata."""
    try:
        article = await fetcher.fetch(request.url)
    except FactCheckError as e:
        logger.error(f"❌ Article extraction failed ({e.status_code}): {e.detail or e.public_message}")
        raise
    except Exception as e:
        logger.exception(f"❌ Unexpected article extraction failure: {e}")
        raise ArticleExtractionError(detail=str(e)) from e

    return {
        "success": True,
        "data": article.model_dump(by_alias=True),
        "originalUrl": request.url,
    }

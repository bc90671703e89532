"""Article fetcher using httpx for download and trafilatura for extraction."""

import asyncio
import logging
from typing import Optional
from urllib.parse import urlparse

import httpx
import trafilatura
from pydantic import BaseModel, Field
from trafilatura.metadata import extract_metadata

from ...domain.errors import ArticleExtractionError, ValidationError
from ...domain.models.article import ExtractedArticle

logger = logging.getLogger(__name__)

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class ArticleFetcherConfig(BaseModel):
    """Configuration for the article fetcher."""

    timeout: float = Field(default=10.0, description="Fetch timeout in seconds")
    min_content_length: int = Field(default=100, description="Shortest acceptable article text")
    excerpt_length: int = Field(default=200, description="Characters used for a fallback excerpt")
    user_agent: str = Field(default=BROWSER_USER_AGENT)


def validate_url(url) -> str:
    """Check that ``url`` is an absolute http(s) URL.

    Raises:
        ValidationError: If the URL is missing or malformed
    """
    if not url or not isinstance(url, str) or not url.strip():
        raise ValidationError("URL is required")
    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValidationError("Invalid URL format")
    return url


class TrafilaturaArticleFetcher:
    """Downloads a page and extracts its main content as plain text."""

    def __init__(self, config: Optional[ArticleFetcherConfig] = None):
        self._config = config or ArticleFetcherConfig()
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._config.timeout,
                follow_redirects=True,
                headers={
                    "User-Agent": self._config.user_agent,
                    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                    "Accept-Language": "en-US,en;q=0.9",
                },
            )
        return self._client

    async def fetch(self, url: str) -> ExtractedArticle:
        """Fetch ``url`` and extract the article.

        Args:
            url: Absolute http(s) URL

        Returns:
            Extracted article

        Raises:
            ValidationError: If the URL is malformed
            ArticleExtractionError: If fetching or extraction fails
        """
        url = validate_url(url)
        client = await self._get_client()

        logger.info(f"📰 Fetching article: {url}")
        try:
            response = await client.get(url)
        except httpx.TimeoutException as e:
            raise ArticleExtractionError(
                "Request timeout - the article took too long to load",
                status_code=408,
                detail=str(e),
            ) from e
        except httpx.HTTPError as e:
            raise ArticleExtractionError(detail=f"{type(e).__name__}: {e}") from e

        if response.status_code >= 400:
            raise self._status_error(response)

        html = response.text
        article = await asyncio.to_thread(self._extract, html, str(response.url))
        logger.info(f"✅ Extracted {article.length} chars from {url}")
        return article

    def _status_error(self, response: httpx.Response) -> ArticleExtractionError:
        status = response.status_code
        if status == 403:
            return ArticleExtractionError(
                "Access denied - this website blocks automated requests", status_code=403
            )
        if status == 404:
            return ArticleExtractionError(
                "Article not found - the URL may be invalid or the article has been removed",
                status_code=404,
            )
        if status >= 500:
            return ArticleExtractionError(
                "Website server error - please try again later", status_code=status
            )
        return ArticleExtractionError(
            f"Failed to fetch URL: {status} {response.reason_phrase}", status_code=status
        )

    def _extract(self, html: str, url: str) -> ExtractedArticle:
        content = trafilatura.extract(
            html,
            url=url,
            include_comments=False,
            include_tables=False,
            favor_precision=True,
        )
        if not content:
            raise ArticleExtractionError(
                "Could not extract article content from this URL", status_code=400
            )

        content = content.strip()
        if len(content) < self._config.min_content_length:
            raise ArticleExtractionError(
                "Extracted content is too short - this may not be a valid article",
                status_code=400,
            )

        metadata = extract_metadata(html, default_url=url)
        title = (metadata.title if metadata else None) or ""
        author = metadata.author if metadata else None
        date = metadata.date if metadata else None
        excerpt = (metadata.description if metadata else None) or content[: self._config.excerpt_length]

        return ExtractedArticle(
            title=title,
            content=content,
            length=len(content),
            excerpt=excerpt,
            site_name=metadata.sitename if metadata else None,
            byline=author,
            published_time=date,
            publish_date=date,
            author=author,
        )

    async def shutdown(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

"""Port for turning an article URL into plain text."""

from typing import Protocol

from ..models.article import ExtractedArticle


class ArticleFetcher(Protocol):
    """Fetches an HTML page and extracts its readable content."""

    async def fetch(self, url: str) -> ExtractedArticle:
        """Fetch and extract an article.

        Raises:
            ArticleExtractionError: With the status code to surface
        """
        ...

    async def shutdown(self) -> None:
        """Release HTTP resources."""
        ...

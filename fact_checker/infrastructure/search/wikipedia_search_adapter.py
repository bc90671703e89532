"""Wikipedia implementation of the evidence search provider interface."""

import asyncio
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple
from urllib.parse import quote

import httpx
import wikipediaapi
from cachetools import TTLCache
from pydantic import BaseModel, Field

from ...domain.errors import UpstreamError, UpstreamTimeoutError
from ...domain.models.evidence import SearchHit

logger = logging.getLogger(__name__)

_SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+")
_TAG = re.compile(r"<[^>]+>")


class WikipediaSearchConfig(BaseModel):
    """Configuration for the Wikipedia search adapter."""

    user_agent: str = Field(
        default="ArticleFactChecker/1.0",
        description="User agent for Wikipedia API"
    )
    language: str = Field(default="en", description="Wikipedia language edition")
    timeout: float = Field(default=10.0, description="Bound on one search call, page lookups included")
    cache_ttl: int = Field(default=3600, description="Cache TTL in seconds")
    cache_maxsize: int = Field(default=1000, description="Maximum cache size")
    max_passage_sentences: int = Field(default=3, description="Sentences kept per passage")
    max_passage_chars: int = Field(default=600, description="Characters kept per passage")


class WikipediaSearchAdapter:
    """Answers ``web_evidence_search`` calls from Wikipedia.

    Full-text search goes through the MediaWiki search API; passages come
    from the page summary (falling back to the search snippet). A page's
    last revision time stands in for its publication date and is used to
    apply the requested freshness window.
    """

    def __init__(
        self,
        config: Optional[WikipediaSearchConfig] = None,
        provider_name: str = "Wikipedia",
    ):
        """Initialize the adapter.

        Args:
            config: Adapter configuration
            provider_name: Name of the provider
        """
        self._config = config or WikipediaSearchConfig()
        self._name = provider_name
        self._client: Optional[httpx.AsyncClient] = None
        self._wiki = None
        self._cache = TTLCache(
            maxsize=self._config.cache_maxsize,
            ttl=self._config.cache_ttl
        )

    @property
    def domain(self) -> str:
        return f"{self._config.language}.wikipedia.org"

    async def initialize(self) -> None:
        """Initialize the HTTP client and the Wikipedia API client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=f"https://{self.domain}",
                timeout=self._config.timeout,
                headers={"User-Agent": self._config.user_agent},
            )
        if self._wiki is None:
            self._wiki = wikipediaapi.Wikipedia(
                user_agent=self._config.user_agent,
                language=self._config.language,
                timeout=self._config.timeout,
            )

    async def search(
        self,
        query: str,
        time_window_days: int,
        max_results: int,
    ) -> List[SearchHit]:
        """Search for dated passages matching the query.

        Args:
            query: Search query
            time_window_days: Maximum age of sources in days
            max_results: Maximum number of results

        Returns:
            Hits ordered by relevance, at most ``max_results``
        """
        await self.initialize()

        cache_key = f"search:{self._config.language}:{query}:{time_window_days}:{max_results}"
        if cache_key in self._cache:
            return self._cache[cache_key]

        query = self._preprocess_query(query)
        if not query:
            return []

        try:
            hits = await asyncio.wait_for(
                self._search(query, time_window_days, max_results),
                timeout=self._config.timeout,
            )
        except asyncio.TimeoutError as e:
            raise UpstreamTimeoutError(
                detail=f"wikipedia search exceeded {self._config.timeout}s: {query}"
            ) from e

        logger.info(f"📚 Wikipedia search '{query}': {len(hits)} hits within {time_window_days}d")
        self._cache[cache_key] = hits
        return hits

    async def _search(self, query: str, time_window_days: int, max_results: int) -> List[SearchHit]:
        try:
            response = await self._client.get(
                "/w/api.php",
                params={
                    "action": "query",
                    "list": "search",
                    "srsearch": query,
                    "srlimit": max_results * 2,
                    "srprop": "snippet|timestamp",
                    "format": "json",
                    "formatversion": 2,
                },
            )
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(detail=f"wikipedia search timed out: {query}") from e
        except httpx.HTTPError as e:
            raise UpstreamError(detail=f"wikipedia search failed: {e}") from e

        cutoff = datetime.now(timezone.utc) - timedelta(days=time_window_days)
        fresh = []
        for item in response.json().get("query", {}).get("search", []):
            title = item.get("title", "")
            revised = self._parse_timestamp(item.get("timestamp"))
            if title and revised is not None and revised >= cutoff:
                fresh.append((item, title, revised))

        pages = await asyncio.gather(
            *(asyncio.to_thread(self._fetch_page, title) for _, title, _ in fresh)
        )

        scored = []
        for (item, title, revised), (url, summary) in zip(fresh, pages):
            passage = self._trim_passage(summary or self._clean_snippet(item.get("snippet", "")))
            if not passage:
                continue

            scored.append((
                self._calculate_relevance(query, title, passage),
                SearchHit(
                    url=url or self._page_url(title),
                    title=title,
                    published_at=revised.isoformat(),
                    passage=passage,
                    domain=self.domain,
                ),
            ))

        # Sort by relevance and limit results
        scored.sort(key=lambda pair: pair[0], reverse=True)
        return [hit for _, hit in scored[:max_results]]

    def _fetch_page(self, title: str) -> Tuple[str, str]:
        """Get the canonical URL and summary of a page (blocking)."""
        try:
            page = self._wiki.page(title)
            if not page.exists():
                return "", ""
            return page.fullurl, page.summary
        except Exception as e:
            logger.warning(f"⚠️ Could not load Wikipedia page '{title}', using search snippet: {e}")
            return "", ""

    def _page_url(self, title: str) -> str:
        return f"https://{self.domain}/wiki/{quote(title.replace(' ', '_'))}"

    def _trim_passage(self, text: str) -> str:
        sentences = [s for s in _SENTENCE_SPLIT.split(text.strip()) if s]
        passage = " ".join(sentences[: self._config.max_passage_sentences])
        return passage[: self._config.max_passage_chars].strip()

    @staticmethod
    def _clean_snippet(snippet: str) -> str:
        return " ".join(_TAG.sub("", snippet).split())

    @staticmethod
    def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
        if not value:
            return None
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None

    def _preprocess_query(self, query: str) -> str:
        """Preprocess search query.

        - Remove special characters
        - Normalize whitespace
        """
        query = re.sub(r'[^\w\s%.-]', ' ', query)
        query = ' '.join(query.split())
        return query

    def _calculate_relevance(
        self,
        query: str,
        title: str,
        passage: str,
    ) -> float:
        """Calculate relevance score for search result.

        Term overlap with the title weighs 0.6 and with the passage 0.4;
        an exact query match in the title boosts the score.
        """
        query = query.lower()
        title = title.lower()
        passage = passage.lower()

        query_terms = set(re.findall(r'\w+', query))
        if not query_terms:
            return 0.0

        title_matches = len(query_terms.intersection(re.findall(r'\w+', title)))
        passage_matches = len(query_terms.intersection(re.findall(r'\w+', passage)))

        score = (
            (title_matches / len(query_terms)) * 0.6 +
            (passage_matches / len(query_terms)) * 0.4
        )

        if query in title:
            score = min(1.0, score * 1.5)

        return min(1.0, score)

    async def shutdown(self) -> None:
        """Shutdown the provider and clean up resources."""
        if self._client:
            await self._client.aclose()
            self._client = None
        self._wiki = None
        self._cache.clear()

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        return self._name

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        return self._client is not None

    @property
    def capabilities(self) -> Dict[str, bool]:
        """Get the provider's capabilities."""
        return {
            "search": True,
            "freshness_filter": True,
            "caching": True,
        }

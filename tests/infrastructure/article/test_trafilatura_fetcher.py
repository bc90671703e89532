"""Tests for the article fetcher."""

from types import SimpleNamespace

import httpx
import pytest

from fact_checker.domain.errors import ArticleExtractionError, ValidationError
from fact_checker.infrastructure.article import trafilatura_fetcher
from fact_checker.infrastructure.article.trafilatura_fetcher import (
    BROWSER_USER_AGENT,
    TrafilaturaArticleFetcher,
    validate_url,
)

ARTICLE_TEXT = (
    "Annual inflation eased to 3.4% in March 2024, down from 3.6% in February, "
    "the Australian Bureau of Statistics said on Wednesday. Treasurer Jim Chalmers "
    "welcomed the figures."
)

HTML = "<html><head><title>Inflation eases</title></head><body><article><p>...</p></article></body></html>"


def _fetcher(handler) -> TrafilaturaArticleFetcher:
    fetcher = TrafilaturaArticleFetcher()
    fetcher._client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler),
        headers={"User-Agent": BROWSER_USER_AGENT},
        follow_redirects=True,
    )
    return fetcher


@pytest.fixture
def fake_trafilatura(monkeypatch):
    """Replace the extraction calls with canned results."""
    state = {"content": ARTICLE_TEXT, "metadata": None}

    def extract(html, url=None, **kwargs):
        state["extract_kwargs"] = kwargs
        return state["content"]

    def extract_metadata(html, default_url=None):
        return state["metadata"]

    monkeypatch.setattr(trafilatura_fetcher.trafilatura, "extract", extract)
    monkeypatch.setattr(trafilatura_fetcher, "extract_metadata", extract_metadata)
    return state


@pytest.mark.parametrize(
    "url, message",
    [
        (None, "URL is required"),
        ("", "URL is required"),
        ("   ", "URL is required"),
        (123, "URL is required"),
        ("not a url", "Invalid URL format"),
        ("ftp://example.com/a", "Invalid URL format"),
        ("https://", "Invalid URL format"),
    ],
)
def test_validate_url(url, message):
    with pytest.raises(ValidationError) as exc_info:
        validate_url(url)
    assert exc_info.value.public_message == message
    assert exc_info.value.status_code == 400


def test_validate_url_strips_whitespace():
    assert validate_url("  https://example.com/story ") == "https://example.com/story"


@pytest.mark.asyncio
async def test_fetch_extracts_article_with_metadata(fake_trafilatura):
    fake_trafilatura["metadata"] = SimpleNamespace(
        title="Inflation eases",
        author="Jane Reporter",
        date="2024-04-24",
        sitename="Example News",
        description="Inflation fell in March.",
    )
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, html=HTML)

    fetcher = _fetcher(handler)
    article = await fetcher.fetch("https://news.example.com/inflation")
    await fetcher.shutdown()

    assert article.title == "Inflation eases"
    assert article.content == ARTICLE_TEXT
    assert article.length == len(ARTICLE_TEXT)
    assert article.excerpt == "Inflation fell in March."
    assert article.site_name == "Example News"
    assert article.author == "Jane Reporter"
    assert article.byline == "Jane Reporter"
    assert article.publish_date == "2024-04-24"
    assert seen[0].headers["User-Agent"] == BROWSER_USER_AGENT
    assert fake_trafilatura["extract_kwargs"]["include_comments"] is False

    data = article.model_dump(by_alias=True)
    assert data["siteName"] == "Example News"
    assert data["publishedTime"] == "2024-04-24"


@pytest.mark.asyncio
async def test_missing_metadata_falls_back(fake_trafilatura):
    fetcher = _fetcher(lambda request: httpx.Response(200, html=HTML))
    article = await fetcher.fetch("https://news.example.com/inflation")

    assert article.title == ""
    assert article.author is None
    assert article.excerpt == ARTICLE_TEXT[:200]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status, expected_status, message",
    [
        (403, 403, "Access denied - this website blocks automated requests"),
        (404, 404, "Article not found - the URL may be invalid or the article has been removed"),
        (500, 500, "Website server error - please try again later"),
        (503, 503, "Website server error - please try again later"),
        (410, 410, "Failed to fetch URL: 410 Gone"),
    ],
)
async def test_http_status_errors(fake_trafilatura, status, expected_status, message):
    fetcher = _fetcher(lambda request: httpx.Response(status))

    with pytest.raises(ArticleExtractionError) as exc_info:
        await fetcher.fetch("https://news.example.com/inflation")

    assert exc_info.value.status_code == expected_status
    assert exc_info.value.public_message == message


@pytest.mark.asyncio
async def test_timeout_is_408(fake_trafilatura):
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(ArticleExtractionError) as exc_info:
        await _fetcher(handler).fetch("https://slow.example.com/story")

    assert exc_info.value.status_code == 408
    assert exc_info.value.public_message == "Request timeout - the article took too long to load"


@pytest.mark.asyncio
async def test_unextractable_page_is_400(fake_trafilatura):
    fake_trafilatura["content"] = None
    fetcher = _fetcher(lambda request: httpx.Response(200, html="<html></html>"))

    with pytest.raises(ArticleExtractionError) as exc_info:
        await fetcher.fetch("https://news.example.com/empty")

    assert exc_info.value.status_code == 400
    assert exc_info.value.public_message == "Could not extract article content from this URL"


@pytest.mark.asyncio
async def test_short_content_is_400(fake_trafilatura):
    fake_trafilatura["content"] = "Too short."
    fetcher = _fetcher(lambda request: httpx.Response(200, html=HTML))

    with pytest.raises(ArticleExtractionError) as exc_info:
        await fetcher.fetch("https://news.example.com/brief")

    assert exc_info.value.status_code == 400
    assert exc_info.value.public_message == "Extracted content is too short - this may not be a valid article"

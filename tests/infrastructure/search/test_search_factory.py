"""Tests for the search provider factory."""

import pytest

from fact_checker.infrastructure.search.factory import SearchProviderFactory
from fact_checker.infrastructure.search.wikipedia_search_adapter import (
    WikipediaSearchAdapter,
    WikipediaSearchConfig,
)
from fakes import FakeSearchProvider


@pytest.fixture
def search_factory() -> SearchProviderFactory:
    """Provide a factory instance for testing."""
    return SearchProviderFactory()


def test_wikipedia_registered_by_default(search_factory):
    provider = search_factory.create_provider("wikipedia", config=WikipediaSearchConfig(language="de"))

    assert isinstance(provider, WikipediaSearchAdapter)
    assert provider.domain == "de.wikipedia.org"
    assert search_factory.create_provider("wikipedia") is provider
    assert search_factory.available_providers == {"wikipedia": False}


def test_duplicate_registration_fails(search_factory):
    with pytest.raises(ValueError):
        search_factory.register_provider("wikipedia", WikipediaSearchAdapter)


def test_unknown_provider(search_factory):
    with pytest.raises(ValueError):
        search_factory.create_provider("bing")
    assert "bing" not in search_factory.available_providers


@pytest.mark.asyncio
async def test_shutdown_all(search_factory):
    search_factory.register_provider("fake", FakeSearchProvider)
    search_factory.create_provider("fake")
    assert search_factory.available_providers["fake"] is True

    await search_factory.shutdown_all()

    assert search_factory.available_providers["fake"] is False

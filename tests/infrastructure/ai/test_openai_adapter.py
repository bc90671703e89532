"""Tests for the OpenAI adapter."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest
from pydantic import ValidationError as PydanticValidationError

from fact_checker.domain.errors import (
    ConfigurationError,
    SchemaMismatchError,
    UpstreamError,
    UpstreamTimeoutError,
)
from fact_checker.domain.models.claim import ClaimList
from fact_checker.domain.ports.completion_provider import CompletionRequest
from fact_checker.infrastructure.ai.openai_adapter import OpenAIAdapter, OpenAIConfig

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/responses")


@pytest.fixture
def mock_openai_client():
    """Create a mock OpenAI client."""
    client = MagicMock()
    client.responses.parse = AsyncMock()
    client.moderations.create = AsyncMock()
    client.close = AsyncMock()
    return client


@pytest.fixture
def adapter(mock_openai_client) -> OpenAIAdapter:
    adapter = OpenAIAdapter(OpenAIConfig(api_key="test-key"))
    adapter._client = mock_openai_client
    return adapter


def _request(**overrides) -> CompletionRequest:
    data = {
        "model": "gpt-test",
        "instructions": "Extract.",
        "input": [{"role": "user", "content": "text"}],
        "text_format": ClaimList,
        "schema_name": "claims_list",
    }
    data.update(overrides)
    return CompletionRequest(**data)


@pytest.mark.asyncio
async def test_initialize_without_key_is_configuration_error():
    adapter = OpenAIAdapter(OpenAIConfig(api_key=""))
    with pytest.raises(ConfigurationError):
        await adapter.initialize()
    assert not adapter.is_available


@pytest.mark.asyncio
async def test_initialize_disables_sdk_retries():
    adapter = OpenAIAdapter(OpenAIConfig(api_key="test-key", timeout=30))
    await adapter.initialize()
    try:
        assert adapter.is_available
        assert adapter._client.max_retries == 0
    finally:
        await adapter.shutdown()
    assert not adapter.is_available


@pytest.mark.asyncio
async def test_respond_returns_final_text(adapter, mock_openai_client):
    mock_openai_client.responses.parse.return_value = SimpleNamespace(
        id="resp_1",
        status="completed",
        output=[SimpleNamespace(type="message")],
        output_text='{"article_title": null, "claims": []}',
    )

    turn = await adapter.respond(_request())

    assert turn.response_id == "resp_1"
    assert turn.status == "completed"
    assert turn.output_text == '{"article_title": null, "claims": []}'
    assert turn.tool_calls == []
    kwargs = mock_openai_client.responses.parse.call_args.kwargs
    assert kwargs["model"] == "gpt-test"
    assert kwargs["text_format"] is ClaimList
    assert "tools" not in kwargs
    assert "previous_response_id" not in kwargs


@pytest.mark.asyncio
async def test_respond_maps_function_calls(adapter, mock_openai_client):
    mock_openai_client.responses.parse.return_value = SimpleNamespace(
        id="resp_2",
        status="completed",
        output=[
            SimpleNamespace(type="reasoning"),
            SimpleNamespace(
                type="function_call",
                call_id="call_1",
                name="web_evidence_search",
                arguments='{"query": "q", "time_window_days": 30, "max_results": 5}',
            ),
        ],
        output_text="",
    )
    tools = [{"type": "function", "name": "web_evidence_search", "parameters": {}, "strict": True}]

    turn = await adapter.respond(_request(tools=tools, previous_response_id="resp_1"))

    assert turn.output_text is None
    assert [c.call_id for c in turn.tool_calls] == ["call_1"]
    assert turn.tool_calls[0].name == "web_evidence_search"
    kwargs = mock_openai_client.responses.parse.call_args.kwargs
    assert kwargs["tools"] == tools
    assert kwargs["tool_choice"] == "auto"
    assert kwargs["previous_response_id"] == "resp_1"


@pytest.mark.asyncio
async def test_respond_translates_timeout(adapter, mock_openai_client):
    mock_openai_client.responses.parse.side_effect = openai.APITimeoutError(request=_REQUEST)

    with pytest.raises(UpstreamTimeoutError) as exc_info:
        await adapter.respond(_request())
    assert exc_info.value.status_code == 408


@pytest.mark.asyncio
@pytest.mark.parametrize("status, expected", [(503, 503), (502, 502), (400, 500), (401, 500)])
async def test_respond_translates_status_errors(adapter, mock_openai_client, status, expected):
    mock_openai_client.responses.parse.side_effect = openai.APIStatusError(
        "upstream failure",
        response=httpx.Response(status, request=_REQUEST),
        body=None,
    )

    with pytest.raises(UpstreamError) as exc_info:
        await adapter.respond(_request())
    assert exc_info.value.status_code == expected


@pytest.mark.asyncio
async def test_respond_translates_parse_failures(adapter, mock_openai_client):
    with pytest.raises(PydanticValidationError) as parse_error:
        ClaimList.model_validate({"claims": []})
    mock_openai_client.responses.parse.side_effect = parse_error.value

    with pytest.raises(SchemaMismatchError) as exc_info:
        await adapter.respond(_request())
    assert exc_info.value.schema_name == "claims_list"


@pytest.mark.asyncio
async def test_moderate_returns_only_triggered_categories(adapter, mock_openai_client):
    categories = MagicMock()
    categories.model_dump.return_value = {"violence": True, "hate": False, "self-harm": False}
    mock_openai_client.moderations.create.return_value = SimpleNamespace(
        results=[SimpleNamespace(flagged=True, categories=categories)]
    )

    result = await adapter.moderate("text")

    assert result.flagged
    assert result.categories == frozenset({"violence"})
    categories.model_dump.assert_called_once_with(by_alias=True)
    assert mock_openai_client.moderations.create.call_args.kwargs["model"] == "omni-moderation-latest"


@pytest.mark.asyncio
async def test_moderate_translates_errors(adapter, mock_openai_client):
    mock_openai_client.moderations.create.side_effect = openai.APIConnectionError(request=_REQUEST)

    with pytest.raises(UpstreamError):
        await adapter.moderate("text")


def test_provider_metadata():
    adapter = OpenAIAdapter(OpenAIConfig(api_key="k"))
    assert adapter.provider_name == "OpenAI"
    assert adapter.capabilities["tool_calling"]

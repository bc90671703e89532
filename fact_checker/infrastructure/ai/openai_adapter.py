"""OpenAI implementation of the completion and moderation provider interfaces."""

import logging
from typing import Any, Dict, Optional

import openai
from openai import AsyncOpenAI
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from ...domain.errors import ConfigurationError, SchemaMismatchError, UpstreamError, UpstreamTimeoutError
from ...domain.ports.completion_provider import CompletionRequest, CompletionTurn, ToolCall
from ...domain.ports.moderation_provider import ModerationResult

logger = logging.getLogger(__name__)


class OpenAIConfig(BaseModel):
    """Configuration for the OpenAI adapter."""

    api_key: str = Field(..., description="OpenAI API key")
    moderation_model: str = Field(default="omni-moderation-latest", description="Moderation model")
    timeout: float = Field(default=120.0, description="API timeout in seconds")


class OpenAIAdapter:
    """Structured completions (Responses API) and moderation via OpenAI.

    Automatic SDK retries are disabled: a failed or timed-out call fails the
    request and the caller decides whether to retry.
    """

    def __init__(self, config: Optional[OpenAIConfig] = None):
        """Initialize the adapter."""
        self._config = config or OpenAIConfig(api_key="")
        self._client: Optional[AsyncOpenAI] = None

    async def initialize(self) -> None:
        """Create the API client."""
        if self._client is not None:
            return
        if not self._config.api_key:
            raise ConfigurationError(detail="OpenAI API key missing")
        self._client = AsyncOpenAI(
            api_key=self._config.api_key,
            timeout=self._config.timeout,
            max_retries=0,
        )
        logger.info("🤖 OpenAI client ready")

    async def shutdown(self) -> None:
        """Clean up resources and shut down the provider."""
        if self._client:
            await self._client.close()
            self._client = None

    async def respond(self, request: CompletionRequest) -> CompletionTurn:
        """Run one Responses API turn with a structured output format."""
        await self.initialize()

        kwargs: Dict[str, Any] = {
            "model": request.model,
            "instructions": request.instructions,
            "input": request.input,
            "text_format": request.text_format,
        }
        if request.tools:
            kwargs["tools"] = request.tools
            kwargs["tool_choice"] = "auto"
        if request.previous_response_id:
            kwargs["previous_response_id"] = request.previous_response_id

        try:
            response = await self._client.responses.parse(**kwargs)
        except PydanticValidationError as e:
            raise SchemaMismatchError(request.schema_name, str(e)) from e
        except openai.OpenAIError as e:
            raise self._translate(e, request.schema_name) from e

        tool_calls = [
            ToolCall(call_id=item.call_id, name=item.name, arguments=item.arguments)
            for item in response.output
            if getattr(item, "type", None) == "function_call"
        ]
        return CompletionTurn(
            response_id=response.id,
            status=response.status or "completed",
            output_text=None if tool_calls else response.output_text,
            tool_calls=tool_calls,
        )

    async def moderate(self, text: str) -> ModerationResult:
        """Classify text with the moderation endpoint."""
        await self.initialize()
        try:
            moderation = await self._client.moderations.create(
                model=self._config.moderation_model,
                input=text,
            )
        except openai.OpenAIError as e:
            raise self._translate(e, "moderation") from e

        result = moderation.results[0]
        categories = result.categories.model_dump(by_alias=True)
        return ModerationResult(
            flagged=result.flagged,
            categories=frozenset(name for name, hit in categories.items() if hit),
        )

    @staticmethod
    def _translate(error: Exception, operation: str) -> UpstreamError:
        if isinstance(error, openai.APITimeoutError):
            logger.error(f"⏱️ OpenAI {operation} timed out")
            return UpstreamTimeoutError(detail=f"{operation}: {error}")
        if isinstance(error, openai.APIStatusError):
            logger.error(f"❌ OpenAI {operation} failed with HTTP {error.status_code}: {error}")
            status = error.status_code if error.status_code >= 500 else 500
            return UpstreamError(status_code=status, detail=f"{operation}: {error}")
        logger.error(f"❌ OpenAI {operation} failed: {error}")
        return UpstreamError(detail=f"{operation}: {error}")

    @property
    def provider_name(self) -> str:
        """Get the name of the AI provider."""
        return "OpenAI"

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        return self._client is not None

    @property
    def capabilities(self) -> Dict[str, bool]:
        """Get the provider's capabilities."""
        return {
            "structured_output": True,
            "tool_calling": True,
            "moderation": True,
        }

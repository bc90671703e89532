"""Protocol for structured-completion providers."""

from typing import Any, Dict, List, Optional, Protocol, Type

from pydantic import BaseModel, Field


class ToolCall(BaseModel):
    """A tool invocation requested by the model."""

    call_id: str
    name: str
    arguments: str = Field(..., description="JSON-encoded arguments")


class CompletionRequest(BaseModel):
    """One turn sent to the completion service."""

    model: str
    instructions: str
    input: List[Dict[str, Any]]
    text_format: Type[BaseModel]
    schema_name: str
    tools: Optional[List[Dict[str, Any]]] = None
    previous_response_id: Optional[str] = None

    class Config:
        """Pydantic model configuration."""
        arbitrary_types_allowed = True


class CompletionTurn(BaseModel):
    """What the completion service returned for one turn.

    A turn either requests tools (``tool_calls`` non-empty) or carries the
    final output text.
    """

    response_id: Optional[str] = None
    status: str
    output_text: Optional[str] = None
    tool_calls: List[ToolCall] = Field(default_factory=list)


class CompletionProvider(Protocol):
    """Protocol defining the interface for completion providers.

    Implementations translate transport failures into ``UpstreamError`` /
    ``UpstreamTimeoutError`` and output that the provider itself could not
    parse into ``SchemaMismatchError``.
    """

    async def initialize(self) -> None:
        """Initialize the provider."""
        ...

    async def shutdown(self) -> None:
        """Clean up resources."""
        ...

    async def respond(self, request: CompletionRequest) -> CompletionTurn:
        """Run one model turn."""
        ...

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        ...

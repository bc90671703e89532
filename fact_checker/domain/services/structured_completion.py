"""Schema-validated completion calls with an optional tool-calling loop."""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..errors import FactCheckError, SchemaMismatchError, UpstreamError
from ..ports.completion_provider import CompletionProvider, CompletionRequest, ToolCall

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

ToolHandler = Callable[[Dict[str, Any]], Awaitable[Dict[str, Any]]]


class ToolArgumentError(ValueError):
    """Raised by a tool handler when the model sent unusable arguments."""


class ToolLoopState(str, Enum):
    """States of one tool-calling round."""

    AWAITING_MODEL = "awaiting_model"
    TOOL_REQUESTED = "tool_requested"
    TOOL_ANSWERED = "tool_answered"
    COMPLETED = "completed"
    FAILED = "failed"


_TRANSITIONS = {
    None: {ToolLoopState.AWAITING_MODEL},
    ToolLoopState.AWAITING_MODEL: {
        ToolLoopState.TOOL_REQUESTED,
        ToolLoopState.COMPLETED,
        ToolLoopState.FAILED,
    },
    ToolLoopState.TOOL_REQUESTED: {ToolLoopState.TOOL_ANSWERED, ToolLoopState.FAILED},
    ToolLoopState.TOOL_ANSWERED: {ToolLoopState.AWAITING_MODEL, ToolLoopState.FAILED},
    ToolLoopState.COMPLETED: set(),
    ToolLoopState.FAILED: set(),
}


@dataclass
class ToolLoopTrace:
    """Record of the states visited while producing one structured output."""

    states: List[ToolLoopState] = field(default_factory=list)
    turns: int = 0
    tool_calls: List[ToolCall] = field(default_factory=list)

    @property
    def state(self) -> Optional[ToolLoopState]:
        return self.states[-1] if self.states else None

    def enter(self, state: ToolLoopState) -> None:
        if state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal tool loop transition {self.state} -> {state}")
        self.states.append(state)


@dataclass(frozen=True)
class ToolSpec:
    """A callable tool registered for a completion."""

    name: str
    description: str
    parameters: Dict[str, Any]
    handler: ToolHandler
    strict: bool = True

    def to_param(self) -> Dict[str, Any]:
        """Render the tool in the provider's function-tool format."""
        return {
            "type": "function",
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
            "strict": self.strict,
        }


class StructuredCompletion:
    """Invokes the completion service and returns schema-conforming values.

    Callers never see a value that has not passed validation against the
    declared output schema. When tools are registered the model may request
    them any number of times; every request is answered before control goes
    back to the model. Termination is up to the model unless ``max_turns``
    is set.
    """

    def __init__(
        self,
        provider: CompletionProvider,
        model: str,
        max_turns: Optional[int] = None,
    ):
        self._provider = provider
        self._model = model
        self._max_turns = max_turns

    @property
    def model(self) -> str:
        return self._model

    async def complete(
        self,
        instructions: str,
        input_payload: Union[str, Dict[str, Any]],
        output_schema: Type[T],
        schema_name: str,
        tools: Optional[Sequence[ToolSpec]] = None,
        trace: Optional[ToolLoopTrace] = None,
    ) -> T:
        """Run a completion and validate its final output.

        Args:
            instructions: Phase-specific instruction string
            input_payload: User input, JSON-encoded when not already text
            output_schema: Pydantic model the output must match
            schema_name: Name of the output format sent to the provider
            tools: Tools the model may call
            trace: Optional trace collecting the visited loop states

        Returns:
            Validated instance of ``output_schema``

        Raises:
            UpstreamError: Provider failure, timeout or non-completed status
            SchemaMismatchError: Output does not match ``output_schema``
        """
        trace = trace if trace is not None else ToolLoopTrace()
        handlers = {tool.name: tool for tool in tools or ()}
        content = input_payload if isinstance(input_payload, str) else json.dumps(input_payload)

        request = CompletionRequest(
            model=self._model,
            instructions=instructions,
            input=[{"role": "user", "content": content}],
            text_format=output_schema,
            schema_name=schema_name,
            tools=[tool.to_param() for tool in tools] if tools else None,
        )

        trace.enter(ToolLoopState.AWAITING_MODEL)
        try:
            while True:
                turn = await self._provider.respond(request)
                trace.turns += 1

                if turn.status != "completed":
                    raise UpstreamError(detail=f"{schema_name}: provider status {turn.status}")

                if turn.tool_calls:
                    trace.enter(ToolLoopState.TOOL_REQUESTED)
                    trace.tool_calls.extend(turn.tool_calls)
                    outputs = [
                        {
                            "type": "function_call_output",
                            "call_id": call.call_id,
                            "output": json.dumps(await self._answer(call, handlers)),
                        }
                        for call in turn.tool_calls
                    ]
                    trace.enter(ToolLoopState.TOOL_ANSWERED)
                    logger.info(
                        f"🔧 {schema_name}: answered {len(outputs)} tool call(s) on turn {trace.turns}"
                    )
                    if self._max_turns is not None and trace.turns >= self._max_turns:
                        raise UpstreamError(
                            detail=f"{schema_name}: no final output after {trace.turns} turns"
                        )
                    request = request.model_copy(
                        update={"input": outputs, "previous_response_id": turn.response_id}
                    )
                    trace.enter(ToolLoopState.AWAITING_MODEL)
                    continue

                value = self._validate(turn.output_text, output_schema, schema_name)
                trace.enter(ToolLoopState.COMPLETED)
                return value
        except FactCheckError:
            trace.enter(ToolLoopState.FAILED)
            raise

    async def _answer(self, call: ToolCall, handlers: Dict[str, ToolSpec]) -> Dict[str, Any]:
        """Execute one tool call and return the payload handed back to the model."""
        tool = handlers.get(call.name)
        if tool is None:
            logger.warning(f"⚠️ Model requested unknown tool: {call.name}")
            return {"status": "error", "error": f"Unknown tool: {call.name}"}

        try:
            arguments = json.loads(call.arguments or "{}")
        except json.JSONDecodeError:
            logger.warning(f"⚠️ Tool {call.name} called with malformed arguments: {call.arguments[:200]}")
            return {"status": "error", "error": "Arguments are not valid JSON"}
        if not isinstance(arguments, dict):
            return {"status": "error", "error": "Arguments must be a JSON object"}

        try:
            return await tool.handler(arguments)
        except ToolArgumentError as e:
            logger.warning(f"⚠️ Tool {call.name} rejected arguments: {e}")
            return {"status": "error", "error": str(e)}

    @staticmethod
    def _validate(output_text: Optional[str], output_schema: Type[T], schema_name: str) -> T:
        if not output_text:
            raise SchemaMismatchError(schema_name, "provider returned no output")
        try:
            return output_schema.model_validate_json(output_text)
        except PydanticValidationError as e:
            raise SchemaMismatchError(schema_name, str(e)) from e

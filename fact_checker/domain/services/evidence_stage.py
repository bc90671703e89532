"""Evidence retrieval phase driven by model tool calls."""

import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from ..instructions import EVIDENCE_INSTRUCTIONS
from ..models.claim import ClaimList
from ..models.evidence import EvidenceBundle, EvidencePolicy, WebEvidenceSearchArgs
from ..ports.search_provider import EvidenceSearchProvider
from .structured_completion import StructuredCompletion, ToolArgumentError, ToolLoopTrace, ToolSpec

logger = logging.getLogger(__name__)

WEB_EVIDENCE_SEARCH = "web_evidence_search"

WEB_EVIDENCE_SEARCH_PARAMETERS: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "query": {
            "type": "string",
            "description": "Search query for finding relevant evidence.",
        },
        "time_window_days": {
            "type": "integer",
            "minimum": 1,
            "maximum": 365,
            "description": "Maximum age of sources in days.",
        },
        "max_results": {
            "type": "integer",
            "minimum": 3,
            "maximum": 10,
            "description": "Maximum number of search results to return.",
        },
    },
    "required": ["query", "time_window_days", "max_results"],
    "additionalProperties": False,
}


class EvidenceStage:
    """Runs the agentic search loop and returns an evidence bundle.

    The model decides how many searches to run and when to stop; each
    search is answered synchronously from the configured search provider.
    """

    schema_name = "evidence_bundle"

    def __init__(
        self,
        completion: StructuredCompletion,
        search_provider: EvidenceSearchProvider,
        instructions: str = EVIDENCE_INSTRUCTIONS,
    ):
        self._completion = completion
        self._search = search_provider
        self._instructions = instructions

    @property
    def tool(self) -> ToolSpec:
        """The ``web_evidence_search`` tool registered with the completion."""
        return ToolSpec(
            name=WEB_EVIDENCE_SEARCH,
            description="Search reputable sources; return dated passages.",
            parameters=WEB_EVIDENCE_SEARCH_PARAMETERS,
            handler=self._web_evidence_search,
            strict=True,
        )

    async def gather(
        self,
        claim_list: ClaimList,
        policy: Optional[EvidencePolicy] = None,
        trace: Optional[ToolLoopTrace] = None,
    ) -> EvidenceBundle:
        """Collect evidence for every claim in ``claim_list``."""
        policy = policy or EvidencePolicy()
        trace = trace if trace is not None else ToolLoopTrace()
        payload = {
            "claims_list": claim_list.model_dump(mode="json"),
            "policy": policy.model_dump(mode="json"),
        }

        logger.info(f"🔎 Gathering evidence for {len(claim_list.claims)} claims")
        bundle = await self._completion.complete(
            instructions=self._instructions,
            input_payload=payload,
            output_schema=EvidenceBundle,
            schema_name=self.schema_name,
            tools=[self.tool],
            trace=trace,
        )
        logger.info(
            f"✅ Evidence bundle with {len(bundle.results)} passages "
            f"after {len(trace.tool_calls)} searches in {trace.turns} turns"
        )
        return bundle

    async def _web_evidence_search(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        try:
            args = WebEvidenceSearchArgs.model_validate(arguments)
        except PydanticValidationError as e:
            raise ToolArgumentError(f"Invalid {WEB_EVIDENCE_SEARCH} arguments: {e.error_count()} error(s)") from e

        logger.info(
            f"🌐 {WEB_EVIDENCE_SEARCH}: '{args.query}' "
            f"(window={args.time_window_days}d, max={args.max_results})"
        )
        hits = await self._search.search(
            query=args.query,
            time_window_days=args.time_window_days,
            max_results=args.max_results,
        )
        if not hits:
            return {"status": "no_evidence_found", "query": args.query, "results": []}
        return {
            "status": "ok",
            "query": args.query,
            "results": [hit.model_dump(mode="json") for hit in hits[: args.max_results]],
        }

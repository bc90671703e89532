"""Claim extraction phase."""

import logging

from ..instructions import EXTRACTION_INSTRUCTIONS
from ..models.claim import ClaimList
from .structured_completion import StructuredCompletion

logger = logging.getLogger(__name__)


class ExtractionStage:
    """Turns article text into an ordered list of atomic claims."""

    schema_name = "claims_list"

    def __init__(self, completion: StructuredCompletion, instructions: str = EXTRACTION_INSTRUCTIONS):
        self._completion = completion
        self._instructions = instructions

    async def extract(self, article_text: str) -> ClaimList:
        """Extract claims from validated, moderated article text."""
        logger.info(f"📝 Extracting claims from {len(article_text)} chars of text")
        claim_list = await self._completion.complete(
            instructions=self._instructions,
            input_payload=article_text,
            output_schema=ClaimList,
            schema_name=self.schema_name,
        )
        if len(claim_list.claims) > 20:
            logger.warning(f"⚠️ Extraction returned {len(claim_list.claims)} claims, more than the 20 requested")
        logger.info(f"✅ Extracted {len(claim_list.claims)} claims")
        return claim_list

"""Content-safety gate in front of the analysis pipeline."""

import logging

from ..errors import ModerationRejected
from ..ports.moderation_provider import ModerationProvider, ModerationResult

logger = logging.getLogger(__name__)


class ModerationGate:
    """Submits input to the provider's moderation classifier."""

    def __init__(self, provider: ModerationProvider):
        self._provider = provider

    async def classify(self, text: str) -> ModerationResult:
        """Classify text without acting on the result."""
        result = await self._provider.moderate(text)
        if result.flagged:
            logger.warning(f"🚩 Input flagged by moderation: {sorted(result.categories)}")
        return result

    async def ensure_allowed(self, text: str) -> None:
        """Classify text and reject it when flagged.

        Raises:
            ModerationRejected: With the triggered category names
        """
        result = await self.classify(text)
        if result.flagged:
            raise ModerationRejected(result.categories)

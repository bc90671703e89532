"""Protocol for content-safety classifiers."""

from typing import FrozenSet, Protocol

from pydantic import BaseModel, Field


class ModerationResult(BaseModel):
    """Outcome of classifying a piece of text."""

    flagged: bool
    categories: FrozenSet[str] = Field(
        default_factory=frozenset,
        description="Names of the triggered categories only",
    )


class ModerationProvider(Protocol):
    """Protocol for moderation providers."""

    async def moderate(self, text: str) -> ModerationResult:
        """Classify text.

        Raises:
            UpstreamError: If the classifier call fails
        """
        ...

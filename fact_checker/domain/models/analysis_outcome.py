"""Domain model for the result of one analysis request."""

from dataclasses import dataclass
from typing import Any, Dict

from .verification import VerificationReport


@dataclass(frozen=True)
class AnalysisOutcome:
    """Response envelope assembled by the orchestrator."""

    report: VerificationReport
    original_input: str
    remaining_requests: int

    def __post_init__(self):
        """Validate the envelope."""
        if self.remaining_requests < 0:
            raise ValueError("Remaining requests cannot be negative")

    def to_dict(self) -> Dict[str, Any]:
        """Convert the outcome to the API response format."""
        return {
            "response": self.report.model_dump(mode="json"),
            "originalInput": self.original_input,
            "remainingRequests": self.remaining_requests,
        }

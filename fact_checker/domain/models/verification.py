"""Domain models for verification results and related entities."""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field, model_validator


class AssessmentLabel(str, Enum):
    """Per-claim verification outcomes."""

    SUPPORTED = "SUPPORTED"  # Directly supported by cited evidence
    CONTRADICTED = "CONTRADICTED"  # Directly refuted by cited evidence
    INSUFFICIENT_EVIDENCE = "INSUFFICIENT_EVIDENCE"  # Absent, weak or conflicting evidence


class Verdict(str, Enum):
    """Article-level verdicts."""

    TRUE = "TRUE"
    MIXED = "MIXED"
    MISLEADING = "MISLEADING"
    FALSE = "FALSE"
    UNVERIFIABLE = "UNVERIFIABLE"


class ClaimAssessment(BaseModel):
    """Verification outcome for a single claim.

    SUPPORTED and CONTRADICTED labels must cite at least one evidence id;
    only INSUFFICIENT_EVIDENCE may cite none. Outputs breaking this rule are
    rejected when the provider response is parsed.
    """

    claim_id: str = Field(..., description="Id of the assessed claim")
    label: AssessmentLabel = Field(..., description="Verification label")
    confidence: float = Field(..., ge=0, le=1, description="Confidence in the label (0-1)")
    cited_evidence_ids: List[str] = Field(..., description="Ids of the evidence passages relied on")
    rationale: str = Field(..., description="1-3 sentence rationale")

    class Config:
        """Pydantic model configuration."""
        frozen = True
        extra = "forbid"

    @model_validator(mode="after")
    def _labels_need_citations(self) -> "ClaimAssessment":
        if self.label is not AssessmentLabel.INSUFFICIENT_EVIDENCE and not self.cited_evidence_ids:
            raise ValueError(
                f"claim {self.claim_id}: {self.label.value} requires at least one cited evidence id"
            )
        return self


class ArticleVerdict(BaseModel):
    """Aggregate judgment over the whole article."""

    verdict: Verdict = Field(..., description="Article-level verdict")
    confidence: float = Field(..., ge=0, le=1, description="Confidence in the verdict (0-1)")
    key_factors: List[str] = Field(..., description="Main reasons behind the verdict")

    class Config:
        """Pydantic model configuration."""
        frozen = True
        extra = "forbid"


class VerificationReport(BaseModel):
    """Final artifact returned to the caller, produced once per request."""

    assessments: List[ClaimAssessment] = Field(..., description="One assessment per claim")
    article: ArticleVerdict = Field(..., description="Article-level verdict")

    class Config:
        """Pydantic model configuration."""
        frozen = True
        extra = "forbid"
        json_schema_extra = {
            "example": {
                "assessments": [
                    {
                        "claim_id": "c01",
                        "label": "SUPPORTED",
                        "confidence": 0.86,
                        "cited_evidence_ids": ["e01", "e02"],
                        "rationale": "The statistics office release reports the same figure for the same period.",
                    }
                ],
                "article": {
                    "verdict": "TRUE",
                    "confidence": 0.8,
                    "key_factors": ["Central inflation figure matches the official release"],
                },
            }
        }

"""Domain models for extracted claims."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator


class Importance(str, Enum):
    """How central a claim is to the article's headline and lede."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class EntityType(str, Enum):
    """Named entity categories."""

    PERSON = "PERSON"
    ORG = "ORG"
    GPE = "GPE"
    EVENT = "EVENT"
    PRODUCT = "PRODUCT"
    OTHER = "OTHER"


class Entity(BaseModel):
    """A named entity mentioned by a claim."""

    name: str = Field(..., description="Canonical entity name")
    type: EntityType = Field(..., description="Entity category")

    class Config:
        """Pydantic model configuration."""
        frozen = True
        extra = "forbid"


class Claim(BaseModel):
    """An atomic, independently verifiable factual proposition."""

    id: str = Field(..., description="Identifier, stable within one extraction (e.g. c01)")
    text: str = Field(..., description="The claim in one sentence")
    importance: Importance = Field(..., description="Importance to the article")
    subject: str = Field(..., description="Canonical entity or noun phrase")
    predicate: str = Field(..., description="Concise verb phrase")
    object: str = Field(..., description="Concise complement, may be empty")
    time: Optional[str] = Field(..., description="YYYY-MM-DD when explicit, else null")
    location: Optional[str] = Field(..., description="City, state or country, else null")
    entities: List[Entity] = Field(..., description="Entities mentioned by the claim")
    retrieval_query: str = Field(..., description="6-16 word search query to verify the claim")
    source_sentence: str = Field(..., description="Verbatim sentence the claim came from")

    class Config:
        """Pydantic model configuration."""
        frozen = True
        extra = "forbid"
        json_schema_extra = {
            "example": {
                "id": "c01",
                "text": "The Australian Bureau of Statistics reported inflation of 3.4% for 2024-03.",
                "importance": "high",
                "subject": "Australian Bureau of Statistics",
                "predicate": "reported",
                "object": "inflation of 3.4%",
                "time": "2024-03-31",
                "location": "Australia",
                "entities": [{"name": "Australian Bureau of Statistics", "type": "ORG"}],
                "retrieval_query": "Australian Bureau of Statistics inflation 3.4% March 2024",
                "source_sentence": "Inflation eased to 3.4% in March, the ABS said.",
            }
        }


class ClaimList(BaseModel):
    """Output of the extraction stage.

    At least one claim is required and claim ids must be unique. The 5-20
    cardinality asked for in the extraction instructions is deliberately not
    enforced here: a longer list is still structurally valid.
    """

    article_title: Optional[str] = Field(..., description="Article title if known")
    claims: List[Claim] = Field(..., min_length=1, description="Extracted claims")

    class Config:
        """Pydantic model configuration."""
        frozen = True
        extra = "forbid"

    @model_validator(mode="after")
    def _unique_claim_ids(self) -> "ClaimList":
        seen = set()
        for claim in self.claims:
            if claim.id in seen:
                raise ValueError(f"duplicate claim id: {claim.id}")
            seen.add(claim.id)
        return self

    def get(self, claim_id: str) -> Optional[Claim]:
        """Look up a claim by id."""
        return next((c for c in self.claims if c.id == claim_id), None)

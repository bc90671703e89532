"""Domain models for retrieved evidence."""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class SourceType(str, Enum):
    """Provenance of an evidence passage."""

    PRIMARY = "primary"
    SECONDARY = "secondary"
    UNKNOWN = "unknown"


class EvidenceDoc(BaseModel):
    """A short, dated, sourced passage used as a citation target."""

    id: str = Field(..., description="Stable evidence id assigned during retrieval (e.g. e01)")
    url: str = Field(..., description="Source URL")
    title: str = Field(..., description="Source title")
    published_at: str = Field(..., description="ISO-8601 publication date")
    passage: str = Field(..., description="1-3 sentence excerpt")
    source_type: SourceType = Field(..., description="primary, secondary or unknown")

    class Config:
        """Pydantic model configuration."""
        frozen = True
        extra = "forbid"


class EvidenceBundle(BaseModel):
    """Output of the evidence stage. An empty bundle is a valid result."""

    results: List[EvidenceDoc] = Field(..., description="Evidence passages for all claims")

    class Config:
        """Pydantic model configuration."""
        frozen = True
        extra = "forbid"

    @property
    def ids(self) -> set:
        return {doc.id for doc in self.results}


class EvidencePolicy(BaseModel):
    """Retrieval policy handed to the evidence stage alongside the claims."""

    time_window_days: int = Field(default=365, ge=1, le=365)

    class Config:
        """Pydantic model configuration."""
        frozen = True


class WebEvidenceSearchArgs(BaseModel):
    """Arguments of the ``web_evidence_search`` tool."""

    query: str = Field(..., min_length=1, description="Search query for finding relevant evidence.")
    time_window_days: int = Field(..., ge=1, le=365, description="Maximum age of sources in days.")
    max_results: int = Field(..., ge=3, le=10, description="Maximum number of search results to return.")

    class Config:
        """Pydantic model configuration."""
        frozen = True
        extra = "forbid"


class SearchHit(BaseModel):
    """A single result returned by an evidence search backend."""

    url: str
    title: str
    published_at: str
    passage: str
    domain: str

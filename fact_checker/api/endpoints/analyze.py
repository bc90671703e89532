"""Article analysis endpoint."""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from ...domain.services.fact_checking_service import FactCheckingService
from ...infrastructure.dependencies import get_fact_checking_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["analyze"])

UNKNOWN_CLIENT = "unknown"


class AnalyzeRequest(BaseModel):
    """Request model for article analysis.

    ``input`` is untyped here so that the service can report missing or
    non-text input with its own messages.
    """

    input: Any = Field(default=None, description="Article text to analyze")


def resolve_client_key(request: Request) -> str:
    """Admission key for the caller.

    First ``X-Forwarded-For`` entry, then ``X-Real-IP``. Callers exposing
    neither share the ``unknown`` bucket.
    """
    forwarded = request.headers.get("x-forwarded-for", "")
    first = forwarded.split(",")[0].strip()
    if first:
        return first
    real_ip = request.headers.get("x-real-ip", "").strip()
    return real_ip or UNKNOWN_CLIENT


@router.post("/analyze")
async def analyze_article(
    body: AnalyzeRequest,
    request: Request,
    service: FactCheckingService = Depends(get_fact_checking_service),
) -> Dict[str, Any]:
    """Run the full fact-checking pipeline on article text.

    Returns:
        ``{response, originalInput, remainingRequests}``
    """
    client_key = resolve_client_key(request)
    outcome = await service.analyze(body.input, client_key)
    return outcome.to_dict()

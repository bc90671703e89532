"""Tests for the fact-checking orchestrator."""

import asyncio

import pytest

from fact_checker.domain.errors import (
    AdmissionRejected,
    ConfigurationError,
    FactCheckError,
    ModerationRejected,
    SchemaMismatchError,
    UpstreamError,
    UpstreamTimeoutError,
    ValidationError,
)
from fact_checker.domain.models.verification import Verdict
from fact_checker.domain.ports.completion_provider import CompletionTurn
from fact_checker.domain.services.admission_gate import AdmissionGate
from fact_checker.domain.services.extraction_stage import ExtractionStage
from fact_checker.domain.services.structured_completion import StructuredCompletion
from fact_checker.infrastructure.rate_limit.memory_store import InMemoryRateLimitStore
from fakes import SAMPLE_ARTICLE, ScriptedCompletionProvider, UnreachableRateLimitStore, final_turn


@pytest.mark.asyncio
async def test_analyze_runs_all_phases(build_service, completion_provider, moderation_provider, search_provider):
    service = build_service()

    outcome = await service.analyze(SAMPLE_ARTICLE, "1.2.3.4")

    assert outcome.report.article.verdict is Verdict.TRUE
    assert outcome.original_input == SAMPLE_ARTICLE
    assert outcome.remaining_requests == 14
    assert moderation_provider.calls == [SAMPLE_ARTICLE]
    assert len(search_provider.queries) == 1
    assert [r.schema_name for r in completion_provider.requests] == [
        "claims_list",
        "evidence_bundle",
        "evidence_bundle",
        "verification_report",
    ]


@pytest.mark.asyncio
async def test_missing_credentials_fail_before_anything(build_service, completion_provider, moderation_provider):
    service = build_service(credentials_configured=False)

    with pytest.raises(ConfigurationError) as exc_info:
        await service.analyze(SAMPLE_ARTICLE, "1.2.3.4")

    assert exc_info.value.status_code == 500
    assert exc_info.value.public_message == "AI analysis service temporarily unavailable"
    assert moderation_provider.calls == []
    assert completion_provider.requests == []
    assert await service.admission.remaining("1.2.3.4") == 15


@pytest.mark.asyncio
async def test_rate_limited_request_makes_no_upstream_calls(build_service, completion_provider, moderation_provider, clock):
    gate = AdmissionGate(InMemoryRateLimitStore(), max_requests=2, clock=clock)
    service = build_service(admission_gate=gate)
    await gate.check_limit("1.2.3.4")
    await gate.check_limit("1.2.3.4")

    with pytest.raises(AdmissionRejected) as exc_info:
        await service.analyze(SAMPLE_ARTICLE, "1.2.3.4")

    assert exc_info.value.status_code == 429
    assert exc_info.value.remaining_requests == 0
    assert exc_info.value.retry_after == pytest.approx(3600.0)
    assert moderation_provider.calls == []
    assert completion_provider.requests == []


@pytest.mark.asyncio
async def test_invalid_input_is_rejected_after_admission(build_service, moderation_provider):
    service = build_service()

    with pytest.raises(ValidationError) as exc_info:
        await service.analyze("   ", "1.2.3.4")

    assert exc_info.value.public_message == "Input text cannot be empty"
    assert moderation_provider.calls == []
    # The attempt still counts against the quota.
    assert await service.admission.remaining("1.2.3.4") == 14


@pytest.mark.asyncio
async def test_oversized_input(build_service):
    service = build_service(max_input_length=10)

    with pytest.raises(ValidationError, match="too long"):
        await service.analyze("x" * 11, "k")


@pytest.mark.asyncio
async def test_moderation_rejection_stops_pipeline(build_service, completion_provider, moderation_provider):
    moderation_provider.categories = frozenset({"violence"})
    service = build_service()

    with pytest.raises(ModerationRejected) as exc_info:
        await service.analyze(SAMPLE_ARTICLE, "k")

    assert "violence" in exc_info.value.public_message
    assert completion_provider.requests == []


@pytest.mark.asyncio
async def test_schema_mismatch_aborts_without_partial_report(build_service, completion_provider, search_provider):
    completion_provider.replace("claims_list", final_turn({"article_title": None, "claims": []}))
    service = build_service()

    with pytest.raises(SchemaMismatchError):
        await service.analyze(SAMPLE_ARTICLE, "k")

    assert search_provider.queries == []
    assert completion_provider.calls_for("verification_report") == []


@pytest.mark.asyncio
async def test_upstream_failure_status_passes_through(build_service, completion_provider):
    completion_provider.replace("verification_report", UpstreamError(status_code=503, detail="overloaded"))
    service = build_service()

    with pytest.raises(UpstreamError) as exc_info:
        await service.analyze(SAMPLE_ARTICLE, "k")

    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_request_deadline(build_service):
    class SlowProvider(ScriptedCompletionProvider):
        async def respond(self, request):
            await asyncio.sleep(1)
            return CompletionTurn(status="completed")

    completion = SlowProvider()
    service = build_service(
        extraction_stage=ExtractionStage(StructuredCompletion(completion, model="m")),
        request_deadline=0.01,
    )

    with pytest.raises(UpstreamTimeoutError) as exc_info:
        await service.analyze(SAMPLE_ARTICLE, "k")

    assert exc_info.value.status_code == 408


@pytest.mark.asyncio
async def test_unexpected_errors_become_generic_failures(build_service, moderation_provider):
    async def broken(text):
        raise KeyError("results")

    moderation_provider.moderate = broken
    service = build_service()

    with pytest.raises(FactCheckError) as exc_info:
        await service.analyze(SAMPLE_ARTICLE, "k")

    assert type(exc_info.value) is FactCheckError
    assert exc_info.value.status_code == 500
    assert "results" not in exc_info.value.public_message


@pytest.mark.asyncio
async def test_rate_limit_store_failure_is_a_generic_error(build_service, clock, completion_provider):
    service = build_service(admission_gate=AdmissionGate(UnreachableRateLimitStore(), clock=clock))

    with pytest.raises(FactCheckError) as exc_info:
        await service.analyze(SAMPLE_ARTICLE, "1.2.3.4")

    assert type(exc_info.value) is FactCheckError
    assert exc_info.value.status_code == 500
    assert "Connection refused" in exc_info.value.detail
    assert completion_provider.requests == []

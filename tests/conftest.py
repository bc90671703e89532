"""Test configuration and common fixtures."""

from typing import Callable

import pytest

from fact_checker.domain.services.admission_gate import AdmissionGate
from fact_checker.domain.services.evidence_stage import EvidenceStage
from fact_checker.domain.services.extraction_stage import ExtractionStage
from fact_checker.domain.services.fact_checking_service import FactCheckingService
from fact_checker.domain.services.moderation_gate import ModerationGate
from fact_checker.domain.services.structured_completion import StructuredCompletion
from fact_checker.domain.services.verification_stage import VerificationStage
from fact_checker.infrastructure.rate_limit.memory_store import InMemoryRateLimitStore
from fakes import (
    FakeClock,
    FakeModerationProvider,
    FakeSearchProvider,
    ScriptedCompletionProvider,
    happy_path_script,
)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def completion_provider() -> ScriptedCompletionProvider:
    return ScriptedCompletionProvider(happy_path_script())


@pytest.fixture
def moderation_provider() -> FakeModerationProvider:
    return FakeModerationProvider()


@pytest.fixture
def search_provider() -> FakeSearchProvider:
    return FakeSearchProvider()


@pytest.fixture
def build_service(
    completion_provider: ScriptedCompletionProvider,
    moderation_provider: FakeModerationProvider,
    search_provider: FakeSearchProvider,
    clock: FakeClock,
) -> Callable[..., FactCheckingService]:
    """Build a FactCheckingService over the fake providers."""

    def _build(**overrides) -> FactCheckingService:
        completion = StructuredCompletion(completion_provider, model="test-model")
        options = {
            "admission_gate": AdmissionGate(InMemoryRateLimitStore(), clock=clock),
            "moderation_gate": ModerationGate(moderation_provider),
            "extraction_stage": ExtractionStage(completion),
            "evidence_stage": EvidenceStage(completion, search_provider),
            "verification_stage": VerificationStage(completion),
        }
        options.update(overrides)
        return FactCheckingService(**options)

    return _build

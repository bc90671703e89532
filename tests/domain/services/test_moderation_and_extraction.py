"""Tests for the moderation gate and the extraction phase."""

import logging

import pytest

from fact_checker.domain.errors import ModerationRejected
from fact_checker.domain.services.extraction_stage import ExtractionStage
from fact_checker.domain.services.moderation_gate import ModerationGate
from fact_checker.domain.services.structured_completion import StructuredCompletion
from fakes import FakeModerationProvider, ScriptedCompletionProvider, claim_data, claim_list_data, final_turn


@pytest.mark.asyncio
async def test_clean_text_passes_moderation():
    provider = FakeModerationProvider()
    await ModerationGate(provider).ensure_allowed("Inflation eased in March.")
    assert provider.calls == ["Inflation eased in March."]


@pytest.mark.asyncio
async def test_flagged_text_names_only_triggered_categories():
    gate = ModerationGate(FakeModerationProvider(["violence", "harassment"]))

    with pytest.raises(ModerationRejected) as exc_info:
        await gate.ensure_allowed("...")

    error = exc_info.value
    assert error.status_code == 400
    assert error.categories == ["harassment", "violence"]
    assert error.public_message == "Content flagged as inappropriate: harassment, violence"
    assert "hate" not in error.public_message


@pytest.mark.asyncio
async def test_classify_does_not_raise():
    result = await ModerationGate(FakeModerationProvider(["violence"])).classify("...")
    assert result.flagged
    assert result.categories == frozenset({"violence"})


@pytest.mark.asyncio
async def test_extraction_sends_raw_text():
    provider = ScriptedCompletionProvider({"claims_list": [final_turn(claim_list_data())]})
    stage = ExtractionStage(StructuredCompletion(provider, model="m"))

    claims = await stage.extract("Article body")

    assert claims.claims[0].id == "c01"
    assert provider.requests[0].input[0]["content"] == "Article body"
    assert provider.requests[0].tools is None


@pytest.mark.asyncio
async def test_extraction_warns_on_long_claim_list(caplog):
    claims = [claim_data(f"c{i:02d}", importance="low") for i in range(1, 23)]
    provider = ScriptedCompletionProvider({"claims_list": [final_turn(claim_list_data(*claims))]})
    stage = ExtractionStage(StructuredCompletion(provider, model="m"))

    with caplog.at_level(logging.WARNING):
        claim_list = await stage.extract("Long article")

    assert len(claim_list.claims) == 22
    assert "more than the 20 requested" in caplog.text

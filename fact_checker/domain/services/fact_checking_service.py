"""Service sequencing the admission gates and the three pipeline phases."""

import asyncio
import contextlib
import logging
from typing import Any, Optional

from ..errors import (
    AdmissionRejected,
    ConfigurationError,
    FactCheckError,
    SchemaMismatchError,
    UpstreamTimeoutError,
    ValidationError,
)
from ..models.analysis_outcome import AnalysisOutcome
from ..models.evidence import EvidencePolicy
from ..models.verification import VerificationReport
from .admission_gate import AdmissionGate
from .evidence_stage import EvidenceStage
from .extraction_stage import ExtractionStage
from .input_validator import DEFAULT_MAX_LENGTH, validate_text
from .moderation_gate import ModerationGate
from .verification_stage import VerificationStage

logger = logging.getLogger(__name__)


class FactCheckingService:
    """Runs one analysis request end to end.

    Order: configuration check, admission, validation, moderation,
    extraction, evidence, verification. The first failure aborts the
    request; no stage is retried and no partial report is returned.
    """

    def __init__(
        self,
        admission_gate: AdmissionGate,
        moderation_gate: ModerationGate,
        extraction_stage: ExtractionStage,
        evidence_stage: EvidenceStage,
        verification_stage: VerificationStage,
        credentials_configured: bool = True,
        max_input_length: int = DEFAULT_MAX_LENGTH,
        evidence_policy: Optional[EvidencePolicy] = None,
        request_deadline: Optional[float] = None,
    ):
        """Initialize the service.

        Args:
            admission_gate: Authoritative server-side rate limiter
            moderation_gate: Content-safety gate
            extraction_stage: Claim extraction phase
            evidence_stage: Evidence retrieval phase
            verification_stage: Verification phase
            credentials_configured: Whether the provider API key is present
            max_input_length: Inclusive input length ceiling
            evidence_policy: Policy handed to the evidence phase
            request_deadline: Seconds allowed for moderation plus all phases
        """
        self.admission = admission_gate
        self.moderation = moderation_gate
        self.extraction = extraction_stage
        self.evidence = evidence_stage
        self.verification = verification_stage
        self._credentials_configured = credentials_configured
        self._max_input_length = max_input_length
        self._evidence_policy = evidence_policy or EvidencePolicy()
        self._request_deadline = request_deadline
        logger.info("🔧 FactCheckingService initialized")

    async def analyze(self, text: Any, client_key: str) -> AnalysisOutcome:
        """Analyze article text on behalf of ``client_key``.

        Args:
            text: Raw input as received from the caller
            client_key: Admission key identifying the caller

        Returns:
            Verification report, echoed input and remaining quota

        Raises:
            FactCheckError: Subclass describing the failing gate or stage
        """
        if not self._credentials_configured:
            logger.error("❌ OpenAI API key not configured")
            raise ConfigurationError()

        async with self._store_errors(client_key):
            admitted = await self.admission.check_limit(client_key)
            if not admitted:
                raise AdmissionRejected(retry_after=await self.admission.retry_after(client_key))

        validation = validate_text(text, self._max_input_length)
        if not validation.is_valid:
            raise ValidationError(validation.error)

        logger.info(f"🔍 Starting analysis for {client_key}: {text[:100]}...")
        try:
            report = await asyncio.wait_for(self._run_pipeline(text), timeout=self._request_deadline)
        except asyncio.TimeoutError as e:
            logger.error(f"❌ Analysis exceeded the {self._request_deadline}s deadline")
            raise UpstreamTimeoutError(detail="request deadline exceeded") from e
        except SchemaMismatchError as e:
            logger.error(f"❌ Schema mismatch in {e.schema_name}: {e.detail}")
            raise
        except FactCheckError as e:
            logger.error(f"❌ Analysis failed ({type(e).__name__}): {e.detail or e.public_message}")
            raise
        except Exception as e:
            logger.exception(f"❌ Unexpected analysis failure: {e}")
            raise FactCheckError(detail=f"{type(e).__name__}: {e}") from e

        async with self._store_errors(client_key):
            remaining = await self.admission.remaining(client_key)
        logger.info(f"✅ Analysis complete for {client_key}: {report.article.verdict.value}, {remaining} requests left")
        return AnalysisOutcome(report=report, original_input=text, remaining_requests=remaining)

    @contextlib.asynccontextmanager
    async def _store_errors(self, client_key: str):
        """Map rate-limit store failures (connection loss, lock timeout) to a 500."""
        try:
            yield
        except FactCheckError:
            raise
        except Exception as e:
            logger.exception(f"❌ Rate-limit store failed for {client_key}: {e}")
            raise FactCheckError(detail=f"rate-limit store: {type(e).__name__}: {e}") from e

    async def _run_pipeline(self, text: str) -> VerificationReport:
        await self.moderation.ensure_allowed(text)
        claims = await self.extraction.extract(text)
        evidence = await self.evidence.gather(claims, self._evidence_policy)
        return await self.verification.verify(claims, evidence)

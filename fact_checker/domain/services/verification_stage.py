"""Verification synthesis phase."""

import logging
from typing import Iterable, List

from ..instructions import VERIFICATION_INSTRUCTIONS
from ..models.claim import Claim, ClaimList, Importance
from ..models.evidence import EvidenceBundle
from ..models.verification import AssessmentLabel, ClaimAssessment, Verdict, VerificationReport
from .structured_completion import StructuredCompletion

logger = logging.getLogger(__name__)


def derive_article_verdict(claims: Iterable[Claim], assessments: Iterable[ClaimAssessment]) -> Verdict:
    """Apply the article-verdict rules to a set of assessments.

    The verdict returned to callers is the model's; this reference
    derivation is only used to flag disagreements in the logs.

    Rules are evaluated over high-importance claims, or over all assessed
    claims when none is high-importance:

    - FALSE when a majority is CONTRADICTED
    - UNVERIFIABLE when a majority is INSUFFICIENT_EVIDENCE
    - TRUE when all are SUPPORTED and no claim at all is CONTRADICTED
    - MISLEADING when most claims are SUPPORTED but a core claim is CONTRADICTED
    - MIXED when both SUPPORTED and CONTRADICTED labels occur
    - UNVERIFIABLE otherwise
    """
    importance = {claim.id: claim.importance for claim in claims}
    labels = [(a.label, importance.get(a.claim_id, Importance.MEDIUM)) for a in assessments]
    if not labels:
        return Verdict.UNVERIFIABLE

    core = [label for label, imp in labels if imp is Importance.HIGH]
    if not core:
        core = [label for label, _ in labels]
    everything = [label for label, _ in labels]

    def majority(pool: List[AssessmentLabel], label: AssessmentLabel) -> bool:
        return pool.count(label) * 2 > len(pool)

    if majority(core, AssessmentLabel.CONTRADICTED):
        return Verdict.FALSE
    if majority(core, AssessmentLabel.INSUFFICIENT_EVIDENCE):
        return Verdict.UNVERIFIABLE
    if all(label is AssessmentLabel.SUPPORTED for label in core) and AssessmentLabel.CONTRADICTED not in everything:
        return Verdict.TRUE
    if majority(everything, AssessmentLabel.SUPPORTED) and AssessmentLabel.CONTRADICTED in core:
        return Verdict.MISLEADING
    if AssessmentLabel.SUPPORTED in everything and AssessmentLabel.CONTRADICTED in everything:
        return Verdict.MIXED
    return Verdict.UNVERIFIABLE


class VerificationStage:
    """Reduces claims and evidence into per-claim assessments and a verdict."""

    schema_name = "verification_report"

    def __init__(self, completion: StructuredCompletion, instructions: str = VERIFICATION_INSTRUCTIONS):
        self._completion = completion
        self._instructions = instructions

    async def verify(self, claim_list: ClaimList, evidence: EvidenceBundle) -> VerificationReport:
        """Assess every claim against the gathered evidence."""
        payload = {
            "claims_package": {
                "claims_list": claim_list.model_dump(mode="json"),
                "evidence_bundle": evidence.model_dump(mode="json"),
            }
        }
        logger.info(f"⚖️ Verifying {len(claim_list.claims)} claims against {len(evidence.results)} passages")
        report = await self._completion.complete(
            instructions=self._instructions,
            input_payload=payload,
            output_schema=VerificationReport,
            schema_name=self.schema_name,
        )
        self._check_consistency(claim_list, evidence, report)
        logger.info(f"✅ Article verdict: {report.article.verdict.value} ({report.article.confidence:.2f})")
        return report

    @staticmethod
    def _check_consistency(claim_list: ClaimList, evidence: EvidenceBundle, report: VerificationReport) -> None:
        known_ids = evidence.ids
        assessed = {a.claim_id for a in report.assessments}

        for assessment in report.assessments:
            if claim_list.get(assessment.claim_id) is None:
                logger.warning(f"⚠️ Assessment for unknown claim id {assessment.claim_id}")
            unknown = [i for i in assessment.cited_evidence_ids if i not in known_ids]
            if unknown:
                logger.warning(f"⚠️ Claim {assessment.claim_id} cites unknown evidence ids {unknown}")

        missing = [c.id for c in claim_list.claims if c.id not in assessed]
        if missing:
            logger.warning(f"⚠️ No assessment for claims {missing}")

        expected = derive_article_verdict(claim_list.claims, report.assessments)
        if expected is not report.article.verdict:
            logger.warning(
                f"⚠️ Model verdict {report.article.verdict.value} differs from rule-derived {expected.value}"
            )

"""Assessment service storing eligibility results."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.eligibility.models import EvaluationResult
from app.models.assessment import EligibilityAssessment

logger = logging.getLogger(__name__)


class AssessmentService:
    """Service for persisting eligibility assessments.

    Results are stored verbatim as produced by the engine; nothing here
    recomputes or adjusts a tier.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def record(
        self,
        submission_id: str,
        result: EvaluationResult,
        email: str | None = None,
    ) -> EligibilityAssessment:
        """Store an evaluation result for a submission.

        Args:
            submission_id: Intake submission the result belongs to
            result: Engine output
            email: Prospect contact, if provided

        Returns:
            The stored assessment
        """
        payload = result.to_dict()

        assessment = EligibilityAssessment(
            submission_id=submission_id,
            email=email,
            tier=result.tier.value,
            recommended_chapter=int(result.recommended_chapter),
            pass_count=result.pass_count,
            income_pass=result.flags.income_pass,
            budget_pass=result.flags.budget_pass,
            asset_risk=result.flags.asset_risk,
            reasons=payload["reasons"],
            metrics=payload["metrics"],
            disclaimer=result.disclaimer,
            disclaimer_version=result.disclaimer_version,
            income_basis=result.income_basis.value,
            threshold_table_id=result.thresholds.table_id,
            threshold_version=result.thresholds.version,
            threshold_hash=result.thresholds.content_hash,
            thresholds_stale=result.is_stale,
            as_of=result.thresholds.as_of,
            result=payload,
        )
        self.session.add(assessment)
        await self.session.commit()
        await self.session.refresh(assessment)

        logger.info(
            f"Recorded eligibility assessment {assessment.id}",
            extra={
                "action": "assessment_recorded",
                "context": {
                    "submission_id": submission_id,
                    "tier": assessment.tier,
                    "table_id": assessment.threshold_table_id,
                },
            },
        )

        return assessment

    async def latest_for_submission(self, submission_id: str) -> EligibilityAssessment | None:
        """Get the most recent assessment for a submission."""
        result = await self.session.execute(
            select(EligibilityAssessment)
            .where(EligibilityAssessment.submission_id == submission_id)
            .order_by(EligibilityAssessment.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

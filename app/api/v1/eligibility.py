"""Eligibility evaluation endpoints.

Engine validation errors and missing threshold tables are translated to
HTTP responses by the exception handlers registered in ``app.main``.
"""

import logging
from datetime import date

from fastapi import APIRouter, status

from app.api.deps import DbSession, Engine, Notifications, RequestId, Thresholds
from app.core.config import settings
from app.schemas.eligibility import (
    AssessmentCreatedResponse,
    AssessmentCreateRequest,
    EligibilityEvaluationRequest,
    EligibilityResultRead,
    ThresholdTableRead,
)
from app.services.assessment import AssessmentService
from app.services.notifications import NotificationError
from app.utils.time import local_today, utc_now

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/eligibility", tags=["eligibility"])


def _evaluation_date(requested: date | None) -> date:
    """Requested date, or today in the firm's timezone."""
    return requested or local_today(settings.timezone)


@router.post("/evaluate", response_model=EligibilityResultRead)
async def evaluate(
    body: EligibilityEvaluationRequest,
    engine: Engine,
    request_id: RequestId,
) -> EligibilityResultRead:
    """Evaluate preliminary Chapter 7 / Chapter 13 eligibility.

    Nothing is stored. Staleness of the threshold table is logged, not
    returned.
    """
    result = engine.evaluate(body.to_evaluation_input(), _evaluation_date(body.as_of))

    logger.info(
        f"Eligibility evaluation served: tier={result.tier.value}",
        extra={"request_id": request_id, "action": "eligibility_evaluate"},
    )

    return EligibilityResultRead.from_result(result)


@router.post(
    "/assessments",
    response_model=AssessmentCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_assessment(
    body: AssessmentCreateRequest,
    engine: Engine,
    session: DbSession,
    notifications: Notifications,
    request_id: RequestId,
) -> AssessmentCreatedResponse:
    """Evaluate and store an assessment for an intake submission.

    Staff are emailed a summary when a leads address is configured. The
    result is returned to the client only when ``show_eligibility`` is on.
    """
    result = engine.evaluate(body.to_evaluation_input(), _evaluation_date(body.as_of))

    service = AssessmentService(session)
    assessment = await service.record(body.submission_id, result, email=body.email)

    try:
        await notifications.send_staff_summary(
            result,
            submission_id=body.submission_id,
            contact=body.email,
            received_at=utc_now(),
        )
        if body.email:
            await notifications.send_prospect_confirmation(body.email, result)
    except NotificationError:
        # The assessment is stored; staff can follow up from the record
        logger.warning(
            f"Notification failed for assessment {assessment.id}",
            extra={"request_id": request_id, "action": "notification_failed"},
        )

    return AssessmentCreatedResponse(
        id=assessment.id,
        submission_id=assessment.submission_id,
        result=EligibilityResultRead.from_result(result) if settings.show_eligibility else None,
    )


@router.get("/thresholds", response_model=ThresholdTableRead)
async def get_thresholds(
    provider: Thresholds,
    as_of: date | None = None,
) -> ThresholdTableRead:
    """Get the threshold table in effect on a date (defaults to today)."""
    resolved = provider.resolve(_evaluation_date(as_of))
    table = resolved.table

    return ThresholdTableRead(
        table_id=table.table_id,
        jurisdiction=table.jurisdiction,
        version=table.version,
        effective_from=table.effective_from,
        effective_to=table.effective_to,
        as_of=resolved.as_of,
        is_stale=resolved.is_stale,
        content_hash=table.content_hash,
    )

"""Tests for stored eligibility assessments."""

from datetime import timedelta
from typing import Any

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_notification_service
from app.core.config import settings
from app.eligibility.engine import evaluate
from app.main import app
from app.services.assessment import AssessmentService
from app.services.notifications import (
    EmailProvider,
    LoggingEmailProvider,
    NotificationError,
    NotificationService,
)

ASSESSMENTS_URL = "/api/v1/eligibility/assessments"


@pytest.fixture
def assessment_payload(evaluation_payload: dict[str, Any]) -> dict[str, Any]:
    """Valid assessment request for a prospect."""
    return {
        **evaluation_payload,
        "submission_id": "sub-123",
        "email": "prospect@example.com",
    }


class TestAssessmentService:
    """Tests for persisting results."""

    @pytest.mark.asyncio
    async def test_record_stores_result_verbatim(
        self, async_session: AsyncSession, make_input, resolved
    ) -> None:
        """Test the stored result equals the engine output."""
        result = evaluate(make_input(), resolved)
        service = AssessmentService(async_session)

        assessment = await service.record("sub-1", result, email="a@example.com")

        assert assessment.id is not None
        assert assessment.tier == "Medium"
        assert assessment.recommended_chapter == 7
        assert assessment.pass_count == 2
        assert assessment.income_pass is True
        assert assessment.budget_pass is False
        assert assessment.asset_risk is False
        assert assessment.threshold_table_id == "ut-2025-01"
        assert assessment.threshold_hash == resolved.table.content_hash
        assert assessment.result == result.to_dict()
        assert len(assessment.reasons) == 3
        assert assessment.metrics["budget"]["disposable_income"] == "200.00"

    @pytest.mark.asyncio
    async def test_latest_for_submission(
        self, async_session: AsyncSession, make_input, resolved
    ) -> None:
        """Test the newest assessment for a submission is returned."""
        service = AssessmentService(async_session)
        first = await service.record("sub-2", evaluate(make_input(), resolved))
        first.created_at = first.created_at - timedelta(hours=1)
        await async_session.commit()

        updated_input = make_input(
            household_size=2,
            monthly_income=None,
            income_above_threshold=False,
        )
        second = await service.record("sub-2", evaluate(updated_input, resolved))

        latest = await service.latest_for_submission("sub-2")

        assert latest is not None
        assert latest.id == second.id

    @pytest.mark.asyncio
    async def test_latest_for_unknown_submission(self, async_session: AsyncSession) -> None:
        """Test no assessment is found for an unknown submission."""
        service = AssessmentService(async_session)

        assert await service.latest_for_submission("missing") is None


class TestAssessmentsEndpoint:
    """Tests for POST /eligibility/assessments."""

    @pytest.mark.asyncio
    async def test_create_assessment(
        self,
        async_client: AsyncClient,
        async_session: AsyncSession,
        assessment_payload: dict[str, Any],
    ) -> None:
        """Test an assessment is stored and the result withheld by default."""
        response = await async_client.post(ASSESSMENTS_URL, json=assessment_payload)

        assert response.status_code == 201
        data = response.json()
        assert data["submission_id"] == "sub-123"
        assert data["result"] is None

        stored = await AssessmentService(async_session).latest_for_submission("sub-123")
        assert stored is not None
        assert stored.id == data["id"]
        assert stored.email == "prospect@example.com"
        assert stored.tier == "Medium"

    @pytest.mark.asyncio
    async def test_result_returned_when_enabled(
        self,
        async_client: AsyncClient,
        assessment_payload: dict[str, Any],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test the public result is returned when show_eligibility is on."""
        monkeypatch.setattr(settings, "show_eligibility", True)

        response = await async_client.post(ASSESSMENTS_URL, json=assessment_payload)

        assert response.status_code == 201
        result = response.json()["result"]
        assert result["tier"] == "Medium"
        assert "metrics" not in result

    @pytest.mark.asyncio
    async def test_notifications_sent(
        self,
        async_client: AsyncClient,
        email_provider: LoggingEmailProvider,
        assessment_payload: dict[str, Any],
    ) -> None:
        """Test staff get a summary and the prospect a confirmation."""
        response = await async_client.post(ASSESSMENTS_URL, json=assessment_payload)

        assert response.status_code == 201
        recipients = [message["to"] for message in email_provider.sent]
        assert recipients == ["leads@example.com", "prospect@example.com"]
        assert "Possibly" in email_provider.sent[0]["subject"]

    @pytest.mark.asyncio
    async def test_no_confirmation_without_email(
        self,
        async_client: AsyncClient,
        email_provider: LoggingEmailProvider,
        assessment_payload: dict[str, Any],
    ) -> None:
        """Test only the staff summary is sent when no email is given."""
        del assessment_payload["email"]

        response = await async_client.post(ASSESSMENTS_URL, json=assessment_payload)

        assert response.status_code == 201
        assert [message["to"] for message in email_provider.sent] == ["leads@example.com"]

    @pytest.mark.asyncio
    async def test_invalid_input_not_stored(
        self,
        async_client: AsyncClient,
        async_session: AsyncSession,
        assessment_payload: dict[str, Any],
    ) -> None:
        """Test malformed input is rejected before anything is stored."""
        assessment_payload["household_size"] = 0

        response = await async_client.post(ASSESSMENTS_URL, json=assessment_payload)

        assert response.status_code == 422
        assert await AssessmentService(async_session).latest_for_submission("sub-123") is None

    @pytest.mark.asyncio
    async def test_invalid_email_rejected(
        self, async_client: AsyncClient, assessment_payload: dict[str, Any]
    ) -> None:
        """Test a malformed email address fails validation."""
        assessment_payload["email"] = "not-an-email"

        response = await async_client.post(ASSESSMENTS_URL, json=assessment_payload)

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_email_failure_does_not_fail_request(
        self,
        async_client: AsyncClient,
        async_session: AsyncSession,
        assessment_payload: dict[str, Any],
    ) -> None:
        """Test the assessment is still stored when email delivery fails."""

        class FailingEmailProvider(EmailProvider):
            async def send(self, recipient, subject, body, html_body=None):
                raise NotificationError("provider unavailable")

        app.dependency_overrides[get_notification_service] = lambda: NotificationService(
            provider=FailingEmailProvider(), staff_email="leads@example.com"
        )

        response = await async_client.post(ASSESSMENTS_URL, json=assessment_payload)

        assert response.status_code == 201
        assert await AssessmentService(async_session).latest_for_submission("sub-123") is not None

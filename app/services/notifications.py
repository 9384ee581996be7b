"""Email notifications for eligibility assessments.

Renders the staff summary and prospect confirmation templates and hands
them to an email provider. Template values are escaped in HTML bodies.
"""

import html
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping
from uuid import uuid4
from zoneinfo import ZoneInfo

from app.core.config import settings
from app.eligibility.explanations import format_currency
from app.eligibility.models import EvaluationResult, IncomeSource
from app.fixtures.email_templates import (
    PROSPECT_CONFIRMATION,
    STAFF_ELIGIBILITY_SUMMARY,
    get_email_template,
)

logger = logging.getLogger(__name__)


class NotificationError(Exception):
    """Raised when an email cannot be handed to the provider."""

    pass


@dataclass(frozen=True)
class RenderedEmail:
    """A rendered email ready to send."""

    subject: str
    body: str
    html_body: str | None = None


class EmailProvider(ABC):
    """Abstract base class for email providers."""

    @abstractmethod
    async def send(
        self,
        recipient: str,
        subject: str,
        body: str,
        html_body: str | None = None,
    ) -> tuple[str, dict]:
        """Send an email and return (provider_message_id, metadata).

        Raises NotificationError on failure.
        """
        pass


class LoggingEmailProvider(EmailProvider):
    """Email provider that records sends in the log instead of delivering.

    Used in development and tests; swap for an SMTP or API provider in
    production.
    """

    def __init__(
        self,
        from_email: str = "",
        from_name: str = "",
    ):
        self.from_email = from_email
        self.from_name = from_name
        self.sent: list[dict[str, Any]] = []

    async def send(
        self,
        recipient: str,
        subject: str,
        body: str,
        html_body: str | None = None,
    ) -> tuple[str, dict]:
        """Simulate sending an email."""
        logger.info(f"Sending email to {recipient}: {subject}")

        message_id = f"email_{uuid4().hex[:16]}"
        self.sent.append(
            {
                "id": message_id,
                "to": recipient,
                "subject": subject,
                "body": body,
                "html_body": html_body,
            }
        )

        return message_id, {
            "provider": "log",
            "from": f"{self.from_name} <{self.from_email}>",
            "to": recipient,
            "has_html": html_body is not None,
        }


def _render_value(value: Any, as_html: bool) -> str:
    if isinstance(value, (list, tuple)):
        if as_html:
            return "".join(f"<li>{html.escape(str(item))}</li>" for item in value)
        return "\n".join(f"{i}. {item}" for i, item in enumerate(value, start=1))
    text = str(value)
    return html.escape(text) if as_html else text


def render_template(template: str, context: Mapping[str, Any], as_html: bool = False) -> str:
    """Substitute ``{{name}}`` placeholders.

    Args:
        template: Template text
        context: Placeholder values
        as_html: Escape values for an HTML body

    Returns:
        Rendered text; unknown placeholders are left in place
    """
    rendered = template
    for key, value in context.items():
        placeholder = f"{{{{{key}}}}}"
        rendered = rendered.replace(placeholder, _render_value(value, as_html))
    return rendered


def render_email(code: str, context: Mapping[str, Any]) -> RenderedEmail:
    """Render a stored template by code."""
    template = get_email_template(code)
    html_template = template.get("html_body")

    return RenderedEmail(
        subject=render_template(template["subject"], context),
        body=render_template(template["body"], context),
        html_body=render_template(html_template, context, as_html=True) if html_template else None,
    )


def staff_summary_context(
    result: EvaluationResult,
    submission_id: str,
    contact: str | None,
    received_at: datetime,
    timezone_name: str = "America/Denver",
) -> dict[str, Any]:
    """Build template context for the staff eligibility summary."""
    income = result.metrics["income"]
    budget = result.metrics["budget"]
    local_received = received_at.astimezone(ZoneInfo(timezone_name))

    annual_income_label = "Annual income"
    if result.income_basis is IncomeSource.THRESHOLD_ANSWER:
        annual_income_label = "Estimated annual income (from expenses)"

    stale_notice = ""
    if result.is_stale:
        stale_notice = (
            f" - STALE: table expired {result.thresholds.effective_to.isoformat()}"
        )

    return {
        "submission_id": submission_id,
        "contact": contact or "not provided",
        "jurisdiction": result.thresholds.jurisdiction,
        "outlook": result.outlook,
        "tier": result.tier.value,
        "chapter": int(result.recommended_chapter),
        "annual_income_label": annual_income_label,
        "annual_income": format_currency(income["annual_income"]),
        "household_size": int(income["household_size"]),
        "median_income": format_currency(income["median_income_cap"]),
        "disposable_income": format_currency(budget["disposable_income"]),
        "income_basis": result.income_basis.value.replace("_", " "),
        "reasons": list(result.reasons),
        "table_id": result.thresholds.table_id,
        "table_version": result.thresholds.version,
        "stale_notice": stale_notice,
        "disclaimers": list(result.disclaimers),
        "received_at": local_received.strftime("%Y-%m-%d %H:%M %Z"),
    }


class NotificationService:
    """Sends eligibility notifications through an email provider."""

    def __init__(
        self,
        provider: EmailProvider | None = None,
        staff_email: str | None = None,
        timezone_name: str | None = None,
    ):
        self.provider = provider or LoggingEmailProvider(
            from_email=settings.email_from_address,
            from_name=settings.email_from_name,
        )
        self.staff_email = staff_email if staff_email is not None else settings.staff_leads_email
        self.timezone_name = timezone_name or settings.timezone

    async def send_staff_summary(
        self,
        result: EvaluationResult,
        submission_id: str,
        contact: str | None,
        received_at: datetime,
    ) -> str | None:
        """Email the staff eligibility summary.

        Returns:
            Provider message id, or None when no staff address is configured
        """
        if not self.staff_email:
            logger.info(
                "No staff leads email configured, skipping eligibility summary",
                extra={"action": "staff_summary_skipped", "context": {"submission_id": submission_id}},
            )
            return None

        context = staff_summary_context(
            result,
            submission_id=submission_id,
            contact=contact,
            received_at=received_at,
            timezone_name=self.timezone_name,
        )
        email = render_email(STAFF_ELIGIBILITY_SUMMARY, context)

        return await self._send(self.staff_email, email, STAFF_ELIGIBILITY_SUMMARY)

    async def send_prospect_confirmation(
        self,
        email_address: str,
        result: EvaluationResult,
    ) -> str:
        """Email the prospect a receipt. Never includes the assessment outcome."""
        context = {
            "email": email_address,
            "jurisdiction_name": result.thresholds.jurisdiction_name,
            "disclaimers": list(result.disclaimers),
        }
        email = render_email(PROSPECT_CONFIRMATION, context)

        return await self._send(email_address, email, PROSPECT_CONFIRMATION)

    async def _send(self, recipient: str, email: RenderedEmail, code: str) -> str:
        try:
            message_id, metadata = await self.provider.send(
                recipient,
                email.subject,
                email.body,
                html_body=email.html_body,
            )
        except NotificationError:
            logger.exception(f"Failed to send {code} email")
            raise

        logger.info(
            f"Sent {code} email",
            extra={"action": "email_sent", "context": {"template": code, "message_id": message_id}},
        )
        return message_id

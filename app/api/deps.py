"""FastAPI dependency injection utilities."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.db.session import get_db
from app.eligibility.engine import EligibilityEngine
from app.eligibility.thresholds import ThresholdProvider
from app.services.notifications import NotificationService


@lru_cache
def get_threshold_provider() -> ThresholdProvider:
    """Get the shared threshold provider, loaded once from disk.

    Returns:
        ThresholdProvider for the configured jurisdiction
    """
    return ThresholdProvider.from_directory(
        settings.thresholds_dir,
        jurisdiction=settings.jurisdiction,
        grace_days=settings.threshold_grace_days,
    )


def get_engine(
    provider: Annotated[ThresholdProvider, Depends(get_threshold_provider)],
) -> EligibilityEngine:
    """Get an eligibility engine bound to the threshold provider."""
    return EligibilityEngine(provider, redact_figures=settings.redact_financial_figures)


def get_notification_service() -> NotificationService:
    """Get the notification service for the configured provider."""
    return NotificationService()


def get_request_id(request: Request) -> str | None:
    """Extract request ID from headers.

    Args:
        request: FastAPI request

    Returns:
        Request ID or None
    """
    return request.headers.get("X-Request-ID")


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db)]
Engine = Annotated[EligibilityEngine, Depends(get_engine)]
Thresholds = Annotated[ThresholdProvider, Depends(get_threshold_provider)]
Notifications = Annotated[NotificationService, Depends(get_notification_service)]
RequestId = Annotated[str | None, Depends(get_request_id)]

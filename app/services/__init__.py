"""Business logic services."""

from app.services.assessment import AssessmentService
from app.services.notifications import EmailProvider, LoggingEmailProvider, NotificationService

__all__ = [
    "AssessmentService",
    "NotificationService",
    "EmailProvider",
    "LoggingEmailProvider",
]

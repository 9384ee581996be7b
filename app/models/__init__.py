"""Database models for the eligibility service."""

from app.models.assessment import EligibilityAssessment

__all__ = [
    "EligibilityAssessment",
]

"""Pydantic schemas for API request/response validation."""

from app.schemas.eligibility import (
    AssessmentCreatedResponse,
    AssessmentCreateRequest,
    EligibilityEvaluationRequest,
    EligibilityResultRead,
    ThresholdTableRead,
)

__all__ = [
    "EligibilityEvaluationRequest",
    "AssessmentCreateRequest",
    "EligibilityResultRead",
    "AssessmentCreatedResponse",
    "ThresholdTableRead",
]

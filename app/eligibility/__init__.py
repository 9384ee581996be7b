"""Deterministic bankruptcy eligibility engine.

Evaluates a prospect's household, income, budget and assets against
versioned, jurisdiction-scoped threshold tables and recommends a
bankruptcy chapter. Every decision is deterministic and explainable.
"""

from app.eligibility.engine import EligibilityEngine, evaluate, evaluate_eligibility
from app.eligibility.errors import (
    ConfigurationError,
    EligibilityError,
    StaleThresholdWarning,
    ValidationError,
)
from app.eligibility.models import (
    Chapter,
    EvaluationInput,
    EvaluationResult,
    IncomeSource,
    Tier,
    validate_input,
)
from app.eligibility.thresholds import ResolvedThresholds, ThresholdProvider, ThresholdTable

__all__ = [
    "EligibilityEngine",
    "evaluate",
    "evaluate_eligibility",
    "EligibilityError",
    "ValidationError",
    "ConfigurationError",
    "StaleThresholdWarning",
    "EvaluationInput",
    "EvaluationResult",
    "validate_input",
    "Tier",
    "Chapter",
    "IncomeSource",
    "ThresholdTable",
    "ThresholdProvider",
    "ResolvedThresholds",
]

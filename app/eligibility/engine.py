"""Deterministic bankruptcy eligibility engine.

Converts self-reported or bank-derived financial facts into a preliminary
Chapter 7 / Chapter 13 recommendation. Every evaluation is:
- Deterministic (same input and table = same output)
- Explainable (one reason per test, metrics for every comparison)
- Auditable (records the threshold table version and hash)

The engine holds no state between calls. Threshold tables are passed in
already resolved, or looked up through an injected provider.
"""

import logging
from datetime import date

from app.eligibility.assets import classify_assets
from app.eligibility.budget import classify_budget
from app.eligibility.explanations import build_explanation
from app.eligibility.income import classify_income
from app.eligibility.models import (
    EvaluationFlags,
    EvaluationInput,
    EvaluationResult,
    ThresholdReference,
    validate_input,
)
from app.eligibility.normalization import normalize_income
from app.eligibility.recommender import recommend_chapter
from app.eligibility.thresholds import ResolvedThresholds, ThresholdProvider
from app.fixtures.legal_text import CURRENT_LEGAL_TEXT_VERSION

logger = logging.getLogger(__name__)


def evaluate(
    data: EvaluationInput,
    resolved: ResolvedThresholds,
    redact_figures: bool = False,
    legal_text_version: str = CURRENT_LEGAL_TEXT_VERSION,
) -> EvaluationResult:
    """Evaluate one prospect against an already resolved threshold table.

    Args:
        data: Financial facts for the household
        resolved: Threshold table for the evaluation date
        redact_figures: Leave dollar figures out of the reasons
        legal_text_version: Disclaimer bundle to render

    Returns:
        EvaluationResult. A Low tier is a successful outcome, not an error.

    Raises:
        ValidationError: If the input is malformed. Nothing is evaluated.
    """
    validate_input(data)

    table = resolved.table
    income = normalize_income(data)

    income_outcome = classify_income(income, data.household_size, table)
    budget_outcome = classify_budget(
        income.monthly_income,
        data.monthly_expenses,
        table.disposable_income_ratio,
    )
    asset_outcome = classify_assets(
        data.home_equity,
        data.vehicle_equity,
        data.has_valuable_assets,
        data.household_size,
        table,
    )

    recommendation = recommend_chapter(
        income_outcome.passed,
        budget_outcome.passed,
        asset_outcome.passed,
    )

    explanation = build_explanation(
        income_outcome,
        budget_outcome,
        asset_outcome,
        recommendation,
        redact_figures=redact_figures,
        legal_text_version=legal_text_version,
    )

    result = EvaluationResult(
        tier=recommendation.tier,
        recommended_chapter=recommendation.chapter,
        pass_count=recommendation.pass_count,
        summary=explanation.summary,
        reasons=explanation.reasons,
        flags=EvaluationFlags(
            income_pass=income_outcome.passed,
            budget_pass=budget_outcome.passed,
            asset_risk=not asset_outcome.passed,
        ),
        metrics={
            "income": income_outcome.metrics,
            "budget": budget_outcome.metrics,
            "asset": asset_outcome.metrics,
        },
        disclaimer=explanation.disclaimer,
        disclaimers=explanation.disclaimers,
        disclaimer_version=explanation.disclaimer_version,
        income_basis=income.basis,
        thresholds=ThresholdReference(
            table_id=table.table_id,
            version=table.version,
            jurisdiction=table.jurisdiction,
            jurisdiction_name=table.jurisdiction_name,
            content_hash=table.content_hash,
            effective_from=table.effective_from,
            effective_to=table.effective_to,
            as_of=resolved.as_of,
            is_stale=resolved.is_stale,
        ),
    )

    logger.info(
        f"Eligibility evaluated: tier={result.tier.value} "
        f"chapter={int(result.recommended_chapter)} passes={result.pass_count}",
        extra={
            "action": "eligibility_evaluated",
            "context": {
                "household_size": data.household_size,
                "income_basis": income.basis.value,
                "table_id": table.table_id,
                "stale_thresholds": resolved.is_stale,
            },
        },
    )

    return result


class EligibilityEngine:
    """Eligibility engine bound to a threshold provider.

    Validates input, resolves the table for the evaluation date and
    evaluates. Safe to share between concurrent callers.
    """

    def __init__(
        self,
        provider: ThresholdProvider,
        redact_figures: bool = False,
        legal_text_version: str = CURRENT_LEGAL_TEXT_VERSION,
    ) -> None:
        self.provider = provider
        self.redact_figures = redact_figures
        self.legal_text_version = legal_text_version

    def resolve_thresholds(self, as_of: date) -> ResolvedThresholds:
        """Resolve the table for a date (see ThresholdProvider.resolve)."""
        return self.provider.resolve(as_of)

    def evaluate(self, data: EvaluationInput, as_of: date) -> EvaluationResult:
        """Evaluate input as of a date.

        Raises:
            ValidationError: If the input is malformed (checked first).
            ConfigurationError: If no threshold table covers ``as_of``.
        """
        validate_input(data)
        resolved = self.resolve_thresholds(as_of)

        return evaluate(
            data,
            resolved,
            redact_figures=self.redact_figures,
            legal_text_version=self.legal_text_version,
        )


def evaluate_eligibility(
    data: EvaluationInput,
    as_of: date,
    provider: ThresholdProvider | None = None,
) -> EvaluationResult:
    """Convenience function to evaluate with the published tables.

    Args:
        data: Financial facts for the household
        as_of: Evaluation date used to pick the threshold table
        provider: Table source (defaults to the shipped YAML tables)

    Returns:
        EvaluationResult
    """
    engine = EligibilityEngine(provider or ThresholdProvider.from_directory())
    return engine.evaluate(data, as_of)

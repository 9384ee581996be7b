"""Explanation builder.

Turns classifier outcomes into display text. Reasons are always emitted
in the order income, budget, asset, one per classifier, whether or not
each test passed. Disclaimers are copied verbatim from the versioned
legal text and never include user-supplied values.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping

from app.eligibility.models import ClassifierOutcome
from app.eligibility.recommender import Recommendation
from app.fixtures.legal_text import CURRENT_LEGAL_TEXT_VERSION, get_legal_text

REASON_ORDER = ("income", "budget", "asset")


@dataclass(frozen=True)
class Explanation:
    """Rendered reasons, summary and disclaimers."""

    reasons: tuple[str, ...]
    summary: str
    disclaimer: str
    disclaimers: tuple[str, ...]
    disclaimer_version: str


def format_currency(amount: Decimal) -> str:
    """Format as US dollars with cents, e.g. $48,000.00."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def _income_figures(metrics: Mapping[str, Decimal], indicators: Mapping[str, bool]) -> str:
    cap = format_currency(metrics["median_income_cap"])
    if indicators.get("income_estimated"):
        return f"median for your household: {cap}"
    return f"annual income {format_currency(metrics['annual_income'])} vs. median {cap}"


def _budget_figures(metrics: Mapping[str, Decimal], indicators: Mapping[str, bool]) -> str:
    return (
        f"{format_currency(metrics['disposable_income'])} left after expenses; "
        f"threshold {format_currency(metrics['disposable_income_threshold'])}"
    )


def _asset_figures(metrics: Mapping[str, Decimal], indicators: Mapping[str, bool]) -> str:
    if "home_equity" in metrics:
        home = (
            f"home equity {format_currency(metrics['home_equity'])} vs. "
            f"{format_currency(metrics['homestead_exemption'])} exemption"
        )
    else:
        home = "no home owned"
    vehicle = (
        f"vehicle equity {format_currency(metrics['vehicle_equity'])} vs. "
        f"{format_currency(metrics['vehicle_exemption'])} exemption"
    )
    return f"{home}; {vehicle}"


FIGURE_RENDERERS = {
    "income": _income_figures,
    "budget": _budget_figures,
    "asset": _asset_figures,
}


def describe(outcome: ClassifierOutcome, redact_figures: bool = False) -> str:
    """Reason text for one outcome, with figures unless redacted.

    Figures are composed only from the outcome's metrics and indicators.
    """
    if redact_figures:
        return outcome.reason
    figures = FIGURE_RENDERERS[outcome.name](outcome.metrics, outcome.indicators)
    return f"{outcome.reason} ({figures})"


def build_explanation(
    income: ClassifierOutcome,
    budget: ClassifierOutcome,
    asset: ClassifierOutcome,
    recommendation: Recommendation,
    redact_figures: bool = False,
    legal_text_version: str = CURRENT_LEGAL_TEXT_VERSION,
) -> Explanation:
    """Render reasons, summary and disclaimers for an evaluation."""
    outcomes = {outcome.name: outcome for outcome in (income, budget, asset)}
    if tuple(sorted(outcomes)) != tuple(sorted(REASON_ORDER)):
        raise ValueError(f"Expected outcomes {REASON_ORDER}, got {tuple(outcomes)}")

    legal_text = get_legal_text(legal_text_version)

    reasons = tuple(describe(outcomes[name], redact_figures) for name in REASON_ORDER)
    summary = str(legal_text["summary"]).format(tier=recommendation.tier.value)

    return Explanation(
        reasons=reasons,
        summary=summary,
        disclaimer=str(legal_text["disclaimer"]),
        disclaimers=tuple(legal_text["disclaimers"]),
        disclaimer_version=legal_text_version,
    )

"""Tests for reasons, summary and disclaimer rendering."""

from decimal import Decimal

import pytest

from app.eligibility.assets import classify_assets
from app.eligibility.budget import classify_budget
from app.eligibility.explanations import build_explanation, describe, format_currency
from app.eligibility.income import classify_income
from app.eligibility.models import IncomeSource
from app.eligibility.normalization import NormalizedIncome
from app.eligibility.recommender import recommend_chapter
from app.eligibility.thresholds import ThresholdTable
from app.fixtures.legal_text import LEGAL_TEXT


@pytest.fixture
def outcomes(utah_table: ThresholdTable):
    """Classifier outcomes for example scenario 1."""
    income = classify_income(
        NormalizedIncome(Decimal("4000"), IncomeSource.SELF_REPORTED), 1, utah_table
    )
    budget = classify_budget(Decimal("4000"), Decimal("3800"), Decimal("0.05"))
    asset = classify_assets(None, Decimal("1000"), False, 1, utah_table)
    return income, budget, asset


class TestFormatCurrency:
    """Tests for dollar formatting."""

    def test_thousands_and_cents(self) -> None:
        """Test grouping and two decimal places."""
        assert format_currency(Decimal("48000")) == "$48,000.00"
        assert format_currency(Decimal("0.5")) == "$0.50"

    def test_negative_amount(self) -> None:
        """Test negative amounts carry a leading minus."""
        assert format_currency(Decimal("-200")) == "-$200.00"


class TestExplanationBuilder:
    """Tests for the explanation contract."""

    def test_reasons_in_fixed_order(self, outcomes) -> None:
        """Test reasons are income, budget, asset."""
        income, budget, asset = outcomes
        explanation = build_explanation(income, budget, asset, recommend_chapter(True, False, True))

        assert len(explanation.reasons) == 3
        assert explanation.reasons[0].startswith("Income below Utah median")
        assert explanation.reasons[1].startswith("Disposable income above threshold")
        assert explanation.reasons[2].startswith("All key assets appear protected")

    def test_order_independent_of_argument_order(self, outcomes) -> None:
        """Test outcomes are placed by name, not argument position."""
        income, budget, asset = outcomes
        recommendation = recommend_chapter(True, False, True)

        shuffled = build_explanation(asset, income, budget, recommendation)
        ordered = build_explanation(income, budget, asset, recommendation)

        assert shuffled.reasons == ordered.reasons

    def test_all_reasons_present_when_all_pass(self, utah_table: ThresholdTable) -> None:
        """Test three reasons are emitted even when every test passes."""
        income = classify_income(
            NormalizedIncome(Decimal("3000"), IncomeSource.SELF_REPORTED), 2, utah_table
        )
        budget = classify_budget(Decimal("3000"), Decimal("2900"), Decimal("0.05"))
        asset = classify_assets(None, Decimal("500"), False, 2, utah_table)

        explanation = build_explanation(income, budget, asset, recommend_chapter(True, True, True))

        assert len(explanation.reasons) == 3

    def test_reasons_include_figures_by_default(self, outcomes) -> None:
        """Test figures are rendered from metrics."""
        income, budget, asset = outcomes
        explanation = build_explanation(income, budget, asset, recommend_chapter(True, False, True))

        assert explanation.reasons[0] == (
            "Income below Utah median for a household of 1 "
            "(annual income $48,000.00 vs. median $85,644.00)"
        )
        assert explanation.reasons[1] == (
            "Disposable income above threshold "
            "($200.00 left after expenses; threshold $200.00)"
        )
        assert explanation.reasons[2] == (
            "All key assets appear protected "
            "(no home owned; vehicle equity $1,000.00 vs. $3,000.00 exemption)"
        )

    def test_redaction_removes_figures(self, outcomes) -> None:
        """Test redacted reasons contain no dollar amounts."""
        income, budget, asset = outcomes
        explanation = build_explanation(
            income, budget, asset, recommend_chapter(True, False, True), redact_figures=True
        )

        assert explanation.reasons == (income.reason, budget.reason, asset.reason)
        assert all("$" not in reason for reason in explanation.reasons)

    def test_summary_interpolates_tier(self, outcomes) -> None:
        """Test the summary sentence names the tier."""
        income, budget, asset = outcomes
        explanation = build_explanation(income, budget, asset, recommend_chapter(True, False, True))

        assert explanation.summary == (
            "Based on the information provided, your preliminary eligibility "
            "for Chapter 7 is Medium."
        )

    def test_disclaimers_verbatim(self, outcomes) -> None:
        """Test disclaimer text is copied from the legal text unchanged."""
        income, budget, asset = outcomes
        explanation = build_explanation(income, budget, asset, recommend_chapter(True, False, True))
        legal_text = LEGAL_TEXT["2025-01"]

        assert explanation.disclaimer == legal_text["disclaimer"]
        assert explanation.disclaimers == tuple(legal_text["disclaimers"])
        assert explanation.disclaimer_version == "2025-01"

    def test_unknown_legal_text_version(self, outcomes) -> None:
        """Test an unpublished legal text version is rejected."""
        income, budget, asset = outcomes

        with pytest.raises(KeyError):
            build_explanation(
                income,
                budget,
                asset,
                recommend_chapter(True, False, True),
                legal_text_version="1999-01",
            )

    def test_missing_outcome_rejected(self, outcomes) -> None:
        """Test all three classifier outcomes are required."""
        income, budget, _ = outcomes

        with pytest.raises(ValueError):
            build_explanation(income, budget, budget, recommend_chapter(True, False, True))


class TestDescribe:
    """Tests for single-outcome descriptions."""

    def test_home_figures(self, utah_table: ThresholdTable) -> None:
        """Test home equity figures when a home is owned."""
        asset = classify_assets(Decimal("150000"), Decimal("2000"), False, 4, utah_table)

        assert describe(asset) == (
            "Potential non-exempt asset risk: home equity "
            "(home equity $150,000.00 vs. $104,700.00 exemption; "
            "vehicle equity $2,000.00 vs. $6,000.00 exemption)"
        )

    def test_estimated_income_omits_annual_figure(self, utah_table: ThresholdTable) -> None:
        """Test an estimated income does not present the proxy as fact."""
        income = classify_income(
            NormalizedIncome(Decimal("3300"), IncomeSource.THRESHOLD_ANSWER, above_threshold=False),
            1,
            utah_table,
        )

        assert describe(income) == (
            "Income below Utah median for a household of 1 "
            "(median for your household: $85,644.00)"
        )

"""Budget classifier (disposable income test).

Disposable income is monthly income minus necessary expenses. The test
passes when disposable income is below a fixed fraction of income:

    excess = income - expenses
    passed = excess < income * ratio

Negative excess (expenses above income) always passes. With zero income
and zero expenses the comparison is 0 < 0, so the test fails.
"""

from decimal import Decimal

from app.eligibility.models import ClassifierOutcome, money

NAME = "budget"


def classify_budget(
    monthly_income: Decimal,
    monthly_expenses: Decimal,
    disposable_income_ratio: Decimal,
) -> ClassifierOutcome:
    """Classify disposable income against the configured ratio."""
    income = money(monthly_income)
    expenses = money(monthly_expenses)

    excess = income - expenses
    threshold = income * disposable_income_ratio
    passed = excess < threshold

    if excess < 0:
        reason = "Expenses exceed income, leaving no disposable income"
    elif passed:
        reason = "Limited disposable income"
    else:
        reason = "Disposable income above threshold"

    return ClassifierOutcome(
        name=NAME,
        passed=passed,
        reason=reason,
        metrics={
            "monthly_income": income,
            "monthly_expenses": expenses,
            "disposable_income": excess,
            "disposable_income_threshold": threshold,
            "disposable_income_ratio": disposable_income_ratio,
        },
        indicators={"expenses_exceed_income": excess < 0},
    )

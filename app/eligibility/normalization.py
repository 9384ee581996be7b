"""Income normalization.

The intake asks whether household income is above the state median
rather than for an exact figure. The budget test still needs a monthly
income, so a proxy is estimated from necessary expenses:

- answered "above": income is taken as 1.5 x expenses
- answered "below": income is taken as 1.1 x expenses

Where an actual monthly figure exists (a self-reported amount, the
midpoint of a reported income range, or bank-derived averages) it is used
as-is and the income test compares it against the median directly.
"""

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Optional

from app.eligibility.errors import ValidationError
from app.eligibility.models import EvaluationInput, IncomeSource, money, to_decimal

ABOVE_THRESHOLD_MULTIPLIER = Decimal("1.5")
BELOW_THRESHOLD_MULTIPLIER = Decimal("1.1")

# Intake income ranges mapped to a representative monthly amount
INCOME_RANGE_MIDPOINTS: dict[str, Decimal] = {
    "<$3k": Decimal("2000"),
    "$3–5k": Decimal("4000"),
    "$5–8k": Decimal("6500"),
    "$8k+": Decimal("10000"),
}


@dataclass(frozen=True)
class NormalizedIncome:
    """Single internal income representation used by the classifiers."""

    monthly_income: Decimal
    basis: IncomeSource
    above_threshold: Optional[bool] = None

    @property
    def is_estimated(self) -> bool:
        return self.basis == IncomeSource.THRESHOLD_ANSWER


@dataclass(frozen=True)
class BankFinancialSummary:
    """Averages derived from a linked bank account."""

    monthly_average_income: Decimal
    monthly_average_expenses: Optional[Decimal] = None


def monthly_income_from_range(label: str) -> Decimal:
    """Representative monthly income for an intake income range.

    Raises:
        ValidationError: If the label is not a known range.
    """
    try:
        return INCOME_RANGE_MIDPOINTS[label]
    except KeyError:
        raise ValidationError(
            [f"Unknown income range {label!r}; expected one of {sorted(INCOME_RANGE_MIDPOINTS)}"]
        ) from None


def estimate_monthly_income(monthly_expenses: Decimal, income_above_threshold: bool) -> Decimal:
    """Proxy monthly income from expenses and the threshold answer."""
    multiplier = ABOVE_THRESHOLD_MULTIPLIER if income_above_threshold else BELOW_THRESHOLD_MULTIPLIER
    return money(to_decimal(monthly_expenses) * multiplier)


def normalize_income(data: EvaluationInput) -> NormalizedIncome:
    """Reduce either income representation to a monthly figure.

    Expects input that already passed ``validate_input``.
    """
    if data.monthly_income is not None:
        return NormalizedIncome(
            monthly_income=money(data.monthly_income),
            basis=data.income_source or IncomeSource.SELF_REPORTED,
        )

    return NormalizedIncome(
        monthly_income=estimate_monthly_income(data.monthly_expenses, data.income_above_threshold),
        basis=IncomeSource.THRESHOLD_ANSWER,
        above_threshold=data.income_above_threshold,
    )


def apply_bank_summary(data: EvaluationInput, summary: BankFinancialSummary) -> EvaluationInput:
    """Replace questionnaire income (and expenses, when known) with bank figures.

    Figures are copied unrounded; the engine validates and rounds them.
    """
    expenses = data.monthly_expenses
    if summary.monthly_average_expenses is not None:
        expenses = to_decimal(summary.monthly_average_expenses)

    return replace(
        data,
        monthly_income=to_decimal(summary.monthly_average_income),
        monthly_expenses=expenses,
        income_above_threshold=None,
        income_source=IncomeSource.BANK_DATA,
    )

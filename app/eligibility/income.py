"""Income classifier (means test).

Compares annualized household income with the jurisdiction's median
income for the household size. Income strictly below the median passes;
income exactly at the median fails.

When the prospect only answered whether income is above the median, that
answer decides the test and the monthly proxy is reported for reference.
"""

from decimal import Decimal

from app.eligibility.models import ClassifierOutcome, money
from app.eligibility.normalization import NormalizedIncome
from app.eligibility.thresholds import ThresholdTable, median_income_cap

NAME = "income"
MONTHS_PER_YEAR = 12
RATIO_PRECISION = Decimal("0.0001")


def classify_income(
    income: NormalizedIncome,
    household_size: int,
    table: ThresholdTable,
) -> ClassifierOutcome:
    """Run the means test.

    Args:
        income: Normalized monthly income
        household_size: Number of people in the household (>= 1)
        table: Resolved threshold table

    Returns:
        ClassifierOutcome; ``passed`` means income is below the median.
    """
    annual_income = money(income.monthly_income * MONTHS_PER_YEAR)
    cap = median_income_cap(table, household_size)

    if income.is_estimated:
        passed = not income.above_threshold
    else:
        passed = annual_income < cap

    metrics = {
        "household_size": Decimal(household_size),
        "monthly_income": income.monthly_income,
        "annual_income": annual_income,
        "median_income_cap": cap,
    }
    if cap > 0:
        metrics["income_to_median_ratio"] = (annual_income / cap).quantize(RATIO_PRECISION)

    if passed:
        reason = (
            f"Income below {table.jurisdiction_name} median "
            f"for a household of {household_size}"
        )
    else:
        reason = (
            f"Income at or above {table.jurisdiction_name} median "
            f"for a household of {household_size}"
        )

    return ClassifierOutcome(
        name=NAME,
        passed=passed,
        reason=reason,
        metrics=metrics,
        indicators={"income_estimated": income.is_estimated},
    )

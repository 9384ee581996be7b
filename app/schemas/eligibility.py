"""Eligibility evaluation schemas."""

from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, EmailStr, Field, model_validator

from app.eligibility.models import EvaluationInput, EvaluationResult, IncomeSource
from app.eligibility.normalization import monthly_income_from_range

IncomeRange = Literal["<$3k", "$3–5k", "$5–8k", "$8k+"]


class EligibilityEvaluationRequest(BaseModel):
    """Schema for an eligibility evaluation request.

    Exactly one of ``monthly_income``, ``income_range`` or
    ``income_above_threshold`` must be provided. ``home_equity`` is
    ``"NA"`` (or omitted) when no home is owned.
    """

    household_size: int = Field(..., description="People in the household, including the filer")
    monthly_income: Decimal | None = Field(None, description="Gross monthly household income")
    income_range: IncomeRange | None = Field(None, description="Monthly income range")
    income_above_threshold: bool | None = Field(
        None,
        description="Whether household income is above the state median",
    )
    monthly_expenses: Decimal = Field(..., description="Necessary monthly expenses")
    home_equity: Decimal | Literal["NA"] | None = Field(
        None,
        description="Equity in the primary residence, or NA when no home is owned",
    )
    vehicle_equity: Decimal = Field(Decimal(0), description="Combined equity in all vehicles")
    has_valuable_assets: bool = Field(
        False,
        description="Owns items worth more than the valuable-asset floor",
    )
    as_of: date | None = Field(None, description="Evaluation date (defaults to today)")

    @model_validator(mode="after")
    def validate_income_representation(self) -> "EligibilityEvaluationRequest":
        """Validate exactly one income representation is present."""
        provided = [
            name
            for name in ("monthly_income", "income_range", "income_above_threshold")
            if getattr(self, name) is not None
        ]
        if len(provided) != 1:
            raise ValueError(
                "Provide exactly one of monthly_income, income_range or income_above_threshold"
            )
        return self

    def to_evaluation_input(self) -> EvaluationInput:
        """Convert to the engine's input record."""
        monthly_income = self.monthly_income
        income_source = IncomeSource.SELF_REPORTED if monthly_income is not None else None

        if self.income_range is not None:
            monthly_income = monthly_income_from_range(self.income_range)
            income_source = IncomeSource.INCOME_RANGE

        home_equity = None if self.home_equity == "NA" else self.home_equity

        return EvaluationInput(
            household_size=self.household_size,
            monthly_expenses=self.monthly_expenses,
            vehicle_equity=self.vehicle_equity,
            has_valuable_assets=self.has_valuable_assets,
            home_equity=home_equity,
            monthly_income=monthly_income,
            income_above_threshold=self.income_above_threshold,
            income_source=income_source,
        )


class AssessmentCreateRequest(EligibilityEvaluationRequest):
    """Schema for evaluating and storing an assessment for an intake submission."""

    submission_id: str = Field(..., min_length=1, max_length=100)
    email: EmailStr | None = None


class EligibilityFlagsRead(BaseModel):
    """Pass/fail outcome of each test."""

    income_pass: bool
    budget_pass: bool
    asset_risk: bool


class EligibilityResultRead(BaseModel):
    """Client-facing eligibility result.

    Metrics, threshold references and staleness are deliberately absent;
    they are kept in logs and stored assessments only.
    """

    tier: str
    outlook: str
    recommended_chapter: int
    pass_count: int
    summary: str
    reasons: list[str]
    flags: EligibilityFlagsRead
    disclaimer: str
    disclaimers: list[str]
    disclaimer_version: str

    @classmethod
    def from_result(cls, result: EvaluationResult) -> "EligibilityResultRead":
        return cls(
            tier=result.tier.value,
            outlook=result.outlook,
            recommended_chapter=int(result.recommended_chapter),
            pass_count=result.pass_count,
            summary=result.summary,
            reasons=list(result.reasons),
            flags=EligibilityFlagsRead(
                income_pass=result.flags.income_pass,
                budget_pass=result.flags.budget_pass,
                asset_risk=result.flags.asset_risk,
            ),
            disclaimer=result.disclaimer,
            disclaimers=list(result.disclaimers),
            disclaimer_version=result.disclaimer_version,
        )


class AssessmentCreatedResponse(BaseModel):
    """Response after storing an assessment."""

    id: str
    submission_id: str
    result: EligibilityResultRead | None = None


class ThresholdTableRead(BaseModel):
    """Operational view of the threshold table in effect on a date."""

    table_id: str
    jurisdiction: str
    version: str
    effective_from: date
    effective_to: date
    as_of: date
    is_stale: bool
    content_hash: str

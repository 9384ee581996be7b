"""Eligibility engine data models.

Every object here is created fresh for a single evaluation and never
mutated afterwards. Currency amounts are ``Decimal``.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import Any, Mapping, Optional

from app.eligibility.errors import ValidationError

CENTS = Decimal("0.01")

# Upper bounds keep Decimal arithmetic exact in the default context
MAX_AMOUNT = Decimal("1000000000000")
MAX_HOUSEHOLD_SIZE = 100


def to_decimal(value: Any) -> Decimal:
    """Convert a numeric input to Decimal without binary float artefacts."""
    if isinstance(value, bool):
        raise TypeError("Boolean is not a currency amount")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, (float, str)):
        try:
            return Decimal(str(value))
        except InvalidOperation as exc:
            raise TypeError(f"Not a number: {value!r}") from exc
    raise TypeError(f"Unsupported amount type: {type(value).__name__}")


def money(value: Any) -> Decimal:
    """Round an amount to currency precision (cents)."""
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


class Tier(str, Enum):
    """Preliminary Chapter 7 eligibility tier, lowest to highest."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        """Position on the ordered scale (0 = lowest)."""
        return list(Tier).index(self)

    @property
    def outlook(self) -> str:
        """Consumer-facing label for the same tier."""
        return {
            Tier.LOW: "Unlikely",
            Tier.MEDIUM: "Possibly",
            Tier.HIGH: "Likely",
        }[self]


class Chapter(IntEnum):
    """Recommended bankruptcy chapter."""

    CHAPTER_7 = 7
    CHAPTER_13 = 13


class IncomeSource(str, Enum):
    """Where the monthly income figure used for evaluation came from."""

    SELF_REPORTED = "self_reported"
    INCOME_RANGE = "income_range"
    BANK_DATA = "bank_data"
    THRESHOLD_ANSWER = "threshold_answer"


@dataclass(frozen=True)
class EvaluationInput:
    """Pre-validated financial facts for one prospect.

    Exactly one income representation must be present: ``monthly_income``
    or ``income_above_threshold``. ``home_equity`` of ``None`` means no
    home is owned.
    """

    household_size: int
    monthly_expenses: Decimal
    vehicle_equity: Decimal
    has_valuable_assets: bool
    home_equity: Optional[Decimal] = None
    monthly_income: Optional[Decimal] = None
    income_above_threshold: Optional[bool] = None
    income_source: Optional[IncomeSource] = None

    @property
    def owns_home(self) -> bool:
        return self.home_equity is not None


def _check_amount(errors: list[str], name: str, value: Any) -> None:
    """Append an error if value is not a finite, non-negative amount."""
    try:
        amount = to_decimal(value)
    except TypeError:
        errors.append(f"{name} must be a number")
        return

    if not amount.is_finite():
        errors.append(f"{name} must be a finite number")
    elif amount < 0:
        errors.append(f"{name} must not be negative")
    elif amount > MAX_AMOUNT:
        errors.append(f"{name} must not exceed {MAX_AMOUNT:,}")


def validate_input(data: EvaluationInput) -> None:
    """Fail fast on malformed input.

    Raises:
        ValidationError: listing every problem found. Values are never clamped.
    """
    errors: list[str] = []

    size = data.household_size
    if isinstance(size, bool) or not isinstance(size, int):
        errors.append("household_size must be an integer")
    elif size < 1:
        errors.append("household_size must be at least 1")
    elif size > MAX_HOUSEHOLD_SIZE:
        errors.append(f"household_size must not exceed {MAX_HOUSEHOLD_SIZE}")

    _check_amount(errors, "monthly_expenses", data.monthly_expenses)
    _check_amount(errors, "vehicle_equity", data.vehicle_equity)

    if data.home_equity is not None:
        _check_amount(errors, "home_equity", data.home_equity)

    if not isinstance(data.has_valuable_assets, bool):
        errors.append("has_valuable_assets must be a boolean")

    has_income = data.monthly_income is not None
    has_answer = data.income_above_threshold is not None

    if has_income and has_answer:
        errors.append("Provide either monthly_income or income_above_threshold, not both")
    elif not has_income and not has_answer:
        errors.append("One of monthly_income or income_above_threshold is required")
    elif has_income:
        _check_amount(errors, "monthly_income", data.monthly_income)
        if data.income_source == IncomeSource.THRESHOLD_ANSWER:
            errors.append("income_source threshold_answer requires income_above_threshold")
    elif not isinstance(data.income_above_threshold, bool):
        errors.append("income_above_threshold must be a boolean")

    if errors:
        raise ValidationError(errors)


def _freeze(values: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(values))


def _jsonable(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


@dataclass(frozen=True)
class ClassifierOutcome:
    """Outcome of a single classifier.

    ``reason`` is plain language with no dollar figures; figures are
    rendered from ``metrics`` by the explanation builder when allowed.
    """

    name: str
    passed: bool
    reason: str
    metrics: Mapping[str, Decimal] = field(default_factory=dict)
    indicators: Mapping[str, bool] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "metrics", _freeze(self.metrics))
        object.__setattr__(self, "indicators", _freeze(self.indicators))

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "passed": self.passed,
            "reason": self.reason,
            "metrics": _jsonable(self.metrics),
            "indicators": dict(self.indicators),
        }


@dataclass(frozen=True)
class EvaluationFlags:
    """The three boolean classifier outcomes.

    ``asset_risk`` keeps the risk polarity; ``asset_pass`` is its negation.
    """

    income_pass: bool
    budget_pass: bool
    asset_risk: bool

    @property
    def asset_pass(self) -> bool:
        return not self.asset_risk

    @property
    def pass_count(self) -> int:
        return sum((self.income_pass, self.budget_pass, self.asset_pass))


@dataclass(frozen=True)
class ThresholdReference:
    """Which threshold table an evaluation used, for audit."""

    table_id: str
    version: str
    jurisdiction: str
    jurisdiction_name: str
    content_hash: str
    effective_from: date
    effective_to: date
    as_of: date
    is_stale: bool


@dataclass(frozen=True)
class EvaluationResult:
    """Immutable engine output, stored verbatim by callers."""

    tier: Tier
    recommended_chapter: Chapter
    pass_count: int
    summary: str
    reasons: tuple[str, ...]
    flags: EvaluationFlags
    metrics: Mapping[str, Mapping[str, Decimal]]
    disclaimer: str
    disclaimers: tuple[str, ...]
    disclaimer_version: str
    income_basis: IncomeSource
    thresholds: ThresholdReference

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "metrics",
            _freeze({name: _freeze(values) for name, values in self.metrics.items()}),
        )

    @property
    def outlook(self) -> str:
        return self.tier.outlook

    @property
    def is_stale(self) -> bool:
        return self.thresholds.is_stale

    def to_dict(self) -> dict[str, Any]:
        """Deterministic JSON-compatible representation."""
        return {
            "tier": self.tier.value,
            "outlook": self.outlook,
            "recommended_chapter": int(self.recommended_chapter),
            "pass_count": self.pass_count,
            "summary": self.summary,
            "reasons": list(self.reasons),
            "flags": {
                "income_pass": self.flags.income_pass,
                "budget_pass": self.flags.budget_pass,
                "asset_risk": self.flags.asset_risk,
            },
            "metrics": _jsonable(self.metrics),
            "disclaimer": self.disclaimer,
            "disclaimers": list(self.disclaimers),
            "disclaimer_version": self.disclaimer_version,
            "income_basis": self.income_basis.value,
            "thresholds": {
                "table_id": self.thresholds.table_id,
                "version": self.thresholds.version,
                "jurisdiction": self.thresholds.jurisdiction,
                "jurisdiction_name": self.thresholds.jurisdiction_name,
                "content_hash": self.thresholds.content_hash,
                "effective_from": self.thresholds.effective_from.isoformat(),
                "effective_to": self.thresholds.effective_to.isoformat(),
                "as_of": self.thresholds.as_of.isoformat(),
                "is_stale": self.thresholds.is_stale,
            },
        }

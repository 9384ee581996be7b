"""Versioned, jurisdiction-scoped threshold tables.

A table is immutable once published. The provider keeps an immutable
tuple of published tables and swaps the whole tuple on publish, so an
evaluation that already resolved a table is never affected by a refresh.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from app.core.config import DEFAULT_THRESHOLDS_DIR
from app.eligibility.errors import ConfigurationError, StaleThresholdWarning, ValidationError
from app.eligibility.loader import list_threshold_files, load_threshold_file
from app.eligibility.models import to_decimal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExemptionPair:
    """Exemption cap for a single filer and for a joint household."""

    single: Decimal
    joint: Decimal

    def for_household(self, household_size: int) -> Decimal:
        """Joint cap applies to any household larger than one."""
        return self.joint if household_size > 1 else self.single


@dataclass(frozen=True)
class ThresholdTable:
    """Published means-test and exemption figures for one jurisdiction."""

    table_id: str
    jurisdiction: str
    jurisdiction_name: str
    version: str
    effective_from: date
    effective_to: date
    median_income_by_size: Mapping[int, Decimal]
    additional_person_income: Decimal
    disposable_income_ratio: Decimal
    homestead_exemption: ExemptionPair
    vehicle_exemption: ExemptionPair
    valuable_asset_floor: Decimal
    source: str = ""
    content_hash: str = field(default="", repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "median_income_by_size",
            MappingProxyType(dict(self.median_income_by_size)),
        )

    @property
    def max_tabulated_size(self) -> int:
        return max(self.median_income_by_size)

    def stale_after(self, grace_days: int = 0) -> date:
        """Last date on which the table is still considered current."""
        return self.effective_to + timedelta(days=grace_days)

    def is_stale(self, as_of: date, grace_days: int = 0) -> bool:
        return as_of > self.stale_after(grace_days)

    @classmethod
    def from_dict(cls, data: dict[str, Any], content_hash: str = "") -> "ThresholdTable":
        """Build a table from its YAML representation.

        Raises:
            ConfigurationError: If required keys are missing or values are
                inconsistent (gaps in household sizes, decreasing medians,
                negative amounts, inverted date range).
        """
        try:
            medians_raw = data["median_income_by_size"]
            exemptions = data["exemptions"]
            table = cls(
                table_id=str(data["id"]),
                jurisdiction=str(data["jurisdiction"]),
                jurisdiction_name=str(data.get("jurisdiction_name", data["jurisdiction"])),
                version=str(data["version"]),
                effective_from=_as_date(data["effective_from"]),
                effective_to=_as_date(data["effective_to"]),
                median_income_by_size={
                    int(size): to_decimal(amount) for size, amount in medians_raw.items()
                },
                additional_person_income=to_decimal(data["additional_person_income"]),
                disposable_income_ratio=to_decimal(data["disposable_income_ratio"]),
                homestead_exemption=ExemptionPair(
                    single=to_decimal(exemptions["homestead"]["single"]),
                    joint=to_decimal(exemptions["homestead"]["joint"]),
                ),
                vehicle_exemption=ExemptionPair(
                    single=to_decimal(exemptions["vehicle"]["single"]),
                    joint=to_decimal(exemptions["vehicle"]["joint"]),
                ),
                valuable_asset_floor=to_decimal(data.get("valuable_asset_floor", 0)),
                source=str(data.get("source", "")),
                content_hash=content_hash,
            )
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            table_id = data.get("id", "unknown") if isinstance(data, dict) else "unknown"
            raise ConfigurationError(f"Malformed threshold table {table_id}: {exc!r}") from exc

        table.check_consistency()
        return table

    def check_consistency(self) -> None:
        """Validate the invariants evaluation relies on."""
        problems: list[str] = []

        sizes = sorted(self.median_income_by_size)
        if not sizes or sizes != list(range(1, len(sizes) + 1)):
            problems.append("household sizes must run contiguously from 1")

        medians = [self.median_income_by_size[size] for size in sizes]
        if any(later < earlier for earlier, later in zip(medians, medians[1:])):
            problems.append("median income must not decrease with household size")

        amounts = {
            "additional_person_income": self.additional_person_income,
            "homestead_exemption.single": self.homestead_exemption.single,
            "homestead_exemption.joint": self.homestead_exemption.joint,
            "vehicle_exemption.single": self.vehicle_exemption.single,
            "vehicle_exemption.joint": self.vehicle_exemption.joint,
            "valuable_asset_floor": self.valuable_asset_floor,
        }
        for name, amount in amounts.items():
            if amount < 0:
                problems.append(f"{name} must not be negative")
        if any(amount < 0 for amount in medians):
            problems.append("median income must not be negative")

        if not Decimal(0) <= self.disposable_income_ratio <= Decimal(1):
            problems.append("disposable_income_ratio must be between 0 and 1")

        if self.effective_from > self.effective_to:
            problems.append("effective_from must not be after effective_to")

        if problems:
            raise ConfigurationError(
                f"Inconsistent threshold table {self.table_id}: " + "; ".join(problems)
            )


def _as_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def median_income_cap(table: ThresholdTable, household_size: int) -> Decimal:
    """Annual median income for a household size.

    Sizes beyond the largest tabulated size extrapolate linearly using
    the table's per-person increment. Exact; no rounding is applied.
    """
    if household_size < 1:
        raise ValidationError(["household_size must be at least 1"])

    max_size = table.max_tabulated_size
    base = table.median_income_by_size[min(household_size, max_size)]
    extra_people = max(0, household_size - max_size)

    return base + table.additional_person_income * extra_people


@dataclass(frozen=True)
class ResolvedThresholds:
    """Table selected for an evaluation date, with its staleness."""

    table: ThresholdTable
    as_of: date
    is_stale: bool = False

    @property
    def stale_warning(self) -> StaleThresholdWarning | None:
        if not self.is_stale:
            return None
        return StaleThresholdWarning(
            f"Threshold table {self.table.table_id} expired on "
            f"{self.table.effective_to.isoformat()}; evaluated as of {self.as_of.isoformat()}"
        )


class ThresholdProvider:
    """Read-only source of published threshold tables."""

    def __init__(
        self,
        tables: Iterable[ThresholdTable] = (),
        grace_days: int = 0,
    ) -> None:
        self.grace_days = grace_days
        self._tables: tuple[ThresholdTable, ...] = ()
        self._publish_lock = threading.Lock()

        for table in tables:
            self.publish(table)

    @classmethod
    def from_directory(
        cls,
        thresholds_dir: Path | None = None,
        jurisdiction: str | None = None,
        grace_days: int = 0,
    ) -> "ThresholdProvider":
        """Build a provider from the YAML tables in a directory."""
        directory = thresholds_dir or DEFAULT_THRESHOLDS_DIR
        tables = []

        for filename in list_threshold_files(directory, jurisdiction):
            data, table_hash = load_threshold_file(filename, directory)
            tables.append(ThresholdTable.from_dict(data, content_hash=table_hash))

        logger.info(
            f"Loaded {len(tables)} threshold tables from {directory} "
            f"(jurisdiction={jurisdiction or 'all'})"
        )
        return cls(sorted(tables, key=lambda t: t.effective_from), grace_days=grace_days)

    @property
    def tables(self) -> tuple[ThresholdTable, ...]:
        return self._tables

    def publish(self, table: ThresholdTable) -> None:
        """Publish a new table version.

        Raises:
            ConfigurationError: If a table with the same id was already published.
        """
        with self._publish_lock:
            current = self._tables
            if any(existing.table_id == table.table_id for existing in current):
                raise ConfigurationError(
                    f"Threshold table {table.table_id} is already published"
                )
            self._tables = current + (table,)

        logger.info(
            f"Published threshold table {table.table_id} "
            f"(effective {table.effective_from.isoformat()} to {table.effective_to.isoformat()})"
        )

    def resolve(self, as_of: date) -> ResolvedThresholds:
        """Select the table current on ``as_of``.

        The current table is the one with the latest ``effective_from`` on
        or before ``as_of``; among equal start dates the later publication
        wins. A table past its window plus grace is still returned but
        flagged stale.

        Raises:
            ConfigurationError: If no table is effective on or before ``as_of``.
        """
        tables = self._tables

        candidate: ThresholdTable | None = None
        for table in tables:
            if table.effective_from > as_of:
                continue
            if candidate is None or table.effective_from >= candidate.effective_from:
                candidate = table

        if candidate is None:
            raise ConfigurationError(
                f"No threshold table is effective on {as_of.isoformat()}"
            )

        resolved = ResolvedThresholds(
            table=candidate,
            as_of=as_of,
            is_stale=candidate.is_stale(as_of, self.grace_days),
        )

        if resolved.is_stale:
            logger.warning(
                str(resolved.stale_warning),
                extra={
                    "action": "stale_thresholds",
                    "context": {
                        "table_id": candidate.table_id,
                        "effective_to": candidate.effective_to.isoformat(),
                        "as_of": as_of.isoformat(),
                    },
                },
            )

        return resolved

"""Eligibility assessment model."""

from datetime import date

from sqlalchemy import Boolean, Date, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSON
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, TimestampMixin


class EligibilityAssessment(Base, TimestampMixin):
    """Stored result of one eligibility evaluation.

    The full engine output is kept verbatim in ``result``; the other
    columns duplicate the fields staff filter and sort on.
    """

    __tablename__ = "eligibility_assessments"

    # Intake submission the assessment belongs to
    submission_id: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        index=True,
    )
    # Prospect contact, if provided
    email: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )
    tier: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        index=True,
    )
    recommended_chapter: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    pass_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    income_pass: Mapped[bool] = mapped_column(Boolean, nullable=False)
    budget_pass: Mapped[bool] = mapped_column(Boolean, nullable=False)
    asset_risk: Mapped[bool] = mapped_column(Boolean, nullable=False)
    reasons: Mapped[list] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )
    metrics: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
    )
    disclaimer: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    disclaimer_version: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
    )
    income_basis: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )
    # Threshold table used, for audit
    threshold_table_id: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )
    threshold_version: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
    )
    threshold_hash: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
    )
    thresholds_stale: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )
    as_of: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )
    # Verbatim engine output
    result: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<EligibilityAssessment {self.submission_id} "
            f"tier={self.tier} chapter={self.recommended_chapter}>"
        )

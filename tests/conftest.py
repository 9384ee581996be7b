"""Pytest configuration and fixtures."""

import os

# Configure the application for tests before any app module reads settings
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["STAFF_LEADS_EMAIL"] = ""

from collections.abc import AsyncGenerator, Callable, Generator  # noqa: E402
from datetime import date  # noqa: E402
from decimal import Decimal  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import StaticPool  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402

from app.api.deps import get_notification_service  # noqa: E402
from app.core.config import DEFAULT_THRESHOLDS_DIR  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.db.session import get_db  # noqa: E402
from app.eligibility.models import EvaluationInput  # noqa: E402
from app.eligibility.thresholds import (  # noqa: E402
    ExemptionPair,
    ResolvedThresholds,
    ThresholdProvider,
    ThresholdTable,
)
from app.main import app  # noqa: E402
from app.services.notifications import LoggingEmailProvider, NotificationService  # noqa: E402

# Use SQLite for testing (simpler than spinning up postgres)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Date on which the shipped ut-2025-01 table is current
CURRENT_DATE = date(2025, 3, 1)

STAFF_EMAIL = "leads@example.com"


@pytest.fixture
def threshold_provider() -> ThresholdProvider:
    """Provider loaded from the shipped threshold tables."""
    return ThresholdProvider.from_directory(DEFAULT_THRESHOLDS_DIR, jurisdiction="UT")


@pytest.fixture
def utah_table(threshold_provider: ThresholdProvider) -> ThresholdTable:
    """The Utah table current on CURRENT_DATE (ut-2025-01)."""
    return threshold_provider.resolve(CURRENT_DATE).table


@pytest.fixture
def resolved(utah_table: ThresholdTable) -> ResolvedThresholds:
    """Current, non-stale resolution of the Utah table."""
    return ResolvedThresholds(table=utah_table, as_of=CURRENT_DATE, is_stale=False)


@pytest.fixture
def make_table() -> Callable[..., ThresholdTable]:
    """Factory for small in-memory threshold tables."""

    def _make(**overrides: Any) -> ThresholdTable:
        values: dict[str, Any] = {
            "table_id": "test-2025-01",
            "jurisdiction": "UT",
            "jurisdiction_name": "Utah",
            "version": "2025.01",
            "effective_from": date(2025, 1, 1),
            "effective_to": date(2025, 6, 30),
            "median_income_by_size": {
                1: Decimal("85644"),
                2: Decimal("93302"),
                3: Decimal("109860"),
                4: Decimal("128363"),
            },
            "additional_person_income": Decimal("11100"),
            "disposable_income_ratio": Decimal("0.05"),
            "homestead_exemption": ExemptionPair(Decimal("52350"), Decimal("104700")),
            "vehicle_exemption": ExemptionPair(Decimal("3000"), Decimal("6000")),
            "valuable_asset_floor": Decimal("500"),
            "content_hash": "0" * 64,
        }
        values.update(overrides)
        return ThresholdTable(**values)

    return _make


@pytest.fixture
def make_input() -> Callable[..., EvaluationInput]:
    """Factory for evaluation input; defaults to example scenario 1."""

    def _make(**overrides: Any) -> EvaluationInput:
        values: dict[str, Any] = {
            "household_size": 1,
            "monthly_income": Decimal("4000"),
            "monthly_expenses": Decimal("3800"),
            "home_equity": None,
            "vehicle_equity": Decimal("1000"),
            "has_valuable_assets": False,
        }
        values.update(overrides)
        return EvaluationInput(**values)

    return _make


@pytest.fixture
def evaluation_payload() -> dict[str, Any]:
    """Valid request body for the evaluation endpoint (example scenario 1)."""
    return {
        "household_size": 1,
        "monthly_income": 4000,
        "monthly_expenses": 3800,
        "home_equity": "NA",
        "vehicle_equity": 1000,
        "has_valuable_assets": False,
        "as_of": CURRENT_DATE.isoformat(),
    }


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """FastAPI test client for endpoints that do not touch the database."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
async def async_engine():
    """Create async test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(scope="function")
async def async_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create async database session for tests."""
    async_session_maker = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session_maker() as session:
        yield session


@pytest.fixture
def email_provider() -> LoggingEmailProvider:
    """Email provider that records sent messages."""
    return LoggingEmailProvider(from_email="intake@example.com", from_name="Intake")


@pytest.fixture
async def async_client(
    async_session: AsyncSession,
    email_provider: LoggingEmailProvider,
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client with database and email dependencies overridden."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield async_session

    def override_notifications() -> NotificationService:
        return NotificationService(provider=email_provider, staff_email=STAFF_EMAIL)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notification_service] = override_notifications

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()

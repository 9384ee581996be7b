"""Health check endpoints."""

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from app.api.deps import Thresholds

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    status: str


class ReadinessResponse(HealthResponse):
    """Readiness response with the number of published threshold tables."""

    threshold_tables: int


@router.get(
    "",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
    description="Returns service health status",
)
async def health_check() -> HealthResponse:
    """Check if the service is healthy."""
    return HealthResponse(status="ok")


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    status_code=status.HTTP_200_OK,
    summary="Readiness check",
    description="Returns readiness once threshold tables are loaded",
)
async def readiness_check(provider: Thresholds) -> ReadinessResponse:
    """Check if the service can evaluate eligibility.

    Raises:
        HTTPException: 503 if no threshold tables are published
    """
    count = len(provider.tables)
    if count == 0:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="No threshold tables published",
        )

    return ReadinessResponse(status="ok", threshold_tables=count)

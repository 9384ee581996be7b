"""API v1 router aggregating all endpoints."""

from fastapi import APIRouter

from app.api.v1 import eligibility, health

api_router = APIRouter()

# Health check
api_router.include_router(
    health.router,
    prefix="/health",
    tags=["health"],
)

# Eligibility
api_router.include_router(
    eligibility.router,
)

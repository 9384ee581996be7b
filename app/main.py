"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1.router import api_router
from app.core.config import settings
from app.core.logging import setup_logging
from app.db.init_db import create_tables
from app.eligibility.errors import ConfigurationError, ValidationError
from app.middleware.rate_limit import RateLimitMiddleware, eligibility_rate_limits

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

ASSESSMENT_FAILED_MESSAGE = "Could not complete assessment, please try again."


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    # Startup
    logger.info(f"Starting Bankruptcy Eligibility API (env={settings.env})")

    if settings.init_db_on_startup and settings.is_dev:
        logger.info("Creating database tables...")
        await create_tables()

    yield

    # Shutdown
    logger.info("Shutting down Bankruptcy Eligibility API")


# Create FastAPI application
app = FastAPI(
    title="Bankruptcy Eligibility API",
    description="Preliminary Chapter 7 / Chapter 13 eligibility evaluation",
    version="0.1.0",
    docs_url="/docs" if settings.is_dev else None,
    redoc_url="/redoc" if settings.is_dev else None,
    openapi_url="/openapi.json" if settings.is_dev else None,
    lifespan=lifespan,
)

# Add rate limiting middleware
app.add_middleware(
    RateLimitMiddleware,
    rules=eligibility_rate_limits(settings.rate_limit_requests, settings.rate_limit_window_seconds),
    enabled=settings.rate_limit_enabled,
)

# CORS middleware (configure appropriately for production)
if settings.is_dev:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(ValidationError)
async def eligibility_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Report malformed evaluation input."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": "Invalid input", "errors": exc.errors},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report request bodies that fail schema validation in the same shape."""
    errors = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "Invalid value")
        errors.append(f"{location}: {message}" if location else message)

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": "Invalid input", "errors": errors},
    )


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    """Threshold tables unavailable; never expose the cause to the client."""
    logger.error(
        f"Eligibility configuration error: {exc}",
        extra={"action": "configuration_error"},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": ASSESSMENT_FAILED_MESSAGE},
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unhandled exceptions."""
    logger.exception(f"Unhandled exception: {exc}")

    # Don't expose internal errors in production
    if settings.is_prod:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc)},
    )


# Include API router
app.include_router(api_router, prefix="/api/v1")


# Root endpoint
@app.get("/", include_in_schema=False)
async def root() -> dict:
    """Root endpoint with service info."""
    return {
        "service": "Bankruptcy Eligibility API",
        "version": "0.1.0",
        "docs": "/docs" if settings.is_dev else "Disabled in production",
    }

"""Logging setup for the eligibility service.

Outside development, records are written as a single key=value line. The
``action``, ``request_id`` and ``context`` extras passed by callers become
fields on that line, with sensitive context values masked.
"""

import logging
import sys
from typing import Any, TextIO

from app.core.config import settings

# Substrings of context keys whose values must never reach a log line
SENSITIVE_KEYS = (
    "password",
    "token",
    "secret",
    "apikey",
    "api_key",
    "credit_card",
    "ssn",
    "social_security",
)

# Prospect financial figures, masked when figures are redacted
FINANCIAL_KEYS = (
    "income",
    "expenses",
    "equity",
)

REDACTED = "[REDACTED]"

QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "aiosqlite")


def redact(value: Any, keys: tuple[str, ...] = SENSITIVE_KEYS) -> Any:
    """Return a copy of value with entries under matching keys masked."""
    if isinstance(value, dict):
        return {
            key: REDACTED
            if any(marker in str(key).lower() for marker in keys)
            else redact(item, keys)
            for key, item in value.items()
        }

    if isinstance(value, (list, tuple)):
        return [redact(item, keys) for item in value]

    return value


class StructuredFormatter(logging.Formatter):
    """Formats records as ``key=value`` pairs on one line."""

    def __init__(self, mask_financial: bool = False) -> None:
        super().__init__()
        self.masked_keys = SENSITIVE_KEYS + (FINANCIAL_KEYS if mask_financial else ())

    def format(self, record: logging.LogRecord) -> str:
        fields: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for extra in ("request_id", "action"):
            if getattr(record, extra, None) is not None:
                fields[extra] = getattr(record, extra)

        context = getattr(record, "context", None)
        if isinstance(context, dict):
            fields.update(redact(context, self.masked_keys))

        if record.exc_info:
            fields["exception"] = self.formatException(record.exc_info)

        return " ".join(f"{key}={value}" for key, value in fields.items())


def setup_logging(level: str | None = None, stream: TextIO | None = None) -> None:
    """Configure the root logger.

    Args:
        level: Log level name; defaults to ``settings.log_level``
        stream: Output stream; defaults to stdout
    """
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(log_level)
    if settings.is_dev:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
    else:
        handler.setFormatter(
            StructuredFormatter(mask_financial=settings.redact_financial_figures)
        )
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

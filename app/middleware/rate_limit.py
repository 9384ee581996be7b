"""Per-client rate limiting for the public eligibility endpoints.

Each rule caps how many evaluations or assessment submissions a single
client IP can make in a fixed window. Counters live in process memory, so
the limit applies per worker.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)

EVALUATE_PATH = "/api/v1/eligibility/evaluate"
ASSESSMENTS_PATH = "/api/v1/eligibility/assessments"

RATE_LIMITED_MESSAGE = "Too many eligibility requests. Please wait and try again."


@dataclass(frozen=True)
class RateLimitRule:
    """Allowed requests per window for one endpoint."""

    requests: int
    window_seconds: int


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of counting one request against a rule."""

    allowed: bool
    remaining: int
    reset_after: int


def eligibility_rate_limits(
    requests: int = 10,
    window_seconds: int = 60,
) -> dict[tuple[str, str], RateLimitRule]:
    """Build the rules for both eligibility POST endpoints."""
    rule = RateLimitRule(requests=requests, window_seconds=window_seconds)
    return {
        ("POST", EVALUATE_PATH): rule,
        ("POST", ASSESSMENTS_PATH): rule,
    }


DEFAULT_RATE_LIMITS = eligibility_rate_limits()


def get_client_ip(request: Request) -> str:
    """Return the originating client address.

    The first hop of X-Forwarded-For wins, then X-Real-IP, then the socket
    peer.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return request.client.host if request.client else "unknown"


class FixedWindowCounter:
    """In-memory fixed-window request counter."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        # key -> (window start, count, window length)
        self._windows: dict[str, tuple[float, int, int]] = {}

    def _prune(self, now: float) -> None:
        expired = [
            key
            for key, (start, _, length) in self._windows.items()
            if now - start >= length
        ]
        for key in expired:
            del self._windows[key]

    def hit(self, key: str, rule: RateLimitRule) -> RateLimitDecision:
        """Count a request for key and decide whether it may proceed."""
        now = self._clock()
        self._prune(now)

        start, count, _ = self._windows.get(key, (now, 0, rule.window_seconds))
        reset_after = max(1, int(rule.window_seconds - (now - start)))

        if count >= rule.requests:
            return RateLimitDecision(allowed=False, remaining=0, reset_after=reset_after)

        count += 1
        self._windows[key] = (start, count, rule.window_seconds)
        return RateLimitDecision(
            allowed=True,
            remaining=rule.requests - count,
            reset_after=reset_after,
        )


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests over an endpoint's limit with 429 and Retry-After."""

    def __init__(
        self,
        app,
        rules: dict[tuple[str, str], RateLimitRule] | None = None,
        counter: FixedWindowCounter | None = None,
        enabled: bool = True,
    ) -> None:
        super().__init__(app)
        self.rules = rules or DEFAULT_RATE_LIMITS
        self.counter = counter or FixedWindowCounter()
        self.enabled = enabled

    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path.rstrip("/") or "/"
        rule = self.rules.get((request.method, path)) if self.enabled else None
        if rule is None:
            return await call_next(request)

        client_ip = get_client_ip(request)
        decision = self.counter.hit(f"{request.method}:{path}:{client_ip}", rule)
        limit_headers = {
            "X-RateLimit-Limit": str(rule.requests),
            "X-RateLimit-Remaining": str(decision.remaining),
            "X-RateLimit-Reset": str(decision.reset_after),
        }

        if not decision.allowed:
            logger.warning(
                f"Rate limit exceeded for {path}",
                extra={"action": "rate_limited", "context": {"client_ip": client_ip}},
            )
            return JSONResponse(
                status_code=429,
                content={"detail": RATE_LIMITED_MESSAGE, "retry_after": decision.reset_after},
                headers={"Retry-After": str(decision.reset_after), **limit_headers},
            )

        response = await call_next(request)
        response.headers.update(limit_headers)
        return response

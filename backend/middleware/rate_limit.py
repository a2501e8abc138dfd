"""
Rate limiting for session creation and the message and action endpoints, using slowapi.

Requests that passed the API key check are counted against that key; anonymous
requests are counted against the client address.

Usage:
    from backend.middleware.rate_limit import limiter, RATE_LIMITS

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    @app.post("/sessions/{session_id}/messages")
    @limiter.limit(f"{RATE_LIMITS['messages_per_hour']}/hour")
    async def send_message(request: Request, session_id: str):
        ...
"""

import os
import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

logger = logging.getLogger(__name__)

API_KEY_PREFIX_LENGTH = 12
DEFAULT_RETRY_AFTER_SECONDS = 60


def get_rate_limit_key(request: Request) -> str:
    api_key = getattr(request.state, "api_key", None)
    if api_key:
        return f"api_key:{api_key[:API_KEY_PREFIX_LENGTH]}"
    return get_remote_address(request)


# In-process counters; every worker keeps its own.
limiter = Limiter(key_func=get_rate_limit_key, default_limits=[])

RATE_LIMITS = {
    "messages_per_hour": os.getenv("RATE_LIMIT_MESSAGES_PER_HOUR", "100"),
    "sessions_per_hour": os.getenv("RATE_LIMIT_SESSION_CREATION_PER_HOUR", "50"),
}


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Answer with 429 and a Retry-After hint instead of slowapi's plain-text default."""
    client = request.client.host if request.client else "unknown"
    logger.warning(f"Throttled {request.method} {request.url.path} for {client} ({exc.detail})")
    retry_after = getattr(exc, "retry_after", DEFAULT_RETRY_AFTER_SECONDS)
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={
            "error": "rate_limit_exceeded",
            "message": "Too many requests. Please slow down.",
            "limit": str(exc.detail),
        },
        headers={"Retry-After": str(retry_after)},
    )


__all__ = ["limiter", "get_rate_limit_key", "rate_limit_exceeded_handler", "RATE_LIMITS"]

"""
API key checks for the audience assistant endpoints.

Keys come from the comma-separated API_KEYS environment variable and are
matched against the X-API-Key header, or an Authorization: Bearer header.
With no keys configured every request is let through.

Usage:
    from backend.middleware.auth import require_api_key

    @app.post("/sessions/{session_id}/messages")
    @require_api_key
    async def send_message(request: Request, session_id: str):
        ...
"""

import os
import logging
import secrets
from functools import wraps
from typing import List, Optional, Sequence

from fastapi import Request, HTTPException, status

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def parse_api_keys(raw: str) -> List[str]:
    return [key.strip() for key in raw.split(",") if key.strip()]


class APIKeyAuth:
    """Constant-time validation against a fixed set of keys."""

    def __init__(self, keys: Optional[Sequence[str]] = None):
        if keys is None:
            keys = parse_api_keys(os.getenv("API_KEYS", ""))
        self._valid_keys: List[str] = list(keys)
        if self._valid_keys:
            logger.info(f"API key authentication enabled with {len(self._valid_keys)} keys")
        else:
            logger.warning("API_KEYS is empty; message and action endpoints accept anonymous requests.")

    @property
    def enabled(self) -> bool:
        return bool(self._valid_keys)

    def validate_key(self, provided_key: Optional[str]) -> bool:
        if not provided_key:
            return False
        return any(secrets.compare_digest(provided_key, valid_key) for valid_key in self._valid_keys)

    @staticmethod
    def key_from_headers(request: Request) -> Optional[str]:
        header_key = request.headers.get("X-API-Key")
        if header_key:
            return header_key
        authorization = request.headers.get("Authorization", "")
        if authorization.startswith(BEARER_PREFIX):
            return authorization[len(BEARER_PREFIX):]
        return None


_auth = APIKeyAuth()


def configure_auth(keys: Optional[Sequence[str]] = None) -> APIKeyAuth:
    """Swap the active validator; None re-reads API_KEYS from the environment."""
    global _auth
    _auth = APIKeyAuth(keys)
    return _auth


def _find_request(args, kwargs) -> Optional[Request]:
    request = kwargs.get("request")
    if isinstance(request, Request):
        return request
    return next((arg for arg in args if isinstance(arg, Request)), None)


def _unauthorized(request: Request, reason: str, detail: str) -> HTTPException:
    client = request.client.host if request.client else "unknown"
    logger.warning(f"Rejected {request.method} {request.url.path} from {client}: {reason}")
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "ApiKey"},
    )


def require_api_key(func):
    """
    Guard an async endpoint that takes `request` with the active API key check.

    On success the key is kept on request.state.api_key, where the rate
    limiter picks it up.
    """

    @wraps(func)
    async def wrapper(*args, **kwargs):
        request = _find_request(args, kwargs)
        if request is None:
            logger.error(f"{func.__name__} is guarded by require_api_key but has no Request parameter")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal server error",
            )

        if _auth.enabled:
            provided_key = _auth.key_from_headers(request)
            if not provided_key:
                raise _unauthorized(request, "missing API key", "Missing API key. Provide X-API-Key header.")
            if not _auth.validate_key(provided_key):
                raise _unauthorized(request, "invalid API key", "Invalid API key")
            request.state.api_key = provided_key

        return await func(*args, **kwargs)

    return wrapper


__all__ = ["require_api_key", "configure_auth", "parse_api_keys", "APIKeyAuth"]

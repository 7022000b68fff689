from __future__ import annotations

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

limiter = Limiter(key_func=get_remote_address)


def _passthrough(func):
    return func


def rate_limit(limit: str | None = None):
    """Per-client limit for a route; ``limit`` overrides the default RATE_LIMIT."""
    if not settings.rate_limit_enabled:
        return _passthrough
    return limiter.limit(limit or settings.rate_limit)


def upload_rate_limit():
    return rate_limit(settings.upload_rate_limit)

"""
Per-client request rate limiting backed by slowapi (in-memory storage).
- One window of RATE_LIMIT_MAX_REQUESTS per RATE_LIMIT_WINDOW_SECONDS per client address
- The window is shared by every route and checked by an app-wide dependency,
  so routes mounted through include_router are counted like inline ones
"""
from __future__ import annotations

from fastapi import HTTPException, Request
from limits import RateLimitItem, parse
from slowapi import Limiter
from slowapi.util import get_remote_address

from backend.app.core.config import AppConfig
from backend.app.core.logger import logger

RATE_LIMIT_SCOPE = "global"


def build_limiter(config: AppConfig) -> Limiter:
    return Limiter(
        key_func=get_remote_address,
        enabled=config.RATE_LIMIT_ENABLED,
        headers_enabled=False,
    )


def parse_rate_limit(config: AppConfig) -> RateLimitItem:
    return parse(config.rate_limit)


async def enforce_rate_limit(request: Request) -> None:
    """FastAPI dependency rejecting clients over the configured limit with 429."""
    limiter: Limiter = request.app.state.limiter
    if not limiter.enabled:
        return

    item: RateLimitItem = request.app.state.rate_limit
    client = get_remote_address(request)
    if not limiter.limiter.hit(item, RATE_LIMIT_SCOPE, client):
        logger.warning(f"Rate limit {item} exceeded by {client} on {request.url.path}")
        raise HTTPException(status_code=429, detail="Too many requests, please try again later.")

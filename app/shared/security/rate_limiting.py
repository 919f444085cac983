"""
Inbound rate limiting configuration and setup.

Uses slowapi to enforce per-client request limits on the API.
The scraping endpoint gets a tighter limit since each call fetches a
third-party page.
"""

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from app.core.config import settings

RETRY_AFTER_SECONDS = 60

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit_default],
    enabled=settings.rate_limit_enabled,
)


async def rate_limit_exceeded_handler(
    _request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """Handle inbound rate limit errors with a clean JSON response.

    Args:
        _request: The incoming HTTP request.
        exc: The rate limit exceeded exception.

    Returns:
        A 429 JSON response with a Retry-After header.
    """
    return JSONResponse(
        status_code=429,
        content={
            "error": "Rate limit exceeded. Please try again in a few moments.",
            "details": str(exc.detail),
        },
        headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
    )

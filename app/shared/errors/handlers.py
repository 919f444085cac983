"""
Centralized error handlers for FastAPI.

Maps markets domain errors to HTTP responses.
No stack traces or internal details are exposed to clients.
All error responses use the ErrorResponse shape `{error, details?}`, with
extra context keys (symbol, source, suggestion) where they help the client.
"""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.domain.markets.errors import (
    ArticleNotFoundError,
    MarketDomainError,
    MissingParameterError,
    NoPriceDataError,
    ProviderNotConfiguredError,
    SymbolNotFoundError,
    UpstreamAuthError,
    UpstreamError,
    UpstreamRateLimitError,
    UpstreamRejectedError,
)

logger = logging.getLogger(__name__)

HTTP_400 = 400
HTTP_401 = 401
HTTP_404 = 404
HTTP_429 = 429
HTTP_500 = 500


def _error_response(
    status_code: int,
    error: str,
    details: Any = None,
    headers: Optional[dict[str, str]] = None,
    **extra: Any,
) -> JSONResponse:
    """Build a consistent JSON error response."""
    body: dict[str, Any] = {"error": error}
    if details:
        body["details"] = details
    body.update({key: value for key, value in extra.items() if value is not None})
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def register_error_handlers(app: FastAPI) -> None:
    """Register all domain error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_validation(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle malformed query parameters and bodies."""
        logger.warning("Invalid request: %d validation errors", len(exc.errors()))
        return _error_response(
            HTTP_400, "Invalid request parameters", jsonable_encoder(exc.errors())
        )

    @app.exception_handler(MissingParameterError)
    async def handle_missing_parameter(
        _request: Request, exc: MissingParameterError
    ) -> JSONResponse:
        logger.warning("Missing parameter: %s", exc.parameter)
        return _error_response(HTTP_400, exc.message)

    @app.exception_handler(UpstreamRejectedError)
    async def handle_upstream_rejected(
        _request: Request, exc: UpstreamRejectedError
    ) -> JSONResponse:
        """Handle in-band errors reported by an upstream (unknown symbol, plan limits)."""
        logger.warning("%s rejected request: %s", exc.provider, exc.reason)
        return _error_response(
            HTTP_400, f"{exc.provider} rejected the request", exc.reason, source=exc.provider
        )

    @app.exception_handler(SymbolNotFoundError)
    async def handle_symbol_not_found(
        _request: Request, exc: SymbolNotFoundError
    ) -> JSONResponse:
        logger.warning("%s not found: %s", exc.asset, exc.symbol)
        return _error_response(HTTP_404, f"{exc.asset} not found", symbol=exc.symbol)

    @app.exception_handler(ArticleNotFoundError)
    async def handle_article_not_found(
        _request: Request, exc: ArticleNotFoundError
    ) -> JSONResponse:
        logger.warning("Article not found: %s", exc.slug)
        return _error_response(HTTP_404, "Article not found")

    @app.exception_handler(NoPriceDataError)
    async def handle_no_price_data(
        _request: Request, exc: NoPriceDataError
    ) -> JSONResponse:
        """Handle history requests that produced no chartable points."""
        logger.warning("%s", exc.message)
        return _error_response(
            HTTP_404,
            exc.reason,
            symbol=exc.symbol,
            days=exc.days,
            rawDataCount=exc.raw_count or None,
        )

    @app.exception_handler(UpstreamRateLimitError)
    async def handle_upstream_rate_limit(
        _request: Request, exc: UpstreamRateLimitError
    ) -> JSONResponse:
        logger.warning("%s rate limit exceeded", exc.provider)
        return _error_response(
            HTTP_429,
            "Rate limit exceeded. Please try again in a few moments.",
            headers={"Retry-After": str(exc.retry_after)},
            retryAfter=exc.retry_after,
            source=exc.provider,
        )

    @app.exception_handler(UpstreamAuthError)
    async def handle_upstream_auth(
        _request: Request, exc: UpstreamAuthError
    ) -> JSONResponse:
        logger.error("%s rejected the configured API key", exc.provider)
        return _error_response(
            HTTP_401,
            f"Invalid API key for {exc.provider}",
            suggestion="Please check the provider API key in environment variables",
        )

    @app.exception_handler(ProviderNotConfiguredError)
    async def handle_provider_not_configured(
        _request: Request, exc: ProviderNotConfiguredError
    ) -> JSONResponse:
        logger.error("%s", exc.message)
        return _error_response(HTTP_500, exc.message)

    @app.exception_handler(UpstreamError)
    async def handle_upstream(
        _request: Request, exc: UpstreamError
    ) -> JSONResponse:
        """Handle upstream failures, including exhausted fallback chains."""
        logger.error("%s", exc.message)
        return _error_response(
            HTTP_500,
            f"Failed to fetch data from {exc.provider} API",
            exc.details or exc.reason,
            status=exc.status_code,
            source=exc.provider,
        )

    @app.exception_handler(MarketDomainError)
    async def handle_market_domain(
        _request: Request, exc: MarketDomainError
    ) -> JSONResponse:
        """Catch-all for unhandled markets domain errors."""
        logger.error("Unhandled markets domain error: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected(
        _request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return _error_response(HTTP_500, "Internal server error")

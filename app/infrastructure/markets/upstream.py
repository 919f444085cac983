"""
Translation of upstream HTTP failures into domain errors.

Adapters wrap their httpx calls in `upstream_errors(...)` so the
application and interface layers only ever see MarketDomainError subclasses.
"""

import json
import logging
import re
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import httpx

from app.domain.markets.errors import (
    ProviderNotConfiguredError,
    SymbolNotFoundError,
    UpstreamAuthError,
    UpstreamError,
    UpstreamRateLimitError,
)

logger = logging.getLogger(__name__)

RETRY_AFTER_SECONDS = 60
MAX_DETAIL_CHARS = 250

_SECRET_PARAM_RE = re.compile(r"((?:apikey|api_key|apiKey|token)=)[^&\s]+", re.IGNORECASE)


def redact_secrets(value: Any) -> str:
    """Mask API keys embedded in URLs or messages."""
    text = "" if value is None else str(value)
    return _SECRET_PARAM_RE.sub(r"\1***", text)


def require_api_key(provider: str, api_key: str) -> str:
    """Return the key, or raise if the provider is not configured."""
    if not api_key:
        raise ProviderNotConfiguredError(provider)
    return api_key


def _response_details(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return redact_secrets(response.text[:MAX_DETAIL_CHARS])


def translate_status_error(
    provider: str,
    exc: httpx.HTTPStatusError,
    symbol: Optional[str] = None,
    asset: str = "Stock",
) -> UpstreamError | SymbolNotFoundError:
    """Map an upstream HTTP status to the matching domain error."""
    status = exc.response.status_code
    if status == 429:
        return UpstreamRateLimitError(provider, retry_after=RETRY_AFTER_SECONDS)
    if status in (401, 403):
        return UpstreamAuthError(provider, status_code=status)
    if status == 404 and symbol is not None:
        return SymbolNotFoundError(symbol, asset=asset)
    return UpstreamError(
        provider,
        f"HTTP {status}",
        status_code=status,
        details=_response_details(exc.response),
    )


@contextmanager
def upstream_errors(
    provider: str, symbol: Optional[str] = None, asset: str = "Stock"
) -> Iterator[None]:
    """Re-raise httpx failures inside the block as domain errors.

    Args:
        provider: Provider name used in error messages.
        symbol: When given, an upstream 404 becomes SymbolNotFoundError.
        asset: Asset label for SymbolNotFoundError ("Stock", "Cryptocurrency").
    """
    try:
        yield
    except httpx.HTTPStatusError as exc:
        logger.warning(
            "%s answered HTTP %d for %s",
            provider,
            exc.response.status_code,
            redact_secrets(exc.request.url),
        )
        raise translate_status_error(provider, exc, symbol, asset) from exc
    except httpx.RequestError as exc:
        logger.warning("%s request failed: %s", provider, type(exc).__name__)
        raise UpstreamError(
            provider,
            f"network error ({type(exc).__name__})",
            details=redact_secrets(exc),
        ) from exc
    except json.JSONDecodeError as exc:
        logger.warning("%s returned a body that is not JSON", provider)
        raise UpstreamError(provider, "invalid JSON response", details=str(exc)) from exc


async def get_json(
    client: httpx.AsyncClient, url: str, params: Optional[dict[str, Any]] = None
) -> Any:
    """GET a URL and decode its JSON body, raising on non-2xx statuses."""
    response = await client.get(url, params=params)
    response.raise_for_status()
    return response.json()

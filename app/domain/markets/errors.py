"""
Domain-specific errors for the markets bounded context.

All errors raised from the domain layer must be defined here.
These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""

from typing import Any


class MarketDomainError(Exception):
    """Base error for all markets domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class MissingParameterError(MarketDomainError):
    """Raised when a required request parameter is absent or blank."""

    def __init__(self, parameter: str, message: str | None = None) -> None:
        super().__init__(message or f"{parameter} is required")
        self.parameter = parameter


class SymbolNotFoundError(MarketDomainError):
    """Raised when a stock symbol or crypto asset is unknown upstream."""

    def __init__(self, symbol: str, asset: str = "Stock") -> None:
        super().__init__(f"{asset} not found: {symbol}")
        self.symbol = symbol
        self.asset = asset


class ArticleNotFoundError(MarketDomainError):
    """Raised when no stored article matches a slug."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"Article not found: {slug}")
        self.slug = slug


class NoPriceDataError(MarketDomainError):
    """Raised when a history request yields no usable price points."""

    def __init__(self, symbol: str, days: int, reason: str, raw_count: int = 0) -> None:
        super().__init__(f"{reason} for {symbol} ({days} days)")
        self.symbol = symbol
        self.days = days
        self.reason = reason
        self.raw_count = raw_count


class ProviderNotConfiguredError(MarketDomainError):
    """Raised when an upstream provider has no API key configured."""

    def __init__(self, provider: str) -> None:
        super().__init__(f"{provider} API key not configured")
        self.provider = provider


class UpstreamError(MarketDomainError):
    """Raised when an upstream API call fails.

    Attributes:
        provider: Upstream provider name (e.g. "FMP").
        status_code: Upstream HTTP status, if a response was received.
        details: Best-effort diagnostic payload (response body or message).
    """

    def __init__(
        self,
        provider: str,
        reason: str,
        status_code: int | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(f"{provider} request failed: {reason}")
        self.provider = provider
        self.reason = reason
        self.status_code = status_code
        self.details = details


class UpstreamRateLimitError(UpstreamError):
    """Raised when an upstream keeps answering HTTP 429."""

    def __init__(self, provider: str, retry_after: int = 60) -> None:
        super().__init__(provider, "rate limit exceeded", status_code=429)
        self.retry_after = retry_after


class UpstreamAuthError(UpstreamError):
    """Raised when an upstream rejects the configured API key."""

    def __init__(self, provider: str, status_code: int = 401) -> None:
        super().__init__(provider, "invalid API key", status_code=status_code)


class UpstreamRejectedError(UpstreamError):
    """Raised when an upstream answers with an in-band error status."""


class EndpointsExhaustedError(UpstreamError):
    """Raised when every endpoint of a fallback chain failed."""

    def __init__(self, provider: str, symbol: str, chain: str) -> None:
        super().__init__(provider, f"all {chain} endpoints failed for {symbol}")
        self.symbol = symbol
        self.chain = chain


class ScrapeError(MarketDomainError):
    """Raised when an article page cannot be scraped into usable content."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to scrape article: {reason}")
        self.url = url
        self.reason = reason


class ArticleStoreError(MarketDomainError):
    """Raised when the article store cannot persist a change."""

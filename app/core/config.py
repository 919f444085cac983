"""
Application configuration.

Loads settings from environment variables and .env file.
Provider keys, upstream base URLs, fetch cache timings and the article
store URL are all read here, once, at import time.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        rate_limit_default: Default inbound rate limit for all endpoints.
        rate_limit_heavy: Inbound rate limit for the scraping endpoint.
        rate_limit_enabled: Turn inbound rate limiting on or off.
        fmp_api_key: Financial Modeling Prep API key.
        finnhub_api_key: Finnhub API key.
        news_api_key: NewsAPI key.
        fred_api_key: St. Louis FRED API key.
        twelve_api_key: Twelve Data API key.
        cache_duration_seconds: Freshness window of the FMP response cache.
        min_request_interval_seconds: Minimum spacing between FMP requests.
        rate_limit_retry_delay_seconds: Pause before the single retry on HTTP 429.
        http_timeout_seconds: Default timeout for upstream API calls.
        scrape_timeout_seconds: Timeout for fetching an article page.
        database_url: SQLAlchemy URL of the article store.

    Provider keys are read once at process start. An empty key makes the
    matching endpoints fail with a configuration error instead of calling
    the upstream anonymously.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    project_name: str = "Finboard"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    rate_limit_default: str = "60/minute"
    rate_limit_heavy: str = "10/minute"
    rate_limit_enabled: bool = True

    # Upstream providers
    fmp_api_key: str = ""
    finnhub_api_key: str = ""
    news_api_key: str = ""
    fred_api_key: str = ""
    twelve_api_key: str = ""

    fmp_base_url: str = "https://financialmodelingprep.com/api/v3"
    finnhub_base_url: str = "https://finnhub.io/api/v1"
    coingecko_base_url: str = "https://api.coingecko.com/api/v3"
    news_api_base_url: str = "https://newsapi.org/v2"
    fred_base_url: str = "https://api.stlouisfed.org/fred"
    twelve_base_url: str = "https://api.twelvedata.com"

    # FMP fetch cache and request spacing
    cache_duration_seconds: float = 300.0
    min_request_interval_seconds: float = 1.0
    rate_limit_retry_delay_seconds: float = 5.0

    http_timeout_seconds: float = 10.0
    scrape_timeout_seconds: float = 30.0

    database_url: str = "sqlite:///./finboard.db"


settings = Settings()

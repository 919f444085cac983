"""
Port interfaces (ABCs) for the markets bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from app.domain.markets.entities import (
    Article,
    CryptoDetail,
    CryptoQuote,
    CryptoSearchHit,
    EconomicIndicator,
    IndexQuote,
    IntradayPoint,
    NewsItem,
    RawSeries,
    ScrapedContent,
    StockSearchHit,
)


class PriceHistoryPort(ABC):
    """Port for raw OHLC history from the rate-limited market data provider."""

    @abstractmethod
    async def fetch_intraday(self, symbol: str) -> RawSeries:
        """Return recent intraday records, trying finer intervals in turn.

        Raises:
            EndpointsExhaustedError: If every intraday endpoint failed.
        """
        raise NotImplementedError

    @abstractmethod
    async def fetch_daily(self, symbol: str, days: int) -> RawSeries:
        """Return end-of-day records covering at least the requested days.

        Raises:
            EndpointsExhaustedError: If both daily endpoints failed.
        """
        raise NotImplementedError


class CompanyDataPort(ABC):
    """Port for company quote, profile and key metrics lookups."""

    @abstractmethod
    async def get_quote(self, symbol: str) -> Optional[dict]:
        """Return the latest quote record, or None if the symbol is unknown."""
        raise NotImplementedError

    @abstractmethod
    async def get_profile(self, symbol: str) -> Optional[dict]:
        """Return the company profile record, or None."""
        raise NotImplementedError

    @abstractmethod
    async def get_key_metrics(self, symbol: str) -> Optional[dict]:
        """Return the most recent key metrics record, or None."""
        raise NotImplementedError


class MarketQuotePort(ABC):
    """Port for real-time stock quotes and symbol search."""

    @abstractmethod
    async def get_index_quote(self, symbol: str) -> IndexQuote:
        """Return the latest quote for an index ETF."""
        raise NotImplementedError

    @abstractmethod
    async def search_stocks(self, query: str) -> list[StockSearchHit]:
        """Return stocks matching a free-text query, in provider order."""
        raise NotImplementedError


class CryptoMarketPort(ABC):
    """Port for cryptocurrency market data."""

    @abstractmethod
    async def list_markets(self, per_page: int) -> list[CryptoQuote]:
        """Return the top coins by market capitalization."""
        raise NotImplementedError

    @abstractmethod
    async def find_coin_id(self, symbol: str) -> Optional[str]:
        """Resolve a ticker (e.g. "btc") to a coin id, or None if unknown."""
        raise NotImplementedError

    @abstractmethod
    async def get_coin_detail(self, coin_id: str) -> CryptoDetail:
        """Return detailed market data for a coin id."""
        raise NotImplementedError

    @abstractmethod
    async def search_coins(self, query: str) -> list[CryptoSearchHit]:
        """Return coins matching a free-text query, in provider order."""
        raise NotImplementedError


class IntradaySeriesPort(ABC):
    """Port for one-minute intraday bars."""

    @abstractmethod
    async def get_minute_series(self, symbol: str) -> list[IntradayPoint]:
        """Return recent one-minute bars, oldest first."""
        raise NotImplementedError


class EconomicDataPort(ABC):
    """Port for macroeconomic time series."""

    @abstractmethod
    async def get_latest(self, series_id: str, name: str) -> EconomicIndicator:
        """Return the most recent observation of a series."""
        raise NotImplementedError


class NewsPort(ABC):
    """Port for news headlines and search."""

    @abstractmethod
    async def top_headlines(self, category: str) -> list[NewsItem]:
        """Return current top headlines for a category."""
        raise NotImplementedError

    @abstractmethod
    async def search(self, query: str, domains: str, page_size: int) -> list[NewsItem]:
        """Return the latest articles matching a query on the given domains."""
        raise NotImplementedError


class ArticleRepository(ABC):
    """Port for persisting and retrieving news articles."""

    @abstractmethod
    def get_by_slug(self, slug: str) -> Optional[Article]:
        """Return the article with this slug, or None."""
        raise NotImplementedError

    @abstractmethod
    def get_by_url(self, url: str) -> Optional[Article]:
        """Return the article with this source URL, or None."""
        raise NotImplementedError

    @abstractmethod
    def add(self, article: Article) -> Article:
        """Persist a new article and return it as stored.

        Raises:
            ArticleStoreError: If the article cannot be inserted.
        """
        raise NotImplementedError

    @abstractmethod
    def save_scraped_content(
        self,
        slug: str,
        content: str,
        author: Optional[str],
        html_content: Optional[str],
        content_images: list[str],
        scraped_at: datetime,
    ) -> None:
        """Store scraped full content for an article.

        Raises:
            ArticleStoreError: If the update fails.
        """
        raise NotImplementedError

    @abstractmethod
    def get_related(self, category: str, exclude_id: str, limit: int = 4) -> list[Article]:
        """Return recent articles of a category, excluding one article."""
        raise NotImplementedError

    @abstractmethod
    def get_recent(self, limit: int = 10) -> list[Article]:
        """Return the most recently published articles."""
        raise NotImplementedError

    @abstractmethod
    def search(self, query: str, limit: int = 20) -> list[Article]:
        """Return articles whose title or description contains the query."""
        raise NotImplementedError


class ArticleScraperPort(ABC):
    """Port for extracting full article content from its web page."""

    @abstractmethod
    async def scrape(self, url: str) -> ScrapedContent:
        """Fetch and extract an article page.

        Raises:
            ScrapeError: If the page cannot be fetched or yields too little text.
        """
        raise NotImplementedError

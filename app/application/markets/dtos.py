"""
Data Transfer Objects for the markets application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from app.domain.markets.entities import Article


@dataclass(frozen=True)
class PriceHistoryQuery:
    """Input DTO for a charted price history.

    Attributes:
        symbol: Stock ticker, or CoinGecko coin id for crypto history.
        days: Requested timeframe; 1 selects intraday data.
    """

    symbol: Optional[str]
    days: int = 7


@dataclass(frozen=True)
class SymbolQuery:
    """Input DTO for lookups keyed by a single ticker symbol."""

    symbol: Optional[str]


@dataclass(frozen=True)
class SearchQuery:
    """Input DTO for asset search.

    Attributes:
        query: Free-text search; fewer than 2 characters yields no results.
        asset_type: "stocks", "crypto" or "all". None means "all".
    """

    query: Optional[str]
    asset_type: Optional[str] = None


@dataclass(frozen=True)
class StoredHeadline:
    """Output DTO for a headline after it was saved to the article store."""

    id: str
    title: str
    description: Optional[str]
    url: str
    source: str
    published_at: Optional[datetime]
    image_url: Optional[str]
    category: str
    slug: str


@dataclass(frozen=True)
class ScrapeArticleCommand:
    """Input DTO for fetching the full text of a stored article."""

    slug: Optional[str]


@dataclass(frozen=True)
class ScrapeArticleResult:
    """Output DTO for a scrape request.

    Attributes:
        article: The article as stored after the request.
        scraped: True when new content was scraped in this request.
        scrape_error: Why scraping failed, when it did.
    """

    article: Article
    scraped: bool
    scrape_error: Optional[str] = None

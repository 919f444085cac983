"""
Domain entities for the markets bounded context.

Entities represent core business objects with identity and lifecycle.
They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class CacheEntry:
    """A cached upstream payload and the clock reading when it was stored."""

    data: Any
    timestamp: float


@dataclass(frozen=True)
class ChartDataPoint:
    """A single normalized OHLCV point ready for charting.

    `timestamp` is in unix seconds (UTC); `date` is the upstream date string.
    """

    timestamp: int
    date: str
    price: float
    open: float
    high: float
    low: float
    close: float
    volume: float
    time_format: str
    full_date: str


@dataclass(frozen=True)
class ChartStats:
    """Summary statistics for a normalized price series."""

    min: float
    max: float
    avg: float
    count: int
    original_count: int
    actual_days_range: int
    requested_days: int
    interval: str
    timeframe: str
    cached: bool
    source: str
    symbol: str
    is_intraday: bool
    date_from: str
    date_to: str


@dataclass(frozen=True)
class PriceHistory:
    """A normalized price series with its statistics."""

    points: list[ChartDataPoint]
    stats: ChartStats


@dataclass(frozen=True)
class RawSeries:
    """Raw upstream OHLC records returned by a fallback chain.

    Attributes:
        records: Upstream records, newest first as FMP returns them.
        endpoint: Name of the endpoint that produced the records.
        cached: True when the payload was served from the fetch cache.
    """

    records: list[dict]
    endpoint: str
    cached: bool = False


@dataclass(frozen=True)
class IndexQuote:
    """Latest quote for a market index ETF."""

    symbol: str
    price: Optional[float]
    change: Optional[float]
    change_percent: Optional[float]
    volume: float
    timestamp: datetime


@dataclass(frozen=True)
class CryptoQuote:
    """Market snapshot for a cryptocurrency."""

    id: str
    symbol: str
    name: str
    price: Optional[float]
    change_24h: Optional[float]
    market_cap: Optional[float]
    volume: Optional[float]
    image: Optional[str]


@dataclass(frozen=True)
class StockDetail:
    """Quote, profile and key metrics of a listed company."""

    symbol: str
    name: str
    price: float
    change_24h: float
    change: float
    day_low: Optional[float]
    day_high: Optional[float]
    year_low: Optional[float]
    year_high: Optional[float]
    market_cap: float
    volume: float
    avg_volume: Optional[float]
    pe: Optional[float]
    eps: Optional[float]
    shares_outstanding: float
    previous_close: Optional[float]
    open: Optional[float]
    sector: str
    industry: str
    country: str
    website: Optional[str]
    description: Optional[str]
    ceo: Optional[str]
    employees: Optional[str]
    exchange: str
    currency: str
    last_update: datetime
    market_open: bool
    is_etf: bool
    fifty_day_average: Optional[float]
    two_hundred_day_average: Optional[float]
    beta: Optional[float]
    dividend_yield: Optional[float]
    price_to_book: Optional[float]
    price_to_sales: Optional[float]
    return_on_equity: Optional[float]
    return_on_assets: Optional[float]
    debt_to_equity: Optional[float]


@dataclass(frozen=True)
class CryptoDetail:
    """Detailed market data for a single coin."""

    id: str
    symbol: str
    name: str
    price: Optional[float]
    change_24h: Optional[float]
    market_cap: Optional[float]
    volume: Optional[float]
    image: Optional[str]
    rank: Optional[int]
    supply: Optional[float]
    max_supply: Optional[float]
    ath: Optional[float]
    atl: Optional[float]
    ath_date: Optional[str]
    atl_date: Optional[str]


@dataclass(frozen=True)
class IntradayPoint:
    """A one-minute bar from the intraday time series."""

    time: str
    price: float
    high: float
    low: float
    volume: float


@dataclass(frozen=True)
class EconomicIndicator:
    """Latest observation of a macroeconomic series."""

    indicator: str
    value: Optional[float]
    date: str
    series_id: str


@dataclass(frozen=True)
class StockSearchHit:
    """A stock matching a search query."""

    symbol: str
    description: str
    type: str
    display_symbol: str
    logo: str = ""


@dataclass(frozen=True)
class CryptoSearchHit:
    """A coin matching a search query."""

    id: str
    symbol: str
    name: str
    image: Optional[str]
    market_cap_rank: Optional[int]


@dataclass(frozen=True)
class SearchResults:
    """Combined stock and crypto search results."""

    stocks: list[StockSearchHit] = field(default_factory=list)
    crypto: list[CryptoSearchHit] = field(default_factory=list)


@dataclass(frozen=True)
class NewsItem:
    """A news article as returned by the news provider."""

    title: str
    description: Optional[str]
    url: str
    source: str
    published_at: str
    image_url: Optional[str]
    content: Optional[str] = None


@dataclass(frozen=True)
class Article:
    """A news article persisted in the article store."""

    id: str
    title: str
    url: str
    slug: str
    source: str = "Unknown"
    description: Optional[str] = None
    content: Optional[str] = None
    published_at: Optional[datetime] = None
    image_url: Optional[str] = None
    category: Optional[str] = None
    author: Optional[str] = None
    html_content: Optional[str] = None
    content_images: list[str] = field(default_factory=list)
    full_content_available: bool = False
    scraped_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class ScrapedContent:
    """Content extracted from an article page."""

    title: str
    content: str
    html_content: str = ""
    author: Optional[str] = None
    images: list[str] = field(default_factory=list)

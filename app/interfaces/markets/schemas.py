"""
Pydantic schemas for markets API responses.

These schemas define the API contract consumed by the dashboard frontend.
Market payloads serialize with camelCase keys; stored articles keep the
snake_case column names of the article store.
No business logic belongs here.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema serialized with camelCase aliases.

    Accepts both field names and aliases, and reads attributes from domain
    dataclasses.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    providers: dict[str, bool] = {}


class ErrorResponse(BaseModel):
    """Standard error response returned by all error handlers."""

    error: str
    details: Any = None


# ------------------------------------------------------------------
# Price history
# ------------------------------------------------------------------


class ChartPointSchema(CamelModel):
    """One charted OHLCV point; `timestamp` is unix seconds."""

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


class DateRangeSchema(BaseModel):
    from_: str = Field(alias="from")
    to: str

    model_config = ConfigDict(populate_by_name=True)


class ChartStatsSchema(CamelModel):
    """Summary statistics of a charted series."""

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
    date_range: DateRangeSchema


class PriceHistoryResponse(CamelModel):
    """Response schema for stock and crypto history endpoints."""

    data: list[ChartPointSchema]
    stats: ChartStatsSchema


# ------------------------------------------------------------------
# Snapshots and details
# ------------------------------------------------------------------


class IndexQuoteSchema(CamelModel):
    symbol: str
    price: Optional[float] = None
    change: Optional[float] = None
    change_percent: Optional[float] = None
    volume: float = 0
    timestamp: datetime


class CryptoQuoteSchema(CamelModel):
    id: str
    symbol: str
    name: str
    price: Optional[float] = None
    change_24h: Optional[float] = Field(None, alias="change24h")
    market_cap: Optional[float] = None
    volume: Optional[float] = None
    image: Optional[str] = None


class StockDetailSchema(CamelModel):
    """Response schema for the stock detail endpoint."""

    symbol: str
    name: str
    price: float
    change_24h: float = Field(alias="change24h")
    change: float
    day_low: Optional[float] = None
    day_high: Optional[float] = None
    year_low: Optional[float] = None
    year_high: Optional[float] = None
    market_cap: float
    volume: float
    avg_volume: Optional[float] = None
    pe: Optional[float] = None
    eps: Optional[float] = None
    shares_outstanding: float
    previous_close: Optional[float] = None
    open: Optional[float] = None
    sector: str
    industry: str
    country: str
    website: Optional[str] = None
    description: Optional[str] = None
    ceo: Optional[str] = None
    employees: Optional[str] = None
    exchange: str
    currency: str
    last_update: datetime
    market_open: bool
    is_etf: bool = Field(alias="isETF")
    fifty_day_average: Optional[float] = None
    two_hundred_day_average: Optional[float] = None
    beta: Optional[float] = None
    dividend_yield: Optional[float] = None
    price_to_book: Optional[float] = None
    price_to_sales: Optional[float] = None
    return_on_equity: Optional[float] = None
    return_on_assets: Optional[float] = None
    debt_to_equity: Optional[float] = None


class CryptoDetailSchema(CamelModel):
    """Response schema for the crypto detail endpoint."""

    id: str
    symbol: str
    name: str
    price: Optional[float] = None
    change_24h: Optional[float] = Field(None, alias="change24h")
    market_cap: Optional[float] = None
    volume: Optional[float] = None
    image: Optional[str] = None
    rank: Optional[int] = None
    supply: Optional[float] = None
    max_supply: Optional[float] = None
    ath: Optional[float] = None
    atl: Optional[float] = None
    ath_date: Optional[str] = None
    atl_date: Optional[str] = None


class IntradayPointSchema(CamelModel):
    time: str
    price: float
    high: float
    low: float
    volume: float


class EconomicIndicatorSchema(CamelModel):
    indicator: str
    value: Optional[float] = None
    date: str
    series_id: str


# ------------------------------------------------------------------
# Search
# ------------------------------------------------------------------


class StockSearchHitSchema(CamelModel):
    symbol: str
    description: str
    type: str
    display_symbol: str
    logo: str = ""


class CryptoSearchHitSchema(CamelModel):
    id: str
    symbol: str
    name: str
    image: Optional[str] = None
    market_cap_rank: Optional[int] = None


class SearchResponse(CamelModel):
    stocks: list[StockSearchHitSchema] = []
    crypto: list[CryptoSearchHitSchema] = []


# ------------------------------------------------------------------
# News and articles
# ------------------------------------------------------------------


class NewsItemSchema(CamelModel):
    """A news search result."""

    title: str
    description: Optional[str] = None
    url: str
    source: str
    published_at: str
    image_url: Optional[str] = None


class HeadlineSchema(CamelModel):
    """A top headline with the slug of its stored article."""

    id: str
    title: str
    description: Optional[str] = None
    url: str
    source: str
    published_at: Optional[datetime] = None
    image_url: Optional[str] = None
    category: str
    slug: str


class ArticleSchema(BaseModel):
    """A stored article, keyed like the article store columns."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None
    content: Optional[str] = None
    url: str
    source: str
    published_at: Optional[datetime] = None
    image_url: Optional[str] = None
    category: Optional[str] = None
    slug: str
    author: Optional[str] = None
    html_content: Optional[str] = None
    content_images: list[str] = []
    full_content_available: bool = False
    scraped_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ScrapeArticleRequest(BaseModel):
    """Request schema for the scrape-article endpoint."""

    slug: Optional[str] = Field(None, description="Slug of a stored article")


class ScrapedArticleSchema(ArticleSchema):
    """A stored article plus the outcome of the scrape request."""

    scraped: bool
    scrape_error: Optional[str] = Field(None, serialization_alias="scrapeError")


class ScrapeArticleResponse(BaseModel):
    success: bool = True
    article: ScrapedArticleSchema

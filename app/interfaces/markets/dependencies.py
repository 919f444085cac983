"""
Dependency injection for the markets bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into use cases via constructor injection.
These are the composition root for the markets context.

Process-wide resources (HTTP client, FMP fetch cache, database engine) are
created in the application lifespan and read from `app.state`.
"""

import httpx
from fastapi import Depends, Request
from sqlalchemy.engine import Engine

from app.application.markets.get_articles import (
    GetArticleUseCase,
    GetRecentArticlesUseCase,
    GetRelatedArticlesUseCase,
    SearchArticlesUseCase,
)
from app.application.markets.get_asset_detail import (
    GetCryptoDetailUseCase,
    GetStockDetailUseCase,
)
from app.application.markets.get_market_overview import (
    GetEconomicIndicatorsUseCase,
    GetIndexQuotesUseCase,
    GetIntradaySeriesUseCase,
    GetTopCryptoUseCase,
)
from app.application.markets.get_news import (
    GetCryptoNewsUseCase,
    GetHeadlinesUseCase,
    GetStockNewsUseCase,
)
from app.application.markets.get_price_history import (
    GetCryptoHistoryUseCase,
    GetStockHistoryUseCase,
)
from app.application.markets.scrape_article import ScrapeArticleUseCase
from app.application.markets.search_assets import SearchAssetsUseCase
from app.core.config import settings
from app.infrastructure.markets.article_repository import ArticleRepositoryAdapter
from app.infrastructure.markets.article_scraper import ArticleScraperAdapter
from app.infrastructure.markets.coingecko_adapter import CoinGeckoAdapter
from app.infrastructure.markets.fetch_cache import FetchCache
from app.infrastructure.markets.finnhub_adapter import FinnhubAdapter
from app.infrastructure.markets.fmp_adapter import FmpAdapter
from app.infrastructure.markets.fred_adapter import FredAdapter
from app.infrastructure.markets.newsapi_adapter import NewsApiAdapter
from app.infrastructure.markets.twelve_data_adapter import TwelveDataAdapter

# ------------------------------------------------------------------
# Shared resources
# ------------------------------------------------------------------


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Return the process-wide HTTP client."""
    return request.app.state.http_client


def get_fetch_cache(request: Request) -> FetchCache:
    """Return the process-wide FMP fetch cache."""
    return request.app.state.fmp_cache


def get_db_engine(request: Request) -> Engine:
    """Return the article store engine."""
    return request.app.state.db_engine


# ------------------------------------------------------------------
# Adapters
# ------------------------------------------------------------------


def get_fmp_adapter(fetch_cache: FetchCache = Depends(get_fetch_cache)) -> FmpAdapter:
    return FmpAdapter(fetch_cache, settings.fmp_api_key, settings.fmp_base_url)


def get_finnhub_adapter(client: httpx.AsyncClient = Depends(get_http_client)) -> FinnhubAdapter:
    return FinnhubAdapter(client, settings.finnhub_api_key, settings.finnhub_base_url)


def get_coingecko_adapter(
    client: httpx.AsyncClient = Depends(get_http_client),
) -> CoinGeckoAdapter:
    return CoinGeckoAdapter(client, settings.coingecko_base_url)


def get_news_adapter(client: httpx.AsyncClient = Depends(get_http_client)) -> NewsApiAdapter:
    return NewsApiAdapter(client, settings.news_api_key, settings.news_api_base_url)


def get_article_repository(engine: Engine = Depends(get_db_engine)) -> ArticleRepositoryAdapter:
    return ArticleRepositoryAdapter(engine)


# ------------------------------------------------------------------
# Use cases
# ------------------------------------------------------------------


def get_stock_history_use_case(
    fmp: FmpAdapter = Depends(get_fmp_adapter),
) -> GetStockHistoryUseCase:
    """Build GetStockHistoryUseCase with its infrastructure dependencies."""
    return GetStockHistoryUseCase(history_port=fmp)


def get_crypto_history_use_case(
    fmp: FmpAdapter = Depends(get_fmp_adapter),
) -> GetCryptoHistoryUseCase:
    """Build GetCryptoHistoryUseCase with its infrastructure dependencies."""
    return GetCryptoHistoryUseCase(history_port=fmp)


def get_stock_detail_use_case(
    fmp: FmpAdapter = Depends(get_fmp_adapter),
) -> GetStockDetailUseCase:
    """Build GetStockDetailUseCase with its infrastructure dependencies."""
    return GetStockDetailUseCase(company_port=fmp)


def get_crypto_detail_use_case(
    coingecko: CoinGeckoAdapter = Depends(get_coingecko_adapter),
) -> GetCryptoDetailUseCase:
    """Build GetCryptoDetailUseCase with its infrastructure dependencies."""
    return GetCryptoDetailUseCase(crypto_port=coingecko)


def get_index_quotes_use_case(
    finnhub: FinnhubAdapter = Depends(get_finnhub_adapter),
) -> GetIndexQuotesUseCase:
    return GetIndexQuotesUseCase(quote_port=finnhub)


def get_top_crypto_use_case(
    coingecko: CoinGeckoAdapter = Depends(get_coingecko_adapter),
) -> GetTopCryptoUseCase:
    return GetTopCryptoUseCase(crypto_port=coingecko)


def get_intraday_series_use_case(
    client: httpx.AsyncClient = Depends(get_http_client),
) -> GetIntradaySeriesUseCase:
    return GetIntradaySeriesUseCase(
        series_port=TwelveDataAdapter(client, settings.twelve_api_key, settings.twelve_base_url)
    )


def get_economic_indicators_use_case(
    client: httpx.AsyncClient = Depends(get_http_client),
) -> GetEconomicIndicatorsUseCase:
    return GetEconomicIndicatorsUseCase(
        economic_port=FredAdapter(client, settings.fred_api_key, settings.fred_base_url)
    )


def get_search_assets_use_case(
    finnhub: FinnhubAdapter = Depends(get_finnhub_adapter),
    coingecko: CoinGeckoAdapter = Depends(get_coingecko_adapter),
    fmp: FmpAdapter = Depends(get_fmp_adapter),
) -> SearchAssetsUseCase:
    """Build SearchAssetsUseCase; logos come from FMP through the fetch cache."""
    return SearchAssetsUseCase(quote_port=finnhub, crypto_port=coingecko, company_port=fmp)


def get_headlines_use_case(
    news: NewsApiAdapter = Depends(get_news_adapter),
    repository: ArticleRepositoryAdapter = Depends(get_article_repository),
) -> GetHeadlinesUseCase:
    return GetHeadlinesUseCase(news_port=news, repository=repository)


def get_stock_news_use_case(
    news: NewsApiAdapter = Depends(get_news_adapter),
) -> GetStockNewsUseCase:
    return GetStockNewsUseCase(news_port=news)


def get_crypto_news_use_case(
    news: NewsApiAdapter = Depends(get_news_adapter),
) -> GetCryptoNewsUseCase:
    return GetCryptoNewsUseCase(news_port=news)


def get_scrape_article_use_case(
    client: httpx.AsyncClient = Depends(get_http_client),
    repository: ArticleRepositoryAdapter = Depends(get_article_repository),
) -> ScrapeArticleUseCase:
    """Build ScrapeArticleUseCase with its infrastructure dependencies."""
    return ScrapeArticleUseCase(
        repository=repository,
        scraper=ArticleScraperAdapter(client, timeout=settings.scrape_timeout_seconds),
    )


def get_article_use_case(
    repository: ArticleRepositoryAdapter = Depends(get_article_repository),
) -> GetArticleUseCase:
    return GetArticleUseCase(repository)


def get_related_articles_use_case(
    repository: ArticleRepositoryAdapter = Depends(get_article_repository),
) -> GetRelatedArticlesUseCase:
    return GetRelatedArticlesUseCase(repository)


def get_recent_articles_use_case(
    repository: ArticleRepositoryAdapter = Depends(get_article_repository),
) -> GetRecentArticlesUseCase:
    return GetRecentArticlesUseCase(repository)


def get_search_articles_use_case(
    repository: ArticleRepositoryAdapter = Depends(get_article_repository),
) -> SearchArticlesUseCase:
    return SearchArticlesUseCase(repository)

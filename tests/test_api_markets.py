"""
Tests for the markets and news API endpoints.

Routes run against the real use cases; upstream adapters are replaced
through FastAPI dependency overrides. Validates status codes, response
shapes and the domain-to-HTTP error mapping.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import httpx
import pytest
from fastapi.testclient import TestClient

from app.application.markets.get_market_overview import (
    GetEconomicIndicatorsUseCase,
    GetIntradaySeriesUseCase,
)
from app.domain.markets.entities import (
    Article,
    CryptoQuote,
    EconomicIndicator,
    IndexQuote,
    NewsItem,
    RawSeries,
    StockSearchHit,
)
from app.domain.markets.errors import (
    EndpointsExhaustedError,
    ProviderNotConfiguredError,
    UpstreamAuthError,
    UpstreamRateLimitError,
    UpstreamRejectedError,
)
from app.infrastructure.markets.article_repository import ArticleRepositoryAdapter
from app.infrastructure.markets.fetch_cache import FetchCache
from app.interfaces.markets import dependencies
from app.main import app

DAILY = [
    {"date": "2024-06-07", "open": 1, "high": 2, "low": 0.5, "close": 1.5, "volume": 10},
    {"date": "2024-06-06", "open": 1, "high": 2, "low": 0.5, "close": 1.25, "volume": 10},
]


def _offline_client() -> httpx.AsyncClient:
    """HTTP client whose every upstream answers 503."""
    return httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(503)))


@pytest.fixture
def client(engine):
    """Test client with the article store on an in-memory engine.

    Adapters not replaced by a test talk to an offline upstream.
    """
    http = _offline_client()
    app.dependency_overrides[dependencies.get_db_engine] = lambda: engine
    app.dependency_overrides[dependencies.get_http_client] = lambda: http
    app.dependency_overrides[dependencies.get_fetch_cache] = lambda: FetchCache(http, provider="FMP")
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def fmp() -> AsyncMock:
    port = AsyncMock()
    port.fetch_daily.return_value = RawSeries(records=DAILY, endpoint="historical-price-full/AAPL")
    app.dependency_overrides[dependencies.get_fmp_adapter] = lambda: port
    return port


def _override(dependency, value) -> None:
    app.dependency_overrides[dependency] = lambda: value


class TestStockHistoryEndpoint:
    """Tests for GET /api/v1/markets/stocks/history."""

    def test_history_payload(self, client, fmp) -> None:
        response = client.get("/api/v1/markets/stocks/history", params={"symbol": "aapl", "days": 30})

        assert response.status_code == 200
        body = response.json()
        assert [point["price"] for point in body["data"]] == [1.25, 1.5]
        assert body["data"][0]["timeFormat"] == "Jun 6"
        assert body["data"][0]["fullDate"] == "6/6/2024, 12:00:00 AM"
        stats = body["stats"]
        assert stats["symbol"] == "AAPL"
        assert stats["originalCount"] == 2
        assert stats["requestedDays"] == 30
        assert stats["isIntraday"] is False
        assert stats["source"] == "FMP Extended EOD"
        assert stats["dateRange"] == {"from": "6/6/2024, 12:00:00 AM", "to": "6/7/2024, 12:00:00 AM"}
        fmp.fetch_daily.assert_awaited_once_with("AAPL", 30)

    def test_missing_symbol_is_400(self, client, fmp) -> None:
        response = client.get("/api/v1/markets/stocks/history")
        assert response.status_code == 400
        assert response.json() == {"error": "Stock symbol is required"}

    def test_invalid_days_is_400(self, client, fmp) -> None:
        response = client.get("/api/v1/markets/stocks/history", params={"symbol": "AAPL", "days": 0})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request parameters"

    def test_no_data_is_404(self, client, fmp) -> None:
        fmp.fetch_daily.return_value = RawSeries(records=[], endpoint="historical-price-full/AAPL")

        response = client.get("/api/v1/markets/stocks/history", params={"symbol": "AAPL"})

        assert response.status_code == 404
        assert response.json() == {"error": "No price data available", "symbol": "AAPL", "days": 7}

    def test_upstream_rate_limit_is_429(self, client, fmp) -> None:
        fmp.fetch_daily.side_effect = UpstreamRateLimitError("FMP")

        response = client.get("/api/v1/markets/stocks/history", params={"symbol": "AAPL"})

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "60"
        assert response.json()["retryAfter"] == 60
        assert response.json()["source"] == "FMP"

    def test_rejected_key_is_401(self, client, fmp) -> None:
        fmp.fetch_daily.side_effect = UpstreamAuthError("FMP")

        response = client.get("/api/v1/markets/stocks/history", params={"symbol": "AAPL"})

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid API key for FMP"
        assert "suggestion" in response.json()

    def test_missing_key_is_500(self, client, fmp) -> None:
        fmp.fetch_daily.side_effect = ProviderNotConfiguredError("FMP")

        response = client.get("/api/v1/markets/stocks/history", params={"symbol": "AAPL"})

        assert response.status_code == 500
        assert response.json() == {"error": "FMP API key not configured"}

    def test_exhausted_endpoints_are_500(self, client, fmp) -> None:
        fmp.fetch_daily.side_effect = EndpointsExhaustedError("FMP", "AAPL", "EOD")

        response = client.get("/api/v1/markets/stocks/history", params={"symbol": "AAPL"})

        assert response.status_code == 500
        assert response.json() == {
            "error": "Failed to fetch data from FMP API",
            "details": "all EOD endpoints failed for AAPL",
            "source": "FMP",
        }


class TestCryptoEndpoints:
    """Tests for crypto history, detail and top coins."""

    def test_history_uses_usd_pair(self, client, fmp) -> None:
        response = client.get("/api/v1/markets/crypto/history", params={"id": "bitcoin", "days": 7})

        assert response.status_code == 200
        assert response.json()["stats"]["symbol"] == "BTCUSD"
        fmp.fetch_daily.assert_awaited_once_with("BTCUSD", 7)

    def test_history_requires_id(self, client, fmp) -> None:
        response = client.get("/api/v1/markets/crypto/history")
        assert response.status_code == 400
        assert response.json() == {"error": "Crypto ID is required"}

    def test_top_crypto(self, client) -> None:
        coingecko = AsyncMock()
        coingecko.list_markets.return_value = [
            CryptoQuote("bitcoin", "BTC", "Bitcoin", 65000, 1.5, 1.2e12, 3e10, "btc.png")
        ]
        _override(dependencies.get_coingecko_adapter, coingecko)

        response = client.get("/api/v1/markets/crypto")

        assert response.status_code == 200
        assert response.json()[0]["change24h"] == 1.5
        assert response.json()[0]["marketCap"] == 1.2e12

    def test_unknown_coin_is_404(self, client) -> None:
        coingecko = AsyncMock()
        coingecko.find_coin_id.return_value = None
        _override(dependencies.get_coingecko_adapter, coingecko)

        response = client.get("/api/v1/markets/crypto/detail", params={"symbol": "NOPE"})

        assert response.status_code == 404
        assert response.json() == {"error": "Cryptocurrency not found", "symbol": "NOPE"}


class TestStockDetailEndpoint:
    """Tests for GET /api/v1/markets/stocks/detail."""

    def test_detail_payload(self, client, fmp) -> None:
        fmp.get_quote.return_value = {"symbol": "SPY", "price": 510.0, "isEtfOrFund": True}
        fmp.get_profile.return_value = {"companyName": "SPDR S&P 500 ETF"}
        fmp.get_key_metrics.return_value = None

        response = client.get("/api/v1/markets/stocks/detail", params={"symbol": "spy"})

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "SPDR S&P 500 ETF"
        assert body["isETF"] is True
        assert body["marketOpen"] is False
        assert body["change24h"] == 0
        assert body["dayLow"] == 510.0

    def test_unknown_symbol_is_404(self, client, fmp) -> None:
        fmp.get_quote.return_value = None

        response = client.get("/api/v1/markets/stocks/detail", params={"symbol": "ZZZZ"})

        assert response.status_code == 404
        assert response.json() == {"error": "Stock not found", "symbol": "ZZZZ"}


class TestSnapshotEndpoints:
    """Tests for index quotes, intraday bars and economic indicators."""

    def test_index_quotes(self, client) -> None:
        finnhub = AsyncMock()
        finnhub.get_index_quote.side_effect = lambda symbol: IndexQuote(
            symbol, 100.0, 1.0, 1.0, 10, datetime(2024, 6, 10, tzinfo=timezone.utc)
        )
        _override(dependencies.get_finnhub_adapter, finnhub)

        response = client.get("/api/v1/markets/stocks")

        assert response.status_code == 200
        assert [quote["symbol"] for quote in response.json()] == ["SPY", "QQQ", "DIA", "IWM"]
        assert response.json()[0]["changePercent"] == 1.0

    def test_intraday_rejection_is_400(self, client) -> None:
        series = AsyncMock()
        series.get_minute_series.side_effect = UpstreamRejectedError(
            "TwelveData", "symbol not found", status_code=400
        )
        _override(dependencies.get_intraday_series_use_case, GetIntradaySeriesUseCase(series))

        response = client.get("/api/v1/markets/historical", params={"symbol": "ZZZZ"})

        assert response.status_code == 400
        assert response.json() == {
            "error": "TwelveData rejected the request",
            "details": "symbol not found",
            "source": "TwelveData",
        }

    def test_economic_indicators(self, client) -> None:
        economic = AsyncMock()
        economic.get_latest.side_effect = lambda series_id, name: EconomicIndicator(
            name, None, "2024-05-01", series_id
        )
        _override(dependencies.get_economic_indicators_use_case, GetEconomicIndicatorsUseCase(economic))

        response = client.get("/api/v1/economic/indicators")

        assert response.status_code == 200
        assert response.json()[0] == {
            "indicator": "Unemployment Rate",
            "value": None,
            "date": "2024-05-01",
            "seriesId": "UNRATE",
        }


class TestSearchEndpoint:
    """Tests for GET /api/v1/search."""

    def test_search(self, client, fmp) -> None:
        finnhub, coingecko = AsyncMock(), AsyncMock()
        finnhub.search_stocks.return_value = [StockSearchHit("AAPL", "APPLE INC", "Common Stock", "AAPL")]
        coingecko.search_coins.return_value = []
        fmp.get_profile.return_value = {"image": "https://logo/AAPL.png"}
        _override(dependencies.get_finnhub_adapter, finnhub)
        _override(dependencies.get_coingecko_adapter, coingecko)

        response = client.get("/api/v1/search", params={"q": "apple"})

        assert response.status_code == 200
        assert response.json()["stocks"][0]["displaySymbol"] == "AAPL"
        assert response.json()["stocks"][0]["logo"] == "https://logo/AAPL.png"
        assert response.json()["crypto"] == []

    def test_short_query_returns_empty(self, client) -> None:
        response = client.get("/api/v1/search", params={"q": "a"})
        assert response.status_code == 200
        assert response.json() == {"stocks": [], "crypto": []}

    def test_unknown_type_is_400(self, client) -> None:
        response = client.get("/api/v1/search", params={"q": "apple", "type": "bonds"})
        assert response.status_code == 400


class TestNewsEndpoints:
    """Tests for headlines and news search."""

    def test_headlines_are_stored(self, client, engine) -> None:
        news = AsyncMock()
        news.top_headlines.return_value = [
            NewsItem("Markets Rally!", "Stocks rose", "https://n.test/1", "Reuters", "2024-06-10T10:00:00Z", None)
        ]
        _override(dependencies.get_news_adapter, news)

        response = client.get("/api/v1/news")

        assert response.status_code == 200
        headline = response.json()[0]
        assert headline["slug"] == "markets-rally"
        assert headline["category"] == "business"
        assert ArticleRepositoryAdapter(engine).get_by_slug("markets-rally") is not None

    def test_stock_news_requires_symbol(self, client) -> None:
        _override(dependencies.get_news_adapter, AsyncMock())
        response = client.get("/api/v1/news/stock")
        assert response.status_code == 400
        assert response.json() == {"error": "Symbol is required"}


class TestArticleEndpoints:
    """Tests for stored article reads and scraping."""

    @staticmethod
    def _seed(engine, slug: str = "fed-cut", **overrides) -> None:
        values = {
            "id": f"id-{slug}",
            "title": "Fed cut",
            "url": f"https://n.test/{slug}",
            "slug": slug,
            "content": "teaser",
            "category": "business",
        }
        values.update(overrides)
        ArticleRepositoryAdapter(engine).add(Article(**values))

    def test_get_article(self, client, engine) -> None:
        self._seed(engine)

        response = client.get("/api/v1/articles/fed-cut")

        assert response.status_code == 200
        assert response.json()["full_content_available"] is False
        assert response.json()["content_images"] == []

    def test_unknown_article_is_404(self, client) -> None:
        response = client.get("/api/v1/articles/nope")
        assert response.status_code == 404
        assert response.json() == {"error": "Article not found"}

    def test_related_and_search(self, client, engine) -> None:
        self._seed(engine, "fed-cut")
        self._seed(engine, "rates-fall", title="Rates fall")

        related = client.get("/api/v1/articles/fed-cut/related")
        search = client.get("/api/v1/articles/search", params={"q": "rates"})
        missing = client.get("/api/v1/articles/search")

        assert [a["slug"] for a in related.json()] == ["rates-fall"]
        assert [a["slug"] for a in search.json()] == ["rates-fall"]
        assert missing.status_code == 400

    def test_scrape_complete_article_is_not_rescraped(self, client, engine) -> None:
        self._seed(engine, content="x" * 1500, full_content_available=True)

        response = client.post("/api/v1/scrape-article", json={"slug": "fed-cut"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["article"]["scraped"] is False
        assert body["article"]["scrapeError"] is None

    def test_scrape_requires_slug(self, client) -> None:
        response = client.post("/api/v1/scrape-article", json={})
        assert response.status_code == 400
        assert response.json() == {"error": "Slug is required"}

    def test_scrape_unknown_slug_is_404(self, client) -> None:
        response = client.post("/api/v1/scrape-article", json={"slug": "nope"})
        assert response.status_code == 404


class TestErrorHandling:
    """Tests for the catch-all error handler and security headers."""

    def test_unexpected_errors_hide_details(self, fmp) -> None:
        fmp.fetch_daily.side_effect = RuntimeError("database password is hunter2")
        client = TestClient(app, raise_server_exceptions=False)
        try:
            response = client.get("/api/v1/markets/stocks/history", params={"symbol": "AAPL"})
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
        assert "hunter2" not in response.text

    def test_security_headers_present(self, client) -> None:
        response = client.get("/api/v1/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["Content-Security-Policy"] == "default-src 'none'; frame-ancestors 'none'"

"""
Tests for the FMP adapter.

Requests go through a real FetchCache backed by an httpx.MockTransport,
with a manual clock so throttling and the 429 retry never really sleep.
"""

from datetime import date, datetime, timedelta, timezone

import httpx
import pytest

from app.domain.markets.errors import (
    EndpointsExhaustedError,
    ProviderNotConfiguredError,
    SymbolNotFoundError,
    UpstreamError,
    UpstreamRateLimitError,
)
from app.infrastructure.markets.fetch_cache import FetchCache
from app.infrastructure.markets.fmp_adapter import FmpAdapter

BASE_URL = "https://fmp.test/api/v3"
NOW = datetime(2024, 6, 10, 12, 0, tzinfo=timezone.utc)


def _bars(count: int, newest: datetime, step: timedelta) -> list[dict]:
    """Intraday bars, newest first."""
    return [
        {
            "date": (newest - step * index).strftime("%Y-%m-%d %H:%M:%S"),
            "open": 10,
            "high": 11,
            "low": 9,
            "close": 10.5,
            "volume": 100,
        }
        for index in range(count)
    ]


class FakeFmp:
    """Routes FMP paths to scripted (status, json) answers."""

    def __init__(self, routes: dict[str, tuple[int, object]]) -> None:
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api/v3/")
        status, payload = self.routes.get(path, (200, []))
        return httpx.Response(status, json=payload)

    @property
    def paths(self) -> list[str]:
        return [request.url.path.removeprefix("/api/v3/") for request in self.requests]


def _adapter(fmp: FakeFmp, clock, api_key: str = "secret") -> FmpAdapter:
    client = httpx.AsyncClient(transport=httpx.MockTransport(fmp))
    cache = FetchCache(client, provider="FMP", clock=clock, sleep=clock.sleep)
    return FmpAdapter(cache, api_key=api_key, base_url=BASE_URL, now=lambda: NOW)


class TestFetchIntraday:
    """Tests for the intraday interval fallback chain."""

    @pytest.mark.asyncio
    async def test_first_dense_interval_wins(self, clock) -> None:
        """Sparse intervals are skipped until one has 20 recent bars."""
        fmp = FakeFmp(
            {
                "historical-chart/1hour/AAPL": (200, _bars(10, NOW, timedelta(hours=1))),
                "historical-chart/4hour/AAPL": (200, _bars(10, NOW, timedelta(hours=4))),
                "historical-chart/30min/AAPL": (200, _bars(25, NOW, timedelta(minutes=30))),
            }
        )

        series = await _adapter(fmp, clock).fetch_intraday("AAPL")

        assert series.endpoint == "historical-chart/30min/AAPL"
        assert len(series.records) == 25
        assert fmp.paths == [
            "historical-chart/1hour/AAPL",
            "historical-chart/4hour/AAPL",
            "historical-chart/30min/AAPL",
        ]

    @pytest.mark.asyncio
    async def test_only_last_week_counts_as_recent(self, clock) -> None:
        old = _bars(50, NOW - timedelta(days=30), timedelta(hours=1))
        recent = _bars(20, NOW, timedelta(hours=1))
        fmp = FakeFmp({"historical-chart/1hour/AAPL": (200, recent + old)})

        series = await _adapter(fmp, clock).fetch_intraday("AAPL")

        assert series.endpoint == "historical-chart/1hour/AAPL"
        assert len(series.records) == 20

    @pytest.mark.asyncio
    async def test_recent_bars_are_capped(self, clock) -> None:
        fmp = FakeFmp({"historical-chart/1hour/AAPL": (200, _bars(300, NOW, timedelta(minutes=10)))})
        series = await _adapter(fmp, clock).fetch_intraday("AAPL")
        assert len(series.records) == 200

    @pytest.mark.asyncio
    async def test_falls_back_to_latest_bars_of_first_answer(self, clock) -> None:
        """With no dense interval, the first non-empty answer supplies 100 bars."""
        stale = _bars(150, NOW - timedelta(days=60), timedelta(hours=4))
        fmp = FakeFmp(
            {
                "historical-chart/1hour/AAPL": (200, []),
                "historical-chart/4hour/AAPL": (200, stale),
                "historical-chart/30min/AAPL": (200, _bars(5, NOW, timedelta(minutes=30))),
            }
        )

        series = await _adapter(fmp, clock).fetch_intraday("AAPL")

        assert series.endpoint == "historical-chart/4hour/AAPL"
        assert series.records == stale[:100]
        assert len(fmp.requests) == 5

    @pytest.mark.asyncio
    async def test_every_endpoint_failing_raises(self, clock) -> None:
        fmp = FakeFmp({f"historical-chart/{i}/AAPL": (500, {"error": "x"}) for i in ("1hour", "4hour", "30min", "15min", "5min")})

        with pytest.raises(EndpointsExhaustedError):
            await _adapter(fmp, clock).fetch_intraday("AAPL")

    @pytest.mark.asyncio
    async def test_rate_limited_chain_reports_rate_limit(self, clock) -> None:
        """When every endpoint answered 429 twice, the rate limit surfaces."""
        fmp = FakeFmp({f"historical-chart/{i}/AAPL": (429, None) for i in ("1hour", "4hour", "30min", "15min", "5min")})

        with pytest.raises(UpstreamRateLimitError):
            await _adapter(fmp, clock).fetch_intraday("AAPL")

        assert len(fmp.requests) == 10

    @pytest.mark.asyncio
    async def test_missing_key_fails_before_any_request(self, clock) -> None:
        fmp = FakeFmp({})

        with pytest.raises(ProviderNotConfiguredError):
            await _adapter(fmp, clock, api_key="").fetch_intraday("AAPL")

        assert fmp.requests == []


class TestFetchDaily:
    """Tests for the end-of-day fallback chain."""

    @pytest.mark.asyncio
    async def test_window_is_widened(self, clock) -> None:
        """Thirty requested days ask FMP for 90; a year asks for three."""
        historical = [{"date": "2024-06-07", "close": 1}]
        fmp = FakeFmp({"historical-price-full/AAPL": (200, {"symbol": "AAPL", "historical": historical})})
        adapter = _adapter(fmp, clock)

        series = await adapter.fetch_daily("AAPL", 30)
        await adapter.fetch_daily("AAPL", 365)

        assert series.records == historical
        assert series.endpoint == "historical-price-full/AAPL"
        first, second = (request.url.params for request in fmp.requests)
        assert first["from"] == (date(2024, 6, 10) - timedelta(days=90)).isoformat()
        assert first["to"] == "2024-06-10"
        assert second["from"] == (date(2024, 6, 10) - timedelta(days=1095)).isoformat()

    @pytest.mark.asyncio
    async def test_falls_back_to_daily_chart(self, clock) -> None:
        """No `historical` key means the 1day chart is used, capped at 365."""
        chart = [{"date": f"2023-01-{day % 28 + 1:02d}", "close": day} for day in range(400)]
        fmp = FakeFmp(
            {
                "historical-price-full/AAPL": (200, {"symbol": "AAPL"}),
                "historical-chart/1day/AAPL": (200, chart),
            }
        )

        series = await _adapter(fmp, clock).fetch_daily("AAPL", 7)

        assert series.endpoint == "historical-chart/1day/AAPL"
        assert len(series.records) == 365

    @pytest.mark.asyncio
    async def test_full_history_error_falls_back(self, clock) -> None:
        fmp = FakeFmp(
            {
                "historical-price-full/AAPL": (500, None),
                "historical-chart/1day/AAPL": (200, [{"date": "2024-06-07", "close": 1}]),
            }
        )
        series = await _adapter(fmp, clock).fetch_daily("AAPL", 7)
        assert series.endpoint == "historical-chart/1day/AAPL"

    @pytest.mark.asyncio
    async def test_empty_answers_return_empty_series(self, clock) -> None:
        fmp = FakeFmp({"historical-price-full/AAPL": (200, {"historical": []})})
        series = await _adapter(fmp, clock).fetch_daily("AAPL", 7)
        assert series.records == []

    @pytest.mark.asyncio
    async def test_both_failing_raises(self, clock) -> None:
        fmp = FakeFmp(
            {
                "historical-price-full/AAPL": (500, None),
                "historical-chart/1day/AAPL": (502, None),
            }
        )
        with pytest.raises(EndpointsExhaustedError):
            await _adapter(fmp, clock).fetch_daily("AAPL", 7)

    @pytest.mark.asyncio
    async def test_repeat_call_is_marked_cached(self, clock) -> None:
        fmp = FakeFmp({"historical-price-full/AAPL": (200, {"historical": [{"date": "2024-06-07", "close": 1}]})})
        adapter = _adapter(fmp, clock)

        first = await adapter.fetch_daily("AAPL", 7)
        second = await adapter.fetch_daily("AAPL", 7)

        assert not first.cached
        assert second.cached
        assert len(fmp.requests) == 1


class TestCompanyData:
    """Tests for quote, profile and key metrics lookups."""

    @pytest.mark.asyncio
    async def test_quote_returns_first_record(self, clock) -> None:
        fmp = FakeFmp({"quote/AAPL": (200, [{"symbol": "AAPL", "price": 190}])})
        quote = await _adapter(fmp, clock).get_quote("AAPL")
        assert quote == {"symbol": "AAPL", "price": 190}
        assert fmp.requests[0].url.params["apikey"] == "secret"

    @pytest.mark.asyncio
    async def test_empty_quote_is_none(self, clock) -> None:
        assert await _adapter(FakeFmp({}), clock).get_quote("ZZZZ") is None

    @pytest.mark.asyncio
    async def test_quote_404_is_symbol_not_found(self, clock) -> None:
        fmp = FakeFmp({"quote/ZZZZ": (404, {"error": "not found"})})
        with pytest.raises(SymbolNotFoundError):
            await _adapter(fmp, clock).get_quote("ZZZZ")

    @pytest.mark.asyncio
    async def test_profile_error_is_upstream_error(self, clock) -> None:
        fmp = FakeFmp({"profile/AAPL": (500, {"error": "boom"})})

        with pytest.raises(UpstreamError) as excinfo:
            await _adapter(fmp, clock).get_profile("AAPL")

        assert excinfo.value.status_code == 500
        assert excinfo.value.details == {"error": "boom"}

    @pytest.mark.asyncio
    async def test_key_metrics(self, clock) -> None:
        fmp = FakeFmp({"key-metrics/AAPL": (200, [{"peRatio": 30}, {"peRatio": 28}])})
        assert await _adapter(fmp, clock).get_key_metrics("AAPL") == {"peRatio": 30}

    @pytest.mark.asyncio
    async def test_missing_key(self, clock) -> None:
        with pytest.raises(ProviderNotConfiguredError):
            await _adapter(FakeFmp({}), clock, api_key="").get_quote("AAPL")

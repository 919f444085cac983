"""
Adapter: Financial Modeling Prep (FMP).

Implements PriceHistoryPort and CompanyDataPort.
Every call goes through the shared FetchCache so FMP's request-spacing
policy holds across all endpoints. Historical prices are fetched through
ordered endpoint fallback chains.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from functools import partial
from typing import Any, Callable, Optional

from app.domain.markets.chart import parse_record_date
from app.domain.markets.entities import RawSeries
from app.domain.markets.errors import EndpointsExhaustedError, UpstreamRateLimitError
from app.domain.markets.fallback import Exhausted, Found, Strategy, first_success
from app.domain.markets.ports import CompanyDataPort, PriceHistoryPort
from app.infrastructure.markets.fetch_cache import FetchCache
from app.infrastructure.markets.upstream import require_api_key, upstream_errors

logger = logging.getLogger(__name__)

PROVIDER = "FMP"
DEFAULT_BASE_URL = "https://financialmodelingprep.com/api/v3"

INTRADAY_INTERVALS = ("1hour", "4hour", "30min", "15min", "5min")
INTRADAY_LOOKBACK = timedelta(days=7)
INTRADAY_MIN_POINTS = 20
INTRADAY_MAX_POINTS = 200
INTRADAY_FALLBACK_POINTS = 100

EOD_WINDOW_MULTIPLIER = 3
EOD_MIN_WINDOW_DAYS = 90
DAILY_CHART_MAX_POINTS = 365


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _first_record(payload: Any) -> Optional[dict]:
    if isinstance(payload, list) and payload and isinstance(payload[0], dict):
        return payload[0]
    return None


@dataclass(frozen=True)
class _IntradayWindow:
    """One intraday endpoint's answer: all records and the recent subset."""

    endpoint: str
    raw: list[dict] = field(default_factory=list)
    recent: list[dict] = field(default_factory=list)
    cached: bool = False


class FmpAdapter(PriceHistoryPort, CompanyDataPort):
    """Concrete adapter for FMP price history and company data."""

    def __init__(
        self,
        fetch_cache: FetchCache,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        now: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._cache = fetch_cache
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._now = now

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _params(self, **extra: str) -> dict[str, str]:
        return {**extra, "apikey": require_api_key(PROVIDER, self._api_key)}

    async def _get(
        self, path: str, params: dict[str, str], symbol: Optional[str] = None
    ) -> tuple[Any, bool]:
        """GET an FMP path. Returns the payload and whether it came from cache."""
        url = f"{self._base_url}/{path}"
        cached = self._cache.is_fresh(url, params)
        with upstream_errors(PROVIDER, symbol):
            payload = await self._cache.request(url, params)
        return payload, cached

    @staticmethod
    def _raise_exhausted(result: Exhausted, symbol: str, chain: str) -> None:
        rate_limited = [
            attempt.error
            for attempt in result.attempts
            if isinstance(attempt.error, UpstreamRateLimitError)
        ]
        if rate_limited:
            raise rate_limited[-1]
        raise EndpointsExhaustedError(PROVIDER, symbol, chain)

    # ------------------------------------------------------------------
    # PriceHistoryPort
    # ------------------------------------------------------------------

    async def _intraday_window(self, symbol: str, interval: str) -> _IntradayWindow:
        endpoint = f"historical-chart/{interval}/{symbol}"
        payload, cached = await self._get(endpoint, self._params())
        records = [r for r in payload if isinstance(r, dict)] if isinstance(payload, list) else []

        now = self._now()
        since = now - INTRADAY_LOOKBACK
        recent = []
        for record in records:
            moment = parse_record_date(record.get("date"))
            if moment is not None and since <= moment <= now:
                recent.append(record)

        return _IntradayWindow(
            endpoint=endpoint,
            raw=records,
            recent=recent[:INTRADAY_MAX_POINTS],
            cached=cached,
        )

    async def fetch_intraday(self, symbol: str) -> RawSeries:
        """Return the last week of intraday bars from the first dense interval.

        Intervals are tried from 1 hour down to 5 minutes. An interval wins
        once it has at least 20 bars inside the last 7 days. If none does,
        the 100 most recent bars of the first interval that answered are
        returned instead.
        """
        require_api_key(PROVIDER, self._api_key)
        strategies = [
            Strategy(
                name=f"historical-chart/{interval}",
                run=partial(self._intraday_window, symbol, interval),
            )
            for interval in INTRADAY_INTERVALS
        ]
        result = await first_success(
            strategies, accept=lambda window: len(window.recent) >= INTRADAY_MIN_POINTS
        )

        if isinstance(result, Found):
            window = result.value
            logger.info(
                "Intraday %s: %d recent points from %s",
                symbol,
                len(window.recent),
                window.endpoint,
            )
            return RawSeries(records=window.recent, endpoint=window.endpoint, cached=window.cached)

        if result.all_failed:
            self._raise_exhausted(result, symbol, "intraday")

        answered = [a.value for a in result.attempts if not a.failed]
        window = next((w for w in answered if w.raw), answered[0])
        logger.info(
            "Intraday %s: no dense interval, using %d latest points from %s",
            symbol,
            min(len(window.raw), INTRADAY_FALLBACK_POINTS),
            window.endpoint,
        )
        return RawSeries(
            records=window.raw[:INTRADAY_FALLBACK_POINTS],
            endpoint=window.endpoint,
            cached=window.cached,
        )

    async def _full_history(self, symbol: str, start: str, end: str) -> RawSeries:
        endpoint = f"historical-price-full/{symbol}"
        payload, cached = await self._get(endpoint, self._params(**{"from": start, "to": end}))
        historical = payload.get("historical") if isinstance(payload, dict) else None
        records = historical if isinstance(historical, list) else []
        return RawSeries(records=records, endpoint=endpoint, cached=cached)

    async def _daily_chart(self, symbol: str) -> RawSeries:
        endpoint = f"historical-chart/1day/{symbol}"
        payload, cached = await self._get(endpoint, self._params())
        records = payload[:DAILY_CHART_MAX_POINTS] if isinstance(payload, list) else []
        return RawSeries(records=records, endpoint=endpoint, cached=cached)

    async def fetch_daily(self, symbol: str, days: int) -> RawSeries:
        """Return end-of-day bars over an extended window.

        The window is widened to max(days * 3, 90) days for better sampling.
        Falls back to the plain daily chart (up to 365 bars) when the full
        history endpoint fails or has no `historical` records.
        """
        require_api_key(PROVIDER, self._api_key)
        window_days = max(days * EOD_WINDOW_MULTIPLIER, EOD_MIN_WINDOW_DAYS)
        end = self._now().date()
        start = end - timedelta(days=window_days)
        logger.info("EOD %s: requesting %d days (asked for %d)", symbol, window_days, days)

        strategies = [
            Strategy(
                name="historical-price-full",
                run=partial(self._full_history, symbol, start.isoformat(), end.isoformat()),
            ),
            Strategy(name="historical-chart/1day", run=partial(self._daily_chart, symbol)),
        ]
        result = await first_success(strategies, accept=lambda series: bool(series.records))

        if isinstance(result, Found):
            logger.info(
                "EOD %s: %d points from %s", symbol, len(result.value.records), result.strategy
            )
            return result.value

        if result.all_failed:
            self._raise_exhausted(result, symbol, "EOD")
        return result.first_returned().value

    # ------------------------------------------------------------------
    # CompanyDataPort
    # ------------------------------------------------------------------

    async def get_quote(self, symbol: str) -> Optional[dict]:
        payload, _ = await self._get(f"quote/{symbol}", self._params(), symbol=symbol)
        return _first_record(payload)

    async def get_profile(self, symbol: str) -> Optional[dict]:
        payload, _ = await self._get(f"profile/{symbol}", self._params())
        return _first_record(payload)

    async def get_key_metrics(self, symbol: str) -> Optional[dict]:
        payload, _ = await self._get(f"key-metrics/{symbol}", self._params())
        return _first_record(payload)

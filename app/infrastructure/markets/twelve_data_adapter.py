"""
Adapter: Twelve Data.

Implements IntradaySeriesPort with the one-minute time series endpoint.
"""

import logging

import httpx

from app.domain.markets.chart import to_number
from app.domain.markets.entities import IntradayPoint
from app.domain.markets.errors import UpstreamRejectedError
from app.domain.markets.ports import IntradaySeriesPort
from app.infrastructure.markets.upstream import get_json, require_api_key, upstream_errors

logger = logging.getLogger(__name__)

PROVIDER = "TwelveData"
DEFAULT_BASE_URL = "https://api.twelvedata.com"
OUTPUT_SIZE = 50


class TwelveDataAdapter(IntradaySeriesPort):
    """Concrete adapter for Twelve Data minute bars."""

    def __init__(
        self, client: httpx.AsyncClient, api_key: str, base_url: str = DEFAULT_BASE_URL
    ) -> None:
        self._client = client
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    async def get_minute_series(self, symbol: str) -> list[IntradayPoint]:
        """Return the last 50 one-minute bars, oldest first.

        Raises:
            UpstreamRejectedError: When Twelve Data answers with status "error"
                (unknown symbol, plan limits).
        """
        params = {
            "symbol": symbol,
            "interval": "1min",
            "outputsize": OUTPUT_SIZE,
            "apikey": require_api_key(PROVIDER, self._api_key),
        }
        with upstream_errors(PROVIDER, symbol):
            payload = await get_json(self._client, f"{self._base_url}/time_series", params)

        if not isinstance(payload, dict) or payload.get("status") == "error":
            message = payload.get("message") if isinstance(payload, dict) else None
            logger.error("TwelveData error for %s: %s", symbol, message)
            raise UpstreamRejectedError(PROVIDER, message or "invalid response", status_code=400)

        points = []
        # Twelve Data lists newest first.
        for value in reversed(payload.get("values") or []):
            stamp = str(value.get("datetime", ""))
            points.append(
                IntradayPoint(
                    time=stamp.split(" ")[1] if " " in stamp else stamp,
                    price=to_number(value.get("close")) or 0.0,
                    high=to_number(value.get("high")) or 0.0,
                    low=to_number(value.get("low")) or 0.0,
                    volume=to_number(value.get("volume")) or 0.0,
                )
            )
        return points

"""
Adapter: FRED (Federal Reserve Economic Data).

Implements EconomicDataPort.
"""

import httpx

from app.domain.markets.chart import to_number
from app.domain.markets.entities import EconomicIndicator
from app.domain.markets.errors import UpstreamError
from app.domain.markets.ports import EconomicDataPort
from app.infrastructure.markets.upstream import get_json, require_api_key, upstream_errors

PROVIDER = "FRED"
DEFAULT_BASE_URL = "https://api.stlouisfed.org/fred"


class FredAdapter(EconomicDataPort):
    """Reads the most recent observation of a FRED series."""

    def __init__(
        self, client: httpx.AsyncClient, api_key: str, base_url: str = DEFAULT_BASE_URL
    ) -> None:
        self._client = client
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    async def get_latest(self, series_id: str, name: str) -> EconomicIndicator:
        """Return the latest observation.

        FRED reports missing values as "."; those come back as value None.
        """
        params = {
            "series_id": series_id,
            "api_key": require_api_key(PROVIDER, self._api_key),
            "file_type": "json",
            "limit": 1,
            "sort_order": "desc",
        }
        with upstream_errors(PROVIDER):
            payload = await get_json(
                self._client, f"{self._base_url}/series/observations", params
            )

        observations = payload.get("observations") if isinstance(payload, dict) else None
        if not observations:
            raise UpstreamError(PROVIDER, f"no observations for {series_id}")

        latest = observations[0]
        return EconomicIndicator(
            indicator=name,
            value=to_number(latest.get("value")),
            date=latest.get("date", ""),
            series_id=series_id,
        )

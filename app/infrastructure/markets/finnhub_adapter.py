"""
Adapter: Finnhub.

Implements MarketQuotePort.
Fetches real-time index quotes and performs symbol search.
"""

import logging
from datetime import datetime, timezone

import httpx

from app.domain.markets.chart import to_number
from app.domain.markets.entities import IndexQuote, StockSearchHit
from app.domain.markets.ports import MarketQuotePort
from app.infrastructure.markets.upstream import get_json, require_api_key, upstream_errors

logger = logging.getLogger(__name__)

PROVIDER = "Finnhub"
DEFAULT_BASE_URL = "https://finnhub.io/api/v1"


class FinnhubAdapter(MarketQuotePort):
    """Concrete adapter for Finnhub quotes and search."""

    def __init__(
        self, client: httpx.AsyncClient, api_key: str, base_url: str = DEFAULT_BASE_URL
    ) -> None:
        self._client = client
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    async def get_index_quote(self, symbol: str) -> IndexQuote:
        """Return the latest quote for an index ETF.

        Finnhub uses single-letter fields: c (current), d (change),
        dp (change percent), v (volume).
        """
        token = require_api_key(PROVIDER, self._api_key)
        with upstream_errors(PROVIDER, symbol):
            quote = await get_json(
                self._client,
                f"{self._base_url}/quote",
                {"symbol": symbol, "token": token},
            )
        quote = quote if isinstance(quote, dict) else {}
        return IndexQuote(
            symbol=symbol,
            price=to_number(quote.get("c")),
            change=to_number(quote.get("d")),
            change_percent=to_number(quote.get("dp")),
            volume=to_number(quote.get("v")) or 0,
            timestamp=datetime.now(timezone.utc),
        )

    async def search_stocks(self, query: str) -> list[StockSearchHit]:
        token = require_api_key(PROVIDER, self._api_key)
        with upstream_errors(PROVIDER):
            payload = await get_json(
                self._client, f"{self._base_url}/search", {"q": query, "token": token}
            )
        results = payload.get("result") if isinstance(payload, dict) else None
        hits = []
        for item in results or []:
            if not isinstance(item, dict) or not item.get("symbol"):
                continue
            hits.append(
                StockSearchHit(
                    symbol=item["symbol"],
                    description=item.get("description") or "",
                    type=item.get("type") or "",
                    display_symbol=item.get("displaySymbol") or item["symbol"],
                )
            )
        logger.debug("Finnhub search %r returned %d results", query, len(hits))
        return hits

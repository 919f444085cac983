"""
Adapter: CoinGecko.

Implements CryptoMarketPort.
CoinGecko's public API needs no key; responses are mapped to domain entities.
"""

import logging
from typing import Any, Optional

import httpx

from app.domain.markets.chart import to_number
from app.domain.markets.entities import CryptoDetail, CryptoQuote, CryptoSearchHit
from app.domain.markets.ports import CryptoMarketPort
from app.infrastructure.markets.upstream import get_json, upstream_errors

logger = logging.getLogger(__name__)

PROVIDER = "CoinGecko"
DEFAULT_BASE_URL = "https://api.coingecko.com/api/v3"
LOOKUP_PAGE_SIZE = 250


def _usd(block: Any) -> Any:
    """Pick the USD value out of a CoinGecko per-currency mapping."""
    return block.get("usd") if isinstance(block, dict) else None


class CoinGeckoAdapter(CryptoMarketPort):
    """Concrete adapter for CoinGecko market data."""

    def __init__(self, client: httpx.AsyncClient, base_url: str = DEFAULT_BASE_URL) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")

    async def _markets(self, per_page: int, **extra: Any) -> list[dict]:
        params = {
            "vs_currency": "usd",
            "order": "market_cap_desc",
            "per_page": per_page,
            "page": 1,
            **extra,
        }
        with upstream_errors(PROVIDER):
            payload = await get_json(self._client, f"{self._base_url}/coins/markets", params)
        return [coin for coin in payload if isinstance(coin, dict)] if isinstance(payload, list) else []

    async def list_markets(self, per_page: int) -> list[CryptoQuote]:
        coins = await self._markets(
            per_page, sparkline="false", price_change_percentage="24h"
        )
        return [
            CryptoQuote(
                id=coin.get("id", ""),
                symbol=str(coin.get("symbol", "")).upper(),
                name=coin.get("name", ""),
                price=to_number(coin.get("current_price")),
                change_24h=to_number(coin.get("price_change_percentage_24h")),
                market_cap=to_number(coin.get("market_cap")),
                volume=to_number(coin.get("total_volume")),
                image=coin.get("image"),
            )
            for coin in coins
        ]

    async def find_coin_id(self, symbol: str) -> Optional[str]:
        """Resolve a ticker among the top 250 coins, case-insensitively."""
        wanted = symbol.lower()
        for coin in await self._markets(LOOKUP_PAGE_SIZE):
            if str(coin.get("symbol", "")).lower() == wanted:
                return coin.get("id")
        return None

    async def get_coin_detail(self, coin_id: str) -> CryptoDetail:
        params = {
            "localization": "false",
            "tickers": "false",
            "market_data": "true",
            "community_data": "false",
            "developer_data": "false",
            "sparkline": "false",
        }
        with upstream_errors(PROVIDER, coin_id, asset="Cryptocurrency"):
            coin = await get_json(self._client, f"{self._base_url}/coins/{coin_id}", params)

        market = coin.get("market_data") or {}
        image = coin.get("image") or {}
        return CryptoDetail(
            id=coin.get("id", coin_id),
            symbol=str(coin.get("symbol", "")).upper(),
            name=coin.get("name", ""),
            price=to_number(_usd(market.get("current_price"))),
            change_24h=to_number(market.get("price_change_percentage_24h")),
            market_cap=to_number(_usd(market.get("market_cap"))),
            volume=to_number(_usd(market.get("total_volume"))),
            image=image.get("large") if isinstance(image, dict) else None,
            rank=coin.get("market_cap_rank"),
            supply=to_number(market.get("circulating_supply")),
            max_supply=to_number(market.get("max_supply")),
            ath=to_number(_usd(market.get("ath"))),
            atl=to_number(_usd(market.get("atl"))),
            ath_date=_usd(market.get("ath_date")),
            atl_date=_usd(market.get("atl_date")),
        )

    async def search_coins(self, query: str) -> list[CryptoSearchHit]:
        with upstream_errors(PROVIDER):
            payload = await get_json(self._client, f"{self._base_url}/search", {"query": query})
        coins = payload.get("coins") if isinstance(payload, dict) else None
        return [
            CryptoSearchHit(
                id=coin.get("id", ""),
                symbol=str(coin.get("symbol", "")).upper(),
                name=coin.get("name", ""),
                image=coin.get("large"),
                market_cap_rank=coin.get("market_cap_rank"),
            )
            for coin in coins or []
            if isinstance(coin, dict)
        ]

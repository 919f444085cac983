"""
Use case: Search stocks and cryptocurrencies by free text.

Input: SearchQuery (query, asset_type)
Output: SearchResults
Side effects: None.
Failure cases: None. A failing section yields an empty list.
"""

import asyncio
import dataclasses
import logging

from app.application.markets.dtos import SearchQuery
from app.domain.markets.entities import CryptoSearchHit, SearchResults, StockSearchHit
from app.domain.markets.errors import MarketDomainError
from app.domain.markets.ports import CompanyDataPort, CryptoMarketPort, MarketQuotePort

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
MAX_RESULTS = 5


class SearchAssetsUseCase:
    """Searches stocks (with company logos) and coins.

    Stock hits are de-duplicated by symbol and enriched with the logo from
    the company profile; a missing logo is tolerated.
    """

    def __init__(
        self,
        quote_port: MarketQuotePort,
        crypto_port: CryptoMarketPort,
        company_port: CompanyDataPort,
    ) -> None:
        self._quote_port = quote_port
        self._crypto_port = crypto_port
        self._company_port = company_port

    async def _with_logo(self, hit: StockSearchHit) -> StockSearchHit:
        try:
            profile = await self._company_port.get_profile(hit.symbol)
        except MarketDomainError as exc:
            logger.warning("Error fetching logo for %s: %s", hit.symbol, exc)
            return hit
        logo = (profile or {}).get("image")
        if not logo:
            logger.debug("No logo found for %s", hit.symbol)
            return hit
        return dataclasses.replace(hit, logo=logo)

    async def _search_stocks(self, query: str) -> list[StockSearchHit]:
        try:
            hits = await self._quote_port.search_stocks(query)
        except MarketDomainError as exc:
            logger.error("Error searching stocks: %s", exc)
            return []

        unique: dict[str, StockSearchHit] = {}
        for hit in hits:
            if hit.symbol and hit.symbol not in unique:
                unique[hit.symbol] = hit
        top = list(unique.values())[:MAX_RESULTS]
        return list(await asyncio.gather(*(self._with_logo(hit) for hit in top)))

    async def _search_crypto(self, query: str) -> list[CryptoSearchHit]:
        try:
            coins = await self._crypto_port.search_coins(query)
        except MarketDomainError as exc:
            logger.error("Error searching crypto: %s", exc)
            return []
        return coins[:MAX_RESULTS]

    async def execute(self, query: SearchQuery) -> SearchResults:
        """Run the search use case.

        Args:
            query: Search text and asset type filter ("stocks", "crypto",
                "all" or None for all).

        Returns:
            Up to five stocks and five coins. Queries shorter than two
            characters return empty results without calling upstream.
        """
        text = (query.query or "").strip()
        if len(text) < MIN_QUERY_LENGTH:
            return SearchResults()

        asset_type = query.asset_type or "all"
        stocks: list[StockSearchHit] = []
        crypto: list[CryptoSearchHit] = []
        if asset_type in ("stocks", "all"):
            stocks = await self._search_stocks(text)
        if asset_type in ("crypto", "all"):
            crypto = await self._search_crypto(text)
        return SearchResults(stocks=stocks, crypto=crypto)

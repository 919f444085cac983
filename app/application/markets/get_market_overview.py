"""
Use cases: Dashboard snapshots.

Index ETF quotes, top cryptocurrencies, one-minute intraday bars and the
latest macroeconomic indicators.
Side effects: None.
Failure cases: Upstream errors propagate; any failing lookup fails the call.
"""

import asyncio
import logging

from app.application.markets.dtos import SymbolQuery
from app.domain.markets.entities import CryptoQuote, EconomicIndicator, IndexQuote, IntradayPoint
from app.domain.markets.ports import (
    CryptoMarketPort,
    EconomicDataPort,
    IntradaySeriesPort,
    MarketQuotePort,
)
from app.domain.markets.symbols import ECONOMIC_SERIES, INDEX_SYMBOLS

logger = logging.getLogger(__name__)

TOP_CRYPTO_COUNT = 4
DEFAULT_INTRADAY_SYMBOL = "AAPL"


class GetIndexQuotesUseCase:
    """Quotes the tracked index ETFs concurrently."""

    def __init__(self, quote_port: MarketQuotePort) -> None:
        self._quote_port = quote_port

    async def execute(self) -> list[IndexQuote]:
        quotes = await asyncio.gather(
            *(self._quote_port.get_index_quote(symbol) for symbol in INDEX_SYMBOLS)
        )
        return list(quotes)


class GetTopCryptoUseCase:
    """Lists the largest coins by market capitalization."""

    def __init__(self, crypto_port: CryptoMarketPort) -> None:
        self._crypto_port = crypto_port

    async def execute(self) -> list[CryptoQuote]:
        return await self._crypto_port.list_markets(TOP_CRYPTO_COUNT)


class GetIntradaySeriesUseCase:
    """Returns recent one-minute bars for a symbol (AAPL when omitted)."""

    def __init__(self, series_port: IntradaySeriesPort) -> None:
        self._series_port = series_port

    async def execute(self, query: SymbolQuery) -> list[IntradayPoint]:
        symbol = (query.symbol or "").strip() or DEFAULT_INTRADAY_SYMBOL
        return await self._series_port.get_minute_series(symbol)


class GetEconomicIndicatorsUseCase:
    """Fetches the latest value of each tracked FRED series."""

    def __init__(self, economic_port: EconomicDataPort) -> None:
        self._economic_port = economic_port

    async def execute(self) -> list[EconomicIndicator]:
        """Run the economic indicators use case.

        Returns:
            One indicator per tracked series, in catalog order.
        """
        indicators = await asyncio.gather(
            *(
                self._economic_port.get_latest(series_id, name)
                for series_id, name in ECONOMIC_SERIES.items()
            )
        )
        logger.info("Fetched %d economic indicators", len(indicators))
        return list(indicators)

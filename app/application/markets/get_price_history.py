"""
Use case: Charted price history for stocks and cryptocurrencies.

Input: PriceHistoryQuery (symbol or coin id, days)
Output: PriceHistory (normalized points + stats)
Side effects: Upstream calls through the rate-limited fetch cache.
Failure cases: MissingParameterError, NoPriceDataError, SymbolNotFoundError,
    UpstreamRateLimitError, UpstreamAuthError, EndpointsExhaustedError.
"""

import logging

from app.application.markets.dtos import PriceHistoryQuery
from app.application.markets.validation import require_param
from app.domain.markets.chart import compute_stats, normalize_series
from app.domain.markets.entities import PriceHistory
from app.domain.markets.errors import NoPriceDataError
from app.domain.markets.ports import PriceHistoryPort
from app.domain.markets.symbols import to_fmp_crypto_symbol

logger = logging.getLogger(__name__)

INTRADAY_SOURCE = "FMP Extended Intraday"
EOD_SOURCE = "FMP Extended EOD"


async def load_price_history(
    history_port: PriceHistoryPort,
    symbol: str,
    days: int,
    adaptive_precision: bool = False,
) -> PriceHistory:
    """Fetch raw bars for a provider symbol and turn them into a chart series.

    A one-day request uses intraday bars; anything longer uses end-of-day bars.

    Raises:
        NoPriceDataError: If upstream returned nothing, or nothing survived
            normalization.
    """
    is_intraday = days == 1
    if is_intraday:
        series = await history_port.fetch_intraday(symbol)
        source = INTRADAY_SOURCE
    else:
        series = await history_port.fetch_daily(symbol, days)
        source = EOD_SOURCE

    if not series.records:
        raise NoPriceDataError(symbol, days, "No price data available")

    logger.info("Retrieved %d raw data points from %s", len(series.records), source)
    points = normalize_series(series.records, days, is_intraday)
    if not points:
        raise NoPriceDataError(
            symbol,
            days,
            "No valid chart data after processing",
            raw_count=len(series.records),
        )

    stats = compute_stats(
        points,
        original_count=len(series.records),
        requested_days=days,
        is_intraday=is_intraday,
        cached=series.cached,
        source=source,
        symbol=symbol,
        adaptive_precision=adaptive_precision,
    )
    logger.info(
        "Processed %d chart points spanning %d days for %s",
        stats.count,
        stats.actual_days_range,
        symbol,
    )
    return PriceHistory(points=points, stats=stats)


class GetStockHistoryUseCase:
    """Builds the price chart for a stock ticker."""

    def __init__(self, history_port: PriceHistoryPort) -> None:
        self._history_port = history_port

    async def execute(self, query: PriceHistoryQuery) -> PriceHistory:
        """Run the stock history use case.

        Args:
            query: Ticker symbol (case-insensitive) and timeframe in days.

        Returns:
            Normalized points and stats, labelled with the upper-cased ticker.
        """
        symbol = require_param(query.symbol, "symbol", "Stock symbol is required").upper()
        logger.info("Fetching extended %d days of data for %s", query.days, symbol)
        return await load_price_history(self._history_port, symbol, query.days)


class GetCryptoHistoryUseCase:
    """Builds the price chart for a coin, priced through its USD pair."""

    def __init__(self, history_port: PriceHistoryPort) -> None:
        self._history_port = history_port

    async def execute(self, query: PriceHistoryQuery) -> PriceHistory:
        """Run the crypto history use case.

        The CoinGecko coin id is mapped to the provider's pair symbol
        (bitcoin -> BTCUSD). Sub-dollar stats keep six decimals.
        """
        coin_id = require_param(query.symbol, "id", "Crypto ID is required")
        pair = to_fmp_crypto_symbol(coin_id)
        logger.info("Fetching extended %d days of data for %s (%s)", query.days, coin_id, pair)
        return await load_price_history(
            self._history_port, pair, query.days, adaptive_precision=True
        )

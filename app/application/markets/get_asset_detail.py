"""
Use cases: Detail pages for a stock or a cryptocurrency.

Input: SymbolQuery
Output: StockDetail / CryptoDetail
Side effects: None.
Failure cases: MissingParameterError, SymbolNotFoundError, upstream errors
    from the required lookups.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional

from app.application.markets.dtos import SymbolQuery
from app.application.markets.validation import require_param
from app.domain.markets.entities import CryptoDetail, StockDetail
from app.domain.markets.errors import MarketDomainError, SymbolNotFoundError
from app.domain.markets.ports import CompanyDataPort, CryptoMarketPort

logger = logging.getLogger(__name__)


def _either(*values: Any) -> Any:
    """Return the first truthy value, else the last one."""
    for value in values[:-1]:
        if value:
            return value
    return values[-1]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


async def _optional_lookup(
    lookup: Callable[[str], Awaitable[Optional[dict]]], symbol: str, label: str
) -> dict:
    try:
        return await lookup(symbol) or {}
    except MarketDomainError as exc:
        logger.info("%s data not available for %s: %s", label, symbol, exc)
        return {}


class GetStockDetailUseCase:
    """Merges quote, company profile and key metrics into one detail record.

    The quote is required; profile and metrics only enrich it and their
    failures are tolerated.
    """

    def __init__(
        self,
        company_port: CompanyDataPort,
        now: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._company_port = company_port
        self._now = now

    async def execute(self, query: SymbolQuery) -> StockDetail:
        """Run the stock detail use case.

        Raises:
            SymbolNotFoundError: If the provider has no quote for the symbol.
        """
        symbol = require_param(query.symbol, "symbol", "Symbol is required").upper()
        logger.info("Fetching stock detail for %s", symbol)

        quote = await self._company_port.get_quote(symbol)
        if not quote:
            raise SymbolNotFoundError(symbol)

        profile = await _optional_lookup(self._company_port.get_profile, symbol, "Profile")
        metrics = await _optional_lookup(self._company_port.get_key_metrics, symbol, "Metrics")

        price = quote.get("price")
        employees = profile.get("fullTimeEmployees")
        is_etf = bool(quote.get("isEtfOrFund"))

        return StockDetail(
            symbol=quote.get("symbol") or symbol,
            name=_either(profile.get("companyName"), quote.get("name"), symbol),
            price=_either(price, 0),
            change_24h=_either(quote.get("changesPercentage"), 0),
            change=_either(quote.get("change"), 0),
            day_low=_either(quote.get("dayLow"), price),
            day_high=_either(quote.get("dayHigh"), price),
            year_low=_either(quote.get("yearLow"), price),
            year_high=_either(quote.get("yearHigh"), price),
            market_cap=_either(quote.get("marketCap"), profile.get("mktCap"), 0),
            volume=_either(quote.get("volume"), 0),
            avg_volume=_either(quote.get("avgVolume"), quote.get("volume")),
            pe=_either(quote.get("pe"), metrics.get("peRatio"), None),
            eps=_either(quote.get("eps"), metrics.get("netIncomePerShare"), None),
            shares_outstanding=_either(quote.get("sharesOutstanding"), 0),
            previous_close=_either(quote.get("previousClose"), price),
            open=_either(quote.get("open"), price),
            sector=_either(profile.get("sector"), "N/A"),
            industry=_either(profile.get("industry"), "N/A"),
            country=_either(profile.get("country"), "N/A"),
            website=profile.get("website") or None,
            description=profile.get("description") or None,
            ceo=profile.get("ceo") or None,
            employees=str(employees) if employees else None,
            exchange=_either(quote.get("exchange"), profile.get("exchangeShortName"), "NASDAQ"),
            currency=_either(profile.get("currency"), "USD"),
            last_update=self._now(),
            market_open=not is_etf,
            is_etf=is_etf,
            fifty_day_average=quote.get("priceAvg50") or None,
            two_hundred_day_average=quote.get("priceAvg200") or None,
            beta=profile.get("beta") or None,
            dividend_yield=metrics.get("dividendYield") or None,
            price_to_book=metrics.get("pbRatio") or None,
            price_to_sales=metrics.get("psRatio") or None,
            return_on_equity=metrics.get("roe") or None,
            return_on_assets=metrics.get("roa") or None,
            debt_to_equity=metrics.get("debtToEquity") or None,
        )


class GetCryptoDetailUseCase:
    """Resolves a coin ticker and returns its detailed market data."""

    def __init__(self, crypto_port: CryptoMarketPort) -> None:
        self._crypto_port = crypto_port

    async def execute(self, query: SymbolQuery) -> CryptoDetail:
        """Run the crypto detail use case.

        Raises:
            SymbolNotFoundError: If no top coin has this ticker.
        """
        symbol = require_param(query.symbol, "symbol", "Symbol is required")
        coin_id = await self._crypto_port.find_coin_id(symbol)
        if coin_id is None:
            raise SymbolNotFoundError(symbol, asset="Cryptocurrency")
        logger.info("Fetching crypto detail for %s (%s)", symbol, coin_id)
        return await self._crypto_port.get_coin_detail(coin_id)

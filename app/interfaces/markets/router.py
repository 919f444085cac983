"""
FastAPI router for market data: prices, details, indicators and search.

All routes delegate to use cases. No business logic here.
Required query parameters are declared optional so that a missing value
reaches the use case and maps to a 400 with the usual error body.
Error mapping is handled by centralized error handlers.
"""

import dataclasses
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.application.markets.dtos import PriceHistoryQuery, SearchQuery, SymbolQuery
from app.application.markets.get_asset_detail import (
    GetCryptoDetailUseCase,
    GetStockDetailUseCase,
)
from app.application.markets.get_market_overview import (
    GetEconomicIndicatorsUseCase,
    GetIndexQuotesUseCase,
    GetIntradaySeriesUseCase,
    GetTopCryptoUseCase,
)
from app.application.markets.get_price_history import (
    GetCryptoHistoryUseCase,
    GetStockHistoryUseCase,
)
from app.application.markets.search_assets import SearchAssetsUseCase
from app.domain.markets.entities import PriceHistory
from app.interfaces.markets.dependencies import (
    get_crypto_detail_use_case,
    get_crypto_history_use_case,
    get_economic_indicators_use_case,
    get_index_quotes_use_case,
    get_intraday_series_use_case,
    get_search_assets_use_case,
    get_stock_detail_use_case,
    get_stock_history_use_case,
    get_top_crypto_use_case,
)
from app.interfaces.markets.schemas import (
    ChartPointSchema,
    ChartStatsSchema,
    CryptoDetailSchema,
    CryptoQuoteSchema,
    DateRangeSchema,
    EconomicIndicatorSchema,
    ErrorResponse,
    IndexQuoteSchema,
    IntradayPointSchema,
    PriceHistoryResponse,
    SearchResponse,
    StockDetailSchema,
)

router = APIRouter(tags=["markets"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    429: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

DAYS_DESCRIPTION = "Timeframe in days; 1 returns intraday bars"


def _history_response(history: PriceHistory) -> PriceHistoryResponse:
    stats = dataclasses.asdict(history.stats)
    date_range = DateRangeSchema(from_=stats.pop("date_from"), to=stats.pop("date_to"))
    return PriceHistoryResponse(
        data=[ChartPointSchema.model_validate(point) for point in history.points],
        stats=ChartStatsSchema(**stats, date_range=date_range),
    )


# ------------------------------------------------------------------
# Snapshots
# ------------------------------------------------------------------


@router.get(
    "/markets/stocks",
    response_model=list[IndexQuoteSchema],
    responses=ERROR_RESPONSES,
    summary="Index ETF quotes",
    description="Latest quotes for SPY, QQQ, DIA and IWM.",
)
async def get_index_quotes(
    use_case: GetIndexQuotesUseCase = Depends(get_index_quotes_use_case),
) -> list[IndexQuoteSchema]:
    quotes = await use_case.execute()
    return [IndexQuoteSchema.model_validate(quote) for quote in quotes]


@router.get(
    "/markets/crypto",
    response_model=list[CryptoQuoteSchema],
    responses=ERROR_RESPONSES,
    summary="Top cryptocurrencies",
    description="The four largest coins by market capitalization.",
)
async def get_top_crypto(
    use_case: GetTopCryptoUseCase = Depends(get_top_crypto_use_case),
) -> list[CryptoQuoteSchema]:
    coins = await use_case.execute()
    return [CryptoQuoteSchema.model_validate(coin) for coin in coins]


@router.get(
    "/markets/historical",
    response_model=list[IntradayPointSchema],
    responses=ERROR_RESPONSES,
    summary="One-minute bars",
    description="The last 50 one-minute bars of a symbol, oldest first.",
)
async def get_intraday_series(
    symbol: Optional[str] = Query(None, description="Ticker symbol (default AAPL)"),
    use_case: GetIntradaySeriesUseCase = Depends(get_intraday_series_use_case),
) -> list[IntradayPointSchema]:
    points = await use_case.execute(SymbolQuery(symbol=symbol))
    return [IntradayPointSchema.model_validate(point) for point in points]


@router.get(
    "/economic/indicators",
    response_model=list[EconomicIndicatorSchema],
    responses=ERROR_RESPONSES,
    summary="Economic indicators",
    description="Latest unemployment, CPI, GDP and federal funds rate.",
)
async def get_economic_indicators(
    use_case: GetEconomicIndicatorsUseCase = Depends(get_economic_indicators_use_case),
) -> list[EconomicIndicatorSchema]:
    indicators = await use_case.execute()
    return [EconomicIndicatorSchema.model_validate(item) for item in indicators]


# ------------------------------------------------------------------
# Stocks
# ------------------------------------------------------------------


@router.get(
    "/markets/stocks/detail",
    response_model=StockDetailSchema,
    responses=ERROR_RESPONSES,
    summary="Stock detail",
    description="Quote, company profile and key metrics of a stock.",
)
async def get_stock_detail(
    symbol: Optional[str] = Query(None, description="Stock ticker symbol"),
    use_case: GetStockDetailUseCase = Depends(get_stock_detail_use_case),
) -> StockDetailSchema:
    detail = await use_case.execute(SymbolQuery(symbol=symbol))
    return StockDetailSchema.model_validate(detail)


@router.get(
    "/markets/stocks/history",
    response_model=PriceHistoryResponse,
    responses=ERROR_RESPONSES,
    summary="Stock price history",
    description="Chart-ready price history with summary statistics.",
)
async def get_stock_history(
    symbol: Optional[str] = Query(None, description="Stock ticker symbol"),
    days: int = Query(7, ge=1, description=DAYS_DESCRIPTION),
    use_case: GetStockHistoryUseCase = Depends(get_stock_history_use_case),
) -> PriceHistoryResponse:
    """Return the charted history of a stock."""
    history = await use_case.execute(PriceHistoryQuery(symbol=symbol, days=days))
    return _history_response(history)


# ------------------------------------------------------------------
# Crypto
# ------------------------------------------------------------------


@router.get(
    "/markets/crypto/detail",
    response_model=CryptoDetailSchema,
    responses=ERROR_RESPONSES,
    summary="Cryptocurrency detail",
    description="Detailed market data of a coin, looked up by ticker.",
)
async def get_crypto_detail(
    symbol: Optional[str] = Query(None, description="Coin ticker, e.g. BTC"),
    use_case: GetCryptoDetailUseCase = Depends(get_crypto_detail_use_case),
) -> CryptoDetailSchema:
    detail = await use_case.execute(SymbolQuery(symbol=symbol))
    return CryptoDetailSchema.model_validate(detail)


@router.get(
    "/markets/crypto/history",
    response_model=PriceHistoryResponse,
    responses=ERROR_RESPONSES,
    summary="Cryptocurrency price history",
    description="Chart-ready USD price history of a coin.",
)
async def get_crypto_history(
    id: Optional[str] = Query(None, description="CoinGecko coin id, e.g. bitcoin"),
    days: int = Query(7, ge=1, description=DAYS_DESCRIPTION),
    use_case: GetCryptoHistoryUseCase = Depends(get_crypto_history_use_case),
) -> PriceHistoryResponse:
    """Return the charted history of a coin."""
    history = await use_case.execute(PriceHistoryQuery(symbol=id, days=days))
    return _history_response(history)


# ------------------------------------------------------------------
# Search
# ------------------------------------------------------------------


@router.get(
    "/search",
    response_model=SearchResponse,
    summary="Search assets",
    description="Search stocks and cryptocurrencies by name or ticker.",
)
async def search_assets(
    q: Optional[str] = Query(None, description="Search text (2+ characters)"),
    type: Optional[str] = Query(None, pattern="^(stocks|crypto|all)$"),
    use_case: SearchAssetsUseCase = Depends(get_search_assets_use_case),
) -> SearchResponse:
    results = await use_case.execute(SearchQuery(query=q, asset_type=type))
    return SearchResponse.model_validate(results)

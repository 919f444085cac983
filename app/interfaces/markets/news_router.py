"""
FastAPI router for news and stored articles.

All routes delegate to use cases. No business logic here.
Article store reads are plain `def` routes and run in the threadpool.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from app.application.markets.dtos import ScrapeArticleCommand, SymbolQuery
from app.application.markets.get_articles import (
    GetArticleUseCase,
    GetRecentArticlesUseCase,
    GetRelatedArticlesUseCase,
    SearchArticlesUseCase,
)
from app.application.markets.get_news import (
    GetCryptoNewsUseCase,
    GetHeadlinesUseCase,
    GetStockNewsUseCase,
)
from app.application.markets.scrape_article import ScrapeArticleUseCase
from app.core.config import settings
from app.interfaces.markets.dependencies import (
    get_article_use_case,
    get_crypto_news_use_case,
    get_headlines_use_case,
    get_recent_articles_use_case,
    get_related_articles_use_case,
    get_scrape_article_use_case,
    get_search_articles_use_case,
    get_stock_news_use_case,
)
from app.interfaces.markets.schemas import (
    ArticleSchema,
    ErrorResponse,
    HeadlineSchema,
    NewsItemSchema,
    ScrapeArticleRequest,
    ScrapeArticleResponse,
    ScrapedArticleSchema,
)
from app.shared.security.rate_limiting import limiter

router = APIRouter(tags=["news"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


# ------------------------------------------------------------------
# News
# ------------------------------------------------------------------


@router.get(
    "/news",
    response_model=list[HeadlineSchema],
    responses=ERROR_RESPONSES,
    summary="Top headlines",
    description="Top headlines of a category, saved for their article pages.",
)
async def get_headlines(
    category: str = Query("business", description="NewsAPI category"),
    use_case: GetHeadlinesUseCase = Depends(get_headlines_use_case),
) -> list[HeadlineSchema]:
    headlines = await use_case.execute(category)
    return [HeadlineSchema.model_validate(item) for item in headlines]


@router.get(
    "/news/stock",
    response_model=list[NewsItemSchema],
    responses=ERROR_RESPONSES,
    summary="Stock news",
)
async def get_stock_news(
    symbol: Optional[str] = Query(None, description="Index ETF or stock ticker"),
    use_case: GetStockNewsUseCase = Depends(get_stock_news_use_case),
) -> list[NewsItemSchema]:
    items = await use_case.execute(SymbolQuery(symbol=symbol))
    return [NewsItemSchema.model_validate(item) for item in items]


@router.get(
    "/news/crypto",
    response_model=list[NewsItemSchema],
    responses=ERROR_RESPONSES,
    summary="Crypto news",
)
async def get_crypto_news(
    symbol: Optional[str] = Query(None, description="Coin ticker, e.g. BTC"),
    use_case: GetCryptoNewsUseCase = Depends(get_crypto_news_use_case),
) -> list[NewsItemSchema]:
    items = await use_case.execute(SymbolQuery(symbol=symbol))
    return [NewsItemSchema.model_validate(item) for item in items]


@router.post(
    "/scrape-article",
    response_model=ScrapeArticleResponse,
    responses=ERROR_RESPONSES,
    summary="Fetch full article text",
    description=(
        "Scrapes the source page of a stored article unless its full text is "
        "already stored. Scraping failures return the stored article."
    ),
)
@limiter.limit(settings.rate_limit_heavy)
async def scrape_article(
    request: Request,
    body: ScrapeArticleRequest,
    use_case: ScrapeArticleUseCase = Depends(get_scrape_article_use_case),
) -> ScrapeArticleResponse:
    """Complete a stored article with its scraped full text."""
    result = await use_case.execute(ScrapeArticleCommand(slug=body.slug))
    article = ArticleSchema.model_validate(result.article).model_dump()
    return ScrapeArticleResponse(
        article=ScrapedArticleSchema(
            **article, scraped=result.scraped, scrape_error=result.scrape_error
        )
    )


# ------------------------------------------------------------------
# Stored articles
# ------------------------------------------------------------------


@router.get(
    "/articles",
    response_model=list[ArticleSchema],
    summary="Latest articles",
)
def get_recent_articles(
    limit: int = Query(10, ge=1, le=100),
    use_case: GetRecentArticlesUseCase = Depends(get_recent_articles_use_case),
) -> list[ArticleSchema]:
    return [ArticleSchema.model_validate(a) for a in use_case.execute(limit)]


@router.get(
    "/articles/search",
    response_model=list[ArticleSchema],
    responses=ERROR_RESPONSES,
    summary="Search articles",
)
def search_articles(
    q: Optional[str] = Query(None, description="Text to find in title or description"),
    limit: int = Query(20, ge=1, le=100),
    use_case: SearchArticlesUseCase = Depends(get_search_articles_use_case),
) -> list[ArticleSchema]:
    return [ArticleSchema.model_validate(a) for a in use_case.execute(q, limit)]


@router.get(
    "/articles/{slug}",
    response_model=ArticleSchema,
    responses=ERROR_RESPONSES,
    summary="Article by slug",
)
def get_article(
    slug: str,
    use_case: GetArticleUseCase = Depends(get_article_use_case),
) -> ArticleSchema:
    return ArticleSchema.model_validate(use_case.execute(slug))


@router.get(
    "/articles/{slug}/related",
    response_model=list[ArticleSchema],
    responses=ERROR_RESPONSES,
    summary="Related articles",
)
def get_related_articles(
    slug: str,
    limit: int = Query(4, ge=1, le=20),
    use_case: GetRelatedArticlesUseCase = Depends(get_related_articles_use_case),
) -> list[ArticleSchema]:
    return [ArticleSchema.model_validate(a) for a in use_case.execute(slug, limit)]

"""
Use cases: Market news.

Top headlines are saved to the article store so each one gets a stable
slug for its article page. Stock and crypto news are searched on curated
domains and filtered for quality.
Failure cases: MissingParameterError, upstream errors from the news provider.
"""

import asyncio
import logging
import uuid
from typing import Callable

from app.application.markets.dtos import StoredHeadline, SymbolQuery
from app.application.markets.validation import require_param
from app.domain.markets.articles import generate_slug
from app.domain.markets.chart import parse_record_date
from app.domain.markets.entities import Article, NewsItem
from app.domain.markets.errors import ArticleStoreError
from app.domain.markets.ports import ArticleRepository, NewsPort
from app.domain.markets.symbols import (
    CRYPTO_KEYWORDS,
    CRYPTO_NEWS_DOMAINS,
    STOCK_NEWS_DOMAINS,
    crypto_news_query,
    stock_news_query,
)

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "business"
STOCK_NEWS_PAGE_SIZE = 10
CRYPTO_NEWS_PAGE_SIZE = 15
REMOVED_MARKER = "[Removed]"


def _new_id() -> str:
    return str(uuid.uuid4())


def is_presentable(item: NewsItem) -> bool:
    """True for items with a title and description that were not taken down."""
    if not item.title or not item.description:
        return False
    return REMOVED_MARKER not in item.title and REMOVED_MARKER not in item.description


def mentions_crypto(item: NewsItem, symbol: str) -> bool:
    """True when the title or description looks crypto-related."""
    text = f"{item.title} {item.description or ''}".lower()
    keywords = (*CRYPTO_KEYWORDS, symbol.lower())
    return any(keyword in text for keyword in keywords)


class GetHeadlinesUseCase:
    """Fetches top headlines and upserts them into the article store by URL."""

    def __init__(
        self,
        news_port: NewsPort,
        repository: ArticleRepository,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._news_port = news_port
        self._repository = repository
        self._id_factory = id_factory

    def _store(self, item: NewsItem, category: str) -> Article:
        existing = self._repository.get_by_url(item.url)
        if existing is not None:
            return existing
        return self._repository.add(
            Article(
                id=self._id_factory(),
                title=item.title,
                url=item.url,
                slug=generate_slug(item.title),
                source=item.source,
                description=item.description,
                content=item.content or item.description or "",
                published_at=parse_record_date(item.published_at),
                image_url=item.image_url,
                category=category,
            )
        )

    async def execute(self, category: str = DEFAULT_CATEGORY) -> list[StoredHeadline]:
        """Run the headlines use case.

        The article store is synchronous, so storage runs in a worker thread.

        Args:
            category: NewsAPI category, "business" by default.

        Returns:
            Headlines in provider order. Items without title or URL, and
            items that could not be stored, are skipped.
        """
        category = (category or "").strip() or DEFAULT_CATEGORY
        items = await self._news_port.top_headlines(category)
        headlines = await asyncio.to_thread(self._store_headlines, items, category)
        logger.info("Stored %d of %d %s headlines", len(headlines), len(items), category)
        return headlines

    def _store_headlines(self, items: list[NewsItem], category: str) -> list[StoredHeadline]:
        headlines = []
        for item in items:
            if not item.title or not item.url:
                continue
            try:
                stored = self._store(item, category)
            except ArticleStoreError as exc:
                logger.error("Error inserting article %s: %s", item.url, exc)
                continue
            headlines.append(
                StoredHeadline(
                    id=stored.id,
                    title=item.title,
                    description=item.description,
                    url=item.url,
                    source=item.source,
                    published_at=parse_record_date(item.published_at),
                    image_url=item.image_url,
                    category=category,
                    slug=stored.slug,
                )
            )
        return headlines


class GetStockNewsUseCase:
    """Searches financial news sites for an index ETF or ticker."""

    def __init__(self, news_port: NewsPort) -> None:
        self._news_port = news_port

    async def execute(self, query: SymbolQuery) -> list[NewsItem]:
        symbol = require_param(query.symbol, "symbol", "Symbol is required")
        items = await self._news_port.search(
            stock_news_query(symbol), STOCK_NEWS_DOMAINS, STOCK_NEWS_PAGE_SIZE
        )
        return [item for item in items if is_presentable(item)]


class GetCryptoNewsUseCase:
    """Searches crypto news sites for a coin ticker."""

    def __init__(self, news_port: NewsPort) -> None:
        self._news_port = news_port

    async def execute(self, query: SymbolQuery) -> list[NewsItem]:
        """Run the crypto news use case.

        Besides the quality filter, items must mention crypto, bitcoin,
        blockchain or the ticker itself.
        """
        symbol = require_param(query.symbol, "symbol", "Symbol is required")
        items = await self._news_port.search(
            crypto_news_query(symbol), CRYPTO_NEWS_DOMAINS, CRYPTO_NEWS_PAGE_SIZE
        )
        return [
            item for item in items if is_presentable(item) and mentions_crypto(item, symbol)
        ]

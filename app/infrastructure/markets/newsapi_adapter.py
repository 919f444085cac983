"""
Adapter: NewsAPI.

Implements NewsPort.
"""

import logging
from typing import Any

import httpx

from app.domain.markets.entities import NewsItem
from app.domain.markets.ports import NewsPort
from app.infrastructure.markets.upstream import get_json, require_api_key, upstream_errors

logger = logging.getLogger(__name__)

PROVIDER = "NewsAPI"
DEFAULT_BASE_URL = "https://newsapi.org/v2"
HEADLINES_PAGE_SIZE = 20


def _to_news_item(article: dict) -> NewsItem:
    source = article.get("source")
    return NewsItem(
        title=article.get("title") or "",
        description=article.get("description"),
        url=article.get("url") or "",
        source=(source.get("name") if isinstance(source, dict) else None) or "Unknown",
        published_at=article.get("publishedAt") or "",
        image_url=article.get("urlToImage"),
        content=article.get("content"),
    )


class NewsApiAdapter(NewsPort):
    """Concrete adapter for NewsAPI headlines and search."""

    def __init__(
        self, client: httpx.AsyncClient, api_key: str, base_url: str = DEFAULT_BASE_URL
    ) -> None:
        self._client = client
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    async def _articles(self, path: str, params: dict[str, Any]) -> list[NewsItem]:
        params = {**params, "apiKey": require_api_key(PROVIDER, self._api_key)}
        with upstream_errors(PROVIDER):
            payload = await get_json(self._client, f"{self._base_url}/{path}", params)
        articles = payload.get("articles") if isinstance(payload, dict) else None
        items = [_to_news_item(a) for a in articles or [] if isinstance(a, dict)]
        logger.debug("NewsAPI %s returned %d articles", path, len(items))
        return items

    async def top_headlines(self, category: str) -> list[NewsItem]:
        return await self._articles(
            "top-headlines",
            {"category": category, "language": "en", "pageSize": HEADLINES_PAGE_SIZE},
        )

    async def search(self, query: str, domains: str, page_size: int) -> list[NewsItem]:
        return await self._articles(
            "everything",
            {
                "q": query,
                "language": "en",
                "sortBy": "publishedAt",
                "pageSize": page_size,
                "domains": domains,
            },
        )

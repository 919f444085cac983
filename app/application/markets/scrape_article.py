"""
Use case: Complete a stored article with its full text.

Input: ScrapeArticleCommand (slug)
Output: ScrapeArticleResult
Side effects: Fetches the source page and updates the article store.
Failure cases: MissingParameterError, ArticleNotFoundError.
    Scraping failures are reported on the result, not raised.
"""

import asyncio
import dataclasses
import logging
from datetime import datetime, timezone
from typing import Callable

from app.application.markets.dtos import ScrapeArticleCommand, ScrapeArticleResult
from app.application.markets.validation import require_param
from app.domain.markets.articles import MIN_SCRAPED_CONTENT_LENGTH, has_full_content
from app.domain.markets.entities import Article
from app.domain.markets.errors import ArticleNotFoundError, ArticleStoreError, ScrapeError
from app.domain.markets.ports import ArticleRepository, ArticleScraperPort

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ScrapeArticleUseCase:
    """Scrapes an article page unless the stored copy is already complete."""

    def __init__(
        self,
        repository: ArticleRepository,
        scraper: ArticleScraperPort,
        now: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._repository = repository
        self._scraper = scraper
        self._now = now

    async def execute(self, command: ScrapeArticleCommand) -> ScrapeArticleResult:
        """Run the scrape use case.

        Args:
            command: Slug of a stored article.

        Returns:
            The merged article and whether it was scraped in this call.

        Raises:
            ArticleNotFoundError: If no article has this slug.
        """
        slug = require_param(command.slug, "slug", "Slug is required")
        article = await asyncio.to_thread(self._repository.get_by_slug, slug)
        if article is None:
            raise ArticleNotFoundError(slug)

        if has_full_content(article):
            return ScrapeArticleResult(article=article, scraped=False)

        logger.info("Scraping article: %s", article.url)
        try:
            scraped = await self._scraper.scrape(article.url)
            if len(scraped.content) < MIN_SCRAPED_CONTENT_LENGTH:
                raise ScrapeError(article.url, "Insufficient content scraped - content too short")
        except ScrapeError as exc:
            logger.warning("Scraping failed for %s: %s", slug, exc)
            return ScrapeArticleResult(article=article, scraped=False, scrape_error=str(exc))

        updated = self._merge(
            article, scraped.content, scraped.author, scraped.html_content, scraped.images
        )
        try:
            await asyncio.to_thread(
                self._repository.save_scraped_content,
                slug,
                content=updated.content or "",
                author=updated.author,
                html_content=scraped.html_content or None,
                content_images=list(scraped.images),
                scraped_at=updated.scraped_at or self._now(),
            )
        except ArticleStoreError as exc:
            logger.error("Error updating article %s: %s", slug, exc)

        return ScrapeArticleResult(article=updated, scraped=True)

    def _merge(
        self,
        article: Article,
        content: str,
        author: str | None,
        html_content: str,
        images: list[str],
    ) -> Article:
        changes: dict = {
            "content": content,
            "author": author or article.author,
            "scraped_at": self._now(),
            "full_content_available": True,
        }
        if html_content:
            changes["html_content"] = html_content
        if images:
            changes["content_images"] = list(images)
        return dataclasses.replace(article, **changes)

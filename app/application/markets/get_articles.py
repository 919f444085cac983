"""
Use cases: Read stored articles.

Article page, related articles, latest articles and article search.
Side effects: None.
Failure cases: ArticleNotFoundError, MissingParameterError.
"""

import logging

from app.application.markets.validation import require_param
from app.domain.markets.entities import Article
from app.domain.markets.errors import ArticleNotFoundError
from app.domain.markets.ports import ArticleRepository

logger = logging.getLogger(__name__)


class GetArticleUseCase:
    """Loads one article by slug."""

    def __init__(self, repository: ArticleRepository) -> None:
        self._repository = repository

    def execute(self, slug: str) -> Article:
        article = self._repository.get_by_slug(slug)
        if article is None:
            raise ArticleNotFoundError(slug)
        return article


class GetRelatedArticlesUseCase:
    """Lists other recent articles from the same category."""

    def __init__(self, repository: ArticleRepository) -> None:
        self._repository = repository

    def execute(self, slug: str, limit: int = 4) -> list[Article]:
        """Run the related articles use case.

        Raises:
            ArticleNotFoundError: If the reference article does not exist.
        """
        article = self._repository.get_by_slug(slug)
        if article is None:
            raise ArticleNotFoundError(slug)
        if not article.category:
            return []
        return self._repository.get_related(article.category, article.id, limit)


class GetRecentArticlesUseCase:
    """Lists the latest published articles."""

    def __init__(self, repository: ArticleRepository) -> None:
        self._repository = repository

    def execute(self, limit: int = 10) -> list[Article]:
        return self._repository.get_recent(limit)


class SearchArticlesUseCase:
    """Finds articles whose title or description contains a phrase."""

    def __init__(self, repository: ArticleRepository) -> None:
        self._repository = repository

    def execute(self, query: str | None, limit: int = 20) -> list[Article]:
        text = require_param(query, "q", "Search query is required")
        results = self._repository.search(text, limit)
        logger.debug("Article search %r matched %d", text, len(results))
        return results

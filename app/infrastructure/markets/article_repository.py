"""
Adapter: Article repository.

Implements ArticleRepository port.
Persists news articles and their scraped full content in the `articles` table.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import insert, or_, select, update
from sqlalchemy.engine import Engine, RowMapping
from sqlalchemy.exc import SQLAlchemyError

from app.domain.markets.entities import Article
from app.domain.markets.errors import ArticleStoreError
from app.domain.markets.ports import ArticleRepository
from app.infrastructure.markets.database import articles

logger = logging.getLogger(__name__)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _to_article(row: RowMapping) -> Article:
    return Article(
        id=row["id"],
        title=row["title"],
        url=row["url"],
        slug=row["slug"],
        source=row["source"] or "Unknown",
        description=row["description"],
        content=row["content"],
        published_at=row["published_at"],
        image_url=row["image_url"],
        category=row["category"],
        author=row["author"],
        html_content=row["html_content"],
        content_images=list(row["content_images"] or []),
        full_content_available=bool(row["full_content_available"]),
        scraped_at=row["scraped_at"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class ArticleRepositoryAdapter(ArticleRepository):
    """Reads and writes articles through SQLAlchemy Core.

    Implements the ArticleRepository port defined in the domain layer.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def _fetch_one(self, column: Any, value: str) -> Optional[Article]:
        query = select(articles).where(column == value)
        with self._engine.connect() as conn:
            row = conn.execute(query).mappings().first()
        return _to_article(row) if row else None

    def _fetch_many(self, query: Any) -> list[Article]:
        with self._engine.connect() as conn:
            rows = conn.execute(query).mappings().all()
        return [_to_article(row) for row in rows]

    def get_by_slug(self, slug: str) -> Optional[Article]:
        return self._fetch_one(articles.c.slug, slug)

    def get_by_url(self, url: str) -> Optional[Article]:
        return self._fetch_one(articles.c.url, url)

    def add(self, article: Article) -> Article:
        """Insert a new article, stamping created_at/updated_at.

        Raises:
            ArticleStoreError: On constraint violations or database errors.
        """
        now = datetime.now(timezone.utc)
        values = {
            "id": article.id,
            "title": article.title,
            "description": article.description,
            "content": article.content,
            "url": article.url,
            "source": article.source,
            "published_at": article.published_at,
            "image_url": article.image_url,
            "category": article.category,
            "slug": article.slug,
            "author": article.author,
            "html_content": article.html_content,
            "content_images": list(article.content_images),
            "full_content_available": article.full_content_available,
            "scraped_at": article.scraped_at,
            "created_at": now,
            "updated_at": now,
        }
        try:
            with self._engine.begin() as conn:
                conn.execute(insert(articles).values(**values))
        except SQLAlchemyError as exc:
            logger.error("Failed to insert article %s: %s", article.slug, type(exc).__name__)
            raise ArticleStoreError(f"Could not insert article {article.slug}") from exc

        stored = self.get_by_slug(article.slug)
        return stored if stored is not None else article

    def save_scraped_content(
        self,
        slug: str,
        content: str,
        author: Optional[str],
        html_content: Optional[str],
        content_images: list[str],
        scraped_at: datetime,
    ) -> None:
        """Store scraped content and mark the article as complete.

        Empty html_content or images leave the stored values untouched.
        """
        values: dict[str, Any] = {
            "content": content,
            "author": author,
            "scraped_at": scraped_at,
            "full_content_available": True,
            "updated_at": datetime.now(timezone.utc),
        }
        if html_content:
            values["html_content"] = html_content
        if content_images:
            values["content_images"] = list(content_images)

        try:
            with self._engine.begin() as conn:
                conn.execute(update(articles).where(articles.c.slug == slug).values(**values))
        except SQLAlchemyError as exc:
            logger.error("Failed to update article %s: %s", slug, type(exc).__name__)
            raise ArticleStoreError(f"Could not update article {slug}") from exc

    def get_related(self, category: str, exclude_id: str, limit: int = 4) -> list[Article]:
        query = (
            select(articles)
            .where(articles.c.category == category, articles.c.id != exclude_id)
            .order_by(articles.c.published_at.desc())
            .limit(limit)
        )
        return self._fetch_many(query)

    def get_recent(self, limit: int = 10) -> list[Article]:
        query = select(articles).order_by(articles.c.published_at.desc()).limit(limit)
        return self._fetch_many(query)

    def search(self, query: str, limit: int = 20) -> list[Article]:
        pattern = f"%{_escape_like(query)}%"
        statement = (
            select(articles)
            .where(
                or_(
                    articles.c.title.ilike(pattern, escape="\\"),
                    articles.c.description.ilike(pattern, escape="\\"),
                )
            )
            .order_by(articles.c.published_at.desc())
            .limit(limit)
        )
        return self._fetch_many(statement)

"""
Database engine and schema for the article store.

SQLite is the default backend; any SQLAlchemy URL works.
"""

import logging

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
)
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

metadata = MetaData()

articles = Table(
    "articles",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("title", Text, nullable=False),
    Column("description", Text),
    Column("content", Text),
    Column("url", Text, nullable=False, unique=True),
    Column("source", Text),
    Column("published_at", DateTime(timezone=True)),
    Column("image_url", Text),
    Column("category", String(64), index=True),
    Column("slug", String(128), nullable=False, unique=True),
    Column("author", Text),
    Column("html_content", Text),
    Column("content_images", JSON),
    Column("full_content_available", Boolean, nullable=False, default=False),
    Column("scraped_at", DateTime(timezone=True)),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)


def build_engine(database_url: str) -> Engine:
    """Build a SQLAlchemy engine from a database URL.

    In-memory SQLite URLs share one connection so every session sees the
    same database.
    """
    if database_url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url, pool_pre_ping=True)


def create_schema(engine: Engine) -> None:
    """Create the article tables if they do not exist."""
    metadata.create_all(engine)
    logger.info("Article store schema ready.")

"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers (markets, news, health)
- Error handlers (centralized domain-to-HTTP mapping)
- Security middleware (headers, rate limiting)
- Logging configuration
- Process-wide resources (HTTP client, FMP fetch cache, article store)

No business logic belongs here.
"""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.core.config import settings
from app.infrastructure.markets.article_scraper import MAX_REDIRECTS
from app.infrastructure.markets.database import build_engine, create_schema
from app.infrastructure.markets.fetch_cache import FetchCache
from app.infrastructure.markets.fmp_adapter import PROVIDER as FMP_PROVIDER
from app.interfaces.health import router as health_router
from app.interfaces.markets.news_router import router as news_router
from app.interfaces.markets.router import router as markets_router
from app.shared.errors.handlers import register_error_handlers
from app.shared.logging import configure_logging
from app.shared.security.headers import SecurityHeadersMiddleware
from app.shared.security.rate_limiting import limiter, rate_limit_exceeded_handler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: open and close process-wide resources.

    The FMP fetch cache lives as long as the process, so its cached
    responses and request spacing are shared by every request.
    """
    client = httpx.AsyncClient(
        timeout=settings.http_timeout_seconds, max_redirects=MAX_REDIRECTS
    )
    engine = build_engine(settings.database_url)
    create_schema(engine)

    app.state.http_client = client
    app.state.db_engine = engine
    app.state.fmp_cache = FetchCache(
        client,
        provider=FMP_PROVIDER,
        cache_duration=settings.cache_duration_seconds,
        min_request_interval=settings.min_request_interval_seconds,
        retry_delay=settings.rate_limit_retry_delay_seconds,
    )
    logger.info("%s %s started", settings.project_name, settings.version)

    yield

    await client.aclose()
    engine.dispose()
    logger.info("%s stopped", settings.project_name)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and security middleware.
    This is the composition root of the application.

    Returns:
        A fully configured FastAPI application instance.
    """
    configure_logging(level=settings.log_level)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # --- Rate Limiting ---
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # --- Security Middleware ---
    app.add_middleware(SecurityHeadersMiddleware)

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(markets_router, prefix="/api/v1")
    app.include_router(news_router, prefix="/api/v1")

    return app


app = create_app()

"""
Health check router.

Provides a simple health endpoint for liveness/readiness probes.
Reports the application version and which upstream providers have an
API key configured. Never returns the keys themselves.
"""

from fastapi import APIRouter

from app.core.config import settings
from app.interfaces.markets.schemas import HealthResponse

router = APIRouter(tags=["health"])


def _configured_providers() -> dict[str, bool]:
    return {
        "fmp": bool(settings.fmp_api_key),
        "finnhub": bool(settings.finnhub_api_key),
        "newsapi": bool(settings.news_api_key),
        "fred": bool(settings.fred_api_key),
        "twelvedata": bool(settings.twelve_api_key),
    }


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns application health status, version and provider setup.",
)
def health_check() -> HealthResponse:
    """Return current application health status."""
    return HealthResponse(
        status="ok", version=settings.version, providers=_configured_providers()
    )

"""
Basic application tests.

Validates that the FastAPI app starts correctly, opens its process-wide
resources and the health endpoint responds as expected.
"""

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, inspect

from app.infrastructure.markets.fetch_cache import FetchCache
from app.main import app


class TestHealthEndpoint:
    """Tests for the health check endpoint."""

    def test_health_returns_200(self) -> None:
        """Health endpoint must return HTTP 200 with status ok."""
        with TestClient(app) as client:
            response = client.get("/api/v1/health")
        assert response.status_code == 200

    def test_health_response_body(self) -> None:
        """Health endpoint must return status, version and provider setup."""
        with TestClient(app) as client:
            body = client.get("/api/v1/health").json()

        assert body["status"] == "ok"
        assert "version" in body
        assert body["providers"] == {
            "fmp": True,
            "finnhub": True,
            "newsapi": True,
            "fred": True,
            "twelvedata": True,
        }

    def test_health_never_returns_keys(self) -> None:
        with TestClient(app) as client:
            response = client.get("/api/v1/health")
        assert "test-fmp-key" not in response.text


class TestLifespan:
    """Tests for resources opened at startup."""

    def test_shared_fetch_cache_is_created(self) -> None:
        """A single FMP fetch cache lives on the application state."""
        with TestClient(app):
            cache = app.state.fmp_cache
            assert isinstance(cache, FetchCache)
            assert cache.provider == "FMP"
            assert app.state.http_client is not None


class TestCommandLine:
    """Tests for the `python -m app` entry point."""

    def test_init_db_creates_article_table(self, tmp_path, monkeypatch) -> None:
        from app.__main__ import main
        from app.core.config import settings

        url = f"sqlite:///{tmp_path / 'articles.db'}"
        monkeypatch.setattr(settings, "database_url", url)

        main(["init-db"])

        engine = create_engine(url)
        try:
            assert "articles" in inspect(engine).get_table_names()
        finally:
            engine.dispose()

"""
Finboard: market dashboard backend.

Application package root. A modular monolith using hexagonal
architecture (ports & adapters).

Bounded contexts:
    - markets: Stock and crypto prices, economic indicators, search, news.

Layers:
    - domain: Chart normalization, fallback chains, entities, ports (ABCs), errors.
    - application: Use cases, DTOs, orchestration.
    - infrastructure: Provider adapters, fetch cache, article store and scraper.
    - interfaces: FastAPI routers, Pydantic schemas.
    - shared: Cross-cutting concerns (errors, security, logging).
"""

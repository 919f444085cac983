"""
Infrastructure layer package.

Concrete adapters for the ports defined in the domain layer: market data
providers, the FMP fetch cache, the article store and the article scraper.
"""

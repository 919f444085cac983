"""
Markets bounded context: domain layer.

This module contains all domain logic for the markets context:
- Price history normalization and endpoint fallback
- Market snapshots for stocks, crypto and macro indicators
- News articles and their full-content lifecycle
"""

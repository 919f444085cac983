"""
Application layer for the markets bounded context.

Use cases coordinate domain rules and ports to serve market data,
economic indicators, search and news. No framework or infrastructure
imports allowed.
"""

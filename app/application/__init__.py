"""
Application layer package.

Use cases for the markets context: price history, asset detail, market
overview, search, news and the article store. Each use case is a class
with one public `execute` method and depends only on domain ports.
"""

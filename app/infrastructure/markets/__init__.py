"""
Markets bounded context: infrastructure adapters.

Every outbound HTTP call goes through one shared httpx.AsyncClient; FMP
calls additionally go through the FetchCache.
"""

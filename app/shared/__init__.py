"""
Shared module package.

Cross-cutting concerns used by every router: domain error mapping,
security headers, inbound rate limiting and logging configuration.
"""

"""
Domain layer package.

Pure business logic: entities, chart normalization, fallback chains,
article rules and port interfaces.
No framework imports, no IO, no side effects.
"""

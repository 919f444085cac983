"""
Interfaces layer package.

FastAPI routers and Pydantic response schemas. Routes call use cases and
return responses; no business logic belongs here.
"""

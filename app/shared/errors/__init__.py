"""
Shared error handling package.

Translates markets domain errors and request validation failures into
`{error, details?}` JSON responses.
"""

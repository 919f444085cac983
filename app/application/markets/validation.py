"""Input checks shared by the markets use cases."""

from typing import Optional

from app.domain.markets.errors import MissingParameterError


def require_param(value: Optional[str], name: str, message: Optional[str] = None) -> str:
    """Return the stripped value or raise MissingParameterError if blank."""
    if value is None or not value.strip():
        raise MissingParameterError(name, message)
    return value.strip()

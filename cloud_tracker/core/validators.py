"""Field validators shared by request schemas."""

from typing import Any, Optional
from urllib.parse import urlparse


def blank_to_none(value: Any) -> Any:
    """Form inputs send "" for cleared optional fields; store those as NULL."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def check_url(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Must be a valid URL")
    return value

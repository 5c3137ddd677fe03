"""
Common utility functions used across services and routes.
"""

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the form stored in DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def iso_format(dt: datetime) -> str:
    """Format datetime as ISO string with Z suffix."""
    return dt.isoformat() + "Z"


def is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def trim_to_length(value: Optional[str], max_length: int) -> str:
    """
    Strip surrounding whitespace and cut to max_length characters.
    None or whitespace-only input becomes an empty string.
    """
    if is_blank(value):
        return ""
    trimmed = value.strip()
    return trimmed if len(trimmed) <= max_length else trimmed[:max_length]

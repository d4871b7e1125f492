"""Common utility functions."""

from typing import Any


def parse_int(value: Any, default: int) -> int:
    """Parse a positive integer, falling back to default on junk or non-positive input."""
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def parse_bool(value: Any, default: bool = False) -> bool:
    if value is None:
        return default
    return str(value).strip().lower() in {"true", "1", "yes", "on"}

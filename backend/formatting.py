"""Display helpers shared by the routers and parsers."""
from __future__ import annotations

import math

_SIZE_UNITS = ("B", "KB", "MB", "GB")


def format_bytes(size: int) -> str:
    """Human readable size with 1024-based units, e.g. `1.5 KB` or `2 MB`."""
    if size <= 0:
        return "0 B"
    exponent = 0
    while exponent < len(_SIZE_UNITS) - 1 and size >= 1024 ** (exponent + 1):
        exponent += 1
    text = f"{size / 1024 ** exponent:.1f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[exponent]}"


def truncate(text: str | None, limit: int) -> str | None:
    if text is None:
        return None
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def estimate_tokens(chars: int) -> int:
    """Rough estimate: ~4 chars per token."""
    return math.ceil(max(0, chars) / 4)

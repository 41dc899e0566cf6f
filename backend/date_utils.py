"""Shared date normalization helpers."""
from __future__ import annotations

import os
from datetime import datetime, timezone


def _format_datetime_utc(value: datetime) -> str:
    dt = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def epoch_to_iso(value: float) -> str:
    return _format_datetime_utc(datetime.fromtimestamp(float(value), timezone.utc))


def file_modified_iso(stats: os.stat_result) -> str:
    """Return the file's modification time in the `2026-02-16T10:00:00.000Z` form."""
    return epoch_to_iso(stats.st_mtime)

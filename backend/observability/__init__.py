"""Observability helpers."""

from backend.observability.otel import (
    initialize,
    shutdown,
    start_span,
    record_file_read,
    record_skipped_lines,
    record_turns,
)

__all__ = [
    "initialize",
    "shutdown",
    "start_span",
    "record_file_read",
    "record_skipped_lines",
    "record_turns",
]

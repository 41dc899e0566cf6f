"""Bounded-memory tail reader for large line-delimited logs."""
from __future__ import annotations

import os
from collections import deque
from pathlib import Path

CHUNK_SIZE = 64 * 1024


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


def read_last_n_lines(path: Path | str, n: int, chunk_size: int = CHUNK_SIZE) -> list[str]:
    """Return the last ``n`` non-blank lines of ``path``, oldest first.

    The file is read backward from EOF in ``chunk_size`` blocks. Splitting
    happens on the newline byte of the raw buffer and each complete line is
    decoded on its own, so a multi-byte character straddling a chunk boundary
    stays in the carry buffer until its line is whole.

    I/O errors propagate to the caller.
    """
    if n < 1:
        return []
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    lines: deque[str] = deque()
    carry = b""
    with open(path, "rb") as handle:
        position = handle.seek(0, os.SEEK_END)
        while position > 0 and len(lines) < n:
            read_size = min(chunk_size, position)
            position -= read_size
            handle.seek(position)
            carry = handle.read(read_size) + carry

            parts = carry.split(b"\n")
            # parts[0] may continue into the chunk before this one.
            carry = parts[0]
            for raw in reversed(parts[1:]):
                line = _decode(raw)
                if not line.strip():
                    continue
                lines.appendleft(line)
                if len(lines) >= n:
                    break

        if position == 0 and len(lines) < n:
            first = _decode(carry)
            if first.strip():
                lines.appendleft(first)

    return list(lines)[-n:]

"""Read-only access to the gateway's Anthropic payload log."""
from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any

from backend.observability import record_file_read, record_skipped_lines, start_span
from backend.parsers.payloads import PayloadParseResult, parse_payload_lines
from backend.parsers.tail import CHUNK_SIZE, read_last_n_lines

logger = logging.getLogger("clawd_inspector.payloads")


class PayloadLog:
    """A JSONL payload log at a fixed path. Every call re-reads the file."""

    def __init__(self, path: Path, chunk_size: int = CHUNK_SIZE):
        self.path = Path(path)
        self.chunk_size = chunk_size

    def exists(self) -> bool:
        return self.path.is_file()

    def size(self) -> int:
        return self.path.stat().st_size

    def read_recent(self, limit: int) -> PayloadParseResult:
        """Parse the last ``limit`` lines, newest entry first."""
        started = time.perf_counter()
        with start_span("payload_log.read_recent", {"limit": limit, "path": str(self.path)}):
            try:
                lines = read_last_n_lines(self.path, limit, self.chunk_size)
            except OSError:
                record_file_read("payload_log", "error", (time.perf_counter() - started) * 1000)
                raise
            result = parse_payload_lines(lines)
        result.entries.reverse()

        logger.debug("Read %d line(s) from %s", len(lines), self.path)
        record_file_read("payload_log", "success", (time.perf_counter() - started) * 1000)
        record_skipped_lines("payload_log", result.skipped)
        return result

    def find_by_digest(self, digest: str) -> dict[str, Any] | None:
        """Scan from the top for the first line whose ``payloadDigest`` matches exactly."""
        started = time.perf_counter()
        skipped = 0
        with start_span("payload_log.find_by_digest", {"digest": digest}):
            with self.path.open("r", encoding="utf-8", errors="replace") as handle:
                for line in handle:
                    if not line.strip():
                        continue
                    try:
                        data = json.loads(line)
                    except ValueError:
                        skipped += 1
                        continue
                    if isinstance(data, dict) and data.get("payloadDigest") == digest:
                        record_file_read("payload_digest", "hit", (time.perf_counter() - started) * 1000)
                        record_skipped_lines("payload_digest", skipped)
                        return data

        logger.debug("Payload digest %s not found in %s", digest, self.path)
        record_file_read("payload_digest", "miss", (time.perf_counter() - started) * 1000)
        record_skipped_lines("payload_digest", skipped)
        return None

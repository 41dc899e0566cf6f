"""Session transcript enumeration and loading."""
from __future__ import annotations

import logging
import re
import time
from pathlib import Path

from backend.date_utils import file_modified_iso
from backend.formatting import format_bytes
from backend.models import SessionData, SessionFile
from backend.observability import record_file_read, record_skipped_lines, start_span
from backend.parsers.sessions import compute_session_stats, parse_session_file

logger = logging.getLogger("clawd_inspector.sessions")

_SESSION_ID_PATTERN = re.compile(r"^[A-Za-z0-9._:-]+$")


def is_valid_session_id(session_id: str) -> bool:
    """Reject IDs that could escape the sessions directory."""
    cleaned = (session_id or "").strip()
    if not cleaned or cleaned in {".", ".."} or ".." in cleaned:
        return False
    return bool(_SESSION_ID_PATTERN.match(cleaned))


class SessionStore:
    """One ``<id>.jsonl`` transcript per session under ``sessions_dir``."""

    def __init__(self, sessions_dir: Path):
        self.sessions_dir = Path(sessions_dir)

    def exists(self) -> bool:
        return self.sessions_dir.is_dir()

    def session_path(self, session_id: str) -> Path | None:
        if not is_valid_session_id(session_id):
            return None
        return self.sessions_dir / f"{session_id}.jsonl"

    def list_sessions(self) -> list[SessionFile]:
        """All transcripts, most recently modified first."""
        if not self.exists():
            return []

        entries: list[tuple[float, SessionFile]] = []
        for path in self.sessions_dir.glob("*.jsonl"):
            if not path.is_file():
                continue
            stats = path.stat()
            entries.append(
                (
                    stats.st_mtime,
                    SessionFile(
                        id=path.stem,
                        filename=path.name,
                        modifiedTime=file_modified_iso(stats),
                        size=stats.st_size,
                        sizeFormatted=format_bytes(stats.st_size),
                    ),
                )
            )
        entries.sort(key=lambda item: item[0], reverse=True)
        return [session for _, session in entries]

    def load_session(self, session_id: str) -> SessionData | None:
        """Parse a transcript with its stats, or None when there is no such session."""
        path = self.session_path(session_id)
        if path is None or not path.is_file():
            return None

        started = time.perf_counter()
        with start_span("sessions.load", {"session_id": session_id}):
            try:
                result = parse_session_file(path)
            except OSError:
                record_file_read("session", "error", (time.perf_counter() - started) * 1000)
                raise
        record_file_read("session", "success", (time.perf_counter() - started) * 1000)
        record_skipped_lines("session", result.skipped)

        return SessionData(
            id=session_id,
            entries=result.entries,
            stats=compute_session_stats(result.entries),
            skippedLines=result.skipped,
        )

"""Parse Clawdbot JSONL session transcripts and derive per-session statistics."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from pydantic import ValidationError

from backend.models import ContentBlock, Message, MessageUsage, SessionEntry, SessionStats

logger = logging.getLogger("clawd_inspector.sessions")

ROLE_FILTERS = {"all", "user", "assistant", "system", "toolResult"}


@dataclass
class SessionParseResult:
    entries: list[SessionEntry] = field(default_factory=list)
    skipped: int = 0


def parse_session_line(line: str) -> SessionEntry | None:
    try:
        data = json.loads(line)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    try:
        return SessionEntry.model_validate(data)
    except ValidationError as exc:
        logger.debug("Keeping transcript line unvalidated (%d field error(s))", exc.error_count())
        return SessionEntry.model_construct(**data)


def parse_session_lines(lines: Iterable[str]) -> SessionParseResult:
    result = SessionParseResult()
    for line in lines:
        if not line.strip():
            continue
        entry = parse_session_line(line)
        if entry is None:
            result.skipped += 1
            continue
        result.entries.append(entry)
    return result


def parse_session_file(path: Path) -> SessionParseResult:
    """Parse a whole transcript file. Malformed lines are counted, not raised."""
    with path.open("r", encoding="utf-8", errors="replace") as handle:
        result = parse_session_lines(handle)
    if result.skipped:
        logger.warning("Skipped %d malformed line(s) in %s", result.skipped, path.name)
    return result


def entry_message(entry: SessionEntry) -> Message | None:
    """The typed message of a ``message`` entry, or None when absent or unrecognized."""
    if entry.type != "message" or not isinstance(entry.message, Message):
        return None
    return entry.message


def compute_session_stats(entries: list[SessionEntry]) -> SessionStats:
    stats = SessionStats()
    for entry in entries:
        message = entry_message(entry)
        if message is None:
            continue
        stats.totalMessages += 1

        if message.role == "user":
            stats.userMessages += 1
        elif message.role == "toolResult":
            stats.toolResults += 1
        elif message.role == "assistant":
            stats.assistantMessages += 1
            stats.toolCalls += sum(1 for block in message.content if block.type == "toolCall")
            if message.model:
                model = str(message.model)
                stats.models[model] = stats.models.get(model, 0) + 1
            usage = message.usage
            if isinstance(usage, MessageUsage):
                stats.totalTokens += usage.totalTokens or 0
                if usage.cost:
                    stats.totalCost += usage.cost.total or 0.0
    return stats


def _stringify(value: object) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, default=str)


def _block_matches(block: ContentBlock, query: str) -> bool:
    if block.type == "text":
        return query in (block.text or "").lower()
    if block.type == "thinking":
        return query in (block.thinking or "").lower()
    if block.type == "toolCall":
        return query in (block.name or "").lower()
    if block.type == "toolResult":
        return query in _stringify(block.content).lower()
    return False


def filter_session_entries(
    entries: list[SessionEntry],
    role: str = "all",
    query: str = "",
) -> list[SessionEntry]:
    """Message entries only, narrowed by role and a case-insensitive content search."""
    needle = (query or "").strip().lower()
    matched: list[SessionEntry] = []
    for entry in entries:
        message = entry_message(entry)
        if message is None:
            continue
        if role != "all" and message.role != role:
            continue
        if needle and not any(_block_matches(block, needle) for block in message.content):
            continue
        matched.append(entry)
    return matched

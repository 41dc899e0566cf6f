"""Parse payload-log JSONL lines and summarize logged request bodies."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from pydantic import ValidationError

from backend.formatting import estimate_tokens, truncate
from backend.models import (
    MessagesSummary,
    PayloadEntry,
    PayloadSummary,
    SystemPromptSummary,
    ToolsSummary,
)
from backend.parsers.turn_classifier import TurnClassifier, default_turn_classifier

logger = logging.getLogger("clawd_inspector.payloads")

_TRIGGERING_MESSAGE_LIMIT = 150
_USER_PREVIEW_LIMIT = 100
_TOOL_NAME_LIMIT = 20


@dataclass
class PayloadParseResult:
    """Parsed entries plus the number of malformed lines that were discarded."""

    entries: list[PayloadEntry] = field(default_factory=list)
    skipped: int = 0


def parse_payload_line(line: str) -> PayloadEntry | None:
    """Parse one log line. Returns None only when the line is not a JSON object."""
    try:
        data = json.loads(line)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    try:
        return PayloadEntry.model_validate(data)
    except ValidationError as exc:
        logger.debug("Keeping payload log line unvalidated (%d field error(s))", exc.error_count())
        return PayloadEntry.model_construct(**data)


def parse_payload_lines(lines: Iterable[str]) -> PayloadParseResult:
    """Parse lines in order, skipping blank lines and counting malformed ones."""
    result = PayloadParseResult()
    for line in lines:
        if not line.strip():
            continue
        entry = parse_payload_line(line)
        if entry is None:
            result.skipped += 1
            continue
        result.entries.append(entry)
    if result.skipped:
        logger.debug("Skipped %d malformed payload log line(s)", result.skipped)
    return result


def _first_text_block(content: list[Any]) -> str | None:
    for block in content:
        if isinstance(block, dict) and block.get("type") == "text" and block.get("text"):
            return str(block["text"])
    return None


def _user_message_text(message: Any) -> str | None:
    if not isinstance(message, dict) or message.get("role") != "user":
        return None
    content = message.get("content")
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        # tool_result blocks are verbose; only text blocks count
        return _first_text_block(content)
    return None


def extract_last_user_message(messages: list[Any]) -> str | None:
    """Text of the most recent user message that has any, searching backward."""
    for message in reversed(messages):
        text = _user_message_text(message)
        if text is not None:
            return text
    return None


def extract_triggering_message(messages: list[Any] | None) -> str | None:
    """Text of the final message when it was sent by the user."""
    if not messages:
        return None
    return _user_message_text(messages[-1])


def _summarize_system_prompt(system: Any) -> SystemPromptSummary:
    chars = 0
    parts: list[str] = []
    if isinstance(system, str):
        chars = len(system)
        parts = ["text"]
    elif isinstance(system, list):
        for part in system:
            if not isinstance(part, dict):
                continue
            text = part.get("text")
            if isinstance(text, str):
                chars += len(text)
            parts.append(str(part.get("type") or ""))
    return SystemPromptSummary(chars=chars, estimatedTokens=estimate_tokens(chars), parts=parts)


def _summarize_messages(messages: list[Any]) -> MessagesSummary:
    summary = MessagesSummary(total=len(messages))
    for message in messages:
        if not isinstance(message, dict):
            continue
        role = message.get("role")
        if role == "user":
            summary.user += 1
        elif role == "assistant":
            summary.assistant += 1

        content = message.get("content")
        if isinstance(content, str):
            summary.chars += len(content)
        elif isinstance(content, list):
            for block in content:
                if not isinstance(block, dict):
                    continue
                text = block.get("text")
                if isinstance(text, str):
                    summary.chars += len(text)
                nested = block.get("content")
                if block.get("type") == "tool_result" and isinstance(nested, str):
                    summary.chars += len(nested)
    summary.estimatedTokens = estimate_tokens(summary.chars)
    return summary


def _summarize_tools(tools: list[Any]) -> ToolsSummary:
    names = [str(tool.get("name") or "") for tool in tools if isinstance(tool, dict)]
    schema_chars = len(json.dumps(tools, separators=(",", ":"), ensure_ascii=False))
    return ToolsSummary(
        count=len(tools),
        names=names[:_TOOL_NAME_LIMIT],
        schemaChars=schema_chars,
        estimatedTokens=estimate_tokens(schema_chars),
    )


def summarize_payload(
    payload: dict[str, Any],
    classifier: TurnClassifier = default_turn_classifier,
) -> PayloadSummary:
    """Size estimates, turn type and message previews for one request body."""
    raw_messages = payload.get("messages")
    messages = raw_messages if isinstance(raw_messages, list) else []
    raw_tools = payload.get("tools")
    tools = raw_tools if isinstance(raw_tools, list) else []

    system_prompt = _summarize_system_prompt(payload.get("system"))
    message_summary = _summarize_messages(messages)
    tool_summary = _summarize_tools(tools)
    total_chars = system_prompt.chars + message_summary.chars + tool_summary.schemaChars

    model = payload.get("model")
    max_tokens = payload.get("max_tokens")

    return PayloadSummary(
        model=model if isinstance(model, str) else None,
        maxTokens=max_tokens if isinstance(max_tokens, int) and not isinstance(max_tokens, bool) else None,
        turnType=classifier.classify(messages),
        triggeringMessage=truncate(extract_triggering_message(messages), _TRIGGERING_MESSAGE_LIMIT),
        userPreview=truncate(extract_last_user_message(messages), _USER_PREVIEW_LIMIT),
        systemPrompt=system_prompt,
        messages=message_summary,
        tools=tool_summary,
        totalChars=total_chars,
        totalEstimatedTokens=estimate_tokens(total_chars),
    )


def summarize_entry(
    entry: PayloadEntry,
    *,
    include_raw: bool = False,
    classifier: TurnClassifier = default_turn_classifier,
) -> PayloadEntry:
    """Return a copy carrying a summary for request lines; the raw payload only when asked."""
    summary = None
    if entry.stage == "request":
        if isinstance(entry.payload, dict):
            summary = summarize_payload(entry.payload, classifier)
        elif isinstance(entry.summary, PayloadSummary):
            summary = entry.summary
    return entry.model_copy(
        update={
            "summary": summary,
            "payload": entry.payload if include_raw else None,
        }
    )

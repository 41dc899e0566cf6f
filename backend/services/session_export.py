"""Render a parsed session transcript as a markdown document."""
from __future__ import annotations

import json

from backend.models import ContentBlock, SessionData
from backend.parsers.sessions import entry_message


def _render_block(block: ContentBlock) -> str:
    if block.type == "text" and block.text:
        return f"{block.text}\n\n"
    if block.type == "thinking" and block.thinking:
        return f"> *Thinking: {block.thinking}*\n\n"
    if block.type == "toolCall":
        arguments = json.dumps(block.arguments, indent=2, ensure_ascii=False)
        return f"```tool-call: {block.name}\n{arguments}\n```\n\n"
    if block.type == "toolResult":
        if isinstance(block.content, str):
            content = block.content
        else:
            content = json.dumps(block.content, indent=2, ensure_ascii=False, default=str)
        return f"```tool-result\n{content}\n```\n\n"
    return ""


def export_session_markdown(session: SessionData) -> str:
    parts = [
        f"# Session: {session.id}\n\n",
        f"- Messages: {session.stats.totalMessages}\n",
        f"- Tokens: {session.stats.totalTokens:,}\n",
        f"- Cost: ${session.stats.totalCost:.4f}\n\n---\n\n",
    ]

    for entry in session.entries:
        message = entry_message(entry)
        if message is None:
            continue
        parts.append(f"## {str(message.role).upper()}\n\n")
        parts.extend(_render_block(block) for block in message.content)
        parts.append("---\n\n")

    return "".join(parts)

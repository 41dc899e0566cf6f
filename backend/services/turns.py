"""Group payload-log entries into user turns."""
from __future__ import annotations

import logging
from typing import Any, Sequence

from backend.models import NEW_TURN, PayloadEntry, PayloadSummary, PayloadUsage, TurnUsage, UserTurn
from backend.parsers.turn_classifier import TurnClassifier, default_turn_classifier

logger = logging.getLogger("clawd_inspector.payloads")

NO_MESSAGE_PLACEHOLDER = "(No message)"


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _opens_turn(entry: PayloadEntry, classifier: TurnClassifier) -> bool:
    if entry.stage != "request":
        return False
    if isinstance(entry.summary, PayloadSummary):
        return entry.summary.turnType == NEW_TURN
    if isinstance(entry.payload, dict):
        return classifier.classify(entry.payload.get("messages")) == NEW_TURN
    return True


def _sum_usage(entries: list[PayloadEntry]) -> TurnUsage:
    totals = TurnUsage()
    for entry in entries:
        usage = entry.usage
        if not isinstance(usage, PayloadUsage):
            continue
        totals.input += usage.input_tokens or 0
        totals.output += usage.output_tokens or 0
        totals.cacheRead += usage.cache_read_input_tokens or 0
        totals.cacheWrite += usage.cache_creation_input_tokens or 0
    return totals


def _seal_turn(start: PayloadEntry, entries: list[PayloadEntry]) -> UserTurn:
    summary = start.summary if isinstance(start.summary, PayloadSummary) else None
    return UserTurn(
        id=_text(start.payloadDigest) or _text(start.ts),
        ts=_text(start.ts),
        triggeringMessage=(summary.triggeringMessage if summary else None) or NO_MESSAGE_PLACEHOLDER,
        messageCount=summary.messages.total if summary else 0,
        requestCount=sum(1 for entry in entries if entry.stage == "request"),
        usage=_sum_usage(entries),
        entries=list(entries),
    )


def segment_turns(
    entries: Sequence[PayloadEntry],
    classifier: TurnClassifier = default_turn_classifier,
) -> list[UserTurn]:
    """Group newest-first log entries into user turns.

    A turn opens at every ``new_turn`` request and collects each later entry
    (tool-loop requests, usage records) until the next opener. Turns come back
    newest first; each turn's ``entries`` are oldest first. Entries seen before
    the first opener belong to no turn and are dropped.
    """
    turns: list[UserTurn] = []
    current_entries: list[PayloadEntry] = []
    current_start: PayloadEntry | None = None
    orphaned = 0

    for entry in reversed(entries):
        if _opens_turn(entry, classifier):
            if current_start is not None and current_entries:
                turns.append(_seal_turn(current_start, current_entries))
            elif current_entries:
                orphaned = len(current_entries)
            current_start = entry
            current_entries = [entry]
        else:
            current_entries.append(entry)

    if current_start is not None and current_entries:
        turns.append(_seal_turn(current_start, current_entries))
    elif current_entries:
        orphaned = len(current_entries)

    if orphaned:
        logger.debug("Dropped %d payload entries preceding the first user turn", orphaned)

    turns.reverse()
    logger.debug("Segmented %d entries into %d turn(s) with the %s classifier", len(entries), len(turns), classifier.name)
    return turns

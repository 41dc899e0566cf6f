"""API router for the Anthropic payload log."""
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from backend import config
from backend.dependencies import get_payload_log, get_turn_classifier
from backend.formatting import format_bytes
from backend.models import PayloadListResponse, TurnListResponse
from backend.observability import record_turns
from backend.parsers.payloads import summarize_entry
from backend.parsers.turn_classifier import TurnClassifier
from backend.services.payload_log import PayloadLog
from backend.services.turns import segment_turns

logger = logging.getLogger("clawd_inspector.payloads")

NOT_ENABLED_MESSAGE = (
    f"Payload logging not enabled. Set {config.PAYLOAD_LOG_ENV_FLAG}=1 and restart the gateway."
)


def _clamp_limit(limit: int) -> int:
    return max(1, min(int(limit), config.PAYLOAD_MAX_LIMIT))


payloads_router = APIRouter(prefix="/api/payloads", tags=["payloads"])


@payloads_router.get("", response_model=PayloadListResponse)
def list_payloads(
    limit: int = config.PAYLOAD_DEFAULT_LIMIT,
    raw: bool = False,
    log: PayloadLog = Depends(get_payload_log),
    classifier: TurnClassifier = Depends(get_turn_classifier),
):
    """Return the most recent payload log entries, newest first."""
    if not log.exists():
        return PayloadListResponse(enabled=False, path=str(log.path), message=NOT_ENABLED_MESSAGE)

    try:
        file_size = log.size()
        result = log.read_recent(_clamp_limit(limit))
    except OSError as exc:
        logger.exception("Error reading payload log %s", log.path)
        raise HTTPException(status_code=500, detail=str(exc))

    entries = [summarize_entry(entry, include_raw=raw, classifier=classifier) for entry in result.entries]
    return PayloadListResponse(
        enabled=True,
        path=str(log.path),
        fileSize=format_bytes(file_size),
        totalEntries=len(entries),
        skippedLines=result.skipped,
        entries=entries,
    )


@payloads_router.get("/turns", response_model=TurnListResponse)
def list_payload_turns(
    limit: int = config.TURNS_DEFAULT_LIMIT,
    log: PayloadLog = Depends(get_payload_log),
    classifier: TurnClassifier = Depends(get_turn_classifier),
):
    """Group the most recent payload log entries into user turns, newest turn first."""
    if not log.exists():
        return TurnListResponse(enabled=False, path=str(log.path), message=NOT_ENABLED_MESSAGE)

    try:
        file_size = log.size()
        result = log.read_recent(_clamp_limit(limit))
    except OSError as exc:
        logger.exception("Error reading payload log %s", log.path)
        raise HTTPException(status_code=500, detail=str(exc))

    entries = [summarize_entry(entry, classifier=classifier) for entry in result.entries]
    turns = segment_turns(entries, classifier)
    record_turns(len(turns))
    return TurnListResponse(
        enabled=True,
        path=str(log.path),
        fileSize=format_bytes(file_size),
        totalEntries=len(entries),
        skippedLines=result.skipped,
        turns=turns,
    )


@payloads_router.get("/{digest}")
def get_payload(digest: str, log: PayloadLog = Depends(get_payload_log)) -> dict[str, Any]:
    """Return the first logged line whose payloadDigest matches, verbatim."""
    if not log.exists():
        raise HTTPException(status_code=404, detail="Payload log not found")

    try:
        entry = log.find_by_digest(digest)
    except OSError as exc:
        logger.exception("Error reading payload %s", digest)
        raise HTTPException(status_code=500, detail=str(exc))

    if entry is None:
        raise HTTPException(status_code=404, detail="Payload not found")
    return entry

"""API router for session transcripts."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from backend.dependencies import get_session_store
from backend.models import SessionData, SessionEntry, SessionListResponse
from backend.parsers.sessions import ROLE_FILTERS, filter_session_entries
from backend.services.session_export import export_session_markdown
from backend.services.session_store import SessionStore

logger = logging.getLogger("clawd_inspector.sessions")

sessions_router = APIRouter(prefix="/api/sessions", tags=["sessions"])


def _load_or_404(store: SessionStore, session_id: str) -> SessionData:
    try:
        session = store.load_session(session_id)
    except OSError as exc:
        logger.exception("Error reading session %s", session_id)
        raise HTTPException(status_code=500, detail=str(exc))
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


@sessions_router.get("", response_model=SessionListResponse)
def list_sessions(store: SessionStore = Depends(get_session_store)):
    """Return session transcript files, most recently modified first."""
    if not store.exists():
        return SessionListResponse(sessions=[], error="Sessions directory not found")
    try:
        return SessionListResponse(sessions=store.list_sessions())
    except OSError as exc:
        logger.exception("Error reading sessions from %s", store.sessions_dir)
        raise HTTPException(status_code=500, detail=str(exc))


@sessions_router.get("/{session_id}", response_model=SessionData)
def get_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    """Return every transcript entry for a session with aggregate stats."""
    return _load_or_404(store, session_id)


@sessions_router.get("/{session_id}/messages", response_model=list[SessionEntry])
def get_session_messages(
    session_id: str,
    role: str = "all",
    q: str = "",
    store: SessionStore = Depends(get_session_store),
):
    """Return message entries filtered by role and a case-insensitive search query."""
    if role not in ROLE_FILTERS:
        raise HTTPException(status_code=400, detail=f"Unknown role filter: {role}")
    session = _load_or_404(store, session_id)
    return filter_session_entries(session.entries, role=role, query=q)


@sessions_router.get("/{session_id}/export")
def export_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    """Download the transcript as markdown."""
    session = _load_or_404(store, session_id)
    return Response(
        content=export_session_markdown(session),
        media_type="text/markdown; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="session-{session.id}.md"'},
    )

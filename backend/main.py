"""Clawd Inspector FastAPI backend: main application entry point."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend import config
from backend.dependencies import get_payload_log, get_session_store
from backend.routers.payloads import payloads_router
from backend.routers.sessions import sessions_router
from backend.routers.system_context import system_context_router
from backend.observability import initialize as initialize_observability, shutdown as shutdown_observability
from backend.services.payload_log import PayloadLog
from backend.services.session_store import SessionStore

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("clawd_inspector")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    logger.info("Clawd Inspector backend starting up")
    logger.info("Payload log: %s", config.PAYLOAD_LOG_PATH)
    logger.info("Sessions dir: %s", config.SESSIONS_DIR)
    logger.info("Workspace dir: %s", config.WORKSPACE_DIR)
    initialize_observability(app)

    yield

    logger.info("Clawd Inspector backend shutting down")
    shutdown_observability(app)


app = FastAPI(
    title="Clawd Inspector API",
    description="Read-only backend for inspecting Clawdbot session transcripts and API payload logs",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS: allow the dashboard dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        config.FRONTEND_ORIGIN,
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Register routers
app.include_router(payloads_router)
app.include_router(sessions_router)
app.include_router(system_context_router)


@app.get("/api/health")
def health(
    log: PayloadLog = Depends(get_payload_log),
    store: SessionStore = Depends(get_session_store),
):
    """Health check endpoint."""
    return {
        "status": "ok",
        "payloadLog": "present" if log.exists() else "missing",
        "sessionsDir": "present" if store.exists() else "missing",
    }

"""Component factories wired from configuration.

Components take their paths at construction time and never read
``backend.config`` themselves. Routers receive them through ``Depends`` so
tests and alternative deployments can hand in other locations.
"""
from __future__ import annotations

from backend import config
from backend.parsers.turn_classifier import TurnClassifier, default_turn_classifier
from backend.services.payload_log import PayloadLog
from backend.services.session_store import SessionStore
from backend.services.system_context import SystemContextLoader


def get_payload_log() -> PayloadLog:
    return PayloadLog(config.PAYLOAD_LOG_PATH, chunk_size=config.TAIL_CHUNK_SIZE)


def get_session_store() -> SessionStore:
    return SessionStore(config.SESSIONS_DIR)


def get_system_context_loader() -> SystemContextLoader:
    return SystemContextLoader(config.WORKSPACE_DIR, config.SYSTEM_CONTEXT_FILES)


def get_turn_classifier() -> TurnClassifier:
    return default_turn_classifier

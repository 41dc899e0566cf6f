"""Clawd Inspector Backend Configuration."""
import os
from pathlib import Path


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    value = os.getenv(name)
    if not value or not value.strip():
        return default
    return Path(value.strip()).expanduser()


def _env_list(name: str, default: list[str]) -> list[str]:
    value = os.getenv(name)
    if value is None:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


# Clawdbot data paths (read-only; the gateway owns these files)
CLAWDBOT_HOME = _env_path("CLAWD_INSPECTOR_CLAWDBOT_HOME", Path.home() / ".clawdbot")
PAYLOAD_LOG_PATH = _env_path(
    "CLAWD_INSPECTOR_PAYLOAD_LOG_PATH",
    CLAWDBOT_HOME / "logs" / "anthropic-payload.jsonl",
)
SESSIONS_DIR = _env_path(
    "CLAWD_INSPECTOR_SESSIONS_DIR",
    CLAWDBOT_HOME / "agents" / "main" / "sessions",
)
WORKSPACE_DIR = _env_path("CLAWD_INSPECTOR_WORKSPACE_DIR", Path.home() / "clawd")
SYSTEM_CONTEXT_FILES = _env_list(
    "CLAWD_INSPECTOR_SYSTEM_CONTEXT_FILES",
    [
        "AGENTS.md",
        "SOUL.md",
        "USER.md",
        "TOOLS.md",
        "MEMORY.md",
        "HEARTBEAT.md",
        "IDENTITY.md",
    ],
)

# Payload log reading
PAYLOAD_LOG_ENV_FLAG = "CLAWDBOT_ANTHROPIC_PAYLOAD_LOG"
PAYLOAD_DEFAULT_LIMIT = _env_int("CLAWD_INSPECTOR_PAYLOAD_DEFAULT_LIMIT", 100)
PAYLOAD_MAX_LIMIT = _env_int("CLAWD_INSPECTOR_PAYLOAD_MAX_LIMIT", 5000)
TURNS_DEFAULT_LIMIT = _env_int("CLAWD_INSPECTOR_TURNS_DEFAULT_LIMIT", 500)
TAIL_CHUNK_SIZE = _env_int("CLAWD_INSPECTOR_TAIL_CHUNK_SIZE", 64 * 1024)

# Observability
OTEL_ENABLED = _env_bool("CLAWD_INSPECTOR_OTEL_ENABLED", False)
OTEL_ENDPOINT = os.getenv("CLAWD_INSPECTOR_OTEL_ENDPOINT", "http://localhost:4318")
OTEL_SERVICE_NAME = os.getenv("CLAWD_INSPECTOR_OTEL_SERVICE_NAME", "clawd-inspector-backend")
PROM_PORT = _env_int("CLAWD_INSPECTOR_PROM_PORT", 9464)

# Server settings
HOST = os.getenv("CLAWD_INSPECTOR_HOST", "127.0.0.1")
PORT = _env_int("CLAWD_INSPECTOR_PORT", 8000)

# CORS
FRONTEND_ORIGIN = os.getenv("CLAWD_INSPECTOR_FRONTEND_ORIGIN", "http://localhost:3000")

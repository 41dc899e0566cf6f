"""API router for the agent workspace's system-context files."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from backend.dependencies import get_system_context_loader
from backend.models import SystemContextResponse
from backend.services.system_context import SystemContextLoader

system_context_router = APIRouter(prefix="/api/system-context", tags=["system-context"])


@system_context_router.get("", response_model=SystemContextResponse)
def get_system_context(loader: SystemContextLoader = Depends(get_system_context_loader)):
    """Return each configured context file's content, or a missing marker."""
    return loader.load()

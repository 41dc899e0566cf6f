"""Load the agent workspace's system-context markdown files."""
from __future__ import annotations

import logging
from pathlib import Path

from backend.formatting import format_bytes
from backend.models import SystemContextFile, SystemContextResponse, SystemContextSummary

logger = logging.getLogger("clawd_inspector.system_context")


class SystemContextLoader:
    def __init__(self, workspace_dir: Path, filenames: list[str]):
        self.workspace_dir = Path(workspace_dir)
        self.filenames = list(filenames)

    def _missing(self, filename: str, path: Path) -> SystemContextFile:
        return SystemContextFile(name=filename, filename=filename, path=str(path))

    def load_file(self, filename: str) -> SystemContextFile:
        path = self.workspace_dir / filename
        if not path.is_file():
            return self._missing(filename, path)
        try:
            size = path.stat().st_size
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read system context file %s: %s", path, exc)
            return self._missing(filename, path)
        return SystemContextFile(
            name=filename,
            filename=filename,
            path=str(path),
            exists=True,
            content=content,
            size=size,
            sizeFormatted=format_bytes(size),
        )

    def load(self) -> SystemContextResponse:
        files = [self.load_file(filename) for filename in self.filenames]
        existing = [f for f in files if f.exists]
        total_size = sum(f.size for f in existing)
        return SystemContextResponse(
            files=files,
            summary=SystemContextSummary(
                total=len(self.filenames),
                existing=len(existing),
                totalSize=total_size,
                totalSizeFormatted=format_bytes(total_size),
            ),
        )

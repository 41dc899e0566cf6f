"""Run the Clawd Inspector backend with uvicorn.

Usage:
  python -m backend
  python -m backend --port 9000
  python -m backend --host 0.0.0.0 --reload
"""
from __future__ import annotations

import argparse

import uvicorn

from backend import config


def main() -> int:
    parser = argparse.ArgumentParser(prog="clawd-inspector")
    parser.add_argument("--host", default=config.HOST, help=f"Bind address (default: {config.HOST})")
    parser.add_argument("--port", type=int, default=config.PORT, help=f"Port (default: {config.PORT})")
    parser.add_argument("--reload", action="store_true", help="Reload on source changes")
    args = parser.parse_args()

    uvicorn.run("backend.main:app", host=args.host, port=args.port, reload=args.reload)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

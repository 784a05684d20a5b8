"""
Run the training log API locally with auto-reload.

Reads ``.env`` before the app is imported, so ``SYNC_ENDPOINT``,
``DATABASE_URL`` and friends can live there during development.

Usage:
    python scripts/run_dev.py [--host 127.0.0.1] [--port 8000] [--no-reload]
"""

import argparse
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv

load_dotenv(project_root / ".env")

import uvicorn

from app.core.config import settings


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Training log development server")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--no-reload", action="store_true", help="Disable auto-reload")
    return parser.parse_args()


def main():
    args = parse_args()
    base = f"http://{args.host}:{args.port}"

    print(f"{settings.PROJECT_NAME} {settings.VERSION}")
    print(f"  API:      {base}/api/v1")
    print(f"  Docs:     {base}/docs")
    print(f"  Database: {settings.DATABASE_URL}")
    print(f"  Sync:     {settings.SYNC_ENDPOINT or 'disabled (SYNC_ENDPOINT not set)'}")
    print()

    uvicorn.run("app.main:app", host=args.host, port=args.port, reload=not args.no_reload,
                log_level=settings.LOG_LEVEL.lower(), )


if __name__ == "__main__":
    main()

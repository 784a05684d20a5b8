"""
Logging setup.

Configures the root logger once at application start and aligns the
uvicorn / fastapi loggers to the same level.
"""

import logging
import sys

from app.core.config import settings

LOG_FORMAT = "%(asctime)s [%(name)s:%(levelname)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure stdout logging at ``level`` (defaults to ``settings.LOG_LEVEL``)."""
    level_name = (level or settings.LOG_LEVEL).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, handlers=[logging.StreamHandler(sys.stdout)])

    for name in ("uvicorn.error", "uvicorn.access", "fastapi"):
        logging.getLogger(name).setLevel(numeric_level)

    logging.getLogger(__name__).info("Logging configured at %s level", level_name)

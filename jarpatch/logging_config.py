"""Logging setup shared by the command line entry points."""

from __future__ import annotations

import logging
import logging.config
from typing import Optional

LOG_PREFIX = "[JAR-PATCH]"
LOG_FORMAT = f"{LOG_PREFIX} %(asctime)s %(levelname)s %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: Optional[str] = None, *, verbose: bool = False) -> None:
    """Install a single stream handler on the root logger.

    ``verbose`` wins over ``level`` and switches everything to DEBUG.
    """
    resolved = "DEBUG" if verbose else (level or "INFO").upper()
    if not isinstance(logging.getLevelName(resolved), int):
        resolved = "INFO"
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {"format": LOG_FORMAT, "datefmt": DATE_FORMAT},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "stream": "ext://sys.stderr",
                },
            },
            "root": {"level": resolved, "handlers": ["console"]},
            "loggers": {
                # keep transport chatter out of normal runs
                "httpx": {"level": "DEBUG" if verbose else "WARNING"},
                "httpcore": {"level": "WARNING"},
            },
        }
    )

"""Logging setup for the rosco server.

All modules log through children of the ``rosco`` logger; this module
attaches a single stream handler to it once per process.
"""

from __future__ import annotations

import logging
import sys

logger = logging.getLogger("rosco")

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str | int = "INFO") -> logging.Logger:
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger.setLevel(level)

    if not any(getattr(h, "_rosco_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._rosco_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    logger.propagate = False
    return logger

"""Logging setup for the resume_structure package."""

from __future__ import annotations

import logging
import os
from typing import Optional

from .config import ParserConfig

LOGGER_NAME = "resume_structure"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LEVEL_ENV_VAR = "RESUME_STRUCTURE_LOG_LEVEL"


def configure_logging(level: Optional[str] = None, config: Optional[ParserConfig] = None) -> logging.Logger:
    """Attach a stream handler to the package logger and set its level.

    *level* falls back to ``$RESUME_STRUCTURE_LOG_LEVEL``, then to
    ``config.log_level`` and then WARNING. Calling it again only changes
    the level.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if not any(getattr(h, "_resume_structure", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handler._resume_structure = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    configured = config.log_level if config else None
    name = (level or os.environ.get(LEVEL_ENV_VAR) or configured or "WARNING").upper()
    value = getattr(logging, name, None)
    logger.setLevel(value if isinstance(value, int) else logging.WARNING)
    return logger

"""Loguru sink setup for fjsf.

The interactive session owns the terminal, so the only sink is stderr and the
default level keeps discovery chatter hidden unless explicitly requested.
"""

from __future__ import annotations

import os
import sys

from loguru import logger

DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVEL_ENV = "FJSF_LOG_LEVEL"
_VALID_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


def resolve_log_level(explicit: str | None = None, configured: str | None = None) -> str:
    """Pick the effective level: explicit flag, then environment, then config."""
    for candidate in (explicit, os.environ.get(LOG_LEVEL_ENV), configured):
        if not isinstance(candidate, str):
            continue
        normalized = candidate.strip().upper()
        if normalized in _VALID_LEVELS:
            return normalized
    return DEFAULT_LOG_LEVEL


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<level>{level: <8}</level> | {name}:{function}:{line} - {message}",
        colorize=None,
    )

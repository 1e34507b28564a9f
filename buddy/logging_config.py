"""Loguru sink configuration for the API server and the CLI."""
from __future__ import annotations

import sys

from loguru import logger

from config import Settings

LOG_FORMAT = "<dim>{time:YYYY-MM-DD HH:mm:ss}</dim> | <level>{level: <8}</level> | {name}:{line} - {message}"


def configure_logging(settings: Settings, level: str | None = None) -> None:
    """
    Replace loguru's default sink.

    Args:
        settings: Source of ``log_level`` and ``log_file``
        level: Override for the stderr sink (the CLI passes WARNING)
    """
    logger.remove()
    logger.add(sys.stderr, level=level or settings.log_level, format=LOG_FORMAT)

    if settings.log_file:
        logger.add(
            settings.log_file,
            level=settings.log_level,
            rotation="10 MB",
            retention=5,
            encoding="utf-8",
        )

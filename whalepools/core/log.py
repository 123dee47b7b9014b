# core/log.py
from __future__ import annotations

import sys

from loguru import logger

from whalepools.core.config import Settings

_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra}</cyan> <level>{message}</level>"
)


def configure_logging(settings: Settings) -> None:
    """Replace loguru's default sink with one stderr sink at the configured level.

    With LOG_JSON set every record is emitted as a JSON line, bound context
    (network, pool, ...) included under ``record.extra``.
    """
    logger.remove()
    if settings.LOG_JSON:
        logger.add(sys.stderr, level=settings.LOG_LEVEL.upper(), serialize=True)
    else:
        logger.add(
            sys.stderr,
            level=settings.LOG_LEVEL.upper(),
            format=_FORMAT,
            colorize=True,
        )

"""Logging setup."""

import os
import sys

from loguru import logger

DEFAULT_LEVEL = "WARNING"


def setup_logging(level: str | None = None) -> None:
    level = (level or os.environ.get("TURIX_LOG_LEVEL") or DEFAULT_LEVEL).upper()
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>",
    )

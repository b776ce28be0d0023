"""Loguru setup for the SDK.

The package disables its own logger on import so that applications see no
output unless they opt in with :func:`setup_logging`.
"""

import sys
from typing import Any

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def setup_logging(level: str = "INFO", sink: Any = sys.stderr) -> int:
    """Enable SDK logs and route them to ``sink``.

    Returns:
        The loguru handler id, usable with ``logger.remove``.
    """
    logger.enable("gemini_sdk")
    return logger.add(
        sink,
        format=LOG_FORMAT,
        level=level.upper(),
        filter="gemini_sdk",
    )

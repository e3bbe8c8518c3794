"""Loguru configuration for the command line."""

import sys

from loguru import logger


def setup_logging(level: str = "WARNING") -> None:
    """Replace loguru's default handler with a stderr sink at ``level``."""
    logger.remove()
    logger.add(
        sys.stderr,
        format="<level>{time:HH:mm:ss} | {level: <7} | {name}:{function}:{line} | {message}</level>",
        level=level.upper(),
        colorize=None,
    )

"""
Logger configuration.

Library modules log through loguru's shared `logger`; only entry points
call setup_logger() to decide where records go.
"""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger


def setup_logger(level: str = "WARNING", log_file: str | Path | None = None) -> None:
    """Configure loguru with a stderr sink and an optional file sink.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_file: Optional path to a log file. If None, only stderr is used.
    """
    logger.remove()

    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>",
        level=level.upper(),
        colorize=True,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            level=level.upper(),
            rotation="10 MB",
            retention="7 days",
        )

    logger.debug(f"Logger initialized with level={level}")

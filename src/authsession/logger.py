"""
Logging setup for authsession, built on loguru.

Modules obtain a bound logger with ``get_logger(__name__)``; applications
call ``setup_logging`` once at startup to choose level and sinks.
"""

import sys
from typing import Optional

from loguru import logger

_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> - <level>{message}</level>"
)

logger.configure(extra={"name": "authsession"})


def _stderr_sink(message) -> None:
    # Resolved per write so redirected streams (tests, CLI runners) are honoured
    sys.stderr.write(message)


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure loguru sinks.

    Args:
        level: Minimum level for all sinks (e.g. "DEBUG", "INFO").
        log_file: Optional path; when given, logs are also written there
                  with daily rotation.
    """
    level = level.upper()
    logger.remove()
    logger.add(_stderr_sink, level=level, format=_FORMAT, colorize=sys.stderr.isatty())

    if log_file:
        logger.add(
            log_file,
            level=level,
            format=_FORMAT,
            rotation="1 day",
            retention="7 days",
            encoding="utf-8",
        )


def get_logger(name: str):
    """Return a logger bound to the given module name."""
    return logger.bind(name=name)

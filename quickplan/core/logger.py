"""
Logging setup shared by all modules.

Usage:
    from quickplan.core.logger import setup_logger

    logger = setup_logger(__name__)
"""

import logging
import sys

from quickplan.core.config import get_settings

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(name: str) -> logging.Logger:
    """
    Get a configured logger.

    The handler is attached once per logger name, so repeated calls
    (module reloads, tests) do not duplicate output.

    Args:
        name: Logger name, usually __name__

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    settings = get_settings()
    level = logging.DEBUG if settings.DEBUG else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))

    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger

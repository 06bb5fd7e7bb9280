"""Simple logging utility wrapper."""
import logging
from typing import Dict, Optional

from config import LOG_LEVEL

_loggers: Dict[str, logging.Logger] = {}


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Get or create a logger instance.

    Args:
        name: Logger name (typically __name__)
        level: Logging level, defaults to LOG_LEVEL from config

    Returns:
        Logger instance
    """
    if name not in _loggers:
        if level is None:
            level = logging.getLevelName(LOG_LEVEL)
            if not isinstance(level, int):
                level = logging.INFO

        logger = logging.getLogger(name)
        logger.setLevel(level)

        if not logger.handlers:
            handler = logging.StreamHandler()
            handler.setLevel(level)
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        _loggers[name] = logger

    return _loggers[name]

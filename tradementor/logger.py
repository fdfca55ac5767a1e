"""Loguru sink configuration."""

import sys
import threading

from loguru import logger

_configured = False
_init_lock = threading.Lock()

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def init_logger(level: str = "INFO") -> None:
    """Configure a single stderr sink for the package. Idempotent."""
    global _configured
    if _configured:
        return

    with _init_lock:
        if _configured:
            return

        logger.remove()
        logger.add(
            sys.stderr,
            colorize=True,
            backtrace=False,
            diagnose=False,
            level=level.upper(),
            format=LOG_FORMAT,
        )
        logger.enable("tradementor")
        _configured = True


__all__ = ["init_logger", "logger"]

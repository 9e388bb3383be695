"""
Logging configuration
"""
import importlib
import logging
import sys

from ..config import get_settings_module


def _debug_enabled() -> bool:
    settings = importlib.import_module(get_settings_module())
    return bool(getattr(settings, "DEBUG", False))


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger instance"""
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(logging.DEBUG if _debug_enabled() else logging.INFO)
    return logger

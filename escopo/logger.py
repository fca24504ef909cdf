"""
Unified logging module
======================

Single place to configure and obtain loggers for the escopo package.

Usage:
    from escopo.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Processing sheet: %s", sheet_name)
    logger.warning("Sheet %s skipped: %s", sheet_name, reason)
"""

import logging
import sys
from typing import Optional, Union

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LEVEL = logging.INFO
ROOT_LOGGER_NAME = "escopo"

_root_configured = False


def _resolve_level(level: Union[int, str, None]) -> int:
    if level is None:
        return DEFAULT_LEVEL
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else DEFAULT_LEVEL


def _configure_root_logger() -> None:
    """
    Attach a stdout handler to the project root logger.

    Runs once; guarded by the module-level ``_root_configured`` flag.
    """
    global _root_configured
    if _root_configured:
        return

    # Imported lazily so that reading settings never happens at import time.
    from escopo.config import get_settings

    level = _resolve_level(get_settings().LOG_LEVEL)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG)
    console_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT))

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)
    root_logger.propagate = False

    _root_configured = True


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Return a logger for *name* (normally the caller's ``__name__``).

    Args:
        name: logger name
        level: optional level override for this logger only
    """
    _configure_root_logger()
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger


def set_level(level: Union[int, str], logger_name: Optional[str] = None) -> None:
    """
    Change the level of *logger_name*, or of the project root logger.

    Examples:
        set_level(logging.DEBUG)                    # every escopo module
        set_level("DEBUG", "escopo.pipeline")       # only the orchestrator
    """
    logger = logging.getLogger(logger_name or ROOT_LOGGER_NAME)
    logger.setLevel(_resolve_level(level))

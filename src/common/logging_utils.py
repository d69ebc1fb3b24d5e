"""Centralized logging setup and structured debug helpers."""

import logging
import os
import sys
from typing import Any, Dict, Optional

from constants import Constants

_HANDLER_NAME = "tagversion-console"


def _level_from_env(default: int = logging.INFO) -> int:
    name = str(os.environ.get(Constants.ENV_LOG_LEVEL, "")).strip().upper()
    if name in Constants.LOG_LEVELS:
        return getattr(logging, name)
    return default


def configure_logging(quiet: bool = False, log_file: Optional[str] = None) -> None:
    """Install the console handler on the root logger.

    The level comes from TAGVERSION_LOG_LEVEL (default INFO). Repeated calls
    replace the console handler rather than stacking a new one. Console
    output goes to stderr so stdout carries only command results.

    Args:
        quiet: Suppress console output entirely
        log_file: Optional path for an additional file handler
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)

    if quiet:
        console: logging.Handler = logging.NullHandler()
    else:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
    console.set_name(_HANDLER_NAME)
    root.addHandler(console)
    root.setLevel(_level_from_env())

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(Constants.LOG_FILE_FORMAT))
        root.addHandler(file_handler)
        logging.getLogger(__name__).info("Logging to file: %s", log_file)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when ``logger`` would emit DEBUG records."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra`` mapping for structured debug records.

    None values are dropped so formatters only see fields that were set.
    """
    return {key: value for key, value in fields.items() if value is not None}

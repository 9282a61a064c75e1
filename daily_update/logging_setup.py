"""Console logging for the service and the one-shot runner."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_HANDLER_NAME = "daily_update_console"


def configure_logging(level: int = logging.INFO) -> logging.Logger:
    """Attach one stdout handler to the package logger; safe to call repeatedly."""
    package_logger = logging.getLogger("daily_update")
    package_logger.setLevel(level)

    for handler in package_logger.handlers:
        if handler.get_name() == _HANDLER_NAME:
            handler.setLevel(level)
            return package_logger

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.set_name(_HANDLER_NAME)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(console_handler)
    return package_logger

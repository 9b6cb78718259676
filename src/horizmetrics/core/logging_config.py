#!/usr/bin/env python3
"""
Logging helpers for horizmetrics

Modules log through get_logger(__name__) and never configure handlers
themselves. Programs embedding the gatherer and evaluator call
setup_logging once to get console (and optionally file) output.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from ..config.settings import LoggingSettings

PACKAGE_LOGGER = "horizmetrics"

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s:%(lineno)d - %(message)s"


class ColoredFormatter(logging.Formatter):
    """Wraps the level name in an ANSI color"""

    LEVEL_COLORS = {
        logging.DEBUG: '\033[36m',
        logging.INFO: '\033[32m',
        logging.WARNING: '\033[33m',
        logging.ERROR: '\033[31m',
        logging.CRITICAL: '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record):
        color = self.LEVEL_COLORS.get(record.levelno)
        if color is None:
            return super().format(record)
        # Copy so other handlers see the plain level name
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


def setup_logging(config: Optional[LoggingSettings] = None, enable_colors: bool = True) -> logging.Logger:
    """
    Attach handlers to the horizmetrics package logger

    Calling it again replaces the handlers from the previous call.

    Args:
        config: Level and optional log file, LoggingSettings() when omitted
        enable_colors: Color the level name on the console

    Returns:
        The configured package logger
    """
    config = config or LoggingSettings()
    level = getattr(logging, config.level.upper(), logging.INFO)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(ColoredFormatter(CONSOLE_FORMAT) if enable_colors else logging.Formatter(CONSOLE_FORMAT))
    package_logger.addHandler(console)

    if config.file:
        path = Path(config.file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        package_logger.addHandler(file_handler)

    # The kubernetes client logs every request at DEBUG
    for noisy in ("kubernetes", "urllib3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    package_logger.debug(f"Logging configured at {config.level} level, file: {config.file}")
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger, normally called with __name__"""
    return logging.getLogger(name)

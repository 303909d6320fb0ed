#!/usr/bin/env python3
"""Logging configuration for Gravity Lab front-ends."""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    name: str = "gravsim",
) -> logging.Logger:
    """
    Set up logging for the gravsim package.

    The core modules only create loggers; handlers are attached here, by the
    application, never by library code.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path of a rotating log file
        name: Logger to configure

    Returns:
        Configured logger instance
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)

    formatter = logging.Formatter(LOG_FORMAT)

    # Console handler
    if not any(getattr(h, "_gravsim_console", False) for h in logger.handlers):
        console_handler = logging.StreamHandler()
        console_handler._gravsim_console = True
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)
    for handler in logger.handlers:
        handler.setLevel(numeric_level)

    # File handler
    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10485760,  # 10MB
            backupCount=5,
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger

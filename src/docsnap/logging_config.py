"""Logging setup for the docsnap package logger."""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO, Union

# Console lines sit next to rich progress output, so they stay short
CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    format_string: Optional[str] = None,
    force: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configure the "docsnap" logger.

    Records go to the console and, when log_file is set, are appended to
    that file with timestamps. The logger does not propagate, so embedding
    applications keep control of the root logger. An already configured
    logger is left alone unless force is set.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL (unknown names mean INFO)
        log_file: File to append records to; parent directories are created
        format_string: Format for both handlers, overriding the defaults
        force: Replace existing handlers
        stream: Console stream (stdout if None; the CLI passes stderr with --stdout)

    Returns:
        The "docsnap" logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger = logging.getLogger("docsnap")
    logger.setLevel(numeric_level)
    logger.propagate = False

    if logger.handlers and not force:
        return logger

    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setFormatter(logging.Formatter(format_string or CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(format_string or FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger

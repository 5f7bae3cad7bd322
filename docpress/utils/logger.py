"""
Logging setup for docpress.

Modules log through ``logging.getLogger(__name__)``; the functions here only
decide where those records go: a plain or rich console handler on stdout /
stderr, and optionally a rotating log file.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _level_number(level: str) -> int:
    name = (level or "").upper()
    if name not in _LEVEL_NAMES:
        raise ValueError(f"Invalid log level: {level}")
    return logging.getLevelName(name)


def get_logger(name: str) -> logging.Logger:
    """Named logger; ``name`` must be a non-empty string."""
    if not isinstance(name, str) or not name:
        raise ValueError("Logger name must be a non-empty string")
    return logging.getLogger(name)


def configure_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
    log_file: Optional[str] = None,
    max_file_size: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    rich_output: bool = False,
) -> None:
    """
    Replace the root logger's handlers.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL (case-insensitive)
        format_string: Record format for the plain console and file handlers
        log_file: Also write records to this file, rotated at ``max_file_size``
        max_file_size: Rotation threshold in bytes
        backup_count: Rotated files kept next to ``log_file``
        rich_output: Render console records with rich instead of plain text

    Raises:
        ValueError: If ``level`` is not a known level name
    """
    number = _level_number(level)
    formatter = logging.Formatter(format_string or LOG_FORMAT, datefmt=DATE_FORMAT)

    if rich_output:
        console: logging.Handler = RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)
    else:
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(formatter)
    console.setLevel(number)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(number)
    root.addHandler(console)

    if log_file:
        add_file_handler(root, log_file, level, formatter, max_file_size, backup_count)


def set_log_level(level: str) -> None:
    """Apply ``level`` to the root logger and every handler attached to it."""
    number = _level_number(level)
    root = logging.getLogger()
    root.setLevel(number)
    for handler in root.handlers:
        handler.setLevel(number)


def add_file_handler(
    logger: logging.Logger,
    file_path: str,
    level: str = "INFO",
    formatter: Optional[logging.Formatter] = None,
    max_file_size: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> RotatingFileHandler:
    """
    Attach a rotating file handler, creating the log directory when needed.

    Returns:
        The handler that was added
    """
    if not isinstance(logger, logging.Logger):
        raise ValueError("Logger must be a logging.Logger instance")
    if not isinstance(file_path, str) or not file_path:
        raise ValueError("File path must be a non-empty string")

    Path(file_path).parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(file_path, maxBytes=max_file_size, backupCount=backup_count)
    handler.setLevel(_level_number(level))
    handler.setFormatter(formatter or logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    return handler

"""
Console and rotating file handlers.
"""

from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional
import logging
import sys


def _configure(handler: logging.Handler, level: int, formatter: logging.Formatter,
               filters: Optional[List[logging.Filter]]) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    for f in filters or ():
        handler.addFilter(f)


def create_console_handler(
    level: int,
    formatter: logging.Formatter,
    filters: Optional[List[logging.Filter]] = None,
) -> logging.StreamHandler:
    """
    stdout handler.

    Example:
        >>> handler = create_console_handler(logging.DEBUG, TextFormatter())
    """
    handler = logging.StreamHandler(sys.stdout)
    _configure(handler, level, formatter, filters)
    return handler


def create_file_handler(
    file_path: str,
    level: int,
    formatter: logging.Formatter,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    filters: Optional[List[logging.Filter]] = None,
) -> RotatingFileHandler:
    """
    Size-rotated file handler; the parent directory is created if missing.

    Rotation keeps ``backup_count`` files: app.log, app.log.1, ... app.log.N
    """
    Path(file_path).parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        filename=file_path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding='utf-8',
    )
    _configure(handler, level, formatter, filters)
    return handler

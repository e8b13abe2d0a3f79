"""
Structured logger facade for http-request.
"""

from typing import Any, Optional
import logging

from ..utils import sanitize_fields
from .config import LoggingConfig
from .filters import ExtraFieldsFilter, RequestIdFilter
from .formatters import get_formatter
from .handlers import create_console_handler, create_file_handler


class RequestLogger:
    """
    Owns a named ``logging.Logger`` with handlers built from LoggingConfig.

    Keyword fields become record attributes (``extra=``); ``url``,
    ``headers`` and credential-like keys are sanitized first.

    Example:
        >>> with RequestLogger(LoggingConfig.create(level="DEBUG", format="json")) as log:
        ...     log.info("request sent", method="GET", url="https://api.example.com/?token=x")
    """

    def __init__(self, config: Optional[LoggingConfig] = None, name: str = "http_request"):
        self.config = config or LoggingConfig()
        self.name = name
        self._closed = False

        level = self.config.level.as_int()
        self._logger = logging.getLogger(name)
        self._logger.setLevel(level)
        self._logger.propagate = False
        self._logger.handlers.clear()

        filters = []
        if self.config.enable_request_id:
            filters.append(RequestIdFilter())
        if self.config.extra_fields:
            filters.append(ExtraFieldsFilter(self.config.extra_fields))

        formatter = get_formatter(self.config.format.value)

        if self.config.enable_console:
            self._logger.addHandler(create_console_handler(level, formatter, filters))

        if self.config.enable_file and self.config.file_path:
            self._logger.addHandler(create_file_handler(
                file_path=self.config.file_path,
                level=level,
                formatter=formatter,
                max_bytes=self.config.max_bytes,
                backup_count=self.config.backup_count,
                filters=filters,
            ))

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def log(self, level: int, message: str, **kwargs: Any) -> None:
        """Log ``message`` at ``level`` with sanitized keyword fields."""
        self._logger.log(level, message, extra=sanitize_fields(kwargs))

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self.log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log(logging.ERROR, message, **kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log at ERROR with the current exception's traceback."""
        self._logger.exception(message, extra=sanitize_fields(kwargs))

    def close(self) -> None:
        """
        Flush, close and detach every handler. Idempotent.

        Example:
            >>> log = RequestLogger(config)
            >>> log.close()
            >>> log.close()  # no-op
        """
        if self._closed:
            return

        for handler in list(self._logger.handlers):
            handler.flush()
            handler.close()
            self._logger.removeHandler(handler)

        self._closed = True

    def __enter__(self) -> "RequestLogger":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False


_default_logger: Optional[RequestLogger] = None


def get_logger(config: Optional[LoggingConfig] = None) -> RequestLogger:
    """
    Shared RequestLogger, created on first use.

    ``config`` is only honoured by the call that creates it; use
    configure_logging() to replace an existing one.
    """
    global _default_logger

    if _default_logger is None:
        _default_logger = RequestLogger(config)
    return _default_logger


def configure_logging(config: LoggingConfig) -> RequestLogger:
    """Replace the shared RequestLogger, closing the previous one."""
    global _default_logger

    if _default_logger is not None:
        _default_logger.close()
    _default_logger = RequestLogger(config)
    return _default_logger

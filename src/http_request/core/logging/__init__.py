"""
Logging for http-request.

Library modules log through ``logging.getLogger(__name__)`` and stay silent
unless the application configures handlers. RequestLogger is an opt-in
facade that sets up console/file output with request ids attached.

Example:
    >>> from http_request.core.logging import LoggingConfig, configure_logging
    >>> log = configure_logging(LoggingConfig.create(level="DEBUG", format="json"))
    >>> log.info("ready", service="billing")
"""

from .config import LoggingConfig, LogLevel, LogFormat
from .logger import RequestLogger, get_logger, configure_logging
from .formatters import JSONFormatter, TextFormatter, get_formatter
from .filters import (
    RequestIdFilter,
    ExtraFieldsFilter,
    set_request_id,
    get_request_id,
    clear_request_id,
    request_id_scope,
)
from .handlers import create_console_handler, create_file_handler

__all__ = [
    # Config
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    # Logger
    "RequestLogger",
    "get_logger",
    "configure_logging",
    # Formatters
    "JSONFormatter",
    "TextFormatter",
    "get_formatter",
    # Filters
    "RequestIdFilter",
    "ExtraFieldsFilter",
    "set_request_id",
    "get_request_id",
    "clear_request_id",
    "request_id_scope",
    # Handlers
    "create_console_handler",
    "create_file_handler",
]

"""
Hook emitting one record per request sent and per response received.
"""

from typing import Any, Dict, Optional, Union
import logging

import requests

from ..core.extension import Hook, HookOrder
from ..core.logging import RequestLogger
from ..core.utils import sanitize_fields

_default_logger = logging.getLogger(__name__)

LoggerLike = Union[RequestLogger, logging.Logger]


def _emit(target: LoggerLike, level: int, message: str, fields: Dict[str, Any]) -> None:
    if isinstance(target, RequestLogger):
        target.log(level, message, **fields)
    else:
        target.log(level, message, extra=sanitize_fields(fields))


def logging_hook(
    logger: Optional[LoggerLike] = None,
    order: int = HookOrder.LOGGING,
    level: int = logging.DEBUG,
) -> Hook:
    """
    Log "request sent" / "response received" with method, URL, status and elapsed ms.

    URLs and credential-like fields are sanitized before they are logged.

    Args:
        logger: RequestLogger or logging.Logger (module logger when None)
        order: Hook order; the default runs after auth and codec hooks
        level: Level of both records

    Example:
        >>> log = RequestLogger(LoggingConfig.create(level="DEBUG", format="json"))
        >>> Request(url="https://api.example.com/users", options=[logging_hook(log)]).do()
    """
    target = logger if logger is not None else _default_logger

    def on_request(request: requests.PreparedRequest) -> None:
        _emit(target, level, "request sent", {
            "method": request.method,
            "url": request.url,
        })

    def on_response(response: requests.Response) -> None:
        sent = response.request
        fields: Dict[str, Any] = {
            "method": sent.method if sent is not None else None,
            "url": sent.url if sent is not None else response.url,
            "status_code": response.status_code,
            "elapsed_ms": round(response.elapsed.total_seconds() * 1000, 2),
        }
        _emit(target, level, "response received", fields)

    return Hook(name="logging", order=order, on_request=on_request, on_response=on_response)

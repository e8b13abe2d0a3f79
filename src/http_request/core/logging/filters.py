"""
Log filters adding request context to records.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional
import logging
import threading


# Thread-local storage for the in-flight request id
_request_id_storage = threading.local()


def set_request_id(request_id: str) -> None:
    """
    Set the request id for the current thread.

    Example:
        >>> set_request_id("3f2a...")
        >>> logger.info("Sending")  # record carries request_id
    """
    _request_id_storage.value = request_id


def get_request_id() -> Optional[str]:
    """Request id for the current thread, None if not set."""
    return getattr(_request_id_storage, 'value', None)


def clear_request_id() -> None:
    if hasattr(_request_id_storage, 'value'):
        delattr(_request_id_storage, 'value')


@contextmanager
def request_id_scope(request_id: Optional[str]) -> Iterator[None]:
    """
    Bind ``request_id`` to the current thread for the duration of the block.

    The previous id (if any) is restored on exit, so nested requests made
    from inside a hook keep their own ids.
    """
    previous = get_request_id()
    if request_id:
        set_request_id(request_id)
    try:
        yield
    finally:
        if previous is None:
            clear_request_id()
        else:
            set_request_id(previous)


class RequestIdFilter(logging.Filter):
    """
    Adds ``request_id`` to every record emitted while a request is in flight.

    Example:
        >>> handler.addFilter(RequestIdFilter())
    """

    def filter(self, record: logging.LogRecord) -> bool:
        request_id = get_request_id()
        if request_id and not hasattr(record, 'request_id'):
            record.request_id = request_id
        return True


class ExtraFieldsFilter(logging.Filter):
    """
    Adds static fields (service, environment, ...) to every record.

    Fields already present on the record are left untouched.

    Example:
        >>> handler.addFilter(ExtraFieldsFilter({"service": "billing", "env": "prod"}))
    """

    def __init__(self, extra_fields: Dict[str, Any]):
        super().__init__()
        self.extra_fields = dict(extra_fields)

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.extra_fields.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True

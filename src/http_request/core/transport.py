# src/http_request/core/transport.py
"""
Transport contract and the default requests-based implementation.

A transport turns a prepared request into a response. Hooks wrap the
baseline transport through ``Hook.handle_request``.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Union
import logging
import threading
import time

import requests
from requests.adapters import HTTPAdapter

from .config import TransportConfig
from .context import Context

logger = logging.getLogger(__name__)


class Transport(ABC):
    """
    Executes one HTTP exchange.

    Implementations must honour ``context``: call ``context.check()`` before
    sending and bound timeouts by ``context.remaining()``.
    """

    @abstractmethod
    def round_trip(self, request: requests.PreparedRequest, context: Context) -> requests.Response:
        """Send ``request`` and return the response."""
        pass


class TransportFunc(Transport):
    """
    Adapts a plain function to the Transport interface.

    Example:
        >>> def fake(request, context):
        ...     response = requests.Response()
        ...     response.status_code = 204
        ...     return response
        >>> transport = TransportFunc(fake)
    """

    def __init__(self, fn: Callable[[requests.PreparedRequest, Context], requests.Response]):
        self._fn = fn

    def round_trip(self, request: requests.PreparedRequest, context: Context) -> requests.Response:
        return self._fn(request, context)

    def __repr__(self) -> str:
        return f"TransportFunc({getattr(self._fn, '__name__', self._fn)!r})"


TransportLike = Union[Transport, Callable[[requests.PreparedRequest, Context], requests.Response]]


def as_transport(value: TransportLike) -> Transport:
    """Return ``value`` as a Transport, wrapping plain callables."""
    if isinstance(value, Transport):
        return value
    if callable(value):
        return TransportFunc(value)
    raise TypeError(f"expected Transport or callable, got {type(value).__name__}")


class SessionTransport(Transport):
    """
    Transport backed by a pooled ``requests.Session``.

    Args:
        config: TransportConfig (defaults are used when None)
        session: Existing session to reuse; it is not closed by close()

    Example:
        >>> with SessionTransport(TransportConfig.create(timeout=10)) as transport:
        ...     Request(url="https://example.com", options=[use_transport(transport)]).do()
    """

    def __init__(self, config: Optional[TransportConfig] = None, session: Optional[requests.Session] = None):
        self._config = config or TransportConfig()
        self._owns_session = session is None
        self._session = session if session is not None else self._create_session()
        self._exchange_logger = None
        if self._config.logging:
            from .logging import RequestLogger
            self._exchange_logger = RequestLogger(
                config=self._config.logging,
                name="http_request.transport",
            )

    @property
    def config(self) -> TransportConfig:
        return self._config

    @property
    def session(self) -> requests.Session:
        return self._session

    def _create_session(self) -> requests.Session:
        """Create configured session."""
        session = requests.Session()

        adapter = HTTPAdapter(
            pool_connections=self._config.pool.pool_connections,
            pool_maxsize=self._config.pool.pool_maxsize,
            pool_block=self._config.pool.pool_block,
            max_retries=0,  # ретраи не входят в транспорт
        )
        session.mount('http://', adapter)
        session.mount('https://', adapter)
        session.max_redirects = self._config.pool.max_redirects

        if self._config.proxies:
            session.proxies.update(self._config.proxies)

        return session

    def round_trip(self, request: requests.PreparedRequest, context: Context) -> requests.Response:
        context.check()

        for name, value in self._config.headers.items():
            if name not in request.headers:
                request.headers[name] = value

        send_kwargs: dict = {
            "timeout": self._config.timeout.bounded(context.remaining()),
            "verify": self._config.verify_ssl,
            "allow_redirects": self._config.allow_redirects,
        }
        if self._config.proxies:
            send_kwargs["proxies"] = dict(self._config.proxies)

        start_time = time.time()
        response = self._session.send(request, **send_kwargs)

        if self._exchange_logger is not None:
            self._exchange_logger.debug(
                "Round trip completed",
                method=request.method,
                url=request.url,
                status_code=response.status_code,
                duration_ms=round((time.time() - start_time) * 1000, 2),
                request_id=context.request_id,
            )
        return response

    def close(self) -> None:
        """Close the owned session and the exchange logger."""
        if self._exchange_logger is not None:
            self._exchange_logger.close()
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "SessionTransport":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> bool:
        self.close()
        return False


# ==================== Default transport ====================

_default_transport: Optional[Transport] = None
_default_lock = threading.Lock()


def default_transport() -> Transport:
    """
    Baseline transport used by Extension.round_trip.

    Created lazily as a SessionTransport with default config.
    """
    global _default_transport

    with _default_lock:
        if _default_transport is None:
            _default_transport = SessionTransport()
            logger.debug("Created default SessionTransport")
        return _default_transport


def set_default_transport(transport: Optional[TransportLike]) -> Optional[Transport]:
    """
    Replace the baseline transport; None resets to a lazily created default.

    Returns:
        The previous transport (None if none was created yet)
    """
    global _default_transport

    with _default_lock:
        previous = _default_transport
        _default_transport = as_transport(transport) if transport is not None else None
        return previous

# src/http_request/contrib/httpx_transport.py
"""
Транспорт на базе httpx.

Принимает тот же ``requests.PreparedRequest`` и возвращает
``requests.Response``, поэтому hooks работают без изменений.

Установка: pip install http-request-core[httpx]
"""

from datetime import timedelta
from typing import Any, Dict, Optional
import logging
import time

try:
    import httpx
except ImportError:
    raise ImportError(
        "httpx is required for HttpxTransport. "
        "Install with: pip install http-request-core[httpx]"
    )

import requests
from requests.structures import CaseInsensitiveDict

from ..core.config import TimeoutConfig, TransportConfig
from ..core.context import Context
from ..core.transport import Transport
from ..core.utils import sanitize_url

logger = logging.getLogger(__name__)


def _httpx_timeout(timeout: TimeoutConfig, remaining: Optional[float]) -> httpx.Timeout:
    connect, read = timeout.bounded(remaining)
    return httpx.Timeout(connect=connect, read=read, write=read, pool=connect)


def _request_content(body: Any) -> Any:
    if body is None:
        return None
    if hasattr(body, "read"):
        return body.read()
    return body


def to_requests_response(
    resp: httpx.Response,
    prepared: requests.PreparedRequest,
    elapsed: Optional[timedelta] = None,
) -> requests.Response:
    """
    Собрать ``requests.Response`` из прочитанного ``httpx.Response``.

    Тело уже в памяти, поэтому response.close() ничего не освобождает.
    """
    response = requests.Response()
    response.status_code = resp.status_code
    response._content = resp.content
    response._content_consumed = True
    response.headers = CaseInsensitiveDict(dict(resp.headers))
    response.url = str(resp.url)
    response.reason = resp.reason_phrase
    response.encoding = resp.charset_encoding
    response.elapsed = elapsed if elapsed is not None else timedelta(0)
    response.request = prepared
    for cookie in resp.cookies.jar:
        response.cookies.set_cookie(cookie)
    return response


class HttpxTransport(Transport):
    """
    Transport отправляющий запросы через ``httpx.Client``.

    Args:
        config: TransportConfig (таймауты, verify_ssl, redirects, proxies, headers)
        client: Готовый httpx.Client; не закрывается в close()

    Example:
        >>> with HttpxTransport(TransportConfig.create(timeout=10)) as transport:
        ...     Request(url="https://example.com", options=[use_transport(transport)]).fetch_string()
    """

    def __init__(self, config: Optional[TransportConfig] = None, client: Optional[httpx.Client] = None):
        self._config = config or TransportConfig()
        self._owns_client = client is None
        self._client = client if client is not None else self._create_client()

    @property
    def client(self) -> httpx.Client:
        return self._client

    def _create_client(self) -> httpx.Client:
        mounts: Dict[str, httpx.HTTPTransport] = {
            f"{scheme}://": httpx.HTTPTransport(proxy=url, verify=self._config.verify_ssl)
            for scheme, url in self._config.proxies.items()
        }
        return httpx.Client(
            timeout=_httpx_timeout(self._config.timeout, None),
            verify=self._config.verify_ssl,
            follow_redirects=self._config.allow_redirects,
            max_redirects=self._config.pool.max_redirects,
            limits=httpx.Limits(max_connections=self._config.pool.pool_maxsize),
            mounts=mounts or None,
        )

    def round_trip(self, request: requests.PreparedRequest, context: Context) -> requests.Response:
        context.check()

        for name, value in self._config.headers.items():
            if name not in request.headers:
                request.headers[name] = value

        outgoing = self._client.build_request(
            method=request.method,
            url=request.url,
            headers=dict(request.headers),
            content=_request_content(request.body),
            timeout=_httpx_timeout(self._config.timeout, context.remaining()),
        )
        start_time = time.time()
        resp = self._client.send(outgoing)
        try:
            resp.read()
        finally:
            resp.close()

        logger.debug(
            "httpx round trip %s %s -> %s",
            request.method, sanitize_url(request.url or ""), resp.status_code,
        )
        elapsed = timedelta(seconds=time.time() - start_time)
        return to_requests_response(resp, request, elapsed)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> bool:
        self.close()
        return False

"""
Debug hook: dumps requests and responses to a text stream.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Optional, TextIO, Tuple
from urllib.parse import urlsplit
import sys

import requests

from ..core.extension import Hook, HookOrder

_HTTP_VERSIONS = {10: "HTTP/1.0", 11: "HTTP/1.1", 20: "HTTP/2", 30: "HTTP/3"}


@dataclass
class DebugOptions:
    """
    Options for debug_hook().

    Attributes:
        disable: Turn the dump off
        body: Include request and response bodies
        out: Output stream (sys.stderr when None)
        error_only: Only dump responses considered errors
        is_error: Error predicate (default: status code >= 400)
    """

    disable: bool = False
    body: bool = False
    out: Optional[TextIO] = None
    error_only: bool = False
    is_error: Optional[Callable[[requests.Response], bool]] = None

    def should_dump(self, response: requests.Response) -> bool:
        if self.disable:
            return False
        if not self.error_only:
            return True
        if self.is_error is not None:
            return self.is_error(response)
        return response.status_code >= 400


def _body_text(body: object) -> str:
    if body is None:
        return ""
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        return body
    return "<streaming body>"


def _header_lines(headers: Iterable[Tuple[str, str]]) -> str:
    return "".join(f"{name}: {value}\r\n" for name, value in headers)


def dump_request(request: requests.PreparedRequest, body: bool = False) -> str:
    """Wire-like dump of a prepared request."""
    host = urlsplit(request.url or "").netloc
    headers = [("Host", host)] + [(k, v) for k, v in request.headers.items() if k.lower() != "host"]
    text = f"{request.method} {request.path_url} HTTP/1.1\r\n" + _header_lines(headers) + "\r\n"
    if body:
        text += _body_text(request.body)
    return text


def dump_response(response: requests.Response, body: bool = False) -> str:
    """Wire-like dump of a response; reading the body caches it on the response."""
    version = _HTTP_VERSIONS.get(getattr(response.raw, "version", 11), "HTTP/1.1")
    text = f"{version} {response.status_code} {response.reason or ''}".rstrip() + "\r\n"
    text += _header_lines(response.headers.items()) + "\r\n"
    if body:
        text += _body_text(response.content)
    return text


def debug_hook(options: Optional[DebugOptions] = None) -> Hook:
    """
    Hook printing every exchange, running after all other hooks.

    Example:
        >>> Request(url="https://httpbin.org/get", options=[debug_hook(DebugOptions(body=True))]).do()
        -> GET https://httpbin.org/get
        GET /get HTTP/1.1
        ...
    """
    options = options or DebugOptions()

    def out() -> TextIO:
        return options.out if options.out is not None else sys.stderr

    def on_request(request: requests.PreparedRequest) -> None:
        if options.disable:
            return
        print("->", request.method, request.url, file=out())
        print(dump_request(request, options.body), file=out())

    def on_response(response: requests.Response) -> None:
        if not options.should_dump(response):
            return
        sent = response.request
        print("<-", sent.method if sent else "", sent.url if sent else response.url, file=out())
        print(dump_response(response, options.body), file=out())

    return Hook(name="debug", order=HookOrder.DEBUG, on_request=on_request, on_response=on_response)

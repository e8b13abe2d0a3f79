# src/http_request/core/request.py
"""
Declarative request descriptor: composition, reconciliation and execution.

Lifecycle:
    Request(...)                      literal, nothing runs
      .with_request(...) / .with_*    pure combination, returns copies
      .reconcile()                    one-shot: options, method, query, URL
      .prepare() / .new_request()     body encode, PreparedRequest, on_request
      .do() / .fetch*()               round trip, on_response, decode
"""

from collections import deque
from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable, Deque, Dict, Iterable, List, Optional, Tuple
from urllib.parse import urlsplit, urlunsplit
import logging

import requests
from requests.exceptions import InvalidSchema, InvalidURL, MissingSchema

from .coercion import values_of
from .context import Context
from .exceptions import CoercionError, InvalidOptionTypeError, InvalidURLError, QueryBuildError
from .extension import Extension, Hook
from .logging.filters import request_id_scope
from .options import Mutate, OptionKind, TryMutate, classify_option
from .slots import RequestSlot, ResponseSlot
from .values import Values

logger = logging.getLogger(__name__)


@dataclass
class Request:
    """
    Description of an HTTP request, not a live object.

    Combinators (``with_request``, ``with_hooks``, ``with_options``) never
    mutate their receiver. ``reconcile()`` mutates in place and must not run
    twice on the same in-flight value.

    Attributes:
        method: HTTP method, GET when empty
        base_url: Prefix for ``url`` values starting with "/"
        url: Relative or absolute URL
        query: Any value accepted by values_of(), converted lazily
        raw_query: Pre-encoded query string, takes precedence over ``query``
        raw_body: Pre-encoded body, takes precedence over ``body``
        get_body: Repeatable body producer (bytes, str, file-like or iterable)
        body: Any value, encoded lazily by the Extension
        header: Request headers
        context: Cancellation/deadline carrier, background when None
        values: Free-form values for hooks and options
        options: Deferred option entries (see core.options)
        extension: Resolved hook chain
        last_error: Sticky failure; once set every operation re-raises it

    Example:
        >>> api = Request(base_url="https://api.example.com", options=[JSON_ENCODE, JSON_DECODE])
        >>> out = Slot()
        >>> api.with_request(Request(method="POST", url="/users", body={"name": "wener"})).fetch(out)
    """

    method: str = ""
    base_url: str = ""
    url: str = ""
    query: Any = None
    raw_query: str = ""
    raw_body: Optional[bytes] = None
    get_body: Optional[Callable[[], Any]] = None
    body: Any = None
    header: Values = field(default_factory=Values)
    context: Optional[Context] = None
    values: Values = field(default_factory=Values)
    options: List[Any] = field(default_factory=list)
    extension: Extension = field(default_factory=Extension)
    last_error: Optional[BaseException] = None

    def __post_init__(self):
        if not isinstance(self.header, Values):
            self.header = Values(self.header)
        if not isinstance(self.values, Values):
            self.values = Values(self.values)
        if not isinstance(self.extension, Extension):
            self.extension = Extension(self.extension)
        self.options = list(self.options or ())

    def copy(self, **changes: Any) -> "Request":
        """Copy with independent header/values/options containers."""
        changes.setdefault("header", self.header.clone())
        changes.setdefault("values", self.values.clone())
        changes.setdefault("options", list(self.options))
        return replace(self, **changes)

    # ==================== Composition ====================

    def with_request(self, other: "Request") -> "Request":
        """
        Merge ``other`` over this request and return the result.

        - method / base_url / url: other wins when non-empty
        - raw_body / body / get_body / context: other wins when not None
        - query: see _merge_query
        - header / values: ours first, other's appended per key
        - options: other's placed before ours
        - extension: other's hooks inserted as the newest batch
        - last_error: ours is kept, else other's

        Example:
            >>> Request(method="GET").with_request(Request(method="POST")).method
            'POST'
        """
        merged = self.copy()

        if other.method:
            merged.method = other.method
        if other.base_url:
            merged.base_url = other.base_url
        if other.url:
            merged.url = other.url

        if other.raw_body is not None:
            merged.raw_body = other.raw_body
        if other.body is not None:
            merged.body = other.body
        if other.get_body is not None:
            merged.get_body = other.get_body
        if other.context is not None:
            merged.context = other.context

        merged.query, merged.raw_query = self._merge_query(other)

        merged.header = self.header.clone().merge(other.header)
        merged.values = self.values.clone().merge(other.values)
        merged.options = list(other.options) + list(self.options)
        merged.extension = self.extension.with_hooks(*other.extension.hooks)
        if merged.last_error is None:
            merged.last_error = other.last_error
        return merged

    def _merge_query(self, other: "Request") -> Tuple[Any, str]:
        if other.raw_query:
            return self.query, other.raw_query
        if self.query is None:
            return other.query, self.raw_query
        if other.query is None:
            return self.query, self.raw_query

        try:
            base = values_of(self.query)
            override = values_of(other.query)
        except CoercionError as e:
            logger.warning("Query merge failed, using override query as-is: %s", e)
            return other.query, self.raw_query
        return base.clone().merge(override), self.raw_query

    def with_hooks(self, *hooks: Hook) -> "Request":
        """Copy with ``hooks`` inserted into the extension as one batch."""
        return self.copy(extension=self.extension.with_hooks(*hooks))

    def with_options(self, *options: Any) -> "Request":
        """Copy with ``options`` appended."""
        return self.copy(options=list(self.options) + list(options))

    # ==================== Reconciliation ====================

    def reconcile(self) -> None:
        """
        Apply deferred options and resolve method, query and URL (in place).

        Raises:
            InvalidOptionTypeError: An option nobody handles
            QueryBuildError: ``query`` cannot be converted
            InvalidURLError: The final URL does not parse
            Exception: Whatever a mutator, nested request or handle_option raised
        """
        if self.last_error is not None:
            raise self.last_error

        pending: Deque[Any] = deque(self.options)
        self._register_hooks(pending)
        while pending:
            self._apply_option(pending.popleft(), pending)
            if self.last_error is not None:
                raise self.last_error
        self.options = []

        if not self.method:
            self.method = "GET"

        if not self.raw_query and self.query is not None:
            try:
                self.raw_query = values_of(self.query).encode()
            except CoercionError as e:
                self.last_error = QueryBuildError(f"build query values: {e}")
                raise self.last_error from e

        self.url = self._resolve_url()

        if self.context is None:
            self.context = Context.background()

    def _register_hooks(self, options: Iterable[Any]) -> None:
        # reverse walk; the batch is prepended so later-declared hooks win ties
        batch = [option for option in reversed(list(options)) if isinstance(option, Hook)]
        if batch:
            self.extension = self.extension.with_hooks(*batch)

    def _apply_option(self, option: Any, pending: Deque[Any]) -> None:
        kind = classify_option(option)

        if kind in (OptionKind.NONE, OptionKind.HOOK):
            return

        if kind is OptionKind.NESTED_REQUEST:
            self._fold(option, pending)
            return

        if kind in (OptionKind.MUTATOR, OptionKind.FALLIBLE_MUTATOR):
            fn = option.fn if isinstance(option, (Mutate, TryMutate)) else option
            try:
                result = fn(self)
            except Exception as e:
                self.last_error = e
                return
            if isinstance(result, Exception):
                self.last_error = result
            return

        try:
            handled = self.extension.handle_option(self, option)
        except Exception as e:
            self.last_error = e
            return
        if not handled:
            self.last_error = InvalidOptionTypeError(option)

    def _fold(self, nested: "Request", pending: Deque[Any]) -> None:
        """Merge a nested Request option into self; its options run next."""
        merged = self.with_request(nested.copy(options=[]))
        for f in fields(self):
            if f.name != "options":
                setattr(self, f.name, getattr(merged, f.name))

        self._register_hooks(nested.options)
        pending.extendleft(reversed(nested.options))

    def _resolve_url(self) -> str:
        url = self.url
        if url.startswith("/") and self.base_url:
            url = self.base_url + url
        if not url:
            url = self.base_url

        if any(ord(c) < 0x20 or ord(c) == 0x7F for c in url):
            self.last_error = InvalidURLError(url, "invalid control character in URL")
            raise self.last_error
        try:
            parsed = urlsplit(url)
            parsed.port  # validates the port
        except ValueError as e:
            self.last_error = InvalidURLError(url, str(e))
            raise self.last_error from e

        if self.raw_query:
            query = Values.parse(self.raw_query).merge(Values.parse(parsed.query))
            url = urlunsplit(parsed._replace(query=query.encode()))
        return url

    # ==================== Execution ====================

    def prepare(self) -> "Call":
        """
        Reconcile a copy of this request and build the transport request.

        The returned Call carries both the resolved Request and the
        PreparedRequest; on_request hooks have already run.
        """
        if self.last_error is not None:
            raise self.last_error

        resolved = self.copy()
        resolved.reconcile()

        if resolved.raw_body is None and resolved.get_body is None and resolved.body is not None:
            try:
                resolved.raw_body = resolved.extension.encode(resolved.context, resolved.body)
            except Exception as e:
                resolved.last_error = e
                raise

        data: Any = None
        if resolved.raw_body:
            data = resolved.raw_body
        elif resolved.get_body is not None:
            data = resolved.get_body()

        prepared = requests.PreparedRequest()
        try:
            prepared.prepare(
                method=resolved.method,
                url=resolved.url,
                headers=_flatten_header(resolved.header),
                data=data,
            )
        except (MissingSchema, InvalidSchema, InvalidURL) as e:
            resolved.last_error = InvalidURLError(resolved.url, str(e))
            raise resolved.last_error from e

        with request_id_scope(resolved.context.request_id):
            resolved.extension.on_request(prepared)
        return Call(resolved, prepared)

    def new_request(self) -> requests.PreparedRequest:
        """Reconcile and build the transport request (see prepare())."""
        return self.prepare().prepared

    def do(self) -> requests.Response:
        """
        Execute the request. The caller owns (and must close) the response.

        Transport exceptions propagate unchanged.
        """
        return self.prepare().send()

    def fetch_bytes(self) -> Tuple[bytes, requests.Response]:
        """Execute, read the whole body and close the response."""
        response = self.do()
        return _drain(response), response

    def fetch_string(self) -> Tuple[str, requests.Response]:
        """Like fetch_bytes(), decoded with the declared charset or UTF-8."""
        data, response = self.fetch_bytes()
        return _decode_text(data, response), response

    def fetch(self, *out: Any) -> requests.Response:
        """
        Execute, read the body once and fill every output target.

        Targets:
            RequestSlot / ResponseSlot: receive the prepared request / response
            anything else: passed to Extension.decode with the body bytes

        Targets filled before a failing one keep their values.

        Example:
            >>> out, raw = Slot(), ResponseSlot()
            >>> Request(url="https://httpbin.org/get", options=[JSON_DECODE]).fetch(out, raw)
            >>> raw.value.status_code
            200
        """
        call = self.prepare()
        response = call.send()
        data = _drain(response)

        resolved = call.request
        for target in out:
            if isinstance(target, RequestSlot):
                target.value = call.prepared
            elif isinstance(target, ResponseSlot):
                target.value = response
            else:
                resolved.extension.decode(resolved.context, data, target)
        return response


@dataclass
class Call:
    """
    A resolved Request paired with its PreparedRequest.

    The execution layer passes this explicitly instead of stashing the
    resolved Request somewhere the transport request can reach.
    """

    request: Request
    prepared: requests.PreparedRequest

    def send(self) -> requests.Response:
        """Round trip through the extension, then run on_response hooks."""
        extension = self.request.extension
        context = self.request.context

        with request_id_scope(context.request_id):
            response = extension.round_trip(self.prepared, context)
            try:
                extension.on_response(response)
            except Exception:
                if response is not None:
                    response.close()
                raise
        return response


def _flatten_header(header: Values) -> Dict[str, str]:
    return {key: ", ".join(values) for key, values in header.items() if values}


def _drain(response: requests.Response) -> bytes:
    try:
        return response.content or b""
    finally:
        response.close()


def _declared_charset(response: requests.Response) -> Optional[str]:
    """Charset named in Content-Type, without the ISO-8859-1 text/* fallback."""
    for param in response.headers.get("Content-Type", "").split(";")[1:]:
        key, _, value = param.partition("=")
        if key.strip().lower() == "charset" and value.strip():
            return value.strip().strip("\"'")
    return None


def _decode_text(data: bytes, response: requests.Response) -> str:
    charset = _declared_charset(response) or "utf-8"
    try:
        return data.decode(charset, errors="replace")
    except LookupError:
        logger.warning("Unknown charset %r, decoding as utf-8", charset)
        return data.decode("utf-8", errors="replace")

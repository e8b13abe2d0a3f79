"""
Hook / Extension pipeline.

Порядок выполнения:
    Extension хранит hooks отсортированными по убыванию ``order``.
    Чем больше order, тем раньше hook вызывается в on_request/on_response
    и тем раньше он выигрывает single-dispatch encode/decode.
    При равном order выигрывает последняя добавленная пачка hooks.

    Для round_trip hooks оборачивают транспорт в том же порядке, поэтому
    hook с наименьшим order становится самой внешней обёрткой.
"""

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, Optional, Tuple, TYPE_CHECKING

import requests

from .context import Context
from .exceptions import NoDecoderError, NoEncoderError
from .transport import Transport, as_transport, default_transport

if TYPE_CHECKING:
    from .request import Request


class HookOrder:
    """
    Константы order для стандартных hooks.

    Больше order = выше приоритет: раньше вызывается, выигрывает encode/decode.

    Example:
        >>> Hook(name="auth", order=HookOrder.AUTH, on_request=sign)
    """
    AUTH = 100          # Подпись запроса до всех остальных on_request
    DEFAULT = 0         # По умолчанию
    TRANSPORT = -1      # use_transport: внешняя обёртка транспорта
    LOGGING = -50       # Логирование видит уже готовый запрос
    DEBUG = -100        # Dump последним


@dataclass(frozen=True)
class Hook:
    """
    Named bundle of optional lifecycle callbacks.

    Attributes:
        name: Informational only, never used for lookup
        order: Priority, larger runs first (see HookOrder)
        on_request: Mutates/inspects the prepared request; raising aborts
        on_response: Inspects the response; raising aborts
        handle_request: Wraps the next transport, returns a Transport or callable
        handle_option: Handles an option value the engine does not recognize;
            returns True when handled
        encode: Encodes Request.body to bytes
        decode: Decodes response bytes into an output target
    """

    name: str = ""
    order: int = HookOrder.DEFAULT
    on_request: Optional[Callable[[requests.PreparedRequest], Any]] = None
    on_response: Optional[Callable[[requests.Response], Any]] = None
    handle_request: Optional[Callable[[Transport], Any]] = None
    handle_option: Optional[Callable[["Request", Any], bool]] = None
    encode: Optional[Callable[[Context, Any], bytes]] = None
    decode: Optional[Callable[[Context, bytes, Any], Any]] = None


def _sort_hooks(hooks: Iterable[Hook]) -> Tuple[Hook, ...]:
    # sorted() is stable: equal orders keep the incoming relative position
    return tuple(sorted(hooks, key=lambda h: -h.order))


class Extension:
    """
    Immutable, sorted chain of hooks.

    Example:
        >>> ext = Extension().with_hooks(FORM_ENCODE).with_hooks(JSON_ENCODE)
        >>> ext.encode(Context.background(), {"a": 1})  # JSON wins the tie
        b'{"a":1}'
    """

    __slots__ = ("_hooks",)

    def __init__(self, hooks: Iterable[Hook] = ()):
        self._hooks = _sort_hooks(hooks)

    @property
    def hooks(self) -> Tuple[Hook, ...]:
        return self._hooks

    def with_hooks(self, *hooks: Hook) -> "Extension":
        """New extension with ``hooks`` inserted ahead of the existing ones, then sorted."""
        if not hooks:
            return self
        return Extension(tuple(hooks) + self._hooks)

    def __iter__(self) -> Iterator[Hook]:
        return iter(self._hooks)

    def __len__(self) -> int:
        return len(self._hooks)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Extension):
            return NotImplemented
        return self._hooks == other._hooks

    def __hash__(self) -> int:
        return hash(self._hooks)

    def __repr__(self) -> str:
        names = ", ".join(f"{h.name or '<anonymous>'}@{h.order}" for h in self._hooks)
        return f"Extension([{names}])"

    # ==================== Single dispatch ====================

    def decode(self, context: Context, data: bytes, out: Any) -> None:
        """Decode with the first hook that has a decoder."""
        for hook in self._hooks:
            if hook.decode is not None:
                hook.decode(context, data, out)
                return
        raise NoDecoderError()

    def encode(self, context: Context, body: Any) -> bytes:
        """Encode with the first hook that has an encoder."""
        for hook in self._hooks:
            if hook.encode is not None:
                return hook.encode(context, body)
        raise NoEncoderError()

    # ==================== Chained ====================

    def on_request(self, request: requests.PreparedRequest) -> None:
        for hook in self._hooks:
            if hook.on_request is not None:
                hook.on_request(request)

    def on_response(self, response: requests.Response) -> None:
        for hook in self._hooks:
            if hook.on_response is not None:
                hook.on_response(response)

    def handle_option(self, request: "Request", option: Any) -> bool:
        """
        Offer an unrecognized option to the hooks.

        Returns:
            True as soon as one hook handles it, False if none did
        """
        for hook in self._hooks:
            if hook.handle_option is not None and hook.handle_option(request, option):
                return True
        return False

    def round_trip(
        self,
        request: requests.PreparedRequest,
        context: Context,
        transport: Optional[Transport] = None,
    ) -> requests.Response:
        """
        Send through the baseline transport wrapped by every handle_request.

        Args:
            request: Prepared request
            context: Context of the resolved Request
            transport: Baseline (default_transport() when None)
        """
        next_transport = transport if transport is not None else default_transport()
        for hook in self._hooks:
            if hook.handle_request is not None:
                next_transport = as_transport(hook.handle_request(next_transport))
        return next_transport.round_trip(request, context)

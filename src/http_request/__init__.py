"""http-request - declarative, composable HTTP requests on top of requests."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .core.request import Request, Call
from .core.values import Values
from .core.coercion import values_of, value_string, query_field
from .core.slots import Slot, RequestSlot, ResponseSlot
from .core.context import Context
from .core.extension import Hook, HookOrder, Extension
from .core.options import Mutate, TryMutate, OptionKind
from .core.transport import (
    Transport,
    TransportFunc,
    SessionTransport,
    default_transport,
    set_default_transport,
)
from .core.config import TimeoutConfig, PoolConfig, TransportConfig
from .core.exceptions import (
    RequestBuilderError,
    ConfigurationError,
    InvalidOptionTypeError,
    InvalidURLError,
    QueryBuildError,
    CoercionError,
    CodecError,
    EncodeError,
    NoEncoderError,
    DecodeError,
    NoDecoderError,
    ContextError,
    ContextCancelledError,
    DeadlineExceededError,
    ConfigValidationError,
)
from .hooks import (
    JSON_ENCODE,
    JSON_DECODE,
    FORM_ENCODE,
    multipart_form_encode,
    DebugOptions,
    debug_hook,
    use_transport,
    bearer_auth,
    basic_auth,
    api_key_auth,
    logging_hook,
)

# Опциональный импорт HttpxTransport (требует httpx)
try:
    from .contrib.httpx_transport import HttpxTransport
    _HAS_HTTPX = True
except ImportError:
    _HAS_HTTPX = False
    HttpxTransport = None  # type: ignore

# Library stays silent unless the application configures logging
logging.getLogger('http_request').addHandler(logging.NullHandler())

try:
    __version__ = version("http-request-core")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = [
    # Request
    "Request",
    "Call",
    "Values",
    "values_of",
    "value_string",
    "query_field",
    "Slot",
    "RequestSlot",
    "ResponseSlot",
    "Context",

    # Hooks
    "Hook",
    "HookOrder",
    "Extension",
    "Mutate",
    "TryMutate",
    "OptionKind",
    "JSON_ENCODE",
    "JSON_DECODE",
    "FORM_ENCODE",
    "multipart_form_encode",
    "DebugOptions",
    "debug_hook",
    "use_transport",
    "bearer_auth",
    "basic_auth",
    "api_key_auth",
    "logging_hook",

    # Transport
    "Transport",
    "TransportFunc",
    "SessionTransport",
    "HttpxTransport",
    "default_transport",
    "set_default_transport",

    # Config
    "TimeoutConfig",
    "PoolConfig",
    "TransportConfig",

    # Exceptions
    "RequestBuilderError",
    "ConfigurationError",
    "InvalidOptionTypeError",
    "InvalidURLError",
    "QueryBuildError",
    "CoercionError",
    "CodecError",
    "EncodeError",
    "NoEncoderError",
    "DecodeError",
    "NoDecoderError",
    "ContextError",
    "ContextCancelledError",
    "DeadlineExceededError",
    "ConfigValidationError",

    # Version
    "__version__",
]

"""Core http-request модули."""

from .config import TimeoutConfig, PoolConfig, TransportConfig
from .context import Context
from .exceptions import (
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
from .values import Values
from .coercion import values_of, value_string, query_field
from .slots import Slot, RequestSlot, ResponseSlot
from .transport import (
    Transport,
    TransportFunc,
    SessionTransport,
    as_transport,
    default_transport,
    set_default_transport,
)
from .extension import Hook, HookOrder, Extension
from .options import OptionKind, Mutate, TryMutate, classify_option
from .request import Request, Call

__all__ = [
    # Config
    "TimeoutConfig",
    "PoolConfig",
    "TransportConfig",
    # Context
    "Context",
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
    # Values
    "Values",
    "values_of",
    "value_string",
    "query_field",
    "Slot",
    "RequestSlot",
    "ResponseSlot",
    # Transport
    "Transport",
    "TransportFunc",
    "SessionTransport",
    "as_transport",
    "default_transport",
    "set_default_transport",
    # Hooks
    "Hook",
    "HookOrder",
    "Extension",
    # Options
    "OptionKind",
    "Mutate",
    "TryMutate",
    "classify_option",
    # Request
    "Request",
    "Call",
]

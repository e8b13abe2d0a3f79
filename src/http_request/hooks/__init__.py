"""Standard hooks: codecs, auth, logging, debug dump, transport override."""

from .encoding import (
    JSON_ENCODE,
    JSON_DECODE,
    FORM_ENCODE,
    JSON_CONTENT_TYPE,
    FORM_CONTENT_TYPE,
    json_encode,
    json_decode,
    form_encode,
    multipart_form_encode,
)
from .auth import bearer_auth, basic_auth, api_key_auth
from .debug import DebugOptions, debug_hook, dump_request, dump_response
from .logging_hook import logging_hook
from .transport import use_transport

__all__ = [
    # Codecs
    "JSON_ENCODE",
    "JSON_DECODE",
    "FORM_ENCODE",
    "JSON_CONTENT_TYPE",
    "FORM_CONTENT_TYPE",
    "json_encode",
    "json_decode",
    "form_encode",
    "multipart_form_encode",
    # Auth
    "bearer_auth",
    "basic_auth",
    "api_key_auth",
    # Debug
    "DebugOptions",
    "debug_hook",
    "dump_request",
    "dump_response",
    # Logging
    "logging_hook",
    # Transport
    "use_transport",
]

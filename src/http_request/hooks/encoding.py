# src/http_request/hooks/encoding.py
"""
Body codecs: JSON, urlencoded form and multipart form.

Each codec sets its Content-Type in on_request unless the request already
has one.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, List, Mapping, Optional, Tuple
import dataclasses
import json

import requests
from urllib3 import encode_multipart_formdata
from urllib3.filepost import choose_boundary

from ..core.coercion import values_of
from ..core.context import Context
from ..core.exceptions import CoercionError, DecodeError, EncodeError
from ..core.extension import Hook
from ..core.slots import Slot, populate

JSON_CONTENT_TYPE = "application/json;charset=UTF-8"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
MULTIPART_CONTENT_TYPE = "multipart/form-data"


def _set_content_type(request: requests.PreparedRequest, content_type: str) -> None:
    if not request.headers.get("Content-Type"):
        request.headers["Content-Type"] = content_type


# ==================== JSON ====================

def _json_default(value: Any) -> Any:
    if isinstance(value, Slot):
        return value.value
    to_field_map = getattr(value, "to_field_map", None)
    if callable(to_field_map):
        return dict(to_field_map())
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, tuple) and hasattr(value, "_asdict"):
        return value._asdict()
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def json_encode(context: Context, body: Any) -> bytes:
    """
    Compact UTF-8 JSON.

    Example:
        >>> json_encode(Context.background(), {"name": "wener"})
        b'{"name":"wener"}'
    """
    try:
        text = json.dumps(body, separators=(",", ":"), ensure_ascii=False, default=_json_default)
    except (TypeError, ValueError) as e:
        raise EncodeError(f"json encode: {e}", content_type=JSON_CONTENT_TYPE) from e
    return text.encode("utf-8")


def json_decode(context: Context, data: bytes, out: Any) -> None:
    """Parse ``data`` and store it into ``out`` (see core.slots.populate)."""
    try:
        payload = json.loads(data)
    except ValueError as e:
        raise DecodeError(f"json decode: {e}", content_type=JSON_CONTENT_TYPE) from e
    try:
        populate(out, payload)
    except TypeError as e:
        raise DecodeError(f"json decode: {e}", content_type=JSON_CONTENT_TYPE) from e


JSON_ENCODE = Hook(
    name="json_encode",
    on_request=lambda request: _set_content_type(request, JSON_CONTENT_TYPE),
    encode=json_encode,
)

JSON_DECODE = Hook(name="json_decode", decode=json_decode)


# ==================== Form ====================

def form_encode(context: Context, body: Any) -> bytes:
    """
    Body converted with values_of() and urlencoded.

    Example:
        >>> form_encode(Context.background(), {"age": 18, "name": "wener"})
        b'age=18&name=wener'
    """
    try:
        return values_of(body).encode().encode("ascii")
    except CoercionError as e:
        raise EncodeError(f"form encode: {e}", content_type=FORM_CONTENT_TYPE) from e


FORM_ENCODE = Hook(
    name="form_encode",
    on_request=lambda request: _set_content_type(request, FORM_CONTENT_TYPE),
    encode=form_encode,
)


# ==================== Multipart ====================

def _multipart_value(name: str, value: Any) -> Any:
    if isinstance(value, tuple):
        if not 2 <= len(value) <= 3:
            raise EncodeError(
                f"multipart field {name!r}: expected (filename, data[, content_type])",
                content_type=MULTIPART_CONTENT_TYPE,
            )
        filename, data = value[0], value[1]
        if hasattr(data, "read"):
            data = data.read()
        return (filename, data) + tuple(value[2:])
    if hasattr(value, "read"):
        return value.read()
    if isinstance(value, (str, bytes)):
        return value
    return str(value)


def _multipart_fields(body: Any) -> List[Tuple[str, Any]]:
    if not isinstance(body, Mapping):
        raise EncodeError(
            f"multipart body must be a mapping, got {type(body).__name__}",
            content_type=MULTIPART_CONTENT_TYPE,
        )
    fields: List[Tuple[str, Any]] = []
    for name, value in body.items():
        if value is None:
            continue
        items = value if isinstance(value, list) else [value]
        fields.extend((str(name), _multipart_value(str(name), item)) for item in items)
    return fields


def _boundary_of(body: Any) -> Optional[str]:
    # body starts with b"--<boundary>\r\n"
    if not isinstance(body, bytes) or not body.startswith(b"--"):
        return None
    line, sep, _ = body.partition(b"\r\n")
    if not sep:
        return None
    return line[2:].decode("ascii", errors="replace")


def _multipart_on_request(request: requests.PreparedRequest) -> None:
    if request.headers.get("Content-Type"):
        return
    boundary = _boundary_of(request.body)
    if boundary:
        request.headers["Content-Type"] = f"{MULTIPART_CONTENT_TYPE}; boundary={boundary}"


def multipart_form_encode(boundary: Optional[str] = None) -> Hook:
    """
    Hook encoding a mapping body as multipart/form-data.

    Field values are strings, bytes, file objects, or
    ``(filename, data[, content_type])`` tuples; a list repeats the field.
    A fresh boundary is chosen per request unless ``boundary`` is given.

    Example:
        >>> Request(
        ...     method="POST",
        ...     url="https://api.example.com/upload",
        ...     body={"title": "report", "file": ("report.csv", open("report.csv", "rb"), "text/csv")},
        ...     options=[multipart_form_encode()],
        ... ).do()
    """

    def encode(context: Context, body: Any) -> bytes:
        data, _ = encode_multipart_formdata(_multipart_fields(body), boundary=boundary or choose_boundary())
        return data

    return Hook(name="multipart_form_encode", on_request=_multipart_on_request, encode=encode)

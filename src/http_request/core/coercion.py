"""
Conversion of arbitrary values into Values (query strings, form bodies).

Supported shapes:
- None, Values, mappings (str -> scalar / list of scalars)
- records: objects with ``to_field_map()``, dataclasses, namedtuples
- Slot boxes around any of the above

Records are turned into a field map first and then converted exactly like
a mapping, so both share one set of scalar formatting rules. A record or
mapping nested inside a field is written as compact JSON.
"""

import dataclasses
import json
from datetime import date, datetime
from enum import Enum
from numbers import Number
from typing import Any, Dict, Mapping, Optional

from .exceptions import CoercionError
from .slots import Slot
from .values import Values


def query_field(name: Optional[str] = None, *, omitempty: bool = False, **kwargs: Any) -> Any:
    """
    Dataclass field with a query/form name and "omit if empty" semantics.

    Example:
        >>> @dataclass
        ... class Search:
        ...     text: str = query_field("q")
        ...     page: Optional[int] = query_field(omitempty=True, default=None)
        >>> values_of(Search(text="python")).encode()
        'q=python'
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    if name:
        metadata["name"] = name
    if omitempty:
        metadata["omitempty"] = True
    return dataclasses.field(metadata=metadata, **kwargs)


def values_of(value: Any) -> Values:
    """
    Convert ``value`` to Values.

    Args:
        value: Value to convert

    Returns:
        Values (the same object when ``value`` already is one)

    Raises:
        CoercionError: Unsupported top-level type, or a failing to_field_map()

    Examples:
        >>> values_of({"name": "wener", "age": 18}).encode()
        'age=18&name=wener'
        >>> values_of({"v": [None, "v"]})
        Values({'v': ['', 'v']})
        >>> values_of(1)  # raises CoercionError
    """
    if value is None:
        return Values()
    if isinstance(value, Values):
        return value
    if isinstance(value, Slot):
        return values_of(value.value)
    if isinstance(value, Mapping):
        if all(isinstance(v, str) for v in value.values()):
            return Values({str(k): [v] for k, v in value.items()})
        return _values_of_mapping(value)

    field_map = _field_map_of(value)
    if field_map is not None:
        return _values_of_mapping(field_map)

    raise CoercionError(type(value).__name__)


def _values_of_mapping(mapping: Mapping[Any, Any]) -> Values:
    result = Values()
    for key, item in mapping.items():
        # None is the only value that vanishes entirely
        if item is None:
            continue
        name = str(key)
        if isinstance(item, (list, tuple)):
            for element in item:
                result.add(name, value_string(element))
        else:
            result.set(name, value_string(item))
    return result


def _field_map_of(value: Any) -> Optional[Dict[str, Any]]:
    """Field name -> value map for record-like objects, None otherwise."""
    to_field_map = getattr(value, "to_field_map", None)
    if callable(to_field_map):
        try:
            return dict(to_field_map())
        except Exception as e:
            raise CoercionError(
                type(value).__name__,
                f"{type(value).__name__}.to_field_map failed: {e}",
            ) from e

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        field_map: Dict[str, Any] = {}
        for f in dataclasses.fields(value):
            name = f.metadata.get("name", f.name)
            if name == "-":
                continue
            item = getattr(value, f.name)
            if f.metadata.get("omitempty") and _is_empty(item):
                continue
            field_map[name] = item
        return field_map

    if isinstance(value, tuple) and hasattr(value, "_asdict"):
        return dict(value._asdict())

    return None


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, Enum):
        return False
    if isinstance(value, Number):
        return value == 0
    if isinstance(value, (str, bytes, list, tuple, dict, set, frozenset)):
        return len(value) == 0
    return False


def value_string(value: Any) -> str:
    """
    Format a single value for a query string.

    Rules:
        - Slot boxes are unwrapped, None gives ""
        - zero values (0, 0.0, False, "", empty containers) give ""
        - datetime: RFC 3339, seconds precision, "Z" for UTC
        - True gives "true"
        - integral floats print without exponent or fraction
        - Enum members use their value
        - nested records and mappings become compact JSON

    Examples:
        >>> value_string(1000000000018.0)
        '1000000000018'
        >>> value_string(datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc))
        '2024-01-02T03:04:05Z'
    """
    while isinstance(value, Slot):
        value = value.value
    if _is_empty(value):
        return ""

    if isinstance(value, Enum):
        return value_string(value.value)
    if isinstance(value, datetime):
        return _format_rfc3339(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, bool):
        return "true"
    if isinstance(value, float):
        # prevent 1.000000000018e+12
        if value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, Mapping) or _field_map_of(value) is not None:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=_nested_default)
    return str(value)


def _format_rfc3339(value: datetime) -> str:
    text = value.replace(microsecond=0).isoformat()
    if text.endswith("+00:00"):
        text = text[:-6] + "Z"
    return text


def _nested_default(value: Any) -> Any:
    if isinstance(value, Slot):
        return value.value
    if isinstance(value, Mapping):
        return dict(value)
    field_map = _field_map_of(value)
    if field_map is not None:
        return field_map
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return _format_rfc3339(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)

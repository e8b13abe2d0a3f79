"""
Multi-valued string map used for headers, query strings and form bodies.

Values keeps keys in insertion order and every key maps to an ordered
list of strings.
"""

from typing import Any, Dict, Iterable, Iterator, List, Mapping, MutableMapping, Optional, Tuple, Union
from urllib.parse import parse_qsl, urlencode

ValuesLike = Union["Values", Mapping[str, Any], Iterable[Tuple[str, Any]]]


def _as_list(value: Any) -> List[str]:
    """Normalize a single value or a sequence of values to a fresh list; None is dropped."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v is not None]
    return [str(value)]


class Values(MutableMapping[str, List[str]]):
    """
    Ordered multi-map: ``str`` -> ``List[str]``.

    ``values[key]`` returns the full list, ``get(key)`` only the first value
    (or ``""``), mirroring how HTTP headers are usually read.

    Example:
        >>> v = Values({"name": "wener"})
        >>> v.add("tag", "a").add("tag", "b")
        Values({'name': ['wener'], 'tag': ['a', 'b']})
        >>> v.encode()
        'name=wener&tag=a&tag=b'
    """

    __slots__ = ("_data",)

    def __init__(self, data: Optional[ValuesLike] = None, **kwargs: Any):
        self._data: Dict[str, List[str]] = {}
        if data is not None:
            items = data.items() if isinstance(data, Mapping) else data
            for key, value in items:
                if value is not None:
                    self._data.setdefault(str(key), []).extend(_as_list(value))
        for key, value in kwargs.items():
            if value is not None:
                self._data.setdefault(key, []).extend(_as_list(value))

    # ==================== Mapping protocol ====================

    def __getitem__(self, key: str) -> List[str]:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[str(key)] = _as_list(value)

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Values({self._data!r})"

    # ==================== Multi-value access ====================

    def get(self, key: str, default: str = "") -> str:  # type: ignore[override]
        """First value stored under ``key``, or ``default``."""
        values = self._data.get(key)
        if not values:
            return default
        return values[0]

    def get_all(self, key: str) -> List[str]:
        """Copy of every value stored under ``key``."""
        return list(self._data.get(key, ()))

    def set(self, key: str, value: str) -> "Values":
        """Replace all values of ``key`` with a single value."""
        self._data[key] = [value]
        return self

    def add(self, key: str, value: str) -> "Values":
        """Append ``value`` to the values of ``key``."""
        self._data.setdefault(key, []).append(value)
        return self

    def delete(self, key: str) -> "Values":
        self._data.pop(key, None)
        return self

    # ==================== Combination ====================

    def clone(self) -> "Values":
        """Deep copy; the returned lists are not shared with this instance."""
        copied = Values()
        copied._data = {key: list(values) for key, values in self._data.items()}
        return copied

    def merge(self, other: Optional[ValuesLike]) -> "Values":
        """
        Append ``other``'s values after ours, key by key (in place).

        Existing values keep their position at the front of each list.
        """
        if not other:
            return self
        for key, values in Values(other)._data.items():
            self._data.setdefault(key, []).extend(values)
        return self

    def override(self, other: Optional[ValuesLike]) -> "Values":
        """Replace our values with ``other``'s for every key it holds (in place)."""
        if not other:
            return self
        for key, values in Values(other)._data.items():
            self._data[key] = values
        return self

    # ==================== Query string ====================

    def encode(self) -> str:
        """
        Encode as ``application/x-www-form-urlencoded``, keys sorted.

        Example:
            >>> Values({"b": "2", "a": ["1", "x y"]}).encode()
            'a=1&a=x+y&b=2'
        """
        return urlencode([(key, value) for key in sorted(self._data) for value in self._data[key]])

    @classmethod
    def parse(cls, query: str) -> "Values":
        """Parse a query string, keeping blank values."""
        parsed = cls()
        for key, value in parse_qsl(query, keep_blank_values=True):
            parsed.add(key, value)
        return parsed

"""Output targets for Request.fetch() and boxed values for coercion."""

import dataclasses
from typing import Any, Generic, Optional, Type, TypeVar

T = TypeVar("T")


class Slot(Generic[T]):
    """
    Mutable holder for a single value.

    Used as a decode target (``Request.fetch(slot)``) and as an explicit box
    around a value that coercion unwraps before converting it.

    Args:
        value: Initial value
        model: Optional type the decoded payload is converted to

    Example:
        >>> out = Slot(model=User)
        >>> Request(url="https://api.example.com/me", options=[JSON_DECODE]).fetch(out)
        >>> out.value.name
    """

    __slots__ = ("value", "model")

    def __init__(self, value: Optional[T] = None, model: Optional[Type[T]] = None):
        self.value = value
        self.model = model

    def __bool__(self) -> bool:
        return self.value is not None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value!r})"


class RequestSlot(Slot):
    """Receives the prepared transport request instead of a decoded body."""


class ResponseSlot(Slot):
    """Receives the transport response instead of a decoded body."""


def build_model(model: Type[T], payload: Any) -> T:
    """
    Convert a decoded payload (usually a dict) into ``model``.

    Dataclass fields honour the ``name`` metadata set by ``query_field()``.
    """
    from_field_map = getattr(model, "from_field_map", None)
    if callable(from_field_map):
        return from_field_map(payload)

    if dataclasses.is_dataclass(model) and isinstance(payload, dict):
        kwargs = {}
        for f in dataclasses.fields(model):
            key = f.metadata.get("name", f.name)
            if key in payload:
                kwargs[f.name] = payload[key]
        return model(**kwargs)

    return model(payload)


def populate(target: Any, payload: Any) -> None:
    """
    Store a decoded payload into ``target``.

    - Slot: assigned (converted through ``Slot.model`` when set)
    - dict: cleared and updated
    - list: replaced in place
    - any other object: attributes set from a dict payload

    Raises:
        TypeError: If the payload shape does not fit the target
    """
    if isinstance(target, Slot):
        target.value = build_model(target.model, payload) if target.model else payload
    elif isinstance(target, dict):
        if not isinstance(payload, dict):
            raise TypeError(f"cannot decode {type(payload).__name__} into dict")
        target.clear()
        target.update(payload)
    elif isinstance(target, list):
        if not isinstance(payload, list):
            raise TypeError(f"cannot decode {type(payload).__name__} into list")
        target[:] = payload
    elif isinstance(payload, dict):
        for key, value in payload.items():
            setattr(target, key, value)
    else:
        raise TypeError(
            f"cannot decode {type(payload).__name__} into {type(target).__name__}"
        )

"""
Option entries accepted by ``Request.options``.

Every entry is classified into one closed set of kinds before it is applied
by ``Request.reconcile()``:

    NONE              None, ignored
    NESTED_REQUEST    a Request, folded in with Request.with_request()
    HOOK              a Hook, registered into the Extension
    MUTATOR           Mutate(fn) or a bare one-argument callable
    FALLIBLE_MUTATOR  TryMutate(fn)
    UNRECOGNIZED      anything else, offered to Hook.handle_option

Both mutator kinds call fn(request); an exception raised or an Exception
instance returned fails the request.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, TYPE_CHECKING
import inspect

from .extension import Hook

if TYPE_CHECKING:
    from .request import Request


class OptionKind(Enum):
    NONE = "none"
    NESTED_REQUEST = "nested_request"
    HOOK = "hook"
    MUTATOR = "mutator"
    FALLIBLE_MUTATOR = "fallible_mutator"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class Mutate:
    """Option that mutates the request in place."""

    fn: Callable[["Request"], Any]


@dataclass(frozen=True)
class TryMutate:
    """Option that mutates the request and reports failure by returning an Exception."""

    fn: Callable[["Request"], Optional[Exception]]


def _accepts_one_argument(fn: Callable[..., Any]) -> bool:
    try:
        inspect.signature(fn).bind(None)
    except (TypeError, ValueError):
        return False
    return True


def classify_option(option: Any) -> OptionKind:
    """
    Classify an option entry.

    Example:
        >>> classify_option(JSON_ENCODE)
        <OptionKind.HOOK: 'hook'>
        >>> classify_option(lambda r: None)
        <OptionKind.MUTATOR: 'mutator'>
        >>> classify_option(lambda: None)
        <OptionKind.UNRECOGNIZED: 'unrecognized'>
    """
    from .request import Request

    if option is None:
        return OptionKind.NONE
    if isinstance(option, Request):
        return OptionKind.NESTED_REQUEST
    if isinstance(option, Hook):
        return OptionKind.HOOK
    if isinstance(option, Mutate):
        return OptionKind.MUTATOR
    if isinstance(option, TryMutate):
        return OptionKind.FALLIBLE_MUTATOR
    if callable(option) and not isinstance(option, type) and _accepts_one_argument(option):
        return OptionKind.MUTATOR
    return OptionKind.UNRECOGNIZED

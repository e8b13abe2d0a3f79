"""Cancellation and deadline carrier for a request."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional
import threading
import time
import uuid

from .exceptions import ContextCancelledError, DeadlineExceededError


@dataclass
class Context:
    """Context carried by a Request through reconciliation and execution.

    Transports are expected to call ``check()`` before sending and to bound
    their timeouts by ``remaining()``.

    Attributes:
        timeout: Seconds from creation until the deadline (None = no deadline)
        request_id: Unique identifier, also attached to log records
        metadata: Free-form values for hooks and transports
        deadline: Absolute ``time.monotonic()`` deadline
        parent: Context this one was derived from; its cancellation propagates

    Example:
        >>> ctx = Context.background().with_timeout(2.5)
        >>> ctx.remaining() <= 2.5
        True
        >>> ctx.cancel()
        >>> ctx.check()  # raises ContextCancelledError
    """

    timeout: Optional[float] = None
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    metadata: Dict[str, Any] = field(default_factory=dict)
    deadline: Optional[float] = None
    parent: Optional["Context"] = field(default=None, repr=False, compare=False)
    _cancelled: threading.Event = field(
        default_factory=threading.Event, init=False, repr=False, compare=False
    )

    def __post_init__(self):
        if self.timeout is not None:
            if self.timeout <= 0:
                raise ValueError("timeout must be positive")
            if self.deadline is None:
                self.deadline = time.monotonic() + self.timeout

    @classmethod
    def background(cls) -> "Context":
        """Empty context: never cancelled, no deadline."""
        return cls()

    def with_timeout(self, seconds: float) -> "Context":
        """Derive a context whose deadline is at most ``seconds`` away."""
        if seconds <= 0:
            raise ValueError("timeout must be positive")
        deadline = time.monotonic() + seconds
        if self.deadline is not None:
            deadline = min(deadline, self.deadline)
        return Context(
            timeout=seconds,
            request_id=self.request_id,
            metadata=dict(self.metadata),
            deadline=deadline,
            parent=self,
        )

    def with_value(self, key: str, value: Any) -> "Context":
        """Derive a context with one extra metadata entry."""
        metadata = dict(self.metadata)
        metadata[key] = value
        return Context(
            timeout=self.timeout,
            request_id=self.request_id,
            metadata=metadata,
            deadline=self.deadline,
            parent=self,
        )

    def value(self, key: str, default: Any = None) -> Any:
        return self.metadata.get(key, default)

    def cancel(self) -> None:
        """Cancel this context and every context derived from it."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        if self._cancelled.is_set():
            return True
        return self.parent is not None and self.parent.cancelled

    def remaining(self) -> Optional[float]:
        """Seconds left until the deadline, None when there is none."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def check(self) -> None:
        """
        Raise if the context is no longer usable.

        Raises:
            ContextCancelledError: cancel() was called here or on a parent
            DeadlineExceededError: the deadline has passed
        """
        if self.cancelled:
            raise ContextCancelledError(self.request_id)
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            raise DeadlineExceededError(self.request_id)

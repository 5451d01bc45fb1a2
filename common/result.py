from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from .errors import LiveMapError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Tagged outcome of a client call: exactly one of `value` / `error` is meaningful.
    Clients return this instead of raising so a failed save or search never
    unwinds the state machine that triggered it.
    """
    value: Optional[T] = None
    error: Optional[LiveMapError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: LiveMapError) -> "Result[T]":
        return cls(error=error)

    def unwrap(self) -> T:
        """Return the value or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value

"""Result type returned by write operations."""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from core.exceptions import StoreLedgerError

T = TypeVar("T")


@dataclass(frozen=True)
class WriteResult(Generic[T]):
    """
    Outcome of a write.

    Exactly one of ``value`` or ``error`` is meaningful: a failed write
    carries the error and has left the database unchanged.
    """

    value: T | None = None
    error: StoreLedgerError | None = None

    @classmethod
    def success(cls, value: T) -> "WriteResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: StoreLedgerError) -> "WriteResult[Any]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

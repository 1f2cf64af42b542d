"""Result<T> pattern: validation rules return this instead of raising for expected failures."""
from __future__ import annotations
from typing import Generic, Optional, TypeVar

from trackboard.domain.common.errors import InvalidArgument

T = TypeVar("T")


class Result(Generic[T]):
    def __init__(self, is_success: bool, value: Optional[T] = None, error: Optional[str] = None):
        self.is_success = is_success
        self.value = value
        self.error = error

    @classmethod
    def ok(cls, value: T) -> "Result[T]":
        return cls(is_success=True, value=value)

    @classmethod
    def fail(cls, error: str) -> "Result[T]":
        return cls(is_success=False, error=error)

    def unwrap(self) -> T:
        """Value on success; InvalidArgument carrying the error otherwise."""
        if not self.is_success:
            raise InvalidArgument(self.error or "Invalid input.")
        return self.value

    def __repr__(self) -> str:
        if self.is_success:
            return f"Result.ok({self.value!r})"
        return f"Result.fail({self.error!r})"

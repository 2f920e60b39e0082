"""Explicit success/failure value returned by model-backed operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from langki.errors import CardGenerationError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a value or the error that prevented it."""

    value: T | None = None
    error: CardGenerationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> Result[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: CardGenerationError) -> Result[T]:
        return cls(error=error)

    def unwrap(self) -> T:
        """Return the value or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

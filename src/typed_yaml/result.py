"""ConversionResult dataclass: the success-or-error outcome of a conversion.

Every converter returns a ConversionResult instead of raising, so composite
converters can inspect a child's outcome and extend its trace before
passing it on.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from typed_yaml.errors import ConversionError

__all__ = ["ConversionResult"]

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class ConversionResult(Generic[T]):
    """Outcome of converting a node: either a value or a ConversionError.

    Use the ``success`` and ``failure`` constructors rather than building
    instances directly.  ``success(None)`` is a valid success (for example an
    optional value read from a null node); test ``ok`` or truthiness, never
    ``value is None``.

    Attributes:
        value: The converted value.  None on failure.
        error: The error on failure.  None on success.
    """

    value: T | None = None
    error: ConversionError | None = None

    @classmethod
    def success(cls, value: T) -> ConversionResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: ConversionError) -> ConversionResult[Any]:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, or raise the carried ConversionError."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def unwrap_or(self, default: T) -> T:
        if self.error is not None:
            return default
        return self.value  # type: ignore[return-value]

"""ConversionError and ErrorKind: the diagnostics carried by failed conversions.

A ConversionError holds a human readable message and a trace of
NodeDescription entries.  The trace is ordered failure-site-first and
root-last: each composite converter that sees a child fail appends the
child's description on the way back up, so by the time the error reaches
the caller it describes the full path from the document root.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum, auto

from typed_yaml.tree.nodes import NodeDescription

__all__ = ["DEFAULT_TRACE_SEPARATOR", "ConversionError", "ErrorKind"]

DEFAULT_TRACE_SEPARATOR = " → "


class ErrorKind(StrEnum):
    """Category of a conversion failure.

    - KIND_MISMATCH:      the node's kind is not the one the converter needs.
    - SIZE_MISMATCH:      a collection has the wrong number of children.
    - PARSE_FAILURE:      scalar text does not match the target type's grammar.
    - RANGE_FAILURE:      a parsed number does not fit the target width.
    - KEY_NOT_FOUND:      a required map key is absent.
    - CONVERSION_FAILURE: a native failure normalized at a boundary helper.
    - LOAD_FAILURE:       the document could not be read or composed.
    """

    KIND_MISMATCH = auto()
    SIZE_MISMATCH = auto()
    PARSE_FAILURE = auto()
    RANGE_FAILURE = auto()
    KEY_NOT_FOUND = auto()
    CONVERSION_FAILURE = auto()
    LOAD_FAILURE = auto()


class ConversionError(Exception):
    """An error that occurred while converting a node tree to a typed value.

    Instances are treated as values: ``append_trace`` returns a new error and
    leaves the receiver untouched.  The class derives from ``Exception`` only
    so that ``ConversionResult.unwrap()`` can raise it.

    Args:
        message: Non-empty human readable description of the failure.
        trace:   Node descriptions from the failure site toward the root.
        kind:    Category of the failure.

    Raises:
        ValueError: If ``message`` is empty.
    """

    def __init__(
        self,
        message: str,
        trace: Iterable[NodeDescription] = (),
        kind: ErrorKind = ErrorKind.CONVERSION_FAILURE,
    ) -> None:
        if not message:
            msg = "ConversionError message must not be empty"
            raise ValueError(msg)
        super().__init__(message)
        self.message = message
        self.trace: tuple[NodeDescription, ...] = tuple(trace)
        self.kind = kind

    def append_trace(self, description: NodeDescription) -> ConversionError:
        """Return a copy of this error with ``description`` appended to the trace."""
        return ConversionError(self.message, (*self.trace, description), kind=self.kind)

    def format_trace(
        self,
        separator: str = DEFAULT_TRACE_SEPARATOR,
        verbose: bool = False,
    ) -> str:
        """Render the trace root-to-leaf as a single path string.

        Example: ``a → b → [2]``.  With ``verbose=True`` every segment also
        names the attempted type (when known) and the node's actual kind,
        e.g. ``b (list[int], sequence)``.
        """
        segments = []
        for description in reversed(self.trace):
            segment = description.label
            if verbose:
                details = [description.user_type] if description.user_type else []
                details.append(str(description.kind))
                segment = f"{segment} ({', '.join(details)})"
            segments.append(segment)
        return separator.join(segments)

    def format(self, separator: str = DEFAULT_TRACE_SEPARATOR) -> str:
        """Return the message followed by the rendered trace, if any."""
        if not self.trace:
            return self.message
        return f"{self.message} (at {self.format_trace(separator)})"

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return (
            f"ConversionError(message={self.message!r}, "
            f"trace={self.trace!r}, kind={self.kind!r})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConversionError):
            return NotImplemented
        return (self.kind, self.message, self.trace) == (
            other.kind,
            other.message,
            other.trace,
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.message, self.trace))

    def __reduce__(self) -> tuple[type[ConversionError], tuple[object, ...]]:
        return (type(self), (self.message, self.trace, self.kind))

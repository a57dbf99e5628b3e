"""ConverterConfig and BoolSyntax for conversion behaviour.

ConverterConfig is a frozen (immutable) dataclass passed to every converter.
BoolSyntax selects which scalar literals are accepted as booleans.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from typed_yaml.errors import DEFAULT_TRACE_SEPARATOR

__all__ = ["BoolSyntax", "ConverterConfig"]


class BoolSyntax(StrEnum):
    """Boolean literal sets.

    - YAML_1_1: y/yes/true/on and n/no/false/off (lower, Title and UPPER case).
    - YAML_1_2: true/false only (lower, Title and UPPER case).
    """

    YAML_1_1 = "yaml-1.1"
    YAML_1_2 = "yaml-1.2"


@dataclass(frozen=True, slots=True)
class ConverterConfig:
    """Immutable configuration shared by all converters of one conversion.

    Attributes:
        bool_syntax: Which literal set the ``bool`` converter accepts.
        trace_separator: Separator used by ``format_error`` between path
            segments.  Must be non-empty.
    """

    bool_syntax: BoolSyntax = BoolSyntax.YAML_1_1
    trace_separator: str = DEFAULT_TRACE_SEPARATOR

    def __post_init__(self) -> None:
        if not isinstance(self.bool_syntax, BoolSyntax):
            msg = f"bool_syntax must be a BoolSyntax, got {self.bool_syntax!r}"
            raise ValueError(msg)
        if not self.trace_separator:
            msg = "trace_separator must be a non-empty string"
            raise ValueError(msg)

"""Converters subpackage: primitive and composite node converters.

Re-exports the public API for the converters module:
- PRIMITIVE_CONVERTERS: the built-in scalar converters keyed by target type
- ArrayConverter, SequenceConverter, MappingConverter: the composite shapes
- OptionalConverter, EnumConverter, DataclassConverter: Python-native shapes
"""

from typed_yaml.converters.composites import (
    ArrayConverter,
    DataclassConverter,
    EnumConverter,
    FieldSpec,
    MappingConverter,
    OptionalConverter,
    SequenceConverter,
)
from typed_yaml.converters.primitives import (
    FLOAT_TYPES,
    INTEGER_TYPES,
    PRIMITIVE_CONVERTERS,
)

__all__ = [
    "FLOAT_TYPES",
    "INTEGER_TYPES",
    "PRIMITIVE_CONVERTERS",
    "ArrayConverter",
    "DataclassConverter",
    "EnumConverter",
    "FieldSpec",
    "MappingConverter",
    "OptionalConverter",
    "SequenceConverter",
]

"""Composite converters: fixed arrays, sequences, mappings, optionals,
enums and dataclass structures.

Composite converters are built by the dispatcher with the converters of
their children already resolved, so they never look a type up themselves.
On the first child failure a composite converter stops, appends the child's
NodeDescription to the error trace and returns the extended error; the
trace therefore grows outward from the failing leaf as the call stack
unwinds.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

import yaml

from typed_yaml.errors import ConversionError, ErrorKind
from typed_yaml.result import ConversionResult
from typed_yaml.tree.nodes import (
    NodeDescription,
    NodeKind,
    get_child,
    mapping_items,
    node_kind,
    scalar_text,
    sequence_items,
)
from typed_yaml.validators import expect_kind, expect_map, expect_sequence

if TYPE_CHECKING:
    from typed_yaml.config import ConverterConfig
    from typed_yaml.protocols import Converter

__all__ = [
    "ArrayConverter",
    "DataclassConverter",
    "EnumConverter",
    "FieldSpec",
    "MappingConverter",
    "OptionalConverter",
    "SequenceConverter",
    "is_required",
]


def _element_failure(
    result: ConversionResult[Any], index: int, element: yaml.Node, user_type: str
) -> ConversionResult[Any]:
    error = result.error.append_trace(  # type: ignore[union-attr]
        NodeDescription(
            name=str(index), kind=node_kind(element), user_type=user_type, index=True
        )
    )
    return ConversionResult.failure(error)


@dataclass(frozen=True, slots=True)
class ArrayConverter:
    """Converter for fixed-size arrays (``tuple[T1, ..., TN]``).

    Requires a sequence node with exactly ``len(elements)`` children.  Each
    position has its own converter, which also allows heterogeneous tuples.

    Attributes:
        elements:      Converters, one per position.
        element_types: Display names of the position types, used in traces.
    """

    elements: tuple[Converter, ...]
    element_types: tuple[str, ...]

    def __call__(
        self, node: yaml.Node | None, config: ConverterConfig
    ) -> ConversionResult[tuple[Any, ...]]:
        size = len(self.elements)
        error = expect_sequence(node, size)
        if error is not None:
            return ConversionResult.failure(error)

        values: list[Any] = []
        for index, element in enumerate(sequence_items(node)):  # type: ignore[arg-type]
            # Reject explicitly once the index reaches the fixed size.
            if index >= size:
                return ConversionResult.failure(
                    ConversionError(
                        f"sequence too long, expected {size}, now at index {index}",
                        kind=ErrorKind.SIZE_MISMATCH,
                    )
                )
            result = self.elements[index](element, config)
            if not result:
                return _element_failure(result, index, element, self.element_types[index])
            values.append(result.value)
        return ConversionResult.success(tuple(values))


@dataclass(frozen=True, slots=True)
class SequenceConverter:
    """Converter for dynamic sequences (``list[T]``, ``tuple[T, ...]``).

    A null node converts to an empty sequence, so an absent optional list
    and an explicitly empty one read the same.

    Attributes:
        element:      Converter applied to every element.
        element_type: Display name of the element type, used in traces.
        factory:      Builds the final container from the converted list.
    """

    element: Converter
    element_type: str
    factory: Callable[[list[Any]], Sequence[Any]] = list

    def __call__(
        self, node: yaml.Node | None, config: ConverterConfig
    ) -> ConversionResult[Sequence[Any]]:
        if node_kind(node) is NodeKind.NULL:
            return ConversionResult.success(self.factory([]))
        error = expect_sequence(node)
        if error is not None:
            return ConversionResult.failure(error)

        values: list[Any] = []
        for index, element in enumerate(sequence_items(node)):  # type: ignore[arg-type]
            result = self.element(element, config)
            if not result:
                return _element_failure(result, index, element, self.element_type)
            values.append(result.value)
        return ConversionResult.success(self.factory(values))


@dataclass(frozen=True, slots=True)
class MappingConverter:
    """Converter for string-keyed mappings (``dict[str, T]``).

    Keys must be scalars.  When the document repeats a key the last
    occurrence wins, matching how PyYAML itself constructs mappings.
    """

    value: Converter
    value_type: str

    def __call__(
        self, node: yaml.Node | None, config: ConverterConfig
    ) -> ConversionResult[dict[str, Any]]:
        error = expect_map(node)
        if error is not None:
            return ConversionResult.failure(error)

        values: dict[str, Any] = {}
        for key_node, value_node in mapping_items(node):  # type: ignore[arg-type]
            key_error = expect_kind(key_node, NodeKind.SCALAR)
            if key_error is not None:
                return ConversionResult.failure(
                    ConversionError(
                        f"unexpected map key type, expected scalar, got {node_kind(key_node)}",
                        kind=ErrorKind.KIND_MISMATCH,
                    )
                )
            name = scalar_text(key_node)
            result = self.value(value_node, config)
            if not result:
                return ConversionResult.failure(
                    result.error.append_trace(  # type: ignore[union-attr]
                        NodeDescription(
                            name=name, kind=node_kind(value_node), user_type=self.value_type
                        )
                    )
                )
            values[name] = result.value
        return ConversionResult.success(values)


@dataclass(frozen=True, slots=True)
class OptionalConverter:
    """Converter for ``T | None``: null and absent nodes become None."""

    inner: Converter

    def __call__(self, node: yaml.Node | None, config: ConverterConfig) -> ConversionResult[Any]:
        if node_kind(node) in (NodeKind.NULL, NodeKind.UNDEFINED):
            return ConversionResult.success(None)
        return self.inner(node, config)


@dataclass(frozen=True, slots=True)
class EnumConverter:
    """Converter for Enum types: scalar text is matched against member values, then names."""

    enum_type: type[Enum]

    def __call__(self, node: yaml.Node | None, config: ConverterConfig) -> ConversionResult[Enum]:
        error = expect_kind(node, NodeKind.SCALAR)
        if error is not None:
            return ConversionResult.failure(error)
        text = scalar_text(node)  # type: ignore[arg-type]
        for member in self.enum_type:
            if str(member.value) == text:
                return ConversionResult.success(member)
        member = self.enum_type.__members__.get(text)
        if member is not None:
            return ConversionResult.success(member)
        allowed = ", ".join(str(m.value) for m in self.enum_type)
        return ConversionResult.failure(
            ConversionError(
                f"cannot parse {text!r} as {self.enum_type.__name__}, expected one of: {allowed}",
                kind=ErrorKind.PARSE_FAILURE,
            )
        )


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """One init field of a dataclass target.

    Attributes:
        name:      Field name, also the map key it is read from.
        converter: Converter for the field's annotated type.
        type_name: Display name of the field type, used in traces.
        required:  True when the field has neither a default nor a default factory.
    """

    name: str
    converter: Converter
    type_name: str
    required: bool


@dataclass(frozen=True, slots=True)
class DataclassConverter:
    """Converter for dataclass structures.

    Each field is read from the map key of the same name.  Missing keys keep
    the field default; a missing required field is a KEY_NOT_FOUND failure.
    Keys without a matching field are ignored.  A ValueError or TypeError
    raised while constructing the instance, e.g. by ``__post_init__``, is a
    CONVERSION_FAILURE.
    """

    cls: type[Any]
    fields: tuple[FieldSpec, ...]

    def __call__(self, node: yaml.Node | None, config: ConverterConfig) -> ConversionResult[Any]:
        error = expect_map(node)
        if error is not None:
            return ConversionResult.failure(error)

        kwargs: dict[str, Any] = {}
        for spec in self.fields:
            child = get_child(node, spec.name)
            if child is None:
                if spec.required:
                    return ConversionResult.failure(
                        ConversionError(
                            f"no such key: {spec.name}", kind=ErrorKind.KEY_NOT_FOUND
                        )
                    )
                continue
            result = spec.converter(child, config)
            if not result:
                return ConversionResult.failure(
                    result.error.append_trace(  # type: ignore[union-attr]
                        NodeDescription(
                            name=spec.name, kind=node_kind(child), user_type=spec.type_name
                        )
                    )
                )
            kwargs[spec.name] = result.value
        try:
            value = self.cls(**kwargs)
        except (ValueError, TypeError) as exc:
            return ConversionResult.failure(
                ConversionError(
                    f"cannot construct {self.cls.__name__}: {exc}",
                    kind=ErrorKind.CONVERSION_FAILURE,
                )
            )
        return ConversionResult.success(value)


def is_required(field: dataclasses.Field[Any]) -> bool:
    return (
        field.default is dataclasses.MISSING
        and field.default_factory is dataclasses.MISSING
    )

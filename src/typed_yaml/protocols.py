"""Converter and YamlConvertible Protocols: the conversion extension points.

A converter is any callable taking a node and a ConverterConfig and returning
a ConversionResult.  Users plug in support for their own types either by
registering such a callable (``typed_yaml.register_converter``) or by giving
the type a ``from_yaml_node`` classmethod; no base class is needed.

Example::

    from typed_yaml import ConversionResult, parse_value
    from typed_yaml.validators import expect_scalar

    class Version:
        def __init__(self, text: str) -> None:
            self.parts = tuple(int(p) for p in text.split("."))

        @classmethod
        def from_yaml_node(cls, node, config):
            error = expect_scalar(node)
            if error is not None:
                return ConversionResult.failure(error)
            return ConversionResult.success(cls(node.value))

    parse_value(node, Version)  # no registration needed
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    import yaml

    from typed_yaml.config import ConverterConfig
    from typed_yaml.result import ConversionResult

__all__ = ["Converter", "YamlConvertible"]


class Converter(Protocol):
    """Structural protocol for converter callables.

    A converter must:
    - Accept a node (or None for an absent node) and a ConverterConfig.
    - Return a ConversionResult; failures are returned, never raised.
    - Leave the node untouched.
    """

    def __call__(
        self, node: yaml.Node | None, config: ConverterConfig
    ) -> ConversionResult[Any]: ...


@runtime_checkable
class YamlConvertible(Protocol):
    """Structural protocol for types that know how to build themselves from a node."""

    @classmethod
    def from_yaml_node(
        cls, node: yaml.Node | None, config: ConverterConfig
    ) -> ConversionResult[Any]: ...

"""typed-yaml - typed conversion of YAML node trees with traced diagnostics."""

from __future__ import annotations

import logging

from typed_yaml.api import format_error, load_yaml_file, parse_yaml
from typed_yaml.config import BoolSyntax, ConverterConfig
from typed_yaml.dispatch import (
    can_parse,
    converter_for,
    parse_value,
    register_converter,
    unregister_converter,
)
from typed_yaml.errors import ConversionError, ErrorKind
from typed_yaml.helpers import convert_child, set_if_exists
from typed_yaml.loader import compose_yaml, read_yaml_file
from typed_yaml.protocols import Converter, YamlConvertible
from typed_yaml.result import ConversionResult
from typed_yaml.tree.nodes import NodeDescription, NodeKind
from typed_yaml.validators import expect_map, expect_scalar, expect_sequence

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__: str = "0.1.0"
__all__: list[str] = [
    "BoolSyntax",
    "ConversionError",
    "ConversionResult",
    "Converter",
    "ConverterConfig",
    "ErrorKind",
    "NodeDescription",
    "NodeKind",
    "YamlConvertible",
    "can_parse",
    "compose_yaml",
    "convert_child",
    "converter_for",
    "expect_map",
    "expect_scalar",
    "expect_sequence",
    "format_error",
    "load_yaml_file",
    "parse_value",
    "parse_yaml",
    "read_yaml_file",
    "register_converter",
    "set_if_exists",
    "unregister_converter",
]

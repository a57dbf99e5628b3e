"""Primitive converters: scalar text to str, bool, integers and floats.

Each converter requires a scalar node and parses its text with the YAML core
schema literal grammar of the target type.  Fixed-width integer and float
targets are the numpy scalar types; a value outside the width's range is a
RANGE_FAILURE, never a wrapped or truncated value.

Integer grammar:  ``[-+]?[0-9]+``, ``[-+]?0x[0-9a-fA-F]+``, ``[-+]?0o[0-7]+``
Float grammar:    ``[-+]?(\\.[0-9]+|[0-9]+(\\.[0-9]*)?)([eE][-+]?[0-9]+)?``,
                  ``[-+]?.inf``, ``.nan`` (lower, Title and UPPER case)
"""

from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING, Any

import numpy as np

from typed_yaml.config import BoolSyntax, ConverterConfig
from typed_yaml.errors import ConversionError, ErrorKind
from typed_yaml.result import ConversionResult
from typed_yaml.tree.nodes import scalar_text
from typed_yaml.validators import expect_scalar

if TYPE_CHECKING:
    import yaml

    from typed_yaml.protocols import Converter

__all__ = [
    "FLOAT_TYPES",
    "INTEGER_TYPES",
    "PRIMITIVE_CONVERTERS",
    "convert_bool",
    "convert_float",
    "convert_int",
    "convert_str",
    "float_converter",
    "integer_converter",
]

# The C-named types are separate classes from the sized aliases on some
# platforms (np.longlong vs np.int64 on Linux); duplicates are dropped.
INTEGER_TYPES: tuple[type[np.integer[Any]], ...] = tuple(
    dict.fromkeys(
        (
            np.int8,
            np.int16,
            np.int32,
            np.int64,
            np.uint8,
            np.uint16,
            np.uint32,
            np.uint64,
            np.intc,
            np.uintc,
            np.longlong,
            np.ulonglong,
        )
    )
)

FLOAT_TYPES: tuple[type[np.floating[Any]], ...] = (
    np.float16,
    np.float32,
    np.float64,
    np.longdouble,
)

_INT_RE = re.compile(r"([-+]?)(0x[0-9a-fA-F]+|0o[0-7]+|[0-9]+)")
_FLOAT_RE = re.compile(r"[-+]?(?:\.[0-9]+|[0-9]+(?:\.[0-9]*)?)(?:[eE][-+]?[0-9]+)?")
_INF_RE = re.compile(r"([-+]?)\.(?:inf|Inf|INF)")
_NAN_RE = re.compile(r"\.(?:nan|NaN|NAN)")

_BOOL_LITERALS: dict[BoolSyntax, dict[str, bool]] = {
    BoolSyntax.YAML_1_2: {
        **dict.fromkeys(("true", "True", "TRUE"), True),
        **dict.fromkeys(("false", "False", "FALSE"), False),
    },
    BoolSyntax.YAML_1_1: {
        **dict.fromkeys(
            ("y", "Y", "yes", "Yes", "YES", "true", "True", "TRUE", "on", "On", "ON"),
            True,
        ),
        **dict.fromkeys(
            ("n", "N", "no", "No", "NO", "false", "False", "FALSE", "off", "Off", "OFF"),
            False,
        ),
    },
}


def _parse_error(text: str, type_name: str) -> ConversionResult[Any]:
    return ConversionResult.failure(
        ConversionError(
            f"cannot parse {text!r} as {type_name}", kind=ErrorKind.PARSE_FAILURE
        )
    )


def _range_error(text: str, type_name: str, low: Any, high: Any) -> ConversionResult[Any]:
    return ConversionResult.failure(
        ConversionError(
            f"value {text} out of range for {type_name}, expected [{low}, {high}]",
            kind=ErrorKind.RANGE_FAILURE,
        )
    )


def _parse_integer(text: str) -> int | None:
    """Parse an integer literal, or return None when the text is not one."""
    match = _INT_RE.fullmatch(text)
    if match is None:
        return None
    sign, body = match.groups()
    if body.startswith("0x"):
        value = int(body[2:], 16)
    elif body.startswith("0o"):
        value = int(body[2:], 8)
    else:
        value = int(body, 10)
    return -value if sign == "-" else value


def convert_str(node: yaml.Node | None, config: ConverterConfig) -> ConversionResult[str]:
    error = expect_scalar(node)
    if error is not None:
        return ConversionResult.failure(error)
    return ConversionResult.success(scalar_text(node))  # type: ignore[arg-type]


def convert_bool(node: yaml.Node | None, config: ConverterConfig) -> ConversionResult[bool]:
    """Convert a scalar to bool using the literal set chosen by ``config.bool_syntax``."""
    error = expect_scalar(node)
    if error is not None:
        return ConversionResult.failure(error)
    text = scalar_text(node)  # type: ignore[arg-type]
    value = _BOOL_LITERALS[config.bool_syntax].get(text)
    if value is None:
        return _parse_error(text, "bool")
    return ConversionResult.success(value)


def convert_int(node: yaml.Node | None, config: ConverterConfig) -> ConversionResult[int]:
    """Convert a scalar to an arbitrary-precision Python int."""
    error = expect_scalar(node)
    if error is not None:
        return ConversionResult.failure(error)
    text = scalar_text(node)  # type: ignore[arg-type]
    value = _parse_integer(text)
    if value is None:
        return _parse_error(text, "int")
    return ConversionResult.success(value)


def integer_converter(tp: type[np.integer[Any]]) -> Converter:
    """Build the converter for one fixed-width numpy integer type.

    The literal is parsed exactly and checked against ``numpy.iinfo(tp)``
    before the numpy scalar is created, so nothing ever wraps.
    """
    info = np.iinfo(tp)
    low, high = int(info.min), int(info.max)
    type_name = tp.__name__

    def convert(node: yaml.Node | None, config: ConverterConfig) -> ConversionResult[Any]:
        error = expect_scalar(node)
        if error is not None:
            return ConversionResult.failure(error)
        text = scalar_text(node)  # type: ignore[arg-type]
        value = _parse_integer(text)
        if value is None:
            return _parse_error(text, type_name)
        if not low <= value <= high:
            return _range_error(text, type_name, low, high)
        return ConversionResult.success(tp(value))

    convert.__name__ = f"convert_{type_name}"
    return convert


def _parse_float_literal(text: str) -> tuple[float, bool] | None:
    """Return ``(value, is_infinity_literal)``, or None when the text is not a float literal."""
    if _NAN_RE.fullmatch(text):
        return math.nan, False
    match = _INF_RE.fullmatch(text)
    if match is not None:
        return (-math.inf if match.group(1) == "-" else math.inf), True
    if _FLOAT_RE.fullmatch(text):
        return float(text), False
    return None


def convert_float(node: yaml.Node | None, config: ConverterConfig) -> ConversionResult[float]:
    """Convert a scalar to a Python float (IEEE 754 double)."""
    error = expect_scalar(node)
    if error is not None:
        return ConversionResult.failure(error)
    text = scalar_text(node)  # type: ignore[arg-type]
    parsed = _parse_float_literal(text)
    if parsed is None:
        return _parse_error(text, "float")
    value, is_inf_literal = parsed
    # float() turns an overlong finite literal into inf
    if math.isinf(value) and not is_inf_literal:
        return _range_error(text, "float", -math.inf, math.inf)
    return ConversionResult.success(value)


def float_converter(tp: type[np.floating[Any]]) -> Converter:
    """Build the converter for one numpy floating type.

    A finite literal whose magnitude exceeds ``numpy.finfo(tp).max`` is a
    RANGE_FAILURE.  ``numpy.longdouble`` parses the literal text directly so
    that values beyond double range are kept where the platform allows it.
    """
    info = np.finfo(tp)
    type_name = tp.__name__

    def convert(node: yaml.Node | None, config: ConverterConfig) -> ConversionResult[Any]:
        error = expect_scalar(node)
        if error is not None:
            return ConversionResult.failure(error)
        text = scalar_text(node)  # type: ignore[arg-type]
        parsed = _parse_float_literal(text)
        if parsed is None:
            return _parse_error(text, type_name)
        value, is_inf_literal = parsed
        if is_inf_literal or math.isnan(value):
            return ConversionResult.success(tp(value))
        if tp is np.longdouble:
            result = tp(text)
            if np.isinf(result):
                return _range_error(text, type_name, -info.max, info.max)
            return ConversionResult.success(result)
        if math.isinf(value) or abs(value) > float(info.max):
            return _range_error(text, type_name, -info.max, info.max)
        return ConversionResult.success(tp(value))

    convert.__name__ = f"convert_{type_name}"
    return convert


PRIMITIVE_CONVERTERS: dict[type, Converter] = {
    str: convert_str,
    bool: convert_bool,
    int: convert_int,
    float: convert_float,
    **{tp: integer_converter(tp) for tp in INTEGER_TYPES},
    **{tp: float_converter(tp) for tp in FLOAT_TYPES},
}

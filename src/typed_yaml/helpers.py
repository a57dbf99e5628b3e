"""Key-lookup helpers: optional-key defaulting and single-key extraction.

These are the boundary between the conversion core and code that expects
exceptions.  Converters registered by users, or PyYAML itself, may raise
instead of returning a ConversionResult; both helpers catch such native
failures and normalize them into CONVERSION_FAILURE errors so that nothing
leaks out in its native form.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any

import yaml

from typed_yaml.config import ConverterConfig
from typed_yaml.dispatch import converter_for
from typed_yaml.errors import ConversionError, ErrorKind
from typed_yaml.result import ConversionResult
from typed_yaml.tree.nodes import get_child

__all__ = ["convert_child", "set_if_exists"]

# Failures user converters and PyYAML raise for bad input.
_NATIVE_ERRORS = (ValueError, TypeError, ArithmeticError, LookupError, yaml.YAMLError)


def _convert(node: yaml.Node, tp: Any, config: ConverterConfig | None) -> ConversionResult[Any]:
    # Unsupported target types stay a TypeError for the caller.
    converter = converter_for(tp)
    try:
        return converter(node, config if config is not None else ConverterConfig())
    except _NATIVE_ERRORS as exc:
        return ConversionResult.failure(
            ConversionError(
                f"failed to convert node: {exc}", kind=ErrorKind.CONVERSION_FAILURE
            )
        )


def set_if_exists(
    output: Any,
    node: yaml.Node | None,
    key: str,
    tp: Any,
    attr: str | None = None,
    config: ConverterConfig | None = None,
) -> ConversionError | None:
    """Convert ``node[key]`` into ``tp`` and store it on ``output`` if the key exists.

    A missing key is not an error: ``output`` is left untouched and None is
    returned.  When the key exists but its value cannot be converted the
    conversion error is returned and ``output`` is again left untouched.

    Args:
        output: Mutable mapping (assigned by item) or any object (assigned by
                attribute).
        node:   Map node to read from.
        key:    Map key to look up.
        tp:     Target type of the value.
        attr:   Attribute or item name to assign; defaults to ``key``.
        config: Conversion options.

    Returns:
        None on success or when the key is missing, the ConversionError otherwise.
    """
    child = get_child(node, key)
    if child is None:
        return None
    result = _convert(child, tp, config)
    if not result:
        return result.error
    target = attr if attr is not None else key
    if isinstance(output, MutableMapping):
        output[target] = result.value
    else:
        setattr(output, target, result.value)
    return None


def convert_child(
    node: yaml.Node | None,
    key: str,
    tp: Any,
    config: ConverterConfig | None = None,
) -> ConversionResult[Any]:
    """Convert the value stored under ``key`` in a map node into ``tp``.

    Returns:
        The converted value, a KEY_NOT_FOUND failure if the key is absent, or
        the conversion failure (native exceptions normalized to
        CONVERSION_FAILURE).
    """
    child = get_child(node, key)
    if child is None:
        return ConversionResult.failure(
            ConversionError(f"no such key: {key}", kind=ErrorKind.KEY_NOT_FOUND)
        )
    return _convert(child, tp, config)

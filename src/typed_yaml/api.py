"""Convenience functions chaining document loading and conversion.

Each function returns a single ConversionResult: a LOAD_FAILURE error when
the document cannot be read or composed, otherwise the result of converting
its root node.
"""

from __future__ import annotations

import os
from typing import Any

from typed_yaml.config import ConverterConfig
from typed_yaml.dispatch import converter_for, parse_value
from typed_yaml.errors import ConversionError
from typed_yaml.loader import compose_yaml, read_yaml_file
from typed_yaml.result import ConversionResult

__all__ = ["format_error", "load_yaml_file", "parse_yaml"]


def parse_yaml(
    text: str,
    tp: Any,
    config: ConverterConfig | None = None,
) -> ConversionResult[Any]:
    """Compose ``text`` and convert its root node into ``tp``.

    Args:
        text:   A single YAML document.
        tp:     The target type.
        config: Conversion options. Defaults to ``ConverterConfig()`` when None.

    Raises:
        TypeError: If no conversion is defined for ``tp``.
    """
    converter_for(tp)
    loaded = compose_yaml(text)
    if not loaded:
        return loaded
    return parse_value(loaded.value, tp, config)


def load_yaml_file(
    path: str | os.PathLike[str],
    tp: Any,
    config: ConverterConfig | None = None,
) -> ConversionResult[Any]:
    """Read the YAML file at ``path`` and convert its root node into ``tp``.

    The target type is checked before the file is opened.

    Raises:
        TypeError: If no conversion is defined for ``tp``.
    """
    converter_for(tp)
    loaded = read_yaml_file(path)
    if not loaded:
        return loaded
    return parse_value(loaded.value, tp, config)


def format_error(error: ConversionError, config: ConverterConfig | None = None) -> str:
    """Format ``error`` using the trace separator of ``config``."""
    config = config if config is not None else ConverterConfig()
    return error.format(config.trace_separator)

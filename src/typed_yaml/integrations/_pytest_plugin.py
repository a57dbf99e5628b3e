"""pytest plugin for typed-yaml.

Auto-discovered by pytest via the pytest11 entry point declared in pyproject.toml.
When the package is installed (even in editable mode), pytest discovers this plugin
automatically -- no conftest.py changes are needed.

Source: https://docs.pytest.org/en/stable/how-to/writing_plugins.html
"""

from __future__ import annotations

import textwrap
from typing import Any

import pytest
import yaml

from typed_yaml import ConverterConfig, compose_yaml, parse_value


@pytest.fixture(scope="session")
def yaml_node() -> Any:
    """Fixture that returns a callable composing YAML text into a node.

    The text is dedented first, so documents can be written inline in tests::

        def test_ports(yaml_node):
            node = yaml_node('''
                ports: [80, 443]
            ''')

    Returns:
        A callable ``_compose(text) -> yaml.Node`` that raises ``AssertionError``
        when the text is not a valid single YAML document.
    """

    def _compose(text: str) -> yaml.Node:
        result = compose_yaml(textwrap.dedent(text))
        if not result:
            raise AssertionError(f"invalid YAML document: {result.error}")
        return result.value  # type: ignore[return-value]

    return _compose


@pytest.fixture(scope="session")
def assert_converts_to(yaml_node: Any) -> Any:
    """Fixture that returns a callable asserting a document converts to a value.

    Usage in tests::

        def test_port(assert_converts_to):
            assert_converts_to("8080", int, 8080)

    Returns:
        A callable ``_assert(text, tp, expected, config=None) -> None`` that
        raises ``AssertionError`` with the formatted conversion error on
        failure, or when the converted value differs from ``expected``.
    """

    def _assert(
        text: str,
        tp: Any,
        expected: Any,
        config: ConverterConfig | None = None,
    ) -> None:
        result = parse_value(yaml_node(text), tp, config)
        if not result:
            raise AssertionError(f"conversion to {tp!r} failed: {result.error}")
        if result.value != expected:
            raise AssertionError(
                f"conversion to {tp!r} produced {result.value!r}, expected {expected!r}"
            )

    return _assert

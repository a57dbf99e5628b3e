"""Structural validators: assert a node's kind and, optionally, its size.

Each validator returns None when the node satisfies the expectation and a
ConversionError otherwise.  They never raise and never look at children.
"""

from __future__ import annotations

import yaml

from typed_yaml.errors import ConversionError, ErrorKind
from typed_yaml.tree.nodes import NodeKind, node_kind, node_size

__all__ = ["expect_kind", "expect_map", "expect_scalar", "expect_sequence"]


def expect_kind(node: yaml.Node | None, expected: NodeKind) -> ConversionError | None:
    """Return a KIND_MISMATCH error unless ``node`` is of kind ``expected``."""
    actual = node_kind(node)
    if actual is expected:
        return None
    return ConversionError(
        f"unexpected node type, expected {expected}, got {actual}",
        kind=ErrorKind.KIND_MISMATCH,
    )


def _expect_size(
    node: yaml.Node, size: int, what: str
) -> ConversionError | None:
    actual = node_size(node)
    if actual == size:
        return None
    return ConversionError(
        f"wrong number of {what}, expected {size}, got {actual}",
        kind=ErrorKind.SIZE_MISMATCH,
    )


def expect_map(node: yaml.Node | None, size: int | None = None) -> ConversionError | None:
    """Check that ``node`` is a map, with exactly ``size`` entries when given."""
    error = expect_kind(node, NodeKind.MAP)
    if error is not None or size is None:
        return error
    return _expect_size(node, size, "entries")  # type: ignore[arg-type]


def expect_sequence(
    node: yaml.Node | None, size: int | None = None
) -> ConversionError | None:
    """Check that ``node`` is a sequence, with exactly ``size`` elements when given."""
    error = expect_kind(node, NodeKind.SEQUENCE)
    if error is not None or size is None:
        return error
    return _expect_size(node, size, "elements")  # type: ignore[arg-type]


def expect_scalar(node: yaml.Node | None) -> ConversionError | None:
    return expect_kind(node, NodeKind.SCALAR)

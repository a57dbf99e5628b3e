"""Tree subpackage: the read-only view of PyYAML node trees.

Re-exports the public API for the tree module:
- NodeKind: StrEnum of the node kinds (SCALAR, SEQUENCE, MAP, NULL, UNDEFINED)
- NodeDescription: one entry of a conversion error trace
- node accessors: node_kind, scalar_text, node_size, sequence_items,
  mapping_items, get_child
"""

from typed_yaml.tree.nodes import (
    NULL_TAG,
    NodeDescription,
    NodeKind,
    get_child,
    mapping_items,
    node_kind,
    node_size,
    scalar_text,
    sequence_items,
)

__all__ = [
    "NULL_TAG",
    "NodeDescription",
    "NodeKind",
    "get_child",
    "mapping_items",
    "node_kind",
    "node_size",
    "scalar_text",
    "sequence_items",
]

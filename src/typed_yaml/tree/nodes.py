"""NodeKind StrEnum, NodeDescription dataclass and read-only node accessors.

The node tree itself comes from PyYAML's composer (``yaml.compose``).  This
module is the only place that knows how PyYAML represents nodes; everything
else asks for a node's kind, its scalar text or its children through the
helpers below.  None of them ever mutate a node.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum, auto

import yaml

NULL_TAG = "tag:yaml.org,2002:null"


class NodeKind(StrEnum):
    """Structural kind of a YAML node.

    StrEnum values are the lowercased member names:
    - SCALAR    -> "scalar"    : plain or quoted scalar text
    - SEQUENCE  -> "sequence"  : block or flow sequence
    - MAP       -> "map"       : block or flow mapping
    - NULL      -> "null"      : a scalar resolved to the null tag (``~``, ``null``, empty)
    - UNDEFINED -> "undefined" : no node at all (e.g. a missing key)
    """

    SCALAR = auto()
    SEQUENCE = auto()
    MAP = auto()
    NULL = auto()
    UNDEFINED = auto()


@dataclass(frozen=True, slots=True)
class NodeDescription:
    """Description of one node on the path from a failure to the root.

    Attributes:
        name:      Key of a map entry, or the element position (as text) of a
                   sequence element.
        kind:      Actual kind of the node at that point of the tree.
        user_type: Human label of the type the node was being converted to;
                   empty when unknown.
        index:     True when ``name`` is a sequence position.
    """

    name: str
    kind: NodeKind
    user_type: str = ""
    index: bool = False

    @property
    def label(self) -> str:
        """Path segment for this node: ``[2]`` for positions, the key otherwise."""
        return f"[{self.name}]" if self.index else self.name


def node_kind(node: yaml.Node | None) -> NodeKind:
    """Return the structural kind of ``node``."""
    if node is None:
        return NodeKind.UNDEFINED
    if isinstance(node, yaml.MappingNode):
        return NodeKind.MAP
    if isinstance(node, yaml.SequenceNode):
        return NodeKind.SEQUENCE
    if node.tag == NULL_TAG:
        return NodeKind.NULL
    return NodeKind.SCALAR


def scalar_text(node: yaml.Node) -> str:
    return str(node.value)


def node_size(node: yaml.Node | None) -> int:
    """Number of children of a collection node; 0 for anything else."""
    if isinstance(node, (yaml.MappingNode, yaml.SequenceNode)):
        return len(node.value)
    return 0


def sequence_items(node: yaml.SequenceNode) -> Iterator[yaml.Node]:
    yield from node.value


def mapping_items(node: yaml.MappingNode) -> Iterator[tuple[yaml.Node, yaml.Node]]:
    """Yield ``(key_node, value_node)`` pairs in document order.

    Key nodes are yielded as-is; callers decide what a non-scalar key means.
    """
    for key_node, value_node in node.value:
        yield key_node, value_node


def get_child(node: yaml.Node | None, key: str) -> yaml.Node | None:
    """Return the value node stored under ``key`` in a map node.

    Returns None when ``node`` is not a map or has no such key.  When the
    document repeats a key, the last occurrence wins.
    """
    if not isinstance(node, yaml.MappingNode):
        return None
    found: yaml.Node | None = None
    for key_node, value_node in node.value:
        if isinstance(key_node, yaml.ScalarNode) and key_node.value == key:
            found = value_node
    return found

"""Tests for the composite converters, driven through parse_value.

Covers fixed-size arrays, dynamic sequences, string-keyed mappings,
optionals, enums and dataclass structures: size and kind checks,
short-circuiting on the first failing child, trace annotation with the
child's actual kind, and the null-as-empty-sequence default.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum, StrEnum
from typing import Optional

import numpy as np
import pytest
import yaml

from typed_yaml.config import ConverterConfig
from typed_yaml.converters.composites import ArrayConverter, SequenceConverter
from typed_yaml.dispatch import parse_value
from typed_yaml.errors import ErrorKind
from typed_yaml.result import ConversionResult
from typed_yaml.tree.nodes import NodeDescription, NodeKind

# ---------------------------------------------------------------------------
# Helpers and target types
# ---------------------------------------------------------------------------


def compose(text: str) -> yaml.Node:
    return yaml.compose(text, Loader=yaml.SafeLoader)


class Color(StrEnum):
    RED = "red"
    GREEN = "green"


class Level(Enum):
    LOW = 1
    HIGH = 2


@dataclass
class Inner:
    b: list[int]


@dataclass
class Outer:
    a: Inner


@dataclass
class Server:
    host: str
    port: int = 80
    tags: list[str] = field(default_factory=list)
    weight: float | None = None


@dataclass
class Port:
    number: int

    def __post_init__(self) -> None:
        if self.number <= 0:
            msg = "port must be positive"
            raise ValueError(msg)


@dataclass
class TreeItem:
    name: str
    children: list[TreeItem] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Fixed-size arrays
# ---------------------------------------------------------------------------


class TestFixedArray:
    def test_success_keeps_order(self) -> None:
        result = parse_value(compose("[1, 2, 3]"), tuple[int, int, int])
        assert result.value == (1, 2, 3)

    def test_too_short_is_size_mismatch(self) -> None:
        result = parse_value(compose("[1, 2, 3]"), tuple[int, int, int, int])
        assert result.error is not None
        assert result.error.kind is ErrorKind.SIZE_MISMATCH
        assert "4" in result.error.message
        assert "3" in result.error.message

    def test_too_long_is_size_mismatch(self) -> None:
        result = parse_value(compose("[1, 2, 3]"), tuple[int, int])
        assert result.error is not None
        assert result.error.kind is ErrorKind.SIZE_MISMATCH

    def test_map_is_kind_mismatch(self) -> None:
        result = parse_value(compose("{a: 1}"), tuple[int, int])
        assert result.error is not None
        assert result.error.kind is ErrorKind.KIND_MISMATCH

    def test_null_is_kind_mismatch(self) -> None:
        result = parse_value(compose("~"), tuple[int, int])
        assert result.error is not None
        assert result.error.kind is ErrorKind.KIND_MISMATCH

    def test_heterogeneous_positions(self) -> None:
        result = parse_value(compose("[web, 8080, true]"), tuple[str, int, bool])
        assert result.value == ("web", 8080, True)

    def test_element_failure_trace(self) -> None:
        result = parse_value(compose("[1, x, 3]"), tuple[int, int, int])
        assert result.error is not None
        assert result.error.kind is ErrorKind.PARSE_FAILURE
        assert result.error.trace == (
            NodeDescription(name="1", kind=NodeKind.SCALAR, user_type="int", index=True),
        )

    def test_trace_records_actual_kind(self) -> None:
        result = parse_value(compose("[1, [2]]"), tuple[int, int])
        assert result.error is not None
        assert result.error.trace[0].kind is NodeKind.SEQUENCE

    def test_stops_at_first_failure(self) -> None:
        calls: list[str] = []

        def recording(node: yaml.Node | None, config: ConverterConfig) -> ConversionResult[int]:
            calls.append(node.value)  # type: ignore[union-attr]
            return parse_value(node, int, config)

        converter = ArrayConverter((recording,) * 3, ("int",) * 3)
        result = converter(compose("[1, x, 3]"), ConverterConfig())
        assert not result
        assert calls == ["1", "x"]

    def test_numpy_element_range_failure(self) -> None:
        result = parse_value(compose("[1, 300]"), tuple[np.uint8, np.uint8])
        assert result.error is not None
        assert result.error.kind is ErrorKind.RANGE_FAILURE
        assert result.error.format_trace() == "[1]"


# ---------------------------------------------------------------------------
# Dynamic sequences
# ---------------------------------------------------------------------------


class TestSequence:
    def test_list_success(self) -> None:
        assert parse_value(compose("[3, 1, 2]"), list[int]).value == [3, 1, 2]

    def test_block_sequence(self) -> None:
        assert parse_value(compose("- a\n- b\n"), list[str]).value == ["a", "b"]

    def test_null_is_empty_sequence(self) -> None:
        result = parse_value(compose("~"), list[int])
        assert result.ok
        assert result.value == []

    def test_null_is_empty_tuple(self) -> None:
        assert parse_value(compose("~"), tuple[int, ...]).value == ()

    def test_empty_sequence(self) -> None:
        assert parse_value(compose("[]"), list[int]).value == []

    def test_variadic_tuple(self) -> None:
        assert parse_value(compose("[1, 2]"), tuple[int, ...]).value == (1, 2)

    def test_abstract_sequence(self) -> None:
        assert parse_value(compose("[1]"), Sequence[int]).value == [1]

    def test_scalar_is_kind_mismatch(self) -> None:
        result = parse_value(compose("5"), list[int])
        assert result.error is not None
        assert result.error.kind is ErrorKind.KIND_MISMATCH
        assert result.error.message == "unexpected node type, expected sequence, got scalar"

    def test_absent_node_is_kind_mismatch(self) -> None:
        result = parse_value(None, list[int])
        assert result.error is not None
        assert result.error.kind is ErrorKind.KIND_MISMATCH

    def test_element_failure_trace(self) -> None:
        result = parse_value(compose("[1, 2, x]"), list[int])
        assert result.error is not None
        assert result.error.format_trace() == "[2]"
        assert result.error.trace[0].user_type == "int"

    def test_nested_sequences(self) -> None:
        result = parse_value(compose("[[1, 2], [3, y]]"), list[list[int]])
        assert result.error is not None
        assert result.error.format_trace() == "[1] → [1]"
        assert result.error.trace[1].kind is NodeKind.SEQUENCE

    def test_stops_at_first_failure(self) -> None:
        seen: list[str] = []

        def recording(node: yaml.Node | None, config: ConverterConfig) -> ConversionResult[int]:
            seen.append(node.value)  # type: ignore[union-attr]
            return parse_value(node, int, config)

        converter = SequenceConverter(recording, "int")
        assert not converter(compose("[a, b, c]"), ConverterConfig())
        assert seen == ["a"]

    def test_long_sequence(self) -> None:
        text = "[" + ", ".join(str(i) for i in range(1000)) + "]"
        assert parse_value(compose(text), list[int]).value == list(range(1000))


# ---------------------------------------------------------------------------
# Mappings
# ---------------------------------------------------------------------------


class TestMapping:
    def test_dict_success(self) -> None:
        result = parse_value(compose("{a: 1, b: 2}"), dict[str, int])
        assert result.value == {"a": 1, "b": 2}

    def test_abstract_mapping(self) -> None:
        assert parse_value(compose("{a: x}"), Mapping[str, str]).value == {"a": "x"}

    def test_empty_map(self) -> None:
        assert parse_value(compose("{}"), dict[str, int]).value == {}

    def test_sequence_is_kind_mismatch(self) -> None:
        result = parse_value(compose("[1]"), dict[str, int])
        assert result.error is not None
        assert result.error.kind is ErrorKind.KIND_MISMATCH

    def test_null_is_kind_mismatch(self) -> None:
        result = parse_value(compose("~"), dict[str, int])
        assert result.error is not None
        assert result.error.kind is ErrorKind.KIND_MISMATCH

    def test_value_failure_uses_key_as_name(self) -> None:
        result = parse_value(compose("{good: 1, bad: [2]}"), dict[str, int])
        assert result.error is not None
        assert result.error.trace == (
            NodeDescription(name="bad", kind=NodeKind.SEQUENCE, user_type="int"),
        )

    def test_duplicate_keys_last_wins(self) -> None:
        assert parse_value(compose("{a: 1, a: 2}"), dict[str, int]).value == {"a": 2}

    def test_non_scalar_key_is_kind_mismatch(self) -> None:
        result = parse_value(compose("? [1, 2]\n: x\n"), dict[str, str])
        assert result.error is not None
        assert result.error.kind is ErrorKind.KIND_MISMATCH
        assert "map key" in result.error.message

    def test_numeric_keys_are_text(self) -> None:
        assert parse_value(compose("{1: a}"), dict[str, str]).value == {"1": "a"}

    def test_nested_mapping_trace(self) -> None:
        result = parse_value(compose("{a: {b: [1, 2, x]}}"), dict[str, dict[str, list[int]]])
        assert result.error is not None
        assert result.error.format_trace() == "a → b → [2]"


# ---------------------------------------------------------------------------
# Optionals and enums
# ---------------------------------------------------------------------------


class TestOptional:
    def test_null_is_none(self) -> None:
        result = parse_value(compose("~"), int | None)
        assert result.ok
        assert result.value is None

    def test_absent_is_none(self) -> None:
        assert parse_value(None, Optional[int]).value is None  # noqa: UP007

    def test_value_converted(self) -> None:
        assert parse_value(compose("5"), int | None).value == 5

    def test_inner_failure_passes_through(self) -> None:
        result = parse_value(compose("x"), int | None)
        assert result.error is not None
        assert result.error.kind is ErrorKind.PARSE_FAILURE


class TestEnum:
    def test_by_value(self) -> None:
        assert parse_value(compose("red"), Color).value is Color.RED

    def test_by_name(self) -> None:
        assert parse_value(compose("HIGH"), Level).value is Level.HIGH

    def test_non_string_value(self) -> None:
        assert parse_value(compose("2"), Level).value is Level.HIGH

    def test_unknown_value(self) -> None:
        result = parse_value(compose("blue"), Color)
        assert result.error is not None
        assert result.error.kind is ErrorKind.PARSE_FAILURE
        assert "red, green" in result.error.message

    def test_map_is_kind_mismatch(self) -> None:
        result = parse_value(compose("{a: 1}"), Color)
        assert result.error is not None
        assert result.error.kind is ErrorKind.KIND_MISMATCH


# ---------------------------------------------------------------------------
# Dataclass structures
# ---------------------------------------------------------------------------


class TestDataclass:
    def test_nested_structure_trace(self) -> None:
        result = parse_value(compose('{a: {b: [1, 2, "x"]}}'), Outer)
        assert result.error is not None
        assert result.error.kind is ErrorKind.PARSE_FAILURE
        assert result.error.format_trace() == "a → b → [2]"
        assert [d.kind for d in result.error.trace] == [
            NodeKind.SCALAR,
            NodeKind.SEQUENCE,
            NodeKind.MAP,
        ]
        assert result.error.trace[2].user_type == "Inner"

    def test_nested_structure_success(self) -> None:
        result = parse_value(compose("{a: {b: [1, 2, 3]}}"), Outer)
        assert result.value == Outer(a=Inner(b=[1, 2, 3]))

    def test_defaults_kept_for_missing_keys(self) -> None:
        result = parse_value(compose("{host: example.org}"), Server)
        assert result.value == Server(host="example.org")

    def test_all_fields(self) -> None:
        text = "{host: h, port: 8080, tags: [a, b], weight: 0.5}"
        assert parse_value(compose(text), Server).value == Server(
            host="h", port=8080, tags=["a", "b"], weight=0.5
        )

    def test_null_list_field_is_empty(self) -> None:
        assert parse_value(compose("{host: h, tags: ~}"), Server).value == Server(host="h")

    def test_missing_required_key(self) -> None:
        result = parse_value(compose("{port: 1}"), Server)
        assert result.error is not None
        assert result.error.kind is ErrorKind.KEY_NOT_FOUND
        assert result.error.message == "no such key: host"
        assert result.error.trace == ()

    def test_unknown_keys_ignored(self) -> None:
        assert parse_value(compose("{host: h, extra: 1}"), Server).value == Server(host="h")

    def test_field_failure_user_type(self) -> None:
        result = parse_value(compose("{host: h, port: http}"), Server)
        assert result.error is not None
        assert result.error.trace == (
            NodeDescription(name="port", kind=NodeKind.SCALAR, user_type="int"),
        )

    def test_post_init_rejection_is_failure(self) -> None:
        result = parse_value(compose("number: -1"), Port)
        assert result.error is not None
        assert result.error.kind is ErrorKind.CONVERSION_FAILURE
        assert result.error.message == "cannot construct Port: port must be positive"
        assert result.error.trace == ()

    def test_post_init_rejection_in_list_is_traced(self) -> None:
        result = parse_value(compose("[{number: 80}, {number: 0}]"), list[Port])
        assert result.error is not None
        assert result.error.kind is ErrorKind.CONVERSION_FAILURE
        assert result.error.trace == (
            NodeDescription(name="1", kind=NodeKind.MAP, user_type="Port", index=True),
        )
        assert result.error.format() == "cannot construct Port: port must be positive (at [1])"

    def test_scalar_is_kind_mismatch(self) -> None:
        result = parse_value(compose("h"), Server)
        assert result.error is not None
        assert result.error.kind is ErrorKind.KIND_MISMATCH

    def test_self_referential(self) -> None:
        text = "{name: root, children: [{name: a}, {name: b, children: [{name: c}]}]}"
        result = parse_value(compose(text), TreeItem)
        assert result.value == TreeItem(
            name="root",
            children=[
                TreeItem(name="a"),
                TreeItem(name="b", children=[TreeItem(name="c")]),
            ],
        )

    def test_self_referential_failure_trace(self) -> None:
        text = "{name: root, children: [{name: a, children: [{}]}]}"
        result = parse_value(compose(text), TreeItem)
        assert result.error is not None
        assert result.error.kind is ErrorKind.KEY_NOT_FOUND
        assert result.error.format_trace() == "children → [0] → children → [0]"


# ---------------------------------------------------------------------------
# Idempotency
# ---------------------------------------------------------------------------


class TestIdempotency:
    @pytest.mark.parametrize(
        ("text", "tp"),
        [
            ("{a: {b: [1, 2, x]}}", Outer),
            ("{a: {b: [1, 2, 3]}}", Outer),
            ("[1, 2, 3]", tuple[int, int, int, int]),
            ("{a: [1.5, 2]}", dict[str, list[float]]),
        ],
    )
    def test_same_node_twice(self, text: str, tp: object) -> None:
        node = compose(text)
        first = parse_value(node, tp)
        second = parse_value(node, tp)
        assert first == second
        if first.error is not None:
            assert first.error.format() == second.error.format()  # type: ignore[union-attr]

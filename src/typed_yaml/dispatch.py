"""Conversion dispatcher and capability gate.

``parse_value(node, tp)`` is the single entry point for converting a node into
a value of type ``tp``.  Before any node is inspected the dispatcher resolves
a converter for the whole of ``tp``: registered primitive and user types,
then the closed set of composite shapes (optional, fixed tuple, sequence,
mapping, enum, dataclass) and finally types implementing ``YamlConvertible``.
A type with no conversion anywhere in its structure raises ``TypeError`` at
resolution time, so an unsupported target is a programming error and never a
conversion failure.

Resolved converters are cached per type in a ``cachetools.LRUCache``.  The
cache and the registry are guarded by a lock; the converters themselves are
immutable and safe to share between threads.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import logging
import threading
import types
import typing
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeVar, Union

from cachetools import LRUCache

from typed_yaml.config import ConverterConfig
from typed_yaml.converters.composites import (
    ArrayConverter,
    DataclassConverter,
    EnumConverter,
    FieldSpec,
    MappingConverter,
    OptionalConverter,
    SequenceConverter,
    is_required,
)
from typed_yaml.converters.primitives import PRIMITIVE_CONVERTERS
from typed_yaml.protocols import YamlConvertible

if TYPE_CHECKING:
    import yaml

    from typed_yaml.protocols import Converter
    from typed_yaml.result import ConversionResult

__all__ = [
    "can_parse",
    "converter_for",
    "parse_value",
    "register_converter",
    "type_name",
    "unregister_converter",
]

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

_SEQUENCE_ORIGINS = (
    list,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
)
_MAPPING_ORIGINS = (
    dict,
    collections.abc.Mapping,
    collections.abc.MutableMapping,
)

_registry: dict[Any, Converter] = dict(PRIMITIVE_CONVERTERS)
_cache: LRUCache[Any, Converter] = LRUCache(maxsize=256)
_lock = threading.Lock()


def type_name(tp: Any) -> str:
    """Human readable name of a type annotation, e.g. ``int`` or ``list[int]``."""
    if isinstance(tp, type) and not typing.get_args(tp):
        return tp.__name__
    return repr(tp).replace("typing.", "")


@dataclasses.dataclass(frozen=True, slots=True)
class _LazyConverter:
    """Stand-in for a dataclass whose resolution is already in progress.

    Self-referential dataclasses would otherwise recurse forever during
    resolution; the real converter is looked up on first use instead.
    """

    tp: Any

    def __call__(self, node: yaml.Node | None, config: ConverterConfig) -> ConversionResult[Any]:
        return converter_for(self.tp)(node, config)


def _resolve(tp: Any, resolving: frozenset[Any]) -> Converter:
    try:
        converter = _registry.get(tp)
    except TypeError:
        converter = None
    if converter is not None:
        return converter

    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    if origin is Union or origin is types.UnionType:
        members = [arg for arg in args if arg is not type(None)]
        if len(members) != 1 or len(members) == len(args):
            msg = f"no yaml conversion defined for {type_name(tp)}: only T | None unions are supported"
            raise TypeError(msg)
        return OptionalConverter(_resolve(members[0], resolving))

    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return SequenceConverter(_resolve(args[0], resolving), type_name(args[0]), tuple)
        return ArrayConverter(
            tuple(_resolve(arg, resolving) for arg in args),
            tuple(type_name(arg) for arg in args),
        )

    if origin in _SEQUENCE_ORIGINS and len(args) == 1:
        return SequenceConverter(_resolve(args[0], resolving), type_name(args[0]))

    if origin in _MAPPING_ORIGINS and len(args) == 2:
        if args[0] is not str:
            msg = f"no yaml conversion defined for {type_name(tp)}: mapping keys must be str"
            raise TypeError(msg)
        return MappingConverter(_resolve(args[1], resolving), type_name(args[1]))

    if isinstance(tp, type):
        if issubclass(tp, Enum):
            return EnumConverter(tp)
        if dataclasses.is_dataclass(tp):
            return _resolve_dataclass(tp, resolving)
        if isinstance(tp, YamlConvertible):
            return tp.from_yaml_node

    msg = f"no yaml conversion defined for {type_name(tp)}"
    raise TypeError(msg)


def _resolve_dataclass(cls: type[Any], resolving: frozenset[Any]) -> Converter:
    if cls in resolving:
        return _LazyConverter(cls)
    resolving = resolving | {cls}
    try:
        hints = typing.get_type_hints(cls)
    except NameError as exc:
        msg = f"cannot resolve field annotations of {cls.__name__}: {exc}"
        raise TypeError(msg) from exc

    specs = tuple(
        FieldSpec(
            name=field.name,
            converter=_resolve(hints[field.name], resolving),
            type_name=type_name(hints[field.name]),
            required=is_required(field),
        )
        for field in dataclasses.fields(cls)
        if field.init
    )
    return DataclassConverter(cls, specs)


def converter_for(tp: Any) -> Converter:
    """Return the converter for ``tp``, resolving and caching it on first use.

    Args:
        tp: A target type or type annotation, e.g. ``int``, ``list[str]``,
            ``tuple[float, float]``, ``dict[str, Server]``.

    Returns:
        A callable ``(node, config) -> ConversionResult``.

    Raises:
        TypeError: If no conversion is defined for ``tp`` or for any type
            nested inside it.
    """
    with _lock:
        try:
            return _cache[tp]
        except KeyError:
            pass
        except TypeError:
            # Unhashable annotation: resolve without caching.
            return _resolve(tp, frozenset())
        converter = _resolve(tp, frozenset())
        _cache[tp] = converter
    logger.debug("resolved yaml converter for %s", type_name(tp))
    return converter


def can_parse(tp: Any) -> bool:
    """Return True if a conversion is defined for ``tp``."""
    try:
        converter_for(tp)
    except TypeError:
        return False
    return True


def parse_value(
    node: yaml.Node | None,
    tp: Any,
    config: ConverterConfig | None = None,
) -> ConversionResult[Any]:
    """Convert ``node`` into a value of type ``tp``.

    Args:
        node:   A PyYAML node, or None for an absent node.
        tp:     The target type.
        config: Conversion options. Defaults to ``ConverterConfig()`` when None.

    Returns:
        A ``ConversionResult`` holding the value or a ``ConversionError``
        whose trace leads from the failing node back to ``node``.

    Raises:
        TypeError: If no conversion is defined for ``tp``.
    """
    converter = converter_for(tp)
    return converter(node, config if config is not None else ConverterConfig())


def register_converter(tp: Any) -> Callable[[F], F]:
    """Class/function decorator registering a converter for ``tp``.

    The decorated callable must follow the ``Converter`` protocol.  A
    registration replaces any earlier converter for the same type, including
    the built-in ones, and invalidates all cached resolutions.

    Example::

        @register_converter(Path)
        def convert_path(node, config):
            result = parse_value(node, str, config)
            return ConversionResult.success(Path(result.value)) if result else result
    """

    def decorator(func: F) -> F:
        with _lock:
            _registry[tp] = func
            _cache.clear()
        logger.debug("registered yaml converter %r for %s", func, type_name(tp))
        return func

    return decorator


def unregister_converter(tp: Any) -> None:
    """Remove the registered converter for ``tp``; built-ins are restored."""
    with _lock:
        _registry.pop(tp, None)
        builtin = PRIMITIVE_CONVERTERS.get(tp)
        if builtin is not None:
            _registry[tp] = builtin
        _cache.clear()
    logger.debug("unregistered yaml converter for %s", type_name(tp))

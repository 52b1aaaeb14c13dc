"""
schemacraft — type classification.

Purpose
- Map a declared host type to a tagged ``TypeDescriptor`` that both the
  document builders and the validation adapter dispatch on.

Classification order
1. boolean (``bool``, ``Literal[True, False]``)
2. nilable (``Optional[X]``, ``X | None``)
3. typed array (``list[X]``, ``Sequence[X]``, ``tuple[X, ...]``)
4. tuple (``tuple[A, B]``)
5. union of two or more non-nil members
6. composition markers (``AnyOf[...]``, ``AllOf[...]``, ``OneOf[...]``)
7. compiled models and model-name forward references
8. scalar names and registered custom types, falling back to an opaque object

``classify`` never raises; types it cannot place become ``OpaqueType``.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import datetime
import functools
import types
import typing
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum
from typing import Any, Final

from schemacraft import registry
from schemacraft.errors import UnresolvedModelError
from schemacraft.markers import Composed, CompositionKind


class ScalarKind(StrEnum):
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    DATE = "date"
    DATE_TIME = "date-time"
    TIME = "time"

    @property
    def is_temporal(self) -> bool:
        return self in _TEMPORAL_KINDS

    @property
    def json_type(self) -> str:
        return "string" if self.is_temporal else self.value


_TEMPORAL_KINDS: Final[frozenset[ScalarKind]] = frozenset(
    {ScalarKind.DATE, ScalarKind.DATE_TIME, ScalarKind.TIME}
)


@dataclass(frozen=True, slots=True)
class Scalar:
    kind: ScalarKind


@dataclass(frozen=True, slots=True)
class Nilable:
    inner: TypeDescriptor


@dataclass(frozen=True, slots=True)
class TypedArray:
    """Homogeneous array; ``items`` is None for a bare ``list``."""

    items: TypeDescriptor | None


@dataclass(frozen=True, slots=True)
class TupleType:
    """Positional array; ``rest`` is None (unspecified), a bool, or a descriptor."""

    positional: tuple[TypeDescriptor, ...]
    rest: bool | TypeDescriptor | None = None


@dataclass(frozen=True, slots=True)
class UnionType:
    members: tuple[TypeDescriptor, ...]


@dataclass(frozen=True, slots=True)
class Composition:
    kind: CompositionKind
    members: tuple[TypeDescriptor, ...]


@dataclass(frozen=True, slots=True)
class ModelRef:
    """Reference to a compiled model class, or to one by name (forward reference)."""

    target: type[Any] | str

    @property
    def name(self) -> str:
        if isinstance(self.target, str):
            return self.target
        return self.target.__name__

    def resolve(self) -> type[Any]:
        if not isinstance(self.target, str):
            return self.target
        model = registry.lookup_model(self.target)
        if model is None:
            raise UnresolvedModelError(self.target)
        return model


@dataclass(frozen=True, slots=True)
class CustomType:
    """Host type handled by a builder from the custom type registry."""

    host_type: object


@dataclass(frozen=True, slots=True)
class OpaqueType:
    """Anything unrecognized; documented as a plain JSON object."""

    host_type: object


TypeDescriptor = (
    Scalar | Nilable | TypedArray | TupleType | UnionType | Composition | ModelRef | CustomType | OpaqueType
)

_SCALAR_TYPES: Final[dict[object, ScalarKind]] = {
    str: ScalarKind.STRING,
    int: ScalarKind.INTEGER,
    float: ScalarKind.NUMBER,
    Decimal: ScalarKind.NUMBER,
    bool: ScalarKind.BOOLEAN,
    type(None): ScalarKind.NULL,
    datetime.datetime: ScalarKind.DATE_TIME,
    datetime.date: ScalarKind.DATE,
    datetime.time: ScalarKind.TIME,
}
_SCALAR_NAMES: Final[dict[str, ScalarKind]] = {kind.value: kind for kind in ScalarKind}
_SEQUENCE_ORIGINS: Final[tuple[object, ...]] = (
    list,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
)
_UNION_ORIGINS: Final[tuple[object, ...]] = (typing.Union, types.UnionType)


def classify(host_type: object) -> TypeDescriptor:
    """Classify ``host_type``; never raises."""

    if isinstance(host_type, str):
        return _classify_name(host_type)
    if not _is_hashable(host_type):
        return _classify(host_type)
    if registry.custom_builder_for(host_type) is not None:
        return CustomType(host_type)
    return _classify_cached(host_type)


@functools.lru_cache(maxsize=1024)
def _classify_cached(host_type: object) -> TypeDescriptor:
    return _classify(host_type)


def _classify(host_type: object) -> TypeDescriptor:
    if host_type is None:
        return Scalar(ScalarKind.NULL)
    if isinstance(host_type, typing.ForwardRef):
        return _classify_name(host_type.__forward_arg__)

    origin = typing.get_origin(host_type)
    args = typing.get_args(host_type)

    if host_type is bool or (origin is typing.Literal and _is_truth_literal(args)):
        return Scalar(ScalarKind.BOOLEAN)
    if origin in _UNION_ORIGINS:
        return _classify_union(args)
    if host_type is list or host_type is tuple:
        return TypedArray(None)
    if origin in _SEQUENCE_ORIGINS:
        return TypedArray(classify(args[0]) if args else None)
    if origin is tuple:
        if not args or args == ((),):
            return TypedArray(None)
        if len(args) == 2 and args[1] is Ellipsis:
            return TypedArray(classify(args[0]))
        return TupleType(positional=tuple(classify(arg) for arg in args))
    if isinstance(host_type, Composed):
        return Composition(host_type.kind, tuple(classify(member) for member in host_type.members))
    if is_model(host_type):
        return ModelRef(host_type)
    kind = _SCALAR_TYPES.get(host_type) if _is_hashable(host_type) else None
    if kind is not None:
        return Scalar(kind)
    return OpaqueType(host_type)


def _classify_name(name: str) -> TypeDescriptor:
    kind = _SCALAR_NAMES.get(name)
    if kind is not None:
        return Scalar(kind)
    if registry.custom_builder_for(name) is not None:
        return CustomType(name)
    return ModelRef(name)


def _classify_union(args: tuple[object, ...]) -> TypeDescriptor:
    members = [arg for arg in args if arg is not type(None) and arg is not None]
    has_nil = len(members) != len(args)
    if not members:
        return Scalar(ScalarKind.NULL)
    if len(members) == 1:
        inner = classify(members[0])
    else:
        inner = UnionType(tuple(classify(member) for member in members))
    if not has_nil or isinstance(inner, Nilable):
        return inner
    return Nilable(inner)


def clear_cache() -> None:
    """Drop memoized classifications, e.g. after a custom type is registered."""

    _classify_cached.cache_clear()


def _is_hashable(value: object) -> bool:
    try:
        hash(value)
    except TypeError:
        return False
    return True


def _is_truth_literal(args: tuple[object, ...]) -> bool:
    return (
        len(args) == 2
        and all(isinstance(arg, bool) for arg in args)
        and set(args) == {True, False}
    )


def is_model(host_type: object) -> bool:
    """Return True for classes that carry a compiled schema definition."""

    return isinstance(host_type, type) and getattr(host_type, "__schema_definition__", None) is not None


def unwrap_nilable(descriptor: TypeDescriptor) -> tuple[TypeDescriptor, bool]:
    if isinstance(descriptor, Nilable):
        return descriptor.inner, True
    return descriptor, False


def resolve_tuple_rest(descriptor: TypeDescriptor, constraints: Mapping[str, object]) -> TypeDescriptor:
    """Attach the ``additional_items`` policy to a tuple descriptor.

    Non-tuple descriptors are returned unchanged; a nilable tuple keeps its
    nilable wrapper.
    """

    rest = constraints.get("additional_items")
    if rest is None:
        return descriptor
    inner, nilable = unwrap_nilable(descriptor)
    if not isinstance(inner, TupleType):
        return descriptor
    policy: bool | TypeDescriptor = rest if isinstance(rest, bool) else classify(rest)
    updated = dataclasses.replace(inner, rest=policy)
    return Nilable(updated) if nilable else updated


def describe(descriptor: TypeDescriptor | None) -> str:
    """Human readable type name used in validation messages."""

    if descriptor is None:
        return "value"
    if isinstance(descriptor, Scalar):
        return descriptor.kind.value
    if isinstance(descriptor, Nilable):
        return f"{describe(descriptor.inner)} or null"
    if isinstance(descriptor, (TypedArray, TupleType)):
        return "array"
    if isinstance(descriptor, UnionType):
        return " or ".join(describe(member) for member in descriptor.members)
    if isinstance(descriptor, Composition):
        return f"{descriptor.kind.value} composition"
    if isinstance(descriptor, ModelRef):
        return descriptor.name
    if isinstance(descriptor, CustomType):
        return getattr(descriptor.host_type, "__name__", str(descriptor.host_type))
    return "object"


__all__ = [
    "Composition",
    "CustomType",
    "ModelRef",
    "Nilable",
    "OpaqueType",
    "Scalar",
    "ScalarKind",
    "TupleType",
    "TypeDescriptor",
    "TypedArray",
    "UnionType",
    "classify",
    "clear_cache",
    "describe",
    "is_model",
    "resolve_tuple_rest",
    "unwrap_nilable",
]

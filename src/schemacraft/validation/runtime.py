"""Runtime predicates over host values: presence and structural type conformance."""

from __future__ import annotations

import datetime
import math
from collections.abc import Mapping
from decimal import Decimal

from schemacraft.classifier import (
    Composition,
    CustomType,
    ModelRef,
    Nilable,
    OpaqueType,
    Scalar,
    ScalarKind,
    TupleType,
    TypedArray,
    TypeDescriptor,
    UnionType,
    is_model,
)
from schemacraft.markers import CompositionKind
from schemacraft.validation.formats import FORMATS

_TEMPORAL_TYPES: dict[ScalarKind, type] = {
    ScalarKind.DATE: datetime.date,
    ScalarKind.DATE_TIME: datetime.datetime,
    ScalarKind.TIME: datetime.time,
}


def is_blank(value: object) -> bool:
    """None, whitespace-only strings and empty collections are blank; ``False`` and ``0`` are not."""

    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (Mapping, list, tuple, set, frozenset)):
        return len(value) == 0
    return False


def is_number(value: object) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, Decimal):
        return value.is_finite()
    return isinstance(value, int)


def is_integer(value: object) -> bool:
    if not is_number(value):
        return False
    if isinstance(value, float):
        return value.is_integer()
    if isinstance(value, Decimal):
        return value == value.to_integral_value()
    return True


def is_array(value: object) -> bool:
    return isinstance(value, (list, tuple))


def is_temporal(value: object, kind: ScalarKind) -> bool:
    if isinstance(value, str):
        return FORMATS[kind.value].matches(value)
    if kind is ScalarKind.DATE:
        return isinstance(value, datetime.date) and not isinstance(value, datetime.datetime)
    return isinstance(value, _TEMPORAL_TYPES[kind])


def conforms(value: object, descriptor: TypeDescriptor | None) -> bool:
    """Structural check that ``value`` has the declared type; nested models are not validated."""

    if descriptor is None:
        return True
    if isinstance(descriptor, Nilable):
        return value is None or conforms(value, descriptor.inner)
    if isinstance(descriptor, Scalar):
        return _scalar_conforms(value, descriptor.kind)
    if isinstance(descriptor, TypedArray):
        return is_array(value) and all(conforms(item, descriptor.items) for item in value)  # type: ignore[attr-defined]
    if isinstance(descriptor, TupleType):
        return is_array(value) and tuple_conforms(value, descriptor)  # type: ignore[arg-type]
    if isinstance(descriptor, UnionType):
        return any(conforms(value, member) for member in descriptor.members)
    if isinstance(descriptor, Composition):
        matched = sum(1 for member in descriptor.members if conforms(value, member))
        return composition_satisfied(descriptor.kind, matched, len(descriptor.members))
    if isinstance(descriptor, ModelRef):
        return isinstance(value, descriptor.resolve())
    if isinstance(descriptor, OpaqueType):
        return isinstance(value, Mapping) or is_model(type(value))
    if isinstance(descriptor, CustomType):
        return True
    return False


def tuple_conforms(value: list[object] | tuple[object, ...], descriptor: TupleType) -> bool:
    for index, item in enumerate(value):
        if index < len(descriptor.positional):
            if not conforms(item, descriptor.positional[index]):
                return False
        elif descriptor.rest is False:
            return False
        elif descriptor.rest is not None and descriptor.rest is not True:
            if not conforms(item, descriptor.rest):
                return False
    return True


def composition_satisfied(kind: CompositionKind, matched: int, total: int) -> bool:
    if kind is CompositionKind.ANY_OF:
        return matched >= 1
    if kind is CompositionKind.ALL_OF:
        return matched == total
    return matched == 1


def _scalar_conforms(value: object, kind: ScalarKind) -> bool:
    if kind is ScalarKind.STRING:
        return isinstance(value, str)
    if kind is ScalarKind.INTEGER:
        return is_integer(value)
    if kind is ScalarKind.NUMBER:
        return is_number(value)
    if kind is ScalarKind.BOOLEAN:
        return isinstance(value, bool)
    if kind is ScalarKind.NULL:
        return value is None
    return is_temporal(value, kind)


__all__ = [
    "composition_satisfied",
    "conforms",
    "is_array",
    "is_blank",
    "is_integer",
    "is_number",
    "is_temporal",
    "tuple_conforms",
]

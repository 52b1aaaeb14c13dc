"""
schemacraft — JSON value equality.

Purpose
- Decide whether two host values are equal under JSON Schema semantics so that
  ``uniqueItems``, ``enum`` and ``const`` agree with third-party validators.

Rules
- Objects compare by content, ignoring key order.
- Numbers compare by exact mathematical value (``1 == 1.0``).
- Booleans are never numbers (``True != 1``) even though Python says otherwise,
  so normal forms tag numbers, objects and arrays.
- Nesting deeper than ``MAX_DEPTH`` raises ``DepthExceeded``.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from decimal import Decimal
from fractions import Fraction
from typing import Final

from schemacraft.constants import MAX_DEPTH
from schemacraft.errors import DepthExceeded

_NUMBER: Final[str] = "number"
_OBJECT: Final[str] = "object"
_ARRAY: Final[str] = "array"
_OPAQUE: Final[str] = "opaque"


def normalize(value: object, depth: int = 0) -> object:
    """Return a hashable normal form of ``value``.

    Equal JSON values have equal normal forms. Strings, booleans and ``None``
    are returned unchanged; numbers become ``("number", Fraction)``; mappings
    become ``("object", sorted pairs)``; lists and tuples become
    ``("array", items)``.
    """

    if depth > MAX_DEPTH:
        raise DepthExceeded(MAX_DEPTH, "normalizing a value for comparison")
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, (int, Decimal)):
        if isinstance(value, Decimal) and not value.is_finite():
            return (_NUMBER, value)
        return (_NUMBER, Fraction(value))
    if isinstance(value, float):
        if not math.isfinite(value):
            return (_NUMBER, value)
        return (_NUMBER, Fraction(value))
    if isinstance(value, Mapping):
        pairs = sorted(((str(key), item) for key, item in value.items()), key=lambda pair: pair[0])
        return (_OBJECT, tuple((key, normalize(item, depth + 1)) for key, item in pairs))
    if isinstance(value, (list, tuple)):
        return (_ARRAY, tuple(normalize(item, depth + 1) for item in value))
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict) and getattr(type(value), "__schema_definition__", None) is not None:
        return normalize(to_dict(), depth + 1)
    try:
        hash(value)
    except TypeError:
        return (_OPAQUE, repr(value))
    return value


def values_equal(left: object, right: object) -> bool:
    """Return True when both values are the same JSON value."""

    return normalize(left) == normalize(right)


def has_duplicates(values: Iterable[object]) -> bool:
    """Return True when any two items are equal JSON values.

    Single pass over the input; stops at the first duplicate.
    """

    seen: set[object] = set()
    for item in values:
        form = normalize(item)
        if form in seen:
            return True
        seen.add(form)
    return False


def contains_value(candidates: Iterable[object], value: object) -> bool:
    """Return True when ``value`` equals one of ``candidates``."""

    target = normalize(value)
    return any(normalize(candidate) == target for candidate in candidates)


__all__ = ["contains_value", "has_duplicates", "normalize", "values_equal"]

"""
schemacraft — table-driven fragment builders.

Purpose
- Turn one property's constraints into a JSON Schema fragment.
- Each builder declares a table of accepted options: the JSON keyword an
  option maps to (or ``None`` for compiler-only options) and a shape check.

Failure modes
- An option not in the table raises ``UnknownOptionError``.
- A value failing its shape check raises ``ConstraintError``.
- ``None`` values are treated as unset.
"""

from __future__ import annotations

import copy
import math
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, ClassVar, Final

from schemacraft.errors import ConstraintError, UnknownOptionError

Check = Callable[[object], bool]


def to_json_value(value: object) -> object:
    """Convert constraint values to plain JSON-compatible Python values."""

    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, Mapping):
        return {str(key): to_json_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_value(item) for item in value]
    return value


@dataclass(frozen=True, slots=True)
class OptionSpec:
    """How one constraint key is checked and where it lands in the fragment."""

    json_key: str | None
    check: Check
    expected: str


def is_str(value: object) -> bool:
    return isinstance(value, str)


def is_bool(value: object) -> bool:
    return isinstance(value, bool)


def is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return False
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, Decimal):
        return value.is_finite()
    return True


def is_positive_number(value: object) -> bool:
    return is_number(value) and value > 0  # type: ignore[operator]


def is_regex(value: object) -> bool:
    if not isinstance(value, str):
        return False
    try:
        re.compile(value)
    except re.error:
        return False
    return True


def is_list(value: object) -> bool:
    return isinstance(value, (list, tuple))


def is_mapping(value: object) -> bool:
    return isinstance(value, Mapping)


def is_anything(value: object) -> bool:
    return True


def list_of(check: Check) -> Check:
    def _check(value: object) -> bool:
        return isinstance(value, (list, tuple)) and all(check(item) for item in value)

    return _check


COMMON_OPTIONS: Final[dict[str, OptionSpec]] = {
    "title": OptionSpec("title", is_str, "a string"),
    "description": OptionSpec("description", is_str, "a string"),
    "examples": OptionSpec("examples", is_list, "a list"),
    "optional": OptionSpec(None, is_bool, "a boolean"),
    "validate": OptionSpec(None, is_bool, "a boolean"),
    "ref": OptionSpec(None, is_bool, "a boolean"),
    "alias": OptionSpec(None, is_str, "a string"),
}
DOCUMENT_OPTIONS: Final[frozenset[str]] = frozenset({"title", "description", "examples", "default"})


class BaseBuilder:
    """Builds a fragment from ``base_schema`` plus the accepted options.

    Subclasses (including custom type builders passed to ``register_type``)
    set ``kind``, ``base_schema`` and ``options``.
    """

    kind: ClassVar[str] = "value"
    base_schema: ClassVar[Mapping[str, object]] = {}
    options: ClassVar[Mapping[str, OptionSpec]] = {}

    def __init__(
        self,
        name: str,
        constraints: Mapping[str, object] | None = None,
        *,
        base: Mapping[str, object] | None = None,
    ) -> None:
        self.name = name
        self.constraints = dict(constraints or {})
        self._base = base

    @classmethod
    def allowed_options(cls) -> dict[str, OptionSpec]:
        return {**COMMON_OPTIONS, **cls.options}

    def build(self) -> dict[str, Any]:
        schema: dict[str, Any] = copy.deepcopy(dict(self._base if self._base is not None else self.base_schema))
        allowed = self.allowed_options()
        for key, value in self.constraints.items():
            spec = allowed.get(key)
            if spec is None:
                raise UnknownOptionError(self.name, key, self.kind, tuple(allowed))
            if value is None:
                continue
            if not spec.check(value):
                raise ConstraintError(self.name, key, spec.expected, value)
            if spec.json_key is not None:
                schema[spec.json_key] = to_json_value(value)
        return self.finalize(schema)

    def finalize(self, schema: dict[str, Any]) -> dict[str, Any]:
        return schema


__all__ = [
    "COMMON_OPTIONS",
    "DOCUMENT_OPTIONS",
    "BaseBuilder",
    "OptionSpec",
    "is_anything",
    "is_bool",
    "is_int",
    "is_list",
    "is_mapping",
    "is_number",
    "is_positive_number",
    "is_regex",
    "is_str",
    "list_of",
    "to_json_value",
]

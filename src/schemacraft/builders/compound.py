"""Builders for arrays, tuples, unions, compositions, model references and opaque objects.

Child fragments (array items, tuple slots, union members) are built by the
dispatcher first and handed to these builders, which only add their own
keywords on top.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from schemacraft.builders.base import (
    BaseBuilder,
    OptionSpec,
    is_anything,
    is_bool,
    is_int,
    is_list,
    is_mapping,
    list_of,
)

_ARRAY_SIZE_OPTIONS: dict[str, OptionSpec] = {
    "min_items": OptionSpec("minItems", is_int, "an integer"),
    "max_items": OptionSpec("maxItems", is_int, "an integer"),
    "unique_items": OptionSpec("uniqueItems", is_bool, "a boolean"),
}


class TypedArrayBuilder(BaseBuilder):
    kind = "array"
    options = {
        **_ARRAY_SIZE_OPTIONS,
        "enum": OptionSpec("enum", list_of(is_list), "a list of lists"),
        "const": OptionSpec("const", is_list, "a list"),
        "default": OptionSpec("default", is_list, "a list"),
    }

    def __init__(
        self,
        name: str,
        constraints: Mapping[str, object] | None = None,
        *,
        items: Mapping[str, object] | None = None,
    ) -> None:
        base: dict[str, Any] = {"type": "array"}
        if items is not None:
            base["items"] = dict(items)
        super().__init__(name, constraints, base=base)


class TupleBuilder(BaseBuilder):
    """Positional ``items`` list plus ``additionalItems`` from the rest policy."""

    kind = "tuple"
    options = {
        **_ARRAY_SIZE_OPTIONS,
        "additional_items": OptionSpec(None, is_anything, "a boolean or a type"),
        "default": OptionSpec("default", is_list, "a list"),
    }

    def __init__(
        self,
        name: str,
        constraints: Mapping[str, object] | None = None,
        *,
        positional: Sequence[Mapping[str, object]] = (),
        rest: bool | Mapping[str, object] | None = None,
    ) -> None:
        base: dict[str, Any] = {"type": "array", "items": [dict(item) for item in positional]}
        if rest is not None:
            base["additionalItems"] = rest if isinstance(rest, bool) else dict(rest)
        super().__init__(name, constraints, base=base)


class UnionBuilder(BaseBuilder):
    kind = "union"
    options = {"default": OptionSpec("default", is_anything, "a value")}

    def __init__(
        self,
        name: str,
        constraints: Mapping[str, object] | None = None,
        *,
        members: Sequence[Mapping[str, object]] = (),
        keyword: str = "anyOf",
    ) -> None:
        super().__init__(name, constraints, base={keyword: [dict(member) for member in members]})


class CompositionBuilder(UnionBuilder):
    kind = "composition"


class NilableBuilder(UnionBuilder):
    """Outer ``anyOf`` wrapper; only document-level keys land here."""

    kind = "nilable"


class ModelBuilder(BaseBuilder):
    """Inline nested object schema or ``$ref`` fragment for a model property."""

    kind = "model"
    options = {"default": OptionSpec("default", is_mapping, "a mapping")}


class OpaqueBuilder(BaseBuilder):
    kind = "object"
    base_schema = {"type": "object"}
    options = {"default": OptionSpec("default", is_anything, "a value")}


__all__ = [
    "CompositionBuilder",
    "ModelBuilder",
    "NilableBuilder",
    "OpaqueBuilder",
    "TupleBuilder",
    "TypedArrayBuilder",
    "UnionBuilder",
]

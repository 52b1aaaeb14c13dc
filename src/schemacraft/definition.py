"""
schemacraft — schema definition accumulator.

Purpose
- Collect ordered property declarations and object-level keywords through a
  fluent API, rejecting invalid property names at declaration time.

Usage::

    __schema__ = (
        SchemaDefinition()
        .title("Person")
        .property("name", str, min_length=1)
        .property("age", int, minimum=0, maximum=120)
        .property("email", str, format="email", optional=True)
    )

A definition is sealed once it is bound to a model; later changes raise
``DefinitionSealedError``.
"""

from __future__ import annotations

import keyword
import typing
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from schemacraft.constants import PROPERTY_NAME_PATTERN
from schemacraft.errors import ConstraintError, DefinitionSealedError, InvalidPropertyNameError
from schemacraft.markers import Composed

_SCHEMA_SCOPE = "(schema)"


@dataclass(frozen=True, slots=True)
class PropertyDeclaration:
    """One declared property: internal name, host type and raw constraints."""

    name: str
    type: object
    constraints: Mapping[str, object] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def optional(self) -> bool:
        return self.constraints.get("optional") is True

    @property
    def alias(self) -> str | None:
        alias = self.constraints.get("alias")
        return alias if isinstance(alias, str) else None

    @property
    def validates(self) -> bool:
        return self.constraints.get("validate") is not False

    def json_key(self, strategy: Callable[[str], str]) -> str:
        """Name used in the JSON document: the alias, else the strategy's rename."""

        return self.alias or strategy(self.name)


@dataclass(frozen=True, slots=True)
class AdditionalProperties:
    """Typed ``additionalProperties``: every extra key must match ``type``."""

    type: object
    constraints: Mapping[str, object] = field(default_factory=lambda: MappingProxyType({}))


class SchemaDefinition:
    """Ordered property declarations plus object-level schema keywords."""

    def __init__(self, name: str | None = None) -> None:
        self._name = name
        self._properties: dict[str, PropertyDeclaration] = {}
        self._keywords: dict[str, Any] = {}
        self._compositions: list[Composed] = []
        self._owner: type[Any] | None = None

    def __repr__(self) -> str:
        names = ", ".join(self._properties)
        return f"SchemaDefinition(name={self._name!r}, properties=[{names}])"

    # ------------------------------------------------------------------ state

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def owner(self) -> type[Any] | None:
        return self._owner

    @property
    def sealed(self) -> bool:
        return self._owner is not None

    @property
    def properties(self) -> tuple[PropertyDeclaration, ...]:
        return tuple(self._properties.values())

    @property
    def compositions(self) -> tuple[Composed, ...]:
        return tuple(self._compositions)

    def get_property(self, name: str) -> PropertyDeclaration | None:
        return self._properties.get(name)

    def keyword(self, key: str, default: Any = None) -> Any:
        return self._keywords.get(key, default)

    def bind(self, owner: type[Any]) -> SchemaDefinition:
        """Attach the definition to ``owner`` and seal it."""

        if self._owner is not None and self._owner is not owner:
            raise DefinitionSealedError(
                f"schema definition {self._name!r} is already bound to {self._owner.__name__}"
            )
        if self._name is None:
            self._name = owner.__name__
        self._owner = owner
        return self

    # ------------------------------------------------------------- properties

    def property(self, name: str, type: object, **constraints: object) -> SchemaDefinition:
        """Declare a property. Constraint keys are checked when the schema is built."""

        self._ensure_open()
        _validate_property_name(name)
        if name in self._properties:
            raise InvalidPropertyNameError(f"Property '{name}' is already declared")
        alias = constraints.get("alias")
        if alias is not None and not (isinstance(alias, str) and alias):
            raise ConstraintError(name, "alias", "a non-empty string", alias)
        self._properties[name] = PropertyDeclaration(
            name=name, type=type, constraints=MappingProxyType(dict(constraints))
        )
        return self

    def nullable_optional_property(
        self, name: str, type: object, **constraints: object
    ) -> SchemaDefinition:
        """Declare a property that may be absent or null."""

        constraints["optional"] = True
        return self.property(name, typing.Optional[type], **constraints)  # noqa: UP007

    # --------------------------------------------------------------- keywords

    def title(self, value: str) -> SchemaDefinition:
        return self._set_text("title", value)

    def description(self, value: str) -> SchemaDefinition:
        return self._set_text("description", value)

    def examples(self, values: Sequence[object]) -> SchemaDefinition:
        if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
            raise ConstraintError(_SCHEMA_SCOPE, "examples", "a list", values)
        return self._set("examples", list(values))

    def schema_version(self, value: str) -> SchemaDefinition:
        return self._set_text("schema_version", value)

    def schema_id(self, value: str) -> SchemaDefinition:
        return self._set_text("schema_id", value)

    def property_naming_strategy(self, strategy: str | Callable[[str], str]) -> SchemaDefinition:
        from schemacraft.naming import resolve_strategy

        try:
            resolve_strategy(strategy)
        except ValueError as exc:
            raise ConstraintError(
                _SCHEMA_SCOPE, "property_naming_strategy", "identity, camel, pascal or a callable", strategy
            ) from exc
        return self._set("property_naming_strategy", strategy)

    def min_properties(self, count: int) -> SchemaDefinition:
        return self._set_count("min_properties", count)

    def max_properties(self, count: int) -> SchemaDefinition:
        return self._set_count("max_properties", count)

    def dependent_required(self, mapping: Mapping[str, Sequence[str]]) -> SchemaDefinition:
        if not isinstance(mapping, Mapping):
            raise ConstraintError(_SCHEMA_SCOPE, "dependent_required", "a mapping of name -> names", mapping)
        normalized: dict[str, tuple[str, ...]] = {}
        for key, dependents in mapping.items():
            if (
                not isinstance(key, str)
                or isinstance(dependents, str)
                or not isinstance(dependents, Sequence)
                or not all(isinstance(item, str) for item in dependents)
            ):
                raise ConstraintError(
                    _SCHEMA_SCOPE, "dependent_required", "a mapping of name -> names", mapping
                )
            normalized[key] = tuple(dependents)
        return self._set("dependent_required", normalized)

    def pattern_properties(self, mapping: Mapping[str, object]) -> SchemaDefinition:
        """Map regex patterns to a host type or a literal schema mapping."""

        if not isinstance(mapping, Mapping) or not all(isinstance(key, str) for key in mapping):
            raise ConstraintError(_SCHEMA_SCOPE, "pattern_properties", "a mapping of pattern -> schema", mapping)
        return self._set("pattern_properties", dict(mapping))

    def additional_properties(self, value: object, **constraints: object) -> SchemaDefinition:
        """Allow (``True``), forbid (``False``) or type extra keys."""

        if isinstance(value, bool):
            if constraints:
                raise ConstraintError(_SCHEMA_SCOPE, "additional_properties", "a type when constraints are given", value)
            return self._set("additional_properties", value)
        return self._set(
            "additional_properties",
            AdditionalProperties(type=value, constraints=MappingProxyType(dict(constraints))),
        )

    def compose(self, *compositions: Composed) -> SchemaDefinition:
        """Add schema-level ``allOf``/``anyOf``/``oneOf`` over other models."""

        self._ensure_open()
        for composition in compositions:
            if not isinstance(composition, Composed):
                raise ConstraintError(_SCHEMA_SCOPE, "compose", "AllOf[...], AnyOf[...] or OneOf[...]", composition)
            self._compositions.append(composition)
        return self

    # ---------------------------------------------------------------- helpers

    def _ensure_open(self) -> None:
        if self._owner is not None:
            raise DefinitionSealedError(
                f"schema definition {self._name!r} is bound to {self._owner.__name__} and cannot change"
            )

    def _set(self, key: str, value: object) -> SchemaDefinition:
        self._ensure_open()
        self._keywords[key] = value
        return self

    def _set_text(self, key: str, value: object) -> SchemaDefinition:
        if not isinstance(value, str):
            raise ConstraintError(_SCHEMA_SCOPE, key, "a string", value)
        return self._set(key, value)

    def _set_count(self, key: str, value: object) -> SchemaDefinition:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ConstraintError(_SCHEMA_SCOPE, key, "a non-negative integer", value)
        return self._set(key, value)


def _validate_property_name(name: object) -> None:
    if not isinstance(name, str) or not PROPERTY_NAME_PATTERN.fullmatch(name) or keyword.iskeyword(name):
        raise InvalidPropertyNameError(
            f"Invalid property name '{name}'. Must start with letter/underscore and contain only "
            "letters, numbers, underscores, and must not be a Python keyword"
        )


__all__ = ["AdditionalProperties", "PropertyDeclaration", "SchemaDefinition"]

"""
schemacraft — host model base class.

Purpose
- Bind a ``SchemaDefinition`` to a Python class so the class exposes both a
  memoized JSON Schema document and runtime validation built from the same
  declarations.

Usage::

    class Person(Model, config=CompilerConfig(use_refs=True)):
        __schema__ = (
            SchemaDefinition()
            .property("name", str, min_length=1)
            .property("address", Address)
        )

    Person.json_schema()
    person = Person.from_dict({"name": "Ada", "address": {"city": "London"}})
    person.is_valid()
"""

from __future__ import annotations

import copy
import datetime
import threading
from collections.abc import Mapping
from typing import Any, ClassVar

import structlog

from schemacraft.builders.document import build_document
from schemacraft.classifier import (
    Composition,
    ModelRef,
    Nilable,
    TupleType,
    TypedArray,
    TypeDescriptor,
    UnionType,
    classify,
    resolve_tuple_rest,
    unwrap_nilable,
)
from schemacraft.config.schema import DEFAULT_CONFIG, CompilerConfig
from schemacraft.definition import AdditionalProperties, PropertyDeclaration, SchemaDefinition
from schemacraft.errors import (
    InvalidPropertyNameError,
    SchemaCraftError,
    UnexpectedPropertyError,
    UnresolvedModelError,
)
from schemacraft.markers import CompositionKind
from schemacraft.naming import resolve_strategy
from schemacraft.refs import ref_template, resolved_schema_id
from schemacraft.registry import register_model, unregister_model
from schemacraft.validation.adapters.registry import resolve_adapter
from schemacraft.validation.errors import ErrorCollection, ValidationContext
from schemacraft.validation.validator_set import ValidatorSet

logger = structlog.get_logger(__name__)

_schema_lock = threading.RLock()


class Model:
    """Base class for models declared with a ``__schema__`` definition."""

    __schema__: ClassVar[SchemaDefinition | None] = None
    __schema_definition__: ClassVar[SchemaDefinition | None] = None
    __schema_config__: ClassVar[CompilerConfig] = DEFAULT_CONFIG
    __validators__: ClassVar[ValidatorSet | None] = None

    def __init_subclass__(cls, *, config: CompilerConfig | None = None, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if config is not None:
            cls.__schema_config__ = config
        definition = cls.__dict__.get("__schema__")
        if definition is None:
            return
        if not isinstance(definition, SchemaDefinition):
            raise TypeError(f"{cls.__name__}.__schema__ must be a SchemaDefinition, got {type(definition).__name__}")
        for declaration in definition.properties:
            if declaration.name in _RESERVED_NAMES:
                raise InvalidPropertyNameError(
                    f"Property '{declaration.name}' on {cls.__name__} conflicts with a Model attribute"
                )

        definition.bind(cls)
        cls.__schema_definition__ = definition
        cls._json_schema_cache = None
        register_model(cls)

        effective = cls.__schema_config__
        try:
            cls._json_schema_cache = build_document(definition, effective, owner=cls)
        except UnresolvedModelError as exc:
            # A forward reference may name a model declared later; json_schema()
            # retries the build when it is first called.
            logger.debug("model_document_deferred", model=cls.__name__, missing=exc.name)
        except SchemaCraftError:
            unregister_model(cls)
            raise
        if effective.auto_validations:
            adapter = resolve_adapter(effective.validation_adapter)
            cls.__validators__ = adapter.build_validations(cls, definition, effective)
        else:
            cls.__validators__ = ValidatorSet()
        logger.debug(
            "model_compiled",
            model=cls.__name__,
            properties=[declaration.name for declaration in definition.properties],
            auto_validations=effective.auto_validations,
        )

    def __init__(self, **attributes: Any) -> None:
        definition = type(self).schema_definition()
        self._errors = ErrorCollection()
        self._additional_properties: dict[str, Any] = {}
        for declaration in definition.properties:
            default = declaration.constraints.get("default")
            setattr(self, declaration.name, _coerce(copy.deepcopy(default), _descriptor(declaration)))

        names = type(self)._attribute_names()
        allows_extra = type(self)._allows_additional_properties()
        for key, value in attributes.items():
            name = names.get(key)
            if name is not None:
                setattr(self, name, _coerce(value, _descriptor(definition.get_property(name))))
            elif allows_extra:
                self._additional_properties[key] = value
            else:
                raise UnexpectedPropertyError(type(self).__name__, key)

    def __repr__(self) -> str:
        definition = type(self).schema_definition()
        fields = ", ".join(
            f"{declaration.name}={getattr(self, declaration.name, None)!r}" for declaration in definition.properties
        )
        return f"{type(self).__name__}({fields})"

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        definition = type(self).schema_definition()
        return all(
            getattr(self, declaration.name, None) == getattr(other, declaration.name, None)
            for declaration in definition.properties
        ) and self._additional_properties == other._additional_properties  # type: ignore[attr-defined]

    __hash__ = None  # type: ignore[assignment]

    # -------------------------------------------------------------- classmethods

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Model:
        """Build an instance from JSON-shaped data; keys may be names or JSON keys."""

        return cls(**dict(data))

    @classmethod
    def schema_definition(cls) -> SchemaDefinition:
        definition = cls.__schema_definition__
        if definition is None:
            raise TypeError(f"{cls.__name__} does not declare __schema__")
        return definition

    @classmethod
    def json_schema(cls) -> dict[str, Any]:
        """Root JSON Schema document; built once per class and copied on return."""

        definition = cls.schema_definition()
        with _schema_lock:
            cached = cls.__dict__.get("_json_schema_cache")
            if cached is None:
                cached = build_document(definition, cls.__schema_config__, owner=cls)
                cls._json_schema_cache = cached
        return copy.deepcopy(cached)

    @classmethod
    def ref_template(cls) -> str:
        return ref_template(cls)

    @classmethod
    def schema_id(cls) -> str | None:
        return resolved_schema_id(cls.schema_definition(), cls.__schema_config__)

    @classmethod
    def validator_set(cls) -> ValidatorSet:
        return cls.__validators__ if cls.__validators__ is not None else ValidatorSet()

    @classmethod
    def _attribute_names(cls) -> dict[str, str]:
        definition = cls.schema_definition()
        strategy = resolve_strategy(
            definition.keyword("property_naming_strategy") or cls.__schema_config__.property_naming_strategy
        )
        names = {declaration.json_key(strategy): declaration.name for declaration in definition.properties}
        names.update({declaration.name: declaration.name for declaration in definition.properties})
        return names

    @classmethod
    def _allows_additional_properties(cls) -> bool:
        value = cls.schema_definition().keyword("additional_properties")
        if value is None:
            return cls.__schema_config__.default_additional_properties
        return isinstance(value, AdditionalProperties) or bool(value)

    # ----------------------------------------------------------------- instance

    @property
    def errors(self) -> ErrorCollection:
        """Issues from the most recent :meth:`validate` call."""

        return self._errors

    @property
    def additional_properties(self) -> dict[str, Any]:
        return self._additional_properties

    def validate(self) -> ErrorCollection:
        errors = ErrorCollection()
        context = ValidationContext(errors=errors, active={id(self)})
        type(self).validator_set().run(self, context)
        self._errors = errors
        return errors

    def is_valid(self) -> bool:
        return self.validate().is_empty

    def to_dict(self, *, by_alias: bool = True) -> dict[str, Any]:
        """JSON-shaped data. Optional, non-nilable properties that are ``None`` are omitted."""

        return _model_to_dict(self, by_alias, set())


_RESERVED_NAMES: frozenset[str] = frozenset(name for name in dir(Model) if not name.startswith("__"))


def _descriptor(declaration: PropertyDeclaration | None) -> TypeDescriptor | None:
    if declaration is None:
        return None
    return resolve_tuple_rest(classify(declaration.type), declaration.constraints)


def _coerce(value: Any, descriptor: TypeDescriptor | None) -> Any:
    """Turn nested mappings into model instances along the declared type."""

    if value is None or descriptor is None:
        return value
    inner, _ = unwrap_nilable(descriptor)
    if isinstance(inner, ModelRef):
        target = inner.resolve()
        if isinstance(value, Mapping):
            return target.from_dict(value)
        return value
    if isinstance(inner, TypedArray) and isinstance(value, (list, tuple)):
        return [_coerce(item, inner.items) for item in value]
    if isinstance(inner, TupleType) and isinstance(value, (list, tuple)):
        coerced = []
        for index, item in enumerate(value):
            if index < len(inner.positional):
                coerced.append(_coerce(item, inner.positional[index]))
            elif inner.rest is not None and not isinstance(inner.rest, bool):
                coerced.append(_coerce(item, inner.rest))
            else:
                coerced.append(item)
        return coerced
    if isinstance(inner, UnionType) and isinstance(value, Mapping):
        return _coerce_alternatives(value, inner.members)
    if isinstance(inner, Composition) and isinstance(value, Mapping):
        # allOf and oneOf judge the same object against every member, so the
        # mapping is kept as data rather than bound to one member model.
        if inner.kind is CompositionKind.ANY_OF:
            return _coerce_alternatives(value, inner.members)
        return dict(value)
    return value


def _coerce_alternatives(value: Mapping[str, Any], members: tuple[TypeDescriptor, ...]) -> Any:
    first: Model | None = None
    for member in members:
        member_inner, _ = unwrap_nilable(member)
        if not isinstance(member_inner, ModelRef):
            continue
        try:
            candidate = member_inner.resolve().from_dict(value)
        except UnexpectedPropertyError:
            continue
        if candidate.is_valid():
            return candidate
        if first is None:
            first = candidate
    return first if first is not None else value


def _model_to_dict(model: Model, by_alias: bool, seen: set[int]) -> dict[str, Any]:
    key = id(model)
    if key in seen:
        raise ValueError(f"cannot serialize {type(model).__name__}: the object graph is cyclic")
    seen.add(key)
    try:
        definition = type(model).schema_definition()
        strategy = resolve_strategy(
            definition.keyword("property_naming_strategy") or type(model).__schema_config__.property_naming_strategy
        )
        result: dict[str, Any] = {}
        for declaration in definition.properties:
            value = getattr(model, declaration.name, None)
            if value is None and declaration.optional and not isinstance(classify(declaration.type), Nilable):
                continue
            name = declaration.json_key(strategy) if by_alias else declaration.name
            result[name] = _plain(value, by_alias, seen)
        for extra_key, extra_value in model.additional_properties.items():
            result[extra_key] = _plain(extra_value, by_alias, seen)
        return result
    finally:
        seen.discard(key)


def _plain(value: Any, by_alias: bool, seen: set[int]) -> Any:
    if isinstance(value, Model):
        return _model_to_dict(value, by_alias, seen)
    if isinstance(value, Mapping):
        return {str(key): _plain(item, by_alias, seen) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item, by_alias, seen) for item in value]
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    return value


def build_schema(definition: SchemaDefinition, config: CompilerConfig | None = None) -> dict[str, Any]:
    """Root document for a definition that is not bound to a model class."""

    return build_document(definition, config)


__all__ = ["Model", "build_schema"]

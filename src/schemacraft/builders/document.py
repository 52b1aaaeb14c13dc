"""
schemacraft — object schema and document assembly.

Purpose
- Dispatch every declared property to its fragment builder.
- Assemble object schemas (properties, required, object keywords) and root
  documents (``$schema``, ``$id``, ``$defs``).

Invariants
- Nested object schemas never carry ``$schema`` or ``$id``.
- Each referenced model appears at most once in ``$defs``.
- Recursive models terminate: a model already being built is referenced,
  never inlined again.
- Every model body is built under that model's own config.
- Output key order is fixed, so building the same definition twice yields
  equal documents.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

import structlog

from schemacraft import registry
from schemacraft.builders.base import DOCUMENT_OPTIONS
from schemacraft.builders.compound import (
    CompositionBuilder,
    ModelBuilder,
    NilableBuilder,
    OpaqueBuilder,
    TupleBuilder,
    TypedArrayBuilder,
    UnionBuilder,
)
from schemacraft.builders.scalars import SCALAR_BUILDERS
from schemacraft.classifier import (
    Composition,
    CustomType,
    ModelRef,
    Nilable,
    OpaqueType,
    Scalar,
    TupleType,
    TypedArray,
    TypeDescriptor,
    UnionType,
    classify,
    resolve_tuple_rest,
)
from schemacraft.config.schema import DEFAULT_CONFIG, CompilerConfig
from schemacraft.constants import DEFS_KEY, MAX_DEPTH, OBJECT_KEY_ORDER, ROOT_POINTER
from schemacraft.definition import AdditionalProperties, PropertyDeclaration, SchemaDefinition
from schemacraft.errors import DepthExceeded, UnknownTypeError
from schemacraft.naming import resolve_strategy
from schemacraft.refs import (
    def_name,
    definition_of,
    ref_pointer,
    resolved_schema_id,
    resolved_schema_uri,
    should_use_ref,
)

logger = structlog.get_logger(__name__)

_NULL_FRAGMENT: dict[str, Any] = {"type": "null"}


@dataclass(slots=True)
class BuildContext:
    """State shared while one root document is built."""

    config: CompilerConfig
    root: type[Any] | None = None
    defs: dict[str, dict[str, Any]] = field(default_factory=dict)
    in_progress: list[type[Any]] = field(default_factory=list)
    pending_defs: set[str] = field(default_factory=set)
    depth: int = 0

    @contextmanager
    def descend(self) -> Iterator[None]:
        if self.depth >= MAX_DEPTH:
            raise DepthExceeded(MAX_DEPTH, "building a schema document")
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1

    def build_model(self, model: type[Any]) -> dict[str, Any]:
        """Inline object schema for ``model``, built under the model's own config."""

        outer = self.config
        self.config = getattr(model, "__schema_config__", outer)
        self.in_progress.append(model)
        try:
            return build_object_schema(definition_of(model), self)
        finally:
            self.in_progress.pop()
            self.config = outer

    def reference(self, model: type[Any]) -> str:
        """Pointer to ``model``; local targets other than the root land in ``$defs``."""

        pointer = ref_pointer(model, self.config, root=self.root)
        if model is not self.root and pointer.startswith(ROOT_POINTER):
            self.ensure_def(model)
        return pointer

    def ensure_def(self, model: type[Any]) -> None:
        name = def_name(model)
        if name in self.defs or name in self.pending_defs:
            return
        # A definition body is built as if reached from the root, so models
        # inlined on the current path are inlined again rather than split out.
        outer = self.in_progress
        self.in_progress = [self.root] if self.root is not None else []
        self.pending_defs.add(name)
        try:
            schema = self.build_model(model)
        finally:
            self.pending_defs.discard(name)
            self.in_progress = outer
        self.defs[name] = schema


def build_fragment(
    descriptor: TypeDescriptor,
    name: str,
    constraints: Mapping[str, object],
    ctx: BuildContext,
) -> dict[str, Any]:
    """Build the JSON Schema fragment for one property."""

    with ctx.descend():
        return _dispatch(descriptor, name, constraints, ctx)


def _dispatch(
    descriptor: TypeDescriptor,
    name: str,
    constraints: Mapping[str, object],
    ctx: BuildContext,
) -> dict[str, Any]:
    if isinstance(descriptor, Scalar):
        return SCALAR_BUILDERS[descriptor.kind](name, constraints).build()
    if isinstance(descriptor, Nilable):
        return _build_nilable(descriptor, name, constraints, ctx)
    if isinstance(descriptor, TypedArray):
        items = None
        if descriptor.items is not None:
            items = build_fragment(descriptor.items, name, _ref_only(constraints), ctx)
        return TypedArrayBuilder(name, constraints, items=items).build()
    if isinstance(descriptor, TupleType):
        positional = [build_fragment(slot, name, _ref_only(constraints), ctx) for slot in descriptor.positional]
        rest: bool | dict[str, Any] | None
        if descriptor.rest is None or isinstance(descriptor.rest, bool):
            rest = descriptor.rest
        else:
            rest = build_fragment(descriptor.rest, name, _ref_only(constraints), ctx)
        return TupleBuilder(name, constraints, positional=positional, rest=rest).build()
    if isinstance(descriptor, UnionType):
        members = [build_fragment(member, name, _ref_only(constraints), ctx) for member in descriptor.members]
        return UnionBuilder(name, constraints, members=members).build()
    if isinstance(descriptor, Composition):
        members = [build_fragment(member, name, _ref_only(constraints), ctx) for member in descriptor.members]
        return CompositionBuilder(name, constraints, members=members, keyword=descriptor.kind.value).build()
    if isinstance(descriptor, ModelRef):
        return _build_model_ref(descriptor, name, constraints, ctx)
    if isinstance(descriptor, CustomType):
        builder = registry.custom_builder_for(descriptor.host_type)
        if builder is None:
            raise UnknownTypeError(f"no builder registered for {descriptor.host_type!r}")
        return builder(name, constraints).build()
    if isinstance(descriptor, OpaqueType):
        return OpaqueBuilder(name, constraints).build()
    raise UnknownTypeError(f"cannot build a schema for property {name!r} of type {descriptor!r}")


def _build_nilable(
    descriptor: Nilable,
    name: str,
    constraints: Mapping[str, object],
    ctx: BuildContext,
) -> dict[str, Any]:
    inner_constraints = {key: value for key, value in constraints.items() if key not in DOCUMENT_OPTIONS}
    outer_constraints = {key: value for key, value in constraints.items() if key in DOCUMENT_OPTIONS}
    if isinstance(descriptor.inner, UnionType):
        members = list(build_fragment(descriptor.inner, name, inner_constraints, ctx)["anyOf"])
    else:
        members = [build_fragment(descriptor.inner, name, inner_constraints, ctx)]
    members.append(dict(_NULL_FRAGMENT))
    return NilableBuilder(name, outer_constraints, members=members).build()


def _build_model_ref(
    descriptor: ModelRef,
    name: str,
    constraints: Mapping[str, object],
    ctx: BuildContext,
) -> dict[str, Any]:
    model = descriptor.resolve()
    if should_use_ref(constraints, ctx.config) or model in ctx.in_progress:
        base: dict[str, Any] = {"$ref": ctx.reference(model)}
    else:
        base = ctx.build_model(model)
    return ModelBuilder(name, constraints, base=base).build()


def _ref_only(constraints: Mapping[str, object]) -> dict[str, object]:
    flag = constraints.get("ref")
    return {} if flag is None else {"ref": flag}


def is_required(declaration: PropertyDeclaration, config: CompilerConfig) -> bool:
    """Optional properties, and nilable ones when so configured, are not required."""

    if declaration.optional:
        return False
    if config.nilable_is_optional and isinstance(classify(declaration.type), Nilable):
        return False
    return True


def build_object_schema(definition: SchemaDefinition, ctx: BuildContext) -> dict[str, Any]:
    """Object schema for ``definition`` without root-only keywords."""

    strategy = resolve_strategy(
        definition.keyword("property_naming_strategy") or ctx.config.property_naming_strategy
    )
    schema: dict[str, Any] = {"type": "object"}
    for key in ("title", "description", "examples"):
        value = definition.keyword(key)
        if value is not None:
            schema[key] = value

    properties: dict[str, Any] = {}
    required: list[str] = []
    for declaration in definition.properties:
        descriptor = resolve_tuple_rest(classify(declaration.type), declaration.constraints)
        json_key = declaration.json_key(strategy)
        properties[json_key] = build_fragment(descriptor, declaration.name, declaration.constraints, ctx)
        if is_required(declaration, ctx.config):
            required.append(json_key)
    if properties:
        schema["properties"] = properties
    if required:
        schema["required"] = required

    schema["additionalProperties"] = _additional_properties(definition, ctx)

    patterns = definition.keyword("pattern_properties")
    if patterns:
        schema["patternProperties"] = {
            pattern: dict(value) if isinstance(value, Mapping) else build_fragment(classify(value), pattern, {}, ctx)
            for pattern, value in patterns.items()
        }
    for key, json_key in (("min_properties", "minProperties"), ("max_properties", "maxProperties")):
        value = definition.keyword(key)
        if value is not None:
            schema[json_key] = value
    dependents = definition.keyword("dependent_required")
    if dependents:
        keys = {declaration.name: declaration.json_key(strategy) for declaration in definition.properties}
        schema["dependentRequired"] = {
            keys.get(key, key): [keys.get(name, name) for name in names] for key, names in dependents.items()
        }

    for composition in definition.compositions:
        fragments = schema.setdefault(composition.kind.value, [])
        for member in composition.members:
            fragments.append(_composed_member(member, ctx))

    return _ordered(schema)


def _additional_properties(definition: SchemaDefinition, ctx: BuildContext) -> bool | dict[str, Any]:
    value = definition.keyword("additional_properties")
    if value is None:
        return ctx.config.default_additional_properties
    if isinstance(value, AdditionalProperties):
        return build_fragment(classify(value.type), "additionalProperties", value.constraints, ctx)
    return bool(value)


def _composed_member(member: object, ctx: BuildContext) -> dict[str, Any]:
    descriptor = classify(member)
    if isinstance(descriptor, ModelRef):
        with ctx.descend():
            return {"$ref": ctx.reference(descriptor.resolve())}
    return build_fragment(descriptor, "compose", {}, ctx)


def _ordered(schema: dict[str, Any]) -> dict[str, Any]:
    ordered = {key: schema[key] for key in OBJECT_KEY_ORDER if key in schema}
    ordered.update((key, value) for key, value in schema.items() if key not in ordered)
    return ordered


def build_document(
    definition: SchemaDefinition,
    config: CompilerConfig | None = None,
    *,
    owner: type[Any] | None = None,
) -> dict[str, Any]:
    """Root JSON Schema document for ``definition``."""

    effective = config if config is not None else DEFAULT_CONFIG
    ctx = BuildContext(config=effective, root=owner)
    if owner is not None:
        ctx.in_progress.append(owner)
    body = build_object_schema(definition, ctx)

    document: dict[str, Any] = {}
    schema_uri = resolved_schema_uri(definition, effective)
    if schema_uri is not None:
        document["$schema"] = schema_uri
    schema_id = resolved_schema_id(definition, effective)
    if schema_id is not None:
        document["$id"] = schema_id
    document.update(body)
    if ctx.defs:
        document[DEFS_KEY] = dict(ctx.defs)

    logger.debug(
        "schema_document_built",
        schema=definition.name,
        properties=len(definition.properties),
        defs=sorted(ctx.defs),
    )
    return _ordered(document)


__all__ = ["BuildContext", "build_document", "build_fragment", "build_object_schema", "is_required"]

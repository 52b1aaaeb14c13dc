"""Reference resolution: when to emit ``$ref`` and what it points to."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from schemacraft.config.schema import CompilerConfig, resolve_schema_uri
from schemacraft.constants import DEFS_POINTER_PREFIX, NO_VALUE, ROOT_POINTER
from schemacraft.naming import snake_case

if TYPE_CHECKING:
    from schemacraft.definition import SchemaDefinition


def should_use_ref(constraints: Mapping[str, object], config: CompilerConfig) -> bool:
    """A per-property ``ref`` flag wins over the configured default."""

    flag = constraints.get("ref")
    if isinstance(flag, bool):
        return flag
    return config.use_refs


def definition_of(model: type[Any]) -> SchemaDefinition:
    return model.__schema_definition__  # type: ignore[no-any-return]


def def_name(model: type[Any]) -> str:
    return definition_of(model).name or model.__name__


def resolved_schema_id(
    definition: SchemaDefinition,
    config: CompilerConfig,
    *,
    include_global: bool = True,
) -> str | None:
    """``$id`` precedence: explicit > generated from ``base_schema_uri`` > configured default."""

    explicit = definition.keyword("schema_id")
    if explicit is not None:
        return None if explicit == NO_VALUE else explicit
    if config.auto_generate_ids and config.base_schema_uri:
        return f"{config.base_schema_uri.rstrip('/')}/{snake_case(definition.name or '')}"
    if include_global and config.schema_id not in (None, NO_VALUE):
        return config.schema_id
    return None


def resolved_schema_uri(definition: SchemaDefinition, config: CompilerConfig) -> str | None:
    version = definition.keyword("schema_version")
    return resolve_schema_uri(version if version is not None else config.schema_version)


def ref_pointer(model: type[Any], config: CompilerConfig, *, root: type[Any] | None = None) -> str:
    """Pointer for a reference to ``model``.

    With ``prefer_external_refs`` the target's own ``$id``, as its own config
    generates it, is used when it has one. Such targets are not copied into
    ``$defs``. A reference to the document's root model is ``#``.
    """

    if config.prefer_external_refs:
        target_config = getattr(model, "__schema_config__", config)
        external = resolved_schema_id(definition_of(model), target_config, include_global=False)
        if external:
            return external
    if root is not None and model is root:
        return ROOT_POINTER
    return f"{DEFS_POINTER_PREFIX}{def_name(model)}"


def ref_template(model: type[Any]) -> str:
    """Local ``$defs`` pointer for ``model``."""

    return f"{DEFS_POINTER_PREFIX}{def_name(model)}"


__all__ = [
    "def_name",
    "ref_pointer",
    "ref_template",
    "resolved_schema_id",
    "resolved_schema_uri",
    "should_use_ref",
]

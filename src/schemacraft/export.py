"""Serialize documents, check them against their meta-schema and bundle them for ``$ref`` resolution."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from jsonschema import Draft201909Validator, validators
from referencing import Registry, Resource
from referencing.jsonschema import DRAFT201909

from schemacraft.builders.base import to_json_value


def _as_document(source: Any) -> Mapping[str, Any]:
    json_schema = getattr(source, "json_schema", None)
    if callable(json_schema):
        return json_schema()  # type: ignore[no-any-return]
    if isinstance(source, Mapping):
        return source
    raise TypeError(f"expected a model class or a schema document, got {type(source).__name__}")


def dump_schema(source: Any, *, indent: int | None = 2) -> str:
    """JSON text for a model class or a document; key order is preserved."""

    return json.dumps(to_json_value(_as_document(source)), indent=indent, ensure_ascii=False)


def validator_class_for(document: Mapping[str, Any]) -> type[Any]:
    """Validator for the document's ``$schema``; Draft 2019-09 when none is declared."""

    return validators.validator_for(document, default=Draft201909Validator)  # type: ignore[no-any-return]


def check_document(source: Any) -> None:
    """Raise ``jsonschema.exceptions.SchemaError`` when the document is not a valid schema."""

    document = _as_document(source)
    validator_class_for(document).check_schema(document)


def schema_registry(*sources: Any) -> Registry:
    """Registry of documents keyed by their ``$id``.

    Documents built with ``prefer_external_refs`` point at other models by
    URI; pass the target models here and hand the registry to a validator::

        Draft201909Validator(Post.json_schema(), registry=schema_registry(Tag))
    """

    resources = []
    for source in sources:
        document = _as_document(source)
        uri = document.get("$id")
        if not uri:
            raise ValueError("only documents with an $id can be registered for external references")
        resources.append((uri, Resource.from_contents(dict(document), default_specification=DRAFT201909)))
    return Registry().with_resources(resources)


__all__ = ["check_document", "dump_schema", "schema_registry", "validator_class_for"]

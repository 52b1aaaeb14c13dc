"""Stable constants shared by the document builders and the validation adapter."""

from __future__ import annotations

import re
from typing import Final

# Recursion cap shared by value normalization, document building and runtime validation.
MAX_DEPTH: Final[int] = 100

# Named JSON Schema drafts accepted by ``schema_version``.
SCHEMA_VERSIONS: Final[dict[str, str]] = {
    "draft202012": "https://json-schema.org/draft/2020-12/schema",
    "draft201909": "https://json-schema.org/draft/2019-09/schema",
    "draft7": "http://json-schema.org/draft-07/schema#",
    "draft6": "http://json-schema.org/draft-06/schema#",
    "draft4": "http://json-schema.org/draft-04/schema#",
}
NO_VALUE: Final[str] = "none"

DEFS_KEY: Final[str] = "$defs"
DEFS_POINTER_PREFIX: Final[str] = "#/$defs/"
ROOT_POINTER: Final[str] = "#"

PROPERTY_NAME_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Constraint keys consumed by the compiler and never emitted into documents.
INTERNAL_CONSTRAINT_KEYS: Final[frozenset[str]] = frozenset({"optional", "validate", "ref", "alias"})

# Path used for object-level validation errors.
BASE_ERROR_PATH: Final[str] = "base"

# Deterministic ordering of root/object level keywords in built documents.
OBJECT_KEY_ORDER: Final[tuple[str, ...]] = (
    "$schema",
    "$id",
    "title",
    "description",
    "examples",
    "type",
    "properties",
    "required",
    "additionalProperties",
    "patternProperties",
    "minProperties",
    "maxProperties",
    "dependentRequired",
    "allOf",
    "anyOf",
    "oneOf",
    "$defs",
)

__all__ = [
    "BASE_ERROR_PATH",
    "DEFS_KEY",
    "DEFS_POINTER_PREFIX",
    "INTERNAL_CONSTRAINT_KEYS",
    "MAX_DEPTH",
    "NO_VALUE",
    "OBJECT_KEY_ORDER",
    "PROPERTY_NAME_PATTERN",
    "ROOT_POINTER",
    "SCHEMA_VERSIONS",
]

"""
schemacraft — dual-target schema compiler.

Purpose
- Compile one declarative model description into a JSON Schema document and
  into runtime validators that agree with that document.

Import boundary
- No side effects at import time (no config loading, no logging setup).
"""

from schemacraft.builders.base import BaseBuilder, OptionSpec
from schemacraft.config import CompilerConfig, ConfigLoadError, ConfigValidationError, load_config
from schemacraft.definition import PropertyDeclaration, SchemaDefinition
from schemacraft.equality import has_duplicates, normalize, values_equal
from schemacraft.errors import (
    ConstraintError,
    DefinitionSealedError,
    DepthExceeded,
    InvalidPropertyNameError,
    SchemaCraftError,
    UnexpectedPropertyError,
    UnknownOptionError,
    UnknownTypeError,
    UnresolvedModelError,
)
from schemacraft.export import check_document, dump_schema, schema_registry
from schemacraft.markers import AllOf, AnyOf, OneOf
from schemacraft.model import Model, build_schema
from schemacraft.registry import register_type, unregister_type
from schemacraft.tools import function_spec
from schemacraft.validation import (
    ErrorCollection,
    ValidationAdapter,
    ValidationIssue,
    register_adapter,
)

__version__ = "0.1.0"

__all__ = [
    "AllOf",
    "AnyOf",
    "BaseBuilder",
    "CompilerConfig",
    "ConfigLoadError",
    "ConfigValidationError",
    "ConstraintError",
    "DefinitionSealedError",
    "DepthExceeded",
    "ErrorCollection",
    "InvalidPropertyNameError",
    "Model",
    "OneOf",
    "OptionSpec",
    "PropertyDeclaration",
    "SchemaCraftError",
    "SchemaDefinition",
    "UnexpectedPropertyError",
    "UnknownOptionError",
    "UnknownTypeError",
    "UnresolvedModelError",
    "ValidationAdapter",
    "ValidationIssue",
    "__version__",
    "build_schema",
    "check_document",
    "dump_schema",
    "function_spec",
    "has_duplicates",
    "load_config",
    "normalize",
    "register_adapter",
    "register_type",
    "schema_registry",
    "unregister_type",
    "values_equal",
]

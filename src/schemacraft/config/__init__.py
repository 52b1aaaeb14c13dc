"""Compiler configuration: defaults, validation and TOML/env loading."""

from schemacraft.config.loader import ConfigLoadError, load_config
from schemacraft.config.schema import (
    DEFAULT_CONFIG,
    CompilerConfig,
    ConfigValidationError,
    ConfigValidationIssue,
    ConfigValidationResult,
    config_from_mapping,
    validate_config,
)

__all__ = [
    "DEFAULT_CONFIG",
    "CompilerConfig",
    "ConfigLoadError",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "ConfigValidationResult",
    "config_from_mapping",
    "load_config",
    "validate_config",
]

"""Runtime validation: error collection, validator sets and adapters."""

from schemacraft.validation.adapters import (
    NoneAdapter,
    StandardAdapter,
    UnknownAdapterError,
    ValidationAdapter,
    register_adapter,
    resolve_adapter,
)
from schemacraft.validation.errors import ErrorCollection, ValidationContext, ValidationIssue
from schemacraft.validation.validator_set import ValidatorSet

__all__ = [
    "ErrorCollection",
    "NoneAdapter",
    "StandardAdapter",
    "UnknownAdapterError",
    "ValidationAdapter",
    "ValidationContext",
    "ValidationIssue",
    "ValidatorSet",
    "register_adapter",
    "resolve_adapter",
]

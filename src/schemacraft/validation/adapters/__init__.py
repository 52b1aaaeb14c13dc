"""Validation adapters and their registry."""

from schemacraft.validation.adapters.base import ValidationAdapter
from schemacraft.validation.adapters.none import NoneAdapter
from schemacraft.validation.adapters.registry import (
    UnknownAdapterError,
    register_adapter,
    registered_adapters,
    resolve_adapter,
)
from schemacraft.validation.adapters.standard import StandardAdapter

__all__ = [
    "NoneAdapter",
    "StandardAdapter",
    "UnknownAdapterError",
    "ValidationAdapter",
    "register_adapter",
    "registered_adapters",
    "resolve_adapter",
]

"""Compile-time exception taxonomy.

Every error raised while declaring or building a schema derives from
:class:`SchemaCraftError`. Runtime validation never raises for bad data; it
records issues in an :class:`~schemacraft.validation.errors.ErrorCollection`.
"""

from __future__ import annotations


class SchemaCraftError(Exception):
    """Base class for schema declaration and compilation failures."""


class InvalidPropertyNameError(SchemaCraftError, ValueError):
    """Raised when a property name is not a valid identifier or is declared twice."""


class UnknownOptionError(SchemaCraftError, ValueError):
    """Raised when a constraint key is not recognized by the property's builder."""

    def __init__(self, property_name: str, option: str, kind: str, allowed: tuple[str, ...]) -> None:
        self.property_name = property_name
        self.option = option
        self.kind = kind
        self.allowed = allowed
        expected = ", ".join(sorted(allowed))
        super().__init__(
            f"unknown constraint {option!r} for property {property_name!r} of type {kind}; "
            f"expected one of: {expected}"
        )


class ConstraintError(SchemaCraftError, TypeError):
    """Raised when a constraint value has the wrong shape for its builder."""

    def __init__(self, property_name: str, option: str, expected: str, value: object) -> None:
        self.property_name = property_name
        self.option = option
        self.expected = expected
        self.value = value
        super().__init__(
            f"constraint {option!r} on property {property_name!r} expects {expected}, "
            f"got {type(value).__name__} {value!r}"
        )


class UnknownTypeError(SchemaCraftError, TypeError):
    """Raised when a property type cannot be turned into a schema fragment."""


class UnresolvedModelError(UnknownTypeError):
    """Raised when a forward reference names a model that is not defined (yet)."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"unknown type {name!r}: no model with that name is defined")


class UnexpectedPropertyError(SchemaCraftError, TypeError):
    """Raised when a model is constructed with a key it does not declare."""

    def __init__(self, model: str, key: str) -> None:
        self.model = model
        self.key = key
        super().__init__(f"{model} got an unexpected property {key!r}")


class DefinitionSealedError(SchemaCraftError, RuntimeError):
    """Raised when a bound schema definition is modified."""


class DepthExceeded(SchemaCraftError, RecursionError):
    """Raised when nesting exceeds :data:`~schemacraft.constants.MAX_DEPTH`."""

    def __init__(self, depth: int, where: str) -> None:
        self.depth = depth
        super().__init__(f"maximum nesting depth {depth} exceeded while {where}")


__all__ = [
    "ConstraintError",
    "DefinitionSealedError",
    "DepthExceeded",
    "InvalidPropertyNameError",
    "SchemaCraftError",
    "UnexpectedPropertyError",
    "UnknownOptionError",
    "UnknownTypeError",
    "UnresolvedModelError",
]

"""Ordered validators registered on a model class."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

from schemacraft.validation.errors import ValidationContext

Validator = Callable[[Any, ValidationContext], None]


@dataclass(frozen=True, slots=True)
class RegisteredValidator:
    """A validator and the property it belongs to (None for object-level checks)."""

    property_name: str | None
    check: Validator


class ValidatorSet:
    """Validators run in registration order: property checks, then object-level checks."""

    __slots__ = ("_object", "_property")

    def __init__(self) -> None:
        self._property: list[RegisteredValidator] = []
        self._object: list[RegisteredValidator] = []

    def __iter__(self) -> Iterator[RegisteredValidator]:
        yield from self._property
        yield from self._object

    def __len__(self) -> int:
        return len(self._property) + len(self._object)

    def add(self, property_name: str, check: Validator) -> None:
        self._property.append(RegisteredValidator(property_name, check))

    def add_object(self, check: Validator) -> None:
        self._object.append(RegisteredValidator(None, check))

    def for_property(self, property_name: str) -> tuple[RegisteredValidator, ...]:
        return tuple(item for item in self._property if item.property_name == property_name)

    @property
    def property_names(self) -> tuple[str, ...]:
        return tuple(dict.fromkeys(item.property_name for item in self._property if item.property_name))

    def run(self, instance: Any, context: ValidationContext) -> None:
        for item in self:
            item.check(instance, context)


__all__ = ["RegisteredValidator", "Validator", "ValidatorSet"]

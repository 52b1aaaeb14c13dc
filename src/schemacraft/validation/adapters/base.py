"""Validation adapter contract."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar

import structlog

from schemacraft.config.schema import CompilerConfig
from schemacraft.definition import SchemaDefinition
from schemacraft.validation.validator_set import ValidatorSet


class ValidationAdapter:
    """Turns property declarations into runtime validators on a model class.

    Subclasses override :meth:`apply` (one property) and optionally
    :meth:`apply_schema_level` (object-level keywords). Registering a subclass
    with :func:`~schemacraft.validation.adapters.register_adapter` makes it
    selectable through ``CompilerConfig.validation_adapter``.
    """

    name: ClassVar[str] = "base"

    def __init__(
        self,
        model: type[Any],
        config: CompilerConfig,
        validators: ValidatorSet,
        *,
        logger: Any | None = None,
    ) -> None:
        self.model = model
        self.config = config
        self.validators = validators
        self._logger = logger if logger is not None else structlog.get_logger(__name__)

    @classmethod
    def build_validations(
        cls,
        model: type[Any],
        definition: SchemaDefinition,
        config: CompilerConfig,
    ) -> ValidatorSet:
        """Register validators for every declared property plus object-level keywords."""

        validators = ValidatorSet()
        adapter = cls(model, config, validators)
        for declaration in definition.properties:
            adapter.apply(declaration.name, declaration.type, declaration.constraints)
        adapter.apply_schema_level(definition)
        adapter._logger.debug(
            "validators_registered",
            model=model.__name__,
            adapter=cls.name,
            validators=len(validators),
        )
        return validators

    def apply(self, name: str, host_type: object, constraints: Mapping[str, object]) -> None:
        raise NotImplementedError

    def apply_schema_level(self, definition: SchemaDefinition) -> None:
        return None


__all__ = ["ValidationAdapter"]

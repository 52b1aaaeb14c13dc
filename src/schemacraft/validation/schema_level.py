"""Object-level validators: property counts, dependent requirements and typed extra keys."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from schemacraft.classifier import classify, describe
from schemacraft.config.schema import CompilerConfig
from schemacraft.constants import BASE_ERROR_PATH
from schemacraft.definition import AdditionalProperties, SchemaDefinition
from schemacraft.naming import resolve_strategy
from schemacraft.validation.errors import ValidationContext
from schemacraft.validation.runtime import conforms, is_blank
from schemacraft.validation.validator_set import Validator


def schema_level_validators(definition: SchemaDefinition, config: CompilerConfig) -> list[Validator]:
    strategy = resolve_strategy(
        definition.keyword("property_naming_strategy") or config.property_naming_strategy
    )
    names = [declaration.name for declaration in definition.properties]
    # JSON keys and internal names both resolve to the internal attribute.
    lookup = {declaration.json_key(strategy): declaration.name for declaration in definition.properties}
    lookup.update({name: name for name in names})

    validators: list[Validator] = []
    minimum = definition.keyword("min_properties")
    maximum = definition.keyword("max_properties")
    if minimum is not None or maximum is not None:
        validators.append(_property_count(names, minimum, maximum))
    dependents = definition.keyword("dependent_required")
    if dependents:
        validators.append(_dependent_required(dependents, lookup))
    extra = definition.keyword("additional_properties")
    if isinstance(extra, AdditionalProperties):
        validators.append(_typed_additional_properties(extra))
    return validators


def _extras(instance: Any) -> Mapping[str, object]:
    extras = getattr(instance, "additional_properties", None)
    return extras if isinstance(extras, Mapping) else {}


def _lookup_value(instance: Any, key: str, lookup: Mapping[str, str]) -> object:
    attribute = lookup.get(key)
    if attribute is not None:
        return getattr(instance, attribute, None)
    return _extras(instance).get(key)


def _plural(count: int) -> str:
    return "property" if count == 1 else "properties"


def _property_count(names: list[str], minimum: int | None, maximum: int | None) -> Validator:
    def check(instance: Any, context: ValidationContext) -> None:
        present = sum(1 for name in names if not is_blank(getattr(instance, name, None)))
        present += sum(1 for value in _extras(instance).values() if not is_blank(value))
        if minimum is not None and present < minimum:
            context.errors.add(
                BASE_ERROR_PATH,
                "too_few_properties",
                f"must have at least {minimum} {_plural(minimum)} present",
            )
        if maximum is not None and present > maximum:
            context.errors.add(
                BASE_ERROR_PATH,
                "too_many_properties",
                f"must have at most {maximum} {_plural(maximum)} present",
            )

    return check


def _dependent_required(dependents: Mapping[str, tuple[str, ...]], lookup: Mapping[str, str]) -> Validator:
    def check(instance: Any, context: ValidationContext) -> None:
        for trigger, required in dependents.items():
            if is_blank(_lookup_value(instance, trigger, lookup)):
                continue
            for name in required:
                if is_blank(_lookup_value(instance, name, lookup)):
                    context.errors.add(
                        lookup.get(name, name), "dependent_required", f"is required when {trigger} is present"
                    )

    return check


def _typed_additional_properties(extra: AdditionalProperties) -> Validator:
    descriptor = classify(extra.type)
    noun = describe(descriptor)
    message = f"must be {'an' if noun[:1] in 'aeiou' else 'a'} {noun}"

    def check(instance: Any, context: ValidationContext) -> None:
        for key, value in _extras(instance).items():
            if not conforms(value, descriptor):
                context.errors.add(key, "invalid_type", message)

    return check


__all__ = ["schema_level_validators"]

"""
schemacraft — standard validation adapter.

Purpose
- Register runtime validators that accept exactly the instances the built
  JSON Schema document accepts, using the same type classification.

Rules
- Presence ("can't be blank") is skipped for optional, nilable, boolean
  and array properties.
- A non-nilable array rejects ``None`` even when optional.
- Pattern, format and length checks only look at string values.
- Invalid length bounds are skipped with a logged warning.
- Nested model errors are re-attached beneath the parent property path.
- Union and composition members that are models run that model's own
  validators; a mapping is judged as the member it can be built as.
- Data never raises; every problem becomes an issue in the error sink.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from decimal import Decimal
from fractions import Fraction
from typing import Any

from schemacraft.builders.base import to_json_value
from schemacraft.classifier import (
    Composition,
    ModelRef,
    Scalar,
    ScalarKind,
    TupleType,
    TypedArray,
    TypeDescriptor,
    UnionType,
    classify,
    describe,
    resolve_tuple_rest,
    unwrap_nilable,
)
from schemacraft.constants import MAX_DEPTH
from schemacraft.definition import SchemaDefinition
from schemacraft.equality import contains_value, has_duplicates, values_equal
from schemacraft.errors import DepthExceeded, UnexpectedPropertyError
from schemacraft.markers import CompositionKind
from schemacraft.refs import definition_of
from schemacraft.validation.adapters.base import ValidationAdapter
from schemacraft.validation.errors import ErrorCollection, ValidationContext
from schemacraft.validation.formats import FORMATS, FormatCheck, format_check
from schemacraft.validation.runtime import (
    composition_satisfied,
    conforms,
    is_array,
    is_blank,
    is_integer,
    is_number,
    is_temporal,
)
from schemacraft.validation.schema_level import schema_level_validators
from schemacraft.validation.validator_set import Validator

BLANK_MESSAGE = "can't be blank"

_COMPOSITION_PHRASES: dict[CompositionKind, str] = {
    CompositionKind.ANY_OF: "at least one of",
    CompositionKind.ALL_OF: "all of",
    CompositionKind.ONE_OF: "exactly one of",
}


class StandardAdapter(ValidationAdapter):
    name = "standard"

    def apply(self, name: str, host_type: object, constraints: Mapping[str, object]) -> None:
        if constraints.get("validate") is False:
            return
        descriptor = resolve_tuple_rest(classify(host_type), constraints)
        inner, nilable = unwrap_nilable(descriptor)
        optional = constraints.get("optional") is True or (nilable and self.config.nilable_is_optional)
        boolean = isinstance(inner, Scalar) and inner.kind is ScalarKind.BOOLEAN
        array = isinstance(inner, (TypedArray, TupleType))

        if array and not nilable:
            self.validators.add(name, _not_nil(name))
        elif boolean and not (optional or nilable):
            self.validators.add(name, _not_nil(name))
        elif not (optional or nilable or boolean or array):
            self.validators.add(name, _presence(name))

        for check in self._type_checks(name, inner, constraints):
            self.validators.add(name, check)

        if constraints.get("enum") is not None:
            self.validators.add(name, _inclusion(name, constraints["enum"]))
        if constraints.get("const") is not None:
            self.validators.add(name, _equality(name, constraints["const"]))

    def apply_schema_level(self, definition: SchemaDefinition) -> None:
        for check in schema_level_validators(definition, self.config):
            self.validators.add_object(check)

    # ------------------------------------------------------------ dispatch

    def _type_checks(
        self, name: str, descriptor: TypeDescriptor, constraints: Mapping[str, object]
    ) -> list[Validator]:
        if isinstance(descriptor, Scalar):
            kind = descriptor.kind
            if kind is ScalarKind.STRING:
                return [_type_check(name, descriptor), *self._string_checks(name, constraints)]
            if kind in (ScalarKind.INTEGER, ScalarKind.NUMBER):
                return self._numeric_checks(name, kind, constraints)
            if kind.is_temporal:
                return [_temporal_check(name, kind), *self._string_checks(name, constraints)]
            return [_type_check(name, descriptor)]
        if isinstance(descriptor, TypedArray):
            return [
                _type_check(name, descriptor),
                *self._array_checks(name, constraints),
                _items_check(name, descriptor),
            ]
        if isinstance(descriptor, TupleType):
            return [
                _type_check(name, descriptor),
                *self._array_checks(name, constraints),
                _tuple_check(name, descriptor),
            ]
        if isinstance(descriptor, UnionType):
            return [_union_check(name, descriptor)]
        if isinstance(descriptor, Composition):
            return [_composition_check(name, descriptor)]
        if isinstance(descriptor, ModelRef):
            return [_nested_model_check(name, descriptor)]
        return []

    # -------------------------------------------------------------- strings

    def _string_checks(self, name: str, constraints: Mapping[str, object]) -> list[Validator]:
        checks: list[Validator] = []
        minimum = self._count_bound(name, constraints, "min_length")
        maximum = self._count_bound(name, constraints, "max_length")
        if minimum is not None or maximum is not None:
            checks.append(_length_check(name, minimum, maximum, "character"))
        pattern = constraints.get("pattern")
        if isinstance(pattern, str):
            try:
                compiled = re.compile(pattern)
            except re.error:
                self._logger.warning("pattern_constraint_ignored", property=name, pattern=pattern)
            else:
                checks.append(_pattern_check(name, compiled))
        format_name = constraints.get("format")
        if isinstance(format_name, str):
            fmt = format_check(format_name)
            if fmt is not None:
                checks.append(_format_check(name, fmt))
        return checks

    # -------------------------------------------------------------- numbers

    def _numeric_checks(
        self, name: str, kind: ScalarKind, constraints: Mapping[str, object]
    ) -> list[Validator]:
        bounds: dict[str, Any] = {}
        for key in ("minimum", "maximum", "exclusive_minimum", "exclusive_maximum"):
            value = constraints.get(key)
            if value is None:
                continue
            if is_number(value):
                bounds[key] = value
            else:
                self._logger.warning("numeric_constraint_ignored", property=name, constraint=key, value=repr(value))
        checks = [_numericality_check(name, kind is ScalarKind.INTEGER, bounds)]
        divisor = constraints.get("multiple_of")
        if divisor is not None:
            if is_number(divisor) and divisor > 0:  # type: ignore[operator]
                checks.append(_multiple_of_check(name, divisor))
            else:
                self._logger.warning(
                    "numeric_constraint_ignored", property=name, constraint="multiple_of", value=repr(divisor)
                )
        return checks

    # --------------------------------------------------------------- arrays

    def _array_checks(self, name: str, constraints: Mapping[str, object]) -> list[Validator]:
        checks: list[Validator] = []
        minimum = self._count_bound(name, constraints, "min_items")
        maximum = self._count_bound(name, constraints, "max_items")
        if minimum is not None or maximum is not None:
            checks.append(_length_check(name, minimum, maximum, "item"))
        if constraints.get("unique_items") is True:
            checks.append(_uniqueness_check(name))
        return checks

    def _count_bound(self, name: str, constraints: Mapping[str, object], key: str) -> int | None:
        value = constraints.get(key)
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            self._logger.warning("length_constraint_ignored", property=name, constraint=key, value=repr(value))
            return None
        return value


# ----------------------------------------------------------------- helpers


def _value(instance: Any, name: str) -> Any:
    return getattr(instance, name, None)


def _article(noun: str) -> str:
    return f"an {noun}" if noun[:1] in "aeiou" else f"a {noun}"


def _render(value: object) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(to_json_value(value), default=str)


def _presence(name: str) -> Validator:
    def check(instance: Any, context: ValidationContext) -> None:
        if is_blank(_value(instance, name)):
            context.errors.add(name, "blank", BLANK_MESSAGE)

    return check


def _not_nil(name: str) -> Validator:
    def check(instance: Any, context: ValidationContext) -> None:
        if _value(instance, name) is None:
            context.errors.add(name, "blank", BLANK_MESSAGE)

    return check


def _type_check(name: str, descriptor: TypeDescriptor) -> Validator:
    message = f"must be {_article(describe(descriptor))}"

    def check(instance: Any, context: ValidationContext) -> None:
        value = _value(instance, name)
        if value is not None and not conforms_shallow(value, descriptor):
            context.errors.add(name, "invalid_type", message)

    return check


def conforms_shallow(value: object, descriptor: TypeDescriptor) -> bool:
    """Container type only for arrays; element checks report per index."""

    if isinstance(descriptor, (TypedArray, TupleType)):
        return is_array(value)
    return conforms(value, descriptor)


def _temporal_check(name: str, kind: ScalarKind) -> Validator:
    fmt = FORMATS[kind.value]

    def check(instance: Any, context: ValidationContext) -> None:
        value = _value(instance, name)
        if value is None or is_temporal(value, kind):
            return
        if isinstance(value, str):
            context.errors.add(name, "invalid_format", fmt.message)
        else:
            context.errors.add(name, "invalid_type", f"must be a valid {kind.value}")

    return check


def _length_check(name: str, minimum: int | None, maximum: int | None, unit: str) -> Validator:
    def check(instance: Any, context: ValidationContext) -> None:
        value = _value(instance, name)
        if unit == "character" and not isinstance(value, str):
            return
        if unit == "item" and not is_array(value):
            return
        size = len(value)
        if minimum is not None and size < minimum:
            noun = unit if minimum == 1 else f"{unit}s"
            context.errors.add(name, "too_short", f"is too short (minimum is {minimum} {noun})")
        if maximum is not None and size > maximum:
            noun = unit if maximum == 1 else f"{unit}s"
            context.errors.add(name, "too_long", f"is too long (maximum is {maximum} {noun})")

    return check


def _pattern_check(name: str, pattern: re.Pattern[str]) -> Validator:
    def check(instance: Any, context: ValidationContext) -> None:
        value = _value(instance, name)
        if isinstance(value, str) and pattern.search(value) is None:
            context.errors.add(name, "invalid_format", f"must match pattern {pattern.pattern}")

    return check


def _format_check(name: str, fmt: FormatCheck) -> Validator:
    def check(instance: Any, context: ValidationContext) -> None:
        value = _value(instance, name)
        if isinstance(value, str) and not fmt.matches(value):
            context.errors.add(name, "invalid_format", fmt.message)

    return check


def _numericality_check(name: str, integer_only: bool, bounds: Mapping[str, Any]) -> Validator:
    def check(instance: Any, context: ValidationContext) -> None:
        value = _value(instance, name)
        if value is None:
            return
        if not is_number(value):
            context.errors.add(name, "not_a_number", "is not a number")
            return
        if integer_only and not is_integer(value):
            context.errors.add(name, "not_an_integer", "must be an integer")
            return
        if "minimum" in bounds and value < bounds["minimum"]:
            context.errors.add(name, "too_small", f"must be greater than or equal to {bounds['minimum']}")
        if "exclusive_minimum" in bounds and value <= bounds["exclusive_minimum"]:
            context.errors.add(name, "too_small", f"must be greater than {bounds['exclusive_minimum']}")
        if "maximum" in bounds and value > bounds["maximum"]:
            context.errors.add(name, "too_large", f"must be less than or equal to {bounds['maximum']}")
        if "exclusive_maximum" in bounds and value >= bounds["exclusive_maximum"]:
            context.errors.add(name, "too_large", f"must be less than {bounds['exclusive_maximum']}")

    return check


def _exact(value: Any) -> Fraction:
    if isinstance(value, float):
        return Fraction(Decimal(repr(value)))
    return Fraction(value)


def _multiple_of_check(name: str, divisor: Any) -> Validator:
    exact_divisor = _exact(divisor)

    def check(instance: Any, context: ValidationContext) -> None:
        value = _value(instance, name)
        if not is_number(value):
            return
        if (_exact(value) / exact_divisor).denominator != 1:
            context.errors.add(name, "not_multiple_of", f"must be a multiple of {divisor}")

    return check


def _uniqueness_check(name: str) -> Validator:
    def check(instance: Any, context: ValidationContext) -> None:
        value = _value(instance, name)
        if not is_array(value):
            return
        try:
            duplicated = has_duplicates(value)
        except DepthExceeded:
            context.errors.add(name, "too_deep", "is nested too deeply")
            return
        if duplicated:
            context.errors.add(name, "not_unique", "must contain unique items")

    return check


def _inclusion(name: str, allowed: object) -> Validator:
    candidates = list(allowed) if isinstance(allowed, (list, tuple)) else [allowed]
    message = f"must be one of: {', '.join(_render(item) for item in candidates)}"

    def check(instance: Any, context: ValidationContext) -> None:
        value = _value(instance, name)
        if value is None:
            return
        try:
            included = contains_value(candidates, value)
        except DepthExceeded:
            context.errors.add(name, "too_deep", "is nested too deeply")
            return
        if not included:
            context.errors.add(name, "not_included", message)

    return check


def _equality(name: str, expected: object) -> Validator:
    message = f"must be equal to {_render(expected)}"

    def check(instance: Any, context: ValidationContext) -> None:
        value = _value(instance, name)
        if value is None:
            return
        try:
            equal = values_equal(value, expected)
        except DepthExceeded:
            context.errors.add(name, "too_deep", "is nested too deeply")
            return
        if not equal:
            context.errors.add(name, "not_equal", message)

    return check


def _items_check(name: str, descriptor: TypedArray) -> Validator:
    def check(instance: Any, context: ValidationContext) -> None:
        value = _value(instance, name)
        if descriptor.items is None or not is_array(value):
            return
        for index, item in enumerate(value):
            check_element(item, descriptor.items, f"{name}[{index}]", context)

    return check


def _tuple_check(name: str, descriptor: TupleType) -> Validator:
    positional = descriptor.positional
    rest = descriptor.rest

    def check(instance: Any, context: ValidationContext) -> None:
        value = _value(instance, name)
        if not is_array(value):
            return
        for index, item in enumerate(value):
            path = f"{name}[{index}]"
            if index < len(positional):
                check_element(item, positional[index], path, context)
            elif rest is False:
                context.errors.add(
                    path, "not_allowed", f"is not allowed (at most {len(positional)} items permitted)"
                )
            elif rest is not None and rest is not True:
                check_element(item, rest, path, context)

    return check


def check_element(value: object, descriptor: TypeDescriptor, path: str, context: ValidationContext) -> None:
    """Validate one element, recursing into nested models, unions and arrays."""

    inner, nilable = unwrap_nilable(descriptor)
    if value is None:
        if nilable or (isinstance(inner, Scalar) and inner.kind is ScalarKind.NULL):
            return
        context.errors.add(path, "invalid_type", f"must be {_article(describe(descriptor))}")
        return
    if isinstance(inner, ModelRef):
        target = inner.resolve()
        candidate = _as_instance(value, target)
        if candidate is None:
            context.errors.add(path, "invalid_type", f"must be a valid {target.__name__}")
        else:
            validate_nested(candidate, path, context)
        return
    if isinstance(inner, TypedArray) and inner.items is not None and is_array(value):
        for index, item in enumerate(value):  # type: ignore[arg-type]
            check_element(item, inner.items, f"{path}[{index}]", context)
        return
    if isinstance(inner, UnionType):
        if not any(_matches(value, member, context) for member in inner.members):
            context.errors.add(path, "invalid_type", f"must be {_article(describe(inner))}")
        return
    if not conforms(value, inner):
        context.errors.add(path, "invalid_type", f"must be {_article(describe(inner))}")


def _as_instance(value: object, target: type[Any]) -> Any:
    """``value`` as a ``target`` instance; mappings are read as JSON objects."""

    if isinstance(value, target):
        return value
    if not isinstance(value, Mapping) or not all(isinstance(key, str) for key in value):
        return None
    try:
        return target.from_dict(value)
    except UnexpectedPropertyError:
        return None


def _union_check(name: str, descriptor: UnionType) -> Validator:
    message = f"must be {_article(describe(descriptor))}"

    def check(instance: Any, context: ValidationContext) -> None:
        value = _value(instance, name)
        if value is not None and not any(_matches(value, member, context) for member in descriptor.members):
            context.errors.add(name, "invalid_type", message)

    return check


def _composition_check(name: str, descriptor: Composition) -> Validator:
    names = ", ".join(describe(member) for member in descriptor.members)
    message = f"must match {_COMPOSITION_PHRASES[descriptor.kind]}: {names}"

    def check(instance: Any, context: ValidationContext) -> None:
        value = _value(instance, name)
        if value is None:
            return
        matched = sum(1 for member in descriptor.members if _matches(value, member, context))
        if not composition_satisfied(descriptor.kind, matched, len(descriptor.members)):
            context.errors.add(name, "composition_mismatch", message)

    return check


def _matches(value: object, descriptor: TypeDescriptor, context: ValidationContext) -> bool:
    """Whether ``value`` satisfies ``descriptor``, nested model rules included."""

    trial = ValidationContext(errors=ErrorCollection(), active=context.active, depth=context.depth)
    check_element(value, descriptor, "", trial)
    return trial.errors.is_empty


def _nested_model_check(name: str, descriptor: ModelRef) -> Validator:
    def check(instance: Any, context: ValidationContext) -> None:
        value = _value(instance, name)
        if value is None:
            return
        target = descriptor.resolve()
        if not isinstance(value, target):
            context.errors.add(name, "invalid_type", f"must be a valid {target.__name__}")
            return
        declarations = definition_of(target).properties
        if declarations and all(is_blank(getattr(value, item.name, None)) for item in declarations):
            context.errors.add(name, "blank", BLANK_MESSAGE)
            return
        validate_nested(value, name, context)

    return check


def validate_nested(value: Any, path: str, context: ValidationContext) -> None:
    """Run ``value``'s own validators and re-attach their issues beneath ``path``."""

    key = id(value)
    if key in context.active:
        return
    if context.depth >= MAX_DEPTH:
        context.errors.add(path, "too_deep", "is nested too deeply")
        return
    validators = getattr(type(value), "__validators__", None)
    if validators is None:
        return
    child = ValidationContext(errors=ErrorCollection(), active=context.active, depth=context.depth + 1)
    context.active.add(key)
    try:
        validators.run(value, child)
    finally:
        context.active.discard(key)
    context.errors.merge(child.errors, prefix=path)


__all__ = ["StandardAdapter", "check_element", "validate_nested"]

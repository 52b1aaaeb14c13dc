"""
schemacraft — unit tests for scalar fragment builders

Purpose
- Pin the JSON keywords each scalar builder emits and its option checks.
"""

from __future__ import annotations

import datetime
from decimal import Decimal

import pytest

from schemacraft import (
    BaseBuilder,
    ConstraintError,
    OptionSpec,
    SchemaDefinition,
    UnknownOptionError,
    build_schema,
    register_type,
    unregister_type,
)
from schemacraft.builders.base import is_str


def _property_fragment(host_type: object, **constraints: object) -> dict[str, object]:
    document = build_schema(SchemaDefinition("Holder").property("value", host_type, **constraints))
    fragment = document["properties"]["value"]
    assert isinstance(fragment, dict)
    return fragment


def test_string_constraints_map_to_camel_case_keywords() -> None:
    fragment = _property_fragment(
        str,
        min_length=1,
        max_length=50,
        pattern="^[A-Z]",
        format="email",
        content_media_type="text/plain",
        title="Value",
        description="Some text",
    )

    assert fragment == {
        "type": "string",
        "minLength": 1,
        "maxLength": 50,
        "pattern": "^[A-Z]",
        "format": "email",
        "contentMediaType": "text/plain",
        "title": "Value",
        "description": "Some text",
    }


def test_numeric_constraints() -> None:
    assert _property_fragment(int, minimum=0, maximum=120, multiple_of=5) == {
        "type": "integer",
        "minimum": 0,
        "maximum": 120,
        "multipleOf": 5,
    }
    assert _property_fragment(float, exclusive_minimum=0, exclusive_maximum=1.5) == {
        "type": "number",
        "exclusiveMinimum": 0,
        "exclusiveMaximum": 1.5,
    }


def test_decimal_constraints_are_emitted_as_json_numbers() -> None:
    fragment = _property_fragment(Decimal, minimum=Decimal("0.5"), maximum=Decimal("10"))

    assert fragment == {"type": "number", "minimum": 0.5, "maximum": 10}
    assert isinstance(fragment["maximum"], int)


def test_boolean_and_null() -> None:
    assert _property_fragment(bool, default=True) == {"type": "boolean", "default": True}
    assert _property_fragment(bool, const=False) == {"type": "boolean", "const": False}
    assert _property_fragment(type(None)) == {"type": "null"}


def test_temporal_types_are_formatted_strings() -> None:
    assert _property_fragment(datetime.date) == {"type": "string", "format": "date"}
    assert _property_fragment(datetime.datetime) == {"type": "string", "format": "date-time"}
    assert _property_fragment(datetime.time, max_length=8) == {
        "type": "string",
        "format": "time",
        "maxLength": 8,
    }


def test_compiler_only_options_are_not_emitted() -> None:
    fragment = _property_fragment(str, optional=True, validate=False, ref=False, alias="v", min_length=None)

    assert fragment == {"type": "string"}


def test_enum_and_const() -> None:
    assert _property_fragment(str, enum=["draft", "published"]) == {
        "type": "string",
        "enum": ["draft", "published"],
    }
    assert _property_fragment(int, const=2) == {"type": "integer", "const": 2}


def test_unknown_option_names_property_and_type() -> None:
    with pytest.raises(UnknownOptionError, match="unknown constraint 'minimum' for property 'value' of type string"):
        _property_fragment(str, minimum=1)
    with pytest.raises(UnknownOptionError):
        _property_fragment(datetime.date, format="email")


@pytest.mark.parametrize(
    ("host_type", "constraints"),
    [
        (str, {"min_length": "3"}),
        (str, {"enum": ["a", 1]}),
        (str, {"pattern": "(unclosed"}),
        (int, {"minimum": True}),
        (int, {"minimum": 1.5}),
        (float, {"multiple_of": 0}),
        (bool, {"default": "yes"}),
    ],
)
def test_wrong_constraint_shapes_raise(host_type: object, constraints: dict[str, object]) -> None:
    with pytest.raises(ConstraintError, match="on property 'value' expects"):
        _property_fragment(host_type, **constraints)


def test_registered_custom_builder() -> None:
    class Money:
        pass

    class MoneyBuilder(BaseBuilder):
        kind = "money"
        base_schema = {"type": "string", "pattern": r"^\d+\.\d{2}$"}
        options = {"currency": OptionSpec("x-currency", is_str, "a string")}

    register_type(Money, MoneyBuilder)
    try:
        fragment = _property_fragment(Money, currency="EUR", description="Price")
    finally:
        unregister_type(Money)

    assert fragment == {
        "type": "string",
        "pattern": r"^\d+\.\d{2}$",
        "x-currency": "EUR",
        "description": "Price",
    }


def test_register_type_requires_a_builder_class() -> None:
    with pytest.raises(TypeError, match="BaseBuilder subclass"):
        register_type(complex, dict)

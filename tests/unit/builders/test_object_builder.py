"""
schemacraft — unit tests for object schema and document assembly

Purpose
- Pin required-list rules, object keywords, naming strategies and the
  root-only ``$schema``/``$id`` keywords.
"""

from __future__ import annotations

from typing import Optional

import pytest

from schemacraft import AllOf, CompilerConfig, Model, SchemaDefinition, build_schema


class ObjectAddress(Model):
    __schema__ = SchemaDefinition().property("city", str)


class ObjectAudit(Model):
    __schema__ = SchemaDefinition().property("created_by", str)


def _person() -> SchemaDefinition:
    return (
        SchemaDefinition("Person")
        .title("Person")
        .description("A person")
        .property("name", str, min_length=1)
        .property("age", int, minimum=0, maximum=120)
        .property("email", str, format="email", optional=True)
    )


def test_person_document() -> None:
    assert build_schema(_person()) == {
        "title": "Person",
        "description": "A person",
        "type": "object",
        "properties": {
            "name": {"type": "string", "minLength": 1},
            "age": {"type": "integer", "minimum": 0, "maximum": 120},
            "email": {"type": "string", "format": "email"},
        },
        "required": ["name", "age"],
        "additionalProperties": False,
    }


def test_document_key_order_is_fixed() -> None:
    definition = _person().schema_version("draft201909").schema_id("https://example.com/person")

    document = build_schema(definition)

    assert list(document) == [
        "$schema",
        "$id",
        "title",
        "description",
        "type",
        "properties",
        "required",
        "additionalProperties",
    ]
    assert list(document["properties"]) == ["name", "age", "email"]


def test_building_twice_is_deterministic() -> None:
    definition = _person()

    assert build_schema(definition) == build_schema(definition)


def test_empty_definition() -> None:
    assert build_schema(SchemaDefinition("Empty")) == {"type": "object", "additionalProperties": False}


def test_nilable_property_requirement_follows_config() -> None:
    definition = SchemaDefinition("Profile").property("nickname", Optional[str])

    assert build_schema(definition)["required"] == ["nickname"]
    assert "required" not in build_schema(definition, CompilerConfig(nilable_is_optional=True))


def test_nullable_optional_property_is_never_required() -> None:
    document = build_schema(SchemaDefinition("Profile").nullable_optional_property("bio", str, max_length=10))

    assert "required" not in document
    assert document["properties"]["bio"] == {"anyOf": [{"type": "string", "maxLength": 10}, {"type": "null"}]}


def test_additional_properties_variants() -> None:
    assert build_schema(SchemaDefinition("A"), CompilerConfig(default_additional_properties=True))[
        "additionalProperties"
    ] is True
    assert build_schema(SchemaDefinition("B").additional_properties(True))["additionalProperties"] is True
    typed = build_schema(SchemaDefinition("C").additional_properties(int, minimum=0))
    assert typed["additionalProperties"] == {"type": "integer", "minimum": 0}


def test_object_keywords() -> None:
    definition = (
        SchemaDefinition("Payment")
        .property("card_number", str, optional=True)
        .property("billing_address", str, optional=True)
        .min_properties(1)
        .max_properties(2)
        .dependent_required({"card_number": ["billing_address"]})
        .pattern_properties({"^x_": str, "^meta_": {"type": "integer"}})
        .examples([{"card_number": "4111"}])
    )

    document = build_schema(definition, CompilerConfig(property_naming_strategy="camel"))

    assert document["minProperties"] == 1
    assert document["maxProperties"] == 2
    assert document["dependentRequired"] == {"cardNumber": ["billingAddress"]}
    assert document["patternProperties"] == {"^x_": {"type": "string"}, "^meta_": {"type": "integer"}}
    assert document["examples"] == [{"card_number": "4111"}]
    assert list(document)[-4:] == ["patternProperties", "minProperties", "maxProperties", "dependentRequired"]


@pytest.mark.parametrize(
    ("strategy", "expected"),
    [
        ("identity", ["first_name", "home_address"]),
        ("camel", ["firstName", "homeAddress"]),
        ("pascal", ["FirstName", "HomeAddress"]),
        (str.upper, ["FIRST_NAME", "HOME_ADDRESS"]),
    ],
)
def test_naming_strategies(strategy: object, expected: list[str]) -> None:
    definition = SchemaDefinition("Named").property("first_name", str).property("home_address", str)

    document = build_schema(definition, CompilerConfig(property_naming_strategy=strategy))

    assert list(document["properties"]) == expected
    assert document["required"] == expected


def test_alias_wins_over_strategy_and_definition_strategy_wins_over_config() -> None:
    definition = (
        SchemaDefinition("Aliased")
        .property_naming_strategy("pascal")
        .property("first_name", str)
        .property("last_name", str, alias="surname")
    )

    document = build_schema(definition, CompilerConfig(property_naming_strategy="camel"))

    assert list(document["properties"]) == ["FirstName", "surname"]


def test_schema_version_and_id_resolution() -> None:
    config = CompilerConfig(schema_version="draft202012", schema_id="https://example.com/global")

    document = build_schema(SchemaDefinition("Versioned"), config)
    assert document["$schema"] == "https://json-schema.org/draft/2020-12/schema"
    assert document["$id"] == "https://example.com/global"

    overridden = build_schema(SchemaDefinition("Versioned").schema_version("none").schema_id("none"), config)
    assert "$schema" not in overridden
    assert "$id" not in overridden

    custom = build_schema(SchemaDefinition("Versioned").schema_version("https://example.com/meta"))
    assert custom["$schema"] == "https://example.com/meta"


def test_auto_generated_ids() -> None:
    config = CompilerConfig(auto_generate_ids=True, base_schema_uri="https://example.com/schemas/")

    document = build_schema(SchemaDefinition("UserProfile"), config)

    assert document["$id"] == "https://example.com/schemas/user_profile"
    explicit = build_schema(SchemaDefinition("UserProfile").schema_id("urn:profile"), config)
    assert explicit["$id"] == "urn:profile"


def test_schema_level_composition() -> None:
    definition = SchemaDefinition("Audited").property("name", str).compose(AllOf[ObjectAddress, ObjectAudit])

    document = build_schema(definition)

    assert document["allOf"] == [{"$ref": "#/$defs/ObjectAddress"}, {"$ref": "#/$defs/ObjectAudit"}]
    assert sorted(document["$defs"]) == ["ObjectAddress", "ObjectAudit"]
    assert "$schema" not in document["$defs"]["ObjectAddress"]
    assert list(document)[-2:] == ["allOf", "$defs"]

"""Unit tests for array, tuple, union, nilable and composition fragments."""

from __future__ import annotations

from typing import Optional, Union

import pytest

from schemacraft import AllOf, AnyOf, ConstraintError, Model, OneOf, SchemaDefinition, UnknownOptionError, build_schema


class CompoundEmail(Model):
    __schema__ = SchemaDefinition().property("address", str, format="email")


class CompoundPhone(Model):
    __schema__ = SchemaDefinition().property("number", str, pattern=r"^\+?\d+$")


def _fragment(host_type: object, **constraints: object) -> dict[str, object]:
    document = build_schema(SchemaDefinition("Holder").property("value", host_type, **constraints))
    fragment = document["properties"]["value"]
    assert isinstance(fragment, dict)
    return fragment


def test_typed_array_with_item_schema() -> None:
    assert _fragment(list[str], min_items=1, max_items=5, unique_items=True) == {
        "type": "array",
        "items": {"type": "string"},
        "minItems": 1,
        "maxItems": 5,
        "uniqueItems": True,
    }


def test_untyped_array_has_no_items() -> None:
    assert _fragment(list) == {"type": "array"}
    assert _fragment(tuple[int, ...]) == {"type": "array", "items": {"type": "integer"}}


def test_item_constraints_are_not_pushed_into_items() -> None:
    with pytest.raises(UnknownOptionError, match="of type array"):
        _fragment(list[str], min_length=2)


def test_nested_arrays() -> None:
    assert _fragment(list[list[int]]) == {
        "type": "array",
        "items": {"type": "array", "items": {"type": "integer"}},
    }


def test_tuple_positional_items() -> None:
    assert _fragment(tuple[str, int]) == {
        "type": "array",
        "items": [{"type": "string"}, {"type": "integer"}],
    }


@pytest.mark.parametrize(
    ("additional_items", "expected"),
    [
        (False, False),
        (True, True),
        (bool, {"type": "boolean"}),
    ],
)
def test_tuple_rest_policy(additional_items: object, expected: object) -> None:
    fragment = _fragment(tuple[str, int], additional_items=additional_items)

    assert fragment["additionalItems"] == expected


def test_union_members_in_declaration_order() -> None:
    assert _fragment(Union[str, int]) == {"anyOf": [{"type": "string"}, {"type": "integer"}]}
    assert _fragment(int | str) == {"anyOf": [{"type": "integer"}, {"type": "string"}]}


def test_nilable_wraps_inner_fragment() -> None:
    assert _fragment(Optional[str], min_length=2, description="Nick") == {
        "anyOf": [{"type": "string", "minLength": 2}, {"type": "null"}],
        "description": "Nick",
    }


def test_nilable_union_is_flattened() -> None:
    assert _fragment(str | int | None) == {
        "anyOf": [{"type": "string"}, {"type": "integer"}, {"type": "null"}],
    }


def test_nilable_still_checks_inner_constraints() -> None:
    with pytest.raises(ConstraintError):
        _fragment(Optional[int], minimum="zero")


def test_composition_markers() -> None:
    assert _fragment(AnyOf[CompoundEmail, CompoundPhone], ref=True) == {
        "anyOf": [{"$ref": "#/$defs/CompoundEmail"}, {"$ref": "#/$defs/CompoundPhone"}],
    }
    one_of = _fragment(OneOf[CompoundEmail, CompoundPhone])
    assert list(one_of) == ["oneOf"]
    assert one_of["oneOf"][0]["properties"] == {"address": {"type": "string", "format": "email"}}
    assert list(_fragment(AllOf[CompoundEmail, CompoundPhone])) == ["allOf"]


def test_composition_refs_are_collected_into_defs() -> None:
    document = build_schema(
        SchemaDefinition("Contact").property("via", AnyOf[CompoundEmail, CompoundPhone], ref=True)
    )

    assert sorted(document["$defs"]) == ["CompoundEmail", "CompoundPhone"]


def test_unknown_host_type_is_a_plain_object() -> None:
    assert _fragment(dict) == {"type": "object"}
    assert _fragment(dict[str, int], description="Counters") == {"type": "object", "description": "Counters"}

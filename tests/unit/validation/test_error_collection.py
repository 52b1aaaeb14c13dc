"""Unit tests for the structured error collection."""

from __future__ import annotations

from schemacraft import ErrorCollection, ValidationIssue
from schemacraft.validation.errors import nest_path


def test_grouping_and_lookup() -> None:
    errors = ErrorCollection()
    errors.add("name", "blank", "can't be blank")
    errors.add("name", "too_short", "is too short (minimum is 2 characters)")
    errors.add("base", "too_few_properties", "must have at least 1 property present")

    assert len(errors) == 3
    assert "name" in errors
    assert "age" not in errors
    assert errors["age"] == []
    assert errors.paths() == ["name", "base"]
    assert errors.to_dict() == {
        "name": ["can't be blank", "is too short (minimum is 2 characters)"],
        "base": ["must have at least 1 property present"],
    }
    assert errors.details()["base"] == [
        {"code": "too_few_properties", "message": "must have at least 1 property present"}
    ]
    assert errors.full_messages() == [
        "name can't be blank",
        "name is too short (minimum is 2 characters)",
        "must have at least 1 property present",
    ]


def test_empty_collection_is_falsy() -> None:
    errors = ErrorCollection()

    assert not errors
    assert errors.is_empty
    errors.add("x", "blank", "can't be blank")
    errors.clear()
    assert errors.is_empty


def test_merge_under_prefix() -> None:
    child = ErrorCollection(
        [
            ValidationIssue("zip_code", "invalid_format", "must match pattern ^\\d{5}$"),
            ValidationIssue("base", "too_few_properties", "must have at least 1 property present"),
            ValidationIssue("[0]", "invalid_type", "must be a string"),
        ]
    )
    parent = ErrorCollection()

    parent.merge(child, prefix="contacts[2]")

    assert parent.paths() == ["contacts[2].zip_code", "contacts[2]", "contacts[2][0]"]


def test_nest_path() -> None:
    assert nest_path("address", "city") == "address.city"
    assert nest_path("address", "base") == "address"
    assert nest_path("tags", "[3]") == "tags[3]"


def test_issue_serialization() -> None:
    issue = ValidationIssue("age", "too_small", "must be greater than or equal to 0")

    assert issue.to_dict() == {"path": "age", "code": "too_small", "message": "must be greater than or equal to 0"}
    assert issue.full_message == "age must be greater than or equal to 0"

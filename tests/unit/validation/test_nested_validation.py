"""
schemacraft — unit tests for nested model validation

Purpose
- Nested issues are re-attached beneath the parent path.
- An all-blank nested instance is a single blank error on the parent.
- Cyclic object graphs terminate.
"""

from __future__ import annotations

from typing import Optional

from schemacraft import Model, SchemaDefinition


class NestedAddress(Model):
    __schema__ = (
        SchemaDefinition()
        .property("street", str)
        .property("zip_code", str, pattern=r"^\d{5}$")
    )


class NestedCustomer(Model):
    __schema__ = (
        SchemaDefinition()
        .property("name", str)
        .property("address", NestedAddress)
        .property("previous", Optional[NestedAddress])
    )


class NestedTreeNode(Model):
    __schema__ = (
        SchemaDefinition()
        .property("label", str)
        .property("parent", "NestedTreeNode", optional=True)
        .property("children", list["NestedTreeNode"], optional=True, default=[])
    )


def _customer(**overrides: object) -> NestedCustomer:
    values: dict[str, object] = {
        "name": "Ada",
        "address": {"street": "1 Main St", "zip_code": "12345"},
        "previous": None,
    }
    values.update(overrides)
    return NestedCustomer.from_dict(values)


def test_nested_mapping_is_coerced_and_valid() -> None:
    customer = _customer()

    assert isinstance(customer.address, NestedAddress)
    assert customer.is_valid()


def test_nested_errors_use_dotted_paths() -> None:
    errors = _customer(address={"street": "1 Main St", "zip_code": "abc"}).validate()

    assert errors.to_dict() == {"address.zip_code": ["must match pattern ^\\d{5}$"]}
    assert errors.full_messages() == ["address.zip_code must match pattern ^\\d{5}$"]


def test_all_blank_nested_instance_is_one_blank_error() -> None:
    errors = _customer(address={"street": "", "zip_code": None}).validate()

    assert errors.to_dict() == {"address": ["can't be blank"]}


def test_missing_nested_value() -> None:
    assert _customer(address=None).validate().to_dict() == {"address": ["can't be blank"]}


def test_wrong_nested_type() -> None:
    errors = _customer(address="1 Main St").validate()

    assert errors["address"] == ["must be a valid NestedAddress"]
    assert errors.codes("address") == ["invalid_type"]


def test_nilable_nested_model() -> None:
    errors = _customer(previous={"street": "2 Side St", "zip_code": "1"}).validate()

    assert errors.to_dict() == {"previous.zip_code": ["must match pattern ^\\d{5}$"]}


def test_self_referencing_instances() -> None:
    root = NestedTreeNode(label="root")
    child = NestedTreeNode(label="", parent=root)
    root.children = [child, NestedTreeNode(label="leaf")]

    errors = root.validate()

    assert errors.to_dict() == {"children[0].label": ["can't be blank"]}


def test_cyclic_graph_terminates() -> None:
    first = NestedTreeNode(label="a")
    second = NestedTreeNode(label="b", parent=first)
    first.parent = second

    assert first.is_valid()
    second.label = None
    assert first.validate().to_dict() == {"parent.label": ["can't be blank"]}


def test_deep_chain_is_bounded() -> None:
    node = NestedTreeNode(label="leaf")
    for index in range(150):
        node = NestedTreeNode(label=f"n{index}", parent=node)

    errors = node.validate()

    assert "too_deep" in [issue.code for issue in errors]

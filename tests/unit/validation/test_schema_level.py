"""Unit tests for object-level validators."""

from __future__ import annotations

from typing import Any

from schemacraft import CompilerConfig, Model, SchemaDefinition


class LevelPayment(Model, config=CompilerConfig(property_naming_strategy="camel")):
    __schema__ = (
        SchemaDefinition()
        .property("card_number", str, optional=True)
        .property("billing_address", str, optional=True)
        .property("express", bool, optional=True)
        .min_properties(1)
        .max_properties(2)
        .dependent_required({"card_number": ["billing_address"]})
    )


class LevelBag(Model):
    __schema__ = SchemaDefinition().property("name", str).additional_properties(int, minimum=0)


def _payment(**values: Any) -> LevelPayment:
    return LevelPayment(**values)


def test_min_properties() -> None:
    errors = _payment().validate()

    assert errors["base"] == ["must have at least 1 property present"]
    assert errors.codes("base") == ["too_few_properties"]
    assert errors.full_messages() == ["must have at least 1 property present"]


def test_false_counts_as_present() -> None:
    assert _payment(express=False).is_valid()


def test_max_properties() -> None:
    errors = _payment(card_number="4111", billing_address="x", express=True).validate()

    assert errors["base"] == ["must have at most 2 properties present"]


def test_dependent_required() -> None:
    errors = _payment(card_number="4111").validate()

    assert errors["billing_address"] == ["is required when card_number is present"]
    assert errors.codes("billing_address") == ["dependent_required"]
    assert _payment(billing_address="x").is_valid()


def test_json_keys_are_accepted_on_construction() -> None:
    payment = LevelPayment.from_dict({"cardNumber": "4111", "billingAddress": "x"})

    assert payment.card_number == "4111"
    assert payment.is_valid()
    assert payment.to_dict() == {"cardNumber": "4111", "billingAddress": "x"}


def test_typed_additional_properties() -> None:
    bag = LevelBag(name="bag", apples=3, pears="many")

    errors = bag.validate()

    assert bag.additional_properties == {"apples": 3, "pears": "many"}
    assert errors.to_dict() == {"pears": ["must be an integer"]}
    assert bag.to_dict() == {"name": "bag", "apples": 3, "pears": "many"}

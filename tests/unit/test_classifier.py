"""Unit tests for host type classification."""

from __future__ import annotations

import datetime
from decimal import Decimal
from typing import Literal, Optional, Tuple, Union

import pytest

from schemacraft import AnyOf, BaseBuilder, Model, SchemaDefinition, register_type, unregister_type
from schemacraft.classifier import (
    Composition,
    CustomType,
    ModelRef,
    Nilable,
    OpaqueType,
    Scalar,
    ScalarKind,
    TupleType,
    TypedArray,
    UnionType,
    classify,
    describe,
    resolve_tuple_rest,
)
from schemacraft.errors import UnknownTypeError, UnresolvedModelError
from schemacraft.markers import CompositionKind


class ClassifierEmail(Model):
    __schema__ = SchemaDefinition().property("address", str)


class ClassifierPhone(Model):
    __schema__ = SchemaDefinition().property("number", str)


STRING = Scalar(ScalarKind.STRING)
INTEGER = Scalar(ScalarKind.INTEGER)
BOOLEAN = Scalar(ScalarKind.BOOLEAN)


def test_scalar_types() -> None:
    assert classify(str) == STRING
    assert classify(int) == INTEGER
    assert classify(float) == Scalar(ScalarKind.NUMBER)
    assert classify(Decimal) == Scalar(ScalarKind.NUMBER)
    assert classify(type(None)) == Scalar(ScalarKind.NULL)
    assert classify(datetime.date) == Scalar(ScalarKind.DATE)
    assert classify(datetime.datetime) == Scalar(ScalarKind.DATE_TIME)
    assert classify(datetime.time) == Scalar(ScalarKind.TIME)


def test_boolean_forms_win_before_other_rules() -> None:
    assert classify(bool) == BOOLEAN
    assert classify(Literal[True, False]) == BOOLEAN
    assert isinstance(classify(Literal[1, 0]), OpaqueType)
    assert classify(Optional[bool]) == Nilable(BOOLEAN)


def test_nilable_never_nests() -> None:
    assert classify(Optional[str]) == Nilable(STRING)
    assert classify(str | None) == Nilable(STRING)
    assert classify(Optional[Optional[int]]) == Nilable(INTEGER)
    assert classify(Optional[Union[str, int]]) == Nilable(UnionType((STRING, INTEGER)))


def test_arrays_and_tuples() -> None:
    assert classify(list[int]) == TypedArray(INTEGER)
    assert classify(list) == TypedArray(None)
    assert classify(tuple[int, ...]) == TypedArray(INTEGER)
    assert classify(tuple[str, int]) == TupleType((STRING, INTEGER))


def test_empty_tuple_annotation_is_an_untyped_array() -> None:
    # a tuple descriptor always has at least one positional slot
    assert classify(tuple[()]) == TypedArray(None)
    assert classify(Tuple[()]) == TypedArray(None)


def test_undefined_forward_reference_names_the_missing_model() -> None:
    forward = classify("ClassifierNeverDeclared")
    assert isinstance(forward, ModelRef)

    with pytest.raises(UnresolvedModelError) as raised:
        forward.resolve()

    assert raised.value.name == "ClassifierNeverDeclared"
    assert isinstance(raised.value, UnknownTypeError)


def test_tuple_rest_policy_comes_from_constraints() -> None:
    descriptor = classify(tuple[bool, bool])

    closed = resolve_tuple_rest(descriptor, {"additional_items": False})
    typed = resolve_tuple_rest(descriptor, {"additional_items": str})
    nilable = resolve_tuple_rest(classify(Optional[tuple[bool, bool]]), {"additional_items": True})

    assert isinstance(closed, TupleType) and closed.rest is False
    assert isinstance(typed, TupleType) and typed.rest == STRING
    assert isinstance(nilable, Nilable) and nilable.inner == TupleType((BOOLEAN, BOOLEAN), rest=True)
    assert resolve_tuple_rest(classify(str), {"additional_items": False}) == STRING


def test_union_and_composition() -> None:
    assert classify(Union[str, int]) == UnionType((STRING, INTEGER))

    composed = classify(AnyOf[ClassifierEmail, ClassifierPhone])

    assert composed == Composition(
        CompositionKind.ANY_OF, (ModelRef(ClassifierEmail), ModelRef(ClassifierPhone))
    )


def test_models_and_forward_references() -> None:
    assert classify(ClassifierEmail) == ModelRef(ClassifierEmail)
    forward = classify("ClassifierPhone")
    assert forward == ModelRef("ClassifierPhone")
    assert isinstance(forward, ModelRef) and forward.resolve() is ClassifierPhone
    assert classify(list["ClassifierEmail"]) == TypedArray(ModelRef("ClassifierEmail"))
    assert classify("string") == STRING
    assert classify("date-time") == Scalar(ScalarKind.DATE_TIME)


def test_unknown_types_fall_back_to_object() -> None:
    assert isinstance(classify(dict), OpaqueType)
    assert isinstance(classify(object), OpaqueType)
    assert isinstance(classify(42), OpaqueType)
    assert isinstance(classify([1, 2]), OpaqueType)


def test_registered_custom_types() -> None:
    class Money:
        pass

    class MoneyBuilder(BaseBuilder):
        kind = "money"
        base_schema = {"type": "string"}

    register_type(Money, MoneyBuilder)
    try:
        assert classify(Money) == CustomType(Money)
        assert classify(list[Money]) == TypedArray(CustomType(Money))
    finally:
        unregister_type(Money)
    assert isinstance(classify(Money), OpaqueType)


def test_describe_names_types_for_messages() -> None:
    assert describe(STRING) == "string"
    assert describe(UnionType((STRING, INTEGER))) == "string or integer"
    assert describe(TypedArray(STRING)) == "array"
    assert describe(ModelRef(ClassifierEmail)) == "ClassifierEmail"

"""
schemacraft — unit tests for function-calling payloads

Purpose
- A model becomes ``{"type": "function", "function": {...}}`` with its JSON
  Schema document as the parameters.
"""

from __future__ import annotations

import pytest

from schemacraft import Model, SchemaDefinition, function_spec


class WeatherReport(Model):
    __schema__ = (
        SchemaDefinition()
        .description("Current conditions for one city")
        .property("city", str)
        .property("celsius", float, optional=True)
    )


class ToolPlainLookup(Model):
    __schema__ = SchemaDefinition().property("query", str)


def test_payload_wraps_the_document() -> None:
    spec = function_spec(WeatherReport)

    assert spec == {
        "type": "function",
        "function": {
            "name": "weather_report",
            "description": "Current conditions for one city",
            "parameters": WeatherReport.json_schema(),
        },
    }


def test_description_falls_back_to_the_model_name() -> None:
    function = function_spec(ToolPlainLookup)["function"]

    assert function["name"] == "tool_plain_lookup"
    assert function["description"] == (
        "Correctly extracted `ToolPlainLookup` with all the required parameters with correct types"
    )


def test_overrides() -> None:
    function = function_spec(ToolPlainLookup, name="lookup", description="Search the index")["function"]

    assert function["name"] == "lookup"
    assert function["description"] == "Search the index"


def test_parameters_are_a_copy() -> None:
    function_spec(ToolPlainLookup)["function"]["parameters"]["properties"].clear()

    assert "query" in ToolPlainLookup.json_schema()["properties"]


@pytest.mark.parametrize("name", ["", "has space", "x" * 65, "dotted.name"])
def test_invalid_function_names(name: str) -> None:
    with pytest.raises(ValueError, match="invalid function name"):
        function_spec(ToolPlainLookup, name=name)


def test_requires_a_model_class() -> None:
    with pytest.raises(TypeError, match="expected a model class"):
        function_spec(dict)

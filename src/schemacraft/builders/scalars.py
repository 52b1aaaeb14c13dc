"""Builders for string, numeric, boolean, null and temporal properties."""

from __future__ import annotations

from typing import Any, ClassVar, Final

from schemacraft.builders.base import (
    BaseBuilder,
    OptionSpec,
    is_bool,
    is_int,
    is_list,
    is_number,
    is_positive_number,
    is_regex,
    is_str,
    list_of,
)
from schemacraft.classifier import ScalarKind

STRING_OPTIONS: Final[dict[str, OptionSpec]] = {
    "format": OptionSpec("format", is_str, "a string"),
    "pattern": OptionSpec("pattern", is_regex, "a valid regular expression"),
    "min_length": OptionSpec("minLength", is_int, "an integer"),
    "max_length": OptionSpec("maxLength", is_int, "an integer"),
    "enum": OptionSpec("enum", list_of(is_str), "a list of strings"),
    "const": OptionSpec("const", is_str, "a string"),
    "default": OptionSpec("default", is_str, "a string"),
    "content_media_type": OptionSpec("contentMediaType", is_str, "a string"),
    "content_encoding": OptionSpec("contentEncoding", is_str, "a string"),
}


def _numeric_options(check: Any, expected: str, expected_list: str) -> dict[str, OptionSpec]:
    return {
        "minimum": OptionSpec("minimum", check, expected),
        "maximum": OptionSpec("maximum", check, expected),
        "exclusive_minimum": OptionSpec("exclusiveMinimum", check, expected),
        "exclusive_maximum": OptionSpec("exclusiveMaximum", check, expected),
        "multiple_of": OptionSpec("multipleOf", is_positive_number, "a positive number"),
        "enum": OptionSpec("enum", list_of(check), expected_list),
        "const": OptionSpec("const", check, expected),
        "default": OptionSpec("default", check, expected),
    }


class StringBuilder(BaseBuilder):
    kind = "string"
    base_schema = {"type": "string"}
    options = STRING_OPTIONS


class IntegerBuilder(BaseBuilder):
    kind = "integer"
    base_schema = {"type": "integer"}
    options = _numeric_options(is_int, "an integer", "a list of integers")


class NumberBuilder(BaseBuilder):
    kind = "number"
    base_schema = {"type": "number"}
    options = _numeric_options(is_number, "a number", "a list of numbers")


class BooleanBuilder(BaseBuilder):
    kind = "boolean"
    base_schema = {"type": "boolean"}
    options = {
        "enum": OptionSpec("enum", list_of(is_bool), "a list of booleans"),
        "const": OptionSpec("const", is_bool, "a boolean"),
        "default": OptionSpec("default", is_bool, "a boolean"),
    }


class NullBuilder(BaseBuilder):
    kind = "null"
    base_schema = {"type": "null"}
    options = {
        "enum": OptionSpec("enum", is_list, "a list"),
    }


class TemporalBuilder(BaseBuilder):
    """String with a fixed ``format``; accepts every other string option."""

    format_name: ClassVar[str] = ""
    options = {key: spec for key, spec in STRING_OPTIONS.items() if key != "format"}

    def finalize(self, schema: dict[str, Any]) -> dict[str, Any]:
        schema["format"] = self.format_name
        return schema


class DateBuilder(TemporalBuilder):
    kind = "date"
    base_schema = {"type": "string", "format": "date"}
    format_name = "date"


class DateTimeBuilder(TemporalBuilder):
    kind = "date-time"
    base_schema = {"type": "string", "format": "date-time"}
    format_name = "date-time"


class TimeBuilder(TemporalBuilder):
    kind = "time"
    base_schema = {"type": "string", "format": "time"}
    format_name = "time"


SCALAR_BUILDERS: Final[dict[ScalarKind, type[BaseBuilder]]] = {
    ScalarKind.STRING: StringBuilder,
    ScalarKind.INTEGER: IntegerBuilder,
    ScalarKind.NUMBER: NumberBuilder,
    ScalarKind.BOOLEAN: BooleanBuilder,
    ScalarKind.NULL: NullBuilder,
    ScalarKind.DATE: DateBuilder,
    ScalarKind.DATE_TIME: DateTimeBuilder,
    ScalarKind.TIME: TimeBuilder,
}

__all__ = [
    "SCALAR_BUILDERS",
    "BooleanBuilder",
    "DateBuilder",
    "DateTimeBuilder",
    "IntegerBuilder",
    "NullBuilder",
    "NumberBuilder",
    "StringBuilder",
    "TemporalBuilder",
    "TimeBuilder",
]

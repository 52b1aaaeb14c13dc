"""
schemacraft — function-calling payloads.

Purpose
- Describe a model as a tool that an LLM function-calling API can invoke, with
  the model's JSON Schema document as the function's parameters.

Payload shape::

    {"type": "function", "function": {"name": ..., "description": ..., "parameters": {...}}}
"""

from __future__ import annotations

import re
from typing import Any, Final

import structlog

from schemacraft.classifier import is_model
from schemacraft.naming import snake_case
from schemacraft.refs import def_name, definition_of

logger = structlog.get_logger(__name__)

_FUNCTION_NAME: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def function_name(model: type[Any]) -> str:
    """``WeatherReport`` -> ``weather_report``."""

    return snake_case(def_name(model))


def function_description(model: type[Any]) -> str:
    description = definition_of(model).keyword("description")
    if description:
        return str(description)
    return f"Correctly extracted `{def_name(model)}` with all the required parameters with correct types"


def function_spec(
    model: type[Any],
    *,
    name: str | None = None,
    description: str | None = None,
) -> dict[str, Any]:
    """Function-calling payload for ``model``.

    The name defaults to the snake-cased model name and the description to the
    definition's ``description`` keyword. Names are limited to letters,
    digits, ``_`` and ``-`` (at most 64 characters).
    """

    if not is_model(model):
        raise TypeError(f"expected a model class, got {model!r}")
    resolved_name = name if name is not None else function_name(model)
    if not _FUNCTION_NAME.match(resolved_name):
        raise ValueError(f"invalid function name {resolved_name!r}: use letters, digits, '_' or '-' (max 64)")
    spec = {
        "type": "function",
        "function": {
            "name": resolved_name,
            "description": description if description is not None else function_description(model),
            "parameters": model.json_schema(),
        },
    }
    logger.debug("function_spec_built", model=model.__name__, function=resolved_name)
    return spec


__all__ = ["function_description", "function_name", "function_spec"]

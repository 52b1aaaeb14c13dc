from __future__ import annotations

import pytest

from schemacraft.naming import camel_case, identity, pascal_case, resolve_strategy, snake_case


def test_case_conversions() -> None:
    assert camel_case("first_name") == "firstName"
    assert camel_case("_private_value") == "_privateValue"
    assert pascal_case("first_name") == "FirstName"
    assert identity("first_name") == "first_name"


def test_snake_case_handles_acronyms() -> None:
    assert snake_case("PersonAddress") == "person_address"
    assert snake_case("HTTPServerConfig") == "http_server_config"
    assert snake_case("User") == "user"


def test_resolve_strategy() -> None:
    assert resolve_strategy("camel") is camel_case
    assert resolve_strategy(None) is identity
    assert resolve_strategy(str.upper)("abc") == "ABC"
    with pytest.raises(ValueError, match="unknown property naming strategy 'kebab'"):
        resolve_strategy("kebab")

"""Property naming strategies and identifier case helpers."""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Final

NamingStrategy = Callable[[str], str]

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CAMEL_CASE_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")


def identity(name: str) -> str:
    return name


def camel_case(name: str) -> str:
    """``first_name`` -> ``firstName``; leading underscores are kept."""

    prefix, words = _split(name)
    if not words:
        return name
    head, *tail = words
    return prefix + head.lower() + "".join(word[:1].upper() + word[1:] for word in tail)


def pascal_case(name: str) -> str:
    """``first_name`` -> ``FirstName``; leading underscores are kept."""

    prefix, words = _split(name)
    if not words:
        return name
    return prefix + "".join(word[:1].upper() + word[1:] for word in words)


def snake_case(name: str) -> str:
    """``HTTPServerConfig`` -> ``http_server_config``."""

    spaced = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    spaced = _CAMEL_CASE_BOUNDARY.sub(r"\1_\2", spaced)
    return spaced.replace("-", "_").lower()


NAMING_STRATEGIES: Final[dict[str, NamingStrategy]] = {
    "identity": identity,
    "camel": camel_case,
    "pascal": pascal_case,
}


def resolve_strategy(strategy: str | NamingStrategy | None) -> NamingStrategy:
    """Return the callable for a strategy name, or the callable itself."""

    if strategy is None:
        return identity
    if callable(strategy):
        return strategy
    try:
        return NAMING_STRATEGIES[strategy]
    except KeyError:
        expected = ", ".join(sorted(NAMING_STRATEGIES))
        raise ValueError(
            f"unknown property naming strategy {strategy!r}; expected one of: {expected}"
        ) from None


def _split(name: str) -> tuple[str, list[str]]:
    stripped = name.lstrip("_")
    prefix = name[: len(name) - len(stripped)]
    return prefix, [word for word in stripped.split("_") if word]


__all__ = [
    "NAMING_STRATEGIES",
    "NamingStrategy",
    "camel_case",
    "identity",
    "pascal_case",
    "resolve_strategy",
    "snake_case",
]

"""Name -> adapter class registry used by ``CompilerConfig.validation_adapter``."""

from __future__ import annotations

import threading
from typing import Any

from schemacraft.errors import SchemaCraftError
from schemacraft.validation.adapters.base import ValidationAdapter
from schemacraft.validation.adapters.none import NoneAdapter
from schemacraft.validation.adapters.standard import StandardAdapter


class UnknownAdapterError(SchemaCraftError, LookupError):
    """Raised when a configured validation adapter name is not registered."""


_lock = threading.Lock()
_adapters: dict[str, type[ValidationAdapter]] = {
    StandardAdapter.name: StandardAdapter,
    NoneAdapter.name: NoneAdapter,
}


def register_adapter(name: str, adapter: type[ValidationAdapter]) -> None:
    if not (isinstance(adapter, type) and issubclass(adapter, ValidationAdapter)):
        raise TypeError(f"adapter {name!r} must be a ValidationAdapter subclass, got {adapter!r}")
    with _lock:
        _adapters[name] = adapter


def resolve_adapter(selector: str | type[Any]) -> type[ValidationAdapter]:
    """Adapter class for a registered name, or the class itself."""

    if isinstance(selector, type):
        if not issubclass(selector, ValidationAdapter):
            raise TypeError(f"{selector!r} is not a ValidationAdapter subclass")
        return selector
    with _lock:
        adapter = _adapters.get(selector)
        known = sorted(_adapters)
    if adapter is None:
        raise UnknownAdapterError(
            f"unknown validation adapter {selector!r}; expected one of: {', '.join(known)}"
        )
    return adapter


def registered_adapters() -> tuple[str, ...]:
    with _lock:
        return tuple(sorted(_adapters))


__all__ = ["UnknownAdapterError", "register_adapter", "registered_adapters", "resolve_adapter"]

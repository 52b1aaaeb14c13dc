"""Process-wide registries: compiled models by name and custom type builders.

Models register themselves when their class is created so that string
forward references (``"Node"``) can be resolved lazily, which is what makes
self-referencing and mutually recursive models declarable.
"""

from __future__ import annotations

import threading
import weakref
from collections.abc import Hashable
from typing import Any

_lock = threading.Lock()
_models: weakref.WeakValueDictionary[str, type[Any]] = weakref.WeakValueDictionary()
_custom_builders: dict[Hashable, type[Any]] = {}


def register_model(model: type[Any]) -> None:
    """Make ``model`` resolvable by its class name."""

    with _lock:
        _models[model.__name__] = model


def lookup_model(name: str) -> type[Any] | None:
    with _lock:
        return _models.get(name)


def unregister_model(model: type[Any]) -> None:
    """Forget ``model`` unless its name now belongs to another class."""

    with _lock:
        if _models.get(model.__name__) is model:
            del _models[model.__name__]


def register_type(host_type: Hashable, builder: type[Any]) -> None:
    """Register ``builder`` (a ``BaseBuilder`` subclass) for ``host_type``.

    Registered types take precedence over the built-in scalar mapping.
    """

    from schemacraft.builders.base import BaseBuilder
    from schemacraft.classifier import clear_cache

    if not (isinstance(builder, type) and issubclass(builder, BaseBuilder)):
        raise TypeError(f"builder for {host_type!r} must be a BaseBuilder subclass, got {builder!r}")
    with _lock:
        _custom_builders[host_type] = builder
    clear_cache()


def unregister_type(host_type: Hashable) -> None:
    from schemacraft.classifier import clear_cache

    with _lock:
        _custom_builders.pop(host_type, None)
    clear_cache()


def custom_builder_for(host_type: object) -> type[Any] | None:
    try:
        hash(host_type)
    except TypeError:
        return None
    with _lock:
        return _custom_builders.get(host_type)


__all__ = [
    "custom_builder_for",
    "lookup_model",
    "register_model",
    "register_type",
    "unregister_model",
    "unregister_type",
]

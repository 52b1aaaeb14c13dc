"""
schemacraft — compiler config loader.

Purpose
- Load an effective ``CompilerConfig`` from defaults, a TOML file,
  ``SCHEMACRAFT_*`` environment variables and explicit overrides.

Precedence
- overrides > env (SCHEMACRAFT_) > file > defaults.

File discovery
- An explicit path must exist. ``pyproject.toml`` is read from its
  ``[tool.schemacraft]`` table; any other file is read from its root table.
- Without a path, ``schemacraft.toml`` and then ``pyproject.toml`` in the
  working directory are tried; neither is required.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final, Literal

import structlog

from schemacraft.config.schema import (
    BOOLEAN_FIELDS,
    OPTIONAL_STRING_FIELDS,
    CompilerConfig,
    config_from_mapping,
)

DEFAULT_CONFIG_FILE: Final[str] = "schemacraft.toml"
PYPROJECT_FILE: Final[str] = "pyproject.toml"
PYPROJECT_TABLE: Final[tuple[str, ...]] = ("tool", "schemacraft")
ENV_PREFIX: Final[str] = "SCHEMACRAFT_"

_BOOLEAN_TRUE: Final[frozenset[str]] = frozenset({"1", "true", "t", "yes", "y", "on"})
_BOOLEAN_FALSE: Final[frozenset[str]] = frozenset({"0", "false", "f", "no", "n", "off"})

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class _Binding:
    field: str
    value_type: Literal["str", "optional_str", "bool"]


class ConfigLoadError(ValueError):
    """Raised when config cannot be loaded or overrides cannot be coerced."""


_BINDINGS: Final[tuple[_Binding, ...]] = (
    *(_Binding(name, "bool") for name in BOOLEAN_FIELDS),
    *(_Binding(name, "optional_str") for name in OPTIONAL_STRING_FIELDS),
    _Binding("validation_adapter", "str"),
    _Binding("schema_version", "str"),
    _Binding("property_naming_strategy", "str"),
)


def load_config(
    config_path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    overrides: Mapping[str, object] | None = None,
) -> CompilerConfig:
    """Load effective config with deterministic precedence: overrides > env > file > defaults."""

    env_map = dict(os.environ if environ is None else environ)
    source, file_payload = _load_file_payload(config_path)

    merged: dict[str, Any] = dict(file_payload)
    merged.update(_collect_env_overrides(env_map))
    merged.update(dict(overrides or {}))

    config = config_from_mapping(merged)
    logger.debug(
        "compiler_config_loaded",
        source=str(source) if source is not None else None,
        env_keys=sorted(key for key in env_map if key.startswith(ENV_PREFIX)),
        override_keys=sorted(overrides or {}),
    )
    return config


def _load_file_payload(config_path: str | Path | None) -> tuple[Path | None, dict[str, Any]]:
    if config_path is not None:
        path = Path(config_path).expanduser().resolve()
        return path, _extract_table(path, _load_toml_file(path, required=True))

    cwd = Path.cwd()
    for candidate in (cwd / DEFAULT_CONFIG_FILE, cwd / PYPROJECT_FILE):
        if candidate.exists():
            return candidate, _extract_table(candidate, _load_toml_file(candidate, required=False))
    return None, {}


def _load_toml_file(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise ConfigLoadError(f"config file not found: {path}")
        return {}

    try:
        with path.open("rb") as handle:
            parsed = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigLoadError(f"invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigLoadError(f"unable to read config file {path}: {exc}") from exc

    return parsed


def _extract_table(path: Path, parsed: Mapping[str, Any]) -> dict[str, Any]:
    if path.name != PYPROJECT_FILE:
        return dict(parsed)
    table: object = parsed
    for key in PYPROJECT_TABLE:
        if not isinstance(table, Mapping):
            break
        table = table.get(key, {})
    if not isinstance(table, Mapping):
        raise ConfigLoadError(f"[{'.'.join(PYPROJECT_TABLE)}] in {path} must be a table")
    return dict(table)


def _collect_env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for binding in _BINDINGS:
        env_name = f"{ENV_PREFIX}{binding.field.upper()}"
        raw = environ.get(env_name)
        if raw is None:
            continue
        overrides[binding.field] = _coerce_env(raw, binding.value_type, env_name, binding.field)
    return overrides


def _coerce_env(
    raw: str,
    value_type: Literal["str", "optional_str", "bool"],
    env_name: str,
    field: str,
) -> object:
    value = raw.strip()
    if value_type == "str":
        return value
    if value_type == "optional_str":
        return value or None

    lowered = value.lower()
    if lowered in _BOOLEAN_TRUE:
        return True
    if lowered in _BOOLEAN_FALSE:
        return False
    raise ConfigLoadError(f"{env_name} -> {field} must be a boolean (true/false/1/0/yes/no/on/off)")


__all__ = ["DEFAULT_CONFIG_FILE", "ENV_PREFIX", "ConfigLoadError", "load_config"]

"""
schemacraft — compiler configuration schema and validation.

Purpose
- Define the immutable compiler configuration value and its defaults.
- Validate configuration payloads (TOML tables, env overrides, keyword
  arguments) and report structured issues (field path + message).

Non-functional requirements
- No process-wide mutable configuration: every model receives a
  ``CompilerConfig`` explicitly or uses ``DEFAULT_CONFIG``.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final

from schemacraft.constants import NO_VALUE, SCHEMA_VERSIONS
from schemacraft.naming import NAMING_STRATEGIES

BOOLEAN_FIELDS: Final[tuple[str, ...]] = (
    "default_additional_properties",
    "nilable_is_optional",
    "auto_validations",
    "use_refs",
    "auto_generate_ids",
    "prefer_external_refs",
)
OPTIONAL_STRING_FIELDS: Final[tuple[str, ...]] = ("schema_id", "base_schema_uri")


@dataclass(frozen=True, slots=True)
class CompilerConfig:
    """Options shared by the document builders and the validation adapter."""

    default_additional_properties: bool = False
    nilable_is_optional: bool = False
    auto_validations: bool = True
    validation_adapter: str | type[Any] = "standard"
    schema_version: str = NO_VALUE
    schema_id: str | None = None
    use_refs: bool = False
    base_schema_uri: str | None = None
    auto_generate_ids: bool = False
    prefer_external_refs: bool = False
    property_naming_strategy: str | Callable[[str], str] = "identity"

    def __post_init__(self) -> None:
        issues = _collect_issues(self.to_dict())
        if issues.has_issues:
            raise ConfigValidationError(issues.items())

    def replace(self, **changes: object) -> CompilerConfig:
        """Return a copy with ``changes`` applied (and validated)."""

        return dataclasses.replace(self, **changes)

    def schema_uri(self) -> str | None:
        return resolve_schema_uri(self.schema_version)

    def to_dict(self) -> dict[str, Any]:
        return {field.name: getattr(self, field.name) for field in dataclasses.fields(self)}


@dataclass(frozen=True, slots=True)
class ConfigValidationIssue:
    """Single structured validation failure."""

    path: str
    message: str


@dataclass(frozen=True, slots=True)
class ConfigValidationResult:
    """Validation result with the built config when no issues were found."""

    config: CompilerConfig | None
    issues: tuple[ConfigValidationIssue, ...]

    @property
    def is_valid(self) -> bool:
        return not self.issues


class ConfigValidationError(ValueError):
    """Raised when strict config validation fails."""

    def __init__(self, issues: Sequence[ConfigValidationIssue]) -> None:
        self.issues = tuple(issues)
        if not self.issues:
            rendered = "unknown validation failure"
        else:
            rendered = "\n".join(f"- {item.path}: {item.message}" for item in self.issues)
        super().__init__(f"invalid config:\n{rendered}")


class _IssueCollector:
    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[ConfigValidationIssue] = []

    def add(self, path: str, message: str) -> None:
        self._items.append(ConfigValidationIssue(path=path, message=message))

    def items(self) -> tuple[ConfigValidationIssue, ...]:
        return tuple(self._items)

    @property
    def has_issues(self) -> bool:
        return bool(self._items)


def resolve_schema_uri(version: str) -> str | None:
    """Map a draft name to its meta-schema URI; ``"none"`` means no ``$schema``."""

    if version == NO_VALUE:
        return None
    return SCHEMA_VERSIONS.get(version, version)


def validate_config(payload: Mapping[str, object]) -> ConfigValidationResult:
    """Validate a configuration mapping without raising."""

    issues = _collect_issues(payload)
    if issues.has_issues:
        return ConfigValidationResult(config=None, issues=issues.items())
    config = CompilerConfig(**{str(key): value for key, value in payload.items()})
    return ConfigValidationResult(config=config, issues=())


def config_from_mapping(payload: Mapping[str, object]) -> CompilerConfig:
    """Build a ``CompilerConfig`` from a mapping, raising ``ConfigValidationError``."""

    result = validate_config(payload)
    if result.config is None:
        raise ConfigValidationError(result.issues)
    return result.config


def _collect_issues(payload: Mapping[str, object]) -> _IssueCollector:
    issues = _IssueCollector()
    known = {field.name for field in dataclasses.fields(CompilerConfig)}
    for key in sorted(str(key) for key in payload):
        if key not in known:
            issues.add(key, "unknown key")

    for name in BOOLEAN_FIELDS:
        if name in payload:
            _check_bool(payload[name], name, issues)
    for name in OPTIONAL_STRING_FIELDS:
        if name in payload and payload[name] is not None:
            _check_str(payload[name], name, issues)
    if "schema_version" in payload:
        _check_str(payload["schema_version"], "schema_version", issues)
    if "validation_adapter" in payload:
        adapter = payload["validation_adapter"]
        if not isinstance(adapter, type):
            _check_str(adapter, "validation_adapter", issues)
    if "property_naming_strategy" in payload:
        strategy = payload["property_naming_strategy"]
        if not callable(strategy) and _check_str(strategy, "property_naming_strategy", issues):
            if strategy not in NAMING_STRATEGIES:
                expected = ", ".join(sorted(NAMING_STRATEGIES))
                issues.add(
                    "property_naming_strategy",
                    f"invalid value {strategy!r}; expected one of: {expected}",
                )
    return issues


def _check_bool(value: object, path: str, issues: _IssueCollector) -> bool:
    if isinstance(value, bool):
        return True
    issues.add(path, f"expected boolean, got {type(value).__name__}")
    return False


def _check_str(value: object, path: str, issues: _IssueCollector) -> bool:
    if not isinstance(value, str):
        issues.add(path, f"expected string, got {type(value).__name__}")
        return False
    if not value.strip():
        issues.add(path, "must not be empty")
        return False
    return True


DEFAULT_CONFIG: Final[CompilerConfig] = CompilerConfig()

__all__ = [
    "BOOLEAN_FIELDS",
    "DEFAULT_CONFIG",
    "OPTIONAL_STRING_FIELDS",
    "CompilerConfig",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "ConfigValidationResult",
    "config_from_mapping",
    "resolve_schema_uri",
    "validate_config",
]

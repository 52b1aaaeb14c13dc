"""Structured validation errors and the per-run validation context."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from schemacraft.constants import BASE_ERROR_PATH


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """One failed check: where (property path), what (code) and a message."""

    path: str
    code: str
    message: str

    @property
    def full_message(self) -> str:
        if self.path == BASE_ERROR_PATH:
            return self.message
        return f"{self.path} {self.message}"

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "code": self.code, "message": self.message}


class ErrorCollection:
    """Ordered validation issues keyed by property path.

    Paths are dotted for nested objects (``address.city``) and indexed for
    array elements (``contacts[1].email``). Object-level issues use ``base``.
    """

    __slots__ = ("_issues",)

    def __init__(self, issues: Iterable[ValidationIssue] = ()) -> None:
        self._issues: list[ValidationIssue] = list(issues)

    def __iter__(self) -> Iterator[ValidationIssue]:
        return iter(self._issues)

    def __len__(self) -> int:
        return len(self._issues)

    def __bool__(self) -> bool:
        return bool(self._issues)

    def __contains__(self, path: object) -> bool:
        return any(issue.path == path for issue in self._issues)

    def __getitem__(self, path: str) -> list[str]:
        return [issue.message for issue in self._issues if issue.path == path]

    def __repr__(self) -> str:
        return f"ErrorCollection({self.to_dict()!r})"

    @property
    def is_empty(self) -> bool:
        return not self._issues

    def add(self, path: str, code: str, message: str) -> None:
        self._issues.append(ValidationIssue(path=path, code=code, message=message))

    def merge(self, other: ErrorCollection, *, prefix: str) -> None:
        """Re-attach ``other``'s issues beneath ``prefix``."""

        for issue in other:
            self._issues.append(
                ValidationIssue(path=nest_path(prefix, issue.path), code=issue.code, message=issue.message)
            )

    def clear(self) -> None:
        self._issues.clear()

    def codes(self, path: str) -> list[str]:
        return [issue.code for issue in self._issues if issue.path == path]

    def paths(self) -> list[str]:
        return list(dict.fromkeys(issue.path for issue in self._issues))

    def to_dict(self) -> dict[str, list[str]]:
        grouped: dict[str, list[str]] = {}
        for issue in self._issues:
            grouped.setdefault(issue.path, []).append(issue.message)
        return grouped

    def details(self) -> dict[str, list[dict[str, str]]]:
        grouped: dict[str, list[dict[str, str]]] = {}
        for issue in self._issues:
            grouped.setdefault(issue.path, []).append({"code": issue.code, "message": issue.message})
        return grouped

    def full_messages(self) -> list[str]:
        return [issue.full_message for issue in self._issues]


@dataclass(slots=True)
class ValidationContext:
    """Error sink plus the instances currently being validated (cycle guard)."""

    errors: ErrorCollection
    active: set[int] = field(default_factory=set)
    depth: int = 0


def nest_path(prefix: str, path: str) -> str:
    if path == BASE_ERROR_PATH:
        return prefix
    if path.startswith("["):
        return f"{prefix}{path}"
    return f"{prefix}.{path}"


__all__ = ["ErrorCollection", "ValidationContext", "ValidationIssue", "nest_path"]

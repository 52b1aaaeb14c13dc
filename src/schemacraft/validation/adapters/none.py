"""Adapter that registers no validators; documents are still built."""

from __future__ import annotations

from collections.abc import Mapping

from schemacraft.validation.adapters.base import ValidationAdapter


class NoneAdapter(ValidationAdapter):
    name = "none"

    def apply(self, name: str, host_type: object, constraints: Mapping[str, object]) -> None:
        return None


__all__ = ["NoneAdapter"]

"""String formats checked at runtime. Unknown formats are annotations only."""

from __future__ import annotations

import datetime
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True, slots=True)
class FormatCheck:
    pattern: re.Pattern[str]
    message: str
    parse: Callable[[str], object] | None = None

    def matches(self, value: str) -> bool:
        if not self.pattern.fullmatch(value):
            return False
        if self.parse is None:
            return True
        try:
            self.parse(value)
        except ValueError:
            return False
        return True


def _parse_date_time(value: str) -> object:
    return datetime.datetime.fromisoformat(value.upper().replace("Z", "+00:00"))


FORMATS: Final[dict[str, FormatCheck]] = {
    "email": FormatCheck(
        re.compile(r"[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+@[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?)+"),
        "must be a valid email address",
    ),
    "uri": FormatCheck(re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*:\S+"), "must be a valid URI"),
    "url": FormatCheck(re.compile(r"https?://[^\s/$.?#][^\s]*", re.IGNORECASE), "must be a valid URL"),
    "uuid": FormatCheck(
        re.compile(r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"),
        "must be a valid UUID",
    ),
    "date": FormatCheck(
        re.compile(r"\d{4}-\d{2}-\d{2}"),
        "must be a valid date in YYYY-MM-DD format",
        datetime.date.fromisoformat,
    ),
    "date-time": FormatCheck(
        re.compile(r"\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:[Zz]|[+-]\d{2}:\d{2})?"),
        "must be a valid ISO 8601 date-time",
        _parse_date_time,
    ),
    "time": FormatCheck(
        re.compile(r"\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:[Zz]|[+-]\d{2}:\d{2})?"),
        "must be a valid time in HH:MM:SS format",
        lambda value: datetime.time.fromisoformat(value.upper().replace("Z", "+00:00")),
    ),
}


def format_check(name: str) -> FormatCheck | None:
    return FORMATS.get(name)


__all__ = ["FORMATS", "FormatCheck", "format_check"]

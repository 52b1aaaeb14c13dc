"""Unit tests for opt-in logging configuration."""

from __future__ import annotations

import json
from collections.abc import Iterator

import pytest
import structlog

from schemacraft.observability import configure_logging


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()


def test_json_output_is_filtered_by_level(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging("warning")
    log = structlog.get_logger("schemacraft.test")

    log.info("hidden_event")
    log.warning("visible_event", model="Person")

    lines = [line for line in capsys.readouterr().out.splitlines() if line.strip()]
    assert len(lines) == 1
    payload = json.loads(lines[0])
    assert payload["event"] == "visible_event"
    assert payload["level"] == "warning"
    assert payload["model"] == "Person"
    assert "timestamp" in payload


def test_console_output(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging("DEBUG", json_format=False)

    structlog.get_logger("schemacraft.test").debug("console_event")

    assert "console_event" in capsys.readouterr().out


def test_invalid_level() -> None:
    with pytest.raises(ValueError, match="invalid log level 'loud'"):
        configure_logging("loud")

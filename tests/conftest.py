"""Shared test fixtures for minisup tests."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest
import structlog
from rich.console import Console
from structlog.testing import CapturingLogger
from structlog.typing import FilteringBoundLogger


@dataclass(frozen=True, slots=True)
class LogCapture:
    """Logger that records every event it receives."""

    logger: FilteringBoundLogger
    sink: CapturingLogger

    @property
    def records(self) -> list[dict[str, Any]]:
        """Return the event dictionaries in emission order."""
        return [dict(call.kwargs) for call in self.sink.calls]

    def events(self, level: str | None = None) -> list[str]:
        """Return event names, optionally filtered by level."""
        return [
            record["event"]
            for record in self.records
            if level is None or record["level"] == level
        ]

    def find(self, event: str) -> list[dict[str, Any]]:
        """Return all records with the given event name."""
        return [record for record in self.records if record["event"] == event]


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def log_capture() -> LogCapture:
    """Create a debug-level logger that captures records in memory."""
    sink = CapturingLogger()
    logger = structlog.wrap_logger(
        sink,
        processors=[structlog.processors.add_log_level],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        context_class=dict,
    )
    return LogCapture(logger=logger, sink=sink)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Run without MINISUP_* variables, from an empty working directory."""
    for key in list(os.environ):
        if key.startswith("MINISUP_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def console() -> Console:
    return Console(
        width=70,
        force_terminal=True,
        highlight=False,
        color_system=None,
        legacy_windows=False,
    )

"""Shared test fixtures for the linereader test suite.

WHY: Almost every test needs a small text file on disk with precise
bytes (mixed terminators, no trailing newline, odd encodings) and a way
to watch what a reader emits. Centralizing both keeps the tests about
behavior rather than plumbing.

HOW: ``make_file`` writes bytes or text into tmp_path. ``EventLog``
records every reader event in order. ``read_events`` runs a reader to
completion on a fresh event loop and returns its EventLog.

RULES:
- Files are written in binary mode so terminators are exact
- read_events fails the test (asyncio.TimeoutError) instead of hanging
- Each reader runs on its own asyncio.run() loop
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

import pytest

from linereader.reader import LineReader

TIMEOUT_S = 5.0

MIXED_TEXT = "a\nb\r\nc\rd"


async def drain_ticks(count: int = 50) -> None:
    """Let the event loop run ``count`` rounds of ready callbacks."""
    for _ in range(count):
        await asyncio.sleep(0)


class EventLog:
    """Ordered record of the events a reader emitted."""

    def __init__(self, reader: LineReader) -> None:
        self.reader = reader
        self.events: List[Tuple[str, Any]] = []
        reader.on("open", lambda: self.events.append(("open", None)))
        reader.on("error", lambda exc: self.events.append(("error", exc)))
        reader.on("line", lambda line: self.events.append(("line", line)))
        reader.on("end", lambda: self.events.append(("end", None)))

    @property
    def lines(self) -> List[str]:
        return [payload for name, payload in self.events if name == "line"]

    @property
    def errors(self) -> List[BaseException]:
        return [payload for name, payload in self.events if name == "error"]

    def count(self, name: str) -> int:
        return sum(1 for event, _ in self.events if event == name)

    @property
    def names(self) -> List[str]:
        return [name for name, _ in self.events]


@pytest.fixture
def make_file(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing ``content`` (bytes or str) to a file in tmp_path."""

    def _make(content: "bytes | str", name: str = "input.txt", encoding: str = "utf-8") -> Path:
        path = tmp_path / name
        data = content.encode(encoding) if isinstance(content, str) else content
        path.write_bytes(data)
        return path

    return _make


@pytest.fixture
def read_events() -> Callable[..., EventLog]:
    """Run a LineReader to its ``end`` event and return the EventLog.

    ``setup(reader, log)`` is called right after construction, before any
    event can fire, to attach extra listeners.
    """

    def _read(
        path: Any,
        options: Optional[dict] = None,
        setup: Optional[Callable[[LineReader, EventLog], None]] = None,
        **overrides: Any,
    ) -> EventLog:
        async def _run() -> EventLog:
            reader = LineReader(path, options, **overrides)
            log = EventLog(reader)
            if setup is not None:
                setup(reader, log)
            await asyncio.wait_for(reader.wait_closed(), timeout=TIMEOUT_S)
            await drain_ticks()
            return log

        return asyncio.run(_run())

    return _read

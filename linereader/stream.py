"""Async-iterator view of a LineReader.

WHY: Event callbacks suit fan-out, but most Python code wants to write
``async for line in iter_lines(path)``. The iterator should keep the
reader's memory guarantee, so a slow consumer must not let lines pile
up without bound.

HOW: A LineReader pushes lines into a local deque. When the deque holds
``high_water`` lines the reader is paused; once the consumer has taken
them all the reader is resumed. An asyncio.Event wakes the generator
when lines, an error, or the end arrive.

RULES:
- Lines are yielded in file order, exactly once
- An ``error`` event is raised from the generator (the original exception)
- Leaving the generator early closes the reader
- high_water must be at least 1
"""

from __future__ import annotations

import asyncio
from collections import deque
from typing import Any, AsyncIterator, Deque, Mapping, Optional

from linereader.reader import LineReader, PathLike

DEFAULT_HIGH_WATER = 1024


class _LineBuffer:
    """Collects reader events for the generator."""

    def __init__(self, reader: LineReader, high_water: int) -> None:
        self.reader = reader
        self.high_water = high_water
        self.lines: Deque[str] = deque()
        self.error: Optional[BaseException] = None
        self.ended = False
        self.wakeup = asyncio.Event()

        reader.on("line", self._on_line)
        reader.on("error", self._on_error)
        reader.on("end", self._on_end)

    def _on_line(self, line: str) -> None:
        self.lines.append(line)
        if len(self.lines) >= self.high_water:
            self.reader.pause()
        self.wakeup.set()

    def _on_error(self, exc: BaseException) -> None:
        self.error = exc
        self.wakeup.set()

    def _on_end(self) -> None:
        self.ended = True
        self.wakeup.set()


async def iter_lines(
    path: PathLike,
    options: Optional[Mapping[str, Any]] = None,
    *,
    high_water: int = DEFAULT_HIGH_WATER,
    **overrides: Any,
) -> AsyncIterator[str]:
    """Yield the lines of ``path`` one by one.

    Args:
        path: File to read.
        options: Reader options mapping (see LineReader).
        high_water: Lines buffered before the reader is paused.
        **overrides: Keyword reader options.

    Raises:
        OSError: If the file cannot be opened or read.
        ValueError: If options are invalid or high_water < 1.
    """
    if high_water < 1:
        raise ValueError("high_water must be at least 1, got {}".format(high_water))

    reader = LineReader(path, options, **overrides)
    buffer = _LineBuffer(reader, high_water)
    try:
        while True:
            while buffer.lines:
                yield buffer.lines.popleft()
            if buffer.error is not None:
                raise buffer.error
            if buffer.ended:
                return
            reader.resume()
            buffer.wakeup.clear()
            await buffer.wakeup.wait()
    finally:
        reader.close()

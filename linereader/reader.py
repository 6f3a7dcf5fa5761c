"""Line-by-line file reader with pause, resume and early close.

WHY: Large text files (logs, exports, corpora) must be processed one
line at a time without loading them into memory, and consumers need
flow control: stop delivery while they do slow work, pick up exactly
where they stopped, or abandon the file early.

HOW: LineReader owns a FileByteSource and a LineSplitter. Every step
runs as its own asyncio event-loop callback (loop.call_soon), so
listeners can be attached right after construction and pause()/resume()
calls interleave between lines:

  init tick   open the source (deferred so no event fires during __init__)
  data        pause the source, split the chunk, queue complete lines
  emit tick   deliver at most one queued line, then schedule the next tick
  drained     queue empty: ask the source for more, or finish at end of input

RULES:
- Lines are emitted in file order, each exactly once, terminators stripped
- LF, CRLF and lone CR are all line terminators
- A non-empty unterminated last line is emitted after every queued line
- pause() stops delivery before the next queued line; resume() continues
  from exactly that line
- close() stops reading new text but still drains already-read lines
- end fires exactly once, on a tick with an empty queue and no pause
- I/O errors are emitted as ``error`` and never raised; the reader does
  not finish on its own after an error
"""

from __future__ import annotations

import asyncio
import enum
import logging
import os
from collections import deque
from typing import Any, Deque, Mapping, Optional, Union

from linereader.core.events import EventEmitter
from linereader.core.options import ReaderOptions, parse_options
from linereader.core.splitter import LineSplitter
from linereader.source import FileByteSource

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


class ReaderState(str, enum.Enum):
    """Lifecycle states of a LineReader.

    RULES:
    - not_started: constructed, source not opened yet
    - streaming: source opened, lines flowing (or waiting for text)
    - paused: pause() called and not yet resumed
    - ending: end of input reached (or close() called), draining the queue
    - closed: end event emitted; nothing else will ever be emitted
    """

    NOT_STARTED = "not_started"
    STREAMING = "streaming"
    PAUSED = "paused"
    ENDING = "ending"
    CLOSED = "closed"


class LineReader(EventEmitter):
    """Emit the lines of a text file as ``line`` events.

    WHY: Gives callers a push-style, flow-controlled view of a file as
    discrete lines, with memory bounded by one chunk plus the lines not
    yet delivered.

    HOW: See the module docstring. State lives in a handful of private
    attributes: the pending line deque, the splitter (which owns the
    trailing fragment), the paused/end-of-input/ended flags, and the
    handle of the single pending emission tick.

    RULES:
    - Must be constructed with a running event loop, or an explicit ``loop``
    - Events: open, error(exc), line(text), end
    - Options: encoding, skipEmptyLines / skip_empty_lines,
      chunkSize / chunk_size, errors (see linereader.core.options)
    """

    def __init__(
        self,
        path: PathLike,
        options: Optional[Mapping[str, Any]] = None,
        *,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        **overrides: Any,
    ) -> None:
        super().__init__()
        self._options: ReaderOptions = parse_options(options, **overrides)
        self._path = os.path.normpath(os.fspath(path))
        self._loop = loop or asyncio.get_running_loop()

        self._source: Optional[FileByteSource] = None
        self._splitter = LineSplitter()
        self._lines: Deque[str] = deque()
        self._paused = False
        self._end = False
        self._ended = False
        self._tick: Optional[asyncio.Handle] = None
        self._init_handle: Optional[asyncio.Handle] = self._loop.call_soon(self._init_source)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def path(self) -> str:
        return self._path

    @property
    def encoding(self) -> str:
        return self._options.encoding

    @property
    def skip_empty_lines(self) -> bool:
        return self._options.skip_empty_lines

    @property
    def options(self) -> ReaderOptions:
        return self._options

    @property
    def state(self) -> ReaderState:
        if self._ended:
            return ReaderState.CLOSED
        if self._end:
            return ReaderState.ENDING
        if self._source is None:
            return ReaderState.NOT_STARTED
        if self._paused:
            return ReaderState.PAUSED
        return ReaderState.STREAMING

    @property
    def pending(self) -> int:
        """Number of complete lines read but not yet emitted."""
        return len(self._lines)

    # ------------------------------------------------------------------
    # Public controls
    # ------------------------------------------------------------------

    def pause(self) -> None:
        """Stop emitting lines until resume() is called.

        A line whose ``line`` event is being delivered right now still
        reaches every listener; the next queued line waits.
        """
        self._paused = True

    def resume(self) -> None:
        self._paused = False
        self._schedule()

    def close(self) -> None:
        """Stop reading the file early.

        WHY: Consumers that found what they were looking for should not
        pay for reading the rest of a large file.

        HOW: Destroys the source (or cancels initialization if the source
        was never opened), marks end of input, and schedules an emission
        tick so lines already split from read text are still delivered
        before ``end``.

        RULES:
        - No line is emitted for text not yet read from the file
        - Already-queued lines and the read fragment are still emitted
        - Calling close() repeatedly is harmless; end fires once
        """
        if self._ended:
            return
        logger.debug("Closing %s early (%d line(s) still queued)", self._path, len(self._lines))
        if self._init_handle is not None:
            self._init_handle.cancel()
            self._init_handle = None
        if self._source is not None:
            self._source.destroy()
        self._end = True
        self._schedule()

    async def wait_closed(self) -> None:
        """Wait until the ``end`` event has been emitted."""
        if self._ended:
            return
        done = self._loop.create_future()

        def _on_end() -> None:
            if not done.done():
                done.set_result(None)

        self.once("end", _on_end)
        await done

    # ------------------------------------------------------------------
    # Source wiring
    # ------------------------------------------------------------------

    def _init_source(self) -> None:
        self._init_handle = None
        source = FileByteSource(
            self._path,
            encoding=self._options.encoding,
            chunk_size=self._options.chunk_size,
            errors=self._options.errors,
            loop=self._loop,
        )
        source.on("error", self._on_source_error)
        source.on("open", self._on_source_open)
        source.on("data", self._on_source_data)
        source.on("end", self._on_source_end)
        self._source = source
        source.open()

    def _on_source_open(self) -> None:
        self.emit("open")

    def _on_source_error(self, exc: BaseException) -> None:
        if not self.listener_count("error"):
            logger.error("Unhandled error reading %s: %s", self._path, exc)
            return
        self.emit("error", exc)

    def _on_source_data(self, chunk: str) -> None:
        if self._source is not None:
            self._source.pause()
        self._lines.extend(self._splitter.feed(chunk))
        self._schedule()

    def _on_source_end(self) -> None:
        logger.debug("End of input for %s", self._path)
        self._end = True
        self._schedule()

    # ------------------------------------------------------------------
    # Emission loop
    # ------------------------------------------------------------------

    def _schedule(self) -> None:
        if self._tick is None and not self._ended:
            self._tick = self._loop.call_soon(self._next_line)

    def _next_line(self) -> None:
        """One emission step: deliver at most one line.

        RULES:
        - At end of input the fragment joins the tail of the queue
        - Paused: do nothing; resume() schedules the next step
        - Empty queue: finish at end of input, otherwise resume the source
        - Otherwise emit the head line (unless skipped) and, if no listener
          paused the reader, schedule the next step
        """
        self._tick = None
        if self._ended:
            return

        if self._end:
            fragment = self._splitter.flush()
            if fragment:
                self._lines.append(fragment)

        if self._paused:
            return

        if not self._lines:
            if self._end:
                self._finish()
            elif self._source is not None:
                self._source.resume()
            return

        line = self._lines.popleft()
        if not self._options.skip_empty_lines or line:
            self.emit("line", line)

        if not self._paused:
            self._schedule()

    def _finish(self) -> None:
        if self._ended:
            return
        self._ended = True
        if self._tick is not None:
            self._tick.cancel()
            self._tick = None
        logger.debug("Finished reading %s", self._path)
        self.emit("end")


def open(
    path: PathLike,
    options: Optional[Mapping[str, Any]] = None,
    **overrides: Any,
) -> LineReader:
    """Create a LineReader for ``path`` on the running event loop."""
    return LineReader(path, options, **overrides)

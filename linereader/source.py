"""Pausable chunked file source driven by the asyncio event loop.

WHY: The line reader must never hold a whole file in memory, and it
decides itself when it wants more text. It needs a source that hands
out one chunk at a time, stops promptly when paused, picks up from the
next unread byte when resumed, and can be torn down mid-stream.

HOW: FileByteSource opens the file in binary mode and reads
``chunk_size`` bytes per event-loop callback (loop.call_soon). Each
chunk goes through an incremental decoder from the codecs registry, so
a multi-byte character split across reads is held back until its last
byte arrives, and line terminators reach the reader untranslated. After
a ``data`` event the next read is only scheduled if no listener paused
the source. Reads are plain blocking file reads, so each callback blocks
the event loop for the duration of one chunk read; this suits local
files, not slow network mounts.

RULES:
- Events: open, data(chunk: str), end, error(exc)
- At most one read callback is pending at any time
- end fires once, after the last chunk, and only on a read while unpaused
- A decode failure first emits the text decoded before the bad bytes,
  then the error
- After destroy() or an error, no data/end event ever fires and the file is closed
- open() failures and read failures are reported through the error event
"""

from __future__ import annotations

import asyncio
import codecs
import logging
from typing import BinaryIO, Optional

from linereader.core.events import EventEmitter

logger = logging.getLogger(__name__)


class FileByteSource(EventEmitter):
    """Chunked reader over one text file, with pause/resume/destroy."""

    def __init__(
        self,
        path: str,
        encoding: str,
        chunk_size: int,
        errors: str = "strict",
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        super().__init__()
        self.path = path
        self.encoding = encoding
        self.chunk_size = chunk_size
        self.errors = errors
        self._loop = loop or asyncio.get_running_loop()
        self._decoder = codecs.getincrementaldecoder(encoding)(errors)
        self._file: Optional[BinaryIO] = None
        self._read_handle: Optional[asyncio.Handle] = None
        self._paused = False
        self._finished = False
        self._destroyed = False

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def open(self) -> None:
        """Open the file and start delivering chunks.

        Emits ``open`` on success and schedules the first read, or
        emits ``error`` with the OSError raised by the open call.
        """
        if self._destroyed or self._file is not None:
            return
        try:
            self._file = open(self.path, "rb")
        except OSError as exc:
            self._fail(exc)
            return
        logger.debug("Opened %s (encoding=%s)", self.path, self.encoding)
        self.emit("open")
        self._schedule_read()

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        self._paused = False
        self._schedule_read()

    def destroy(self) -> None:
        """Abort the stream. No further data or end events will fire."""
        if self._destroyed:
            return
        self._destroyed = True
        if self._read_handle is not None:
            self._read_handle.cancel()
            self._read_handle = None
        self._close_file()

    def _schedule_read(self) -> None:
        if (
            self._read_handle is None
            and self._file is not None
            and not (self._paused or self._finished or self._destroyed)
        ):
            self._read_handle = self._loop.call_soon(self._read_chunk)

    def _read_chunk(self) -> None:
        self._read_handle = None
        if self._paused or self._finished or self._destroyed or self._file is None:
            return
        try:
            raw = self._file.read(self.chunk_size)
        except OSError as exc:
            self._fail(exc)
            return

        try:
            chunk = self._decoder.decode(raw, final=not raw)
        except UnicodeDecodeError as exc:
            self._fail_decode(exc)
            return

        if chunk:
            self.emit("data", chunk)

        if not raw:
            # A listener paused on the decoder's final text; the next
            # read sees EOF again and ends then.
            if self._destroyed or self._paused:
                return
            self._finished = True
            self._close_file()
            logger.debug("Reached end of %s", self.path)
            self.emit("end")
            return

        self._schedule_read()

    def _fail_decode(self, exc: UnicodeDecodeError) -> None:
        """Emit the text before the undecodable bytes, then the error.

        The decoder raised on the buffered bytes plus this read; the
        bytes before ``exc.start`` are complete characters.
        """
        valid = bytes(exc.object[:exc.start])
        if valid:
            try:
                prefix = codecs.decode(valid, self.encoding, self.errors)
            except UnicodeDecodeError:
                logger.debug("Could not decode the bytes before the failure in %s", self.path)
                prefix = ""
            if prefix:
                self.emit("data", prefix)
        if self._destroyed:
            return
        self._fail(exc)

    def _fail(self, exc: BaseException) -> None:
        self._finished = True
        self._close_file()
        logger.debug("Read failure on %s: %s", self.path, exc)
        self.emit("error", exc)

    def _close_file(self) -> None:
        if self._file is not None:
            try:
                self._file.close()
            except OSError:
                logger.warning("Failed to close %s", self.path)
            self._file = None

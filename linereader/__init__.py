"""linereader — read large text files line by line.

WHY: Loading a multi-gigabyte log or export into memory just to walk its
lines is wasteful and sometimes impossible. This package exposes a file
as a flow-controlled stream of line events, so callers can pause while
they work, resume exactly where they stopped, or close early.

HOW: Three layers, each independently testable:
  source   — FileByteSource hands out text chunks on demand
  core     — LineSplitter reassembles lines across chunk boundaries,
             EventEmitter fans events out, options are validated
  reader   — LineReader schedules one line per event-loop tick
On top sit an async iterator (stream.iter_lines) and a CLI.

RULES:
- Everything runs on a single asyncio event loop; no threads
- Events: open, error(exc), line(text), end
- Lines never include their terminator (LF, CRLF or CR)
"""

from linereader.reader import LineReader, ReaderState, open
from linereader.stream import iter_lines

__version__ = "0.1.0"

__all__ = [
    "LineReader",
    "ReaderState",
    "iter_lines",
    "open",
]

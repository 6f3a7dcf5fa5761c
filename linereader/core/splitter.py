"""Line-boundary reassembly across irregular text chunks.

WHY: A file stream hands out text in chunks whose boundaries have
nothing to do with line boundaries. A chunk may end mid-line, mid-way
through a CRLF pair, or exactly on a terminator. The reader needs whole
lines, each exactly once, in file order.

HOW: Each chunk is split on LF, CRLF, or lone CR. The stored fragment
(the unterminated tail of the previous chunk) is prepended to the first
piece, and the last piece becomes the new fragment. When a chunk ends
in CR the splitter remembers it, and drops an LF at the very start of
the next chunk so a CRLF pair straddling two chunks counts once.

RULES:
- Terminators are stripped; an empty string between two terminators is a line
- The fragment never contains a terminator
- flush() hands back the fragment (possibly "") and resets all state
- feed("") is a no-op
"""

from __future__ import annotations

import re
from typing import List

# CRLF must be tried before lone CR so "\r\n" is a single terminator.
_TERMINATOR_RE = re.compile(r"\r\n|\r|\n")


def split_lines(text: str) -> List[str]:
    """Split a complete text on universal newlines.

    A terminator-less final line is kept. A trailing terminator does not
    produce a trailing empty line.
    """
    splitter = LineSplitter()
    lines = splitter.feed(text)
    tail = splitter.flush()
    if tail:
        lines.append(tail)
    return lines


class LineSplitter:
    """Incremental universal-newline splitter holding one trailing fragment."""

    def __init__(self) -> None:
        self._fragment = ""
        self._pending_cr = False

    @property
    def fragment(self) -> str:
        return self._fragment

    def feed(self, chunk: str) -> List[str]:
        """Consume ``chunk`` and return the lines it completes, in order."""
        if not chunk:
            return []
        if self._pending_cr and chunk[0] == "\n":
            chunk = chunk[1:]
        self._pending_cr = chunk.endswith("\r")
        if not chunk:
            return []

        pieces = _TERMINATOR_RE.split(chunk)
        pieces[0] = self._fragment + pieces[0]
        self._fragment = pieces.pop()
        return pieces

    def flush(self) -> str:
        fragment = self._fragment
        self._fragment = ""
        self._pending_cr = False
        return fragment

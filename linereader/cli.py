"""Command-line interface for the line reader.

WHY: Handy for inspecting huge files from a terminal and for checking
how the reader splits a file with mixed or unusual line terminators,
without writing any code.

HOW: argparse collects the file path and reader options, then
asyncio.run() drives stream.iter_lines. Each line is printed to stdout
with a plain newline. --head stops after N lines by leaving the
iterator, which closes the reader early. Status and errors go to stderr.

RULES:
- Positional argument: the file to read
- --encoding, --skip-empty-lines, --chunk-size map to reader options
- --head N prints at most N lines
- Exit code 0 on success, 1 on I/O or option errors, 130 on Ctrl-C
- Logging goes to stderr; -v enables DEBUG, otherwise LINEREADER_LOG_LEVEL
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import sys
from typing import Any, Dict, List, Optional, TextIO

from linereader import config
from linereader.stream import iter_lines

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr, keeping stdout clean for piping."""
    print(msg, file=sys.stderr, flush=True)


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError("expected an integer, got {!r}".format(value)) from None
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1, got {}".format(number))
    return number


def _reader_options(args: argparse.Namespace) -> Dict[str, Any]:
    options: Dict[str, Any] = {"encoding": args.encoding}
    if args.skip_empty_lines:
        options["skipEmptyLines"] = True
    if args.chunk_size is not None:
        options["chunkSize"] = args.chunk_size
    return options


async def _print_lines(args: argparse.Namespace, out: TextIO) -> int:
    """Stream the file to ``out`` and return the number of lines printed."""
    count = 0
    async with contextlib.aclosing(iter_lines(args.file, _reader_options(args))) as lines:
        async for line in lines:
            out.write(line)
            out.write("\n")
            count += 1
            if args.head is not None and count >= args.head:
                break
    out.flush()
    return count


def run(args: argparse.Namespace, out: Optional[TextIO] = None) -> int:
    """Run the CLI for parsed ``args`` and return the process exit code.

    WHY: Keeping the exit-code logic out of main() lets tests call it
    with a captured output stream and no sys.exit.

    RULES:
    - OSError (missing file, permission denied, ...) → exit 1
    - ValueError (bad options, unknown encoding) → exit 1
    - KeyboardInterrupt → exit 130
    """
    out = out if out is not None else sys.stdout
    try:
        count = asyncio.run(_print_lines(args, out))
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        return 130
    except (OSError, ValueError) as e:
        _status("Error: {}".format(e))
        return 1
    logger.info("Printed %d line(s) from %s", count, args.file)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="linereader",
        description="Print a text file line by line without loading it into memory.",
    )

    parser.add_argument(
        "file",
        help="Path to the text file to read.",
    )

    parser.add_argument(
        "--encoding",
        default=config.DEFAULT_ENCODING,
        help="Text encoding of the file (default: {}).".format(config.DEFAULT_ENCODING),
    )

    parser.add_argument(
        "--skip-empty-lines",
        action="store_true",
        default=config.DEFAULT_SKIP_EMPTY_LINES,
        help="Do not print empty lines.",
    )

    parser.add_argument(
        "--chunk-size",
        type=_positive_int,
        default=None,
        help="Bytes to read from the file at a time "
             "(default: {}).".format(config.DEFAULT_CHUNK_SIZE),
    )

    parser.add_argument(
        "--head",
        type=_positive_int,
        default=None,
        metavar="N",
        help="Stop after printing N lines.",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging on stderr.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``linereader`` and ``python -m linereader``.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.LOG_LEVEL,
        format=config.LOG_FORMAT,
    )

    sys.exit(run(args))


if __name__ == "__main__":
    main()

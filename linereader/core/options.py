"""Reader option parsing and validation.

WHY: Callers configure a reader with a plain mapping (the familiar
``{"encoding": "utf8", "skipEmptyLines": True}`` shape) and/or Python
keyword arguments. Typos and wrong types should fail when the reader is
built, not surface later as silently ignored settings.

HOW: The mapping and keyword overrides are merged, validated against
OPTIONS_SCHEMA with jsonschema, normalized from camelCase to snake_case,
and filled in from the defaults in linereader.config. The encoding and
error policy are checked against the codec registry.

RULES:
- Keyword overrides win over mapping entries
- Each option may be spelled camelCase or snake_case, not both at once
- Unknown keys, wrong types, chunk sizes < 1, unknown encodings and
  unknown codec error handlers raise ValueError
- Missing options fall back to linereader.config defaults
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import jsonschema

from linereader import config

OPTIONS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "encoding": {"type": "string", "minLength": 1},
        "skipEmptyLines": {"type": "boolean"},
        "skip_empty_lines": {"type": "boolean"},
        "chunkSize": {"type": "integer", "minimum": 1},
        "chunk_size": {"type": "integer", "minimum": 1},
        "errors": {"type": "string", "minLength": 1},
    },
    "additionalProperties": False,
    "not": {
        "anyOf": [
            {"required": ["skipEmptyLines", "skip_empty_lines"]},
            {"required": ["chunkSize", "chunk_size"]},
        ]
    },
}
"""JSON Schema for the options mapping accepted by LineReader."""

_ALIASES = {
    "skipEmptyLines": "skip_empty_lines",
    "chunkSize": "chunk_size",
}


@dataclass(frozen=True)
class ReaderOptions:
    """Validated, normalized reader settings.

    RULES:
    - encoding: any name known to the codecs registry ("utf8", "latin-1", ...)
    - skip_empty_lines: drop zero-length lines instead of emitting them
    - chunk_size: bytes requested from the file per read
    - errors: codec error handler ("replace", "strict", "ignore", ...)
    """

    encoding: str = config.DEFAULT_ENCODING
    skip_empty_lines: bool = config.DEFAULT_SKIP_EMPTY_LINES
    chunk_size: int = config.DEFAULT_CHUNK_SIZE
    errors: str = config.DEFAULT_DECODE_ERRORS


def parse_options(
    options: Optional[Mapping[str, Any]] = None,
    **overrides: Any,
) -> ReaderOptions:
    """Merge, validate and normalize reader options.

    Args:
        options: Mapping of option names to values, or None.
        **overrides: Keyword options that take precedence over ``options``.

    Returns:
        A frozen ReaderOptions instance.

    Raises:
        ValueError: If any option is unknown, mistyped, or names an
            unknown encoding or codec error handler.
    """
    merged: Dict[str, Any] = dict(options or {})
    for key, value in overrides.items():
        # a keyword override replaces either spelling of the same option
        for alias, canonical in _ALIASES.items():
            if key in (alias, canonical):
                merged.pop(alias, None)
                merged.pop(canonical, None)
        merged[key] = value

    try:
        jsonschema.validate(instance=merged, schema=OPTIONS_SCHEMA)
    except jsonschema.ValidationError as exc:
        raise ValueError("Invalid reader options: {}".format(exc.message)) from exc

    normalized = {_ALIASES.get(key, key): value for key, value in merged.items()}
    parsed = ReaderOptions(**normalized)

    try:
        codecs.lookup(parsed.encoding)
    except LookupError:
        raise ValueError("Unknown encoding: {!r}".format(parsed.encoding)) from None
    try:
        codecs.lookup_error(parsed.errors)
    except LookupError:
        raise ValueError("Unknown codec error handler: {!r}".format(parsed.errors)) from None

    return parsed

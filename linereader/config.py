"""Default reader options and .env loading.

WHY: The reader has a handful of tunables (text encoding, empty-line
policy, read chunk size, codec error policy) and the CLI has a log
level. Keeping every default in one module makes them easy to find and
lets deployments override them from the environment without code
changes.

HOW: python-dotenv loads the .env file on import. Each default is a
module-level constant read from os.environ with a hardcoded fallback.
Boolean and integer values go through small parsing helpers so a bad
environment value fails loudly at import time.

RULES:
- LINEREADER_ENCODING defaults to "utf8"
- LINEREADER_SKIP_EMPTY_LINES defaults to false
- LINEREADER_CHUNK_SIZE defaults to 65536 bytes per read
- LINEREADER_DECODE_ERRORS defaults to "replace" (undecodable bytes never
  raise, they become U+FFFD)
- LINEREADER_LOG_LEVEL is only consulted by the CLI
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the working directory (where the script is run from)
load_dotenv()

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


def env_flag(name: str, default: bool) -> bool:
    """Read a boolean environment variable.

    RULES:
    - Accepts 1/0, true/false, yes/no, on/off (case-insensitive)
    - Unset variables return ``default``
    - Any other value raises ValueError naming the variable
    """
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError("{} must be a boolean, got {!r}".format(name, raw))


def env_int(name: str, default: int) -> int:
    """Read a positive integer environment variable."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError("{} must be an integer, got {!r}".format(name, raw)) from None
    if value < 1:
        raise ValueError("{} must be at least 1, got {}".format(name, value))
    return value


# ---------------------------------------------------------------------------
# Reader defaults
# ---------------------------------------------------------------------------

DEFAULT_ENCODING = os.getenv("LINEREADER_ENCODING", "utf8")
DEFAULT_SKIP_EMPTY_LINES = env_flag("LINEREADER_SKIP_EMPTY_LINES", False)
DEFAULT_CHUNK_SIZE = env_int("LINEREADER_CHUNK_SIZE", 64 * 1024)
DEFAULT_DECODE_ERRORS = os.getenv("LINEREADER_DECODE_ERRORS", "replace")

# ---------------------------------------------------------------------------
# CLI defaults
# ---------------------------------------------------------------------------

LOG_LEVEL = os.getenv("LINEREADER_LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

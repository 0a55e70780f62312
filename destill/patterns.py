"""Log line normalisation for grouping (recurrence) and display (presentation).

The same patterns are applied at two masking levels:
recurrence masks aggressively (including line numbers) so that similar errors
group together; presentation keeps diagnostic details while trimming noise.
"""

from __future__ import annotations

import enum
import os
import re
from collections.abc import Sequence


class MaskingLevel(enum.IntEnum):
    """How aggressively a line is normalised."""

    PRESENTATION = 0
    RECURRENCE = 1


_TIMESTAMP = re.compile(
    r"\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}:\d{2}(?:[.,]\d+)?(?:Z|[+-]\d{2}:?\d{2})?",
    re.ASCII,
)
_UUID = re.compile(
    r"\b[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}\b",
    re.ASCII,
)
_LONG_HASH = re.compile(r"\b[a-f0-9]{12,}\b", re.ASCII)
_HEX_ADDRESS = re.compile(r"\b0x[0-9a-fA-F]+\b", re.ASCII)
_NUMBER = re.compile(r"\b\d+\b", re.ASCII)
_LONG_PATH = re.compile(r"/(?:[^/\t\n\f\r ]+/){3,}([^/\t\n\f\r :]+(?::\d+)?)", re.ASCII)
_WHITESPACE = re.compile(r"[\t\n\f\r ]+")

MIN_PREFIX_LENGTH = 20


def _strip_timestamps(line: str, level: MaskingLevel) -> str:
    if level is MaskingLevel.PRESENTATION:
        match = _TIMESTAMP.search(line)
        if match and match.start() < 5:
            return line[match.end():].strip()
        return line
    return _TIMESTAMP.sub("[TIMESTAMP]", line)


def normalize(line: str, level: MaskingLevel) -> str:
    """Normalise a single log line at the given masking level."""
    level = MaskingLevel(level)
    presentation = level is MaskingLevel.PRESENTATION

    line = _strip_timestamps(line, level)
    line = _UUID.sub("<UUID>" if presentation else "[UUID]", line)
    line = _HEX_ADDRESS.sub("<HEX>" if presentation else "[HEX]", line)

    if presentation:
        line = _LONG_PATH.sub(r".../\1", line)
        line = _LONG_HASH.sub("<HASH>", line)
    else:
        line = _LONG_PATH.sub("[PATH]", line)
        line = _LONG_HASH.sub("<HASH>", line)
        line = _NUMBER.sub("[NUM]", line)

    return _WHITESPACE.sub(" ", line).strip()


def find_common_prefix(lines: Sequence[str]) -> str:
    """Return the longest prefix shared by all lines, or "" if it is too short."""
    if len(lines) < 2:
        return ""
    prefix = os.path.commonprefix(list(lines))
    return prefix if len(prefix) >= MIN_PREFIX_LENGTH else ""


def normalize_lines(lines: Sequence[str], level: MaskingLevel) -> list[str]:
    """Normalise every line; in presentation mode also drop a long shared prefix."""
    level = MaskingLevel(level)
    result = [normalize(line, level) for line in lines]
    if level is MaskingLevel.PRESENTATION:
        prefix = find_common_prefix(result)
        if prefix:
            result = ["... " + line[len(prefix):] for line in result]
    return result
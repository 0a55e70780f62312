"""Cleaning of log text for machine consumption: ANSI codes, CI markers, CRs."""

from __future__ import annotations

import re
from collections.abc import Iterable

_ANSI = re.compile(r"\x1b\[[0-9;]*m")
_BUILDKITE_TIMESTAMP = re.compile(r"\x1b_bk;t=[0-9]+\x07")


def strip_ansi(s: str) -> str:
    """Remove ANSI colour codes and Buildkite timestamp markers."""
    s = _BUILDKITE_TIMESTAMP.sub("", s)
    return _ANSI.sub("", s)


def clean(s: str) -> str:
    """Strip escape codes, normalise carriage returns and trim whitespace."""
    s = strip_ansi(s)
    s = s.replace("\r\n", "\n").replace("\r", "")
    return s.strip()


def clean_lines(lines: Iterable[str]) -> list[str]:
    """Apply :func:`clean` to every line."""
    return [clean(line) for line in lines]
"""Presentation-level compression of log lines for tool responses."""

from __future__ import annotations

from collections.abc import Sequence

from destill.patterns import MaskingLevel, normalize, normalize_lines


def compress_line(line: str) -> str:
    """Strip leading timestamps, shorten long paths, mask hashes, collapse spaces.

    Line numbers and other diagnostic details are kept.
    """
    return normalize(line, MaskingLevel.PRESENTATION)


def compress_context_lines(lines: Sequence[str]) -> list[str]:
    """Compress every line and drop a long prefix they all share."""
    return normalize_lines(lines, MaskingLevel.PRESENTATION)
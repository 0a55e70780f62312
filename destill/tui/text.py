"""Text helpers for terminal display: escape stripping, width, truncation, wrapping."""

from __future__ import annotations

import re

from wcwidth import wcwidth

# Any terminal escape sequence: CSI (colours, cursor movement), string
# sequences (OSC, DCS, APC, PM, SOS) ended by BEL or ST, or a two-byte escape.
ANSI_SEQUENCE = re.compile(
    r"\x1b(?:\[[0-?]*[ -/]*[@-~]|[\]PX^_][^\x07\x1b]*(?:\x07|\x1b\\)|[@-Z\\-_])"
)

# String sequences (APC, OSC, DCS, PM, SOS) wrapping content until BEL or ST.
_C1_SEQUENCE = re.compile(r"\x1b[_\]P^X][^\x07\x1b]*(?:\x07|\x1b\\)")

# C0 control characters other than tab, newline, carriage return and ESC.
_C0_CONTROL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1a\x1c-\x1f]")


def clean_log_text(s: str) -> str:
    """Remove terminal escape sequences and control characters; normalise line endings."""
    s = _C1_SEQUENCE.sub("", s)
    s = ANSI_SEQUENCE.sub("", s)
    s = _C0_CONTROL.sub("", s)
    return s.replace("\r\r\n", "\n").replace("\r\n", "\n").replace("\r", "\n")


def strip_ansi(s: str) -> str:
    """Remove terminal escape sequences."""
    return ANSI_SEQUENCE.sub("", s)


def _char_width(ch: str) -> int:
    return max(wcwidth(ch), 0)


def _line_width(line: str) -> int:
    return sum(_char_width(ch) for ch in line)


def visual_width(s: str) -> int:
    """Display width of the widest line, ignoring escape sequences."""
    return max(_line_width(line) for line in strip_ansi(s).split("\n"))


def _truncate_to_width(s: str, width: int) -> str:
    if _line_width(s) <= width:
        return s
    used = 0
    kept: list[str] = []
    for ch in s:
        ch_width = _char_width(ch)
        if used + ch_width > width:
            break
        kept.append(ch)
        used += ch_width
    return "".join(kept)


def truncate(s: str, max_len: int, ellipsis: bool) -> str:
    """Flatten to one line, strip escapes and cut to ``max_len`` display columns."""
    s = s.replace("\n", " ").replace("\r", "").replace("\t", " ").strip()
    s = strip_ansi(s)
    if max_len <= 0:
        return ""
    if visual_width(s) > max_len:
        if ellipsis and max_len > 3:
            return _truncate_to_width(s, max_len - 3) + "..."
        return _truncate_to_width(s, max_len)
    return s


def truncate_and_pad(s: str, width: int, ellipsis: bool) -> str:
    """Truncate, then pad with spaces to exactly ``width`` columns."""
    s = truncate(s, width, ellipsis)
    return s + " " * max(width - visual_width(s), 0)


def wrap(text: str, width: int) -> str:
    """Wrap on word boundaries; words wider than ``width`` are broken mid-word."""
    if width <= 0:
        return text
    words = text.split()
    if not words:
        return text

    out: list[str] = []
    line_length = 0
    for word in words:
        word_len = visual_width(word)
        if word_len > width:
            if line_length > 0:
                out.append("\n")
            while visual_width(word) > width:
                chunk = _truncate_to_width(word, width) or word[0]
                out.append(chunk)
                out.append("\n")
                word = word[len(chunk):]
            out.append(word)
            line_length = visual_width(word)
        elif line_length == 0:
            out.append(word)
            line_length = word_len
        elif line_length + 1 + word_len <= width:
            out.append(" ")
            out.append(word)
            line_length += 1 + word_len
        else:
            out.append("\n")
            out.append(word)
            line_length = word_len
    return "".join(out)


def split_lines(text: str) -> list[str]:
    """Split on newlines; an empty text gives an empty list."""
    if not text:
        return []
    return text.split("\n")
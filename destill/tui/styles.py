"""Terminal styling: a small style renderer and the triage UI colour palette."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from destill.tui.text import ANSI_SEQUENCE, strip_ansi, visual_width, wrap

_RESET = "\x1b[0m"
_TOKENS = re.compile(f"(?P<esc>{ANSI_SEQUENCE.pattern})|(?P<ch>.)", re.DOTALL)


def _color_codes(color: str, base: int) -> str:
    if color.startswith("#") and len(color) == 7:
        red, green, blue = (int(color[i:i + 2], 16) for i in (1, 3, 5))
        return f"{base};2;{red};{green};{blue}"
    if color.isdigit():
        return f"{base};5;{int(color)}"
    return ""


def _sgr(foreground: str = "", background: str = "", bold: bool = False, faint: bool = False) -> str:
    codes = []
    if bold:
        codes.append("1")
    if faint:
        codes.append("2")
    if foreground:
        codes.append(_color_codes(foreground, 38))
    if background:
        codes.append(_color_codes(background, 48))
    codes = [code for code in codes if code]
    return f"\x1b[{';'.join(codes)}m" if codes else ""


def _paint(line: str, prefix: str) -> str:
    return f"{prefix}{line}{_RESET}" if prefix and line else line


def _align(line: str, width: int, align: str) -> str:
    gap = width - visual_width(line)
    if gap <= 0:
        return line
    if align == "center":
        left = gap // 2
        return " " * left + line + " " * (gap - left)
    if align == "right":
        return " " * gap + line
    return line + " " * gap


def _clip(line: str, width: int) -> str:
    """Cut a line to ``width`` display columns, keeping escape sequences intact."""
    if visual_width(line) <= width:
        return line
    out: list[str] = []
    used = 0
    saw_escape = False
    for token in _TOKENS.finditer(line):
        if token.group("esc"):
            out.append(token.group("esc"))
            saw_escape = True
            continue
        ch = token.group("ch")
        ch_width = visual_width(ch)
        if used + ch_width > width:
            break
        out.append(ch)
        used += ch_width
    if saw_escape:
        out.append(_RESET)
    return "".join(out)


@dataclass(frozen=True)
class Style:
    """How a block of text is laid out and coloured.

    ``width`` and ``height`` include padding but not the border; ``max_width``
    clips the finished block. Colours are "#RRGGBB" or a terminal colour number.
    """

    foreground: str = ""
    background: str = ""
    bold: bool = False
    faint: bool = False
    padding_top: int = 0
    padding_right: int = 0
    padding_bottom: int = 0
    padding_left: int = 0
    width: int = 0
    height: int = 0
    max_width: int = 0
    align: str = "left"
    vertical_align: str = "top"
    border: str = ""
    border_foreground: str = ""

    def _wrapped(self, lines: list[str], inner: int) -> list[str]:
        result: list[str] = []
        for line in lines:
            if inner <= 0 or visual_width(line) <= inner:
                result.append(line)
            else:
                result.extend(wrap(strip_ansi(line), inner).split("\n"))
        return result

    def _with_height(self, lines: list[str], full: int) -> list[str]:
        extra = self.height - len(lines)
        if extra <= 0:
            return lines
        blank = " " * full
        if self.vertical_align == "center":
            top = extra // 2
        elif self.vertical_align == "bottom":
            top = extra
        else:
            top = 0
        return [blank] * top + lines + [blank] * (extra - top)

    def _with_border(self, lines: list[str], full: int) -> list[str]:
        prefix = _sgr(foreground=self.border_foreground)
        if self.border == "rounded":
            top = _paint("╭" + "─" * full + "╮", prefix)
            bottom = _paint("╰" + "─" * full + "╯", prefix)
            side = _paint("│", prefix)
            return [top, *(side + line + side for line in lines), bottom]
        if self.border == "bottom":
            return [*lines, _paint("─" * full, prefix)]
        return lines

    def render(self, text: str) -> str:
        """Lay out and colour the text."""
        lines = text.split("\n")
        horizontal = self.padding_left + self.padding_right
        if self.width > 0:
            inner = max(self.width - horizontal, 0)
            lines = self._wrapped(lines, inner)
        else:
            inner = max(visual_width(line) for line in lines)
        full = inner + horizontal

        lines = [
            " " * self.padding_left + _align(line, inner, self.align) + " " * self.padding_right
            for line in lines
        ]
        blank = " " * full
        lines = [blank] * self.padding_top + lines + [blank] * self.padding_bottom
        lines = self._with_height(lines, full)

        prefix = _sgr(self.foreground, self.background, self.bold, self.faint)
        lines = [_paint(line, prefix) for line in lines]
        lines = self._with_border(lines, full)

        if self.max_width > 0:
            lines = [_clip(line, self.max_width) for line in lines]
        return "\n".join(lines)


@dataclass
class StyleConfig:
    """The colour palette of the triage UI."""

    primary_blue: str = "#8AB4F8"
    accent_blue: str = "#4285F4"
    accent_yellow: str = "#FBBC04"
    accent_green: str = "#34A853"
    dark_background: str = "#1E1E1E"
    card_background: str = "#2D2D2D"
    text_primary: str = "#E8EAED"
    text_secondary: str = "#9AA0A6"
    border_color: str = "#5F6368"
    selected_color: str = "#303134"
    error_foreground: str = "#FF0000"
    error_background: str = "#2D0000"
    tier1_color: str = "#FF6B6B"
    tier3_color: str = "#6B6B6B"
    job_colors: list[str] = field(
        default_factory=lambda: ["#34A853", "#FBBC04", "#EA4335", "#A142F4", "#24C1E0"]
    )

    def help_style(self) -> Style:
        """Style of the help line at the bottom of the screen."""
        return Style(foreground=self.text_secondary, padding_left=2, padding_right=2)


def default_styles() -> StyleConfig:
    """Return the default palette."""
    return StyleConfig()
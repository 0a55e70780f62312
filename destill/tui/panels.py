"""The list and detail panels of the triage screen, their layout and the help line."""

from __future__ import annotations

from dataclasses import dataclass, field

from destill.tui.header import Header
from destill.tui.item import Item
from destill.tui.listview import ListView
from destill.tui.styles import Style, StyleConfig
from destill.tui.text import clean_log_text, truncate, visual_width, wrap

_HASH_DISPLAY_LENGTH = 12
_HEADER_RESERVE = 40
_EMPTY_DETAIL_TEXT = "← Navigate list to view details"

_UP = frozenset({"up", "k"})
_DOWN = frozenset({"down", "j"})
_PAGE_UP = frozenset({"pgup", "b"})
_PAGE_DOWN = frozenset({"pgdown", "space", " ", "f"})
_HALF_UP = frozenset({"u", "ctrl+u"})
_HALF_DOWN = frozenset({"d", "ctrl+d"})


def _join_vertical(*blocks: str) -> str:
    """Stack blocks, padding every line on the right to the widest one."""
    lines = [line for block in blocks for line in block.split("\n")]
    width = max(visual_width(line) for line in lines)
    return "\n".join(line + " " * (width - visual_width(line)) for line in lines)


@dataclass
class Viewport:
    """A scrollable window onto a block of text."""

    width: int = 0
    height: int = 0
    y_offset: int = 0
    _lines: list[str] = field(default_factory=list, repr=False)

    @property
    def max_y_offset(self) -> int:
        return max(0, len(self._lines) - self.height)

    def set_content(self, content: str) -> None:
        """Replace the text; keep the offset unless it now points past the end."""
        self._lines = content.replace("\r\n", "\n").split("\n")
        if self.y_offset > len(self._lines) - 1:
            self.y_offset = self.max_y_offset

    def total_line_count(self) -> int:
        """Number of lines of content; 0 before any content is set."""
        return len(self._lines)

    def _set_offset(self, offset: int) -> None:
        self.y_offset = min(max(offset, 0), self.max_y_offset)

    def scroll(self, key: str) -> bool:
        """Handle a scrolling key; return whether the offset changed."""
        before = self.y_offset
        half = max(self.height // 2, 1)
        page = max(self.height, 1)
        if key in _UP:
            self._set_offset(self.y_offset - 1)
        elif key in _DOWN:
            self._set_offset(self.y_offset + 1)
        elif key in _PAGE_UP:
            self._set_offset(self.y_offset - page)
        elif key in _PAGE_DOWN:
            self._set_offset(self.y_offset + page)
        elif key in _HALF_UP:
            self._set_offset(self.y_offset - half)
        elif key in _HALF_DOWN:
            self._set_offset(self.y_offset + half)
        return self.y_offset != before

    def view(self) -> str:
        """The visible lines, clipped to the width and padded to the height."""
        if self.width <= 0 or self.height <= 0:
            return ""
        visible = self._lines[self.y_offset:self.y_offset + self.height]
        visible = visible + [""] * (self.height - len(visible))
        return Style(max_width=self.width).render("\n".join(visible))


@dataclass(frozen=True)
class PanelDimensions:
    """Sizes of the two panels for a given terminal size."""

    available_height: int
    left_panel_width: int
    right_panel_width: int


def calculate_dimensions(header: Header, width: int, height: int) -> PanelDimensions:
    """Split the terminal into a 40% list panel and a 60% detail panel."""
    header_height = len(header.render(width).split("\n"))
    # Header, help line, panel column header row and the panel borders.
    available_height = height - header_height - 1 - 1 - 2
    left = int(width * 0.4)
    return PanelDimensions(
        available_height=available_height,
        left_panel_width=left,
        right_panel_width=width - left,
    )


def _context_section(title: str, lines: list[str], max_width: int, styles: StyleConfig) -> list[str]:
    parts = [Style(foreground=styles.text_secondary, bold=True).render(title) + "\n"]
    line_style = Style(foreground=styles.text_secondary, faint=True)
    for line in lines:
        cleaned = clean_log_text(line)
        if cleaned.strip():
            parts.append(line_style.render(wrap(cleaned, max_width)) + "\n")
    return parts


def render_detail(item: Item, max_width: int, styles: StyleConfig) -> str:
    """Render the header, context and error message of an item, wrapped to max_width."""
    card = item.card
    short_hash = card.message_hash[:_HASH_DISPLAY_LENGTH]
    header_text = (
        f"Hash: {short_hash} | Severity: {card.severity} | "
        f"Job: {truncate(card.job_name, max_width - _HEADER_RESERVE, True)}"
    )
    header_text = truncate(header_text, max_width, True)
    parts = [Style(foreground=styles.primary_blue, bold=True).render(header_text), "\n\n"]

    if item.pre_context:
        parts += _context_section("Pre-Context:", item.pre_context, max_width, styles)
        parts.append("\n")

    parts.append(Style(foreground=styles.error_foreground, bold=True).render("ERROR:") + "\n")
    message = card.raw_message or card.normalized_msg
    wrapped_error = wrap(clean_log_text(message), max_width)
    parts.append(
        Style(foreground=styles.error_foreground, background=styles.error_background).render(
            wrapped_error
        )
    )
    parts.append("\n\n")

    if item.post_context:
        parts += _context_section("Post-Context:", item.post_context, max_width, styles)

    return "".join(parts)


def _panel_header(text: str, width: int, styles: StyleConfig, color: str) -> str:
    return Style(
        foreground=color,
        bold=color == styles.primary_blue,
        width=max(width - 2, 0),
        padding_left=1,
        padding_right=1,
    ).render(text)


def render_detail_panel(
    item: Item | None,
    viewport: Viewport,
    width: int,
    height: int,
    styles: StyleConfig,
    focused: bool,
) -> str:
    """Render the detail panel: job header and bordered viewport, or an empty state."""
    if item is not None:
        job_text = truncate(f"Job: {item.card.job_name}", width - 4, True)
        header_row = _panel_header(job_text, width, styles, styles.primary_blue)
        body = Style(
            border="rounded",
            border_foreground=styles.accent_blue if focused else styles.border_color,
            width=max(width - 2, 0),
            height=height,
        ).render(viewport.view())
        return _join_vertical(header_row, body)

    placeholder = _panel_header(" ", width, styles, styles.text_secondary)
    empty = Style(
        border="rounded",
        border_foreground=styles.border_color,
        width=max(width, 0),
        height=height,
        align="center",
        vertical_align="center",
        foreground=styles.text_secondary,
        faint=True,
    ).render(_EMPTY_DETAIL_TEXT)
    return _join_vertical(placeholder, empty)


def render_list_panel(list_view: ListView, width: int, height: int, styles: StyleConfig) -> str:
    """Render the bordered triage list under its column headers."""
    body = Style(
        border="rounded",
        border_foreground=styles.border_color,
        width=max(width - 2, 0),
        height=height,
    ).render(list_view.render())

    delegate = list_view.delegate
    rank_header = f"{'Rk':>{delegate.rank_width}}"
    recur_header = f"{'Rc':>{delegate.recur_width}}"
    header_text = truncate(f"{rank_header} │ Conf │ {recur_header} │ Message", width - 4, True)
    header_row = _panel_header(header_text, width, styles, styles.primary_blue)
    return _join_vertical(header_row, body)


def render_help_text(styles: StyleConfig, detail_focused: bool) -> str:
    """Render the key help line for the focused panel."""
    key = Style(foreground=styles.primary_blue, bold=True).render
    sep = Style(foreground=styles.text_secondary).render("•")
    if detail_focused:
        text = f"{key('j/k')}: Scroll {sep} {key('Esc')}: Back {sep} {key('q')}: Quit"
    else:
        text = (
            f"{key('j/k')}: Nav {sep} {key('0/1/2')}: All/Unique/Noise {sep} "
            f"{key('Enter')}: View {sep} {key('Tab')}: Job {sep} {key('/')} {key('q')}"
        )
    return styles.help_style().render(text)
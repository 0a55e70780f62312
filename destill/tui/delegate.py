"""Rendering of one triage item as a table row."""

from __future__ import annotations

from destill.ranking import TIER_NOISE, TIER_UNIQUE
from destill.tui.item import Item
from destill.tui.styles import Style, StyleConfig, default_styles
from destill.tui.text import clean_log_text, truncate_and_pad

# Panel border (2) plus the list's own padding and margins (8).
LIST_RENDERING_OVERHEAD = 10
LOW_CONFIDENCE = 0.80
_MIN_COLUMN_WIDTH = 2


def snippet_text(item: Item) -> str:
    """Best text for the row: raw message, normalised message, then first context line."""
    card = item.card
    if card.raw_message:
        cleaned = clean_log_text(card.raw_message)
        if cleaned.strip():
            return cleaned
    cleaned = clean_log_text(card.normalized_msg)
    if cleaned.strip():
        return cleaned
    for line in (*item.pre_context, *item.post_context):
        cleaned = clean_log_text(line)
        if cleaned.strip():
            return cleaned
    return ""


class Delegate:
    """Renders items as "rank │ conf │ recurrence │ snippet" rows."""

    height = 1
    spacing = 0

    def __init__(self, styles: StyleConfig | None = None) -> None:
        self.rank_width = _MIN_COLUMN_WIDTH
        self.recur_width = _MIN_COLUMN_WIDTH
        self.styles = styles if styles is not None else default_styles()

    def set_column_widths(self, max_rank: int, max_recurrence: int) -> None:
        """Size the rank and recurrence columns to fit the largest values."""
        self.rank_width = max(len(str(max_rank)), _MIN_COLUMN_WIDTH)
        self.recur_width = max(len(str(max_recurrence)), _MIN_COLUMN_WIDTH)

    @staticmethod
    def _confidence(score: float) -> str:
        if score >= 1.0:
            return "1.0"
        return f"{score:.2f}"[1:]

    def _rank_style(self, tier: int) -> Style:
        if tier == TIER_UNIQUE:
            return Style(foreground=self.styles.tier1_color, bold=True)
        if tier == TIER_NOISE:
            return Style(foreground=self.styles.tier3_color, faint=True)
        return Style(foreground=self.styles.text_secondary)

    def render(self, item: Item, selected: bool, width: int) -> str:
        """Render one row for a list of the given width."""
        rank_num = f"{item.rank:>{self.rank_width}d}"
        recur_col = f"{item.recurrence:>{self.recur_width}d}"
        conf_col = self._confidence(item.card.confidence_score)

        fixed_width = self.rank_width + 3 + self.recur_width + 9
        available = width - fixed_width - LIST_RENDERING_OVERHEAD
        snippet = truncate_and_pad(snippet_text(item), available, True) if available > 0 else ""

        if selected:
            row_style = Style(
                foreground=self.styles.primary_blue,
                background=self.styles.selected_color,
                bold=True,
            )
            return row_style.render(f"{rank_num} │ {conf_col} │ {recur_col} │ {snippet}")

        dimmed = item.tier == TIER_NOISE or item.card.confidence_score < LOW_CONFIDENCE
        row_style = Style(foreground=self.styles.text_secondary, faint=dimmed)
        rest = f" │ {conf_col} │ {recur_col} │ {snippet}"
        return self._rank_style(item.tier).render(rank_num) + row_style.render(rest)
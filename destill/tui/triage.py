"""The interactive triage screen: state, message handling, layout and the terminal loop."""

from __future__ import annotations

import dataclasses
import enum
import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import NamedTuple, Union

from destill.cards import TriageCard
from destill.ranking import TIER_NOISE, TIER_UNIQUE, rank_cards
from destill.tui.delegate import Delegate
from destill.tui.header import Header, JobInfo
from destill.tui.item import Item, LoadStatus
from destill.tui.listview import ListView
from destill.tui.panels import (
    Viewport,
    calculate_dimensions,
    render_detail,
    render_detail_panel,
    render_help_text,
    render_list_panel,
)
from destill.tui.progress import SPINNER_INTERVAL, ProgressModel, ProgressMsg, SpinnerTick
from destill.tui.search import filter_items
from destill.tui.styles import Style, StyleConfig, default_styles
from destill.tui.text import visual_width

# Cards below this confidence are shown dimmed but still listed.
CONFIDENCE_THRESHOLD = 0.80
PROJECT_STATUS = "Destill Analysis"
_INITIALIZING = "\n  Initializing..."


class TierFilter(enum.IntEnum):
    """Which tiers the list shows."""

    ALL = 0
    UNIQUE = 1
    NOISE = 2


@dataclass(frozen=True)
class WindowSize:
    """The terminal was resized."""

    width: int
    height: int


@dataclass(frozen=True)
class KeyPress:
    """A key was pressed; ``key`` is a name such as "q", "tab", "shift+tab" or "esc"."""

    key: str


@dataclass(frozen=True)
class CardReceived:
    """A new triage card arrived from the pipeline."""

    card: TriageCard


@dataclass(frozen=True)
class PipelineComplete:
    """The pipeline has delivered all of its cards."""


@dataclass(frozen=True)
class PipelineError:
    """The pipeline failed."""

    error: Exception


Message = Union[WindowSize, KeyPress, CardReceived, PipelineComplete, PipelineError, ProgressMsg, SpinnerTick]


class _InitialState(NamedTuple):
    items_by_hash: dict[str, Item]
    jobs_discovered: dict[str, None]
    jobs_failed: set[str]
    items: list[Item]
    all_jobs: list[JobInfo]


def _job_failed(card: TriageCard) -> bool:
    exit_status = card.metadata.get("exit_status")
    return exit_status is not None and exit_status != "0"


def _own_copy(card: TriageCard) -> TriageCard:
    return dataclasses.replace(
        card,
        metadata=dict(card.metadata),
        pre_context=list(card.pre_context),
        post_context=list(card.post_context),
    )


def _add_to_groups(items_by_hash: dict[str, Item], card: TriageCard) -> None:
    existing = items_by_hash.get(card.message_hash)
    if existing is not None:
        existing.card.recurrence_count = existing.recurrence + 1
    else:
        items_by_hash[card.message_hash] = Item(card=_own_copy(card))


def sorted_items(items_by_hash: Mapping[str, Item]) -> list[Item]:
    """Rank the grouped items: unique failures first, each tier by confidence."""
    tiered = rank_cards([item.card for item in items_by_hash.values()])
    ranked = tiered.flatten_by_tier() or []
    return [Item(card=entry.card, rank=entry.rank, tier=entry.tier) for entry in ranked]


def build_initial_state(cards: Iterable[TriageCard]) -> _InitialState:
    """Group cards by message hash and collect jobs, failed jobs listed first."""
    items_by_hash: dict[str, Item] = {}
    jobs_discovered: dict[str, None] = {}
    jobs_failed: set[str] = set()

    for card in cards:
        _add_to_groups(items_by_hash, card)
        jobs_discovered.setdefault(card.job_name, None)
        if _job_failed(card):
            jobs_failed.add(card.job_name)

    failed = [JobInfo(name, True) for name in jobs_discovered if name in jobs_failed]
    passed = [JobInfo(name, False) for name in jobs_discovered if name not in jobs_failed]
    return _InitialState(
        items_by_hash=items_by_hash,
        jobs_discovered=jobs_discovered,
        jobs_failed=jobs_failed,
        items=sorted_items(items_by_hash),
        all_jobs=failed + passed,
    )


def _tier_counts(items: Iterable[Item]) -> tuple[int, int]:
    unique = noise = 0
    for item in items:
        if item.tier == TIER_UNIQUE:
            unique += 1
        elif item.tier == TIER_NOISE:
            noise += 1
    return unique, noise


def _join_vertical(*blocks: str) -> str:
    lines = [line for block in blocks for line in block.split("\n")]
    width = max(visual_width(line) for line in lines)
    return "\n".join(line + " " * (width - visual_width(line)) for line in lines)


def _join_horizontal(*blocks: str) -> str:
    split = [block.split("\n") for block in blocks]
    widths = [max(visual_width(line) for line in lines) for lines in split]
    height = max(len(lines) for lines in split)
    rows = []
    for row in range(height):
        parts = []
        for lines, width in zip(split, widths):
            line = lines[row] if row < len(lines) else ""
            parts.append(line + " " * (width - visual_width(line)))
        rows.append("".join(parts))
    return "\n".join(rows)


class MainModel:
    """State of the triage screen and the handling of every message it receives."""

    def __init__(
        self,
        cards: Iterable[TriageCard] = (),
        *,
        streaming: bool = False,
        styles: StyleConfig | None = None,
    ) -> None:
        cards = list(cards)
        if streaming and cards:
            raise ValueError(
                "invalid arguments: streaming and initial cards are mutually exclusive"
            )
        self.styles = styles if styles is not None else default_styles()
        state = build_initial_state(cards)

        self.status = LoadStatus.LOADING if streaming else LoadStatus.COMPLETE
        self.header = Header(PROJECT_STATUS, state.all_jobs, self.styles)
        self.header.set_load_status(self.status, len(state.items), len(state.jobs_discovered))

        self.list_view = ListView(Delegate(self.styles))
        self.list_view.set_items(state.items)
        self.items: list[Item] = state.items
        self.items_by_hash = state.items_by_hash
        self.jobs_discovered = state.jobs_discovered

        self.detail_viewport = Viewport()
        self.detail_focused = False
        self.width = 0
        self.height = 0
        self.ready = False
        self.search_mode = False
        self.search_query = ""
        self.tier_filter = TierFilter.ALL

        self.pending_cards: list[Item] = []
        self.card_count = len(cards)
        self.low_confidence_count = 0
        self.progress = ProgressModel()

        self.unique_count, self.noise_count = _tier_counts(self.items)
        self.header.set_tier_counts(self.unique_count, self.noise_count)
        self._clear_requested = False
        self.apply_filter()

    # --- message handling ---

    def update(self, msg: Message) -> bool:
        """Apply a message; return True when the application should quit."""
        if isinstance(msg, (ProgressMsg, SpinnerTick)):
            self.progress.update(msg)
        elif isinstance(msg, CardReceived):
            self._receive_card(msg.card)
        elif isinstance(msg, PipelineComplete):
            self.status = LoadStatus.COMPLETE
            self._refresh_load_status()
            if self.pending_cards:
                self.merge_pending_cards()
        elif isinstance(msg, PipelineError):
            self.status = LoadStatus.ERROR
            self._refresh_load_status()
        elif isinstance(msg, WindowSize):
            self._resize(msg.width, msg.height)
        elif isinstance(msg, KeyPress):
            if self.search_mode:
                self._search_key(msg.key)
                return False
            return self._key(msg.key)
        return False

    def _refresh_load_status(self) -> None:
        self.header.set_load_status(self.status, self.card_count, len(self.jobs_discovered))

    def _receive_card(self, card: TriageCard) -> None:
        self.card_count += 1
        if card.confidence_score < CONFIDENCE_THRESHOLD:
            self.low_confidence_count += 1
            self.header.low_confidence_count = self.low_confidence_count
        self.jobs_discovered.setdefault(card.job_name, None)
        self.header.add_job(card.job_name, _job_failed(card))
        self.pending_cards.append(Item(card=card))
        self.header.pending_count = len(self.pending_cards)
        self._refresh_load_status()

    def _resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        if not self.ready:
            dims = calculate_dimensions(self.header, width, height)
            self.detail_viewport = Viewport(
                width=dims.right_panel_width - 2, height=dims.available_height - 1
            )
            self.ready = True
        self._resize_components()
        self._show_selected()

    def _resize_components(self) -> None:
        dims = calculate_dimensions(self.header, self.width, self.height)
        self.list_view.set_size(dims.left_panel_width - 2, dims.available_height)
        self.detail_viewport.width = dims.right_panel_width - 2
        self.detail_viewport.height = dims.available_height - 1
        if self.detail_viewport.total_line_count() == 0:
            self._show_selected()

    def _search_key(self, key: str) -> None:
        if key == "esc":
            self.search_mode = False
            self.search_query = ""
        elif key == "enter":
            self.search_mode = False
        elif key == "backspace":
            if not self.search_query:
                return
            self.search_query = self.search_query[:-1]
        elif len(key) == 1:
            self.search_query += key
        else:
            return
        self.header.set_search(self.search_query, self.search_mode)
        self.apply_filter()

    def _set_tier_filter(self, tier_filter: TierFilter) -> None:
        self.tier_filter = tier_filter
        self.header.tier_filter = int(tier_filter)
        self.apply_filter()
        self._clear_requested = True

    def _key(self, key: str) -> bool:
        if key in ("q", "ctrl+c"):
            return True
        if key == "r":
            if self.pending_cards:
                self.merge_pending_cards()
        elif key in ("0", "1", "2"):
            self._set_tier_filter(TierFilter(int(key)))
        elif key == "tab":
            self.header.cycle_filter()
            self.apply_filter()
        elif key == "shift+tab":
            self.header.cycle_filter_backward()
            self.apply_filter()
        elif key == "/":
            self.search_mode = True
            self.search_query = ""
            self.header.set_search(self.search_query, self.search_mode)
        elif key == "enter":
            self.detail_focused = not self.detail_focused
        elif key == "esc":
            if self.detail_focused:
                self.detail_focused = False
            else:
                self.header.reset_filter()
                self.tier_filter = TierFilter.ALL
                self.header.tier_filter = int(TierFilter.ALL)
                self.apply_filter()
        elif self.detail_focused:
            self.detail_viewport.scroll(key)
        else:
            self.list_view.update(key)
            self._show_selected()
        return False

    # --- list state ---

    def _show_selected(self) -> None:
        selected = self.list_view.selected_item()
        if selected is not None:
            max_width = self.detail_viewport.width - 2
            self.detail_viewport.set_content(render_detail(selected, max_width, self.styles))

    def apply_filter(self) -> None:
        """Show the items matching the job filter, the search text and the tier filter."""
        filtered = filter_items(
            self.items, self.header.filter, self.search_query, int(self.tier_filter)
        )
        self.list_view.set_items(filtered)
        self._show_selected()

    def merge_pending_cards(self) -> None:
        """Group the pending cards into the list and rank everything again."""
        for item in self.pending_cards:
            _add_to_groups(self.items_by_hash, item.card)
        self.pending_cards = []
        self.header.pending_count = 0

        self.items = sorted_items(self.items_by_hash)
        self.unique_count, self.noise_count = _tier_counts(self.items)
        self.header.set_tier_counts(self.unique_count, self.noise_count)

        self.list_view.set_items(self.items)
        self.apply_filter()

    # --- rendering ---

    def view(self) -> str:
        """Render the whole screen."""
        if not self.ready:
            return _INITIALIZING

        header = self.header.render(self.width)
        if self.status is LoadStatus.LOADING and not self.items:
            progress = Style(width=self.width, align="center", padding_top=2).render(
                self.progress.view()
            )
            return _join_vertical(header, progress)

        dims = calculate_dimensions(self.header, self.width, self.height)
        left = render_list_panel(
            self.list_view, dims.left_panel_width, dims.available_height, self.styles
        )
        right = render_detail_panel(
            self.list_view.selected_item(),
            self.detail_viewport,
            dims.right_panel_width,
            dims.available_height,
            self.styles,
            self.detail_focused,
        )
        main = _join_horizontal(left, right)
        return _join_vertical(header, main, render_help_text(self.styles, self.detail_focused))


_SEQUENCE_NAMES = {
    "KEY_ESCAPE": "esc",
    "KEY_ENTER": "enter",
    "KEY_BACKSPACE": "backspace",
    "KEY_TAB": "tab",
    "KEY_BTAB": "shift+tab",
    "KEY_UP": "up",
    "KEY_DOWN": "down",
    "KEY_LEFT": "left",
    "KEY_RIGHT": "right",
    "KEY_PGUP": "pgup",
    "KEY_PGDOWN": "pgdown",
    "KEY_HOME": "home",
    "KEY_END": "end",
}

_CONTROL_NAMES = {
    "\x03": "ctrl+c",
    "\x04": "ctrl+d",
    "\x15": "ctrl+u",
    "\x1b": "esc",
    "\r": "enter",
    "\n": "enter",
    "\t": "tab",
    "\x7f": "backspace",
    "\x08": "backspace",
}


def _key_name(keystroke) -> str:
    if keystroke.is_sequence:
        return _SEQUENCE_NAMES.get(keystroke.name or "", keystroke.name or "")
    text = str(keystroke)
    return _CONTROL_NAMES.get(text, text)


def _draw(term, model: MainModel) -> None:
    output = term.home
    if model._clear_requested:
        output += term.clear
        model._clear_requested = False
    lines = model.view().split("\n")
    output += "\n".join(line + term.clear_eol for line in lines) + term.clear_eos
    print(output, end="", flush=True)


def start(cards: Iterable[TriageCard]) -> None:
    """Run the interactive triage screen over the given cards until the user quits."""
    from blessed import Terminal

    model = MainModel(cards)
    term = Terminal()
    with term.fullscreen(), term.cbreak(), term.hidden_cursor():
        size: tuple[int, int] | None = None
        try:
            while True:
                current = (term.width, term.height)
                if current != size:
                    size = current
                    model.update(WindowSize(*current))
                _draw(term, model)
                keystroke = term.inkey(timeout=SPINNER_INTERVAL)
                if not keystroke:
                    if model.status is LoadStatus.LOADING:
                        model.update(SpinnerTick(at=time.monotonic()))
                    continue
                if model.update(KeyPress(_key_name(keystroke))):
                    break
        except KeyboardInterrupt:
            pass
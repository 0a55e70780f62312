"""A paged, keyboard-navigable list of triage items."""

from __future__ import annotations

from collections.abc import Iterable

from destill.tui.delegate import Delegate
from destill.tui.item import Item

_UP = frozenset({"up", "k"})
_DOWN = frozenset({"down", "j"})
_PREV_PAGE = frozenset({"left", "h", "pgup", "b", "u"})
_NEXT_PAGE = frozenset({"right", "l", "pgdown", "f", "d"})
_START = frozenset({"home", "g"})
_END = frozenset({"end", "G"})

EMPTY_TEXT = "No items."


class ListView:
    """Holds the items, the selection and the size of the list panel."""

    def __init__(self, delegate: Delegate | None = None) -> None:
        self.delegate = delegate if delegate is not None else Delegate()
        self.items: list[Item] = []
        self.width = 0
        self.height = 0
        self._cursor = 0

    @property
    def index(self) -> int:
        """Position of the selected item."""
        return self._cursor

    @property
    def per_page(self) -> int:
        """How many items fit on one page."""
        row_height = self.delegate.height + self.delegate.spacing
        return max(1, self.height // row_height)

    def set_size(self, width: int, height: int) -> None:
        """Set the list dimensions."""
        self.width = width
        self.height = height

    def set_items(self, items: Iterable[Item]) -> None:
        """Replace the items and size the columns to fit them."""
        self.items = list(items)
        max_rank = max((item.rank for item in self.items), default=0)
        max_recurrence = max((item.recurrence for item in self.items), default=0)
        self.delegate.set_column_widths(max_rank, max_recurrence)
        self._cursor = min(self._cursor, max(len(self.items) - 1, 0))

    def selected_item(self) -> Item | None:
        """The selected item, or None when the list is empty."""
        if 0 <= self._cursor < len(self.items):
            return self.items[self._cursor]
        return None

    def _move_page(self, step: int) -> None:
        per_page = self.per_page
        last_page = (len(self.items) - 1) // per_page
        page, offset = divmod(self._cursor, per_page)
        page = min(max(page + step, 0), last_page)
        self._cursor = min(page * per_page + offset, len(self.items) - 1)

    def update(self, key: str) -> bool:
        """Handle a navigation key; return whether the selection moved."""
        if not self.items:
            return False
        before = self._cursor
        last = len(self.items) - 1
        if key in _UP:
            self._cursor = max(self._cursor - 1, 0)
        elif key in _DOWN:
            self._cursor = min(self._cursor + 1, last)
        elif key in _START:
            self._cursor = 0
        elif key in _END:
            self._cursor = last
        elif key in _PREV_PAGE:
            self._move_page(-1)
        elif key in _NEXT_PAGE:
            self._move_page(1)
        return self._cursor != before

    def render(self) -> str:
        """Render the page holding the selection, padded to the list height."""
        if not self.items:
            lines = [EMPTY_TEXT]
        else:
            per_page = self.per_page
            start = (self._cursor // per_page) * per_page
            lines = [
                self.delegate.render(item, position == self._cursor, self.width)
                for position, item in enumerate(self.items[start:start + per_page], start=start)
            ]
        lines += [""] * (self.height - len(lines))
        return "\n".join(lines)
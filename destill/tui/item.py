"""Entries of the triage list."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from destill.cards import TriageCard


class LoadStatus(enum.Enum):
    """Loading state of the triage UI."""

    LOADING = enum.auto()
    COMPLETE = enum.auto()
    ERROR = enum.auto()


@dataclass
class Item:
    """A triage card with its rank and tier (1 unique, 2 spike, 3 noise)."""

    card: TriageCard
    rank: int = 0
    tier: int = 0

    def filter_value(self) -> str:
        """Text used for filtering."""
        return self.card.normalized_msg

    def title(self) -> str:
        """Primary text of the entry."""
        return self.card.normalized_msg

    def description(self) -> str:
        """Secondary text of the entry."""
        return self.card.job_name

    @property
    def recurrence(self) -> int:
        return self.card.recurrence_count

    @property
    def pre_context(self) -> list[str]:
        return self.card.pre_context

    @property
    def post_context(self) -> list[str]:
        return self.card.post_context
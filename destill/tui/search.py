"""Filtering of triage items by job, search text and tier."""

from __future__ import annotations

from collections.abc import Sequence

from destill.ranking import TIER_NOISE, TIER_UNIQUE
from destill.tui.item import Item

_ALL_JOBS = "ALL"
_TIER_FILTER_ALL = 0
_TIER_FILTER_UNIQUE = 1
_TIER_FILTER_NOISE = 2


def item_matches_query(item: Item, query: str) -> bool:
    """Whether the lower-case query occurs in the message, job, hash, severity or context."""
    card = item.card
    fields = (
        card.normalized_msg,
        card.job_name,
        card.message_hash,
        card.severity,
        *item.pre_context,
        *item.post_context,
    )
    return any(query in text.lower() for text in fields)


def filter_items(
    items: Sequence[Item], job_filter: str, query: str, tier_filter: int
) -> list[Item]:
    """Keep items of the job ("ALL" for every job), matching the query and the tier filter.

    The tier filter is 0 for all tiers, 1 for unique failures and 2 for noise.
    """
    selected = [item for item in items if job_filter == _ALL_JOBS or item.card.job_name == job_filter]

    if query:
        lowered = query.lower()
        selected = [item for item in selected if item_matches_query(item, lowered)]

    if tier_filter == _TIER_FILTER_ALL:
        return selected
    if tier_filter == _TIER_FILTER_UNIQUE:
        return [item for item in selected if item.tier == TIER_UNIQUE]
    if tier_filter == _TIER_FILTER_NOISE:
        return [item for item in selected if item.tier == TIER_NOISE]
    return []
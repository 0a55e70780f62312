"""Tier classification of findings shared by the tool server and the TUI."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from destill.cards import TriageCard

TIER_UNIQUE = 1
TIER_NOISE = 3


@dataclass
class RankedCard:
    """A card with its tier and its 1-based position in a flattened list."""

    card: TriageCard
    tier: int
    rank: int = 0


@dataclass
class TieredCards:
    """Cards grouped by tier, each tier ordered by confidence."""

    unique: list[RankedCard] = field(default_factory=list)
    noise: list[RankedCard] = field(default_factory=list)

    def flatten_by_tier(self) -> list[RankedCard]:
        """Unique failures first, then noise, with global ranks from 1."""
        return [
            dataclasses.replace(ranked, rank=position)
            for position, ranked in enumerate([*self.unique, *self.noise], start=1)
        ]

    def counts(self) -> tuple[int, int]:
        """Return the number of unique failures and of noise findings."""
        return len(self.unique), len(self.noise)


def build_job_state_map(cards: Iterable[TriageCard]) -> dict[str, str]:
    """Map each normalised message to "failed", "passed" or "both".

    Cards without a job_state are skipped.
    """
    result: dict[str, str] = {}
    for card in cards:
        job_state = card.metadata.get("job_state", "")
        if not job_state:
            continue
        pattern = card.normalized_msg
        existing = result.get(pattern)
        if existing is None:
            result[pattern] = job_state
        elif existing != job_state and existing != "both":
            result[pattern] = "both"
    return result


def classify_tier(card: TriageCard, job_states: Mapping[str, str]) -> int:
    """Unique when the pattern is unknown or only seen in failed jobs, otherwise noise."""
    state = job_states.get(card.normalized_msg)
    if state is None or state == "failed":
        return TIER_UNIQUE
    return TIER_NOISE


def rank_cards(cards: Sequence[TriageCard]) -> TieredCards:
    """Classify cards into tiers, sorted by confidence then recurrence, deduplicated."""
    if not cards:
        return TieredCards()

    job_states = build_job_state_map(cards)
    ordered = sorted(
        cards,
        key=lambda card: (-card.confidence_score, -card.recurrence_count),
    )

    tiered = TieredCards()
    seen: set[str] = set()
    for card in ordered:
        if card.normalized_msg in seen:
            continue
        seen.add(card.normalized_msg)
        tier = classify_tier(card, job_states)
        ranked = RankedCard(card=card, tier=tier)
        if tier == TIER_UNIQUE:
            tiered.unique.append(ranked)
        elif tier == TIER_NOISE:
            tiered.noise.append(ranked)
    return tiered


def count_passing_jobs(cards: Iterable[TriageCard], pattern: str) -> int:
    """Count distinct passing jobs whose findings match the pattern."""
    return len(
        {
            card.job_name
            for card in cards
            if card.normalized_msg == pattern and card.metadata.get("job_state") == "passed"
        }
    )
"""Turning triage cards into tiered, sanitised findings and manifests."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from destill.cards import TriageCard
from destill.compress import compress_context_lines, compress_line
from destill.findings import Finding, FindingSummary, ManifestResponse, TieredResponse
from destill.ranking import (
    TIER_NOISE,
    RankedCard,
    build_job_state_map,
    count_passing_jobs,
    rank_cards,
)
from destill.sanitize import clean, clean_lines

TIER1_PRE_CONTEXT = 5
TIER1_POST_CONTEXT = 10
TIER3_PRE_CONTEXT = 2
TIER3_POST_CONTEXT = 3

DEFAULT_TIER1_LIMIT = 15
DEFAULT_TIER3_LIMIT = 3

_SUMMARY_MAX_LENGTH = 100


def card_to_finding(card: TriageCard) -> Finding:
    """Convert one card to a finding with its full context.

    Cross-card fields such as also_in_passing_jobs are left unset.
    """
    return Finding(
        id=card.message_hash,
        message=clean(card.raw_message),
        severity=card.severity,
        confidence=card.confidence_score,
        job=card.job_name,
        job_state=card.metadata.get("job_state", ""),
        recurrence=card.recurrence_count,
        pre_context=clean_lines(card.pre_context),
        post_context=clean_lines(card.post_context),
    )


def _context_limits(tier: int) -> tuple[int, int]:
    if tier == 1:
        return TIER1_PRE_CONTEXT, TIER1_POST_CONTEXT
    return TIER3_PRE_CONTEXT, TIER3_POST_CONTEXT


def convert_to_finding(card: TriageCard, also_in_passing: bool, tier: int) -> Finding:
    """Convert a card to a finding, trimming its context to the tier's limits.

    Pre-context keeps the lines closest to the error (the last ones);
    post-context keeps the lines right after it (the first ones).
    """
    pre_limit, post_limit = _context_limits(tier)
    pre_context = card.pre_context[-pre_limit:] if len(card.pre_context) > pre_limit else card.pre_context
    post_context = card.post_context[:post_limit]
    return Finding(
        id=card.message_hash,
        message=clean(card.raw_message),
        severity=card.severity,
        confidence=card.confidence_score,
        job=card.job_name,
        job_state=card.metadata.get("job_state", ""),
        recurrence=card.recurrence_count,
        also_in_passing_jobs=also_in_passing,
        pre_context=clean_lines(pre_context),
        post_context=clean_lines(post_context),
    )


def _ranked_to_findings(
    ranked: Sequence[RankedCard],
    job_states: Mapping[str, str],
    all_cards: Sequence[TriageCard],
    limit: int,
) -> list[Finding]:
    findings: list[Finding] = []
    for entry in ranked[:limit]:
        pattern = entry.card.normalized_msg
        finding = convert_to_finding(entry.card, job_states.get(pattern) == "both", entry.tier)
        if entry.tier == TIER_NOISE:
            finding.passing_job_count = count_passing_jobs(all_cards, pattern)
        findings.append(finding)
    return findings


def tier_findings(cards: Sequence[TriageCard], limit: int) -> TieredResponse:
    """Group cards into tiers. The build field is left for the caller to fill.

    A positive limit other than the default caps tier 1 at ``limit`` and tier 3
    at a fifth of it (at least one). Tier 2 is always empty.
    """
    tier1_limit = DEFAULT_TIER1_LIMIT
    tier3_limit = DEFAULT_TIER3_LIMIT
    if limit > 0 and limit != DEFAULT_TIER1_LIMIT:
        tier1_limit = limit
        tier3_limit = max(1, limit // 5)

    tiered = rank_cards(cards)
    job_states = build_job_state_map(cards)
    return TieredResponse(
        tier1_unique_failures=_ranked_to_findings(tiered.unique, job_states, cards, tier1_limit),
        tier2_frequency_spikes=[],
        tier3_common_noise=_ranked_to_findings(tiered.noise, job_states, cards, tier3_limit),
    )


def _compress_finding(finding: Finding) -> Finding:
    return Finding(
        id=finding.id,
        message=compress_line(finding.message),
        severity=finding.severity,
        confidence=finding.confidence,
        job=finding.job,
        job_state=finding.job_state,
        recurrence=finding.recurrence,
        also_in_passing_jobs=finding.also_in_passing_jobs,
        pre_context=compress_context_lines(finding.pre_context),
        post_context=compress_context_lines(finding.post_context),
    )


def _to_summary(finding: Finding, tier: int) -> FindingSummary:
    message = finding.message
    if len(message) > _SUMMARY_MAX_LENGTH:
        message = message[: _SUMMARY_MAX_LENGTH - 3] + "..."
    return FindingSummary(
        id=finding.id,
        tier=tier,
        message=message,
        severity=finding.severity,
        confidence=finding.confidence,
        job=finding.job,
    )


def to_manifest(request_id: str, response: TieredResponse) -> ManifestResponse:
    """Expand and compress tier 1 findings; summarise tiers 2 and 3."""
    others = [_to_summary(f, 2) for f in response.tier2_frequency_spikes]
    others += [_to_summary(f, 3) for f in response.tier3_common_noise]
    return ManifestResponse(
        request_id=request_id,
        build=response.build,
        tier1_findings=[_compress_finding(f) for f in response.tier1_unique_failures],
        other_findings=others,
    )
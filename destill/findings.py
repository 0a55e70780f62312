"""Response types of the build-analysis tools: findings, summaries and manifests."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from destill.cards import TriageCard


@dataclass
class BuildInfo:
    """Build metadata."""

    url: str = ""
    status: str = ""
    failed_jobs: list[str] = field(default_factory=list)
    passed_jobs_count: int = 0
    other_jobs_count: int = 0
    timestamp: str = ""

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form; other_jobs_count is omitted when zero."""
        data: dict[str, Any] = {
            "url": self.url,
            "status": self.status,
            "failed_jobs": list(self.failed_jobs),
            "passed_jobs_count": self.passed_jobs_count,
        }
        if self.other_jobs_count:
            data["other_jobs_count"] = self.other_jobs_count
        data["timestamp"] = self.timestamp
        return data


@dataclass
class Finding:
    """A sanitised error finding with its surrounding log context."""

    id: str = ""
    message: str = ""
    severity: str = ""
    confidence: float = 0.0
    job: str = ""
    job_state: str = ""
    recurrence: int = 0
    also_in_passing_jobs: bool = False
    pre_context: list[str] = field(default_factory=list)
    post_context: list[str] = field(default_factory=list)
    recurrence_this_build: int = 0
    avg_recurrence: int = 0
    passing_job_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form; the tier-specific counts are omitted when zero."""
        data: dict[str, Any] = {
            "id": self.id,
            "message": self.message,
            "severity": self.severity,
            "confidence": self.confidence,
            "job": self.job,
            "job_state": self.job_state,
            "recurrence": self.recurrence,
            "also_in_passing_jobs": self.also_in_passing_jobs,
            "pre_context": list(self.pre_context),
            "post_context": list(self.post_context),
        }
        for key in ("recurrence_this_build", "avg_recurrence", "passing_job_count"):
            value = getattr(self, key)
            if value:
                data[key] = value
        return data


@dataclass
class FindingSummary:
    """A lightweight finding: enough to decide which ones to look into."""

    id: str = ""
    tier: int = 0
    message: str = ""
    severity: str = ""
    confidence: float = 0.0
    job: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "tier": self.tier,
            "message": self.message,
            "severity": self.severity,
            "confidence": self.confidence,
            "job": self.job,
        }


@dataclass
class TieredResponse:
    """Findings grouped into the three tiers."""

    build: BuildInfo = field(default_factory=BuildInfo)
    tier1_unique_failures: list[Finding] = field(default_factory=list)
    tier2_frequency_spikes: list[Finding] = field(default_factory=list)
    tier3_common_noise: list[Finding] = field(default_factory=list)


@dataclass
class ManifestResponse:
    """Tier 1 findings in full, the rest as summaries."""

    request_id: str = ""
    build: BuildInfo = field(default_factory=BuildInfo)
    tier1_findings: list[Finding] = field(default_factory=list)
    other_findings: list[FindingSummary] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "request_id": self.request_id,
            "build": self.build.to_dict(),
            "tier_1_findings": [finding.to_dict() for finding in self.tier1_findings],
            "other_findings": [summary.to_dict() for summary in self.other_findings],
        }


def extract_request_id(cards: Sequence[TriageCard]) -> str:
    """Return the request id of the first card, or "" if there is none."""
    if cards and cards[0].request_id:
        return cards[0].request_id
    return ""
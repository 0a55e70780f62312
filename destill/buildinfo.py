"""Build summary and request identifiers for analysis runs."""

from __future__ import annotations

import secrets
from collections.abc import Iterable
from datetime import datetime, timezone

from destill.cards import TriageCard
from destill.findings import BuildInfo


def _now() -> datetime:
    return datetime.now(timezone.utc)


def extract_build_info(cards: Iterable[TriageCard], url: str) -> BuildInfo:
    """Summarise job outcomes recorded in the cards' job_state metadata."""
    failed: dict[str, None] = {}
    passed: set[str] = set()
    other: set[str] = set()

    for card in cards:
        state = card.metadata.get("job_state", "")
        if state == "failed":
            failed[card.job_name] = None
        elif state == "passed":
            passed.add(card.job_name)
        elif state:
            other.add(card.job_name)

    return BuildInfo(
        url=url,
        status="failed" if failed else "passed",
        failed_jobs=list(failed),
        passed_jobs_count=len(passed),
        other_jobs_count=len(other),
        timestamp=_now().strftime("%Y-%m-%dT%H:%M:%SZ"),
    )


def generate_request_id() -> str:
    """Return a unique id of the form req-<UTC timestamp>-<8 hex digits>."""
    return f"req-{_now().strftime('%Y%m%dT%H%M%S')}-{secrets.token_hex(4)}"
"""The triage card: one finding extracted from a CI job log."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any

_RECURRENCE_KEY = "recurrence_count"


@dataclass
class TriageCard:
    """A single analysed log finding together with its surrounding context."""

    id: str = ""
    request_id: str = ""
    build_url: str = ""
    job_name: str = ""
    message_hash: str = ""
    severity: str = ""
    confidence_score: float = 0.0
    raw_message: str = ""
    normalized_msg: str = ""
    pre_context: list[str] = field(default_factory=list)
    post_context: list[str] = field(default_factory=list)
    source: str = ""
    line_in_chunk: int = 0
    chunk_index: int = 0
    metadata: dict[str, str] = field(default_factory=dict)
    timestamp: str = ""

    @property
    def recurrence_count(self) -> int:
        """How often this finding occurred; 1 when not recorded or unreadable."""
        raw = self.metadata.get(_RECURRENCE_KEY)
        if raw is None:
            return 1
        try:
            return int(raw)
        except (TypeError, ValueError):
            return 1

    @recurrence_count.setter
    def recurrence_count(self, value: int) -> None:
        self.metadata[_RECURRENCE_KEY] = str(int(value))

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready dictionary of all fields."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TriageCard":
        """Build a card from a dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in data.items() if key in known}
        for key in ("pre_context", "post_context"):
            if key in values:
                values[key] = list(values[key] or [])
        if "metadata" in values:
            values["metadata"] = dict(values["metadata"] or {})
        return cls(**values)
"""Storage of analysed findings, keyed by request and by message hash."""

from __future__ import annotations

import abc
import threading
from collections.abc import Sequence

from destill.cards import TriageCard


class NotFoundError(LookupError):
    """Raised when a request or a finding within it is not stored."""

    def __init__(self, request_id: str, message_hash: str = "") -> None:
        self.request_id = request_id
        self.message_hash = message_hash
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.message_hash:
            return (
                f"finding not found: request_id={self.request_id}, "
                f"message_hash={self.message_hash}"
            )
        return f"request not found: {self.request_id}"


class Store(abc.ABC):
    """Findings storage. Cards are stored raw; tiering happens when they are read."""

    @abc.abstractmethod
    def get_findings(self, request_id: str) -> list[TriageCard]:
        """Return every finding stored for a request."""

    @abc.abstractmethod
    def get_by_hash(self, request_id: str, message_hash: str) -> TriageCard:
        """Return one finding of a request by its message hash."""

    @abc.abstractmethod
    def store(self, request_id: str, cards: Sequence[TriageCard]) -> None:
        """Save the findings of a request."""

    @abc.abstractmethod
    def close(self) -> None:
        """Release the store's resources."""

    def __enter__(self) -> "Store":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class InMemoryStore(Store):
    """A thread-safe store held in memory."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._requests: dict[str, list[TriageCard]] = {}
        self._by_hash: dict[str, dict[str, TriageCard]] = {}

    def store(self, request_id: str, cards: Sequence[TriageCard]) -> None:
        """Save findings, replacing any earlier ones for the same request."""
        with self._lock:
            self._requests[request_id] = list(cards)
            self._by_hash[request_id] = {card.message_hash: card for card in cards}

    def get_findings(self, request_id: str) -> list[TriageCard]:
        with self._lock:
            try:
                return list(self._requests[request_id])
            except KeyError:
                raise NotFoundError(request_id) from None

    def get_by_hash(self, request_id: str, message_hash: str) -> TriageCard:
        with self._lock:
            try:
                return self._by_hash[request_id][message_hash]
            except KeyError:
                raise NotFoundError(request_id, message_hash) from None

    def close(self) -> None:
        """Drop every stored finding."""
        with self._lock:
            self._requests.clear()
            self._by_hash.clear()
"""In-memory record of past scrape results."""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass

from .models import HistoryItem, ScrapeResult, utc_timestamp

logger = logging.getLogger(__name__)


def _generate_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass(frozen=True)
class _Entry:
    url: str
    timestamp: str
    result: ScrapeResult


class HistoryStore:
    """Keyed store of scrape results, kept in insertion order.

    Ids are random and never reused. Entries are never updated in place and
    nothing is evicted automatically; callers prune with ``delete``/``clear``.
    Access is serialized with a lock so the store can be shared across threads.
    """

    def __init__(self) -> None:
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def insert(self, result: ScrapeResult, url: str | None = None) -> str:
        """Store *result* and return its new id.

        *url* records the requested URL for failed scrapes, which carry no data.
        """
        data = result.data
        entry = _Entry(
            url=data.url if data is not None else (url or ""),
            timestamp=data.timestamp if data is not None else utc_timestamp(),
            result=result,
        )
        with self._lock:
            item_id = _generate_id()
            while item_id in self._entries:
                item_id = _generate_id()
            self._entries[item_id] = entry

        logger.debug("history insert", extra={"id": item_id, "url": entry.url, "status": result.status})
        return item_id

    def get(self, item_id: str) -> ScrapeResult | None:
        with self._lock:
            entry = self._entries.get(item_id)
        return entry.result if entry is not None else None

    def delete(self, item_id: str) -> bool:
        """Remove *item_id*. Returns ``False`` when it was not present."""
        with self._lock:
            removed = self._entries.pop(item_id, None) is not None
        logger.debug("history delete", extra={"id": item_id, "removed": removed})
        return removed

    def list(self) -> list[HistoryItem]:
        with self._lock:
            snapshot = list(self._entries.items())
        return [
            HistoryItem(id=item_id, url=e.url, timestamp=e.timestamp, status=e.result.status)
            for item_id, e in snapshot
        ]

    def clear(self) -> None:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.debug("history cleared", extra={"removed": count})

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._entries

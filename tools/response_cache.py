"""In-memory TTL cache for recommendation responses."""

from __future__ import annotations

import hashlib
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    data: Any
    stored_at: float
    ttl_seconds: float


class TTLResponseCache:
    """Time-bounded, size-bounded cache owned by the application object.

    Entries expire ``ttl_minutes`` after they are stored. Expired entries are
    evicted on read and purged on every write; once ``max_entries`` live
    entries are held, the oldest one is evicted to make room. ``clock``
    defaults to :func:`time.monotonic` and can be replaced in tests.
    """

    def __init__(
        self,
        ttl_minutes: float = 5.0,
        clock: Callable[[], float] | None = None,
        max_entries: int = 256,
    ) -> None:
        self.ttl_seconds = ttl_minutes * 60
        self.max_entries = max(1, max_entries)
        self._clock = clock or time.monotonic
        self._entries: Dict[str, _Entry] = {}

    def _expired(self, entry: _Entry, now: float) -> bool:
        return now - entry.stored_at > entry.ttl_seconds

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._expired(entry, self._clock()):
            logger.debug("Cache expired: %s", key)
            del self._entries[key]
            return None
        logger.debug("Cache hit: %s", key)
        return entry.data

    def set(self, key: str, data: Any, ttl_minutes: float | None = None) -> None:
        now = self._clock()
        self.purge_expired(now)
        self._entries.pop(key, None)
        while len(self._entries) >= self.max_entries:
            oldest = min(self._entries, key=lambda entry_key: self._entries[entry_key].stored_at)
            logger.debug("Cache full, evicting: %s", oldest)
            del self._entries[oldest]
        ttl_seconds = self.ttl_seconds if ttl_minutes is None else ttl_minutes * 60
        self._entries[key] = _Entry(data=data, stored_at=now, ttl_seconds=ttl_seconds)

    def purge_expired(self, now: float | None = None) -> int:
        """Drop every expired entry and return how many were removed."""

        now = self._clock() if now is None else now
        expired = [key for key, entry in self._entries.items() if self._expired(entry, now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


def payload_digest(payload: Any) -> str:
    """Stable SHA-256 digest of a JSON-serialisable payload."""

    encoded = json.dumps(payload, sort_keys=True, default=str).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()


def recommendations_key(
    user_id: str | None, rec_type: str, context: Mapping[str, Any] | None, digest: str
) -> str:
    context = context or {}
    return (
        f"recommendations:{user_id or 'anonymous'}:{rec_type}:"
        f"{context.get('occasion') or 'any'}:{context.get('season') or 'any'}:{digest[:16]}"
    )


__all__ = ["TTLResponseCache", "payload_digest", "recommendations_key"]

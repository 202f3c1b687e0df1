"""In-memory lookup cache keyed by normalized item text.

Holds at most one LookupResult per key. Bounded: when full, the oldest entry
is evicted. Entries expire after ``ttl_seconds`` when a TTL is configured;
``None`` (the default) keeps them until ``clear()`` or ``delete()``.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from movelist.models.contracts import CacheStats, LookupResult
from movelist.utils.text import normalize_text

logger = structlog.get_logger()

DEFAULT_MAX_ENTRIES = 1000


@dataclass(frozen=True)
class _Entry:
    value: LookupResult
    stored_at: float


class LookupCache:
    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds or None
        self._clock = clock
        self._entries: OrderedDict[str, _Entry] = OrderedDict()
        self._hits = 0
        self._misses = 0
        self._expired = 0

    @staticmethod
    def key(text: str) -> str:
        return normalize_text(text)

    def _is_expired(self, entry: _Entry) -> bool:
        return self.ttl_seconds is not None and self._clock() - entry.stored_at > self.ttl_seconds

    def _live_entry(self, key: str) -> _Entry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._is_expired(entry):
            del self._entries[key]
            self._expired += 1
            return None
        return entry

    def get(self, text: str) -> LookupResult | None:
        """Return the cached value for text, or None on a miss or expiry."""
        entry = self._live_entry(self.key(text))
        if entry is None:
            self._misses += 1
            return None
        self._hits += 1
        return entry.value

    def has(self, text: str) -> bool:
        return self._live_entry(self.key(text)) is not None

    def __contains__(self, text: object) -> bool:
        return isinstance(text, str) and self.has(text)

    def set(self, text: str, value: LookupResult) -> None:
        """Store value under the normalized key, evicting the oldest entry if full."""
        key = self.key(text)
        if key in self._entries:
            del self._entries[key]
        elif len(self._entries) >= self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("lookup_cache_evicted", key=evicted)
        self._entries[key] = _Entry(value=value, stored_at=self._clock())

    def delete(self, text: str) -> bool:
        return self._entries.pop(self.key(text), None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def purge_expired(self) -> int:
        """Drop every expired entry and return how many were removed."""
        stale = [key for key, entry in self._entries.items() if self._is_expired(entry)]
        for key in stale:
            del self._entries[key]
        self._expired += len(stale)
        return len(stale)

    def size(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> CacheStats:
        return CacheStats(
            size=len(self._entries),
            max_entries=self.max_entries,
            ttl_seconds=self.ttl_seconds,
            hits=self._hits,
            misses=self._misses,
            expired=self._expired,
        )

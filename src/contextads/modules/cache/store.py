"""In-memory cache of selected ads with a recently-shown window."""

from __future__ import annotations

import re
import threading
from collections import OrderedDict
from dataclasses import dataclass

from ...domain.advertising import ScoredAd
from ...ports.clock import Clock, MonotonicClock

_WHITESPACE_RE = re.compile(r"\s+")

DEFAULT_MAX_ENTRIES = 50
DEFAULT_TTL_SECONDS = 30 * 60
DEFAULT_RECENT_WINDOW = 10


@dataclass
class CacheEntry:
    """Selected ad stored for one normalized query."""

    query: str
    ad: ScoredAd
    stored_at: float | None


@dataclass(frozen=True)
class CacheStats:
    """Cache counters for monitoring."""

    size: int
    max_entries: int
    ttl_seconds: float
    recently_shown: int
    recent_window: int
    hits: int
    misses: int
    evictions: int
    expirations: int


class AdCache:
    """Bounded, time-windowed query -> ad store.

    Entries expire ``ttl_seconds`` after being stored and are evicted in
    insertion order once ``max_entries`` is reached. A separate FIFO window of
    the last ``recent_window`` shown ad titles suppresses immediate repeats.
    """

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        recent_window: int = DEFAULT_RECENT_WINDOW,
        clock: Clock | None = None,
    ) -> None:
        if max_entries < 1 or recent_window < 1:
            raise ValueError("max_entries and recent_window must be >= 1")
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self._max_entries = max_entries
        self._ttl = ttl_seconds
        self._recent_window = recent_window
        self._clock = clock or MonotonicClock()
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._shown: OrderedDict[str, None] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._expirations = 0

    @staticmethod
    def normalize(query: str) -> str:
        """Lowercase, trim and collapse whitespace runs."""
        return _WHITESPACE_RE.sub(" ", (query or "").strip().lower())

    def get(self, query: str) -> ScoredAd | None:
        """Return the cached ad for ``query``, or None if absent or expired."""
        key = self.normalize(query)
        now = self._clock.now()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None
            if self._is_expired(entry, now):
                del self._entries[key]
                self._expirations += 1
                self._misses += 1
                return None
            self._hits += 1
            return entry.ad

    def set(self, query: str, ad: ScoredAd) -> None:
        """Store ``ad`` for ``query``, evicting the oldest entry when full.

        Storing an existing query replaces it and makes it the newest entry.
        """
        key = self.normalize(query)
        entry = CacheEntry(query=key, ad=ad, stored_at=self._clock.now())
        with self._lock:
            if key in self._entries:
                # Moves to the newest slot; a plain dict update would keep the old position.
                del self._entries[key]
            elif len(self._entries) >= self._max_entries:
                self._entries.popitem(last=False)
                self._evictions += 1
            self._entries[key] = entry

    def was_recently_shown(self, identity: str) -> bool:
        with self._lock:
            return (identity or "").lower() in self._shown

    def mark_as_shown(self, identity: str) -> None:
        """Add ``identity`` to the recently-shown window, dropping the oldest.

        Re-marking an identity keeps its original position in the window.
        """
        key = (identity or "").lower()
        with self._lock:
            if key in self._shown:
                return
            self._shown[key] = None
            while len(self._shown) > self._recent_window:
                self._shown.popitem(last=False)

    def cleanup(self) -> int:
        """Remove every expired entry. Returns the number removed."""
        now = self._clock.now()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if self._is_expired(entry, now)]
            for key in expired:
                del self._entries[key]
            self._expirations += len(expired)
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._shown.clear()

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                size=len(self._entries),
                max_entries=self._max_entries,
                ttl_seconds=self._ttl,
                recently_shown=len(self._shown),
                recent_window=self._recent_window,
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
                expirations=self._expirations,
            )

    def __len__(self) -> int:
        return len(self._entries)

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        # A missing timestamp counts as expired rather than as an error.
        if entry.stored_at is None:
            return True
        return now - entry.stored_at > self._ttl

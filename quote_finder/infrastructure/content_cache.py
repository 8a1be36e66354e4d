# quote_finder/infrastructure/content_cache.py

import threading
import time
from typing import Callable, Dict, Optional

from quote_finder.domain.models import CacheEntry, CachedContent


# ── Constants ─────────────────────────────────────────────────────────────────

CACHE_TTL_SECONDS = 5 * 60
MAX_CACHE_SIZE    = 15


class ContentCache:
    """
    In-memory store for the full text of large or OCR'd documents.

    Bounds:
        - TTL:      an entry older than `ttl_seconds` is never served
        - Capacity: at most `max_size` entries; the least recently used
                    entry (oldest timestamp) makes room for a new key

    Every read refreshes the entry's timestamp, so recency tracks both reads
    and writes. All mutation happens under a single lock.

    Nothing is persisted: the cache lives and dies with its owner.
    """

    def __init__(
        self,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        max_size: int = MAX_CACHE_SIZE,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_size < 1:
            raise ValueError("Cache size must be at least 1.")
        if ttl_seconds <= 0:
            raise ValueError("Cache TTL must be positive.")

        self._ttl_seconds = ttl_seconds
        self._max_size    = max_size
        self._clock       = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    @property
    def max_size(self) -> int:
        return self._max_size

    # ─── Public API ───────────────────────────────────────────────────────────

    def put(self, key: str, content: str, is_ocr: bool = False) -> None:
        if not key:
            raise ValueError("Cache key cannot be empty.")

        with self._lock:
            now = self._clock()
            self._evict_expired(now)

            if len(self._entries) >= self._max_size and key not in self._entries:
                self._evict_oldest()

            self._entries[key] = CacheEntry(
                key=key,
                content=content,
                is_ocr=is_ocr,
                timestamp=now,
            )

    def get(self, key: str) -> Optional[CachedContent]:
        """Return the cached content, or None on a miss (absent or expired)."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            now = self._clock()
            if self._is_expired(entry, now):
                del self._entries[key]
                print(f"[ContentCache] Expired '{key}' on read.")
                return None

            entry.timestamp = now
            return CachedContent(content=entry.content, is_ocr=entry.is_ocr)

    def evict(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def keys(self) -> list:
        with self._lock:
            return list(self._entries.keys())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    # ─── Private: Eviction (caller holds the lock) ────────────────────────────

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.timestamp > self._ttl_seconds

    def _evict_expired(self, now: float) -> None:
        expired = [key for key, entry in self._entries.items() if self._is_expired(entry, now)]
        for key in expired:
            del self._entries[key]
        if expired:
            print(f"[ContentCache] Evicted {len(expired)} expired entr{'y' if len(expired) == 1 else 'ies'}.")

    def _evict_oldest(self) -> None:
        if not self._entries:
            return
        oldest_key = min(self._entries, key=lambda key: self._entries[key].timestamp)
        del self._entries[oldest_key]
        print(f"[ContentCache] Capacity reached, evicted least recently used '{oldest_key}'.")

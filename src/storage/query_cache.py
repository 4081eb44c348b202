# src/storage/query_cache.py

"""In-memory TTL cache of completed search results."""

import logging
import threading
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from src.config.settings import Settings
from src.models.search import SearchOptions, SearchResult, normalize_term

logger = logging.getLogger("storefront_search.cache")

CacheKey = tuple[str, str]


def make_key(
    term: str,
    options: SearchOptions,
    source_ids: Iterable[str] = (),
) -> CacheKey:
    """Build ``(normalized term, filter signature)``.

    The signature covers the search options and the set of enabled
    sources, so toggling a source never serves a stale aggregation.
    """
    sources = ",".join(sorted(source_ids))
    return (
        normalize_term(term),
        f"{options.signature()}|src={sources}",
    )


@dataclass(frozen=True)
class CacheEntry:
    """A cached result and its validity window."""

    key: CacheKey
    result: SearchResult
    created_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class ResultCache:
    """TTL-keyed store of completed search results.

    Expiry is lazy: entries are checked on lookup, and
    :meth:`purge_expired` is available for an optional sweep.  All
    access goes through a single lock, and entries are replaced
    wholesale on :meth:`put`.
    """

    def __init__(
        self,
        ttl: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries: dict[CacheKey, CacheEntry] = {}
        self._ttl: float = (
            ttl if ttl is not None else Settings.QUERY_CACHE_TTL
        )
        self._clock = clock
        self._lock = threading.Lock()

    @property
    def ttl(self) -> float:
        return self._ttl

    def get(self, key: CacheKey) -> SearchResult | None:
        """Return the cached result for *key*, or ``None`` on miss."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._entries[key]
                logger.debug("Cache entry expired for %s", key)
                return None
        logger.info("Cache hit for '%s' (%s)", key[0], key[1])
        return entry.result

    def put(
        self,
        key: CacheKey,
        result: SearchResult,
        ttl: float | None = None,
    ) -> None:
        """Store *result* under *key*, replacing any previous entry."""
        lifetime = ttl if ttl is not None else self._ttl
        with self._lock:
            now = self._clock()
            self._entries[key] = CacheEntry(
                key=key,
                result=result,
                created_at=now,
                expires_at=now + lifetime,
            )
        logger.info(
            "Cached %d results for '%s' (partial=%s, ttl=%.0fs)",
            len(result.products),
            key[0],
            result.partial,
            lifetime,
        )

    def invalidate(self, key: CacheKey) -> bool:
        """Drop one entry.  Returns ``True`` if it existed."""
        with self._lock:
            removed = self._entries.pop(key, None) is not None
        if removed:
            logger.info("Cache entry invalidated for '%s'", key[0])
        return removed

    def invalidate_query(self, term: str) -> int:
        """Drop every entry for *term* regardless of filters."""
        normalized = normalize_term(term)
        with self._lock:
            stale = [k for k in self._entries if k[0] == normalized]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.info(
                "Invalidated %d cache entries for '%s'",
                len(stale),
                normalized,
            )
        return len(stale)

    def clear(self) -> int:
        """Purge all cached entries.

        Returns the number of entries that were removed.
        """
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.info("Cache manually purged (%d entries removed)", count)
        return count

    def purge_expired(self) -> int:
        """Remove entries past their expiry.  Returns the count."""
        with self._lock:
            now = self._clock()
            expired = [
                k for k, e in self._entries.items() if e.is_expired(now)
            ]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug(
                "Evicted %d expired cache entries", len(expired)
            )
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

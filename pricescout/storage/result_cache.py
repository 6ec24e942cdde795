# pricescout/storage/result_cache.py

"""In-memory, TTL-bounded cache of aggregated search results."""

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass

from pricescout.config.settings import Settings
from pricescout.models.product import ProductRecord

logger = logging.getLogger("pricescout.cache")

CacheKey = tuple[str, tuple[str, ...]]


@dataclass
class CacheEntry:
    """Aggregated records for one (query, platform set) key."""

    key: CacheKey
    records: list[ProductRecord]
    created_at: float


def normalize_query(query: str) -> str:
    """Lower-case and collapse whitespace so equivalent queries share a key."""
    return " ".join(query.split()).lower()


class ResultCache:
    """Maps ``(query, platforms)`` to the records last aggregated for it.

    Entries expire lazily: a ``get`` past the TTL is a miss and drops the
    entry, and each ``set`` sweeps all other expired entries.  Empty result
    lists are never stored, so an outage is retried live instead of being
    replayed for the whole TTL.
    """

    def __init__(self, ttl: float | None = None) -> None:
        self._entries: dict[CacheKey, CacheEntry] = {}
        self._ttl: float = (
            ttl if ttl is not None else Settings.CACHE_TTL
        )

    @staticmethod
    def make_key(query: str, platforms: Iterable[str]) -> CacheKey:
        """Order- and case-insensitive key for a request."""
        platform_ids = sorted(
            {p.strip().lower() for p in platforms if p.strip()}
        )
        return normalize_query(query), tuple(platform_ids)

    def get(self, key: CacheKey) -> list[ProductRecord] | None:
        """Return a copy of the cached records, or ``None`` on miss."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        age = time.time() - entry.created_at
        if age >= self._ttl:
            del self._entries[key]
            logger.debug(
                "Evicted expired cache entry for %s (age %.0fs)",
                key,
                age,
            )
            return None
        logger.info(
            "Cache hit for '%s' on %s", key[0], ", ".join(key[1])
        )
        return list(entry.records)

    def set(
        self, key: CacheKey, records: list[ProductRecord],
    ) -> None:
        """Store (overwrite) non-empty results under ``key``.

        Every write also sweeps expired entries, so keys that are never
        read again do not accumulate.
        """
        if not records:
            logger.debug("Not caching empty result for %s", key)
            return
        now = time.time()
        self.purge_expired(now)
        self._entries[key] = CacheEntry(
            key=key,
            records=list(records),
            created_at=now,
        )
        logger.info(
            "Cached %d results for '%s'", len(records), key[0]
        )

    def purge_expired(self, now: float | None = None) -> int:
        """Drop every entry older than the TTL; returns how many."""
        if now is None:
            now = time.time()
        expired = [
            key
            for key, entry in list(self._entries.items())
            if now - entry.created_at >= self._ttl
        ]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Swept %d expired cache entries", len(expired))
        return len(expired)

    def clear(self) -> int:
        """Purge all cached entries.

        Returns the number of entries that were removed.
        """
        count = len(self._entries)
        self._entries.clear()
        logger.info("Cache manually purged (%d entries removed)", count)
        return count

    def __len__(self) -> int:
        return len(self._entries)

"""
Two-tier translation cache with TTL and capacity eviction.

Tier 1 is an in-memory dict living for the process. Tier 2 is a durable
TranslationStore surviving restarts. Reads never block on tier 2 from the
render path (get_cached); the async get() reads through both tiers.

Invariants:
- A key maps to at most one entry per tier.
- An entry is fresh while now - timestamp < ttl; stale entries are absent.
- Neither tier holds more than max_entries once a write settles; the oldest
  timestamps are evicted first. No popularity component.

Tier 2 is best-effort. Any store failure is logged and treated as a miss or
no-op, leaving the in-memory tier working on its own.

Threading model:
- Single event loop. Tier-2 writes go through a WriteQueue, so writes for the
  same key complete in submission order and eviction sweeps never interleave
  with puts.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from core.settings import TRANSLATION_CACHE_MAX_ENTRIES, TRANSLATION_CACHE_TTL_SECONDS

from infrastructure.translation_store import StoredTranslation, TranslationStore
from infrastructure.write_queue import WriteQueue

logger = logging.getLogger("TranslationCache")

Clock = Callable[[], float]


@dataclass
class CacheEntry:
    """Single in-memory entry with its insertion time."""

    text: str
    timestamp: float

    def is_expired(self, now: float, ttl_seconds: float) -> bool:
        """Check if this cache entry has outlived the TTL."""
        return now - self.timestamp >= ttl_seconds


class TranslationCache:
    """
    Read-through key -> text cache over a durable store.

    Construct one per process (or per test) and drive it with init()/teardown().
    """

    def __init__(
        self,
        store: Optional[TranslationStore] = None,
        ttl_seconds: float = TRANSLATION_CACHE_TTL_SECONDS,
        max_entries: int = TRANSLATION_CACHE_MAX_ENTRIES,
        clock: Clock = time.time,
        write_queue: Optional[WriteQueue] = None,
    ):
        self._store = store
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._writes = write_queue or WriteQueue("TranslationCache")
        self._memory: Dict[str, CacheEntry] = {}
        self._durable_ready = False
        self._stats = {
            "hits": 0,
            "misses": 0,
            "durable_hits": 0,
            "evictions": 0,
            "memory_evictions": 0,
            "durable_errors": 0,
        }

    # Lifecycle

    async def init(self) -> Dict[str, str]:
        """
        Open the durable tier, start the write queue and hydrate tier 1.

        Returns:
            The hydrated key -> text mapping (empty when tier 2 is unavailable)
        """
        if self._store is not None:
            try:
                await self._store.open()
                self._durable_ready = True
            except Exception as e:
                self._durable_failed("open", e)
                logger.warning("Durable translation cache unavailable, running memory-only")

        await self._writes.start()
        return await self.hydrate_all()

    async def teardown(self) -> None:
        """Flush pending durable writes and close the store."""
        await self._writes.stop()
        if self._store is not None and self._durable_ready:
            try:
                await self._store.close()
            except Exception as e:
                self._durable_failed("close", e)
        self._durable_ready = False

    @property
    def durable_available(self) -> bool:
        return self._durable_ready

    def _durable_failed(self, operation: str, error: Exception) -> None:
        self._stats["durable_errors"] += 1
        logger.warning(f"Durable cache {operation} failed: {error}")

    def is_fresh(self, timestamp: float, now: Optional[float] = None) -> bool:
        now = self._clock() if now is None else now
        return now - timestamp < self.ttl_seconds

    # Reads

    def get_cached(self, key: str) -> Optional[str]:
        """
        Tier-1 lookup for synchronous render paths.

        Args:
            key: Cache key

        Returns:
            Fresh cached text or None
        """
        entry = self._memory.get(key)
        if entry is None:
            self._stats["misses"] += 1
            return None

        if entry.is_expired(self._clock(), self.ttl_seconds):
            del self._memory[key]
            self._stats["misses"] += 1
            logger.debug(f"Cache expired: {key}")
            return None

        self._stats["hits"] += 1
        return entry.text

    async def get(self, key: str) -> Optional[str]:
        """
        Read through tier 1 then tier 2.

        A fresh tier-2 hit is promoted into tier 1. A stale tier-2 entry is
        treated as absent and purged in the background.

        Returns:
            Fresh cached text or None
        """
        text = self.get_cached(key)
        if text is not None or not self._durable_ready:
            return text

        try:
            stored = await self._store.get(key)
        except Exception as e:
            self._durable_failed("read", e)
            return None

        # A set() may have landed while the durable read was suspended
        entry = self._memory.get(key)
        if entry is not None and not entry.is_expired(self._clock(), self.ttl_seconds):
            return entry.text

        if stored is None:
            return None

        if not self.is_fresh(stored.timestamp):
            logger.debug(f"Durable entry expired: {key}")
            self._writes.submit(lambda: self._delete_if_unchanged(stored))
            return None

        self._remember(key, CacheEntry(text=stored.text, timestamp=stored.timestamp))
        self._stats["durable_hits"] += 1
        return stored.text

    # Writes

    def set(self, key: str, text: str) -> None:
        """
        Store text in tier 1 now and queue persistence to tier 2.

        Never raises for durable-tier problems.
        """
        timestamp = self._clock()
        self._remember(key, CacheEntry(text=text, timestamp=timestamp))
        logger.debug(f"Cache set: {key}")

        if not self._durable_ready:
            return

        entry = StoredTranslation(key=key, text=text, timestamp=timestamp)
        if self._writes.submit(lambda: self._persist(entry)) is None:
            logger.debug(f"Write queue not running, {key} kept in memory only")

    def _remember(self, key: str, entry: CacheEntry) -> None:
        """Insert into tier 1 as the newest entry, dropping the oldest past capacity."""
        self._memory.pop(key, None)
        self._memory[key] = entry
        while len(self._memory) > self.max_entries:
            oldest = next(iter(self._memory))
            del self._memory[oldest]
            self._stats["memory_evictions"] += 1

    async def _persist(self, entry: StoredTranslation) -> None:
        try:
            await self._store.put(entry)
        except Exception as e:
            self._durable_failed("write", e)
            return
        await self._evict_overflow()

    async def _evict_overflow(self) -> None:
        """Delete oldest-timestamped entries until tier 2 is within capacity."""
        try:
            count = await self._store.count()
            if count <= self.max_entries:
                return
            deleted = await self._store.delete_oldest(count - self.max_entries)
        except Exception as e:
            self._durable_failed("eviction", e)
            return

        self._stats["evictions"] += deleted
        logger.debug(f"Cache eviction: {deleted} oldest entries removed")

    async def _delete_if_unchanged(self, stale: StoredTranslation) -> None:
        """Delete a stale durable entry unless a newer write replaced it meanwhile."""
        try:
            await self._store.delete_if_timestamp(stale.key, stale.timestamp)
        except Exception as e:
            self._durable_failed("delete", e)

    # Bulk operations

    async def hydrate_all(self) -> Dict[str, str]:
        """
        Load every fresh tier-2 entry into tier 1 in one pass.

        Returns:
            Mapping of hydrated keys to text
        """
        hydrated: Dict[str, str] = {}
        if not self._durable_ready:
            return hydrated

        now = self._clock()
        try:
            async for stored in self._store.iter_entries():
                if not self.is_fresh(stored.timestamp, now):
                    continue
                hydrated[stored.key] = stored.text
                self._remember(stored.key, CacheEntry(text=stored.text, timestamp=stored.timestamp))
        except Exception as e:
            self._durable_failed("hydrate", e)
            return hydrated

        logger.info(f"Translation cache hydrated: {len(hydrated)} entries")
        return hydrated

    async def purge_expired(self) -> int:
        """
        Remove stale entries from both tiers.

        Returns:
            Number of durable entries removed
        """
        now = self._clock()
        expired = [k for k, entry in self._memory.items() if entry.is_expired(now, self.ttl_seconds)]
        for key in expired:
            del self._memory[key]

        if not self._durable_ready:
            return 0

        cutoff = now - self.ttl_seconds
        try:
            removed = await self._writes.enqueue(lambda: self._store.delete_older_than(cutoff))
        except Exception as e:
            self._durable_failed("purge", e)
            return 0

        if removed:
            logger.debug(f"Cache purge: {removed} expired durable entries removed")
        return removed

    async def clear(self) -> None:
        """Empty both tiers (user cache reset)."""
        count = len(self._memory)
        self._memory.clear()

        if self._durable_ready:
            try:
                await self._writes.enqueue(self._store.clear)
            except Exception as e:
                self._durable_failed("clear", e)

        logger.info(f"Translation cache cleared: {count} in-memory entries removed")

    async def drain(self) -> None:
        """Wait until every queued durable write has settled."""
        await self._writes.join()

    # Statistics and monitoring

    def __len__(self) -> int:
        return len(self._memory)

    def get_stats(self) -> Dict[str, object]:
        """Get cache statistics."""
        total = self._stats["hits"] + self._stats["misses"]
        hit_rate = (self._stats["hits"] / total * 100) if total > 0 else 0

        return {
            **self._stats,
            "total_requests": total,
            "hit_rate": round(hit_rate, 2),
            "size": len(self._memory),
            "durable_available": self._durable_ready,
            "pending_writes": self._writes.get_queue_size(),
        }

    def log_stats(self) -> None:
        """Log current cache statistics."""
        stats = self.get_stats()
        logger.info(
            f"Cache stats: {stats['hits']} hits, {stats['misses']} misses, "
            f"{stats['hit_rate']}% hit rate, {stats['size']} entries, "
            f"{stats['evictions']} evictions, {stats['durable_errors']} durable errors"
        )


# Cache key builders for consistent naming
def _key_part(part: str) -> str:
    # ":" separates parts, so it is escaped (and "%" first, to keep escapes unique)
    return part.replace("%", "%25").replace(":", "%3A")


def content_key(table: str, row_id: str, field: str, locale: str) -> str:
    """Build cache key for one field of one content row in one locale."""
    return ":".join(_key_part(part) for part in (table, row_id, field, locale))


def meaning_key(meaning_object_id: str, locale: str) -> str:
    """Build cache key for the projection of a meaning object into one locale."""
    return f"meaning:{_key_part(meaning_object_id)}:{_key_part(locale)}"

"""
Durable tier of the translation cache.

TranslationStore is the logical contract the cache depends on: a persistent
key-value collection with put/get/delete/count and enumeration ordered by
insertion time. SqlTranslationStore implements it on a local SQLite file
(or any SQLAlchemy async URL).

Store methods raise on failure; TranslationCache decides what a failure means.
"""

import logging
from dataclasses import dataclass
from typing import AsyncIterator, Optional, Protocol

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.connection import build_engine, build_session_maker
from infrastructure.database.models import TranslationCacheEntry

logger = logging.getLogger("TranslationStore")


@dataclass(frozen=True)
class StoredTranslation:
    """One durable cache entry."""

    key: str
    text: str
    timestamp: float


class TranslationStore(Protocol):
    """Durable key-value collection used as cache tier 2."""

    async def open(self) -> None: ...

    async def close(self) -> None: ...

    async def put(self, entry: StoredTranslation) -> None: ...

    async def get(self, key: str) -> Optional[StoredTranslation]: ...

    async def delete(self, key: str) -> None: ...

    async def count(self) -> int: ...

    def iter_entries(self) -> AsyncIterator[StoredTranslation]: ...

    async def delete_if_timestamp(self, key: str, timestamp: float) -> bool: ...

    async def delete_oldest(self, n: int) -> int: ...

    async def delete_older_than(self, cutoff: float) -> int: ...

    async def clear(self) -> None: ...


class SqlTranslationStore:
    """TranslationStore backed by the translation_cache table."""

    def __init__(self, url: str, engine: Optional[AsyncEngine] = None):
        self.url = url
        self._engine = engine
        self._owns_engine = engine is None
        self._session_maker: Optional[async_sessionmaker[AsyncSession]] = None

    async def open(self) -> None:
        """Create the engine (if not injected) and the cache table."""
        if self._session_maker is not None:
            return
        if self._engine is None:
            self._engine = build_engine(self.url)
        async with self._engine.begin() as conn:
            await conn.run_sync(TranslationCacheEntry.__table__.create, checkfirst=True)
        self._session_maker = build_session_maker(self._engine)
        logger.debug(f"Translation store opened: {self.url}")

    async def close(self) -> None:
        if self._engine is not None and self._owns_engine:
            await self._engine.dispose()
            self._engine = None
        self._session_maker = None

    def _session(self) -> AsyncSession:
        if self._session_maker is None:
            raise RuntimeError("Translation store is not open")
        return self._session_maker()

    async def put(self, entry: StoredTranslation) -> None:
        """
        Insert or overwrite one entry as a whole value.

        Every write takes the next sequence number, so entries sharing a
        timestamp still evict in write order. Callers serialize puts.
        """
        async with self._session() as db:
            next_seq = select(func.coalesce(func.max(TranslationCacheEntry.seq), 0) + 1)
            seq = (await db.execute(next_seq)).scalar_one()
            await db.merge(
                TranslationCacheEntry(key=entry.key, text=entry.text, timestamp=entry.timestamp, seq=seq)
            )
            await db.commit()

    async def get(self, key: str) -> Optional[StoredTranslation]:
        async with self._session() as db:
            row = await db.get(TranslationCacheEntry, key)
            if row is None:
                return None
            return StoredTranslation(key=row.key, text=row.text, timestamp=row.timestamp)

    async def delete(self, key: str) -> None:
        async with self._session() as db:
            await db.execute(delete(TranslationCacheEntry).where(TranslationCacheEntry.key == key))
            await db.commit()

    async def delete_if_timestamp(self, key: str, timestamp: float) -> bool:
        """Delete the entry only if it still carries the given timestamp."""
        async with self._session() as db:
            result = await db.execute(
                delete(TranslationCacheEntry).where(
                    TranslationCacheEntry.key == key, TranslationCacheEntry.timestamp == timestamp
                )
            )
            await db.commit()
            return bool(result.rowcount)

    async def count(self) -> int:
        async with self._session() as db:
            result = await db.execute(select(func.count()).select_from(TranslationCacheEntry))
            return result.scalar_one()

    async def iter_entries(self) -> AsyncIterator[StoredTranslation]:
        """Yield every entry, oldest first."""
        async with self._session() as db:
            result = await db.execute(
                select(TranslationCacheEntry).order_by(TranslationCacheEntry.timestamp, TranslationCacheEntry.seq)
            )
            for row in result.scalars():
                yield StoredTranslation(key=row.key, text=row.text, timestamp=row.timestamp)

    async def delete_oldest(self, n: int) -> int:
        """
        Delete the n oldest entries, ties broken by write order.

        Returns:
            Number of entries deleted
        """
        if n <= 0:
            return 0
        async with self._session() as db:
            oldest = (
                select(TranslationCacheEntry.key)
                .order_by(TranslationCacheEntry.timestamp, TranslationCacheEntry.seq)
                .limit(n)
            )
            keys = (await db.execute(oldest)).scalars().all()
            if not keys:
                return 0
            await db.execute(delete(TranslationCacheEntry).where(TranslationCacheEntry.key.in_(keys)))
            await db.commit()
            return len(keys)

    async def delete_older_than(self, cutoff: float) -> int:
        """Delete every entry with timestamp <= cutoff."""
        async with self._session() as db:
            result = await db.execute(delete(TranslationCacheEntry).where(TranslationCacheEntry.timestamp <= cutoff))
            await db.commit()
            return result.rowcount or 0

    async def clear(self) -> None:
        async with self._session() as db:
            await db.execute(delete(TranslationCacheEntry))
            await db.commit()

"""
Projection reader: the getText accessor used by rendering code.

get_text() and get_text_by_meaning() are synchronous and never wait on I/O.
They return the best text available right now (cached translation, else the
original-language fallback) and, on a miss, schedule background work:

1. Requests are de-duplicated per cache key while in flight.
2. Requests are batched; the batch fires batch_delay seconds after the last
   request (debounce), or immediately on flush().
3. Each request first reads through the durable cache tier, then the
   remaining ones go to the remote producer in one call per locale and kind.
4. Results are written to the TranslationCache and subscribers are notified
   with the set of keys that changed, so the next read sees the new text.

Producer failures mean "no translation": the pending marker is cleared so a
later read can try again, and the fallback keeps showing.
"""

import asyncio
import logging
from dataclasses import dataclass
from itertools import groupby
from typing import Callable, Dict, List, Optional, Set

from infrastructure.cache import TranslationCache, content_key, meaning_key
from infrastructure.translation_client import TranslateItem, TranslationProducer

logger = logging.getLogger("ProjectionReader")

ChangeListener = Callable[[Set[str]], None]


@dataclass(frozen=True)
class ProjectionRequest:
    """A cache miss waiting for a translation."""

    key: str
    locale: str
    item: Optional[TranslateItem] = None
    meaning_object_id: Optional[str] = None


class ProjectionReader:
    """Read-through projection of content into the current target locale."""

    def __init__(
        self,
        cache: TranslationCache,
        producer: TranslationProducer,
        target_locale: str = "en",
        batch_delay: float = 0.05,
    ):
        self.cache = cache
        self.producer = producer
        self.target_locale = target_locale
        self.batch_delay = batch_delay
        self._pending: Set[str] = set()
        self._queue: List[ProjectionRequest] = []
        self._timer: Optional[asyncio.TimerHandle] = None
        self._tasks: Set[asyncio.Task] = set()
        self._listeners: List[ChangeListener] = []
        self._closed = False

    # Render-path API

    def get_text(
        self,
        table: str,
        row_id: str,
        field: str,
        fallback: str,
        source_locale: str = "en",
        target_locale: Optional[str] = None,
    ) -> str:
        """
        Get the rendered text for one field of one content row.

        Args:
            table: Content table name (e.g. "tasks")
            row_id: Row identifier
            field: Field name (e.g. "title")
            fallback: Original-language text, shown until a translation is cached
            source_locale: Locale the fallback is written in
            target_locale: Override of the reader's current locale

        Returns:
            Cached translation if fresh, otherwise fallback
        """
        locale = target_locale or self.target_locale
        if source_locale == locale:
            return fallback

        key = content_key(table, row_id, field, locale)
        cached = self.cache.get_cached(key)
        if cached is not None:
            return cached

        item = TranslateItem(table=table, id=str(row_id), field=field, text=fallback, source_lang=source_locale)
        self._schedule(ProjectionRequest(key=key, locale=locale, item=item))
        return fallback

    def get_text_by_meaning(
        self,
        meaning_object_id: Optional[str],
        fallback: str,
        target_locale: Optional[str] = None,
    ) -> str:
        """
        Get the projection of a meaning object into the current locale.

        Args:
            meaning_object_id: Meaning object id (None/empty -> fallback, no fetch)
            fallback: Text to show until the projection is cached

        Returns:
            Cached projection if fresh, otherwise fallback
        """
        if not meaning_object_id:
            return fallback

        locale = target_locale or self.target_locale
        key = meaning_key(meaning_object_id, locale)
        cached = self.cache.get_cached(key)
        if cached is not None:
            return cached

        self._schedule(ProjectionRequest(key=key, locale=locale, meaning_object_id=meaning_object_id))
        return fallback

    def set_locale(self, locale: str) -> None:
        """Switch the target locale (cache keys carry the locale, nothing is dropped)."""
        if locale != self.target_locale:
            logger.debug(f"Target locale changed: {self.target_locale} -> {locale}")
            self.target_locale = locale

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """
        Register a callback fired with the keys that received new text.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def is_pending(self, key: str) -> bool:
        return key in self._pending

    # Scheduling

    def _schedule(self, request: ProjectionRequest) -> None:
        if self._closed or request.key in self._pending:
            return

        self._pending.add(request.key)
        self._queue.append(request)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop on this thread: the request waits for the next flush()
            return

        if self._timer is not None:
            self._timer.cancel()
        self._timer = loop.call_later(self.batch_delay, self._start_batch)

    def _take_batch(self) -> List[ProjectionRequest]:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        batch, self._queue = self._queue, []
        return batch

    def _start_batch(self) -> None:
        batch = self._take_batch()
        if not batch:
            return
        task = asyncio.get_running_loop().create_task(self._process(batch))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def flush(self) -> None:
        """Run queued requests now and wait for every in-flight batch."""
        batch = self._take_batch()
        if batch:
            await self._process(batch)
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        """
        Stop scheduling, drop queued requests and wait for in-flight batches.

        Batches already running still write their results to the cache; no
        listener is notified after close.
        """
        self._closed = True
        for request in self._take_batch():
            self._pending.discard(request.key)
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
        self._listeners.clear()

    # Background work

    async def _process(self, batch: List[ProjectionRequest]) -> None:
        changed: Set[str] = set()
        try:
            remaining = []
            for request in batch:
                if await self.cache.get(request.key) is not None:
                    changed.add(request.key)
                else:
                    remaining.append(request)

            remaining.sort(key=lambda r: r.locale)
            for locale, group in groupby(remaining, key=lambda r: r.locale):
                requests = list(group)
                changed |= await self._fetch_items(locale, [r for r in requests if r.item is not None])
                changed |= await self._fetch_meanings(locale, [r for r in requests if r.meaning_object_id])
        finally:
            for request in batch:
                self._pending.discard(request.key)

        if changed and not self._closed:
            self._notify(changed)

    async def _fetch_items(self, locale: str, requests: List[ProjectionRequest]) -> Set[str]:
        if not requests:
            return set()
        try:
            translations = await self.producer.translate_items([r.item for r in requests], locale)
        except Exception as e:
            logger.warning(f"Translation fetch failed for {len(requests)} item(s) -> {locale}: {e}")
            return set()
        return self._store_results(requests, translations, lambda r: r.item.composite_key)

    async def _fetch_meanings(self, locale: str, requests: List[ProjectionRequest]) -> Set[str]:
        if not requests:
            return set()
        try:
            translations = await self.producer.translate_meanings([r.meaning_object_id for r in requests], locale)
        except Exception as e:
            logger.warning(f"Meaning projection failed for {len(requests)} id(s) -> {locale}: {e}")
            return set()
        return self._store_results(requests, translations, lambda r: r.meaning_object_id)

    def _store_results(
        self,
        requests: List[ProjectionRequest],
        translations: Dict[str, str],
        response_key: Callable[[ProjectionRequest], str],
    ) -> Set[str]:
        stored = set()
        for request in requests:
            text = translations.get(response_key(request))
            if text:
                self.cache.set(request.key, text)
                stored.add(request.key)
        missing = len(requests) - len(stored)
        if missing:
            logger.debug(f"{missing} request(s) got no translation")
        return stored

    def _notify(self, keys: Set[str]) -> None:
        for listener in list(self._listeners):
            try:
                listener(set(keys))
            except Exception as e:
                logger.error(f"Projection listener failed: {e}")

"""
Background maintenance for the translation cache.

Expired entries are already ignored on read; this job reclaims their space in
the durable tier and logs cache statistics periodically.
"""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from infrastructure.cache import TranslationCache

logger = logging.getLogger("CacheMaintenanceScheduler")

# Suppress noisy APScheduler "max instances reached" warnings
logging.getLogger("apscheduler.scheduler").setLevel(logging.ERROR)


class CacheMaintenanceScheduler:
    """Runs periodic purge of expired translation cache entries."""

    def __init__(self, cache: TranslationCache, interval_minutes: int = 30):
        self.scheduler = AsyncIOScheduler()
        self.cache = cache
        self.interval_minutes = interval_minutes
        self.is_running = False

    def start(self):
        """Start the maintenance scheduler."""
        if not self.is_running:
            self.scheduler.add_job(
                self.run_maintenance,
                "interval",
                minutes=self.interval_minutes,
                id="purge_translation_cache",
                replace_existing=True,
                max_instances=1,
                coalesce=True,
            )
            self.scheduler.start()
            self.is_running = True
            logger.info(f"Cache maintenance scheduled every {self.interval_minutes} minutes")

    def stop(self):
        """Stop the maintenance scheduler."""
        if self.is_running:
            self.scheduler.shutdown(wait=False)
            self.is_running = False
            logger.info("Cache maintenance stopped")

    async def run_maintenance(self) -> int:
        """
        Purge expired entries and log statistics.

        Returns:
            Number of durable entries removed
        """
        try:
            removed = await self.cache.purge_expired()
        except Exception as e:
            logger.error(f"Cache maintenance failed: {e}")
            return 0

        if removed:
            logger.info(f"Purged {removed} expired translation(s)")
        self.cache.log_stats()
        return removed

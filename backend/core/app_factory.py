"""
Application factory for creating FastAPI app instances.

This module provides functions for creating and configuring the FastAPI application
with all necessary middleware, routers, and dependencies.
"""

from contextlib import asynccontextmanager
from typing import Optional

from domain.value_objects.protected_tables import ProtectedTableConfig, load_protected_tables
from fastapi import FastAPI
from infrastructure.cache import TranslationCache
from infrastructure.database import build_engine, build_session_maker, init_db
from infrastructure.scheduler import CacheMaintenanceScheduler
from infrastructure.translation_client import HttpTranslationProducer, NullTranslationProducer, TranslationProducer
from infrastructure.translation_store import SqlTranslationStore
from services.meaning_object_service import MeaningObjectService
from services.projection_reader import ProjectionReader

from core import get_logger, get_settings
from core.settings import Settings

logger = get_logger("AppFactory")


def build_protected_tables(settings: Settings) -> ProtectedTableConfig:
    """Load the protected-table override file, or fall back to the built-in table list."""
    path = settings.get_protected_tables_path()
    if path is None:
        return ProtectedTableConfig(warn_on_missing_optional=settings.guard_warn_on_missing_optional)
    logger.info(f"Loading protected tables from {path}")
    return load_protected_tables(path, warn_on_missing_optional=settings.guard_warn_on_missing_optional)


def build_producer(settings: Settings) -> TranslationProducer:
    if not settings.translate_url:
        logger.warning("TRANSLATE_URL not set - content will be shown in its original language")
        return NullTranslationProducer()
    return HttpTranslationProducer(
        settings.translate_url,
        api_key=settings.translate_api_key,
        timeout=settings.translate_timeout_seconds,
    )


def create_app(
    settings: Optional[Settings] = None,
    producer: Optional[TranslationProducer] = None,
    start_scheduler: bool = True,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings override (defaults to the global settings)
        producer: Translation producer override (tests inject a fake)
        start_scheduler: Whether to start the cache maintenance scheduler

    Returns:
        Configured FastAPI application instance
    """
    from routers import ull

    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for application startup and shutdown."""
        logger.info("Application startup...")

        protected_tables = build_protected_tables(settings)

        engine = build_engine(settings.database_url)
        await init_db(engine)
        session_maker = build_session_maker(engine)

        cache = TranslationCache(
            SqlTranslationStore(settings.cache_database_url),
            ttl_seconds=settings.translation_cache_ttl_seconds,
            max_entries=settings.translation_cache_max_entries,
        )
        await cache.init()

        translation_producer = producer or build_producer(settings)
        reader = ProjectionReader(
            cache,
            translation_producer,
            target_locale=settings.default_locale,
            batch_delay=settings.projection_batch_delay,
        )
        scheduler = CacheMaintenanceScheduler(cache, interval_minutes=settings.cache_purge_interval_minutes)

        # Store in app state for dependency injection
        app.state.settings = settings
        app.state.protected_tables = protected_tables
        app.state.session_maker = session_maker
        app.state.translation_cache = cache
        app.state.projection_reader = reader
        app.state.meaning_service = MeaningObjectService(session_maker)
        app.state.cache_scheduler = scheduler

        if start_scheduler:
            scheduler.start()

        logger.info(f"Application startup complete ({len(cache)} cached translations)")

        yield

        logger.info("Application shutdown...")
        scheduler.stop()
        await reader.aclose()
        await cache.teardown()
        if producer is None and hasattr(translation_producer, "aclose"):
            await translation_producer.aclose()
        await engine.dispose()
        logger.info("Application shutdown complete")

    app = FastAPI(title="ULL API", lifespan=lifespan)
    app.include_router(ull.router, prefix="/ull", tags=["ULL"])

    return app

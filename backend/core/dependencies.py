"""Shared dependencies for FastAPI endpoints."""

from typing import AsyncGenerator

from domain.services.insert_guard import attach_insert_guard
from fastapi import Request
from infrastructure.cache import TranslationCache
from services.meaning_object_service import MeaningObjectService
from services.projection_reader import ProjectionReader
from sqlalchemy.ext.asyncio import AsyncSession


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a database session whose inserts pass through the meaning insert guard.

    Business routers writing to protected tables (tasks, goals, ...) must use this
    dependency; a missing meaning_object_id fails the flush in blocking mode.
    """
    state = request.app.state
    async with state.session_maker() as session:
        attach_insert_guard(session, block=state.settings.guard_block_inserts, config=state.protected_tables)
        yield session


def get_translation_cache(request: Request) -> TranslationCache:
    """
    Dependency to get the translation cache from app state.

    The instance is created and hydrated during application startup in the lifespan context.
    """
    return request.app.state.translation_cache


def get_projection_reader(request: Request) -> ProjectionReader:
    """Dependency to get the projection reader instance from app state."""
    return request.app.state.projection_reader


def get_meaning_service(request: Request) -> MeaningObjectService:
    """Dependency to get the meaning object service instance from app state."""
    return request.app.state.meaning_service

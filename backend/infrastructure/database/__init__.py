"""
Database infrastructure package.

Re-exports commonly used database components for convenient imports.
"""

from .connection import (
    Base,
    build_engine,
    build_session_maker,
    get_database_type,
    init_db,
    retry_on_db_lock,
    serialized_write,
)
from .models import MeaningObject, TranslationCacheEntry

__all__ = [
    # Connection
    "Base",
    "build_engine",
    "build_session_maker",
    "get_database_type",
    "init_db",
    "retry_on_db_lock",
    "serialized_write",
    # Models
    "MeaningObject",
    "TranslationCacheEntry",
]

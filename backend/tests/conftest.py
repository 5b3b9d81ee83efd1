"""
Pytest configuration and shared fixtures for backend tests.

This module provides fixtures for database sessions, cache doubles and
commonly used test data.

NOTE: Heavy imports (main, models) are done lazily inside fixtures
to avoid loading the entire app for tests that don't need it.
"""

import gc
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

# Add backend directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Type hints only - not imported at runtime
if TYPE_CHECKING:
    from typing import AsyncGenerator

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


# Files that use database fixtures
DB_FIXTURE_FILES = {
    "test_meaning_object_service.py",
    "test_translation_store.py",
    "test_insert_guard.py",
    "test_dependencies.py",
}


def pytest_collection_modifyitems(items):
    """Auto-apply markers based on test directory and fixtures used."""
    for item in items:
        filepath = str(item.fspath)
        filename = Path(filepath).name

        # Apply 'unit' marker to tests in unit directory
        if "/tests/unit/" in filepath:
            item.add_marker(pytest.mark.unit)
            if filename in DB_FIXTURE_FILES:
                item.add_marker(pytest.mark.db)
        # Apply 'integration' marker to tests in integration directory
        elif "/tests/integration/" in filepath:
            item.add_marker(pytest.mark.integration)
            item.add_marker(pytest.mark.db)  # All integration tests use db


@pytest.fixture(autouse=True)
def cleanup_after_test():
    """Reset process-wide state and run garbage collection after each test."""
    from core import reset_settings
    from infrastructure.database.connection import reset_write_lock

    reset_write_lock()
    yield
    reset_write_lock()
    reset_settings()
    gc.collect()


# ============================================================================
# Database fixtures (only loaded when needed)
# ============================================================================


@pytest.fixture
def sqlite_url(tmp_path: Path) -> str:
    """URL of a fresh SQLite file inside the test's temporary directory."""
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
async def session_maker(sqlite_url: str) -> "AsyncGenerator[async_sessionmaker[AsyncSession], None]":
    """Session factory over a fresh database with every table created."""
    from infrastructure.database import build_engine, build_session_maker, init_db

    engine = build_engine(sqlite_url)
    await init_db(engine)

    yield build_session_maker(engine)

    await engine.dispose()


@pytest.fixture
async def test_db(session_maker) -> "AsyncGenerator[AsyncSession, None]":
    """Provide a single database session on the fresh test database."""
    async with session_maker() as session:
        yield session


# ============================================================================
# Sample data fixtures
# ============================================================================


@pytest.fixture
def task_meaning() -> dict:
    """A valid v1 meaning payload for a task."""
    return {
        "version": "v1",
        "type": "TASK",
        "intent": "create",
        "subject": "Ship report",
        "metadata": {"created_from": "user"},
    }


@pytest.fixture
def protected_tables_yaml(tmp_path: Path) -> Path:
    """A protected-table override file with one optional column."""
    path = tmp_path / "protected_tables.yaml"
    path.write_text(
        "tables:\n"
        "  tasks:\n"
        "    - column: meaning_object_id\n"
        "    - column: goal_meaning_id\n"
        "      required: false\n"
        "  notes: [meaning_object_id]\n",
        encoding="utf-8",
    )
    return path


# ============================================================================
# Cache fixtures (imported from fixtures module)
# ============================================================================

from tests.fixtures.cache_fixtures import (  # noqa: E402, F401
    fake_clock,
    fake_producer,
    memory_store,
)

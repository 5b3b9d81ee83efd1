"""
Conftest for integration tests.

Automatically applies the 'integration' marker to all tests in this directory
and provides a client bound to a fully started application.
"""

from pathlib import Path

import pytest

# Apply 'integration' marker to all tests in this directory
pytestmark = pytest.mark.integration


@pytest.fixture
def app_settings(tmp_path: Path):
    """Settings pointing both databases at temporary files."""
    from core.settings import Settings

    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'ull.db'}",
        cache_database_url=f"sqlite+aiosqlite:///{tmp_path / 'ull_cache.db'}",
        projection_batch_delay_ms=10,
        default_locale="fr",
    )


@pytest.fixture
async def app(app_settings, fake_producer):
    """Application with its lifespan started (ASGITransport does not run it)."""
    from core.app_factory import create_app

    application = create_app(settings=app_settings, producer=fake_producer, start_scheduler=False)
    async with application.router.lifespan_context(application):
        yield application


@pytest.fixture
async def client(app):
    """HTTP client talking to the started application."""
    from httpx import ASGITransport, AsyncClient

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

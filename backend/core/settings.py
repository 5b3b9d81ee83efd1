"""
Centralized application settings using Pydantic BaseSettings.

This module provides type-safe access to environment variables with validation.
All settings are loaded once at application startup.
"""

from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _get_base_path() -> Path:
    """Get the project root (parent of backend/)."""
    return Path(__file__).parent.parent.parent


# ============================================================================
# Application Constants
# ============================================================================

# Translation cache defaults
TRANSLATION_CACHE_TTL_SECONDS = 7 * 24 * 60 * 60  # 7 days
TRANSLATION_CACHE_MAX_ENTRIES = 5000

# Projection reader batching window (matches the UI debounce)
PROJECTION_BATCH_DELAY_MS = 50


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults and are validated on startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        # Allow extra fields for forward compatibility
        extra="ignore",
    )

    # Databases
    database_url: str = "sqlite+aiosqlite:///./ull.db"
    cache_database_url: str = "sqlite+aiosqlite:///./ull_cache.db"

    # Translation cache
    translation_cache_ttl_seconds: float = TRANSLATION_CACHE_TTL_SECONDS
    translation_cache_max_entries: int = TRANSLATION_CACHE_MAX_ENTRIES
    cache_purge_interval_minutes: int = 30

    # Remote translation producer
    translate_url: Optional[str] = None
    translate_api_key: Optional[str] = None
    translate_timeout_seconds: float = 15.0

    # Projection reader
    projection_batch_delay_ms: int = PROJECTION_BATCH_DELAY_MS
    default_locale: str = "en"

    # Insert guard
    guard_block_inserts: bool = True
    guard_warn_on_missing_optional: bool = False
    protected_tables_file: Optional[str] = None

    # Debug configuration
    debug: bool = False

    @field_validator("guard_block_inserts", "guard_warn_on_missing_optional", "debug", mode="before")
    @classmethod
    def validate_bool_flags(cls, v):
        """Parse boolean flags from 'true'/'false' strings."""
        if isinstance(v, str):
            return v.strip().lower() == "true"
        return v

    @field_validator("translation_cache_max_entries")
    @classmethod
    def validate_max_entries(cls, v: int) -> int:
        if v < 1:
            raise ValueError("translation_cache_max_entries must be at least 1")
        return v

    @property
    def project_root(self) -> Path:
        """Get the project root directory."""
        return _get_base_path()

    @property
    def projection_batch_delay(self) -> float:
        """Batch delay in seconds."""
        return self.projection_batch_delay_ms / 1000

    def get_protected_tables_path(self) -> Optional[Path]:
        """
        Resolve the protected-table override file, if configured.

        Relative paths are resolved against the project root.

        Returns:
            Path to the YAML file or None when no override is configured
        """
        if not self.protected_tables_file:
            return None
        path = Path(self.protected_tables_file)
        if not path.is_absolute():
            path = self.project_root / path
        return path


# Singleton instance - load settings once
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()

        # Find .env file in project root
        env_path = _settings.project_root / ".env"
        if env_path.exists():
            _settings = Settings(_env_file=str(env_path))

    return _settings


def reset_settings() -> None:
    """
    Reset the settings singleton (useful for testing).
    """
    global _settings
    _settings = None

from __future__ import annotations

import os
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application configuration settings, loaded from environment variables.
    """

    debug: bool = False
    pipeline_version: str = "v0.1.0"
    commit_sha: Optional[str] = None

    max_file_size_mb: int = Field(default=10, ge=1)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter=None,
        protected_namespaces=("protect_", "private_"),
    )

    @field_validator("pipeline_version")
    @classmethod
    def _strip_pipeline_version(cls, v: str) -> str:
        """Reject blank versions; they end up in every API response."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("PIPELINE_VERSION must not be blank")
        return stripped

    @property
    def max_file_size_bytes(self) -> int:
        """Upload limit expressed in bytes."""
        return self.max_file_size_mb * 1024 * 1024


# Public accessor – manual caching to support special behaviour in tests
_CACHED_SETTINGS: Optional[Settings] = None


def get_settings() -> Settings:  # noqa: D401 – accessor helper
    """Return a **singleton** Settings instance unless running under pytest.

    Under pytest (``PYTEST_CURRENT_TEST`` present) every call builds a fresh
    instance so that tests can tweak the environment with ``monkeypatch``
    without clearing caches by hand.
    """

    global _CACHED_SETTINGS  # noqa: PLW0603 – module-level singleton

    # Test-mode ➜ always deliver a **new** instance (no caching)
    if "PYTEST_CURRENT_TEST" in os.environ:
        return Settings()

    if _CACHED_SETTINGS is None:
        _CACHED_SETTINGS = Settings()

    return _CACHED_SETTINGS


# Mimic ``functools.lru_cache`` API expected by existing tests
def _clear_settings_cache() -> None:  # noqa: D401 – helper for tests
    """Clear the internal Settings singleton (used by unit-tests)."""

    global _CACHED_SETTINGS
    _CACHED_SETTINGS = None


get_settings.cache_clear = _clear_settings_cache  # type: ignore[attr-defined]

# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for manifest location, content backend, resolution
behaviour, session cache bounds and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from reviewref.core.errors import ConfigurationError

__all__ = ["ConfigurationError", "Settings", "load_settings"]


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Manifest ===
    manifest_path: Path = Path("references/manifest.json")

    # === Content backend ===
    content_backend: Literal["file", "memory", "redis"] = "file"
    content_root: Path | None = None
    content_encoding: str = "utf-8"
    content_redis_url: str = ""
    content_redis_prefix: str = "reviewref:content:"

    # === Resolution ===
    default_keys: str = ""
    match_policy: Literal["exact", "partial"] = "exact"
    case_sensitive_triggers: bool = False

    # === Session cache ===
    cache_max_entries: int | None = None

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("cache_max_entries")
    @classmethod
    def validate_cache_max_entries(cls, v: int | None) -> int | None:  # noqa: N805
        """A cache bound, when given, must hold at least one entry."""
        if v is not None and v < 1:
            raise ValueError("cache_max_entries must be >= 1")
        return v

    @field_validator("log_retention")
    @classmethod
    def validate_log_retention(cls, v: int) -> int:  # noqa: N805
        if v < 0:
            raise ValueError("log_retention must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.content_backend == "redis" and not self.content_redis_url:
            errors.append(
                "CONTENT_REDIS_URL must be set when CONTENT_BACKEND=redis"
            )

        keys = self.default_keys_list
        if len(keys) != len(set(keys)):
            errors.append("DEFAULT_KEYS contains duplicate keys")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def default_keys_list(self) -> list[str]:
        """Parse comma-separated fallback keys."""
        return [k.strip() for k in self.default_keys.split(",") if k.strip()]

    @property
    def resolved_content_root(self) -> Path:
        """Base directory for relative file locators."""
        if self.content_root is not None:
            return Path(self.content_root).expanduser()
        return Path(self.manifest_path).expanduser().parent


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-session config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]

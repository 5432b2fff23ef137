# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Configuration management using Pydantic Settings."""

from pathlib import Path
from typing import Literal

from beartype import beartype
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings with immutable configuration."""

    model_config = SettingsConfigDict(
        env_prefix="POLICY_CLIENT_",
        env_file=None,
        env_file_encoding="utf-8",
        frozen=True,  # Immutable settings
        validate_default=True,
        extra="forbid",
    )

    # Remote API
    api_url: str = Field(
        default="http://localhost:8000/api",
        description="Base URL of the policy API",
        min_length=1,
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        ge=1.0,
        le=300.0,
        description="Request timeout in seconds",
    )

    backend: Literal["http", "memory"] = Field(
        default="http",
        description="Policy gateway to use: the remote API or an in-memory store",
    )

    # Listing
    default_per_page: int = Field(
        default=15,
        ge=1,
        le=100,
        description="Page size used for policy listings",
    )

    # Session persistence
    session_file: Path = Field(
        default=Path.home() / ".policy_client" / "session.json",
        description="File holding the persisted auth token and user snapshot",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Log level for the policy_client logger",
    )

    @field_validator("api_url")
    @classmethod
    @beartype
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so paths can be joined with a leading slash."""
        return v.rstrip("/")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        """Accept lower-case level names from the environment."""
        return v.upper() if isinstance(v, str) else v


_settings: Settings | None = None


@beartype
def get_settings() -> Settings:
    """Get cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


@beartype
def clear_settings_cache() -> None:
    """Clear settings cache (for testing)."""
    global _settings
    _settings = None

"""Runtime configuration for the jar patching tool."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_REPOSITORY = "https://repo1.maven.org/maven2"


class Settings(BaseSettings):
    """Configuration values mapped from ``JARPATCH_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="JARPATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field("jarpatch")
    version: str = Field("1.0.0")

    # Maven repository configuration
    repository_url: str = Field(DEFAULT_REPOSITORY)
    repository_username: Optional[str] = Field(None)
    repository_password: Optional[str] = Field(None)
    http_timeout: float = Field(30.0)
    http_verify_tls: bool = Field(True)

    # Local filesystem layout
    default_target_dir: str = Field(".")
    default_patch_target_dir: str = Field("/opt")
    download_dir: Optional[str] = Field(None)
    backup_dir_name: str = Field("backup")
    backup_timestamp_format: str = Field("%Y%m%d_%H%M%S")

    log_level: str = Field("INFO")


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()

"""
Centralized configuration management powered by pydantic-settings.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, PositiveInt, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseModel):
    """Application identity and runtime toggles."""

    name: str = Field(
        default="content_staging",
        description="Name of the package logger configured by setup_logging.",
    )
    debug: bool = Field(default=False, description="Force DEBUG logging regardless of level.")


class DatabaseSettings(BaseModel):
    """Database connection settings."""

    url: str = Field(
        default="sqlite+aiosqlite:///content_staging.db",
        description="SQLAlchemy-compatible async database URL.",
    )
    echo: bool = Field(default=False, description="Log every SQL statement the engine issues.")
    posts_table: str = Field(default="wp_posts", description="Name of the posts table.")

    @field_validator("posts_table")
    @classmethod
    def strip_table_name(cls, v: str) -> str:
        """Reject blank table names."""
        v = v.strip()
        if not v:
            raise ValueError("posts_table must be a non-empty string.")
        return v


class ContentSettings(BaseModel):
    """Content-type conventions shared by the post queries."""

    batch_type: str = Field(
        default="sme_content_batch",
        description="Reserved post type for internal batch records, never published.",
    )
    publish_status: str = Field(default="publish", description="Status of published posts.")
    page_size: PositiveInt = Field(default=5, description="Default page size for listings.")


class LoggingSettings(BaseModel):
    """Logging configuration shared across the project."""

    level: str = Field(default="INFO", description="Root logging level.")
    format: str = Field(
        default="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        description="Standard logging format string.",
    )
    directory: Path = Field(default=Path("logs"), description="Directory for log files.")
    file_name: str = Field(default="content_staging.log", description="Primary log file name.")
    max_bytes: PositiveInt = Field(
        default=5 * 1024 * 1024, description="Maximum file size before rotating."
    )
    backup_count: PositiveInt = Field(default=5, description="Number of rotated log files to keep.")


class Settings(BaseSettings):
    """Top-level application settings loaded from the environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    app: AppSettings = AppSettings()
    database: DatabaseSettings = DatabaseSettings()
    content: ContentSettings = ContentSettings()
    logging: LoggingSettings = LoggingSettings()


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance loaded from the current environment."""

    return Settings()


__all__ = [
    "AppSettings",
    "ContentSettings",
    "DatabaseSettings",
    "LoggingSettings",
    "Settings",
    "get_settings",
]

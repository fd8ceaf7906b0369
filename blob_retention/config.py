"""Configuration management for the Blob Retention service.

This module provides centralized configuration management using Pydantic Settings,
supporting environment variables and .env files.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RetentionSettings(BaseSettings):
    """Retention thresholds and namespace layout.

    Thresholds are product policy; the job reads them once when the
    policy table is built.
    """

    base_prefix: str = Field(
        default="damilola.tech/",
        description="Root of the shared storage namespace",
    )
    chats_production_days: int = Field(default=180, ge=0)
    chats_preview_days: int = Field(default=14, ge=0)
    fit_assessments_days: int = Field(default=180, ge=0)
    resume_generations_days: int = Field(default=365, ge=0)
    audit_production_days: int = Field(default=365, ge=0)
    audit_preview_days: int = Field(default=14, ge=0)
    delete_concurrency: int = Field(default=10, ge=1, le=100)
    trust_uploaded_at: bool = Field(
        default=True,
        description="Fall back to the store upload time when a key has no timestamp",
    )
    protected_prefixes: List[str] = Field(
        default=["content/", "resume/", "admin-cache/"],
        description="Prefixes (relative to base_prefix) that are never deleted",
    )
    valid_session_prefixes: List[str] = Field(
        default=["chat-", "fit-assessment-", "resume-generator-", "anonymous.json"],
        description="Filename prefixes written by current usage-session writers",
    )

    @field_validator("base_prefix")
    @classmethod
    def validate_base_prefix(cls, v: str) -> str:
        """Normalize the base prefix to end with a slash."""
        v = v.strip()
        if not v:
            raise ValueError("base_prefix must not be empty")
        return v if v.endswith("/") else f"{v}/"

    model_config = SettingsConfigDict(env_prefix="RETENTION_")


class BlobStoreSettings(BaseSettings):
    """Hosted blob store connection settings."""

    api_url: str = Field(default="https://blob.vercel-storage.com")
    read_write_token: Optional[SecretStr] = Field(default=None)
    api_version: str = Field(default="7")
    page_size: int = Field(default=1000, ge=1, le=1000)
    timeout_seconds: float = Field(default=30.0, gt=0)

    model_config = SettingsConfigDict(env_prefix="BLOB_")


class SecuritySettings(BaseSettings):
    """Security settings for the scheduler-facing endpoints."""

    cron_secret: Optional[SecretStr] = Field(
        default=None,
        description="Bearer token the scheduler presents to the cron endpoint",
    )

    model_config = SettingsConfigDict(env_prefix="SECURITY_")


class ObservabilitySettings(BaseSettings):
    """Observability and monitoring settings."""

    service_name: str = Field(default="blob-retention")
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")
    metrics_enabled: bool = Field(default=True)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        if v.lower() not in ("json", "console"):
            raise ValueError(f"Invalid log format: {v}. Must be 'json' or 'console'")
        return v.lower()

    model_config = SettingsConfigDict(env_prefix="OTEL_")


class Settings(BaseSettings):
    """Main application settings."""

    # Application
    app_name: str = Field(default="Blob Retention")
    app_version: str = Field(default="1.0.0")
    debug: bool = Field(default=False)
    env: str = Field(default="development")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000, ge=1, le=65535)

    # Sub-settings
    retention: RetentionSettings = Field(default_factory=RetentionSettings)
    blob_store: BlobStoreSettings = Field(default_factory=BlobStoreSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings instance with loaded configuration
    """
    return Settings()


def reload_settings() -> Settings:
    """Reload settings from environment.

    Returns:
        Fresh Settings instance
    """
    get_settings.cache_clear()
    return get_settings()

#!/usr/bin/env python3
"""
Centralized Configuration Module using Pydantic Settings

This module provides type-safe, environment-based configuration for the
cache service. Every node of a deployment reads the same variables; only
INSTANCE_ID / REGION and the LiteFS primary marker differ between nodes.

Architectural Decision: Pydantic Settings for type safety and validation
- Environment variable loading with .env support
- Type validation at startup (fail fast on misconfiguration)
- Easy testing with reload_settings()
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from litecache.core.config.constants import (
    DEFAULT_INTERNAL_URL_TEMPLATE,
    LRU_CACHE_MAX_SIZE,
)


class CacheSettings(BaseSettings):
    """
    Cache tier configuration.

    STAGE-2: Tier sizing and storage location
    """

    CACHE_DATABASE_PATH: str | None = Field(default=None, description="SQLite cache file path")
    CACHE_LRU_MAX_SIZE: int = Field(default=LRU_CACHE_MAX_SIZE, description="In-memory LRU max entries")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class InstanceSettings(BaseSettings):
    """
    Multi-region instance configuration.

    STAGE-0.1: LiteFS instance awareness

    The primary is elected by LiteFS, never by this service. Replicas find it
    through the `.primary` marker file LiteFS maintains in LITEFS_DIR.
    """

    LITEFS_DIR: str = Field(default="/litefs", description="LiteFS mount directory")
    INSTANCE_ID: str | None = Field(default=None, description="Current instance id (defaults to hostname)")
    REGION: str = Field(default="local", description="Region of the current instance")
    INSTANCES: dict[str, str] = Field(default_factory=dict, description="Known instances: id -> region")
    INSTANCE_INFO_CACHE_SECONDS: float = Field(default=1.0, description="Memoisation window for instance info")
    FLY_APP_NAME: str | None = Field(default=None, description="Application name on the private network")
    INTERNAL_PORT: int = Field(default=8080, description="Port nodes listen on internally")
    INTERNAL_URL_TEMPLATE: str = Field(
        default=DEFAULT_INTERNAL_URL_TEMPLATE,
        description="Internal base URL of a node ({instance}, {app_name}, {port})",
    )
    FORWARD_TIMEOUT_SECONDS: float = Field(default=10.0, description="Timeout for forwarded writes")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class SecuritySettings(BaseSettings):
    """Shared secrets for the internal and admin surfaces."""

    INTERNAL_COMMAND_TOKEN: str | None = Field(default=None, description="Replica -> primary shared secret")
    ADMIN_TOKEN: str | None = Field(default=None, description="Operator token for the admin surface")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class LoggingSettings(BaseSettings):
    """
    Logging configuration for structured logging.

    STAGE-L: Logging configuration
    """

    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class ApplicationSettings(BaseSettings):
    """
    General application settings.

    STAGE-0: Application initialization
    """

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="production",
        description="Application environment"
    )
    APP_NAME: str = Field(default="litecache", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    API_HOST: str = Field(default="0.0.0.0", description="API host")
    API_PORT: int = Field(default=8080, description="API port")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class Settings(BaseSettings):
    """
    Main settings class that aggregates all configuration sections.

    STAGE-0: Centralized configuration initialization

    Usage:
        from litecache.core.config.settings import get_settings

        settings = get_settings()
        db_path = settings.cache.CACHE_DATABASE_PATH
        litefs_dir = settings.instances.LITEFS_DIR
    """

    # Cache settings
    CACHE_DATABASE_PATH: str | None = Field(default=None, description="SQLite cache file path")
    CACHE_LRU_MAX_SIZE: int = Field(default=LRU_CACHE_MAX_SIZE, description="In-memory LRU max entries")

    # Instance settings
    LITEFS_DIR: str = Field(default="/litefs", description="LiteFS mount directory")
    INSTANCE_ID: str | None = Field(default=None, description="Current instance id (defaults to hostname)")
    REGION: str = Field(default="local", description="Region of the current instance")
    INSTANCES: dict[str, str] = Field(default_factory=dict, description="Known instances: id -> region")
    INSTANCE_INFO_CACHE_SECONDS: float = Field(default=1.0, description="Memoisation window for instance info")
    FLY_APP_NAME: str | None = Field(default=None, description="Application name on the private network")
    INTERNAL_PORT: int = Field(default=8080, description="Port nodes listen on internally")
    INTERNAL_URL_TEMPLATE: str = Field(
        default=DEFAULT_INTERNAL_URL_TEMPLATE,
        description="Internal base URL of a node ({instance}, {app_name}, {port})",
    )
    FORWARD_TIMEOUT_SECONDS: float = Field(default=10.0, description="Timeout for forwarded writes")

    # Security settings
    INTERNAL_COMMAND_TOKEN: str | None = Field(default=None, description="Replica -> primary shared secret")
    ADMIN_TOKEN: str | None = Field(default=None, description="Operator token for the admin surface")

    # Logging settings
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    # Application settings
    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="production",
        description="Application environment"
    )
    APP_NAME: str = Field(default="litecache", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    API_HOST: str = Field(default="0.0.0.0", description="API host")
    API_PORT: int = Field(default=8080, description="API port")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    # Nested configuration objects
    @property
    def cache(self) -> "CacheSettings":
        """Get cache settings."""
        return CacheSettings(
            CACHE_DATABASE_PATH=self.CACHE_DATABASE_PATH,
            CACHE_LRU_MAX_SIZE=self.CACHE_LRU_MAX_SIZE,
        )

    @property
    def instances(self) -> "InstanceSettings":
        """Get instance settings."""
        return InstanceSettings(
            LITEFS_DIR=self.LITEFS_DIR,
            INSTANCE_ID=self.INSTANCE_ID,
            REGION=self.REGION,
            INSTANCES=self.INSTANCES,
            INSTANCE_INFO_CACHE_SECONDS=self.INSTANCE_INFO_CACHE_SECONDS,
            FLY_APP_NAME=self.FLY_APP_NAME,
            INTERNAL_PORT=self.INTERNAL_PORT,
            INTERNAL_URL_TEMPLATE=self.INTERNAL_URL_TEMPLATE,
            FORWARD_TIMEOUT_SECONDS=self.FORWARD_TIMEOUT_SECONDS,
        )

    @property
    def security(self) -> "SecuritySettings":
        """Get security settings."""
        return SecuritySettings(
            INTERNAL_COMMAND_TOKEN=self.INTERNAL_COMMAND_TOKEN,
            ADMIN_TOKEN=self.ADMIN_TOKEN,
        )

    @property
    def logging(self) -> "LoggingSettings":
        """Get logging settings."""
        return LoggingSettings(LOG_LEVEL=self.LOG_LEVEL, LOG_FORMAT=self.LOG_FORMAT)

    @property
    def app(self) -> "ApplicationSettings":
        """Get application settings."""
        return ApplicationSettings(
            ENVIRONMENT=self.ENVIRONMENT,
            APP_NAME=self.APP_NAME,
            APP_VERSION=self.APP_VERSION,
            API_HOST=self.API_HOST,
            API_PORT=self.API_PORT,
        )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"  # Ignore extra environment variables
    )


# Global settings instance (singleton pattern)
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global settings instance (singleton).

    STAGE-0.3: Settings initialization

    Returns:
        Settings: Global settings instance
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


def reload_settings() -> Settings:
    """
    Reload settings (useful for testing).

    Returns:
        Settings: New settings instance
    """
    global _settings
    _settings = Settings()
    return _settings

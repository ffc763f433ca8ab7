#!/usr/bin/env python3
"""
Centralized Configuration Module using Pydantic Settings

Type-safe, environment-based configuration for the cache facade, the store
connection, the lock manager and logging.

Architectural Decision: Pydantic Settings for type safety and validation
- Environment variable loading with .env support
- Type validation at startup (fail fast on misconfiguration)
- Easy testing with override mechanisms
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fastcache.core.config.constants import (
    DEFAULT_LOCK_TTL_MS,
    DEFAULT_TTL_SECONDS,
    FLUSH_SCAN_COUNT,
    LOCK_CLOCK_DRIFT_FACTOR,
)


class RedisSettings(BaseSettings):
    """
    Redis connection configuration.

    STAGE-0.1: Store connection configuration
    """

    REDIS_HOST: str = Field(default="localhost", description="Redis server host")
    REDIS_PORT: int = Field(default=6379, description="Redis server port")
    REDIS_DB: int = Field(default=0, ge=0, description="Redis database number")
    REDIS_PASSWORD: str | None = Field(default=None, description="Redis password (if required)")
    REDIS_MAX_CONNECTIONS: int = Field(default=50, gt=0, description="Maximum pooled connections")
    REDIS_SOCKET_TIMEOUT: float = Field(default=5.0, description="Socket timeout in seconds")
    REDIS_SOCKET_CONNECT_TIMEOUT: float = Field(default=5.0, description="Connection timeout in seconds")
    REDIS_HEALTH_CHECK_INTERVAL: int = Field(default=30, description="Health check interval in seconds")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class CacheSettings(BaseSettings):
    """
    Cache facade configuration.

    STAGE-0.2: Key prefix and expiry defaults
    """

    CACHE_PREFIX: str = Field(default="", description="Prefix applied to every key")
    CACHE_DEFAULT_TTL: int = Field(default=DEFAULT_TTL_SECONDS, gt=0, description="Default TTL (5 min)")
    CACHE_FLUSH_SCAN_COUNT: int = Field(default=FLUSH_SCAN_COUNT, gt=0, description="Keys per SCAN round")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class LockSettings(BaseSettings):
    """
    Distributed lock configuration.

    STAGE-0.3: Lease defaults
    """

    LOCK_TTL_MS: int = Field(default=DEFAULT_LOCK_TTL_MS, gt=0, description="Default lease duration (ms)")
    LOCK_CLOCK_DRIFT_FACTOR: float = Field(
        default=LOCK_CLOCK_DRIFT_FACTOR, ge=0, lt=1, description="Clock drift allowance factor"
    )

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


class Settings(BaseSettings):
    """
    Main settings class that aggregates all configuration sections.

    Usage:
        from fastcache.core.config import get_settings

        settings = get_settings()
        redis_host = settings.redis.REDIS_HOST
        default_ttl = settings.cache.CACHE_DEFAULT_TTL
    """

    # Redis settings
    REDIS_HOST: str = Field(default="localhost", description="Redis server host")
    REDIS_PORT: int = Field(default=6379, description="Redis server port")
    REDIS_DB: int = Field(default=0, ge=0, description="Redis database number")
    REDIS_PASSWORD: str | None = Field(default=None, description="Redis password (if required)")
    REDIS_MAX_CONNECTIONS: int = Field(default=50, gt=0, description="Maximum pooled connections")
    REDIS_SOCKET_TIMEOUT: float = Field(default=5.0, description="Socket timeout in seconds")
    REDIS_SOCKET_CONNECT_TIMEOUT: float = Field(default=5.0, description="Connection timeout in seconds")
    REDIS_HEALTH_CHECK_INTERVAL: int = Field(default=30, description="Health check interval in seconds")

    # Cache settings
    CACHE_PREFIX: str = Field(default="", description="Prefix applied to every key")
    CACHE_DEFAULT_TTL: int = Field(default=DEFAULT_TTL_SECONDS, gt=0, description="Default TTL (5 min)")
    CACHE_FLUSH_SCAN_COUNT: int = Field(default=FLUSH_SCAN_COUNT, gt=0, description="Keys per SCAN round")

    # Lock settings
    LOCK_TTL_MS: int = Field(default=DEFAULT_LOCK_TTL_MS, gt=0, description="Default lease duration (ms)")
    LOCK_CLOCK_DRIFT_FACTOR: float = Field(
        default=LOCK_CLOCK_DRIFT_FACTOR, ge=0, lt=1, description="Clock drift allowance factor"
    )

    # Logging settings
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

    @property
    def redis(self) -> RedisSettings:
        """Get Redis settings."""
        return RedisSettings(
            REDIS_HOST=self.REDIS_HOST,
            REDIS_PORT=self.REDIS_PORT,
            REDIS_DB=self.REDIS_DB,
            REDIS_PASSWORD=self.REDIS_PASSWORD,
            REDIS_MAX_CONNECTIONS=self.REDIS_MAX_CONNECTIONS,
            REDIS_SOCKET_TIMEOUT=self.REDIS_SOCKET_TIMEOUT,
            REDIS_SOCKET_CONNECT_TIMEOUT=self.REDIS_SOCKET_CONNECT_TIMEOUT,
            REDIS_HEALTH_CHECK_INTERVAL=self.REDIS_HEALTH_CHECK_INTERVAL,
        )

    @property
    def cache(self) -> CacheSettings:
        """Get cache settings."""
        return CacheSettings(
            CACHE_PREFIX=self.CACHE_PREFIX,
            CACHE_DEFAULT_TTL=self.CACHE_DEFAULT_TTL,
            CACHE_FLUSH_SCAN_COUNT=self.CACHE_FLUSH_SCAN_COUNT,
        )

    @property
    def lock(self) -> LockSettings:
        """Get lock settings."""
        return LockSettings(
            LOCK_TTL_MS=self.LOCK_TTL_MS,
            LOCK_CLOCK_DRIFT_FACTOR=self.LOCK_CLOCK_DRIFT_FACTOR,
        )

    @property
    def logging(self) -> LoggingSettings:
        """Get logging settings."""
        return LoggingSettings(LOG_LEVEL=self.LOG_LEVEL, LOG_FORMAT=self.LOG_FORMAT)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra environment variables
    )


# Global settings instance (singleton pattern)
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global settings instance (singleton).

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

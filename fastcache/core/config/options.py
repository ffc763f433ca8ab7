"""
Facade Options

Per-instance options for a FastCache facade. Defaults come from the
environment settings; any field can be overridden at construction time.

Usage:
    options = CacheOptions(prefix="app:", ttl=60)
    options = CacheOptions.from_settings(get_settings(), prefix="app:")
"""

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, Field

from fastcache.core.config.constants import (
    DEFAULT_LOCK_TTL_MS,
    DEFAULT_TTL_SECONDS,
    FLUSH_SCAN_COUNT,
    LOCK_CLOCK_DRIFT_FACTOR,
)
from fastcache.core.config.settings import Settings


class RedisOptions(BaseModel):
    """Connection parameters for one store node."""

    host: str = "localhost"
    port: int = 6379
    db: int = Field(default=0, ge=0)
    password: str | None = None
    max_connections: int = Field(default=50, gt=0)
    socket_timeout: float = 5
    socket_connect_timeout: float = 5
    health_check_interval: int = 30

    @classmethod
    def from_settings(cls, settings: Settings) -> "RedisOptions":
        redis = settings.redis
        return cls(
            host=redis.REDIS_HOST,
            port=redis.REDIS_PORT,
            db=redis.REDIS_DB,
            password=redis.REDIS_PASSWORD,
            max_connections=redis.REDIS_MAX_CONNECTIONS,
            socket_timeout=redis.REDIS_SOCKET_TIMEOUT,
            socket_connect_timeout=redis.REDIS_SOCKET_CONNECT_TIMEOUT,
            health_check_interval=redis.REDIS_HEALTH_CHECK_INTERVAL,
        )


class CacheOptions(BaseModel):
    """
    Options recognised by the cache facade.

    Attributes:
        prefix: String prepended to every key (cache entries and lock keys)
        ttl: Default expiry in seconds for scalar writes
        redis: Connection parameters for the primary store
        create_redis_client: Optional factory replacing the built-in pooled
            client; called with the RedisOptions of the node to connect
        lock_ttl_ms: Default lease duration in milliseconds
        lock_nodes: Extra store nodes for quorum locking (empty means
            single-instance locking on the primary store)
        lock_drift_factor: Clock drift allowance used to compute lease validity
        flush_scan_count: Keys requested per SCAN round in a partial flush
    """

    prefix: str = ""
    ttl: int = Field(default=DEFAULT_TTL_SECONDS, gt=0)
    redis: RedisOptions = Field(default_factory=RedisOptions)
    create_redis_client: Callable[[RedisOptions], Any] | None = None
    lock_ttl_ms: int = Field(default=DEFAULT_LOCK_TTL_MS, gt=0)
    lock_nodes: list[RedisOptions] = Field(default_factory=list)
    lock_drift_factor: float = Field(default=LOCK_CLOCK_DRIFT_FACTOR, ge=0, lt=1)
    flush_scan_count: int = Field(default=FLUSH_SCAN_COUNT, gt=0)

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: Any) -> "CacheOptions":
        """Build options from environment settings, then apply overrides."""
        values: dict[str, Any] = {
            "prefix": settings.cache.CACHE_PREFIX,
            "ttl": settings.cache.CACHE_DEFAULT_TTL,
            "redis": RedisOptions.from_settings(settings),
            "lock_ttl_ms": settings.lock.LOCK_TTL_MS,
            "lock_drift_factor": settings.lock.LOCK_CLOCK_DRIFT_FACTOR,
            "flush_scan_count": settings.cache.CACHE_FLUSH_SCAN_COUNT,
        }
        values.update(overrides)
        return cls(**values)

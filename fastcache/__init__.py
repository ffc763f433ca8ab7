"""
fastcache

Async cache facade over Redis: scalar/list/map/set operations with expiry,
compute-or-fetch caching, deterministic cache keys, and distributed locks.
"""

from fastcache.core.config import CacheOptions, RedisOptions
from fastcache.core.exceptions import (
    CacheConnectionError,
    CacheError,
    CacheKeyError,
    ConfigurationError,
    DeserializationError,
    FastCacheError,
    LockContentionError,
    LockError,
    LockOwnershipError,
    SerializationError,
)
from fastcache.infrastructure.cache import (
    FastCache,
    close_cache,
    derive_cache_key,
    get_cache,
    init_cache,
)
from fastcache.infrastructure.lock import Lease, LockManager
from fastcache.infrastructure.store import RedisStore

__version__ = "1.0.0"

__all__ = [
    "FastCache",
    "CacheOptions",
    "RedisOptions",
    "RedisStore",
    "LockManager",
    "Lease",
    "derive_cache_key",
    "get_cache",
    "init_cache",
    "close_cache",
    "FastCacheError",
    "ConfigurationError",
    "CacheError",
    "CacheConnectionError",
    "CacheKeyError",
    "SerializationError",
    "DeserializationError",
    "LockError",
    "LockContentionError",
    "LockOwnershipError",
]

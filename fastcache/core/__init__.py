"""
Core Module

Foundational components: configuration, logging, exceptions, and the store
interface.
"""

from .config import CacheOptions, RedisOptions, Settings, get_settings, reload_settings
from .exceptions import (
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
from .interfaces import KeyValueStore
from .logging import get_logger, log_stage, setup_logging

__all__ = [
    "CacheOptions",
    "RedisOptions",
    "Settings",
    "get_settings",
    "reload_settings",
    "setup_logging",
    "get_logger",
    "log_stage",
    "KeyValueStore",
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

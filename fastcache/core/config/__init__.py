"""
Configuration Module

Centralized, type-safe configuration for the cache facade.

Components:
-----------
- **settings.py**: Pydantic-based settings loaded from the environment / `.env`
- **options.py**: Per-facade options (prefix, TTL, connection, lock nodes)
- **constants.py**: Defaults and stage identifiers

Environment Variables:
---------------------
```bash
REDIS_HOST=localhost
REDIS_PORT=6379
REDIS_DB=0
CACHE_PREFIX=app:
CACHE_DEFAULT_TTL=300
LOCK_TTL_MS=1000
LOG_LEVEL=INFO
LOG_FORMAT=json
```
"""

from fastcache.core.config.options import CacheOptions, RedisOptions
from fastcache.core.config.settings import Settings, get_settings, reload_settings

__all__ = [
    "CacheOptions",
    "RedisOptions",
    "Settings",
    "get_settings",
    "reload_settings",
]

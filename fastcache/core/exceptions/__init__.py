"""
Exception Module

Structured exception hierarchy for fastcache.

Module Structure:
-----------------
- **base.py**: FastCacheError base class + ConfigurationError
- **cache.py**: Store exceptions (connection, command failures)
- **serialization.py**: Value encoding/decoding exceptions
- **lock.py**: Distributed lock exceptions

Usage:
------
```python
from fastcache.core.exceptions import CacheConnectionError, LockContentionError
```
"""

# Base exception
from fastcache.core.exceptions.base import ConfigurationError, FastCacheError

# Cache exceptions
from fastcache.core.exceptions.cache import CacheConnectionError, CacheError, CacheKeyError

# Lock exceptions
from fastcache.core.exceptions.lock import LockContentionError, LockError, LockOwnershipError

# Serialization exceptions
from fastcache.core.exceptions.serialization import DeserializationError, SerializationError

__all__ = [
    # Base
    "FastCacheError",
    "ConfigurationError",
    # Cache
    "CacheError",
    "CacheConnectionError",
    "CacheKeyError",
    # Serialization
    "SerializationError",
    "DeserializationError",
    # Lock
    "LockError",
    "LockContentionError",
    "LockOwnershipError",
]

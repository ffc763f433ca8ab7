"""
Cache-Related Exceptions

All exceptions related to store operations.
"""

from fastcache.core.exceptions.base import FastCacheError


class CacheError(FastCacheError):
    """Base exception for store-related errors."""
    pass


class CacheConnectionError(CacheError):
    """
    Raised when unable to reach the store, or the connection drops mid-command.

    Common causes:
    - Redis server is down
    - Network connectivity issues
    - Incorrect host/port configuration
    - Operation issued before initialize() or after destroy()
    """
    pass


class CacheKeyError(CacheError):
    """
    Raised when a store command fails for a key.

    Common causes:
    - Wrong type for the operation (e.g. LPUSH on a hash)
    - Script errors
    - Memory limit exceeded
    """
    pass

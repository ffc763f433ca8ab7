"""
System Constants

Defaults and identifiers shared by the cache facade, the store adapter and
the lock manager.

Architectural Decision: Centralized constants for maintainability
- Single source of truth for magic numbers
- Stage identifiers keep log events greppable
"""

from enum import Enum

# ============================================================================
# Cache Defaults
# ============================================================================

DEFAULT_TTL_SECONDS = 60 * 5  # 5min

# Keys returned per SCAN round during a partial flush
FLUSH_SCAN_COUNT = 50

FLUSH_ALL_PATTERN = "*"


# ============================================================================
# Lock Defaults
# ============================================================================

DEFAULT_LOCK_TTL_MS = 1000

# Redlock clock drift: ttl * factor + constant
LOCK_CLOCK_DRIFT_FACTOR = 0.01
LOCK_CLOCK_DRIFT_CONSTANT_MS = 2

LOCK_KEY_PREFIX = "lock:"


# ============================================================================
# Health Monitoring
# ============================================================================

POOL_UTILIZATION_WARNING_PCT = 80


# ============================================================================
# Stage Identifiers (for structured logging)
# ============================================================================


class Stage(str, Enum):
    """
    Stage identifiers attached to every log event.

    Format: {COMPONENT}.{OPERATION}
    """

    # Store adapter
    STORE_CONNECT = "STORE.CONNECT"
    STORE_DISCONNECT = "STORE.DISCONNECT"
    STORE_COMMAND = "STORE.COMMAND"
    STORE_HEALTH = "STORE.HEALTH"

    # Cache facade
    CACHE_INIT = "CACHE.INIT"
    CACHE_DESTROY = "CACHE.DESTROY"
    CACHE_FLUSH = "CACHE.FLUSH"

    # Compute-or-fetch
    CACHE_HIT = "CACHE.HIT"
    CACHE_MISS = "CACHE.MISS"
    CACHE_CORRUPT = "CACHE.CORRUPT"
    CACHE_PERSIST = "CACHE.PERSIST"
    CACHE_EVICT = "CACHE.EVICT"

    # Lock manager
    LOCK_ACQUIRE = "LOCK.ACQUIRE"
    LOCK_CONTENTION = "LOCK.CONTENTION"
    LOCK_RELEASE = "LOCK.RELEASE"

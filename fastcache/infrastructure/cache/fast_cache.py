#!/usr/bin/env python3
"""
FastCache Facade

Architecture:
    FastCache (Public API)
        ├── RedisStore (store adapter, shared connection)
        ├── ListOperations / MapOperations / SetOperations (per-key views)
        ├── ComputeOrFetch (withCache coordination)
        └── LockManager (optional distributed locks)

Usage:
    cache = FastCache.create(CacheOptions(prefix="app:", ttl=60))
    await cache.initialize()

    await cache.set("foo", "hello")
    await cache.get("foo")                       # "hello"

    items = cache.list("bar")
    await items.unshift("one")
    await items.push("two")
    await items.get_all()                        # ["one", "two"]

    key = cache.cache_key({"query": "q", "page": 1})
    report = await cache.with_cache(key, lambda: build_report("q", 1))

    cache.turn_on_lock()
    async with cache.locked("report"):
        ...

    await cache.destroy()
"""

from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

from fastcache.core.config.constants import FLUSH_ALL_PATTERN, LOCK_KEY_PREFIX, Stage
from fastcache.core.config.options import CacheOptions
from fastcache.core.config.settings import get_settings
from fastcache.core.exceptions import ConfigurationError
from fastcache.core.interfaces.store import KeyValueStore
from fastcache.core.logging.logger import get_logger, log_stage
from fastcache.infrastructure.cache.cache_key import derive_cache_key
from fastcache.infrastructure.cache.coordinator import ComputeOrFetch, Computation
from fastcache.infrastructure.cache.operations import ListOperations, MapOperations, SetOperations
from fastcache.infrastructure.lock.lock_manager import Lease, LockManager
from fastcache.infrastructure.store.redis_store import RedisStore

logger = get_logger(__name__)

T = TypeVar("T")


class FastCache:
    """
    Cache-access facade over a Redis store.

    Every key passed in is prefixed with options.prefix before it reaches the
    store. Scalar writes always expire (options.ttl unless overridden).
    """

    @classmethod
    def create(cls, options: CacheOptions | None = None, **overrides: Any) -> "FastCache":
        """
        Build a facade from options, or from environment settings plus overrides.

        Example:
            cache = FastCache.create(prefix="app:", ttl=60)
        """
        if options is None:
            options = CacheOptions.from_settings(get_settings(), **overrides)
        elif overrides:
            options = options.model_copy(update=overrides)
        return cls(options)

    def __init__(self, options: CacheOptions | None = None):
        self._options = options or CacheOptions.from_settings(get_settings())
        self._prefix = self._options.prefix
        self._ttl = self._options.ttl

        self._store = RedisStore(self._options.redis, self._options.create_redis_client)
        self._lock_nodes = [
            RedisStore(node, self._options.create_redis_client) for node in self._options.lock_nodes
        ]
        self._coordinator = ComputeOrFetch(self)
        self._locks: LockManager | None = None
        self._initialized = False

    @property
    def options(self) -> CacheOptions:
        return self._options

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def ttl(self) -> int:
        return self._ttl

    @property
    def store(self) -> KeyValueStore:
        return self._store

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def initialize(self) -> None:
        """
        Open the store connection (and any extra lock nodes).

        STAGE-CACHE.INIT

        Raises:
            CacheConnectionError: If a connection cannot be established
        """
        if self._initialized:
            return

        await self._store.connect()
        for node in self._lock_nodes:
            await node.connect()
        self._initialized = True

        log_stage(
            logger,
            Stage.CACHE_INIT,
            "FastCache initialized",
            host=self._options.redis.host,
            port=self._options.redis.port,
            db=self._options.redis.db,
            prefix=self._prefix,
            ttl=self._ttl,
        )

    async def destroy(self) -> None:
        """
        Close every connection, abandoning in-flight background writes.

        STAGE-CACHE.DESTROY
        """
        abandoned = self._coordinator.cancel_pending()

        await self._store.disconnect()
        for node in self._lock_nodes:
            await node.disconnect()
        self._initialized = False

        log_stage(logger, Stage.CACHE_DESTROY, "FastCache destroyed", abandoned_tasks=abandoned)

    async def __aenter__(self) -> "FastCache":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.destroy()

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    # -------------------------------------------------------------------------
    # Scalar Operations
    # -------------------------------------------------------------------------

    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        """Store value under key; expires after ttl seconds (default: options.ttl)."""
        await self._store.set(self._key(key), value, ex=ttl or self._ttl)

    async def get(self, key: str) -> str | None:
        return await self._store.get(self._key(key))

    async def remove(self, key: str) -> int:
        return await self._store.delete(self._key(key))

    async def set_all(self, mapping: Mapping[str, str], ttl: int | None = None) -> None:
        """Store several keys atomically, each with expiry."""
        await self._store.set_many(
            {self._key(key): value for key, value in mapping.items()},
            ex=ttl or self._ttl,
        )

    async def get_all(self, keys: Sequence[str]) -> list[str | None]:
        """Values for keys, in order; missing keys are None."""
        return await self._store.mget([self._key(key) for key in keys])

    async def remove_all(self, keys: Sequence[str]) -> int:
        return await self._store.delete(*(self._key(key) for key in keys))

    async def flush(self, pattern: str = FLUSH_ALL_PATTERN) -> int:
        """
        Remove keys matching pattern.

        STAGE-CACHE.FLUSH

        The wildcard on an unprefixed cache clears the whole database.
        Otherwise (restricted pattern, or a prefix scoping the namespace) keys
        are scanned in batches of options.flush_scan_count and unlinked batch
        by batch until the scan completes.

        Returns:
            Number of keys unlinked (0 for a whole-database flush)
        """
        if pattern == FLUSH_ALL_PATTERN and not self._prefix:
            await self._store.flushdb()
            log_stage(logger, Stage.CACHE_FLUSH, "Database flushed")
            return 0

        match = self._key(pattern)
        removed = 0
        cursor = 0
        while True:
            cursor, keys = await self._store.scan(cursor, match, self._options.flush_scan_count)
            if keys:
                removed += await self._store.unlink(*keys)
            if cursor == 0:
                break

        log_stage(logger, Stage.CACHE_FLUSH, "Partial flush complete", pattern=match, removed=removed)
        return removed

    # -------------------------------------------------------------------------
    # Collection Operation Groups
    # -------------------------------------------------------------------------

    def list(self, key: str) -> ListOperations:
        return ListOperations(self._store, key, self._key(key))

    def map(self, key: str) -> MapOperations:
        return MapOperations(self._store, key, self._key(key))

    def set_of(self, key: str) -> SetOperations:
        return SetOperations(self._store, key, self._key(key))

    # -------------------------------------------------------------------------
    # Compute-or-Fetch
    # -------------------------------------------------------------------------

    async def with_cache(self, key: str, compute: Computation[T], ttl: int | None = None) -> T:
        """
        Return the cached value for key, or compute it and cache it in the background.

        The write-back is fire-and-forget: a read straight after this call
        returns may still miss. Use drain() to wait for it.

        Args:
            key: Cache key
            compute: Zero-argument callable (sync or async) or an awaitable
            ttl: Expiry override for the cached value

        Raises:
            Whatever compute raises, unchanged
        """
        return await self._coordinator.run(key, compute, ttl)

    async def drain(self) -> None:
        """Wait for pending withCache write-backs and evictions."""
        await self._coordinator.drain()

    @staticmethod
    def cache_key(value: Any) -> str:
        """Deterministic fingerprint (base64 SHA-1) of a structured value."""
        return derive_cache_key(value)

    # -------------------------------------------------------------------------
    # Distributed Locks
    # -------------------------------------------------------------------------

    def turn_on_lock(self, *extra_stores: KeyValueStore) -> LockManager:
        """
        Enable distributed locking.

        Uses the facade's own store plus options.lock_nodes and any extra
        stores given here. More than one node switches to quorum locking.
        """
        stores = [self._store, *self._lock_nodes, *extra_stores]
        self._locks = LockManager(
            stores,
            ttl_ms=self._options.lock_ttl_ms,
            key_prefix=f"{self._prefix}{LOCK_KEY_PREFIX}",
            drift_factor=self._options.lock_drift_factor,
        )
        return self._locks

    @property
    def locks(self) -> LockManager:
        if self._locks is None:
            raise ConfigurationError(
                message="Locking is not enabled; call turn_on_lock() first",
                details={"prefix": self._prefix},
            )
        return self._locks

    async def lock(self, name: str, ttl_ms: int | None = None) -> Lease:
        """Acquire a lease on name. Raises LockContentionError if held elsewhere."""
        return await self.locks.acquire(name, ttl_ms)

    async def unlock(self, lease: Lease) -> bool:
        """Release a lease. Raises LockOwnershipError if it was lost."""
        return await self.locks.release(lease)

    def locked(self, name: str, ttl_ms: int | None = None):
        """Async context manager holding a lease on name."""
        return self.locks.locked(name, ttl_ms)

    # -------------------------------------------------------------------------
    # Monitoring
    # -------------------------------------------------------------------------

    async def health_check(self) -> dict[str, Any]:
        health = {
            "status": "healthy",
            "initialized": self._initialized,
            "prefix": self._prefix,
            "default_ttl": self._ttl,
            "pending_background_tasks": self._coordinator.pending_count,
            "locking_enabled": self._locks is not None,
            "store": await self._store.health_check(),
        }
        if not self._initialized or health["store"].get("status") != "healthy":
            health["status"] = "degraded"
        return health


# =============================================================================
# GLOBAL INSTANCE (SINGLETON PATTERN)
# =============================================================================

_cache: FastCache | None = None


def get_cache() -> FastCache:
    """
    Get the global FastCache instance (singleton), configured from settings.
    """
    global _cache

    if _cache is None:
        _cache = FastCache.create()

    return _cache


async def init_cache() -> FastCache:
    """Initialize and connect the global FastCache."""
    cache = get_cache()
    await cache.initialize()
    return cache


async def close_cache() -> None:
    """Destroy the global FastCache."""
    global _cache

    if _cache:
        await _cache.destroy()
        _cache = None

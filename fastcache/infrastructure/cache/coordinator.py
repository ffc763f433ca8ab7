"""
Compute-or-Fetch Coordinator

Cache-aside with fire-and-forget write-back:

    1. Read key from the store
    2. Hit  -> deserialize and return
    3. Miss -> run the computation, return its value at once, and persist it
               from a background task
    4. Fail -> evict key from a background task, re-raise unchanged

Store and serialization failures on the read, write-back and eviction paths
are logged and never reach the caller: with the store down every call is a
miss, and the computation still runs.

No request coalescing: concurrent callers for one key each compute and the
last write wins. Wrap the call in a distributed lock when that matters.
"""

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Coroutine
from typing import Any, Protocol, TypeVar, Union

from fastcache.core.config.constants import Stage
from fastcache.core.exceptions import CacheError, DeserializationError, SerializationError
from fastcache.core.logging.logger import get_logger, log_stage
from fastcache.infrastructure.cache.serializer import deserialize, serialize

logger = get_logger(__name__)

T = TypeVar("T")

Computation = Union[Callable[[], Awaitable[T]], Callable[[], T], Awaitable[T]]

# Distinguishes "nothing cached" from a cached JSON null
CACHE_MISS_SENTINEL = object()


class ScalarCache(Protocol):
    """Scalar operations the coordinator needs from the facade."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, ttl: int | None = None) -> None: ...

    async def remove(self, key: str) -> int: ...


class ComputeOrFetch:
    """
    Coordinates "return cached value or compute and cache it".

    Background write-back and eviction tasks are tracked until they finish,
    so they can be awaited (drain) or abandoned (cancel_pending).
    """

    def __init__(self, cache: ScalarCache):
        self._cache = cache
        self._pending: set[asyncio.Task] = set()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def run(self, key: str, compute: Computation[T], ttl: int | None = None) -> T:
        """
        Return the cached value for key, or compute, return and persist it.

        Args:
            key: Cache key (facade prefix is applied by the facade)
            compute: Zero-argument callable (sync or async) or an awaitable
            ttl: Expiry override for the write-back, in seconds

        Returns:
            The cached or freshly computed value

        Raises:
            Whatever the computation raises, unchanged
        """
        cached = await self._read(key)
        if cached is not CACHE_MISS_SENTINEL:
            _discard(compute)
            return cached

        try:
            value = await _invoke(compute)
        except Exception:
            self._schedule(self._evict(key))
            raise

        self._schedule(self._persist(key, value, ttl))
        return value

    async def drain(self) -> None:
        """Wait until every scheduled write-back and eviction has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def cancel_pending(self) -> int:
        """Abandon scheduled background work. Returns the number of tasks cancelled."""
        tasks = list(self._pending)
        for task in tasks:
            task.cancel()
        return len(tasks)

    # -------------------------------------------------------------------------
    # Read path
    # -------------------------------------------------------------------------

    async def _read(self, key: str) -> Any:
        try:
            raw = await self._cache.get(key)
        except CacheError as e:
            log_stage(
                logger,
                Stage.CACHE_MISS,
                "Store read failed, computing value",
                level="warning",
                key=key,
                error=str(e),
            )
            return CACHE_MISS_SENTINEL
        except DeserializationError as e:
            return await self._invalidate(key, e)

        if raw is None:
            log_stage(logger, Stage.CACHE_MISS, "withCache miss", level="debug", key=key)
            return CACHE_MISS_SENTINEL

        try:
            value = deserialize(raw)
        except DeserializationError as e:
            return await self._invalidate(key, e)

        log_stage(logger, Stage.CACHE_HIT, "withCache hit", level="debug", key=key)
        return value

    async def _invalidate(self, key: str, error: DeserializationError) -> Any:
        log_stage(
            logger,
            Stage.CACHE_CORRUPT,
            "Cached value is corrupt, invalidating",
            level="warning",
            key=key,
            error=str(error),
        )
        await self._evict(key)
        return CACHE_MISS_SENTINEL

    # -------------------------------------------------------------------------
    # Background work
    # -------------------------------------------------------------------------

    def _schedule(self, work: Coroutine[Any, Any, None]) -> None:
        task = asyncio.create_task(work)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _persist(self, key: str, value: Any, ttl: int | None) -> None:
        try:
            text = serialize(value)
        except SerializationError as e:
            log_stage(
                logger,
                Stage.CACHE_PERSIST,
                "Computed value is not serializable, skipping write-back",
                level="warning",
                key=key,
                error=str(e),
            )
            return

        try:
            await self._cache.set(key, text, ttl)
        except CacheError as e:
            log_stage(logger, Stage.CACHE_PERSIST, "set error", level="warning", key=key, error=str(e))
            return

        log_stage(logger, Stage.CACHE_PERSIST, "set ok", level="debug", key=key)

    async def _evict(self, key: str) -> None:
        try:
            removed = await self._cache.remove(key)
        except CacheError as e:
            log_stage(logger, Stage.CACHE_EVICT, "remove error", level="warning", key=key, error=str(e))
            return

        log_stage(logger, Stage.CACHE_EVICT, "remove ok", level="debug", key=key, removed=removed)


async def _invoke(compute: Computation[T]) -> T:
    if not callable(compute):
        return await compute
    result = compute()
    if inspect.isawaitable(result):
        return await result
    return result


def _discard(compute: Any) -> None:
    # An un-awaited coroutine would warn on garbage collection
    if inspect.iscoroutine(compute):
        compute.close()

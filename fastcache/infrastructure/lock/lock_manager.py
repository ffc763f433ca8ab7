"""
Distributed Lock Manager

Lease-based mutual exclusion on top of the key-value store.

Algorithm (Redlock; a single node is the degenerate case):
1. Generate a random token
2. SET lock-key token NX PX ttl on every node
3. Acquired if a majority of nodes accepted and the remaining validity
   (ttl - elapsed - clock drift) is still positive
4. Otherwise release whatever was taken and raise LockContentionError

Release is a server-side compare-and-delete on the token, so a lease that
expired and was re-acquired by someone else is never deleted by its former
holder.

Limitations:
- No renewal/heartbeat: work that outlives the lease loses exclusivity
- Lease-based, so clock drift and node failure can break exclusivity
"""

import secrets
import time
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass

from fastcache.core.config.constants import (
    DEFAULT_LOCK_TTL_MS,
    LOCK_CLOCK_DRIFT_CONSTANT_MS,
    LOCK_CLOCK_DRIFT_FACTOR,
    LOCK_KEY_PREFIX,
    Stage,
)
from fastcache.core.exceptions import CacheError, LockContentionError, LockOwnershipError
from fastcache.core.interfaces.store import KeyValueStore
from fastcache.core.logging.logger import get_logger, log_stage

logger = get_logger(__name__)


@dataclass(frozen=True)
class Lease:
    """
    Proof of ownership of a named lock, returned by acquire().

    Attributes:
        name: Lock name as given by the caller
        key: Store key holding the token
        token: Random value identifying this holder
        ttl_ms: Requested lease duration
        validity_ms: Time the lease is guaranteed valid after acquired_at
        acquired_at: time.monotonic() when acquisition started
    """

    name: str
    key: str
    token: str
    ttl_ms: int
    validity_ms: int
    acquired_at: float

    @property
    def expires_at(self) -> float:
        """Monotonic time after which the lease must be assumed lost."""
        return self.acquired_at + self.validity_ms / 1000.0

    def is_expired(self) -> bool:
        return time.monotonic() >= self.expires_at


class LockManager:
    """
    Named, TTL-bounded locks across cooperating processes.

    Usage:
        locks = LockManager([store])

        lease = await locks.acquire("report:42")
        try:
            ...
        finally:
            await locks.release(lease)

        async with locks.locked("report:42"):
            ...
    """

    def __init__(
        self,
        stores: Sequence[KeyValueStore],
        ttl_ms: int = DEFAULT_LOCK_TTL_MS,
        key_prefix: str = LOCK_KEY_PREFIX,
        drift_factor: float = LOCK_CLOCK_DRIFT_FACTOR,
    ):
        if not stores:
            raise ValueError("LockManager needs at least one store")
        if ttl_ms <= 0:
            raise ValueError("ttl_ms must be positive")

        self._stores = list(stores)
        self._ttl_ms = ttl_ms
        self._key_prefix = key_prefix
        self._drift_factor = drift_factor
        self._quorum = len(self._stores) // 2 + 1

    @property
    def quorum(self) -> int:
        return self._quorum

    @property
    def default_ttl_ms(self) -> int:
        return self._ttl_ms

    def lock_key(self, name: str) -> str:
        return f"{self._key_prefix}{name}"

    async def acquire(self, name: str, ttl_ms: int | None = None) -> Lease:
        """
        Acquire a lease on name.

        STAGE-LOCK.ACQUIRE

        Args:
            name: Lock name
            ttl_ms: Lease duration in milliseconds (default: manager default)

        Returns:
            Lease proving ownership

        Raises:
            LockContentionError: If the lock is held elsewhere or no quorum
                could be reached in time
        """
        ttl_ms = ttl_ms or self._ttl_ms
        key = self.lock_key(name)
        token = secrets.token_hex(16)

        started = time.monotonic()
        acquired = 0
        for store in self._stores:
            if await self._try_set(store, key, token, ttl_ms):
                acquired += 1

        elapsed_ms = (time.monotonic() - started) * 1000
        drift_ms = ttl_ms * self._drift_factor + LOCK_CLOCK_DRIFT_CONSTANT_MS
        validity_ms = int(ttl_ms - elapsed_ms - drift_ms)

        if acquired >= self._quorum and validity_ms > 0:
            log_stage(
                logger,
                Stage.LOCK_ACQUIRE,
                "Lock acquired",
                level="debug",
                lock=name,
                ttl_ms=ttl_ms,
                validity_ms=validity_ms,
            )
            return Lease(
                name=name,
                key=key,
                token=token,
                ttl_ms=ttl_ms,
                validity_ms=validity_ms,
                acquired_at=started,
            )

        await self._release_all(key, token)

        log_stage(
            logger,
            Stage.LOCK_CONTENTION,
            "Lock is held elsewhere",
            level="info",
            lock=name,
            acquired_nodes=acquired,
            quorum=self._quorum,
        )
        raise LockContentionError(
            message=f"Lock '{name}' is already held",
            details={
                "lock": name,
                "acquired_nodes": acquired,
                "quorum": self._quorum,
                "validity_ms": validity_ms,
            },
        )

    async def release(self, lease: Lease) -> bool:
        """
        Release a lease, only if its token still owns the lock.

        STAGE-LOCK.RELEASE

        Returns:
            True when the lease was released on at least one node

        Raises:
            LockOwnershipError: If no node still held the lease's token
            CacheError: If every node failed to answer
        """
        released = 0
        failures: list[CacheError] = []

        for store in self._stores:
            try:
                if await store.compare_and_delete(lease.key, lease.token):
                    released += 1
            except CacheError as e:
                failures.append(e)
                log_stage(
                    logger,
                    Stage.LOCK_RELEASE,
                    "Lock release failed on node",
                    level="warning",
                    lock=lease.name,
                    error=str(e),
                )

        if failures and len(failures) == len(self._stores):
            raise failures[-1]

        if released == 0:
            log_stage(
                logger,
                Stage.LOCK_RELEASE,
                "Lease no longer owned",
                level="warning",
                lock=lease.name,
            )
            raise LockOwnershipError(
                message=f"Lease on '{lease.name}' is no longer owned (expired or taken over)",
                details={"lock": lease.name, "ttl_ms": lease.ttl_ms},
            )

        log_stage(logger, Stage.LOCK_RELEASE, "Lock released", level="debug", lock=lease.name)
        return True

    @asynccontextmanager
    async def locked(self, name: str, ttl_ms: int | None = None) -> AsyncIterator[Lease]:
        """
        Hold a lease for the duration of the block.

        Raises LockContentionError on entry; release errors propagate on exit.
        """
        lease = await self.acquire(name, ttl_ms)
        try:
            yield lease
        finally:
            await self.release(lease)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    async def _try_set(self, store: KeyValueStore, key: str, token: str, ttl_ms: int) -> bool:
        try:
            return await store.set(key, token, px=ttl_ms, nx=True)
        except CacheError as e:
            # A single unreachable node only reduces the vote count
            if len(self._stores) == 1:
                raise
            log_stage(
                logger,
                Stage.LOCK_ACQUIRE,
                "Lock node unavailable",
                level="warning",
                key=key,
                error=str(e),
            )
            return False

    async def _release_all(self, key: str, token: str) -> None:
        for store in self._stores:
            try:
                await store.compare_and_delete(key, token)
            except CacheError as e:
                log_stage(
                    logger,
                    Stage.LOCK_RELEASE,
                    "Partial lock cleanup failed",
                    level="warning",
                    key=key,
                    error=str(e),
                )

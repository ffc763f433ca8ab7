"""
Key-Value Store Protocol

Explicit command surface of the store adapter. Every command the facade and
the lock manager rely on is a named coroutine here, so the surface can be
checked statically and substituted in tests.

Architectural Decision: Protocol-based abstraction
- Facilitates testing with in-memory implementations
- Follows dependency inversion principle
- Type-safe interface with runtime checking
"""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """
    Protocol defining the store commands used by fastcache.

    Implementations:
    - RedisStore: redis.asyncio-backed adapter

    All commands raise CacheConnectionError when the store is unreachable and
    CacheKeyError when the store rejects the command.
    """

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def connect(self) -> None:
        """Open the connection. Raises CacheConnectionError on failure."""
        ...

    async def disconnect(self) -> None:
        """Close the connection, abandoning in-flight commands."""
        ...

    async def ping(self) -> bool:
        """Return True if the store answers PING."""
        ...

    async def health_check(self) -> dict[str, Any]:
        """Return health status and connection metrics."""
        ...

    # -------------------------------------------------------------------------
    # Scalar
    # -------------------------------------------------------------------------

    async def get(self, key: str) -> str | None:
        ...

    async def set(
        self,
        key: str,
        value: str,
        ex: int | None = None,
        px: int | None = None,
        nx: bool = False,
    ) -> bool:
        """
        SET with optional expiry.

        Returns:
            True if written; False when nx=True and the key already existed
        """
        ...

    async def delete(self, *keys: str) -> int:
        ...

    async def mget(self, keys: Sequence[str]) -> list[str | None]:
        ...

    async def set_many(self, mapping: Mapping[str, str], ex: int) -> None:
        """Write several keys with the same expiry in one MULTI/EXEC."""
        ...

    # -------------------------------------------------------------------------
    # Keyspace
    # -------------------------------------------------------------------------

    async def scan(self, cursor: int, match: str, count: int) -> tuple[int, list[str]]:
        ...

    async def unlink(self, *keys: str) -> int:
        ...

    async def flushdb(self) -> None:
        """Clear the selected database asynchronously on the server."""
        ...

    # -------------------------------------------------------------------------
    # List
    # -------------------------------------------------------------------------

    async def rpush(self, key: str, *values: str) -> int:
        ...

    async def lpush(self, key: str, *values: str) -> int:
        ...

    async def rpop(self, key: str) -> str | None:
        ...

    async def lpop(self, key: str) -> str | None:
        ...

    async def lrange(self, key: str, start: int, stop: int) -> list[str]:
        ...

    async def ltrim(self, key: str, start: int, stop: int) -> bool:
        ...

    async def llen(self, key: str) -> int:
        ...

    async def replace_list(self, key: str, values: Sequence[str]) -> None:
        """Atomically replace the list contents, preserving order."""
        ...

    # -------------------------------------------------------------------------
    # Hash
    # -------------------------------------------------------------------------

    async def hset(self, name: str, field: str, value: str) -> int:
        ...

    async def hset_many(self, name: str, mapping: Mapping[str, str]) -> int:
        ...

    async def hget(self, name: str, field: str) -> str | None:
        ...

    async def hmget(self, name: str, fields: Sequence[str]) -> list[str | None]:
        ...

    async def hdel(self, name: str, *fields: str) -> int:
        ...

    async def hlen(self, name: str) -> int:
        ...

    # -------------------------------------------------------------------------
    # Set
    # -------------------------------------------------------------------------

    async def sadd(self, key: str, *values: str) -> int:
        ...

    async def srem(self, key: str, *values: str) -> int:
        ...

    async def sismember(self, key: str, value: str) -> bool:
        ...

    async def scard(self, key: str) -> int:
        ...

    # -------------------------------------------------------------------------
    # Lease primitive
    # -------------------------------------------------------------------------

    async def compare_and_delete(self, key: str, token: str) -> bool:
        """
        Delete key only if its value equals token (atomic, server-side).

        Returns:
            True if the key was deleted
        """
        ...

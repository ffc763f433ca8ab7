"""
Collection Operation Groups

Thin views over one store key, returned by FastCache.list(), FastCache.map()
and FastCache.set_of(). Each method maps 1:1 onto a store command; collection
writes carry no expiry.

`key` is the caller's key; commands are issued against the prefixed store key.
"""

from collections.abc import Mapping, Sequence

from fastcache.core.interfaces.store import KeyValueStore


class _KeyView:
    def __init__(self, store: KeyValueStore, key: str, store_key: str):
        self._store = store
        self.key = key
        self._store_key = store_key

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(key={self.key!r})"


class ListOperations(_KeyView):
    """
    List (queue/deque) operations on one key.

    push/pop work on the tail, unshift/shift on the head:

        await ops.unshift("one")
        await ops.push("two")
        await ops.get_all()   # ["one", "two"]
    """

    async def push(self, value: str) -> int:
        """Append to the tail. Returns the new length."""
        return await self._store.rpush(self._store_key, value)

    async def pop(self) -> str | None:
        """Remove and return the last element (None if empty)."""
        return await self._store.rpop(self._store_key)

    async def unshift(self, value: str) -> int:
        """Prepend to the head. Returns the new length."""
        return await self._store.lpush(self._store_key, value)

    async def shift(self) -> str | None:
        """Remove and return the first element (None if empty)."""
        return await self._store.lpop(self._store_key)

    async def set_all(self, values: Sequence[str]) -> None:
        """Replace the list contents with values, in order."""
        await self._store.replace_list(self._store_key, list(values))

    async def get_all(self, start: int = 0, stop: int = -1) -> list[str]:
        """Elements from start to stop inclusive (negative indexes count from the tail)."""
        return await self._store.lrange(self._store_key, start, stop)

    async def remove_all(self, start: int = 1, stop: int = 0) -> None:
        """
        Trim the list to [start, stop].

        The defaults select an empty range for any length, which removes
        every element.
        """
        await self._store.ltrim(self._store_key, start, stop)

    async def length(self) -> int:
        return await self._store.llen(self._store_key)


class MapOperations(_KeyView):
    """Hash operations on one key."""

    async def set(self, field: str, value: str) -> int:
        return await self._store.hset(self._store_key, field, value)

    async def get(self, field: str) -> str | None:
        return await self._store.hget(self._store_key, field)

    async def remove(self, field: str) -> int:
        return await self._store.hdel(self._store_key, field)

    async def set_all(self, mapping: Mapping[str, str]) -> int:
        return await self._store.hset_many(self._store_key, mapping)

    async def get_all(self, fields: Sequence[str]) -> list[str | None]:
        """Values for fields, in order; missing fields are None."""
        return await self._store.hmget(self._store_key, fields)

    async def remove_all(self, fields: Sequence[str]) -> int:
        return await self._store.hdel(self._store_key, *fields)

    async def length(self) -> int:
        return await self._store.hlen(self._store_key)


class SetOperations(_KeyView):
    """Set operations on one key."""

    async def add(self, *values: str) -> int:
        return await self._store.sadd(self._store_key, *values)

    async def remove(self, *values: str) -> int:
        return await self._store.srem(self._store_key, *values)

    async def contains(self, value: str) -> bool:
        return await self._store.sismember(self._store_key, value)

    async def length(self) -> int:
        return await self._store.scard(self._store_key)

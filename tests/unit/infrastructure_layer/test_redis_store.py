"""
Unit Tests for the Redis Store Adapter

Tests connection lifecycle, command delegation and error mapping.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError, ResponseError, TimeoutError

from fastcache.core.config.options import RedisOptions
from fastcache.core.exceptions import CacheConnectionError, CacheKeyError, DeserializationError
from fastcache.core.interfaces.store import KeyValueStore
from fastcache.infrastructure.store.redis_store import ConnectionManager, RedisStore
from tests.test_fixtures import StoreTestFactory


@pytest.mark.unit
class TestConnectionManager:
    """Test connection lifecycle."""

    async def test_connect_uses_client_factory(self, fake_redis):
        factory = MagicMock(return_value=fake_redis)
        options = RedisOptions(host="cache.internal")
        manager = ConnectionManager(options, factory)

        client = await manager.connect()

        assert client is fake_redis
        factory.assert_called_once_with(options)
        assert manager.is_connected()
        assert manager.get_pool() is None

    async def test_connect_is_idempotent(self, fake_redis):
        factory = MagicMock(return_value=fake_redis)
        manager = ConnectionManager(RedisOptions(), factory)

        await manager.connect()
        await manager.connect()

        factory.assert_called_once()

    async def test_connect_failure_raises_connection_error(self, fake_redis):
        fake_redis.down = True
        manager = ConnectionManager(RedisOptions(port=6390), StoreTestFactory.client_factory(fake_redis))

        with pytest.raises(CacheConnectionError) as exc_info:
            await manager.connect()

        assert exc_info.value.details["port"] == 6390
        assert not manager.is_connected()

    async def test_failed_connect_closes_client_each_attempt(self):
        client = StoreTestFactory.failing_redis_client()
        client.ping = AsyncMock(side_effect=ConnectionError("Connection refused"))
        factory = MagicMock(return_value=client)
        manager = ConnectionManager(RedisOptions(), factory)

        for _ in range(2):
            with pytest.raises(CacheConnectionError):
                await manager.connect()

        assert factory.call_count == 2
        assert client.aclose.await_count == 2
        assert manager.get_client() is None
        assert not manager.is_connected()

    async def test_response_error_on_connect_maps_to_connection_error(self):
        client = StoreTestFactory.failing_redis_client()
        client.ping = AsyncMock(side_effect=ResponseError("NOAUTH Authentication required."))
        manager = ConnectionManager(RedisOptions(), StoreTestFactory.client_factory(client))

        with pytest.raises(CacheConnectionError) as exc_info:
            await manager.connect()

        assert isinstance(exc_info.value.__cause__, ResponseError)
        client.aclose.assert_awaited_once()
        assert manager.get_client() is None

    async def test_connect_succeeds_after_failed_attempt(self, fake_redis):
        fake_redis.down = True
        manager = ConnectionManager(RedisOptions(), StoreTestFactory.client_factory(fake_redis))

        with pytest.raises(CacheConnectionError):
            await manager.connect()

        fake_redis.down = False
        assert await manager.connect() is fake_redis
        assert manager.is_connected()

    async def test_disconnect_closes_client(self, fake_redis):
        manager = ConnectionManager(RedisOptions(), StoreTestFactory.client_factory(fake_redis))
        await manager.connect()

        await manager.disconnect()

        assert fake_redis.closed
        assert not manager.is_connected()
        assert manager.get_client() is None

    async def test_ping_reports_outage(self, fake_redis):
        manager = ConnectionManager(RedisOptions(), StoreTestFactory.client_factory(fake_redis))
        await manager.connect()
        assert await manager.ping() is True

        fake_redis.down = True
        assert await manager.ping() is False


@pytest.mark.unit
class TestRedisStore:
    """Test the public store adapter."""

    def test_implements_store_protocol(self):
        assert isinstance(RedisStore(), KeyValueStore)

    async def test_command_before_connect_raises(self):
        store = RedisStore()

        with pytest.raises(CacheConnectionError):
            await store.get("foo")

    async def test_command_after_disconnect_raises(self, fake_redis):
        store = await StoreTestFactory.connected_store(fake_redis)
        await store.disconnect()

        with pytest.raises(CacheConnectionError):
            await store.set("foo", "bar", ex=10)

    async def test_set_and_get(self, store):
        assert await store.set("foo", "bar", ex=10) is True
        assert await store.get("foo") == "bar"

    async def test_set_nx_refuses_existing_key(self, store):
        assert await store.set("lock", "a", px=1000, nx=True) is True
        assert await store.set("lock", "b", px=1000, nx=True) is False
        assert await store.get("lock") == "a"

    async def test_set_many_applies_expiry_to_each_key(self, store, fake_redis):
        await store.set_many({"a": "1", "b": "2"}, ex=5)

        assert await store.mget(["a", "b", "c"]) == ["1", "2", None]
        fake_redis.advance(6)
        assert await store.mget(["a", "b"]) == [None, None]

    async def test_empty_bulk_commands_skip_the_store(self, store, fake_redis):
        fake_redis.commands.clear()

        assert await store.delete() == 0
        assert await store.mget([]) == []
        assert await store.unlink() == 0
        assert await store.hmget("h", []) == []
        await store.set_many({}, ex=5)

        assert fake_redis.commands == []

    async def test_replace_list_is_ordered(self, store):
        await store.rpush("l", "old")

        await store.replace_list("l", ["a", "b", "c"])

        assert await store.lrange("l", 0, -1) == ["a", "b", "c"]

    async def test_replace_list_with_nothing_empties(self, store):
        await store.rpush("l", "old")

        await store.replace_list("l", [])

        assert await store.llen("l") == 0

    async def test_scan_returns_int_cursor(self, store):
        for i in range(5):
            await store.set(f"k{i}", "v", ex=10)

        cursor, keys = await store.scan(0, "k*", 2)

        assert isinstance(cursor, int)
        assert cursor != 0
        assert len(keys) == 2

    async def test_compare_and_delete_checks_token(self, store):
        await store.set("lock:a", "token-1", px=1000)

        assert await store.compare_and_delete("lock:a", "token-2") is False
        assert await store.get("lock:a") == "token-1"
        assert await store.compare_and_delete("lock:a", "token-1") is True
        assert await store.get("lock:a") is None

    async def test_health_check_when_connected(self, store):
        health = await store.health_check()

        assert health["status"] == "healthy"
        assert health["connected"] is True
        assert health["ping_latency_ms"] is not None

    async def test_health_check_when_not_connected(self):
        health = await RedisStore().health_check()

        assert health["status"] == "unhealthy"
        assert health["error"] == "Client not initialized"


@pytest.mark.unit
class TestErrorMapping:
    """Test that redis-py errors surface as cache errors."""

    async def test_connection_error_maps_to_cache_connection_error(self, failing_redis):
        store = RedisStore(RedisOptions(), StoreTestFactory.client_factory(failing_redis))
        await store.connect()

        with pytest.raises(CacheConnectionError) as exc_info:
            await store.get("foo")

        assert exc_info.value.details == {"command": "GET", "key": "foo"}
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    async def test_timeout_maps_to_cache_connection_error(self):
        client = StoreTestFactory.failing_redis_client(TimeoutError("Timeout reading from socket"))
        store = RedisStore(RedisOptions(), StoreTestFactory.client_factory(client))
        await store.connect()

        with pytest.raises(CacheConnectionError):
            await store.lpush("l", "x")

    async def test_response_error_maps_to_cache_key_error(self):
        client = StoreTestFactory.failing_redis_client(ResponseError("ERR wrong number of arguments"))
        store = RedisStore(RedisOptions(), StoreTestFactory.client_factory(client))
        await store.connect()

        with pytest.raises(CacheKeyError) as exc_info:
            await store.hset("h", "f", "v")

        assert exc_info.value.details["command"] == "HSET"

    async def test_wrong_type_maps_to_cache_key_error(self, store):
        await store.set("scalar", "v", ex=10)

        with pytest.raises(CacheKeyError):
            await store.rpush("scalar", "x")

    async def test_undecodable_value_maps_to_deserialization_error(self, store, fake_redis):
        fake_redis.data["blob"] = b"\xff\xfe\xfd"

        with pytest.raises(DeserializationError) as exc_info:
            await store.get("blob")

        assert exc_info.value.details == {"command": "GET", "key": "blob"}
        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)

    async def test_release_script_errors_are_mapped(self, failing_redis):
        store = RedisStore(RedisOptions(), StoreTestFactory.client_factory(failing_redis))
        await store.connect()

        with pytest.raises(CacheConnectionError):
            await store.compare_and_delete("lock:a", "token")

    async def test_transaction_errors_are_mapped(self):
        client = StoreTestFactory.failing_redis_client()
        pipe = MagicMock()
        pipe.__aenter__ = AsyncMock(return_value=pipe)
        pipe.__aexit__ = AsyncMock(return_value=None)
        pipe.execute = AsyncMock(side_effect=ConnectionError("Connection closed by server"))
        client.pipeline = MagicMock(return_value=pipe)

        store = RedisStore(RedisOptions(), StoreTestFactory.client_factory(client))
        await store.connect()

        with pytest.raises(CacheConnectionError):
            await store.set_many({"a": "1"}, ex=5)

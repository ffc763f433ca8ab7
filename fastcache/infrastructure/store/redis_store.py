"""
Redis Store Adapter

Architecture:
    RedisStore (Public API, implements KeyValueStore)
        ├── ConnectionManager (Connection lifecycle)
        ├── OperationExecutor (Command execution with error handling)
        └── HealthMonitor (Health checks and metrics)

Every command is an explicit coroutine returning a plain result. Store
failures surface as CacheConnectionError (unreachable / dropped) or
CacheKeyError (command rejected); a reply that is not valid UTF-8 surfaces
as DeserializationError. Nothing is retried here.
"""

import time
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any

import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool
from redis.exceptions import ConnectionError, RedisError, TimeoutError

from fastcache.core.config.constants import POOL_UTILIZATION_WARNING_PCT, Stage
from fastcache.core.config.options import RedisOptions
from fastcache.core.exceptions import CacheConnectionError, CacheKeyError, DeserializationError
from fastcache.core.logging.logger import get_logger, log_stage

logger = get_logger(__name__)

ClientFactory = Callable[[RedisOptions], Any]


# =============================================================================
# LAYER 1: CONNECTION MANAGEMENT
# Handles connection lifecycle and pooling
# =============================================================================


class ConnectionManager:
    """
    Manages Redis connection lifecycle and pooling.

    Responsibility: Connection establishment, pooling, and cleanup.

    A custom client factory replaces the built-in pool entirely; the factory
    owns whatever pooling the returned client does.
    """

    def __init__(self, options: RedisOptions, client_factory: ClientFactory | None = None):
        self._options = options
        self._client_factory = client_factory
        self._pool: ConnectionPool | None = None
        self._client: redis.Redis | None = None
        self._is_connected = False

    async def connect(self) -> redis.Redis:
        """
        Establish connection to Redis.

        STAGE-STORE.CONNECT

        Creates a connection pool (or calls the client factory) and verifies
        the connection with PING.

        Returns:
            Connected Redis client

        Raises:
            CacheConnectionError: If connection fails
        """
        if self._is_connected and self._client:
            return self._client

        try:
            if self._client_factory is not None:
                self._client = self._client_factory(self._options)
            else:
                self._pool = ConnectionPool(
                    host=self._options.host,
                    port=self._options.port,
                    db=self._options.db,
                    password=self._options.password,
                    max_connections=self._options.max_connections,
                    socket_connect_timeout=self._options.socket_connect_timeout,
                    socket_timeout=self._options.socket_timeout,
                    health_check_interval=self._options.health_check_interval,
                    decode_responses=True,  # Return strings instead of bytes
                )
                self._client = redis.Redis(connection_pool=self._pool)

            # Verify the connection is actually working
            await self._client.ping()

            self._is_connected = True

            log_stage(
                logger,
                Stage.STORE_CONNECT,
                "Redis connected",
                host=self._options.host,
                port=self._options.port,
                db=self._options.db,
            )

            return self._client

        except (RedisError, OSError) as e:
            log_stage(logger, Stage.STORE_CONNECT, "Failed to connect to Redis", level="error", error=str(e))
            await self._discard_client()
            raise CacheConnectionError(
                message=f"Failed to connect to Redis: {e}",
                details={
                    "host": self._options.host,
                    "port": self._options.port,
                    "db": self._options.db,
                },
            ) from e

    async def _discard_client(self) -> None:
        # Release what a failed connect() built so a retry starts clean
        client, pool = self._client, self._pool
        self._client = None
        self._pool = None
        self._is_connected = False

        try:
            if client:
                await client.aclose()
            if pool:
                await pool.disconnect()
        except (RedisError, OSError) as e:
            log_stage(
                logger,
                Stage.STORE_DISCONNECT,
                "Cleanup after failed connect failed",
                level="warning",
                error=str(e),
            )

    async def disconnect(self) -> None:
        """
        Close Redis client and pool.

        STAGE-STORE.DISCONNECT
        """
        if self._client:
            await self._client.aclose()

        if self._pool:
            await self._pool.disconnect()

        self._client = None
        self._pool = None
        self._is_connected = False

        log_stage(logger, Stage.STORE_DISCONNECT, "Redis disconnected")

    async def ping(self) -> bool:
        try:
            if self._client and self._is_connected:
                await self._client.ping()
                return True
        except (ConnectionError, TimeoutError):
            pass
        return False

    def get_client(self) -> redis.Redis | None:
        return self._client

    def get_pool(self) -> ConnectionPool | None:
        return self._pool

    def is_connected(self) -> bool:
        return self._is_connected


# =============================================================================
# LAYER 2: OPERATION EXECUTOR
# Executes Redis commands with error handling and logging
# =============================================================================


class OperationExecutor:
    """
    Executes Redis operations with consistent error handling.

    Error Handling Strategy:
    - Connection / timeout errors -> CacheConnectionError
    - Any other RedisError -> CacheKeyError
    - Reply bytes that are not UTF-8 -> DeserializationError
    - Both are logged with the command name and key context
    """

    # Atomic check-and-delete used to release a lease only by its owner
    RELEASE_SCRIPT = """
    if redis.call('get', KEYS[1]) == ARGV[1] then
        return redis.call('del', KEYS[1])
    else
        return 0
    end
    """

    def __init__(self, redis_client: redis.Redis):
        self._redis = redis_client
        self._release_script = redis_client.register_script(self.RELEASE_SCRIPT)

    async def _run(self, command: str, pending: Awaitable[Any], **context: Any) -> Any:
        try:
            return await pending
        except (ConnectionError, TimeoutError) as e:
            log_stage(
                logger,
                Stage.STORE_COMMAND,
                f"Redis {command} failed: connection error",
                level="error",
                command=command,
                error=str(e),
                **context,
            )
            raise CacheConnectionError(
                message=f"Redis {command} failed: {e}",
                details={"command": command, **context},
            ) from e
        except RedisError as e:
            log_stage(
                logger,
                Stage.STORE_COMMAND,
                f"Redis {command} failed",
                level="error",
                command=command,
                error=str(e),
                **context,
            )
            raise CacheKeyError(
                message=f"Redis {command} failed: {e}",
                details={"command": command, **context},
            ) from e
        except UnicodeDecodeError as e:
            # decode_responses=True: a stored value that is not UTF-8 fails in the parser
            log_stage(
                logger,
                Stage.STORE_COMMAND,
                f"Redis {command} returned undecodable data",
                level="warning",
                command=command,
                error=str(e),
                **context,
            )
            raise DeserializationError(
                message=f"Redis {command} returned data that is not valid UTF-8: {e}",
                details={"command": command, **context},
            ) from e

    # -------------------------------------------------------------------------
    # Scalar Operations
    # -------------------------------------------------------------------------

    async def get(self, key: str) -> str | None:
        return await self._run("GET", self._redis.get(key), key=key)

    async def set(
        self,
        key: str,
        value: str,
        ex: int | None = None,
        px: int | None = None,
        nx: bool = False,
    ) -> bool:
        """
        Set value in Redis.

        Args:
            key: Redis key
            value: Value to set
            ex: Expiry in seconds
            px: Expiry in milliseconds
            nx: Only set if key doesn't exist (SET NX)

        Returns:
            True if set; False if nx prevented the write
        """
        result = await self._run("SET", self._redis.set(key, value, ex=ex, px=px, nx=nx), key=key)
        return bool(result)

    async def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        return await self._run("DEL", self._redis.delete(*keys), keys=list(keys))

    async def mget(self, keys: Sequence[str]) -> list[str | None]:
        if not keys:
            return []
        return await self._run("MGET", self._redis.mget(list(keys)), keys=list(keys))

    async def set_many(self, mapping: Mapping[str, str], ex: int) -> None:
        """
        Write several keys with expiry in one transaction.

        MSET has no expiry option, so each key is a SET EX inside MULTI/EXEC.
        """
        if not mapping:
            return

        async def _transaction() -> None:
            async with self._redis.pipeline(transaction=True) as pipe:
                for key, value in mapping.items():
                    pipe.set(key, value, ex=ex)
                await pipe.execute()

        await self._run("MULTI/EXEC SET", _transaction(), keys=list(mapping))

    # -------------------------------------------------------------------------
    # Keyspace Operations
    # -------------------------------------------------------------------------

    async def scan(self, cursor: int, match: str, count: int) -> tuple[int, list[str]]:
        next_cursor, keys = await self._run(
            "SCAN", self._redis.scan(cursor=cursor, match=match, count=count), match=match
        )
        return int(next_cursor), list(keys)

    async def unlink(self, *keys: str) -> int:
        if not keys:
            return 0
        return await self._run("UNLINK", self._redis.unlink(*keys), keys=list(keys))

    async def flushdb(self) -> None:
        await self._run("FLUSHDB", self._redis.flushdb(asynchronous=True))

    # -------------------------------------------------------------------------
    # List Operations
    # -------------------------------------------------------------------------

    async def rpush(self, key: str, *values: str) -> int:
        return await self._run("RPUSH", self._redis.rpush(key, *values), key=key)

    async def lpush(self, key: str, *values: str) -> int:
        return await self._run("LPUSH", self._redis.lpush(key, *values), key=key)

    async def rpop(self, key: str) -> str | None:
        return await self._run("RPOP", self._redis.rpop(key), key=key)

    async def lpop(self, key: str) -> str | None:
        return await self._run("LPOP", self._redis.lpop(key), key=key)

    async def lrange(self, key: str, start: int, stop: int) -> list[str]:
        return await self._run("LRANGE", self._redis.lrange(key, start, stop), key=key)

    async def ltrim(self, key: str, start: int, stop: int) -> bool:
        return bool(await self._run("LTRIM", self._redis.ltrim(key, start, stop), key=key))

    async def llen(self, key: str) -> int:
        return await self._run("LLEN", self._redis.llen(key), key=key)

    async def replace_list(self, key: str, values: Sequence[str]) -> None:
        async def _transaction() -> None:
            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.delete(key)
                if values:
                    pipe.rpush(key, *values)
                await pipe.execute()

        await self._run("MULTI/EXEC RPUSH", _transaction(), key=key)

    # -------------------------------------------------------------------------
    # Hash Operations
    # -------------------------------------------------------------------------

    async def hset(self, name: str, field: str, value: str) -> int:
        return await self._run("HSET", self._redis.hset(name, field, value), name=name, field=field)

    async def hset_many(self, name: str, mapping: Mapping[str, str]) -> int:
        if not mapping:
            return 0
        return await self._run("HSET", self._redis.hset(name, mapping=dict(mapping)), name=name)

    async def hget(self, name: str, field: str) -> str | None:
        return await self._run("HGET", self._redis.hget(name, field), name=name, field=field)

    async def hmget(self, name: str, fields: Sequence[str]) -> list[str | None]:
        if not fields:
            return []
        return await self._run("HMGET", self._redis.hmget(name, list(fields)), name=name)

    async def hdel(self, name: str, *fields: str) -> int:
        if not fields:
            return 0
        return await self._run("HDEL", self._redis.hdel(name, *fields), name=name, fields=list(fields))

    async def hlen(self, name: str) -> int:
        return await self._run("HLEN", self._redis.hlen(name), name=name)

    # -------------------------------------------------------------------------
    # Set Operations
    # -------------------------------------------------------------------------

    async def sadd(self, key: str, *values: str) -> int:
        if not values:
            return 0
        return await self._run("SADD", self._redis.sadd(key, *values), key=key)

    async def srem(self, key: str, *values: str) -> int:
        if not values:
            return 0
        return await self._run("SREM", self._redis.srem(key, *values), key=key)

    async def sismember(self, key: str, value: str) -> bool:
        return bool(await self._run("SISMEMBER", self._redis.sismember(key, value), key=key))

    async def scard(self, key: str) -> int:
        return await self._run("SCARD", self._redis.scard(key), key=key)

    # -------------------------------------------------------------------------
    # Lease Primitive
    # -------------------------------------------------------------------------

    async def compare_and_delete(self, key: str, token: str) -> bool:
        deleted = await self._run(
            "EVALSHA release", self._release_script(keys=[key], args=[token]), key=key
        )
        return bool(deleted)


# =============================================================================
# LAYER 3: HEALTH MONITORING
# Health checks and connection pool metrics
# =============================================================================


class HealthMonitor:
    """
    Monitors Redis health and connection pool metrics.

    Metrics Tracked:
    - Connection status
    - Ping latency
    - Pool size and utilization
    - Pool exhaustion warnings (>80% utilized)
    """

    def __init__(self, connection_manager: ConnectionManager, options: RedisOptions):
        self._conn_mgr = connection_manager
        self._options = options

    async def health_check(self) -> dict[str, Any]:
        """
        Perform health check on Redis connection.

        STAGE-STORE.HEALTH

        Returns:
            Dict with health status and metrics
        """
        health = {
            "status": "healthy",
            "connected": self._conn_mgr.is_connected(),
            "host": self._options.host,
            "port": self._options.port,
            "pool_size": 0,
            "pool_available": 0,
            "pool_utilization_pct": 0,
            "pool_warning": False,
            "ping_latency_ms": None,
        }

        try:
            client = self._conn_mgr.get_client()
            if not client:
                health["status"] = "unhealthy"
                health["error"] = "Client not initialized"
                return health

            start = time.perf_counter()
            await client.ping()
            latency = (time.perf_counter() - start) * 1000

            health["ping_latency_ms"] = round(latency, 2)

            pool = self._conn_mgr.get_pool()
            if pool:
                health["pool_size"] = pool.max_connections

                if hasattr(pool, "_available_connections"):
                    available = len(pool._available_connections)
                    health["pool_available"] = available

                    utilization = 100.0 * (
                        (pool.max_connections - available) / pool.max_connections
                    )
                    health["pool_utilization_pct"] = round(utilization, 1)

                    if utilization > POOL_UTILIZATION_WARNING_PCT:
                        health["pool_warning"] = True
                        log_stage(
                            logger,
                            Stage.STORE_HEALTH,
                            "Redis pool utilization high",
                            level="warning",
                            pool_utilization=utilization,
                            max_connections=pool.max_connections,
                        )

        except (RedisError, OSError) as e:
            health["status"] = "unhealthy"
            health["error"] = str(e)

        return health


# =============================================================================
# LAYER 4: PUBLIC API
# Clean interface that coordinates all layers
# =============================================================================


class RedisStore:
    """
    Async Redis adapter implementing the KeyValueStore protocol.

    Usage:
        store = RedisStore(RedisOptions(host="localhost"))
        await store.connect()

        await store.set("key", "value", ex=300)
        value = await store.get("key")

        await store.disconnect()

    Architecture:
        RedisStore (this class)
            ├── ConnectionManager (connection lifecycle)
            ├── OperationExecutor (command execution)
            └── HealthMonitor (health checks)
    """

    def __init__(self, options: RedisOptions | None = None, client_factory: ClientFactory | None = None):
        self._options = options or RedisOptions()
        self._conn_mgr = ConnectionManager(self._options, client_factory)
        self._executor: OperationExecutor | None = None
        self._health_monitor = HealthMonitor(self._conn_mgr, self._options)

    @property
    def options(self) -> RedisOptions:
        return self._options

    async def connect(self) -> None:
        """
        Establish connection to Redis.

        Raises:
            CacheConnectionError: If connection fails
        """
        client = await self._conn_mgr.connect()
        self._executor = OperationExecutor(client)

    async def disconnect(self) -> None:
        await self._conn_mgr.disconnect()
        self._executor = None

    async def ping(self) -> bool:
        return await self._conn_mgr.ping()

    def is_connected(self) -> bool:
        return self._conn_mgr.is_connected()

    async def health_check(self) -> dict[str, Any]:
        return await self._health_monitor.health_check()

    @property
    def _ops(self) -> OperationExecutor:
        if self._executor is None:
            raise CacheConnectionError(
                message="Redis store is not connected",
                details={"host": self._options.host, "port": self._options.port},
            )
        return self._executor

    # -------------------------------------------------------------------------
    # Delegate to OperationExecutor
    # -------------------------------------------------------------------------

    async def get(self, key: str) -> str | None:
        return await self._ops.get(key)

    async def set(
        self,
        key: str,
        value: str,
        ex: int | None = None,
        px: int | None = None,
        nx: bool = False,
    ) -> bool:
        return await self._ops.set(key, value, ex=ex, px=px, nx=nx)

    async def delete(self, *keys: str) -> int:
        return await self._ops.delete(*keys)

    async def mget(self, keys: Sequence[str]) -> list[str | None]:
        return await self._ops.mget(keys)

    async def set_many(self, mapping: Mapping[str, str], ex: int) -> None:
        await self._ops.set_many(mapping, ex)

    async def scan(self, cursor: int, match: str, count: int) -> tuple[int, list[str]]:
        return await self._ops.scan(cursor, match, count)

    async def unlink(self, *keys: str) -> int:
        return await self._ops.unlink(*keys)

    async def flushdb(self) -> None:
        await self._ops.flushdb()

    async def rpush(self, key: str, *values: str) -> int:
        return await self._ops.rpush(key, *values)

    async def lpush(self, key: str, *values: str) -> int:
        return await self._ops.lpush(key, *values)

    async def rpop(self, key: str) -> str | None:
        return await self._ops.rpop(key)

    async def lpop(self, key: str) -> str | None:
        return await self._ops.lpop(key)

    async def lrange(self, key: str, start: int, stop: int) -> list[str]:
        return await self._ops.lrange(key, start, stop)

    async def ltrim(self, key: str, start: int, stop: int) -> bool:
        return await self._ops.ltrim(key, start, stop)

    async def llen(self, key: str) -> int:
        return await self._ops.llen(key)

    async def replace_list(self, key: str, values: Sequence[str]) -> None:
        await self._ops.replace_list(key, values)

    async def hset(self, name: str, field: str, value: str) -> int:
        return await self._ops.hset(name, field, value)

    async def hset_many(self, name: str, mapping: Mapping[str, str]) -> int:
        return await self._ops.hset_many(name, mapping)

    async def hget(self, name: str, field: str) -> str | None:
        return await self._ops.hget(name, field)

    async def hmget(self, name: str, fields: Sequence[str]) -> list[str | None]:
        return await self._ops.hmget(name, fields)

    async def hdel(self, name: str, *fields: str) -> int:
        return await self._ops.hdel(name, *fields)

    async def hlen(self, name: str) -> int:
        return await self._ops.hlen(name)

    async def sadd(self, key: str, *values: str) -> int:
        return await self._ops.sadd(key, *values)

    async def srem(self, key: str, *values: str) -> int:
        return await self._ops.srem(key, *values)

    async def sismember(self, key: str, value: str) -> bool:
        return await self._ops.sismember(key, value)

    async def scard(self, key: str) -> int:
        return await self._ops.scard(key)

    async def compare_and_delete(self, key: str, token: str) -> bool:
        return await self._ops.compare_and_delete(key, token)

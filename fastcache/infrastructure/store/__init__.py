"""
Store Module

redis.asyncio adapter implementing the KeyValueStore protocol.
"""

from .redis_store import ConnectionManager, HealthMonitor, OperationExecutor, RedisStore

__all__ = [
    "ConnectionManager",
    "HealthMonitor",
    "OperationExecutor",
    "RedisStore",
]

"""
Test Fixtures Package

Shared test utilities and helpers for consistent testing across all modules.
"""

from .store_factory import InMemoryPipeline, InMemoryRedis, StoreTestFactory

__all__ = ["InMemoryRedis", "InMemoryPipeline", "StoreTestFactory"]

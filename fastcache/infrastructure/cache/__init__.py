"""
Cache Module

FastCache facade, per-key collection views, compute-or-fetch coordination,
and cache-key derivation.
"""

from .cache_key import derive_cache_key
from .coordinator import CACHE_MISS_SENTINEL, ComputeOrFetch
from .fast_cache import FastCache, close_cache, get_cache, init_cache
from .operations import ListOperations, MapOperations, SetOperations
from .serializer import canonicalize, deserialize, serialize

__all__ = [
    "FastCache",
    "get_cache",
    "init_cache",
    "close_cache",
    "ListOperations",
    "MapOperations",
    "SetOperations",
    "ComputeOrFetch",
    "CACHE_MISS_SENTINEL",
    "derive_cache_key",
    "serialize",
    "deserialize",
    "canonicalize",
]

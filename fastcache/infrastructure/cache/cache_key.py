"""
Cache Key Derivation

Turns an arbitrary structured value into a deterministic fingerprint:
canonical JSON text -> SHA-1 digest -> base64 text (28 characters).

    derive_cache_key({"user": 42, "page": 1}) == derive_cache_key({"page": 1, "user": 42})
"""

import base64
import hashlib
from typing import Any

from fastcache.infrastructure.cache.serializer import canonicalize


def derive_cache_key(value: Any) -> str:
    """
    Derive a deterministic fingerprint for a structured value.

    Args:
        value: Any JSON-serializable value (dicts, lists, scalars, nested)

    Returns:
        Base64-encoded SHA-1 digest of the canonical serialization

    Raises:
        SerializationError: If the value cannot be canonicalized
    """
    digest = hashlib.sha1(canonicalize(value).encode("utf-8")).digest()
    return base64.b64encode(digest).decode("ascii")

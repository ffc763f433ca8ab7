"""
Value Serialization

orjson-based text encoding for cached values and fingerprint input.

Failures raise SerializationError / DeserializationError; a value that cannot
be encoded is never turned into a null placeholder that would be
indistinguishable from "absent".
"""

from typing import Any

import orjson

from fastcache.core.exceptions import DeserializationError, SerializationError

# Sorted object keys make fingerprints independent of dict insertion order
_CANONICAL_OPTIONS = orjson.OPT_SORT_KEYS


def serialize(value: Any) -> str:
    """
    Encode a value as JSON text for storage.

    Raises:
        SerializationError: If the value (or something nested in it) is not
            JSON-serializable, is cyclic, or overflows a 64-bit integer
    """
    try:
        return orjson.dumps(value).decode("utf-8")
    except (orjson.JSONEncodeError, TypeError) as e:
        raise SerializationError(
            message=f"Value of type {type(value).__name__} cannot be serialized: {e}",
            details={"value_type": type(value).__name__},
        ) from e


def deserialize(text: str | bytes) -> Any:
    """
    Decode JSON text read from the store.

    Raises:
        DeserializationError: If the text is not valid JSON
    """
    try:
        return orjson.loads(text)
    except orjson.JSONDecodeError as e:
        raise DeserializationError(
            message=f"Stored value is not valid JSON: {e}",
            details={"length": len(text)},
        ) from e


def canonicalize(value: Any) -> str:
    """
    Encode a value as canonical JSON text: object keys sorted, no whitespace.

    Equal structured values always produce identical text within and across
    processes.

    Raises:
        SerializationError: If the value cannot be serialized
    """
    try:
        return orjson.dumps(value, option=_CANONICAL_OPTIONS).decode("utf-8")
    except (orjson.JSONEncodeError, TypeError) as e:
        raise SerializationError(
            message=f"Value of type {type(value).__name__} cannot be canonicalized: {e}",
            details={"value_type": type(value).__name__},
        ) from e

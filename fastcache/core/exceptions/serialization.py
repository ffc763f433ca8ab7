"""
Serialization Exceptions

Raised instead of returning a placeholder, so callers can tell "no value"
apart from "value could not be encoded" and "stored value is corrupt".
"""

from fastcache.core.exceptions.base import FastCacheError


class SerializationError(FastCacheError):
    """
    Raised when a value cannot be converted to its text form.

    Common causes:
    - Unsupported type (sets, arbitrary objects)
    - Cyclic structures
    - Integers outside the 64-bit range
    """
    pass


class DeserializationError(FastCacheError):
    """Raised when stored text cannot be parsed back into a value."""
    pass

"""
Lock Exceptions

Errors raised by the distributed lock manager.
"""

from fastcache.core.exceptions.base import FastCacheError


class LockError(FastCacheError):
    """Base exception for distributed lock errors."""
    pass


class LockContentionError(LockError):
    """
    Raised when a lease cannot be acquired because another holder owns it.

    Not retried internally; the caller decides whether to back off or fail.
    """
    pass


class LockOwnershipError(LockError):
    """
    Raised when releasing a lease whose token no longer owns the lock.

    The lease expired (and was possibly re-acquired by someone else), so the
    critical section may not have been exclusive.
    """
    pass

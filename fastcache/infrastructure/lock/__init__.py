"""
Lock Module

Lease-based distributed locks over one or more store nodes.
"""

from .lock_manager import Lease, LockManager

__all__ = ["Lease", "LockManager"]

"""
Infrastructure Module

Store adapter, cache facade, and distributed locks.
"""

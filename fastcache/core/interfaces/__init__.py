from .store import KeyValueStore

__all__ = ["KeyValueStore"]

"""Persistence layer for values entered in earlier runs."""

from .store import ValueCache, CacheLoadError, CacheSaveError

__all__ = ["ValueCache", "CacheLoadError", "CacheSaveError"]

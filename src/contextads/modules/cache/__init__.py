"""Ad selection cache module."""

from .store import AdCache, CacheEntry, CacheStats
from .sweeper import CacheSweeper

__all__ = ["AdCache", "CacheEntry", "CacheStats", "CacheSweeper"]

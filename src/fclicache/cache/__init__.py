"""File-based command result caching for fclicache.

This package provides :class:`CacheStore`, which persists one
:class:`~fclicache.models.CacheEntry` per distinct command string. Entry
files are named after the SHA-256 hash of the command and replaced
atomically on every write.

The store is consumed by :func:`fclicache.runner.cache_aware_execute` and
is located via :func:`fclicache.config.resolve_cache_config`.
"""

from fclicache.cache.store import CacheStore

__all__ = ["CacheStore"]

"""
Cache module for the QR link shortener.
Implements Strategy Pattern for flexible cache backends.
"""

from .strategies import CacheStrategy, RedisCache, InMemoryCache, NullCache, url_cache_key
from .factory import CacheFactory, CacheBackend
from .background import schedule_cache_write, drain_pending_writes

__all__ = [
    "CacheStrategy",
    "RedisCache",
    "InMemoryCache",
    "NullCache",
    "url_cache_key",
    "CacheFactory",
    "CacheBackend",
    "schedule_cache_write",
    "drain_pending_writes",
]

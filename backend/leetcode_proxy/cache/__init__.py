"""Cache backends and key helpers for profile snapshots."""

from .profile_cache import CacheClient, MemoryCache, profile_cache_key, rolling_cache_key
from .redis_cache import RedisCache

__all__ = ["CacheClient", "MemoryCache", "RedisCache", "profile_cache_key", "rolling_cache_key"]

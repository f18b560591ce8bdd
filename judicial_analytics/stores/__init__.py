"""
Storage adapters for the judicial analytics engine.
"""

from .base import CacheStore, PersistentStore
from .memory import MemoryCacheStore, MemoryStore
from .redis_cache import RedisCacheStore
from .supabase import SupabaseStore

__all__ = [
    "CacheStore",
    "PersistentStore",
    "MemoryCacheStore",
    "MemoryStore",
    "RedisCacheStore",
    "SupabaseStore",
]

"""
Redis Caching Layer.

Provides Redis-based JSON caching with connection pooling for interaction
lookups and remedy payloads. Degrades to a no-op when Redis is unavailable.

Usage:
    from core.cache import cache, CacheKeys

    cache.set_json(CacheKeys.remedy_detail(remedy_id), payload, ttl=CacheKeys.TTL_HOUR)
    payload = cache.get_json(CacheKeys.remedy_detail(remedy_id))
"""

from core.cache.cache_keys import CacheKeys
from core.cache.redis_client import RedisCache, cache

__all__ = [
    "RedisCache",
    "cache",
    "CacheKeys",
]

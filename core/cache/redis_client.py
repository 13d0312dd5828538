"""
Redis client with connection pooling.

A single pooled client shared by the JSON cache and the rate limiter. When
REDIS_ENABLED is false, or the server cannot be reached, every operation
degrades to a miss so callers fall through to the database.
"""

import json
import time
from collections.abc import Callable
from typing import Any, Optional

import redis
from redis.exceptions import ConnectionError, TimeoutError

from core.config import get_settings
from core.logging import get_logger

logger = get_logger("cache")

JsonValue = dict | list


class RedisCache:
    """
    Process-wide Redis cache.

    Usage:
        from core.cache import cache, CacheKeys

        payload = cache.get_or_set_json(
            CacheKeys.remedy_detail(remedy_id), lambda: build(remedy), CacheKeys.TTL_HOUR
        )
    """

    _instance: Optional["RedisCache"] = None
    _pool: Optional["redis.ConnectionPool"] = None
    _initialized: bool = False
    _available: bool = False

    def __new__(cls) -> "RedisCache":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def initialize(self, force: bool = False) -> bool:
        """Connect the pool once. Returns whether Redis is usable."""
        if self._initialized and not force:
            return self._available

        self._initialized = True
        self._available = False

        settings = get_settings()
        if not settings.redis_enabled:
            logger.info("redis_disabled")
            return False

        pool = redis.ConnectionPool(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            password=settings.redis_password,
            max_connections=50,
            socket_timeout=5,
            socket_connect_timeout=5,
        )
        try:
            redis.Redis(connection_pool=pool).ping()
        except (ConnectionError, TimeoutError) as e:
            logger.warning("redis_connection_failed", host=settings.redis_host, error=str(e))
            pool.disconnect()
            return False

        self._pool = pool
        self._available = True
        logger.info("redis_connected", host=settings.redis_host, port=settings.redis_port)
        return True

    def reset(self) -> None:
        """Forget connection state; the next access re-initializes."""
        if self._pool is not None:
            self._pool.disconnect()
        self._pool = None
        self._initialized = False
        self._available = False

    @property
    def client(self) -> Optional["redis.Redis"]:
        if not self._initialized:
            self.initialize()
        if not self._available or self._pool is None:
            return None
        return redis.Redis(connection_pool=self._pool)

    @property
    def is_available(self) -> bool:
        if not self._initialized:
            self.initialize()
        return self._available

    # =========================================================================
    # JSON Operations
    # =========================================================================

    def get_json(self, key: str) -> JsonValue | None:
        """Cached object or array; None on a miss, bad payload or outage."""
        client = self.client
        if client is None:
            return None

        try:
            data = client.get(key)
            if data is None:
                return None
            parsed = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError, ConnectionError, TimeoutError) as e:
            logger.debug("cache_get_error", key=key, error=str(e))
            return None
        return parsed if isinstance(parsed, (dict, list)) else None

    def set_json(self, key: str, value: JsonValue, ttl: int = 3600) -> bool:
        client = self.client
        if client is None:
            return False

        try:
            client.setex(key, ttl, json.dumps(value))
        except (TypeError, ConnectionError, TimeoutError) as e:
            logger.debug("cache_set_error", key=key, error=str(e))
            return False
        return True

    def get_or_set_json(
        self, key: str, compute: Callable[[], JsonValue], ttl: int = 3600
    ) -> JsonValue:
        """Read-through: return the cached value or compute, store and return it."""
        hit = self.get_json(key)
        if hit is not None:
            return hit
        value = compute()
        self.set_json(key, value, ttl)
        return value

    # =========================================================================
    # Invalidation
    # =========================================================================

    def delete(self, key: str) -> bool:
        client = self.client
        if client is None:
            return False

        try:
            client.delete(key)
        except (ConnectionError, TimeoutError):
            return False
        return True

    def delete_pattern(self, pattern: str) -> int:
        """Delete all keys matching a glob pattern, e.g. "ratelimit:*"."""
        client = self.client
        if client is None:
            return 0

        try:
            keys = list(client.scan_iter(match=pattern, count=500))
            return int(client.delete(*keys) or 0) if keys else 0
        except (ConnectionError, TimeoutError):
            return 0

    # =========================================================================
    # Health Check
    # =========================================================================

    def health_check(self) -> dict[str, Any]:
        """status is one of healthy, unhealthy, not_configured."""
        if not get_settings().redis_enabled:
            return {"status": "not_configured", "message": "Redis disabled (REDIS_ENABLED=false)"}

        client = self.client
        if client is None:
            return {"status": "unhealthy", "message": "Redis unavailable"}

        start = time.perf_counter()
        try:
            client.ping()
        except (ConnectionError, TimeoutError) as e:
            return {
                "status": "unhealthy",
                "latency": round((time.perf_counter() - start) * 1000, 2),
                "message": str(e),
            }
        return {
            "status": "healthy",
            "latency": round((time.perf_counter() - start) * 1000, 2),
            "message": "Redis connection successful",
        }


cache = RedisCache()

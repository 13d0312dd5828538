"""
Redis-backed rate limiter for API endpoints.

Provides:
- Named limits per endpoint group (search, favorites, interactions, ...)
- Sliding-window counting in a Redis sorted set
- In-memory fallback when Redis is unavailable (fails closed, not open)
"""

import threading
import time
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Optional, Tuple

from core.cache import cache
from core.logging import get_logger

logger = get_logger("security.rate_limiter")

DEFAULT_WINDOW = 60


# =============================================================================
# In-Memory Fallback Rate Limiter
# =============================================================================


class InMemoryRateLimiter:
    """
    Simple in-memory rate limiter used as fallback when Redis is unavailable.

    Denies excess requests when Redis is down rather than letting everything
    through. Thread-safe.
    """

    def __init__(self):
        self._buckets: Dict[str, List[float]] = {}
        self._lock = threading.Lock()
        self._last_cleanup = time.time()
        self._cleanup_interval = 60

    def _cleanup_old_entries(self, window: int) -> None:
        """Drop buckets whose entries have all aged out; runs at most once a minute."""
        now = time.time()
        if now - self._last_cleanup < self._cleanup_interval:
            return

        self._last_cleanup = now
        cutoff = now - window - 60

        for key in list(self._buckets):
            self._buckets[key] = [ts for ts in self._buckets[key] if ts > cutoff]
            if not self._buckets[key]:
                del self._buckets[key]

    def check(self, key: str, limit: int, window: int, cost: int = 1) -> Tuple[bool, int, int]:
        """
        Check if request is allowed under rate limit.

        Returns:
            Tuple of (allowed, remaining, reset_at_timestamp)
        """
        now = time.time()

        with self._lock:
            self._cleanup_old_entries(window)

            window_start = now - window
            bucket = [ts for ts in self._buckets.get(key, []) if ts > window_start]
            self._buckets[key] = bucket

            reset_at = int(bucket[0] + window) if bucket else int(now + window)

            if len(bucket) + cost <= limit:
                bucket.extend([now] * cost)
                return True, max(0, limit - len(bucket)), reset_at
            return False, 0, reset_at

    def reset(self, key: str) -> None:
        with self._lock:
            self._buckets.pop(key, None)

    def reset_all(self) -> None:
        with self._lock:
            self._buckets.clear()


# Global in-memory fallback instance
_memory_limiter = InMemoryRateLimiter()


@dataclass
class RateLimitResult:
    """Result of a rate limit check."""

    allowed: bool
    remaining: int
    limit: int
    reset_at: int  # Unix timestamp
    retry_after: Optional[int] = None  # Seconds until retry allowed

    def to_headers(self) -> dict:
        """Rate limit metadata as HTTP response headers."""
        headers = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset_at),
        }
        if self.retry_after:
            headers["Retry-After"] = str(self.retry_after)
        return headers


class RateLimiter:
    """
    Redis-backed rate limiter using sliding window algorithm.

    Usage:
        limiter = get_rate_limiter()

        result = limiter.check("favorites", client_ip)
        if not result.allowed:
            raise ApiError(ErrorCode.RATE_LIMIT_EXCEEDED, headers=result.to_headers())

    Every named limit counts requests over a 60 second window.
    """

    CONFIGS = {
        "search": {"limit": 30, "window": DEFAULT_WINDOW, "key_prefix": "ratelimit:search:"},
        "aiSearch": {"limit": 10, "window": DEFAULT_WINDOW, "key_prefix": "ratelimit:ai_search:"},
        "favorites": {"limit": 20, "window": DEFAULT_WINDOW, "key_prefix": "ratelimit:favorites:"},
        "auth": {"limit": 5, "window": DEFAULT_WINDOW, "key_prefix": "ratelimit:auth:"},
        "general": {"limit": 60, "window": DEFAULT_WINDOW, "key_prefix": "ratelimit:general:"},
        "interactionsCheck": {
            "limit": 20,
            "window": DEFAULT_WINDOW,
            "key_prefix": "ratelimit:interactions:",
        },
        "searchHistory": {
            "limit": 30,
            "window": DEFAULT_WINDOW,
            "key_prefix": "ratelimit:search_history:",
        },
        "filterPreferences": {
            "limit": 30,
            "window": DEFAULT_WINDOW,
            "key_prefix": "ratelimit:filter_prefs:",
        },
        "journal": {"limit": 30, "window": DEFAULT_WINDOW, "key_prefix": "ratelimit:journal:"},
        "medicationCabinet": {
            "limit": 30,
            "window": DEFAULT_WINDOW,
            "key_prefix": "ratelimit:cabinet:",
        },
        "contributions": {
            "limit": 5,
            "window": DEFAULT_WINDOW,
            "key_prefix": "ratelimit:contributions:",
        },
        "usage": {"limit": 60, "window": DEFAULT_WINDOW, "key_prefix": "ratelimit:usage:"},
        "reviews": {"limit": 10, "window": DEFAULT_WINDOW, "key_prefix": "ratelimit:reviews:"},
    }

    def __init__(self):
        self._available = False

    def initialize(self) -> bool:
        """Initialize rate limiter (checks Redis availability)."""
        cache.initialize()
        self._available = cache.is_available
        if self._available:
            logger.info("rate_limiter_initialized")
        else:
            logger.warning("rate_limiter_memory_fallback", reason="Redis unavailable")
        return self._available

    @property
    def is_available(self) -> bool:
        """True when Redis backs the limiter."""
        if not self._available:
            self._available = cache.is_available
        return self._available

    def _get_config(self, endpoint: str) -> dict:
        return self.CONFIGS.get(endpoint, self.CONFIGS["general"])

    def _get_key(self, endpoint: str, identifier: str) -> str:
        return f"{self._get_config(endpoint)['key_prefix']}{identifier}"

    def check(self, endpoint: str, identifier: str, cost: int = 1) -> RateLimitResult:
        """
        Check (and consume) quota for a request.

        Args:
            endpoint: Named limit from CONFIGS; unknown names use "general"
            identifier: Client identifier (user id or IP)
            cost: Cost of this request (default: 1)
        """
        config = self._get_config(endpoint)
        key = self._get_key(endpoint, identifier)

        if not self.is_available:
            allowed, remaining, reset_at = _memory_limiter.check(
                key, config["limit"], config["window"], cost
            )
            if not allowed:
                logger.warning(
                    "rate_limit_exceeded_fallback", endpoint=endpoint, identifier=identifier[:20]
                )
            return RateLimitResult(
                allowed=allowed,
                remaining=remaining,
                limit=config["limit"],
                reset_at=reset_at,
                retry_after=max(1, reset_at - int(time.time())) if not allowed else None,
            )

        now = int(time.time())
        window_start = now - config["window"]

        try:
            client = cache.client
            pipe = client.pipeline()
            pipe.zremrangebyscore(key, 0, window_start)
            pipe.zcard(key)
            pipe.zrange(key, 0, 0, withscores=True)
            results = pipe.execute()
            current_count = results[1]
            oldest_entry = results[2]

            if oldest_entry:
                reset_at = int(oldest_entry[0][1]) + config["window"]
            else:
                reset_at = now + config["window"]

            if current_count + cost > config["limit"]:
                retry_after = max(1, reset_at - now)
                logger.warning(
                    "rate_limit_exceeded",
                    endpoint=endpoint,
                    identifier=identifier[:20],
                    retry_after=retry_after,
                )
                return RateLimitResult(
                    allowed=False,
                    remaining=0,
                    limit=config["limit"],
                    reset_at=reset_at,
                    retry_after=retry_after,
                )

            # One member per unit of cost
            stamp = time.time_ns()
            client.zadd(key, {f"{stamp}:{unit}": now for unit in range(cost)})
            client.expire(key, config["window"])

            return RateLimitResult(
                allowed=True,
                remaining=max(0, config["limit"] - current_count - cost),
                limit=config["limit"],
                reset_at=reset_at,
            )

        except Exception as e:
            logger.error("rate_limit_error", endpoint=endpoint, error=str(e))
            # Redis errored mid-request: let the request through
            return RateLimitResult(
                allowed=True,
                remaining=config["limit"],
                limit=config["limit"],
                reset_at=now + config["window"],
            )

    def reset_all(self) -> None:
        """Clear every counter."""
        _memory_limiter.reset_all()
        if self.is_available:
            cache.delete_pattern("ratelimit:*")


@lru_cache(maxsize=1)
def get_rate_limiter() -> RateLimiter:
    """Get the RateLimiter singleton."""
    limiter = RateLimiter()
    limiter.initialize()
    return limiter

"""Score Store - Redis tier for raw signal outcomes shared between processes."""
import json
import logging
from typing import Optional, Dict, Any
from datetime import datetime, timezone
from urllib.parse import urlparse

from redis import Redis

from matchmaking.signals.base import SignalOutcome
from matchmaking.utils import to_native_types

logger = logging.getLogger(__name__)

# 1 week in seconds
CACHE_TTL_SECONDS = 7 * 24 * 60 * 60  # 604800 seconds

KEY_PREFIX = "signal:"


def _sanitize_url(url: str) -> str:
    """Remove credentials from URL for safe logging."""
    try:
        parsed = urlparse(url)
        if parsed.password:
            sanitized = parsed._replace(
                netloc=f"{parsed.username or ''}:*@{parsed.hostname}:{parsed.port or 6379}"
            )
            return sanitized.geturl()
        return url
    except ValueError:
        return url


class RedisScoreStore:
    """
    Second cache tier for SignalOutcome values.

    Entries are JSON with a TTL. Keys already carry the content hashes of the
    fields they depend on, so entries never need explicit invalidation; the
    TTL only bounds memory. When Redis is unreachable every call degrades to
    a miss and the in-process cache keeps working on its own.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        password: Optional[str] = None,
        ttl_seconds: int = CACHE_TTL_SECONDS
    ):
        self.redis_url = redis_url
        self.password = password
        self.ttl_seconds = ttl_seconds
        self._redis: Optional[Redis] = None
        self._available = False

        try:
            self._redis = Redis.from_url(
                redis_url,
                password=password,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5
            )
            self._redis.ping()
            self._available = True
            logger.info(f"Score store connected to Redis at {_sanitize_url(redis_url)}")
        except Exception as e:
            logger.warning(f"Score store Redis unavailable: {e}")
            self._redis = None
            self._available = False

    @property
    def is_available(self) -> bool:
        """Check if the store is available."""
        return self._available and self._redis is not None

    def _make_key(self, cache_key: str) -> str:
        return f"{KEY_PREFIX}{cache_key}"

    def get_outcome(self, cache_key: str) -> Optional[SignalOutcome]:
        """Get a cached outcome by its cache key string."""
        if not self.is_available:
            return None

        try:
            data = self._redis.get(self._make_key(cache_key))
            if not data:
                return None
            entry = json.loads(data)
            return SignalOutcome(
                score=float(entry["score"]),
                included=bool(entry["included"]),
                detail=entry.get("detail") or {},
            )
        except Exception as e:
            logger.warning(f"Error reading from score store: {e}")
            return None

    def set_outcome(
        self,
        cache_key: str,
        outcome: SignalOutcome,
        ttl_seconds: Optional[int] = None
    ) -> bool:
        """Cache an outcome with TTL."""
        if not self.is_available:
            return False

        try:
            ttl = ttl_seconds or self.ttl_seconds
            entry = {
                "score": outcome.score,
                "included": outcome.included,
                "detail": to_native_types(outcome.detail),
                "cached_at": datetime.now(timezone.utc).isoformat(),
            }
            self._redis.setex(self._make_key(cache_key), ttl, json.dumps(entry))
            return True
        except Exception as e:
            logger.warning(f"Error writing to score store: {e}")
            return False

    def delete_outcome(self, cache_key: str) -> bool:
        if not self.is_available:
            return False

        try:
            self._redis.delete(self._make_key(cache_key))
            return True
        except Exception as e:
            logger.warning(f"Error deleting from score store: {e}")
            return False

    def get_cache_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        if not self.is_available:
            return {"available": False}

        try:
            info = self._redis.info()
            key_count = 0
            cursor = 0
            while True:
                cursor, keys = self._redis.scan(cursor=cursor, match=f"{KEY_PREFIX}*", count=1000)
                key_count += len(keys)
                if cursor == 0:
                    break
            return {
                "available": True,
                "used_memory_human": info.get("used_memory_human", "unknown"),
                "signal_cache_keys": key_count,
                "ttl_seconds": self.ttl_seconds,
                "ttl_human": f"{self.ttl_seconds // 86400} days"
            }
        except Exception as e:
            logger.warning(f"Error getting score store stats: {e}")
            return {"available": False, "error": str(e)}

    def clear_all(self) -> bool:
        """Clear all cached outcomes. Use with caution."""
        if not self.is_available:
            return False

        try:
            cursor = 0
            deleted = 0
            while True:
                cursor, keys = self._redis.scan(cursor=cursor, match=f"{KEY_PREFIX}*", count=100)
                if keys:
                    self._redis.delete(*keys)
                    deleted += len(keys)
                if cursor == 0:
                    break

            logger.info(f"Cleared {deleted} signal outcomes from score store")
            return True
        except Exception as e:
            logger.warning(f"Error clearing score store: {e}")
            return False

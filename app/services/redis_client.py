"""Redis client for caching place lookups."""
import json
import logging
import redis
from typing import Optional, Any
from app.config import settings

logger = logging.getLogger(__name__)


class RedisClient:
    """Redis client wrapper with caching utilities.

    Every operation is best effort: a missing or unreachable Redis only
    costs a cache miss, never a failed request.
    """

    def __init__(self, enabled: Optional[bool] = None):
        self.enabled = settings.cache_enabled if enabled is None else enabled
        self.client = redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            password=settings.redis_password,
            decode_responses=True,
            socket_connect_timeout=1,
        )

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache."""
        if not self.enabled:
            return None
        try:
            value = self.client.get(key)
            if value:
                return json.loads(value)
            return None
        except Exception as e:
            logger.warning(f"Redis GET error: {e}")
            return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Set value in cache with optional TTL."""
        if not self.enabled:
            return False
        try:
            serialized = json.dumps(value, ensure_ascii=False)
            if ttl:
                self.client.setex(key, ttl, serialized)
            else:
                self.client.set(key, serialized)
            return True
        except Exception as e:
            logger.warning(f"Redis SET error: {e}")
            return False

    def ping(self) -> bool:
        """Check if Redis is connected."""
        if not self.enabled:
            return False
        try:
            return self.client.ping()
        except Exception:
            return False


# Global Redis client instance
redis_client = RedisClient()

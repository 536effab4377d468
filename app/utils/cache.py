"""
Redis cache for assembled quiz templates
"""
import redis
import json
import logging
from typing import Any, Dict, List, Optional
from app.config import settings

logger = logging.getLogger(__name__)

Template = List[Dict[str, List[Dict[str, Any]]]]


class CacheService:
    """
    Template view cache keyed by quiz and view

    Quiz content is immutable once a quiz is completed, so entries only need
    dropping when the quiz itself is deleted. Every method degrades to a
    no-op when Redis is disabled or unreachable.
    """

    def __init__(self, client: Optional[redis.Redis] = None):
        self.redis_client = client

        if client is not None:
            return
        if not settings.CACHE_ENABLED:
            logger.info("Template caching disabled by configuration")
            return

        try:
            self.redis_client = redis.from_url(
                settings.REDIS_URL,
                decode_responses=True,
                socket_connect_timeout=5
            )
            self.redis_client.ping()
            logger.info("Redis connection established")
        except (redis.RedisError, ValueError) as e:
            logger.warning(f"Redis connection failed: {str(e)}. Template caching disabled.")
            self.redis_client = None

    @staticmethod
    def template_key(quiz_id: str, view: str) -> str:
        return f"template:{quiz_id}:{view}"

    def get_template(self, quiz_id: str, view: str) -> Optional[Template]:
        """Cached view of a quiz, or None on a miss"""
        if not self.redis_client:
            return None

        key = self.template_key(quiz_id, view)
        try:
            value = self.redis_client.get(key)
        except redis.RedisError as e:
            logger.error(f"Cache get error for {key}: {str(e)}")
            return None

        if value is None:
            logger.debug(f"Cache miss: {key}")
            return None

        logger.debug(f"Cache hit: {key}")
        return json.loads(value)

    def set_template(self, quiz_id: str, view: str, template: Template, ttl: Optional[int] = None) -> bool:
        """
        Store an assembled view

        Args:
            quiz_id: Quiz UUID
            view: "authoring" or "student"
            template: JSON-serializable template
            ttl: Seconds to keep the entry (TEMPLATE_CACHE_TTL by default)
        """
        if not self.redis_client:
            return False

        key = self.template_key(quiz_id, view)
        ttl = ttl or settings.TEMPLATE_CACHE_TTL
        try:
            self.redis_client.setex(key, ttl, json.dumps(template))
        except redis.RedisError as e:
            logger.error(f"Cache set error for {key}: {str(e)}")
            return False

        logger.debug(f"Cache set: {key} (TTL: {ttl}s)")
        return True

    def invalidate_quiz(self, quiz_id: str) -> int:
        """Drop every cached view of a quiz; returns the number of keys removed"""
        if not self.redis_client:
            return 0

        try:
            keys = self.redis_client.keys(self.template_key(quiz_id, "*"))
            if keys:
                self.redis_client.delete(*keys)
        except redis.RedisError as e:
            logger.error(f"Cache invalidation error for quiz {quiz_id}: {str(e)}")
            return 0

        if keys:
            logger.info(f"Cleared {len(keys)} cached template(s) for quiz {quiz_id}")
        return len(keys)


# Global instance
cache_service = CacheService()

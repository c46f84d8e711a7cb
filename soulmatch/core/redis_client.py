import redis
import json
from typing import Any, Optional
from soulmatch.core import config
import logging

logger = logging.getLogger(__name__)


class RedisClient:
    def __init__(self, url: str = config.REDIS_URL):
        self.client = redis.Redis.from_url(url, decode_responses=True)
        logger.info(f"Redis client initialized with URL: {url}")

    def cache_setting(self, key: str, value: Any, ttl: int = config.REDIS_CACHE_TTL) -> bool:
        """Cache a site setting value"""
        cache_key = f"setting:{key}"
        try:
            self.client.set(cache_key, json.dumps(value), ex=ttl)
            logger.debug(f"Cached setting {key}")
            return True
        except redis.RedisError as e:
            logger.warning(f"Error caching setting {key}: {e}")
            return False

    def get_cached_setting(self, key: str) -> Optional[Any]:
        """Get a cached site setting, None on miss or cache failure"""
        cache_key = f"setting:{key}"
        try:
            data = self.client.get(cache_key)
            if data is None:
                return None
            logger.debug(f"Retrieved cached setting {key}")
            return json.loads(data)
        except (redis.RedisError, ValueError) as e:
            logger.warning(f"Error retrieving cached setting {key}: {e}")
            return None

    def delete_setting(self, key: str) -> bool:
        """Drop a cached site setting"""
        cache_key = f"setting:{key}"
        try:
            self.client.delete(cache_key)
            logger.debug(f"Deleted cached setting {key}")
            return True
        except redis.RedisError as e:
            logger.warning(f"Error deleting cached setting {key}: {e}")
            return False

import logging
from typing import Optional
import redis.exceptions

logger = logging.getLogger(__name__)
CACHE_TTL = 86400


class RedisURLCache:
    """Shared cache tier; an unreachable Redis only costs a store lookup."""

    def __init__(self, client, ttl: int = CACHE_TTL, prefix: str = "url:"):
        self.client = client
        self.ttl = ttl
        self.prefix = prefix

    def get(self, code: str) -> Optional[str]:
        cache_key = f"{self.prefix}{code}"

        try:
            cached_url = self.client.get(cache_key)
        except redis.exceptions.RedisError:
            logger.warning(f"Redis lookup failed for {code}")
            return None

        if cached_url:
            cached_decoded = cached_url.decode() if isinstance(cached_url, (bytes, bytearray)) else str(cached_url)
            logger.debug(f"Redirect cache HIT for {code} -> {cached_decoded[:50]}")
            return cached_decoded

        return None

    def put(self, code: str, long_url: str):
        cache_key = f"{self.prefix}{code}"

        try:
            self.client.setex(cache_key, self.ttl, long_url)
            logger.debug(f"Cached {code} -> {long_url[:50]}")
        except redis.exceptions.RedisError:
            logger.warning(f"Failed to cache {code}, Redis unavailable")

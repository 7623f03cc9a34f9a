from typing import Optional
import logging

from linkshort.core.deadline import Deadline
from linkshort.core.exceptions import NotFound
from linkshort.db.repository import MappingStore
from linkshort.services.cache import LRUCache
from linkshort.services.RedisURLCache import RedisURLCache
from linkshort.utils.encoding import is_valid_short_code

logger = logging.getLogger(__name__)


class RedirectResolver:
    """Read path: local LRU, then the optional Redis tier, then the store."""

    def __init__(
        self,
        store: MappingStore,
        cache: Optional[LRUCache] = None,
        redis_cache: Optional[RedisURLCache] = None,
        timeout: Optional[float] = None,
    ):
        self.store = store
        self.cache = cache
        self.redis_cache = redis_cache
        self.timeout = timeout

    def resolve(self, code: str, deadline: Optional[Deadline] = None) -> str:
        if not is_valid_short_code(code):
            raise NotFound()

        if self.cache is not None:
            long_url = self.cache.get(code)
            if long_url is not None:
                return long_url

        if self.redis_cache is not None:
            long_url = self.redis_cache.get(code)
            if long_url is not None:
                if self.cache is not None:
                    self.cache.put(code, long_url)
                return long_url

        if deadline is None:
            deadline = Deadline(self.timeout)
        deadline.check("lookup")
        long_url = self.store.get(code).long_url

        if self.cache is not None:
            self.cache.put(code, long_url)
        if self.redis_cache is not None:
            self.redis_cache.put(code, long_url)
        logger.debug(f"Redirect cache MISS/DB HIT for {code} -> {long_url[:50]}")
        return long_url

    def record_hit(self, code: str):
        """Best-effort hit counter update, run after the redirect was sent."""
        try:
            if self.store.increment_hits(code):
                logger.debug("Hit recorded for %s", code)
        except Exception:
            logger.exception("Failed to record hit for %s", code)

from typing import Optional
import logging

from linkshort.core.deadline import Deadline
from linkshort.core.exceptions import GenerationExhausted
from linkshort.db.repository import MappingStore
from linkshort.services.cache import LRUCache
from linkshort.services.codegen import CodeGenerator
from linkshort.utils.validation import MAX_URL_LENGTH, validate_long_url


logger = logging.getLogger(__name__)


class URLService:
    """Create path: validate, claim a free code, then hand back the short URL."""

    def __init__(
        self,
        store: MappingStore,
        generator: CodeGenerator,
        base_url: str,
        max_attempts: int = 5,
        cache: Optional[LRUCache] = None,
        timeout: Optional[float] = None,
        deduplicate: bool = True,
        max_url_length: int = MAX_URL_LENGTH,
    ):
        self.store = store
        self.generator = generator
        self.base_url = base_url.rstrip("/")
        self.max_attempts = max_attempts
        self.cache = cache
        self.timeout = timeout
        self.deduplicate = deduplicate
        self.max_url_length = max_url_length

    def short_url_for(self, code: str) -> str:
        return f"{self.base_url}/{code}"

    def create(self, long_url, deadline: Optional[Deadline] = None) -> str:
        return self.short_url_for(self.shorten(long_url, deadline))

    def shorten(self, long_url, deadline: Optional[Deadline] = None) -> str:
        """Return the code now mapped to ``long_url``, creating the mapping if needed."""
        long_url = validate_long_url(long_url, self.max_url_length)
        if deadline is None:
            deadline = Deadline(self.timeout)

        # Idempotency: return existing mapping if present
        if self.deduplicate:
            deadline.check("duplicate lookup")
            existing = self.store.find_by_long_url(long_url)
            if existing is not None:
                logger.info("short URL already existed : '%s' for URL: %s", existing.code, long_url[:50])
                return existing.code

        for attempt in range(self.max_attempts):
            deadline.check("insert")
            code = self.generator.generate(long_url)
            # The code is only handed out once this insert has committed
            if self.store.put_if_absent(code, long_url):
                if self.cache is not None:
                    self.cache.put(code, long_url)
                logger.info("Shortened %s... to %s", long_url[:50], code)
                return code
            logger.info(f"Short code collision on attempt {attempt + 1}/{self.max_attempts}")

        logger.error("Failed to generate unique short code after %d attempts", self.max_attempts)
        raise GenerationExhausted(f"Failed to generate unique short code after {self.max_attempts} attempts")

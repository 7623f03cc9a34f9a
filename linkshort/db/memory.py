import threading
from typing import Dict, Optional

from linkshort.core.exceptions import NotFound
from linkshort.db.models import utcnow
from linkshort.db.repository import MappingStore
from linkshort.schemas.URLMapping import URLMapping


class InMemoryMappingStore(MappingStore):
    """Process-local store; a single lock makes check-then-insert atomic."""

    def __init__(self):
        self._lock = threading.Lock()
        self._mappings: Dict[str, URLMapping] = {}
        self._hits: Dict[str, int] = {}
        self._by_long_url: Dict[str, str] = {}

    def put_if_absent(self, code: str, long_url: str) -> bool:
        with self._lock:
            if code in self._mappings:
                return False
            self._mappings[code] = URLMapping(code=code, long_url=long_url, created_at=utcnow())
            self._hits[code] = 0
            self._by_long_url.setdefault(long_url, code)
            return True

    def get(self, code: str) -> URLMapping:
        with self._lock:
            mapping = self._mappings.get(code)
            if mapping is None:
                raise NotFound()
            return mapping.model_copy(update={"hit_count": self._hits[code]})

    def find_by_long_url(self, long_url: str) -> Optional[URLMapping]:
        with self._lock:
            code = self._by_long_url.get(long_url)
        return self.get(code) if code is not None else None

    def increment_hits(self, code: str) -> bool:
        with self._lock:
            if code not in self._hits:
                return False
            self._hits[code] += 1
            return True

    def count(self) -> int:
        with self._lock:
            return len(self._mappings)

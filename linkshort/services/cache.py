import threading
from collections import OrderedDict
from typing import Optional


class LRUCache:
    """Bounded, thread-safe code -> long URL cache with least-recently-used eviction.

    Mappings never change after creation, so entries only leave through
    eviction.
    """

    def __init__(self, maxsize: int = 10000):
        if maxsize < 1:
            raise ValueError("maxsize must be at least 1")
        self.maxsize = maxsize
        self.hits = 0
        self.misses = 0
        self._data: "OrderedDict[str, str]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, code: str) -> Optional[str]:
        with self._lock:
            long_url = self._data.get(code)
            if long_url is None:
                self.misses += 1
                return None
            self._data.move_to_end(code)
            self.hits += 1
            return long_url

    def put(self, code: str, long_url: str):
        with self._lock:
            self._data[code] = long_url
            self._data.move_to_end(code)
            while len(self._data) > self.maxsize:
                self._data.popitem(last=False)

    def clear(self):
        with self._lock:
            self._data.clear()

    def __contains__(self, code) -> bool:
        with self._lock:
            return code in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

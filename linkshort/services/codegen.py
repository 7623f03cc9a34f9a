import logging
import threading
from abc import ABC, abstractmethod

import redis.exceptions

from linkshort.core.exceptions import GenerationExhausted, StoreUnavailable
from linkshort.utils.encoding import (
    SHORT_CODE_LENGTH,
    encode_base62,
    generate_short_code,
    keyspace_size,
)

logger = logging.getLogger(__name__)

COUNTER_KEY = "linkshort:code_counter"


class CodeGenerator(ABC):
    """Produces candidate short codes; uniqueness is enforced by the store."""

    def __init__(self, length: int = SHORT_CODE_LENGTH):
        self.length = length

    @abstractmethod
    def generate(self, long_url: str) -> str:
        ...


class RandomCodeGenerator(CodeGenerator):
    def generate(self, long_url: str) -> str:
        return generate_short_code(self.length)


class CounterCodeGenerator(CodeGenerator):
    """Encodes a monotonically increasing, process-wide counter.

    Only collision-free for a single process. Seed ``start`` with the number
    of stored mappings so a restart does not replay already-issued codes.
    """

    def __init__(self, length: int = SHORT_CODE_LENGTH, start: int = 0):
        super().__init__(length)
        self._next = start
        self._lock = threading.Lock()

    def _encode(self, value: int) -> str:
        if value >= keyspace_size(self.length):
            raise GenerationExhausted("Short code space is exhausted")
        return encode_base62(value, self.length)

    def generate(self, long_url: str) -> str:
        with self._lock:
            value = self._next
            self._next += 1
        return self._encode(value)


class RedisCounterCodeGenerator(CounterCodeGenerator):
    """Counter strategy backed by an atomic Redis INCR, shared by all workers."""

    def __init__(self, client, length: int = SHORT_CODE_LENGTH, key: str = COUNTER_KEY):
        super().__init__(length)
        self.client = client
        self.key = key

    def seed(self, start: int):
        """Initialise the shared counter unless another worker already did."""
        try:
            self.client.set(self.key, start, nx=True)
        except redis.exceptions.RedisError as e:
            logger.warning(f"Could not seed Redis counter: {e}")

    def generate(self, long_url: str) -> str:
        try:
            value = int(self.client.incr(self.key))
        except redis.exceptions.RedisError as e:
            logger.error(f"Redis counter increment failed: {e}")
            raise StoreUnavailable() from e
        # INCR starts at 1
        return self._encode(value - 1)


def build_code_generator(strategy: str, length: int = SHORT_CODE_LENGTH, start: int = 0, redis_client=None) -> CodeGenerator:
    if strategy == "random":
        return RandomCodeGenerator(length)
    if strategy == "counter":
        if redis_client is not None:
            generator = RedisCounterCodeGenerator(redis_client, length)
            generator.seed(start)
            return generator
        return CounterCodeGenerator(length, start=start)
    raise ValueError(f"Unknown code generation strategy: {strategy}")

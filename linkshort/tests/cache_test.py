from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest
import redis.exceptions

from linkshort.services.cache import LRUCache
from linkshort.services.RedisURLCache import RedisURLCache


def test_lru_evicts_least_recently_used():
    cache = LRUCache(2)
    cache.put("a", "https://a.example")
    cache.put("b", "https://b.example")
    assert cache.get("a") == "https://a.example"

    cache.put("c", "https://c.example")
    assert "b" not in cache
    assert cache.get("a") == "https://a.example"
    assert cache.get("c") == "https://c.example"
    assert len(cache) == 2


def test_lru_counts_hits_and_misses():
    cache = LRUCache(4)
    assert cache.get("a") is None
    cache.put("a", "https://a.example")
    cache.get("a")
    assert (cache.hits, cache.misses) == (1, 1)

    cache.clear()
    assert len(cache) == 0


def test_lru_rejects_empty_size():
    with pytest.raises(ValueError):
        LRUCache(0)


def test_lru_concurrent_access_stays_bounded():
    cache = LRUCache(50)

    def work(i):
        cache.put(f"k{i}", f"https://example.com/{i}")
        cache.get(f"k{i // 2}")

    with ThreadPoolExecutor(max_workers=16) as pool:
        list(pool.map(work, range(2000)))
    assert len(cache) == 50


def test_redis_cache_decodes_bytes():
    client = MagicMock()
    client.get.return_value = b"https://example.com/x"
    assert RedisURLCache(client).get("abc1234") == "https://example.com/x"


def test_redis_cache_miss():
    client = MagicMock()
    client.get.return_value = None
    assert RedisURLCache(client).get("abc1234") is None


def test_redis_cache_put_uses_ttl():
    client = MagicMock()
    RedisURLCache(client, ttl=30).put("abc1234", "https://example.com/x")
    client.setex.assert_called_once_with("url:abc1234", 30, "https://example.com/x")


def test_redis_cache_errors_are_misses():
    client = MagicMock()
    client.get.side_effect = redis.exceptions.ConnectionError("down")
    client.setex.side_effect = redis.exceptions.TimeoutError("slow")
    cache = RedisURLCache(client)

    assert cache.get("abc1234") is None
    cache.put("abc1234", "https://example.com/x")

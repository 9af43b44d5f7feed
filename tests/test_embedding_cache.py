import numpy as np
import pytest
from concurrent.futures import ThreadPoolExecutor

from revcatgpt.cache.embedding_cache import EmbeddingCache


def vec(value, dim=4):
    return np.full(dim, value, dtype=np.float32)


def test_key_is_stable_sha1():
    key = EmbeddingCache.key_for("who is Jean Piaget")
    assert key == EmbeddingCache.key_for("who is Jean Piaget")
    assert key != EmbeddingCache.key_for("who is Jean Piaget?")
    assert len(key) == 40


def test_miss_returns_none():
    cache = EmbeddingCache(capacity=2)
    assert cache.get("nope") is None
    assert cache.stats()["misses"] == 1


def test_hit_returns_identical_values():
    cache = EmbeddingCache(capacity=2)
    original = np.array([0.1, 0.2, 0.3], dtype=np.float32)
    cache.put("k", original)

    cached = cache.get("k")
    assert cached is not None
    assert cached.dtype == np.float32
    assert cached.tobytes() == original.tobytes()


def test_cached_vectors_are_read_only():
    cache = EmbeddingCache(capacity=2)
    source = vec(1.0)
    cache.put("k", source)

    # Mutating the caller's array must not leak into the cache
    source[0] = 42.0
    cached = cache.get("k")
    assert cached[0] == 1.0
    with pytest.raises(ValueError):
        cached[0] = 2.0


def test_capacity_plus_one_evicts_least_recently_used():
    cache = EmbeddingCache(capacity=3)
    for key in ("a", "b", "c"):
        cache.put(key, vec(1.0))

    # Touch "a" so "b" becomes the least recently used entry
    assert cache.get("a") is not None

    cache.put("d", vec(2.0))

    assert len(cache) == 3
    assert "b" not in cache
    assert all(k in cache for k in ("a", "c", "d"))


def test_replacing_existing_key_does_not_evict():
    cache = EmbeddingCache(capacity=2)
    cache.put("a", vec(1.0))
    cache.put("b", vec(1.0))
    cache.put("a", vec(3.0))

    assert len(cache) == 2
    assert cache.get("a")[0] == 3.0
    assert "b" in cache


def test_invalid_capacity_rejected():
    with pytest.raises(ValueError):
        EmbeddingCache(capacity=0)


def test_stats_and_clear():
    cache = EmbeddingCache(capacity=5)
    cache.put("a", vec(1.0))
    cache.get("a")
    cache.get("missing")

    stats = cache.stats()
    assert stats["size"] == 1
    assert stats["capacity"] == 5
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["hit_rate"] == 0.5

    cache.clear()
    assert len(cache) == 0
    assert cache.stats()["hits"] == 0


def test_concurrent_inserts_never_overfill():
    cache = EmbeddingCache(capacity=50)

    def insert(worker):
        for i in range(200):
            key = f"{worker}-{i}"
            cache.put(key, vec(float(i)))
            cache.get(key)

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(insert, range(8)))

    assert len(cache) == 50
    assert cache.stats()["size"] == 50

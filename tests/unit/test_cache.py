"""Tests for the content-hash cache."""

from __future__ import annotations

import pytest

from guardscan.scanner.cache import ContentCache, content_hash


class TestContentHash:
    def test_deterministic(self):
        assert content_hash("eval(x)") == content_hash("eval(x)")

    def test_different_text_different_key(self):
        assert content_hash("eval(x)") != content_hash("eval(y)")

    def test_context_discriminates(self):
        assert content_hash("GRANT ALL", "mysql") != content_hash("GRANT ALL", "redis")
        assert content_hash("GRANT ALL", "mysql") != content_hash("GRANT ALL")

    def test_context_is_not_plain_concatenation(self):
        assert content_hash("ab", "c") != content_hash("a", "bc")

    def test_handles_non_ascii(self):
        key = content_hash("пароль = 'секрет'")
        assert key == content_hash("пароль = 'секрет'")
        assert all(c in "0123456789abcdef" for c in key)


class TestContentCache:
    def test_get_missing(self):
        cache: ContentCache[int] = ContentCache(3)
        assert cache.get("nope") is None
        assert "nope" not in cache

    def test_put_and_get(self):
        cache: ContentCache[int] = ContentCache(3)
        cache.put("a", 1)
        assert cache.get("a") == 1
        assert "a" in cache
        assert len(cache) == 1

    def test_eviction_bound(self):
        cache: ContentCache[int] = ContentCache(3)
        for i, key in enumerate(["a", "b", "c", "d"]):
            cache.put(key, i)
        assert len(cache) == 3
        assert "a" not in cache
        assert cache.keys() == ["b", "c", "d"]

    def test_eviction_is_fifo_not_lru(self):
        cache: ContentCache[int] = ContentCache(2)
        cache.put("a", 1)
        cache.put("b", 2)
        # Reading "a" does not protect it
        assert cache.get("a") == 1
        cache.put("c", 3)
        assert "a" not in cache
        assert "b" in cache

    def test_replace_existing_key_does_not_evict(self):
        cache: ContentCache[int] = ContentCache(2)
        cache.put("a", 1)
        cache.put("b", 2)
        cache.put("a", 10)
        assert len(cache) == 2
        assert cache.get("a") == 10
        assert cache.keys() == ["a", "b"]

    def test_clear(self):
        cache: ContentCache[int] = ContentCache(2)
        cache.put("a", 1)
        cache.clear()
        assert len(cache) == 0
        assert cache.get("a") is None

    def test_invalid_size(self):
        with pytest.raises(ValueError, match="at least 1"):
            ContentCache(0)

    def test_max_size(self):
        assert ContentCache(7).max_size == 7

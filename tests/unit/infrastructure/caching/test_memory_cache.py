"""Tests for MemoryCache."""

from ig_summary.infrastructure.caching.memory_cache import MemoryCache


class TestMemoryCache:
    """Tests for MemoryCache functionality."""

    def test_set_and_get(self):
        cache = MemoryCache()
        cache.set("my-patient", {"url": "http://example.org/my-patient"})

        assert cache.get("my-patient") == {"url": "http://example.org/my-patient"}
        assert "my-patient" in cache
        assert len(cache) == 1

    def test_get_missing_key(self):
        cache = MemoryCache()

        assert cache.get("nonexistent") is None
        assert cache.stats.misses == 1

    def test_get_or_create_builds_once(self):
        """The factory runs only for the first lookup of a key."""
        cache = MemoryCache()
        calls = []

        def build():
            calls.append(1)
            return "parsed"

        first = cache.get_or_create("sd", build)
        second = cache.get_or_create("sd", build)

        assert first == second == "parsed"
        assert len(calls) == 1
        assert cache.stats.hits == 1
        assert cache.stats.misses == 1
        assert cache.stats.lookups == 2

    def test_delete(self):
        cache = MemoryCache()
        cache.set("key1", "value1")
        cache.set("key2", "value2")

        assert cache.delete("key1") is True
        assert cache.delete("key1") is False
        assert cache.get("key2") == "value2"

    def test_clear(self):
        cache = MemoryCache()
        cache.set("key1", "value1")
        cache.set("key2", "value2")

        cache.clear()

        assert len(cache) == 0
        assert "key1" not in cache

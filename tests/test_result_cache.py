"""
Unit tests for the result cache.
"""

import dataclasses
from concurrent.futures import ThreadPoolExecutor

import pytest

from image_checker.core.result_cache import DEFAULT_TTL, ResultCache


class TestLookupAndStore:
    """Tests for lookup/store freshness rules."""

    def test_default_ttl_is_five_minutes(self):
        assert DEFAULT_TTL == 300.0
        assert ResultCache().ttl == 300.0

    def test_miss_on_unknown_url(self, cache):
        assert cache.lookup("https://a/1.jpg") is None

    def test_store_then_lookup(self, cache, clock):
        cache.store("https://a/1.jpg", True, "Image fetched successfully")

        entry = cache.lookup("https://a/1.jpg")

        assert entry.valid is True
        assert entry.message == "Image fetched successfully"
        assert entry.timestamp == clock.now

    def test_expired_entry_is_a_miss_before_sweep(self, cache, clock):
        cache.store("https://a/1.jpg", True, "ok")
        clock.advance(301)

        assert cache.lookup("https://a/1.jpg") is None
        assert len(cache) == 0

    def test_entry_at_exact_ttl_is_stale(self, cache, clock):
        cache.store("https://a/1.jpg", True, "ok")
        clock.advance(300)

        assert cache.lookup("https://a/1.jpg") is None

    def test_entry_just_inside_ttl_is_fresh(self, cache, clock):
        cache.store("https://a/1.jpg", True, "ok")
        clock.advance(299.9)

        assert cache.lookup("https://a/1.jpg") is not None

    def test_newer_write_supersedes(self, cache, clock):
        cache.store("https://a/1.jpg", False, "Error fetching image: HTTP 500")
        clock.advance(10)
        cache.store("https://a/1.jpg", True, "Image fetched successfully")

        entry = cache.lookup("https://a/1.jpg")

        assert entry.valid is True
        assert entry.timestamp == clock.now

    def test_entries_are_immutable(self, cache):
        entry = cache.store("https://a/1.jpg", True, "ok")

        with pytest.raises(dataclasses.FrozenInstanceError):
            entry.valid = False

    def test_contains(self, cache):
        cache.store("https://a/1.jpg", True, "ok")

        assert "https://a/1.jpg" in cache
        assert "https://a/2.jpg" not in cache


class TestSweepAndClear:
    """Tests for sweep and clear."""

    def test_sweep_removes_only_expired(self, cache, clock):
        cache.store("https://a/old.jpg", True, "ok")
        clock.advance(200)
        cache.store("https://a/new.jpg", True, "ok")
        clock.advance(150)

        removed = cache.sweep()

        assert removed == 1
        assert len(cache) == 1
        assert cache.lookup("https://a/new.jpg") is not None

    def test_sweep_empty_cache(self, cache):
        assert cache.sweep() == 0

    def test_clear_drops_everything(self, cache):
        cache.store("https://a/1.jpg", True, "ok")
        cache.store("https://a/2.jpg", False, "bad")

        cache.clear()

        assert len(cache) == 0


class TestStats:
    """Tests for cache statistics."""

    def test_empty_cache_ratio_is_zero(self, cache):
        stats = cache.stats()

        assert stats.total_entries == 0
        assert stats.fresh_entries == 0
        assert stats.expired_entries == 0
        assert stats.hit_ratio == 0.0

    def test_only_expired_entries_ratio_is_zero(self, cache, clock):
        cache.store("https://a/1.jpg", True, "ok")
        clock.advance(400)

        stats = cache.stats()

        assert stats.total_entries == 1
        assert stats.expired_entries == 1
        assert stats.hit_ratio == 0.0

    def test_mixed_entries(self, cache, clock):
        cache.store("https://a/expired.jpg", True, "ok")
        clock.advance(301)
        cache.store("https://a/valid.jpg", True, "ok")
        cache.store("https://a/invalid.jpg", False, "bad")

        stats = cache.stats()

        assert stats.total_entries == 3
        assert stats.fresh_entries == 2
        assert stats.expired_entries == 1
        assert stats.hit_ratio == 0.5

    def test_stats_to_dict_keys(self, cache):
        cache.store("https://a/1.jpg", True, "ok")

        assert cache.stats().to_dict() == {
            "totalEntries": 1,
            "validEntries": 1,
            "expiredEntries": 0,
            "cacheHitRatio": 1.0,
        }


class TestThreadSafety:
    """Concurrent writers on distinct keys must not interfere."""

    def test_concurrent_stores(self):
        cache = ResultCache()

        def write_many(worker):
            for i in range(200):
                cache.store(f"https://a/{worker}/{i}.jpg", True, "ok")

        with ThreadPoolExecutor(max_workers=8) as executor:
            list(executor.map(write_many, range(8)))

        assert len(cache) == 1600
        assert cache.stats().fresh_entries == 1600

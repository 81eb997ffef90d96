"""
Unit Tests for the In-Memory LRU Tier

Tests LRU ordering, eviction and key search bounds.
"""

import pytest

from litecache.core.models import CacheEntry
from litecache.infrastructure.cache.memory_tier import MemoryTier


def _entry(value) -> CacheEntry:
    return CacheEntry.create(value, ttl=60)


@pytest.mark.unit
class TestMemoryTier:
    """Test suite for MemoryTier."""

    def test_set_and_get(self):
        tier = MemoryTier(max_size=3)
        entry = _entry("v")

        tier.set("k", entry)

        assert tier.get("k") is entry
        assert "k" in tier
        assert tier.get_size() == 1

    def test_get_missing_returns_none(self):
        assert MemoryTier().get("missing") is None

    def test_evicts_least_recently_used(self):
        tier = MemoryTier(max_size=2)
        tier.set("a", _entry(1))
        tier.set("b", _entry(2))

        tier.get("a")
        tier.set("c", _entry(3))

        assert tier.keys() == ["a", "c"]
        assert tier.get("b") is None

    def test_peek_does_not_touch_order(self):
        tier = MemoryTier(max_size=2)
        tier.set("a", _entry(1))
        tier.set("b", _entry(2))

        tier.peek("a")
        tier.set("c", _entry(3))

        assert "a" not in tier

    def test_delete(self):
        tier = MemoryTier()
        tier.set("a", _entry(1))

        assert tier.delete("a") is True
        assert tier.delete("a") is False

    def test_clear(self):
        tier = MemoryTier()
        tier.set("a", _entry(1))
        tier.clear()
        assert tier.get_size() == 0

    def test_invalid_max_size(self):
        with pytest.raises(ValueError):
            MemoryTier(max_size=0)


@pytest.mark.unit
class TestMemoryTierKeys:
    """Test listing and searching keys."""

    @pytest.fixture
    def tier(self):
        tier = MemoryTier()
        for key in ["user:1", "user:2", "post:1", "User:3", "user:4"]:
            tier.set(key, _entry(key))
        return tier

    def test_list_keys_respects_limit(self, tier):
        assert tier.list_keys(2) == ["user:1", "user:2"]
        assert tier.list_keys(0) == []

    def test_search_is_case_sensitive_substring(self, tier):
        assert tier.search_keys("user", 10) == ["user:1", "user:2", "user:4"]

    def test_search_respects_limit(self, tier):
        result = tier.search_keys("user", 2)

        assert len(result) == 2
        assert all("user" in key for key in result)

    def test_search_no_match(self, tier):
        assert tier.search_keys("nothing", 10) == []

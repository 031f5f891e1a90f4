"""
BileMo API — List Cache Unit Tests
====================================

What:  Tests for TagAwareCache (keyed store + tag index) and ListCache
       (page keys, tags and embed-driven invalidation).
How:   Pure in-memory; a fake clock drives expiry.

What we test:
    ✅ Loader runs once per key; hits return identical text
    ✅ Tag invalidation removes every page of a kind, nothing else
    ✅ User writes also evict customer pages (customers embed users)
    ✅ TTL expiry and loader failures
"""

import pytest

from app.cache import ListCache, TagAwareCache
from app.schemas.views import EMBEDS


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def counting_loader(value: str):
    calls = []

    async def load() -> str:
        calls.append(1)
        return value

    return load, calls


class TestTagAwareCache:
    """Tests for the keyed store."""

    def test_set_then_get_returns_value_and_counts_hit(self):
        cache = TagAwareCache()
        cache.set("k", "v", tags=["t"])

        assert cache.get("k") == "v"
        assert cache.hits == 1
        assert cache.misses == 0

    def test_missing_key_counts_miss(self):
        cache = TagAwareCache()

        assert cache.get("absent") is None
        assert cache.misses == 1

    def test_invalidate_tags_removes_only_tagged_entries(self):
        cache = TagAwareCache()
        cache.set("a", "1", tags=["productsCache"])
        cache.set("b", "2", tags=["productsCache"])
        cache.set("c", "3", tags=["usersCache"])

        removed = cache.invalidate_tags(["productsCache"])

        assert removed == 2
        assert "a" not in cache
        assert "b" not in cache
        assert cache.get("c") == "3"

    def test_invalidate_unknown_tag_is_noop(self):
        cache = TagAwareCache()
        cache.set("a", "1", tags=["productsCache"])

        assert cache.invalidate_tags(["nothingCache"]) == 0
        assert len(cache) == 1

    def test_overwrite_replaces_tags(self):
        """Re-setting a key must drop it from its previous tags."""
        cache = TagAwareCache()
        cache.set("k", "old", tags=["first"])
        cache.set("k", "new", tags=["second"])

        cache.invalidate_tags(["first"])

        assert cache.get("k") == "new"

    def test_entry_expires_after_ttl(self):
        clock = FakeClock()
        cache = TagAwareCache(default_ttl=30, clock=clock)
        cache.set("k", "v")

        clock.now += 29
        assert cache.get("k") == "v"

        clock.now += 1
        assert cache.get("k") is None
        assert len(cache) == 0

    def test_zero_ttl_never_expires(self):
        clock = FakeClock()
        cache = TagAwareCache(default_ttl=0, clock=clock)
        cache.set("k", "v")

        clock.now += 10 ** 6

        assert cache.get("k") == "v"

    @pytest.mark.asyncio
    async def test_get_or_set_computes_once(self):
        cache = TagAwareCache()
        load, calls = counting_loader("[]")

        first = await cache.get_or_set("k", load, tags=["t"])
        second = await cache.get_or_set("k", load, tags=["t"])

        assert first == second == "[]"
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_get_or_set_stores_nothing_when_compute_fails(self):
        cache = TagAwareCache()

        async def broken() -> str:
            raise RuntimeError("database down")

        with pytest.raises(RuntimeError):
            await cache.get_or_set("k", broken)

        assert "k" not in cache

    def test_clear(self):
        cache = TagAwareCache()
        cache.set("a", "1", tags=["t"])
        cache.clear()

        assert len(cache) == 0
        assert cache.invalidate_tags(["t"]) == 0


class TestListCache:
    """Tests for page keys and embed-aware invalidation."""

    def setup_method(self):
        self.store = TagAwareCache()
        self.cache = ListCache(self.store, EMBEDS)

    def test_key_and_tag_format(self):
        assert ListCache.key("products", 2, 5) == "getAllProducts-2-5"
        assert ListCache.key("customers", 1, 1) == "getAllCustomers-1-1"
        assert ListCache.tag("users") == "usersCache"

    def test_dependent_kinds_follow_embeds(self):
        assert self.cache.dependent_kinds("users") == {"users", "customers"}
        assert self.cache.dependent_kinds("customers") == {"customers"}
        assert self.cache.dependent_kinds("products") == {"products"}

    def test_dependent_kinds_are_transitive(self):
        cache = ListCache(TagAwareCache(), {"a": ("b",), "b": ("c",), "c": ()})

        assert cache.dependent_kinds("c") == {"a", "b", "c"}

    @pytest.mark.asyncio
    async def test_pages_are_cached_per_page_and_limit(self):
        load, calls = counting_loader("[]")

        await self.cache.get("products", 1, 5, load)
        await self.cache.get("products", 1, 5, load)
        await self.cache.get("products", 2, 5, load)
        await self.cache.get("products", 1, 10, load)

        assert len(calls) == 3
        assert "getAllProducts-1-5" in self.store

    @pytest.mark.asyncio
    async def test_user_write_evicts_user_and_customer_pages(self):
        load, _ = counting_loader("[]")
        await self.cache.get("users", 1, 5, load)
        await self.cache.get("customers", 1, 5, load)
        await self.cache.get("products", 1, 5, load)

        tags = self.cache.invalidate("users")

        assert tags == {"usersCache", "customersCache"}
        assert "getAllUsers-1-5" not in self.store
        assert "getAllCustomers-1-5" not in self.store
        assert "getAllProducts-1-5" in self.store

    @pytest.mark.asyncio
    async def test_customer_write_keeps_user_pages(self):
        load, _ = counting_loader("[]")
        await self.cache.get("users", 1, 5, load)
        await self.cache.get("customers", 1, 5, load)

        self.cache.invalidate("customers")

        assert "getAllUsers-1-5" in self.store
        assert "getAllCustomers-1-5" not in self.store

    @pytest.mark.asyncio
    async def test_invalidation_forces_reload(self):
        load, calls = counting_loader("[]")
        await self.cache.get("products", 1, 1, load)

        self.cache.invalidate("products")
        await self.cache.get("products", 1, 1, load)

        assert len(calls) == 2

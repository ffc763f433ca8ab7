"""
Unit Tests for Collection Operation Groups

Tests list, map and set views returned by the facade.
"""

import pytest

from fastcache.core.exceptions import CacheKeyError
from fastcache.infrastructure.cache.operations import ListOperations, MapOperations, SetOperations


@pytest.mark.unit
class TestListOperations:
    """Test list (queue/deque) operations."""

    async def test_unshift_push_shift_pop(self, cache):
        items = cache.list("bar")

        await items.unshift("one")
        await items.push("two")
        assert await items.get_all() == ["one", "two"]

        assert await items.shift() == "one"
        assert await items.get_all() == ["two"]

        assert await items.pop() == "two"
        assert await items.get_all() == []

    async def test_push_returns_length(self, cache):
        items = cache.list("bar")

        assert await items.push("a") == 1
        assert await items.unshift("b") == 2
        assert await items.length() == 2

    async def test_pop_and_shift_on_empty_return_none(self, cache):
        items = cache.list("empty")

        assert await items.pop() is None
        assert await items.shift() is None

    async def test_set_all_replaces_in_order(self, cache):
        items = cache.list("bar")
        await items.push("stale")

        await items.set_all(["a", "b", "c"])

        assert await items.get_all() == ["a", "b", "c"]

    async def test_get_all_range(self, cache):
        items = cache.list("bar")
        await items.set_all(["a", "b", "c", "d"])

        assert await items.get_all(1, 2) == ["b", "c"]
        assert await items.get_all(-2) == ["c", "d"]

    async def test_remove_all_defaults_empty_the_list(self, cache):
        items = cache.list("bar")
        await items.set_all(["a", "b", "c"])

        await items.remove_all()

        assert await items.length() == 0

    async def test_remove_all_defaults_empty_a_single_element_list(self, cache):
        items = cache.list("bar")
        await items.push("only")

        await items.remove_all()

        assert await items.get_all() == []

    async def test_remove_all_keeps_range(self, cache):
        items = cache.list("bar")
        await items.set_all(["a", "b", "c", "d"])

        await items.remove_all(1, 2)

        assert await items.get_all() == ["b", "c"]

    async def test_list_writes_have_no_expiry(self, cache, fake_redis):
        await cache.list("bar").push("a")

        assert "bar" not in fake_redis.expires

    async def test_wrong_type_raises(self, cache):
        await cache.set("scalar", "v")

        with pytest.raises(CacheKeyError):
            await cache.list("scalar").push("x")


@pytest.mark.unit
class TestMapOperations:
    """Test hash operations."""

    async def test_set_get_remove(self, cache):
        fields = cache.map("user:1")

        assert await fields.set("name", "ada") == 1
        assert await fields.get("name") == "ada"
        assert await fields.remove("name") == 1
        assert await fields.get("name") is None

    async def test_set_all_get_all_remove_all(self, cache):
        fields = cache.map("user:1")

        await fields.set_all({"name": "ada", "lang": "en"})
        assert await fields.get_all(["lang", "missing", "name"]) == ["en", None, "ada"]
        assert await fields.length() == 2

        assert await fields.remove_all(["name", "lang"]) == 2
        assert await fields.length() == 0

    async def test_remove_all_with_no_fields(self, cache):
        assert await cache.map("user:1").remove_all([]) == 0


@pytest.mark.unit
class TestSetOperations:
    """Test set operations."""

    async def test_add_contains_remove(self, cache):
        members = cache.set_of("tags")

        assert await members.add("a", "b", "a") == 2
        assert await members.contains("a") is True
        assert await members.contains("z") is False
        assert await members.length() == 2

        assert await members.remove("a") == 1
        assert await members.contains("a") is False


@pytest.mark.unit
class TestPrefixing:
    """Test that operation groups address the prefixed key."""

    async def test_views_keep_caller_key(self, prefixed_cache):
        assert isinstance(prefixed_cache.list("bar"), ListOperations)
        assert isinstance(prefixed_cache.map("bar"), MapOperations)
        assert isinstance(prefixed_cache.set_of("bar"), SetOperations)
        assert prefixed_cache.list("bar").key == "bar"

    async def test_commands_use_prefixed_key(self, prefixed_cache, fake_redis):
        await prefixed_cache.list("bar").push("a")
        await prefixed_cache.map("m").set("f", "v")
        await prefixed_cache.set_of("s").add("x")

        assert fake_redis.data["app:bar"] == ["a"]
        assert fake_redis.data["app:m"] == {"f": "v"}
        assert fake_redis.data["app:s"] == {"x"}

"""Tests for service layer."""

import asyncio

import pytest

from shortlink.database.cache import RedisCache
from shortlink.database.memory import InMemoryMappingStore
from shortlink.errors import (
    InvalidUrlError,
    CapacityExhaustedError,
    NotFoundError,
    StoreUnavailableError,
    OperationTimeoutError,
)
from shortlink.service import ShortenerService
from shortlink.shortcode import ShortCodeGenerator


class BrokenCounterStore(InMemoryMappingStore):
    """Store whose click increments always fail."""

    async def increment_clicks(self, code: str) -> int:
        raise StoreUnavailableError("counter offline")


class SlowStore(InMemoryMappingStore):
    """Store that stalls on selected operations."""

    def __init__(self, slow_ops, delay: float = 1.0):
        super().__init__()
        self.slow_ops = set(slow_ops)
        self.delay = delay

    async def _stall(self, op: str) -> None:
        if op in self.slow_ops:
            await asyncio.sleep(self.delay)

    async def put_if_absent(self, *args, **kwargs):
        await self._stall("put")
        return await super().put_if_absent(*args, **kwargs)

    async def get(self, code):
        await self._stall("get")
        return await super().get(code)

    async def increment_clicks(self, code):
        await self._stall("increment")
        return await super().increment_clicks(code)


class FakeRedis:
    """Minimal async stand-in for a redis client."""

    def __init__(self):
        self.data = {}

    async def get(self, key):
        return self.data.get(key)

    async def setex(self, key, ttl, value):
        self.data[key] = value

    async def ping(self):
        return True

    async def aclose(self):
        pass


class TestShorten:
    """Test shortening."""

    async def test_shorten_returns_code_and_short_url(self, service):
        result = await service.shorten("https://example.com/a/b")

        assert len(result.code) == 6
        assert set(result.code) <= set(ShortCodeGenerator.BASE62_CHARS)
        assert result.short_url == f"https://lnk.sh/{result.code}"
        assert result.target_url == "https://example.com/a/b"
        assert result.created
        assert result.created_at.tzinfo is not None

    async def test_example_scenario(self, service):
        """Shorten then resolve once: target comes back with one click."""
        shortened = await service.shorten("https://example.com/a/b")

        resolved = await service.resolve(shortened.code)

        assert resolved.target_url == "https://example.com/a/b"
        assert resolved.clicks == 1

    async def test_code_follows_configuration(self, store, logger):
        service = ShortenerService(
            store=store,
            short_code_generator=ShortCodeGenerator(length=9, alphabet="0123456789"),
            logger=logger,
        )

        result = await service.shorten("https://example.com")

        assert len(result.code) == 9
        assert result.code.isdigit()

    async def test_path_prefix(self, make_service):
        service = make_service(base_domain="https://lnk.sh/", path_prefix="/s")

        result = await service.shorten("https://example.com")

        assert result.short_url == f"https://lnk.sh/s/{result.code}"

    async def test_dedup_returns_same_code(self, service, sample_urls):
        first = await service.shorten(sample_urls[0])
        second = await service.shorten(sample_urls[0])

        assert first.code == second.code
        assert first.created
        assert not second.created

    async def test_dedup_off_mints_new_codes(self, make_service, store):
        service = make_service(dedup_on_shorten=False)

        first = await service.shorten("https://example.com/x")
        second = await service.shorten("https://example.com/x")

        assert first.code != second.code
        assert (await service.resolve(first.code)).target_url == "https://example.com/x"
        assert (await service.resolve(second.code)).target_url == "https://example.com/x"

    async def test_dedup_override_per_request(self, service):
        first = await service.shorten("https://example.com/x")
        second = await service.shorten("https://example.com/x", dedup=False)
        third = await service.shorten("https://example.com/x")

        assert second.code != first.code
        assert second.created
        assert third.code == first.code

    async def test_round_trip(self, service, sample_urls):
        for url in sample_urls:
            result = await service.shorten(url)
            assert (await service.resolve(result.code)).target_url == url

    async def test_codes_are_unique(self, service):
        results = [await service.shorten(f"https://example.com/{i}") for i in range(200)]

        codes = [r.code for r in results]
        assert len(set(codes)) == len(codes)

    @pytest.mark.parametrize("url", [
        "not a url",
        "ftp://host/x",
        "",
        "example.com/path",
        "http://",
        "https:///path",
        "javascript:alert(1)",
        "https://exa mple.com",
        "https://example.com:99999/",
        "https://example.com/" + "a" * 2048,
    ])
    async def test_invalid_url(self, service, url):
        with pytest.raises(InvalidUrlError) as exc_info:
            await service.shorten(url)

        assert exc_info.value.kind == "invalid_url"
        assert (await service.get_statistics())["total_links"] == 0

    async def test_collision_retries_with_new_code(self, make_service, store):
        await store.put_if_absent("aaaaaa", "https://taken.example.com")
        service = make_service(codes=["aaaaaa", "aaaaaa", "bbbbbb"])

        result = await service.shorten("https://example.com/new")

        assert result.code == "bbbbbb"
        assert (await store.get("aaaaaa")).target_url == "https://taken.example.com"

    async def test_capacity_exhausted(self, make_service, store):
        await store.put_if_absent("aaaaaa", "https://taken.example.com")
        service = make_service(codes=["aaaaaa"] * 5, max_generation_attempts=5)

        with pytest.raises(CapacityExhaustedError):
            await service.shorten("https://example.com/new")

        assert (await store.get("aaaaaa")).target_url == "https://taken.example.com"
        assert await store.find_by_target("https://example.com/new") is None

    async def test_invalid_attempt_bound(self, make_service):
        with pytest.raises(ValueError):
            make_service(max_generation_attempts=0)


class TestResolve:
    """Test resolution."""

    async def test_unknown_code(self, service):
        with pytest.raises(NotFoundError) as exc_info:
            await service.resolve("zzzzzz")

        assert exc_info.value.kind == "not_found"

    @pytest.mark.parametrize("code", ["", "x" * 65])
    async def test_malformed_code(self, service, code):
        with pytest.raises(NotFoundError):
            await service.resolve(code)

    async def test_code_from_older_configuration_resolves(self, service, store):
        """Codes outside the current length and alphabet still resolve."""
        await store.put_if_absent("old-code_1", "https://example.com/legacy")

        result = await service.resolve("old-code_1")

        assert result.target_url == "https://example.com/legacy"
        assert result.clicks == 1

    async def test_clicks_accumulate(self, service):
        code = (await service.shorten("https://example.com")).code

        counts = [(await service.resolve(code)).clicks for _ in range(3)]

        assert counts == [1, 2, 3]
        assert (await service.get_link(code)).clicks == 3

    async def test_get_link_does_not_count(self, service):
        code = (await service.shorten("https://example.com")).code

        await service.get_link(code)
        link = await service.get_link(code)

        assert link.clicks == 0
        assert link.target_url == "https://example.com"

    async def test_get_link_unknown(self, service):
        with pytest.raises(NotFoundError):
            await service.get_link("zzzzzz")

    async def test_increment_failure_is_not_fatal(self, make_service, logger):
        store = BrokenCounterStore(logger=logger)
        service = make_service(store_instance=store)
        code = (await service.shorten("https://example.com")).code

        result = await service.resolve(code)

        assert result.target_url == "https://example.com"
        assert result.clicks == 0

    async def test_slow_increment_does_not_fail_resolve(self, make_service):
        store = SlowStore(["increment"], delay=1.0)
        service = make_service(store_instance=store)
        code = (await service.shorten("https://example.com")).code

        result = await service.resolve(code, timeout=0.05)

        assert result.target_url == "https://example.com"
        assert result.clicks == 0


class TestTimeouts:
    """Test caller supplied timeouts."""

    async def test_resolve_lookup_timeout(self, make_service):
        store = SlowStore(["get"], delay=1.0)
        service = make_service(store_instance=store)
        code = (await service.shorten("https://example.com")).code

        with pytest.raises(OperationTimeoutError) as exc_info:
            await service.resolve(code, timeout=0.05)

        assert exc_info.value.kind == "timeout"

    async def test_shorten_timeout_leaves_no_partial_link(self, make_service):
        store = SlowStore(["put"], delay=1.0)
        service = make_service(store_instance=store)

        with pytest.raises(OperationTimeoutError):
            await service.shorten("https://example.com/slow", timeout=0.05)

        assert await store.find_by_target("https://example.com/slow") is None
        assert (await store.get_statistics())["total_links"] == 0

    async def test_default_timeout(self, make_service):
        store = SlowStore(["put"], delay=1.0)
        service = make_service(store_instance=store, default_timeout=0.05)

        with pytest.raises(OperationTimeoutError):
            await service.shorten("https://example.com/slow")

    async def test_cancelled_shorten_leaves_no_partial_link(self, make_service):
        store = SlowStore(["put"], delay=1.0)
        service = make_service(store_instance=store)

        task = asyncio.create_task(service.shorten("https://example.com/cancel"))
        await asyncio.sleep(0.01)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert await store.find_by_target("https://example.com/cancel") is None


class TestCache:
    """Test read-through caching."""

    async def test_resolve_uses_cache(self, make_service, store, logger):
        cache = RedisCache(client=FakeRedis(), logger=logger)
        service = make_service(cache=cache)
        code = (await service.shorten("https://example.com/cached")).code

        assert await cache.get(cache.get_cache_key(code)) == "https://example.com/cached"

        result = await service.resolve(code)

        assert result.target_url == "https://example.com/cached"
        assert result.clicks == 1

    async def test_cache_filled_on_miss(self, make_service, store, logger):
        await store.put_if_absent("abc123", "https://example.com/miss")
        cache = RedisCache(client=FakeRedis(), logger=logger)
        service = make_service(cache=cache)

        await service.resolve("abc123")

        assert await cache.get(cache.get_cache_key("abc123")) == "https://example.com/miss"

    async def test_cache_hit_with_failed_increment(self, make_service, logger):
        store = BrokenCounterStore(logger=logger)
        cache = RedisCache(client=FakeRedis(), logger=logger)
        service = make_service(store_instance=store, cache=cache)
        code = (await service.shorten("https://example.com")).code

        result = await service.resolve(code)

        assert result.target_url == "https://example.com"
        assert result.clicks is None


class TestServiceInfo:
    """Test statistics, health and lifecycle."""

    async def test_statistics(self, service):
        code = (await service.shorten("https://example.com")).code
        await service.resolve(code)

        stats = await service.get_statistics()

        assert stats["total_links"] == 1
        assert stats["total_clicks"] == 1
        assert stats["cache_enabled"] is False
        assert stats["dedup_on_shorten"] is True
        assert stats["keyspace_size"] == 62 ** 6

    async def test_health_check(self, service):
        health = await service.health_check()

        assert health == {"database": True, "cache": True, "overall": True}

    async def test_closed_service_reports_store_unavailable(self, service):
        await service.close()

        with pytest.raises(StoreUnavailableError):
            await service.shorten("https://example.com")
        assert (await service.health_check())["overall"] is False

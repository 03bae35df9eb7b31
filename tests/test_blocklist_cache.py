"""Tests for the blocked hostname cache."""

import asyncio

import pytest

from shortener.services.blocklist_cache import BlockedHostnameCache, registrable_domain


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class FakeBlocklistGateway:
    """Serves a mutable list of hostnames and counts the reads."""

    def __init__(self, hostnames=()):
        self.hostnames = list(hostnames)
        self.reads = 0

    async def list_blocked_hostnames(self):
        self.reads += 1
        # Yield so concurrent refreshes interleave
        await asyncio.sleep(0)
        return list(self.hostnames)


class TestRegistrableDomain:
    def test_strips_subdomains(self):
        assert registrable_domain("example.com") == "example.com"
        assert registrable_domain("sub.example.com") == "example.com"
        assert registrable_domain("a.b.example.com") == "example.com"

    def test_single_label_unchanged(self):
        assert registrable_domain("localhost") == "localhost"

    def test_multi_part_suffix_not_recognised(self):
        assert registrable_domain("shop.example.co.uk") == "co.uk"


class TestBlockedHostnameCache:
    @pytest.mark.asyncio
    async def test_seed_membership(self):
        cache = BlockedHostnameCache(FakeBlocklistGateway(), seed_hostnames=["bad.com"])

        assert await cache.is_hostname_blocked("bad.com")
        assert await cache.is_hostname_blocked("x.bad.com")
        assert await cache.is_hostname_blocked("a.b.bad.com")
        assert not await cache.is_hostname_blocked("notbad.com")
        assert not await cache.is_hostname_blocked("bad.com.evil.org")

    @pytest.mark.asyncio
    async def test_starts_stale_and_loads_on_first_check(self):
        gateway = FakeBlocklistGateway(["new.com"])
        cache = BlockedHostnameCache(gateway, clock=FakeClock())

        assert not cache.is_fresh()
        assert await cache.is_hostname_blocked("www.new.com")
        assert cache.is_fresh()
        assert gateway.reads == 1

    @pytest.mark.asyncio
    async def test_no_reload_within_ttl(self):
        gateway = FakeBlocklistGateway(["new.com"])
        clock = FakeClock()
        cache = BlockedHostnameCache(gateway, ttl=60, clock=clock)

        assert await cache.is_hostname_blocked("new.com")

        # Removed from the store, but the cache keeps it and does not re-read
        gateway.hostnames.clear()
        clock.now += 59
        assert await cache.is_hostname_blocked("new.com")
        assert gateway.reads == 1

    @pytest.mark.asyncio
    async def test_reload_after_ttl_only_adds(self):
        gateway = FakeBlocklistGateway(["first.com"])
        clock = FakeClock()
        cache = BlockedHostnameCache(gateway, seed_hostnames=["seed.com"], ttl=60, clock=clock)

        await cache.refresh()
        gateway.hostnames = ["second.com"]
        clock.now += 60

        assert await cache.is_hostname_blocked("second.com")
        assert gateway.reads == 2
        assert cache.hostnames == {"seed.com", "first.com", "second.com"}

    @pytest.mark.asyncio
    async def test_forced_refresh_ignores_ttl(self):
        gateway = FakeBlocklistGateway()
        cache = BlockedHostnameCache(gateway, clock=FakeClock())

        await cache.refresh()
        gateway.hostnames.append("late.com")
        await cache.refresh(force=True)

        assert gateway.reads == 2
        assert "late.com" in cache.hostnames

    @pytest.mark.asyncio
    async def test_concurrent_refreshes(self):
        gateway = FakeBlocklistGateway(["a.com", "b.com", "c.com"])
        cache = BlockedHostnameCache(gateway, seed_hostnames=["seed.com"], clock=FakeClock())

        results = await asyncio.gather(
            *(cache.is_hostname_blocked(hostname) for hostname in
              ["a.com", "x.b.com", "c.com", "seed.com", "other.com"])
        )

        assert results == [True, True, True, True, False]
        assert cache.is_fresh()
        assert cache.hostnames == {"seed.com", "a.com", "b.com", "c.com"}
        assert 1 <= gateway.reads <= 5

    @pytest.mark.asyncio
    async def test_loads_from_database(self, gateway):
        await gateway.add_blocked_hostname("stored.com")
        await gateway.add_blocked_hostname("stored.com")
        cache = BlockedHostnameCache(gateway)

        assert await cache.is_hostname_blocked("www.stored.com")
        assert cache.hostnames == {"stored.com"}


class TestHostnameCase:
    @pytest.mark.asyncio
    async def test_seed_entries_match_any_case(self):
        cache = BlockedHostnameCache(FakeBlocklistGateway(), seed_hostnames=["Bad.COM"])

        assert cache.hostnames == frozenset({"bad.com"})
        assert await cache.is_hostname_blocked("bad.com")
        assert await cache.is_hostname_blocked("www.bad.com")
        assert await cache.is_hostname_blocked("BAD.com")

    @pytest.mark.asyncio
    async def test_database_entries_stored_lowercase(self):
        cache = BlockedHostnameCache(FakeBlocklistGateway(["Stored.COM"]), clock=FakeClock())

        assert await cache.is_hostname_blocked("shop.stored.com")
        assert cache.hostnames == frozenset({"stored.com"})

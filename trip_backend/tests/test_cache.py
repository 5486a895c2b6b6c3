from __future__ import annotations

import asyncio
import contextlib

from trip_backend.recommendations.cache import ResultCache, run_periodic_sweep


def test_get_missing_key_returns_none():
    cache = ResultCache()
    assert cache.get("nope") is None


def test_set_then_get_returns_same_object():
    cache = ResultCache()
    value = [{"title": "Beach Escape"}]
    cache.set("k", value, now=1000)
    assert cache.get("k", now=1001) is value


def test_set_overwrites_existing_entry():
    cache = ResultCache()
    cache.set("k", "old", now=1000)
    cache.set("k", "new", now=1000)
    assert cache.get("k", now=1000) == "new"
    assert len(cache) == 1


def test_default_ttl_is_five_minutes():
    cache = ResultCache()
    cache.set("k", "v", now=0)
    assert cache.get("k", now=300) == "v"  # expiry instant itself is still valid
    assert cache.get("k", now=300.001) is None


def test_expired_read_deletes_entry():
    cache = ResultCache()
    cache.set("k", "v", ttl=10, now=100)
    assert "k" in cache
    assert cache.get("k", now=111) is None
    assert "k" not in cache


def test_expired_read_keeps_entry_replaced_meanwhile():
    # The clock stores a fresh entry between the read and the expiry check.
    def _clock():
        cache.set("k", "fresh", now=50)
        return 50.0

    cache = ResultCache(default_ttl=10, clock=_clock)
    cache.set("k", "stale", now=0)
    assert cache.get("k") is None
    assert cache.get("k", now=50) == "fresh"


def test_falsy_values_are_still_hits():
    cache = ResultCache()
    cache.set("empty", [], now=0)
    assert cache.get("empty", now=1) == []
    assert cache.stats()["hits"] == 1


def test_clock_is_used_when_now_not_given():
    ticks = iter([0.0, 5.0, 20.0])
    cache = ResultCache(default_ttl=10, clock=lambda: next(ticks))
    cache.set("k", "v")
    assert cache.get("k") == "v"
    assert cache.get("k") is None


def test_invalidate_all_removes_everything():
    cache = ResultCache()
    cache.set("a", 1, now=0)
    cache.set("b", 2, ttl=1, now=0)  # expired entries go too
    assert cache.invalidate_all() == 2
    assert len(cache) == 0
    assert cache.get("a", now=0) is None
    assert cache.invalidate_all() == 0


def test_sweep_expired_keeps_live_entries():
    cache = ResultCache()
    cache.set("old", 1, ttl=10, now=0)
    cache.set("fresh", 2, ttl=100, now=0)
    assert cache.sweep_expired(now=50) == 1
    assert "old" not in cache
    assert cache.get("fresh", now=50) == 2


def test_stats_counts_hits_and_misses():
    cache = ResultCache()
    cache.set("k", "v", now=0)
    cache.get("k", now=1)
    cache.get("k", now=2)
    cache.get("other", now=2)
    cache.get("k", now=1000)  # expired
    stats = cache.stats()
    assert stats == {"size": 0, "hits": 2, "misses": 2, "hit_rate": 50.0}


def test_stats_empty_cache():
    assert ResultCache().stats() == {"size": 0, "hits": 0, "misses": 0, "hit_rate": 0.0}


def test_periodic_sweep_removes_expired_entries():
    clock_time = [0.0]
    cache = ResultCache(default_ttl=1, clock=lambda: clock_time[0])
    cache.set("k", "v")
    clock_time[0] = 10.0

    async def _run():
        task = asyncio.create_task(run_periodic_sweep(cache, interval=0.01))
        await asyncio.sleep(0.1)
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    asyncio.run(_run())
    assert len(cache) == 0

# tests/test_content_cache.py

from concurrent.futures import ThreadPoolExecutor

import pytest

from quote_finder.domain.models import CachedContent
from quote_finder.infrastructure.content_cache import ContentCache


# ── Fixtures ──────────────────────────────────────────────────────────────────

class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return ContentCache(ttl_seconds=10, max_size=3, clock=clock)


# ── Read / write ──────────────────────────────────────────────────────────────

def test_put_then_get_returns_content_and_ocr_flag(cache):
    cache.put("doc", "full text", is_ocr=True)

    assert cache.get("doc") == CachedContent(content="full text", is_ocr=True)


def test_unknown_key_is_a_miss(cache):
    assert cache.get("missing") is None


def test_put_overwrites_existing_key(cache):
    cache.put("doc", "old")
    cache.put("doc", "new")

    assert cache.get("doc").content == "new"
    assert len(cache) == 1


def test_empty_key_is_rejected(cache):
    with pytest.raises(ValueError):
        cache.put("", "text")


@pytest.mark.parametrize("kwargs", [{"max_size": 0}, {"ttl_seconds": 0}])
def test_invalid_bounds_are_rejected(kwargs):
    with pytest.raises(ValueError):
        ContentCache(**kwargs)


# ── TTL ───────────────────────────────────────────────────────────────────────

def test_expired_entry_is_never_served_and_is_removed(cache, clock):
    cache.put("doc", "text")
    clock.advance(11)

    assert cache.get("doc") is None
    assert "doc" not in cache
    assert cache.get("doc") is None


def test_entry_at_exact_ttl_is_still_served(cache, clock):
    cache.put("doc", "text")
    clock.advance(10)

    assert cache.get("doc") is not None


def test_read_refreshes_ttl(cache, clock):
    cache.put("doc", "text")
    clock.advance(8)
    cache.get("doc")
    clock.advance(8)

    assert cache.get("doc") is not None


def test_write_sweeps_expired_entries(cache, clock):
    cache.put("stale", "text")
    clock.advance(11)
    cache.put("fresh", "text")

    assert cache.keys() == ["fresh"]


# ── Capacity ──────────────────────────────────────────────────────────────────

def test_size_never_exceeds_capacity(cache, clock):
    for i in range(10):
        cache.put(f"doc-{i}", "text")
        clock.advance(1)
        assert len(cache) <= cache.max_size


def test_least_recently_used_entry_is_evicted(cache, clock):
    cache.put("a", "A")
    clock.advance(1)
    cache.put("b", "B")
    clock.advance(1)
    cache.put("c", "C")
    clock.advance(1)
    cache.get("a")
    clock.advance(1)
    cache.put("d", "D")

    assert len(cache) == 3
    assert set(cache.keys()) == {"a", "c", "d"}


def test_overwriting_a_key_at_capacity_evicts_nothing(cache, clock):
    for key in ("a", "b", "c"):
        cache.put(key, key)
        clock.advance(1)

    cache.put("a", "updated")

    assert set(cache.keys()) == {"a", "b", "c"}


def test_evict_and_clear(cache):
    cache.put("a", "A")
    cache.put("b", "B")

    assert cache.evict("a") is True
    assert cache.evict("a") is False
    cache.clear()
    assert len(cache) == 0


# ── Concurrency ───────────────────────────────────────────────────────────────

def test_concurrent_writers_and_readers_respect_capacity():
    cache = ContentCache(ttl_seconds=60, max_size=5)

    def worker(n: int) -> None:
        for i in range(200):
            key = f"doc-{(n * 7 + i) % 23}"
            cache.put(key, f"{n}:{i}", is_ocr=bool(i % 2))
            cached = cache.get(key)
            assert cached is None or cached.content.count(":") == 1
            assert len(cache) <= cache.max_size

    with ThreadPoolExecutor(max_workers=8) as pool:
        futures = [pool.submit(worker, n) for n in range(8)]
        for future in futures:
            future.result()

    assert len(cache) == cache.max_size

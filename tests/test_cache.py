import time

from storefront_proxy.cache import ResponseCache


class FakeClock:
    def __init__(self, now_ms=1_000_000):
        self.now_ms = now_ms

    def __call__(self):
        return self.now_ms / 1000

    def advance_ms(self, ms):
        self.now_ms += ms


def test_get_returns_value_before_expiry():
    clock = FakeClock()
    cache = ResponseCache(clock=clock)
    cache.set("k", {"v": 1}, ttl_ms=500)
    clock.advance_ms(499)
    assert cache.get("k") == {"v": 1}


def test_expired_entry_is_deleted_on_read():
    clock = FakeClock()
    cache = ResponseCache(clock=clock)
    cache.set("k", {"v": 1}, ttl_ms=500)
    clock.advance_ms(500)
    assert "k" in cache
    assert cache.get("k") is None
    assert "k" not in cache


def test_default_ttl_is_used_when_unspecified():
    clock = FakeClock()
    cache = ResponseCache(default_ttl_ms=60_000, clock=clock)
    cache.set("k", "v")
    clock.advance_ms(59_999)
    assert cache.get("k") == "v"
    clock.advance_ms(1)
    assert cache.get("k") is None


def test_set_overwrites_and_refreshes_expiry():
    clock = FakeClock()
    cache = ResponseCache(clock=clock)
    cache.set("k", "old", ttl_ms=100)
    clock.advance_ms(90)
    cache.set("k", "new", ttl_ms=100)
    clock.advance_ms(50)
    assert cache.get("k") == "new"


def test_clear_and_invalidate():
    cache = ResponseCache()
    cache.set("a", 1)
    cache.set("b", 2)
    cache.invalidate("a")
    assert cache.get("a") is None
    assert cache.get("b") == 2
    cache.clear()
    assert len(cache) == 0


def test_generate_key_is_deterministic():
    key_a = ResponseCache.generate_key("query Q { x }", {"first": 2, "after": None})
    key_b = ResponseCache.generate_key("query Q { x }", {"after": None, "first": 2})
    assert key_a == key_b
    assert key_a != ResponseCache.generate_key("query Q { x }", {"first": 3, "after": None})
    assert ResponseCache.generate_key("q", None) == ResponseCache.generate_key("q", {})


def test_max_entries_evicts_oldest_insertion():
    cache = ResponseCache(max_entries=2)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("c", 3)
    assert cache.get("a") is None
    assert cache.get("b") == 2
    assert cache.get("c") == 3


def test_default_clock_is_monotonic():
    assert ResponseCache()._clock is time.monotonic

# tests/test_query_cache.py

"""Tests for the in-memory ResultCache and cache keys."""

import unittest

from src.models.search import SearchOptions, SearchResult
from src.storage.query_cache import ResultCache, make_key


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _key(term: str = "dress", **options: object) -> tuple[str, str]:
    return make_key(term, SearchOptions.create(**options), ["local"])  # type: ignore[arg-type]


class TestMakeKey(unittest.TestCase):
    """Cache key construction."""

    def test_term_normalized(self) -> None:
        """Case and whitespace differences share a key."""
        self.assertEqual(_key("  Summer   DRESS "), _key("summer dress"))

    def test_options_change_key(self) -> None:
        self.assertNotEqual(_key(max_price=50), _key(max_price=60))
        self.assertNotEqual(_key(sort_by="rating"), _key())

    def test_source_set_order_independent(self) -> None:
        """Only the set of source ids matters."""
        options = SearchOptions.create()
        self.assertEqual(
            make_key("dress", options, ["local", "ebay"]),
            make_key("dress", options, ["ebay", "local"]),
        )
        self.assertNotEqual(
            make_key("dress", options, ["local"]),
            make_key("dress", options, ["local", "ebay"]),
        )


class TestResultCache(unittest.TestCase):
    """ResultCache get/put/expiry/invalidation."""

    def setUp(self) -> None:
        self.clock = FakeClock()
        self.cache = ResultCache(ttl=300, clock=self.clock)
        self.result = SearchResult(query="dress", total_count=3)

    def test_miss_on_empty(self) -> None:
        self.assertIsNone(self.cache.get(_key()))

    def test_hit_returns_same_object(self) -> None:
        self.cache.put(_key(), self.result)
        self.assertIs(self.cache.get(_key()), self.result)

    def test_expires_after_ttl(self) -> None:
        """Entries are served until the TTL elapses, then evicted."""
        self.cache.put(_key(), self.result)
        self.clock.advance(299)
        self.assertIsNotNone(self.cache.get(_key()))
        self.clock.advance(1)
        self.assertIsNone(self.cache.get(_key()))
        self.assertEqual(len(self.cache), 0)

    def test_per_entry_ttl(self) -> None:
        self.cache.put(_key(), self.result, ttl=10)
        self.clock.advance(11)
        self.assertIsNone(self.cache.get(_key()))

    def test_put_replaces(self) -> None:
        newer = SearchResult(query="dress", total_count=9)
        self.cache.put(_key(), self.result)
        self.cache.put(_key(), newer)
        self.assertIs(self.cache.get(_key()), newer)
        self.assertEqual(len(self.cache), 1)

    def test_invalidate(self) -> None:
        self.cache.put(_key(), self.result)
        self.assertTrue(self.cache.invalidate(_key()))
        self.assertFalse(self.cache.invalidate(_key()))
        self.assertIsNone(self.cache.get(_key()))

    def test_invalidate_query_drops_all_filters(self) -> None:
        """Every filter combination of a term is dropped."""
        self.cache.put(_key(), self.result)
        self.cache.put(_key(max_price=50), self.result)
        self.cache.put(_key("shoes"), self.result)
        self.assertEqual(self.cache.invalidate_query("DRESS"), 2)
        self.assertEqual(len(self.cache), 1)

    def test_clear(self) -> None:
        self.cache.put(_key(), self.result)
        self.cache.put(_key("shoes"), self.result)
        self.assertEqual(self.cache.clear(), 2)
        self.assertEqual(len(self.cache), 0)

    def test_purge_expired(self) -> None:
        self.cache.put(_key(), self.result, ttl=5)
        self.cache.put(_key("shoes"), self.result)
        self.clock.advance(10)
        self.assertEqual(self.cache.purge_expired(), 1)
        self.assertEqual(len(self.cache), 1)

    def test_default_ttl_from_settings(self) -> None:
        from src.config.settings import Settings

        self.assertEqual(ResultCache().ttl, Settings.QUERY_CACHE_TTL)


if __name__ == "__main__":
    unittest.main()

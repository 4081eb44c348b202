# tests/test_search_models.py

"""Tests for SearchOptions, SearchQuery and SearchResult."""

import unittest

from src.config.settings import Settings
from src.models.product import ProductRecord
from src.models.search import (
    SearchOptions,
    SearchQuery,
    SearchResult,
    SourceOutcome,
)


class TestSearchOptions(unittest.TestCase):
    """SearchOptions.create normalisation."""

    def test_defaults(self) -> None:
        """No input yields relevance sort and the default limit."""
        opts = SearchOptions.create()
        self.assertEqual(opts.sort_by, "relevance")
        self.assertEqual(opts.limit, Settings.DEFAULT_RESULT_LIMIT)
        self.assertIsNone(opts.category)

    def test_unknown_sort_falls_back(self) -> None:
        """An unknown strategy becomes relevance."""
        with self.assertLogs("storefront_search.models", level="WARNING"):
            opts = SearchOptions.create(sort_by="newest")
        self.assertEqual(opts.sort_by, "relevance")

    def test_sort_is_case_insensitive(self) -> None:
        """Strategy names are lower-cased."""
        opts = SearchOptions.create(sort_by="PRICE_LOW")
        self.assertEqual(opts.sort_by, "price_low")

    def test_limit_clamped(self) -> None:
        """Limits are clamped to the configured maximum."""
        opts = SearchOptions.create(limit=10_000)
        self.assertEqual(opts.limit, Settings.MAX_RESULT_LIMIT)

    def test_non_positive_limit_uses_default(self) -> None:
        """Zero or negative limits use the default."""
        self.assertEqual(
            SearchOptions.create(limit=0).limit,
            Settings.DEFAULT_RESULT_LIMIT,
        )

    def test_all_category_means_none(self) -> None:
        """'all' disables the category filter."""
        self.assertIsNone(SearchOptions.create(category="All").category)

    def test_signature_distinguishes_filters(self) -> None:
        """Different filters produce different signatures."""
        a = SearchOptions.create(min_price=10)
        b = SearchOptions.create(min_price=20)
        self.assertNotEqual(a.signature(), b.signature())
        self.assertEqual(a.signature(), SearchOptions.create(min_price=10).signature())


class TestSearchQuery(unittest.TestCase):
    """SearchQuery normalisation and term splitting."""

    def test_term_normalised(self) -> None:
        """Terms are lower-cased, trimmed and whitespace-collapsed."""
        query = SearchQuery.create("  Summer   DRESS ")
        self.assertEqual(query.term, "summer dress")

    def test_short_terms_dropped(self) -> None:
        """Single-character terms are not scored."""
        query = SearchQuery.create("a red dress")
        self.assertEqual(query.terms, ["red", "dress"])

    def test_is_valid(self) -> None:
        """Queries below the minimum length are invalid."""
        self.assertFalse(SearchQuery.create(" x ").is_valid)
        self.assertTrue(SearchQuery.create("xy").is_valid)


class TestSearchResult(unittest.TestCase):
    """SearchResult helpers."""

    def test_to_dict(self) -> None:
        """to_dict renders plain structures."""
        rec = ProductRecord(id="1", title="Tote", price=5.0, source="local")
        result = SearchResult(
            query="tote",
            products=(rec,),
            total_count=1,
            sources=("local",),
            errors={"ebay": "timeout"},
            partial=True,
        )
        data = result.to_dict()
        self.assertEqual(data["sources"], ["local"])
        self.assertEqual(data["errors"], {"ebay": "timeout"})
        self.assertEqual(data["products"][0]["title"], "Tote")
        self.assertTrue(data["partial"])
        self.assertFalse(result.is_empty)

    def test_errors_read_only(self) -> None:
        """errors cannot be changed through the result or the input dict."""
        source_errors = {"ebay": "timeout"}
        result = SearchResult(query="tote", errors=source_errors)
        source_errors["etsy"] = "HTTP 500"

        self.assertEqual(result.errors, {"ebay": "timeout"})
        with self.assertRaises(TypeError):
            result.errors["amazon"] = "HTTP 503"  # type: ignore[index]
        self.assertFalse(hasattr(result.errors, "clear"))
        self.assertIsInstance(result.to_dict()["errors"], dict)

    def test_outcome_ok(self) -> None:
        """An outcome without an error is ok."""
        self.assertTrue(SourceOutcome(source_id="a").ok)
        self.assertFalse(SourceOutcome(source_id="a", error="timeout").ok)


if __name__ == "__main__":
    unittest.main()

# tests/test_relevance.py

"""Tests for the term-weighted RelevanceScorer."""

import unittest

from src.filters.relevance import RelevanceScorer
from src.models.product import ProductRecord
from src.models.search import SearchQuery


def _rec(
    title: str,
    category: str = "",
    brand: str = "",
    description: str = "",
) -> ProductRecord:
    """Create a minimal ProductRecord."""
    return ProductRecord(
        id=title,
        title=title,
        price=10.0,
        source="local",
        category=category,
        brand=brand,
        description=description,
    )


class TestRelevanceScorer(unittest.TestCase):
    """RelevanceScorer.score and score_all."""

    def test_title_weight(self) -> None:
        rec = _rec("Block Heeled Sandals")
        self.assertEqual(RelevanceScorer.score(SearchQuery.create("sandals"), rec), 10)

    def test_category_weight(self) -> None:
        rec = _rec("Espadrilles", category="shoes")
        self.assertEqual(RelevanceScorer.score(SearchQuery.create("shoes"), rec), 7)

    def test_brand_weight(self) -> None:
        rec = _rec("Tote", brand="Atelier Nord")
        self.assertEqual(RelevanceScorer.score(SearchQuery.create("nord"), rec), 5)

    def test_description_weight(self) -> None:
        rec = _rec("Tote", description="roomy canvas bag")
        self.assertEqual(RelevanceScorer.score(SearchQuery.create("canvas"), rec), 3)

    def test_fields_accumulate(self) -> None:
        """One term matching several fields adds every weight."""
        rec = _rec(
            "Leather Boots",
            category="leather goods",
            brand="Leather Co",
            description="full-grain leather",
        )
        self.assertEqual(
            RelevanceScorer.score(SearchQuery.create("leather"), rec), 25
        )

    def test_terms_accumulate(self) -> None:
        """Each query term contributes independently."""
        rec = _rec("Red Summer Dress", category="dresses")
        query = SearchQuery.create("red dress")
        # red: title 10; dress: title 10 + category 7
        self.assertEqual(RelevanceScorer.score(query, rec), 27)

    def test_case_insensitive(self) -> None:
        rec = _rec("LINEN SHIRT")
        self.assertEqual(RelevanceScorer.score(SearchQuery.create("Linen"), rec), 10)

    def test_short_terms_ignored(self) -> None:
        """Single-character terms never score."""
        rec = _rec("A Line Skirt")
        self.assertEqual(RelevanceScorer.score(SearchQuery.create("a x"), rec), 0)

    def test_score_all_drops_unmatched(self) -> None:
        """Zero-score records are excluded; scores are attached."""
        records = [_rec("Wool Coat"), _rec("Silk Scarf")]
        scored, unmatched = RelevanceScorer.score_all(
            SearchQuery.create("coat"), records
        )
        self.assertEqual(unmatched, 1)
        self.assertEqual(len(scored), 1)
        self.assertEqual(scored[0].title, "Wool Coat")
        self.assertEqual(scored[0].relevance, 10)
        self.assertEqual(records[0].relevance, 0.0)


if __name__ == "__main__":
    unittest.main()

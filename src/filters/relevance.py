# src/filters/relevance.py

"""Deterministic term-weighted relevance scoring."""

import logging

from src.models.product import ProductRecord
from src.models.search import SearchQuery

logger = logging.getLogger("storefront_search.filters")


class RelevanceScorer:
    """Score records by where each query term appears.

    Every term contributes independently: a term found in the title
    adds 10, in the category 7, in the brand 5 and in the description
    3.  Matching is a case-insensitive substring test.
    """

    TITLE_WEIGHT: float = 10
    CATEGORY_WEIGHT: float = 7
    BRAND_WEIGHT: float = 5
    DESCRIPTION_WEIGHT: float = 3

    @classmethod
    def score(cls, query: SearchQuery, record: ProductRecord) -> float:
        """Return the additive score of *record* for *query*."""
        title = record.title.lower()
        category = record.category.lower()
        brand = record.brand.lower()
        description = record.description.lower()

        total = 0.0
        for term in query.terms:
            if term in title:
                total += cls.TITLE_WEIGHT
            if term in category:
                total += cls.CATEGORY_WEIGHT
            if term in brand:
                total += cls.BRAND_WEIGHT
            if term in description:
                total += cls.DESCRIPTION_WEIGHT
        return total

    @classmethod
    def score_all(
        cls,
        query: SearchQuery,
        records: list[ProductRecord],
    ) -> tuple[list[ProductRecord], int]:
        """Attach scores, dropping records that match no term.

        Returns the scored copies and the count of unmatched records.
        """
        scored: list[ProductRecord] = []
        unmatched = 0
        for record in records:
            value = cls.score(query, record)
            if value <= 0:
                unmatched += 1
                continue
            scored.append(record.with_relevance(value))

        if unmatched:
            logger.debug(
                "Relevance scorer excluded %d unmatched records",
                unmatched,
            )
        return scored, unmatched

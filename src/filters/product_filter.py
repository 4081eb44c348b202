# src/filters/product_filter.py

"""Price-range and category filtering of source records."""

import logging

from src.models.product import ProductRecord
from src.models.search import SearchOptions

logger = logging.getLogger("storefront_search.filters")


class ProductFilter:
    """Filter records against the caller's search options."""

    @staticmethod
    def matches(record: ProductRecord, options: SearchOptions) -> bool:
        if options.min_price is not None and record.price < options.min_price:
            return False
        if options.max_price is not None and record.price > options.max_price:
            return False
        if options.category and options.category not in record.category.lower():
            return False
        return True

    @staticmethod
    def filter_by_options(
        products: list[ProductRecord],
        options: SearchOptions,
    ) -> tuple[list[ProductRecord], int]:
        """Remove records outside the price range or category.

        Returns the filtered list and the count of excluded records.
        """
        if (
            options.min_price is None
            and options.max_price is None
            and not options.category
        ):
            return products, 0

        kept = [
            p for p in products if ProductFilter.matches(p, options)
        ]
        excluded = len(products) - len(kept)

        if excluded:
            logger.info(
                "Filtered out %d products outside the requested options",
                excluded,
            )

        return kept, excluded

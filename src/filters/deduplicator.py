# src/filters/deduplicator.py

"""Product deduplication across multiple sources."""

import logging
import re

from src.models.product import ProductRecord

logger = logging.getLogger("storefront_search.filters")


class ProductDeduplicator:
    """Collapse records whose normalised titles are identical."""

    _NON_ALNUM_RE = re.compile(r"[^a-z0-9]")

    @staticmethod
    def title_key(title: str) -> str:
        """Normalise a title to its dedup key.

        Lowercases and strips every non-alphanumeric character, so
        ``"Block-Heeled Sandals!!"`` and ``"block heeled sandals"``
        share a key.
        """
        return ProductDeduplicator._NON_ALNUM_RE.sub("", title.lower())

    @staticmethod
    def deduplicate(
        products: list[ProductRecord],
    ) -> tuple[list[ProductRecord], int]:
        """Keep the first record seen for each title key.

        Input order decides which source wins a duplicate, so callers
        pass local records before remote ones.

        Returns the deduplicated list and the count of removed dupes.
        """
        if not products:
            return [], 0

        seen: set[str] = set()
        kept: list[ProductRecord] = []
        removed = 0

        for product in products:
            key = ProductDeduplicator.title_key(product.title)
            if key in seen:
                removed += 1
                continue
            seen.add(key)
            kept.append(product)

        if removed:
            logger.info(
                "Deduplication removed %d duplicate products",
                removed,
            )

        return kept, removed

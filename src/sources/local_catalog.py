# src/sources/local_catalog.py

"""In-memory scan over the storefront's own catalog."""

import json
from pathlib import Path
from typing import Any

from src.config.settings import Settings
from src.filters.normalizer import FieldMap, ProductNormalizer
from src.filters.relevance import RelevanceScorer
from src.models.product import ProductRecord
from src.models.search import SearchOptions, SearchQuery
from src.sources.base_source import SourceAdapter
from src.sources.exceptions import SourceError

_CATALOG_FIELDS = FieldMap(
    id=("id", "sku"),
    title=("name", "title"),
    price=("price",),
    original_price=("original_price", "compare_at_price"),
    category=("category",),
    brand=("brand",),
    description=("description",),
    rating=("rating",),
    review_count=("reviews",),
    availability=("availability",),
    shipping=("shipping",),
    image_url=("image",),
    url=("url",),
    url_template="/products/{id}",
)


class LocalCatalogSource(SourceAdapter):
    """The storefront's own product catalog.

    Records are loaded once from ``catalog.json`` (or passed in
    directly) and scanned for any query term on every call.
    """

    source_id = "local"
    label = "Local Catalog"
    is_local = True

    def __init__(
        self,
        enabled: bool = True,
        timeout: float | None = None,
        catalog_path: Path | None = None,
        records: list[ProductRecord] | None = None,
    ) -> None:
        super().__init__(enabled=enabled, timeout=timeout)
        self.catalog_path = catalog_path or Settings.CATALOG_PATH
        self._records: list[ProductRecord] | None = records

    def _load_catalog(self) -> list[ProductRecord]:
        """Read and normalize the catalog file."""
        try:
            with open(self.catalog_path, encoding="utf-8") as f:
                raw: Any = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise SourceError(
                f"Cannot read catalog {self.catalog_path}: {exc}"
            ) from exc

        items = raw.get("products", []) if isinstance(raw, dict) else raw
        records, dropped = ProductNormalizer.normalize(
            self.source_id, items, _CATALOG_FIELDS
        )
        self.logger.info(
            "[local] Loaded %d catalog products (%d dropped)",
            len(records),
            dropped,
        )
        return records

    @property
    def records(self) -> list[ProductRecord]:
        if self._records is None:
            self._records = self._load_catalog()
        return self._records

    def reload(self) -> None:
        """Forget the loaded catalog so the next query re-reads it."""
        self._records = None

    async def query(
        self, term: str, options: SearchOptions
    ) -> list[ProductRecord]:
        """Return catalog records matching at least one query term."""
        search_query = SearchQuery.create(term, options)
        matches = [
            r
            for r in self.records
            if RelevanceScorer.score(search_query, r) > 0
        ]
        self.logger.debug(
            "[local] %d of %d products match '%s'",
            len(matches),
            len(self.records),
            search_query.term,
        )
        return matches

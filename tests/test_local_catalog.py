# tests/test_local_catalog.py

"""Tests for the local catalog source."""

import json
import tempfile
import unittest
from pathlib import Path

from src.models.product import ProductRecord
from src.models.search import SearchOptions
from src.sources.exceptions import SourceError
from src.sources.local_catalog import LocalCatalogSource


class TestLocalCatalogSource(unittest.IsolatedAsyncioTestCase):
    """Catalog loading and term matching."""

    async def test_default_catalog_loads(self) -> None:
        source = LocalCatalogSource()
        self.assertEqual(len(source.records), 12)
        first = source.records[0]
        self.assertEqual(first.id, "ff-1001")
        self.assertEqual(first.price, 120.0)
        self.assertEqual(first.original_price, 150.0)
        self.assertEqual(first.url, "/products/ff-1001")
        self.assertTrue(all(r.source == "local" for r in source.records))

    async def test_query_matches_any_field(self) -> None:
        records = await LocalCatalogSource().query("sandals", SearchOptions())
        titles = {r.title for r in records}
        self.assertEqual(
            titles, {"Block Heeled Sandals", "Espadrille Wedge Sandals"}
        )

    async def test_query_matches_category(self) -> None:
        records = await LocalCatalogSource().query("shoes", SearchOptions())
        self.assertEqual(len(records), 3)

    async def test_no_match(self) -> None:
        records = await LocalCatalogSource().query("snorkel", SearchOptions())
        self.assertEqual(records, [])

    async def test_injected_records(self) -> None:
        source = LocalCatalogSource(
            records=[
                ProductRecord(id="x1", title="Silk Scarf", price=30.0, source="local")
            ]
        )
        records = await source.query("SILK", SearchOptions())
        self.assertEqual([r.id for r in records], ["x1"])

    async def test_missing_file_raises(self) -> None:
        source = LocalCatalogSource(catalog_path=Path("/nonexistent/catalog.json"))
        with self.assertRaises(SourceError):
            await source.query("dress", SearchOptions())

    async def test_reload_rereads_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "catalog.json"
            path.write_text(
                json.dumps({"products": [{"id": "a", "name": "Wool Hat", "price": 20}]}),
                encoding="utf-8",
            )
            source = LocalCatalogSource(catalog_path=path)
            self.assertEqual(len(source.records), 1)

            path.write_text(
                json.dumps(
                    [
                        {"id": "a", "name": "Wool Hat", "price": 20},
                        {"id": "b", "name": "Wool Scarf", "price": 25},
                        {"id": "c", "name": "Broken", "price": "n/a"},
                    ]
                ),
                encoding="utf-8",
            )
            source.reload()
            self.assertEqual(len(source.records), 2)


if __name__ == "__main__":
    unittest.main()

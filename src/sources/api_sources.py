# src/sources/api_sources.py

"""Remote retail sources backed by JSON search APIs.

Amazon, Walmart, Target and Etsy are reached through RapidAPI
proxies sharing one key; eBay uses its official Browse API with an
OAuth access token.
"""

import asyncio
import json
from typing import Any

from curl_cffi import requests as curl_requests
from curl_cffi.requests.exceptions import RequestException, Timeout

from src.config.settings import Settings
from src.filters.normalizer import FieldMap, ProductNormalizer, lookup
from src.models.product import ProductRecord
from src.models.search import SearchOptions
from src.sources.base_source import SourceAdapter
from src.sources.exceptions import SourceError, SourceTimeout


class JsonApiSource(SourceAdapter):
    """Base for sources answering over a JSON HTTP API.

    The HTTP call is blocking (curl_cffi session) and runs in a worker
    thread, so a timed-out call is abandoned rather than killed.
    """

    BASE_URL: str = ""
    RAPIDAPI_HOST: str = ""
    ITEMS_PATHS: tuple[str, ...] = ("results",)
    FIELDS: FieldMap = FieldMap()

    def __init__(
        self,
        enabled: bool = True,
        timeout: float | None = None,
        api_key: str | None = None,
    ) -> None:
        super().__init__(enabled=enabled, timeout=timeout)
        self.settings = Settings()
        self.api_key = (
            api_key if api_key is not None else self._default_api_key()
        )
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )

    def _default_api_key(self) -> str:
        return self.settings.RAPIDAPI_KEY

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "X-RapidAPI-Key": self.api_key,
            "X-RapidAPI-Host": self.RAPIDAPI_HOST,
        }

    def _params(self, term: str, options: SearchOptions) -> dict[str, str]:
        return {"query": term}

    def _prepare_item(self, item: dict[str, Any]) -> dict[str, Any]:
        """Hook for source-specific reshaping before normalization."""
        return item

    def _fetch(self, term: str, options: SearchOptions) -> Any:
        """Perform the blocking HTTP request and decode the payload."""
        try:
            resp = self.session.get(
                self.BASE_URL,
                params=self._params(term, options),
                headers=self._headers(),
                timeout=self.settings.REQUEST_TIMEOUT,
            )
        except Timeout as exc:
            raise SourceTimeout(f"{self.label} request timed out") from exc
        except RequestException as exc:
            raise SourceError(f"request failed: {exc}") from exc
        if resp.status_code != 200:
            raise SourceError(f"HTTP {resp.status_code}")
        try:
            return json.loads(resp.text)
        except json.JSONDecodeError as exc:
            raise SourceError("malformed payload") from exc

    def _extract_items(self, data: Any) -> list[Any]:
        for path in self.ITEMS_PATHS:
            items = lookup(data, path)
            if isinstance(items, list):
                return items
        return []

    async def query(
        self, term: str, options: SearchOptions
    ) -> list[ProductRecord]:
        if not self.api_key:
            raise SourceError(f"{self.label} API key not configured")

        self.logger.info("[%s] Searching for '%s'", self.source_id, term)
        data = await asyncio.to_thread(self._fetch, term, options)
        items = [
            self._prepare_item(item) if isinstance(item, dict) else item
            for item in self._extract_items(data)
        ]
        records, _dropped = ProductNormalizer.normalize(
            self.source_id, items, self.FIELDS
        )
        self.logger.info(
            "[%s] %d products for '%s'",
            self.source_id,
            len(records),
            term,
        )
        return records


class AmazonApiSource(JsonApiSource):
    """Amazon product search via RapidAPI."""

    source_id = "amazon"
    label = "Amazon"
    BASE_URL = "https://amazon-products1.p.rapidapi.com/search"
    RAPIDAPI_HOST = "amazon-products1.p.rapidapi.com"
    ITEMS_PATHS = ("results", "products")
    FIELDS = FieldMap(
        id=("asin", "id"),
        title=("title", "name"),
        price=("price.value", "current_price", "price"),
        original_price=("original_price",),
        category=("category",),
        brand=("brand",),
        description=("description",),
        rating=("rating", "reviews.rating"),
        review_count=("reviews.total_reviews", "review_count"),
        image_url=("image", "main_image"),
        url=("url", "link"),
        url_template="https://amazon.com/dp/{asin}",
    )

    def _params(self, term: str, options: SearchOptions) -> dict[str, str]:
        return {"query": term, "page": "1", "country": "US"}


class WalmartApiSource(JsonApiSource):
    """Walmart product search via RapidAPI."""

    source_id = "walmart"
    label = "Walmart"
    BASE_URL = "https://walmart-com1.p.rapidapi.com/search"
    RAPIDAPI_HOST = "walmart-com1.p.rapidapi.com"
    ITEMS_PATHS = ("items", "results")
    FIELDS = FieldMap(
        id=("id", "usItemId"),
        title=("name", "title"),
        price=("price", "current_price"),
        original_price=("list_price",),
        category=("category",),
        brand=("brand",),
        description=("description",),
        rating=("rating",),
        review_count=("reviews_count",),
        availability=("availability",),
        image_url=("image", "thumbnail"),
        url=("url",),
        url_template="https://walmart.com/ip/{id}",
    )

    def _params(self, term: str, options: SearchOptions) -> dict[str, str]:
        return {"query": term, "page": "1", "sortBy": "best_match"}


class TargetApiSource(JsonApiSource):
    """Target product search via RapidAPI."""

    source_id = "target"
    label = "Target"
    BASE_URL = "https://target1.p.rapidapi.com/search"
    RAPIDAPI_HOST = "target1.p.rapidapi.com"
    ITEMS_PATHS = ("data.search.products", "products")
    FIELDS = FieldMap(
        id=("tcin", "id"),
        title=("title", "name"),
        price=("price.current", "current_price"),
        original_price=("price.regular",),
        category=("category",),
        brand=("brand",),
        description=("description",),
        rating=("rating",),
        review_count=("review_count",),
        image_url=("image", "images.0"),
        url=("url",),
        url_template="https://target.com/p/{tcin}",
    )

    def _params(self, term: str, options: SearchOptions) -> dict[str, str]:
        return {"query": term, "limit": str(options.limit)}


class EtsyApiSource(JsonApiSource):
    """Etsy listing search via RapidAPI (prices reported in cents)."""

    source_id = "etsy"
    label = "Etsy"
    BASE_URL = "https://etsy2.p.rapidapi.com/search"
    RAPIDAPI_HOST = "etsy2.p.rapidapi.com"
    ITEMS_PATHS = ("results",)
    FIELDS = FieldMap(
        id=("listing_id", "id"),
        title=("title",),
        price=("price.amount", "price"),
        category=("category",),
        description=("description",),
        rating=("rating",),
        review_count=("num_favorers",),
        image_url=("Images.0.url_570xN", "image"),
        url=("url",),
        price_divisor=100.0,
        url_template="https://etsy.com/listing/{listing_id}",
    )

    def _params(self, term: str, options: SearchOptions) -> dict[str, str]:
        return {
            "query": term,
            "limit": str(options.limit),
            "sort_on": "relevancy",
        }


class EbayApiSource(JsonApiSource):
    """eBay Browse API item summary search."""

    source_id = "ebay"
    label = "eBay"
    BASE_URL = "https://api.ebay.com/buy/browse/v1/item_summary/search"
    ITEMS_PATHS = ("itemSummaries",)
    FASHION_CATEGORY_ID = "281"
    FIELDS = FieldMap(
        id=("itemId",),
        title=("title",),
        price=("price.value",),
        category=("categories.0.categoryName",),
        brand=("brand",),
        description=("shortDescription",),
        rating=(),
        review_count=(),
        availability=("availabilityStatus",),
        shipping=("shipping",),
        image_url=("image.imageUrl", "thumbnailImages.0.imageUrl"),
        url=("itemWebUrl",),
        url_template="https://ebay.com/itm/{itemId}",
    )

    def _default_api_key(self) -> str:
        return self.settings.EBAY_ACCESS_TOKEN

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _params(self, term: str, options: SearchOptions) -> dict[str, str]:
        return {
            "q": term,
            "limit": str(options.limit),
            "offset": "0",
            "category_ids": self.FASHION_CATEGORY_ID,
            "filter": "price:[1..],priceCurrency:USD",
        }

    def _prepare_item(self, item: dict[str, Any]) -> dict[str, Any]:
        cost = lookup(item, "shippingOptions.0.shippingCost.value")
        shipping = f"${cost} shipping" if cost else "See details"
        return {**item, "shipping": shipping}

# src/filters/normalizer.py

"""Map raw source payloads onto the canonical ProductRecord schema."""

import logging
import math
import re
from dataclasses import dataclass
from typing import Any

from src.models.product import ProductRecord

logger = logging.getLogger("storefront_search.filters")

_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")
_COUNT_RE = re.compile(r"\d[\d,]*")


@dataclass(frozen=True)
class FieldMap:
    """Candidate raw keys for each canonical field.

    Keys may be dotted paths into nested payloads (``price.value``,
    ``images.0.url``).  The first candidate holding a non-empty value
    wins.
    """

    id: tuple[str, ...] = ("id",)
    title: tuple[str, ...] = ("title", "name")
    price: tuple[str, ...] = ("price",)
    original_price: tuple[str, ...] = ()
    category: tuple[str, ...] = ("category",)
    brand: tuple[str, ...] = ("brand",)
    description: tuple[str, ...] = ("description",)
    rating: tuple[str, ...] = ("rating",)
    review_count: tuple[str, ...] = ("reviews", "review_count")
    availability: tuple[str, ...] = ("availability",)
    shipping: tuple[str, ...] = ("shipping",)
    image_url: tuple[str, ...] = ("image", "image_url")
    url: tuple[str, ...] = ("url",)
    price_divisor: float = 1.0
    url_template: str = ""
    default_category: str = ""


def lookup(item: Any, path: str) -> Any:
    """Resolve a dotted path in nested dicts and lists, or ``None``."""
    current = item
    for part in path.split("."):
        if isinstance(current, dict):
            current = current.get(part)
        elif isinstance(current, list) and part.isdigit():
            idx = int(part)
            current = current[idx] if idx < len(current) else None
        else:
            return None
        if current is None:
            return None
    return current


def _first(item: dict[str, Any], paths: tuple[str, ...]) -> Any:
    for path in paths:
        value = lookup(item, path)
        if value not in (None, "", [], {}):
            return value
    return None


def _text(item: dict[str, Any], paths: tuple[str, ...], default: str = "") -> str:
    value = _first(item, paths)
    if value is None or isinstance(value, (dict, list)):
        return default
    return str(value).strip()


class ProductNormalizer:
    """Per-source conversion of raw items into canonical records."""

    @staticmethod
    def parse_price(value: Any) -> float | None:
        """Coerce a price to float, or ``None`` if unusable.

        Strips currency symbols and thousands separators
        (``"$1,299.00"`` → ``1299.0``).  Negative, non-finite and
        non-numeric values yield ``None``.
        """
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            price = float(value)
        else:
            match = _NUMBER_RE.search(str(value).replace(",", ""))
            if not match:
                return None
            price = float(match.group())
        if not math.isfinite(price) or price < 0:
            return None
        return price

    @staticmethod
    def parse_rating(value: Any) -> float | None:
        """Extract a numeric rating (``"4.5 out of 5 stars"`` → 4.5)."""
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return float(value)
        match = _NUMBER_RE.search(str(value))
        return float(match.group()) if match else None

    @staticmethod
    def parse_count(value: Any) -> int | None:
        """Extract an integer count (``"1,234 ratings"`` → 1234)."""
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            return int(value)
        match = _COUNT_RE.search(str(value))
        return int(match.group().replace(",", "")) if match else None

    @staticmethod
    def _build_url(item: dict[str, Any], field_map: FieldMap) -> str:
        url = _text(item, field_map.url)
        if url or not field_map.url_template:
            return url
        try:
            return field_map.url_template.format(**item)
        except (KeyError, IndexError, AttributeError):
            return ""

    @staticmethod
    def normalize_item(
        source_id: str,
        item: dict[str, Any],
        field_map: FieldMap,
        index: int = 0,
    ) -> ProductRecord | None:
        """Convert one raw item; ``None`` when it cannot be made valid."""
        title = _text(item, field_map.title)
        price = ProductNormalizer.parse_price(
            _first(item, field_map.price)
        )
        if not title or price is None or price <= 0:
            return None
        price = round(price / field_map.price_divisor, 2)

        original_price = ProductNormalizer.parse_price(
            _first(item, field_map.original_price)
        )
        if original_price is not None:
            original_price = round(
                original_price / field_map.price_divisor, 2
            )

        raw_id = _text(item, field_map.id)
        try:
            return ProductRecord(
                id=raw_id or f"{source_id}-{index}",
                title=title,
                price=price,
                source=source_id,
                category=_text(
                    item, field_map.category, field_map.default_category
                ),
                brand=_text(item, field_map.brand),
                description=_text(item, field_map.description),
                original_price=original_price,
                rating=ProductNormalizer.parse_rating(
                    _first(item, field_map.rating)
                ),
                review_count=ProductNormalizer.parse_count(
                    _first(item, field_map.review_count)
                ),
                availability=_text(
                    item, field_map.availability, "Available"
                ),
                shipping=_text(
                    item, field_map.shipping, "Standard shipping"
                ),
                image_url=_text(item, field_map.image_url),
                url=ProductNormalizer._build_url(item, field_map),
            )
        except ValueError as exc:
            logger.debug(
                "Rejected %s item '%s': %s", source_id, title, exc
            )
            return None

    @staticmethod
    def normalize(
        source_id: str,
        items: list[Any],
        field_map: FieldMap,
    ) -> tuple[list[ProductRecord], int]:
        """Normalize a batch of raw items, dropping unusable ones.

        Returns the canonical records and the count of dropped items.
        """
        records: list[ProductRecord] = []
        dropped = 0

        for index, item in enumerate(items):
            record = (
                ProductNormalizer.normalize_item(
                    source_id, item, field_map, index
                )
                if isinstance(item, dict)
                else None
            )
            if record is None:
                dropped += 1
                continue
            records.append(record)

        if dropped:
            logger.info(
                "Normalizer dropped %d invalid %s items",
                dropped,
                source_id,
            )

        return records, dropped

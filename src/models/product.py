# src/models/product.py

"""Canonical product record shared by every source."""

from dataclasses import asdict, dataclass, replace
from typing import Any


@dataclass(frozen=True)
class ProductRecord:
    """A single product listing from any source, in canonical form.

    Instances are immutable; scoring produces a copy through
    :meth:`with_relevance`.
    """

    id: str
    title: str
    price: float
    source: str
    category: str = ""
    brand: str = ""
    description: str = ""
    original_price: float | None = None
    rating: float | None = None
    review_count: int | None = None
    availability: str = "Available"
    shipping: str = "Standard shipping"
    image_url: str = ""
    url: str = ""
    relevance: float = 0.0

    def __post_init__(self) -> None:
        if not self.title.strip():
            msg = "title must not be empty"
            raise ValueError(msg)
        if self.price < 0:
            msg = f"price must be >= 0, got {self.price}"
            raise ValueError(msg)
        if self.rating is not None and not 0 <= self.rating <= 5:
            msg = f"rating must be within [0, 5], got {self.rating}"
            raise ValueError(msg)

    def with_relevance(self, score: float) -> "ProductRecord":
        """Return a copy carrying the given relevance score."""
        return replace(self, relevance=score)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a plain dict for JSON output."""
        return asdict(self)

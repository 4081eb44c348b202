# src/models/search.py

"""Query, per-source outcome and result containers."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from src.config.settings import Settings
from src.models.product import ProductRecord

logger = logging.getLogger("storefront_search.models")


@dataclass(frozen=True)
class SearchOptions:
    """Filters and presentation options for a search."""

    min_price: float | None = None
    max_price: float | None = None
    category: str | None = None
    sort_by: str = "relevance"
    limit: int = Settings.DEFAULT_RESULT_LIMIT

    @classmethod
    def create(
        cls,
        min_price: float | None = None,
        max_price: float | None = None,
        category: str | None = None,
        sort_by: str | None = None,
        limit: int | None = None,
    ) -> "SearchOptions":
        """Build options from loosely-typed caller input.

        Unknown sort strategies fall back to ``relevance``; the limit
        is clamped to ``[1, MAX_RESULT_LIMIT]``; a blank or ``all``
        category means no category filter.
        """
        strategy = (sort_by or "relevance").strip().lower()
        if strategy not in Settings.SORT_STRATEGIES:
            logger.warning(
                "Unknown sort strategy '%s', using relevance",
                sort_by,
            )
            strategy = "relevance"

        if limit is None or limit <= 0:
            limit = Settings.DEFAULT_RESULT_LIMIT
        limit = min(limit, Settings.MAX_RESULT_LIMIT)

        cat = (category or "").strip().lower()
        if cat in ("", "all"):
            cat = ""

        return cls(
            min_price=min_price,
            max_price=max_price,
            category=cat or None,
            sort_by=strategy,
            limit=limit,
        )

    def signature(self) -> str:
        """Stable string identifying the filter state."""
        return (
            f"min={self.min_price}|max={self.max_price}"
            f"|cat={self.category or ''}"
            f"|sort={self.sort_by}|limit={self.limit}"
        )


def normalize_term(term: str) -> str:
    """Lower-case, trim and collapse inner whitespace."""
    return " ".join(term.lower().split())


@dataclass(frozen=True)
class SearchQuery:
    """A normalized query bound to its options and session generation."""

    term: str
    options: SearchOptions = field(default_factory=SearchOptions)
    generation: int = 0

    @classmethod
    def create(
        cls,
        raw_term: str,
        options: SearchOptions | None = None,
        generation: int = 0,
    ) -> "SearchQuery":
        return cls(
            term=normalize_term(raw_term),
            options=options or SearchOptions(),
            generation=generation,
        )

    @property
    def terms(self) -> list[str]:
        """Individual terms long enough to be scored."""
        return [
            t
            for t in self.term.split()
            if len(t) >= Settings.MIN_TERM_LENGTH
        ]

    @property
    def is_valid(self) -> bool:
        return len(self.term) >= Settings.MIN_QUERY_LENGTH


@dataclass
class SourceOutcome:
    """Result of one adapter call: records on success, a reason on failure."""

    source_id: str
    products: list[ProductRecord] = field(
        default_factory=lambda: list[ProductRecord]()
    )
    error: str | None = None
    elapsed_ms: float = 0.0
    is_local: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class SearchResult:
    """Ranked, deduplicated products plus aggregation metadata."""

    query: str
    products: tuple[ProductRecord, ...] = ()
    total_count: int = 0
    elapsed_ms: float = 0.0
    sources: tuple[str, ...] = ()
    errors: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({})
    )
    suggestions: tuple[str, ...] = ()
    partial: bool = False

    def __post_init__(self) -> None:
        # Cached results are shared between callers
        object.__setattr__(
            self, "errors", MappingProxyType(dict(self.errors))
        )

    @property
    def is_empty(self) -> bool:
        return not self.products

    def to_dict(self) -> dict[str, Any]:
        """Serialise to plain structures for JSON output."""
        return {
            "query": self.query,
            "products": [p.to_dict() for p in self.products],
            "total_count": self.total_count,
            "elapsed_ms": round(self.elapsed_ms, 2),
            "sources": list(self.sources),
            "errors": dict(self.errors),
            "suggestions": list(self.suggestions),
            "partial": self.partial,
        }

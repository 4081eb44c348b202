# src/services/ranker.py

"""Merge per-source outcomes into one ranked SearchResult."""

import logging
from collections.abc import Callable

from src.filters.deduplicator import ProductDeduplicator
from src.filters.product_filter import ProductFilter
from src.filters.relevance import RelevanceScorer
from src.filters.suggestions import SuggestionProvider
from src.models.product import ProductRecord
from src.models.search import SearchQuery, SearchResult, SourceOutcome

logger = logging.getLogger("storefront_search.ranker")

# Missing values sort after every real value
_MISSING = float("inf")


class ResultMerger:
    """Filter, deduplicate, score, sort and truncate source records.

    ``source_rank`` maps a source id to its registration index; it
    breaks relevance ties after the local-first rule.
    """

    def __init__(
        self,
        source_rank: Callable[[str], int] | None = None,
        suggestions: SuggestionProvider | None = None,
    ) -> None:
        self._source_rank = source_rank or (lambda _sid: 0)
        self.suggestions = suggestions or SuggestionProvider()

    def _sort(
        self,
        records: list[ProductRecord],
        strategy: str,
        local_ids: set[str],
    ) -> list[ProductRecord]:
        if strategy == "price_low":
            return sorted(records, key=lambda r: r.price)
        if strategy == "price_high":
            return sorted(records, key=lambda r: -r.price)
        if strategy == "rating":
            return sorted(
                records,
                key=lambda r: -r.rating if r.rating is not None else _MISSING,
            )
        if strategy == "reviews":
            return sorted(
                records,
                key=lambda r: (
                    -r.review_count if r.review_count is not None else _MISSING
                ),
            )
        return sorted(
            records,
            key=lambda r: (
                -r.relevance,
                0 if r.source in local_ids else 1,
                self._source_rank(r.source),
            ),
        )

    def merge(
        self,
        query: SearchQuery,
        local_outcome: SourceOutcome | None,
        remote_outcomes: list[SourceOutcome],
        elapsed_ms: float = 0.0,
    ) -> SearchResult:
        """Combine outcomes into a ranked result.

        Local records are concatenated first so they win duplicates
        and relevance ties.  Identical inputs always produce an
        identical result.
        """
        outcomes = (
            [local_outcome, *remote_outcomes]
            if local_outcome is not None
            else list(remote_outcomes)
        )
        local_ids = {o.source_id for o in outcomes if o.is_local}

        combined: list[ProductRecord] = []
        errors: dict[str, str] = {}
        for outcome in outcomes:
            if not outcome.ok:
                errors[outcome.source_id] = outcome.error or "error"
                continue
            kept, _excluded = ProductFilter.filter_by_options(
                outcome.products, query.options
            )
            combined.extend(kept)

        unique, _removed = ProductDeduplicator.deduplicate(combined)
        scored, _unmatched = RelevanceScorer.score_all(query, unique)
        ranked = self._sort(scored, query.options.sort_by, local_ids)
        page = ranked[: query.options.limit]

        contributing = {r.source for r in page}
        sources = tuple(
            o.source_id for o in outcomes if o.source_id in contributing
        )
        suggestions = (
            tuple(self.suggestions.suggest(query.term)) if not page else ()
        )

        logger.info(
            "Merged '%s': %d combined, %d unique, %d matched, %d returned",
            query.term,
            len(combined),
            len(unique),
            len(scored),
            len(page),
        )

        return SearchResult(
            query=query.term,
            products=tuple(page),
            total_count=len(ranked),
            elapsed_ms=elapsed_ms,
            sources=sources,
            errors=errors,
            suggestions=suggestions,
            partial=bool(errors),
        )
